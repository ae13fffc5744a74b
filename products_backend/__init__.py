"""
Products backend package.

A small FastAPI service that relays sign-up/sign-in and a ``products``
CRUD resource to Supabase, falling back to an in-memory store when no
Supabase credentials are configured.
"""
