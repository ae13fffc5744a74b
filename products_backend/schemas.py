"""
Pydantic request schemas for the products backend.
"""

from __future__ import annotations

from typing import Optional, Union

from pydantic import BaseModel, StrictInt, confloat

# Integers are kept as sent; floats must be finite so responses stay valid JSON.
Price = Union[StrictInt, confloat(allow_inf_nan=False)]


class Credentials(BaseModel):
    email: str
    password: str


class ProductCreate(BaseModel):
    name: str
    price: Price


class ProductUpdate(BaseModel):
    name: Optional[str] = None
    price: Optional[Price] = None

    def as_patch(self) -> dict:
        """Only the fields present in the request body."""
        return self.model_dump(exclude_unset=True)


class HealthResponse(BaseModel):
    status: str
    mode: str
