import sys

from products_backend.server import main

sys.exit(main())
