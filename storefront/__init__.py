"""
                Restaurant Storefront

Menu storefront with WhatsApp checkout and an administrative back office.
The server half is a FastAPI application; the client half (cart, checkout
message, list reordering) lives in ``storefront.client``.

Version: 1.0.0
License: MIT
"""

__version__ = "1.0.0"
