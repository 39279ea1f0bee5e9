from .inventory import Product, Purchase
from .sales import Sale
from .auth import User, SessionToken

__all__ = [
    'Product', 'Purchase',
    'Sale',
    'User', 'SessionToken',
]
