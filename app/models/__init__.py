# app/models/__init__.py
from .user import User
from .item import Item
from .sale import Sale, SaleItem
