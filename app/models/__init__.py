from app.models.user import User
from app.models.item import Item
from app.models.cart import CartItem

__all__ = ["User", "Item", "CartItem"]
