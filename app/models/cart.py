from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Integer, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base


class CartItem(Base):
    __tablename__ = "cart_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # RESTRICT: an item cannot be deleted while it sits in a cart
    item_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("items.id", ondelete="RESTRICT"),
        nullable=False,
    )

    # A quantity of 0 means "remove", so it is never stored
    quantity: Mapped[int] = mapped_column(
        Integer, CheckConstraint("quantity > 0", name="check_cart_quantity"), nullable=False
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    # Relationships
    user = relationship("User", back_populates="cart_items")
    item = relationship("Item")

    # Ensure a user only has one row per item
    __table_args__ = (
        UniqueConstraint("user_id", "item_id", name="uq_user_item_cart"),
    )
