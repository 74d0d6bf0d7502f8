import enum

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import relationship

from storefront.shared.config.database import Base
from storefront.services.catalog_service.models import new_id, utcnow


class OrderStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class Order(Base):
    __tablename__ = "orders"
    __table_args__ = (
        CheckConstraint("total_amount >= 0", name="ck_orders_total_non_negative"),
    )

    id = Column(String(36), primary_key=True, default=new_id)
    client_name = Column(String(255), nullable=False)
    client_phone = Column(String(64), nullable=False)
    client_address = Column(String(1024), nullable=False)
    total_amount = Column(Numeric(10, 2), nullable=False)  # calculated at creation
    status = Column(String(32), nullable=False, default=OrderStatus.PENDING.value)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    # Items are always loaded with their order; deletes are left to the database FK
    order_items = relationship(
        "OrderItem",
        back_populates="order",
        lazy="selectin",
        passive_deletes="all",
        order_by="OrderItem.position",
    )

    def __repr__(self):
        return f"<Order(id={self.id}, total_amount='{self.total_amount}')>"


class OrderItem(Base):
    __tablename__ = "order_items"
    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_order_items_quantity_positive"),
        CheckConstraint("price_at_time >= 0", name="ck_order_items_price_non_negative"),
    )

    id = Column(String(36), primary_key=True, default=new_id)
    order_id = Column(String(36), ForeignKey("orders.id"), nullable=False, index=True)
    product_id = Column(String(36), ForeignKey("products.id"), nullable=False, index=True)
    quantity = Column(Integer, nullable=False)
    price_at_time = Column(Numeric(10, 2), nullable=False)  # price snapshot, never recomputed
    position = Column(Integer, nullable=False, default=0)

    order = relationship("Order", back_populates="order_items")

    def __repr__(self):
        return f"<OrderItem(id={self.id}, product_id={self.product_id}, quantity={self.quantity})>"
