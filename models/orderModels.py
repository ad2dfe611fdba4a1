from core.extensions import db
from core.imports import datetime

ORDER_STATUSES = ("pending", "shipped", "delivered", "cancelled")


class Order(db.Model):
    __tablename__ = "orders"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("profiles.id"), nullable=False, index=True)
    total_price = db.Column(db.Float, nullable=False)
    shipping_address = db.Column(db.JSON, nullable=False)
    payment_method = db.Column(db.String(50), nullable=True)
    status = db.Column(db.String(50), nullable=False, default="pending")
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    order_items = db.relationship("OrderItem", backref="order", cascade="all, delete-orphan")
    user = db.relationship("Profile", backref="orders")

    __table_args__ = (
        db.CheckConstraint(
            "status IN (" + ",".join(f"'{s}'" for s in ORDER_STATUSES) + ")",
            name="ck_order_status"),
    )


class OrderItem(db.Model):
    __tablename__ = "order_items"

    id = db.Column(db.Integer, primary_key=True)
    order_id = db.Column(db.Integer, db.ForeignKey("orders.id"), nullable=False)
    product_id = db.Column(db.Integer, db.ForeignKey("products.id", ondelete="SET NULL"), nullable=True)
    quantity = db.Column(db.Integer, nullable=False, default=1)
    price = db.Column(db.Float, nullable=False)  # unit price at purchase time
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    product = db.relationship("Products")

    __table_args__ = (
        db.CheckConstraint("quantity > 0", name="ck_order_item_quantity"),
    )
