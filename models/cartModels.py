from core.extensions import db
from core.imports import datetime


class CartSnapshot(db.Model):
    """Serialized cart contents stored under a client cart key."""
    __tablename__ = "cart_snapshots"

    id = db.Column(db.Integer, primary_key=True)
    storage_key = db.Column(db.String(120), unique=True, nullable=False, index=True)
    items = db.Column(db.Text, nullable=False, default="[]")  # JSON array of cart items
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
