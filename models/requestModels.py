from core.extensions import db
from core.imports import datetime

REQUEST_STATUSES = ("open", "in-progress", "fulfilled", "closed")
ITEM_GENDERS = ("men", "women", "children", "unisex")
ITEM_URGENCIES = ("low", "medium", "high", "critical")


class Request(db.Model):
    __tablename__ = "requests"

    id = db.Column(db.Integer, primary_key=True)
    requester_id = db.Column(db.Integer, db.ForeignKey("profiles.id"), nullable=False, index=True)
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=False)
    status = db.Column(db.String(20), nullable=False, default="open")
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    items = db.relationship("RequestItem", backref="request", cascade="all, delete-orphan")
    requester = db.relationship("Profile", backref="requests")

    __table_args__ = (
        db.CheckConstraint(
            "status IN ('open','in-progress','fulfilled','closed')",
            name="ck_request_status"),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "requester_id": self.requester_id,
            "title": self.title,
            "description": self.description,
            "status": self.status,
            "items": [item.to_dict() for item in self.items],
            "profiles": {"name": (self.requester.name if self.requester else None) or "Unknown"},
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


class RequestItem(db.Model):
    __tablename__ = "request_items"

    id = db.Column(db.Integer, primary_key=True)
    request_id = db.Column(db.Integer, db.ForeignKey("requests.id"), nullable=False, index=True)
    category_id = db.Column(db.Integer, db.ForeignKey("categories.id"), nullable=True)
    quantity = db.Column(db.Integer, nullable=False, default=1)
    gender = db.Column(db.String(20), nullable=False, default="unisex")
    urgency = db.Column(db.String(20), nullable=False, default="medium")
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    category = db.relationship("Category")

    __table_args__ = (
        db.CheckConstraint("quantity > 0", name="ck_request_item_quantity"),
        db.CheckConstraint(
            "urgency IN ('low','medium','high','critical')",
            name="ck_request_item_urgency"),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "request_id": self.request_id,
            "category_id": self.category_id,
            "category": self.category.name if self.category else None,
            "quantity": self.quantity,
            "gender": self.gender,
            "urgency": self.urgency,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
