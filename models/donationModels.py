from core.extensions import db
from core.imports import datetime

DONATION_STATUSES = ("pending", "accepted", "completed", "rejected")


class Donation(db.Model):
    __tablename__ = "donations"

    id = db.Column(db.Integer, primary_key=True)
    donor_id = db.Column(db.Integer, db.ForeignKey("profiles.id"), nullable=False, index=True)
    ngo_id = db.Column(db.Integer, db.ForeignKey("profiles.id"), nullable=True, index=True)
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=False)
    category_id = db.Column(db.Integer, db.ForeignKey("categories.id"), nullable=True)
    condition = db.Column(db.String(50), nullable=False)
    gender = db.Column(db.String(20), nullable=True)
    size = db.Column(db.String(20), nullable=True)
    location = db.Column(db.String(255), nullable=True)
    images = db.Column(db.JSON, nullable=False, default=list)
    status = db.Column(db.String(20), nullable=False, default="pending")
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    category = db.relationship("Category")
    donor = db.relationship("Profile", foreign_keys=[donor_id], backref="donations")
    ngo = db.relationship("Profile", foreign_keys=[ngo_id])

    __table_args__ = (
        db.CheckConstraint(
            "status IN ('pending','accepted','completed','rejected')",
            name="ck_donation_status"),
    )

    def to_dict(self):
        if self.donor:
            donor = {"name": self.donor.name, "avatar_url": self.donor.avatar_url}
        else:
            donor = {"name": "Unknown", "avatar_url": None}

        return {
            "id": self.id,
            "donor_id": self.donor_id,
            "ngo_id": self.ngo_id,
            "title": self.title,
            "description": self.description,
            "category_id": self.category_id,
            "categories": {"name": self.category.name} if self.category else None,
            "condition": self.condition,
            "gender": self.gender,
            "size": self.size,
            "location": self.location,
            "images": self.images or [],
            "status": self.status,
            "profiles": donor,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
