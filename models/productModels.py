from sqlalchemy.orm import validates
from core.extensions import db
from core.imports import datetime


class Category(db.Model):
    __tablename__ = "categories"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), unique=True, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {"id": self.id, "name": self.name}


class Products(db.Model):
    __tablename__ = "products"

    id = db.Column(db.Integer, primary_key=True)
    seller_id = db.Column(db.Integer, db.ForeignKey("profiles.id"), nullable=False, index=True)
    name = db.Column(db.String(150), nullable=False)
    description = db.Column(db.Text, nullable=False)
    price = db.Column(db.Float, nullable=False)
    discounted_price = db.Column(db.Float, nullable=True)
    in_stock = db.Column(db.Boolean, default=True, nullable=False)
    featured = db.Column(db.Boolean, default=False)
    rating = db.Column(db.Float, default=0)
    reviews = db.Column(db.Integer, default=0)
    images = db.Column(db.JSON, nullable=False, default=list)
    date_added = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    category_id = db.Column(db.Integer, db.ForeignKey("categories.id"), nullable=True)
    category = db.relationship("Category", backref="products")

    seller = db.relationship("Profile", backref="products")

    __table_args__ = (
        db.CheckConstraint("price >= 0", name="ck_product_price"),
        db.CheckConstraint(
            "discounted_price IS NULL OR discounted_price < price",
            name="ck_product_discount_below_price"),
    )

    @validates("discounted_price")
    def validate_discounted_price(self, key, value):
        if not value:
            return None
        if self.price is not None and value >= self.price:
            raise ValueError("Discounted price must be lower than regular price")
        return value

    @validates("price")
    def validate_price(self, key, value):
        if value is None or value < 0:
            raise ValueError("Price must be a non-negative number")
        if self.discounted_price is not None and self.discounted_price >= value:
            raise ValueError("Discounted price must be lower than regular price")
        return value

    @property
    def effective_price(self):
        return self.discounted_price if self.discounted_price else self.price

    def to_dict(self):
        return {
            "id": self.id,
            "seller_id": self.seller_id,
            "name": self.name,
            "description": self.description,
            "price": self.price,
            "discounted_price": self.discounted_price,
            "category_id": self.category_id,
            "category": self.category.name if self.category else None,
            "in_stock": self.in_stock,
            "featured": bool(self.featured),
            "rating": self.rating or 0,
            "reviews": self.reviews or 0,
            "images": self.images or [],
            "date_added": self.date_added.isoformat() if self.date_added else None,
        }
