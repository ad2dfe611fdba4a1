"""
Shopping cart state.

The cart is a plain ordered list of line items. Each line keeps a snapshot of
the product's name, price, discounted price and first image taken when it was
added; later catalog changes do not touch it. The whole list is written to the
storage on every mutation and read once when the cart is opened.
"""
import json
import math
import uuid

from core.extensions import db
from models.cartModels import CartSnapshot

CART_STORAGE_KEY = "cart"

FREE_SHIPPING_THRESHOLD = 1000
SHIPPING_FEE = 99
TAX_RATE = 0.18


def cart_storage_key(cart_id):
    return f"{CART_STORAGE_KEY}:{cart_id}"


def round_half_up(value):
    return int(math.floor(value + 0.5))


class InMemoryCartStorage:
    def __init__(self):
        self.data = {}

    def load(self, key):
        raw = self.data.get(key)
        return json.loads(raw) if raw else []

    def save(self, key, items):
        self.data[key] = json.dumps(items)


class DatabaseCartStorage:
    """Keeps the JSON-encoded cart in the cart_snapshots table."""

    def __init__(self, session=None):
        self.session = session or db.session

    def load(self, key):
        snapshot = self.session.query(CartSnapshot).filter_by(storage_key=key).first()
        if not snapshot or not snapshot.items:
            return []
        return json.loads(snapshot.items)

    def save(self, key, items):
        snapshot = self.session.query(CartSnapshot).filter_by(storage_key=key).first()
        if not snapshot:
            snapshot = CartSnapshot(storage_key=key)
            self.session.add(snapshot)
        snapshot.items = json.dumps(items)
        self.session.commit()


def _product_field(product, *names, default=None):
    for name in names:
        if isinstance(product, dict):
            if name in product:
                return product[name]
        elif hasattr(product, name):
            return getattr(product, name)
    return default


class ShoppingCart:

    def __init__(self, storage, key, free_shipping_threshold=FREE_SHIPPING_THRESHOLD,
                 shipping_fee=SHIPPING_FEE, tax_rate=TAX_RATE):
        self.storage = storage
        self.key = key
        self.free_shipping_threshold = free_shipping_threshold
        self.shipping_fee = shipping_fee
        self.tax_rate = tax_rate
        self.items = storage.load(key)

    def _save(self):
        self.storage.save(self.key, self.items)

    def _find(self, product_id):
        for item in self.items:
            if item["productId"] == product_id:
                return item
        return None

    def __contains__(self, product_id):
        return self._find(product_id) is not None

    def add(self, product, quantity=1):
        """Add a product and return the line's quantity after the change."""
        if quantity < 1:
            raise ValueError("Quantity must be at least 1")

        product_id = _product_field(product, "id")
        existing = self._find(product_id)
        if existing:
            existing["quantity"] += quantity
            self._save()
            return existing["quantity"]

        images = _product_field(product, "images", default=None) or []
        self.items.append({
            "id": uuid.uuid4().hex,
            "productId": product_id,
            "name": _product_field(product, "name"),
            "price": _product_field(product, "price"),
            "discountedPrice": _product_field(product, "discounted_price", "discountedPrice"),
            "quantity": quantity,
            "image": images[0] if images else None,
        })
        self._save()
        return quantity

    def update_quantity(self, product_id, quantity):
        if quantity < 1:
            return
        item = self._find(product_id)
        if item is None:
            return
        item["quantity"] = quantity
        self._save()

    def remove(self, product_id):
        removed = self._find(product_id)
        self.items = [item for item in self.items if item["productId"] != product_id]
        self._save()
        return removed

    def clear(self):
        self.items = []
        self._save()

    @staticmethod
    def unit_price(item):
        discounted = item.get("discountedPrice")
        return discounted if discounted is not None else item["price"]

    @property
    def subtotal(self):
        return sum(self.unit_price(item) * item["quantity"] for item in self.items)

    @property
    def shipping(self):
        return 0 if self.subtotal > self.free_shipping_threshold else self.shipping_fee

    @property
    def tax(self):
        return round_half_up(self.subtotal * self.tax_rate)

    @property
    def total(self):
        return self.subtotal + self.shipping + self.tax

    @property
    def count(self):
        return sum(item["quantity"] for item in self.items)

    def is_empty(self):
        return not self.items

    def to_dict(self):
        return {
            "cart_items": list(self.items),
            "count": self.count,
            "subtotal": self.subtotal,
            "shipping": self.shipping,
            "tax": self.tax,
            "total": self.total,
        }
