from core.imports import Blueprint, jsonify, current_app
from core.extensions import db
from core.errors import APIError, json_body
from core.security import role_required, current_profile
from models.productModels import Category, Products
from models.userModel import Profile
from models.orderModels import Order, OrderItem

seller_bp = Blueprint('seller', __name__)

SAMPLE_PRODUCTS = [
    {
        "name": "Classic White T-Shirt",
        "description": "A comfortable and versatile white t-shirt made from 100% organic cotton.",
        "price": 799,
        "discounted_price": 599,
        "category": "Men",
        "featured": True,
        "rating": 4.5,
        "reviews": 120,
        "images": ["https://images.unsplash.com/photo-1521572163474-6864f9cf17ab?w=500"],
    },
    {
        "name": "Blue Denim Jeans",
        "description": "Classic blue jeans with a comfortable fit and durable construction.",
        "price": 1499,
        "discounted_price": None,
        "category": "Men",
        "featured": False,
        "rating": 4.2,
        "reviews": 85,
        "images": ["https://images.unsplash.com/photo-1582418702059-97ebafb35d09?w=500"],
    },
    {
        "name": "Summer Floral Dress",
        "description": "A light and airy floral dress perfect for summer occasions.",
        "price": 1999,
        "discounted_price": 1499,
        "category": "Women",
        "featured": True,
        "rating": 4.8,
        "reviews": 65,
        "images": ["https://images.unsplash.com/photo-1572804013309-59a88b7e92f1?w=500"],
    },
    {
        "name": "Wool Winter Coat",
        "description": "A warm wool coat that will keep you comfortable all winter long.",
        "price": 3999,
        "discounted_price": None,
        "category": "Winter Wear",
        "featured": False,
        "rating": 4.6,
        "reviews": 42,
        "images": ["https://images.unsplash.com/photo-1539533018447-63fcce2678e3?w=500"],
    },
]


def seed_products():
    seller = Profile.query.filter_by(email="seller@example.com").first()
    if not seller:
        print("❌ No demo seller found. Run seed_demo_accounts() first.")
        return

    for prod in SAMPLE_PRODUCTS:
        if Products.query.filter_by(name=prod["name"]).first():
            print(f"ℹ️ Product already exists: {prod['name']}")
            continue
        category = Category.query.filter_by(name=prod["category"]).first()
        if not category:
            print(f"⚠️ Category {prod['category']} not found. Run seed_categories() first.")
            continue
        db.session.add(Products(
            seller_id=seller.id,
            name=prod["name"],
            description=prod["description"],
            price=prod["price"],
            discounted_price=prod["discounted_price"],
            category_id=category.id,
            featured=prod["featured"],
            rating=prod["rating"],
            reviews=prod["reviews"],
            images=prod["images"],
        ))
        print(f"✅ Product added: {prod['name']}")
    db.session.commit()


def _price(value, field):
    if value in (None, ""):
        return None
    try:
        price = float(value)
    except (TypeError, ValueError):
        raise APIError(f"'{field}' must be a number", 400)
    if price < 0:
        raise APIError(f"'{field}' must not be negative", 400)
    return price


def _category(category_id):
    category = db.session.get(Category, category_id) if category_id else None
    if not category:
        raise APIError("Category not found", 400)
    return category


def _image_list(value, field):
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(url, str) and url for url in value):
        raise APIError(f"The '{field}' field must be a list of URLs", 400)
    return value


def _owned_product(product_id, seller):
    product = db.session.get(Products, product_id)
    if not product:
        raise APIError("Product not found", 404)
    if product.seller_id != seller.id:
        raise APIError("Unauthorized: You do not own this product.", 403)
    return product


@seller_bp.route('/api/seller/products', methods=['GET'])
@role_required("seller")
def get_my_products():
    seller = current_profile()

    products = Products.query.filter_by(seller_id=seller.id).order_by(Products.date_added.desc(), Products.id.desc()).all()

    return jsonify({
        "products": [p.to_dict() for p in products],
        "count": len(products)
    }), 200


@seller_bp.route('/api/seller/products', methods=['POST'])
@role_required("seller")
def add_product():
    """
    Create a product owned by the logged-in seller
    ---
    tags:
      - Seller
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      - name: body
        in: body
        required: true
        schema:
          type: object
          required:
            - name
            - description
            - price
            - category_id
            - images
          properties:
            name:
              type: string
              example: "Classic White T-Shirt"
            description:
              type: string
            price:
              type: number
              example: 799
            discounted_price:
              type: number
              example: 599
            category_id:
              type: integer
            in_stock:
              type: boolean
            featured:
              type: boolean
            images:
              type: array
              items:
                type: string
    responses:
      201:
        description: Product added successfully
      400:
        description: Validation failed
    """
    seller = current_profile()
    data = json_body()

    name = str(data.get('name') or '').strip()
    description = data.get('description')
    price = _price(data.get('price'), 'price')
    discounted_price = _price(data.get('discounted_price'), 'discounted_price')
    images = _image_list(data.get('images'), 'images')

    if not all([name, description]) or price is None or not data.get('category_id'):
        return jsonify({"message": "Missing required fields"}), 400

    if discounted_price and discounted_price >= price:
        return jsonify({"message": "Discounted price must be lower than regular price"}), 400

    if not images:
        return jsonify({"message": "Please upload at least one product image"}), 400

    category = _category(data.get('category_id'))

    try:
        product = Products(
            seller_id=seller.id,
            name=name,
            description=description,
            price=price,
            discounted_price=discounted_price,
            category_id=category.id,
            in_stock=bool(data.get('in_stock', True)),
            featured=bool(data.get('featured', False)),
            images=images,
        )
    except ValueError as e:
        return jsonify({"message": str(e)}), 400

    db.session.add(product)
    db.session.commit()
    current_app.logger.info("Seller %s added product %s", seller.id, product.id)

    return jsonify({
        "message": "Product added successfully",
        "product": product.to_dict()
    }), 201


@seller_bp.route('/api/seller/products/<int:product_id>', methods=['PUT'])
@role_required("seller")
def edit_product(product_id):
    seller = current_profile()
    product = _owned_product(product_id, seller)
    data = json_body()

    price = _price(data['price'], 'price') if 'price' in data else product.price
    if 'discounted_price' in data:
        discounted_price = _price(data['discounted_price'], 'discounted_price')
    else:
        discounted_price = product.discounted_price

    if price is None:
        return jsonify({"message": "'price' is required"}), 400
    if discounted_price and discounted_price >= price:
        return jsonify({"message": "Discounted price must be lower than regular price"}), 400

    if 'name' in data:
        if not str(data['name']).strip():
            return jsonify({"message": "'name' must not be empty"}), 400
        product.name = str(data['name']).strip()
    if 'description' in data:
        product.description = str(data['description'])
    if 'in_stock' in data:
        product.in_stock = bool(data['in_stock'])
    if 'featured' in data:
        product.featured = bool(data['featured'])
    if 'category_id' in data:
        product.category_id = _category(data['category_id']).id

    # clear the discount first so the price validator sees the new pair
    product.discounted_price = None
    product.price = price
    product.discounted_price = discounted_price

    new_images = _image_list(data.get('new_images'), 'new_images')
    if new_images:
        product.images = list(product.images or []) + new_images

    db.session.commit()

    return jsonify({"message": "Product updated successfully", "product": product.to_dict()}), 200


@seller_bp.route('/api/seller/products/<int:product_id>', methods=['DELETE'])
@role_required("seller")
def delete_product(product_id):
    seller = current_profile()
    product = _owned_product(product_id, seller)

    db.session.delete(product)
    db.session.commit()

    return jsonify({"message": f"Product '{product.name}' has been deleted."}), 200


@seller_bp.route('/api/seller/orders', methods=['GET'])
@role_required("seller")
def get_seller_orders():
    seller = current_profile()

    # order items for this seller's products
    order_items = (
        OrderItem.query
        .join(Products, OrderItem.product_id == Products.id)
        .join(Order, OrderItem.order_id == Order.id)
        .filter(Products.seller_id == seller.id)
        .order_by(Order.created_at.desc(), Order.id.desc())
        .all()
    )

    # group items by order
    orders_map = {}
    for item in order_items:
        order = item.order
        if order.id not in orders_map:
            orders_map[order.id] = {
                "order_id": order.id,
                "user_id": order.user_id,
                "status": order.status,
                "shipping_address": order.shipping_address,
                "created_at": order.created_at.strftime("%Y-%m-%d %H:%M"),
                "items": []
            }
        orders_map[order.id]["items"].append({
            "product_id": item.product_id,
            "product_name": item.product.name if item.product else None,
            "quantity": item.quantity,
            "price": item.price
        })

    return jsonify({"orders": list(orders_map.values())}), 200
