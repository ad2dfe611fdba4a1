from core.imports import Blueprint, jsonify, request
from core.catalog import filter_and_sort_products, highest_price, SORT_MODES
from core.errors import not_found
from core.extensions import db
from models.productModels import Category, Products

marketplace_bp = Blueprint('marketplace', __name__)

CATEGORY_NAMES = ["Men", "Women", "Kids", "Accessories", "Footwear", "Winter Wear"]


def seed_categories():
    created = []
    for name in CATEGORY_NAMES:
        if not Category.query.filter_by(name=name).first():
            db.session.add(Category(name=name))
            created.append(name)
    db.session.commit()
    if created:
        print(f"✅ Categories created: {', '.join(created)}")
    else:
        print("ℹ️ Categories already exist.")


def _float_arg(name):
    value = request.args.get(name)
    if value in (None, ""):
        return None
    try:
        return float(value)
    except ValueError:
        return None


@marketplace_bp.route('/api/categories', methods=['GET'])
def list_categories():
    categories = Category.query.order_by(Category.name).all()
    return jsonify({"categories": [c.to_dict() for c in categories]}), 200


@marketplace_bp.route('/api/marketplace/products', methods=['GET'])
def list_products():
    """
    Shop listing with category, price range and sort filters
    ---
    tags:
      - Marketplace
    parameters:
      - name: category
        in: query
        type: array
        items:
          type: integer
        collectionFormat: multi
        description: Category ids, repeat for multi-select
      - name: min_price
        in: query
        type: number
      - name: max_price
        in: query
        type: number
      - name: sort
        in: query
        type: string
        enum: [featured, price-asc, price-desc, newest, rating]
    responses:
      200:
        description: Filtered products
        schema:
          type: object
          properties:
            products:
              type: array
              items:
                type: object
            count:
              type: integer
            max_price:
              type: number
    """
    category_ids = request.args.getlist('category', type=int)
    sort = request.args.get('sort', 'featured')
    if sort not in SORT_MODES:
        sort = 'featured'

    # whole catalog in one query, filters run in process
    products = Products.query.order_by(Products.id).all()

    results = filter_and_sort_products(
        products,
        category_ids=category_ids,
        min_price=_float_arg('min_price'),
        max_price=_float_arg('max_price'),
        sort=sort,
    )

    return jsonify({
        "products": [p.to_dict() for p in results],
        "count": len(results),
        "max_price": highest_price(products),
    }), 200


@marketplace_bp.route('/api/marketplace/products/<int:product_id>', methods=['GET'])
def product_details(product_id):
    product = db.session.get(Products, product_id)
    if not product:
        raise not_found("Product")
    return jsonify(product.to_dict()), 200
