from core.imports import Blueprint, jsonify, request, current_app
from core.cart import ShoppingCart, DatabaseCartStorage, cart_storage_key
from core.errors import APIError, json_body
from core.extensions import db
from models.productModels import Products

cart_bp = Blueprint("cart", __name__)

CART_HEADER = "X-Cart-Id"


def open_cart(cart_id=None):
    """Load the cart identified by the X-Cart-Id header."""
    cart_id = cart_id or request.headers.get(CART_HEADER)
    if not cart_id:
        raise APIError(f"Missing {CART_HEADER} header", 400)

    config = current_app.config
    return ShoppingCart(
        DatabaseCartStorage(db.session),
        cart_storage_key(cart_id),
        free_shipping_threshold=config["FREE_SHIPPING_THRESHOLD"],
        shipping_fee=config["SHIPPING_FEE"],
        tax_rate=config["TAX_RATE"],
    )


def _quantity(data, default=None):
    quantity = data.get("quantity", default)
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise APIError("Invalid quantity", 400)
    return quantity


@cart_bp.route('/api/cart', methods=['GET'])
def get_cart():
    """
    Get the cart for this client
    ---
    tags:
      - Cart
    parameters:
      - name: X-Cart-Id
        in: header
        description: Client generated cart id
        required: true
        type: string
    responses:
      200:
        description: Cart items with subtotal, shipping, tax and total
        schema:
          type: object
          properties:
            cart_items:
              type: array
              items:
                type: object
                properties:
                  id:
                    type: string
                  productId:
                    type: integer
                    example: 3
                  name:
                    type: string
                    example: "Summer Floral Dress"
                  price:
                    type: number
                    example: 1999
                  discountedPrice:
                    type: number
                    example: 1499
                  quantity:
                    type: integer
                    example: 1
                  image:
                    type: string
            count:
              type: integer
            subtotal:
              type: number
              example: 1499
            shipping:
              type: number
              example: 0
            tax:
              type: number
              example: 270
            total:
              type: number
              example: 1769
    """
    return jsonify(open_cart().to_dict()), 200


@cart_bp.route('/api/cart/add', methods=['POST'])
def add_to_cart():
    """
    Add a product to the cart, or bump its quantity if it is already there
    ---
    tags:
      - Cart
    consumes:
      - application/json
    parameters:
      - name: X-Cart-Id
        in: header
        required: true
        type: string
      - name: body
        in: body
        required: true
        schema:
          type: object
          required:
            - product_id
          properties:
            product_id:
              type: integer
              example: 10
            quantity:
              type: integer
              example: 2
    responses:
      201:
        description: Product added to cart
      400:
        description: Invalid quantity
      404:
        description: Product not found
    """
    data = json_body()
    quantity = _quantity(data, default=1)
    if quantity < 1:
        return jsonify({"message": "Invalid quantity"}), 400

    product = db.session.get(Products, data.get("product_id")) if data.get("product_id") else None
    if not product:
        return jsonify({"message": "Product not found"}), 404

    cart = open_cart()
    already_in_cart = product.id in cart
    new_quantity = cart.add(product, quantity)

    if already_in_cart:
        message = f"{product.name} quantity updated in cart"
    else:
        message = f"{product.name} added to cart"

    return jsonify(dict(cart.to_dict(), message=message, quantity=new_quantity)), 201


@cart_bp.route('/api/cart/update/<int:product_id>', methods=['PUT'])
def update_cart_item(product_id):
    """
    Set the quantity of a cart line. Quantities below 1 are ignored.
    ---
    tags:
      - Cart
    consumes:
      - application/json
    parameters:
      - name: X-Cart-Id
        in: header
        required: true
        type: string
      - name: product_id
        in: path
        type: integer
        required: true
      - name: body
        in: body
        required: true
        schema:
          type: object
          properties:
            quantity:
              type: integer
              example: 3
    responses:
      200:
        description: Current cart
    """
    data = json_body()
    quantity = _quantity(data)

    cart = open_cart()
    cart.update_quantity(product_id, quantity)

    return jsonify(cart.to_dict()), 200


@cart_bp.route('/api/cart/delete/<int:product_id>', methods=['DELETE'])
def delete_cart_item(product_id):
    cart = open_cart()
    removed = cart.remove(product_id)

    message = f"{removed['name']} removed from cart" if removed else "Item was not in cart"
    return jsonify(dict(cart.to_dict(), message=message)), 200


@cart_bp.route('/api/cart/clear', methods=['DELETE'])
def clear_cart():
    cart = open_cart()
    cart.clear()

    return jsonify(dict(cart.to_dict(), message="Cart cleared")), 200
