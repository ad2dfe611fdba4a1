from core.imports import Blueprint, jwt_required, jsonify, current_app, SQLAlchemyError
from core.currency import format_rupees
from core.errors import APIError
from core.extensions import db
from core.security import current_profile
from models.orderModels import Order, OrderItem
from routes.cart import open_cart

orders_bp = Blueprint('orders', __name__)

PAYMENT_METHOD = "cash_on_delivery"
DEFAULT_COUNTRY = "India"


def shipping_address_for(profile):
    return {
        "name": profile.name or "",
        "address": profile.address or "",
        "city": "",
        "state": "",
        "zipCode": "",
        "country": DEFAULT_COUNTRY,
    }


def place_order(profile, cart):
    """Write the order and its items from the cart snapshot in one transaction."""
    if cart.is_empty():
        raise APIError("Your cart is empty", 400)

    order = Order(
        user_id=profile.id,
        total_price=cart.total,
        shipping_address=shipping_address_for(profile),
        payment_method=PAYMENT_METHOD,
        status="pending",
    )
    for item in cart.items:
        order.order_items.append(OrderItem(
            product_id=item["productId"],
            quantity=item["quantity"],
            price=cart.unit_price(item),
        ))

    db.session.add(order)
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("Checkout failed for user %s", profile.id)
        raise APIError("Failed to place order. Please try again.", 500)

    # the cart only goes away once the order is stored
    cart.clear()
    current_app.logger.info("Order %s placed by user %s", order.id, profile.id)
    return order


def order_to_dict(order):
    return {
        "id": order.id,
        "title": f"Order #{order.id}",
        "total_price": order.total_price,
        "formatted_total": format_rupees(order.total_price),
        "status": order.status,
        "payment_method": order.payment_method,
        "shipping_address": order.shipping_address,
        "date": order.created_at.strftime("%Y-%m-%d %H:%M"),
        "items": [
            {
                "product_id": item.product_id,
                "product_name": item.product.name if item.product else None,
                "quantity": item.quantity,
                "price": item.price,
            }
            for item in order.order_items
        ],
    }


@orders_bp.route('/api/orders/checkout', methods=['POST'])
@jwt_required()
def checkout():
    """
    Place an order from the client's cart
    ---
    tags:
      - Orders
    security:
      - Bearer: []
    parameters:
      - name: X-Cart-Id
        in: header
        required: true
        type: string
    responses:
      201:
        description: Order placed, cart cleared
        schema:
          type: object
          properties:
            message:
              type: string
              example: "Order placed successfully!"
            order_id:
              type: integer
              example: 10
            order:
              type: object
      400:
        description: Cart is empty
      401:
        description: Not logged in
      500:
        description: Order could not be stored, cart left untouched
    """
    profile = current_profile()
    cart = open_cart()

    order = place_order(profile, cart)

    return jsonify({
        "message": "Order placed successfully!",
        "order_id": order.id,
        "order": order_to_dict(order)
    }), 201


@orders_bp.route('/api/orders', methods=['GET'])
@jwt_required()
def get_user_orders():
    profile = current_profile()
    orders = Order.query.filter_by(user_id=profile.id).order_by(Order.created_at.desc(), Order.id.desc()).all()
    return jsonify({"orders": [order_to_dict(o) for o in orders]}), 200


@orders_bp.route('/api/orders/<int:order_id>', methods=['GET'])
@jwt_required()
def get_order_details(order_id):
    profile = current_profile()
    order = Order.query.filter_by(id=order_id, user_id=profile.id).first()
    if not order:
        return jsonify({"message": "Order not found"}), 404
    return jsonify(order_to_dict(order)), 200
