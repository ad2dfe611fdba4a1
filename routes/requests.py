from sqlalchemy.orm import selectinload

from core.imports import Blueprint, jsonify, request, current_app, SQLAlchemyError
from core.errors import APIError, not_found, json_body
from core.extensions import db
from core.security import current_profile, role_required
from models.productModels import Category
from models.userModel import Profile
from models.requestModels import (
    Request as RequestModel, RequestItem, REQUEST_STATUSES, ITEM_GENDERS, ITEM_URGENCIES,
)

requests_bp = Blueprint('requests', __name__)

SAMPLE_REQUESTS = [
    {
        "title": "Monsoon Relief Clothing Drive",
        "description": "We are collecting waterproof clothing and footwear for communities affected by flooding.",
        "items": [
            {"category": "Winter Wear", "quantity": 50, "gender": "unisex", "urgency": "high"},
            {"category": "Footwear", "quantity": 100, "gender": "children", "urgency": "critical"},
        ],
    },
    {
        "title": "Winter Essentials Collection",
        "description": "Collecting warm clothing for homeless shelters in preparation for winter.",
        "items": [
            {"category": "Winter Wear", "quantity": 30, "gender": "men", "urgency": "medium"},
            {"category": "Accessories", "quantity": 30, "gender": "women", "urgency": "medium"},
        ],
    },
]


def seed_requests():
    ngo = Profile.query.filter_by(email="ngo@example.com").first()
    if not ngo:
        print("❌ No demo NGO found. Run seed_demo_accounts() first.")
        return

    existing = RequestModel.query.filter_by(requester_id=ngo.id).count()
    if existing:
        print(f"ℹ️ Demo NGO already has {existing} requests.")
        return

    categories = {c.name: c.id for c in Category.query.all()}
    for sample in SAMPLE_REQUESTS:
        items = [
            dict({k: v for k, v in item.items() if k != "category"}, category_id=categories.get(item["category"]))
            for item in sample["items"]
        ]
        create_request(ngo, sample["title"], sample["description"], items)
        print(f"✅ Request added: {sample['title']} with {len(items)} items")


def _validated_items(items):
    if not items or not isinstance(items, list):
        raise APIError("Add at least one item to the request", 400)

    category_ids = {c.id for c in Category.query.all()}
    validated = []
    for index, item in enumerate(items, start=1):
        if not isinstance(item, dict):
            raise APIError(f"Item {index} is not valid", 400)

        if item.get("category_id") not in category_ids:
            raise APIError(f"Item {index} needs a valid category", 400)

        quantity = item.get("quantity", 1)
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise APIError(f"Item {index} quantity must be at least 1", 400)

        gender = item.get("gender", "unisex")
        if gender not in ITEM_GENDERS:
            raise APIError(f"Item {index} gender must be one of: {', '.join(ITEM_GENDERS)}", 400)

        urgency = item.get("urgency", "medium")
        if urgency not in ITEM_URGENCIES:
            raise APIError(f"Item {index} urgency must be one of: {', '.join(ITEM_URGENCIES)}", 400)

        validated.append(RequestItem(
            category_id=item["category_id"],
            quantity=quantity,
            gender=gender,
            urgency=urgency,
        ))
    return validated


def create_request(ngo, title, description, items):
    """Store a request together with its items, or nothing at all."""
    if not title or not description:
        raise APIError("Title and description are required", 400)

    new_request = RequestModel(
        requester_id=ngo.id,
        title=title,
        description=description,
        status="open",
        items=_validated_items(items),
    )
    db.session.add(new_request)
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("Creating request for NGO %s failed", ngo.id)
        raise APIError("Could not create the request", 500)

    current_app.logger.info("Request %s created by NGO %s", new_request.id, ngo.id)
    return new_request


def update_request_status(ngo, request_id, status):
    if status not in REQUEST_STATUSES:
        raise APIError(f"Status must be one of: {', '.join(REQUEST_STATUSES)}", 400)

    req = db.session.get(RequestModel, request_id)
    if req is None:
        raise not_found("Request")
    if req.requester_id != ngo.id:
        raise APIError("You can only manage your own requests.", 403)

    req.status = status
    db.session.commit()
    current_app.logger.info("Request %s set to %s", request_id, status)
    return req


def _with_items(query):
    return query.options(selectinload(RequestModel.items), selectinload(RequestModel.requester))


@requests_bp.route('/api/requests', methods=['POST'])
@role_required("ngo")
def add_request():
    """
    Publish a request for items
    ---
    tags:
      - Requests
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
            - title
            - description
            - items
          properties:
            title:
              type: string
              example: "Winter drive"
            description:
              type: string
            items:
              type: array
              items:
                type: object
                properties:
                  category_id:
                    type: integer
                  quantity:
                    type: integer
                    example: 20
                  gender:
                    type: string
                    enum: [men, women, children, unisex]
                  urgency:
                    type: string
                    enum: [low, medium, high, critical]
    responses:
      201:
        description: Request created successfully
      400:
        description: No items, or an item without a category
    """
    data = json_body()
    new_request = create_request(
        current_profile(),
        data.get("title"),
        data.get("description"),
        data.get("items"),
    )
    return jsonify({
        "message": "Request created successfully",
        "request": new_request.to_dict()
    }), 201


@requests_bp.route('/api/requests', methods=['GET'])
def list_requests():
    """
    Public feed of requests
    ---
    tags:
      - Requests
    parameters:
      - name: status
        in: query
        type: string
        enum: [open, in-progress, fulfilled, closed]
      - name: category
        in: query
        type: array
        items:
          type: integer
        collectionFormat: multi
    responses:
      200:
        description: Requests with their items
    """
    query = _with_items(RequestModel.query)

    status = request.args.get("status")
    if status:
        query = query.filter(RequestModel.status == status)

    category_ids = request.args.getlist("category", type=int)
    if category_ids:
        query = query.filter(RequestModel.items.any(RequestItem.category_id.in_(category_ids)))

    requests = query.order_by(RequestModel.created_at.desc(), RequestModel.id.desc()).all()
    return jsonify({"requests": [r.to_dict() for r in requests]}), 200


@requests_bp.route('/api/requests/mine', methods=['GET'])
@role_required("ngo")
def my_requests():
    ngo = current_profile()
    requests = (
        _with_items(RequestModel.query)
        .filter(RequestModel.requester_id == ngo.id)
        .order_by(RequestModel.created_at.desc(), RequestModel.id.desc())
        .all()
    )
    return jsonify({"requests": [r.to_dict() for r in requests]}), 200


@requests_bp.route('/api/requests/<int:request_id>', methods=['GET'])
def get_request(request_id):
    req = _with_items(RequestModel.query).filter(RequestModel.id == request_id).first()
    if req is None:
        raise not_found("Request")
    return jsonify(req.to_dict()), 200


@requests_bp.route('/api/requests/<int:request_id>/status', methods=['PATCH'])
@role_required("ngo")
def change_status(request_id):
    data = json_body()
    req = update_request_status(current_profile(), request_id, data.get("status"))
    return jsonify({
        "message": f"Request {req.status.replace('-', ' ')}",
        "request": req.to_dict()
    }), 200
