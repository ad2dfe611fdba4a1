from core.imports import Blueprint, jsonify, jwt_required, current_app, or_, update, datetime
from core.errors import APIError, not_found, json_body
from core.extensions import db
from core.security import current_profile, role_required
from models.donationModels import Donation
from models.productModels import Category
from models.userModel import Profile

donations_bp = Blueprint('donations', __name__)

REQUIRED_FIELDS = ("title", "description", "condition")
OPTIONAL_FIELDS = ("gender", "size", "location")

SAMPLE_DONATIONS = [
    {
        "title": "Winter Clothing Bundle",
        "description": "A bundle of gently used winter clothing including jackets, sweaters, and scarves.",
        "category": "Winter Wear",
        "condition": "good",
        "gender": "unisex",
        "size": "mixed",
        "location": "Mumbai",
        "images": ["https://images.unsplash.com/photo-1489987707025-afc232f7ea0f?w=500"],
    },
    {
        "title": "Children's School Uniforms",
        "description": "Lightly used school uniforms for children ages 7-10.",
        "category": "Kids",
        "condition": "excellent",
        "gender": "children",
        "size": "medium",
        "location": "Delhi",
        "images": ["https://images.unsplash.com/photo-1543269664-76bc3997d9ea?w=500"],
    },
]


def seed_donations():
    donor = Profile.query.filter_by(email="customer@example.com").first()
    if not donor:
        print("❌ No demo customer found. Run seed_demo_accounts() first.")
        return

    existing = Donation.query.filter_by(donor_id=donor.id).count()
    if existing:
        print(f"ℹ️ Demo customer already has {existing} donations.")
        return

    for sample in SAMPLE_DONATIONS:
        category = Category.query.filter_by(name=sample["category"]).first()
        db.session.add(Donation(
            donor_id=donor.id,
            category_id=category.id if category else None,
            status="pending",
            **{k: v for k, v in sample.items() if k != "category"}
        ))
        print(f"✅ Donation added: {sample['title']}")
    db.session.commit()


def create_donation(donor, data):
    missing = [field for field in REQUIRED_FIELDS if not data.get(field)]
    if missing:
        raise APIError(f"Missing required fields: {', '.join(missing)}", 400)

    images = data.get("images")
    if not images or not isinstance(images, list) or not all(isinstance(url, str) and url for url in images):
        raise APIError("Please upload at least one image of your donation", 400)

    category_id = data.get("category_id")
    if category_id and not db.session.get(Category, category_id):
        raise APIError("Category not found", 400)

    donation = Donation(
        donor_id=donor.id,
        title=data["title"],
        description=data["description"],
        condition=data["condition"],
        category_id=category_id or None,
        images=images,
        status="pending",
        **{field: data.get(field) or None for field in OPTIONAL_FIELDS}
    )
    db.session.add(donation)
    db.session.commit()
    current_app.logger.info("Donation %s offered by user %s", donation.id, donor.id)
    return donation


def _transition(donation_id, expected_status, values, *conditions):
    """Conditional update, so only the first of two racing writers succeeds."""
    values["updated_at"] = datetime.utcnow()
    result = db.session.execute(
        update(Donation)
        .where(Donation.id == donation_id, Donation.status == expected_status, *conditions)
        .values(**values)
        .execution_options(synchronize_session=False)
    )
    db.session.commit()
    return result.rowcount == 1


def _load(donation_id):
    donation = db.session.get(Donation, donation_id)
    if not donation:
        raise not_found("Donation")
    return donation


def accept_donation(ngo, donation_id):
    if not _transition(donation_id, "pending", {"ngo_id": ngo.id, "status": "accepted"}):
        donation = _load(donation_id)
        raise APIError(f"Donation is already {donation.status}", 409)

    donation = _load(donation_id)
    current_app.logger.info("Donation %s accepted by NGO %s", donation_id, ngo.id)
    return donation


def complete_donation(ngo, donation_id):
    if not _transition(donation_id, "accepted", {"status": "completed"}, Donation.ngo_id == ngo.id):
        donation = _load(donation_id)
        if donation.status != "accepted":
            raise APIError(f"Only accepted donations can be completed (donation is {donation.status})", 409)
        raise APIError("Only the NGO that accepted this donation can complete it", 403)

    donation = _load(donation_id)
    current_app.logger.info("Donation %s completed by NGO %s", donation_id, ngo.id)
    return donation


def reject_donation(ngo, donation_id):
    if not _transition(donation_id, "pending", {"status": "rejected"}):
        donation = _load(donation_id)
        raise APIError(f"Only pending donations can be rejected (donation is {donation.status})", 409)

    donation = _load(donation_id)
    current_app.logger.info("Donation %s rejected by NGO %s", donation_id, ngo.id)
    return donation


def donations_for(profile):
    """Pending donations (NGOs only) and the caller's own, from a single query."""
    is_ngo = profile.role == "ngo"
    mine = or_(Donation.donor_id == profile.id, Donation.ngo_id == profile.id)
    predicate = or_(Donation.status == "pending", mine) if is_ngo else mine

    rows = (
        Donation.query
        .filter(predicate)
        .order_by(Donation.created_at.desc(), Donation.id.desc())
        .all()
    )

    pending = [d for d in rows if d.status == "pending"] if is_ngo else []
    own = [d for d in rows if profile.id in (d.donor_id, d.ngo_id)]
    return pending, own


@donations_bp.route('/api/donations', methods=['POST'])
@jwt_required()
def add_donation():
    """
    Offer a donation
    ---
    tags:
      - Donations
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
            - condition
            - images
          properties:
            title:
              type: string
              example: "Two winter jackets"
            description:
              type: string
            condition:
              type: string
              example: "good"
            category_id:
              type: integer
            gender:
              type: string
            size:
              type: string
            location:
              type: string
            images:
              type: array
              items:
                type: string
    responses:
      201:
        description: Donation added successfully
      400:
        description: Missing fields or no images
    """
    donor = current_profile()
    donation = create_donation(donor, json_body())
    return jsonify({
        "message": "Donation added successfully",
        "donation": donation.to_dict()
    }), 201


@donations_bp.route('/api/donations', methods=['GET'])
@jwt_required()
def list_donations():
    """
    Donations visible to the caller
    ---
    tags:
      - Donations
    security:
      - Bearer: []
    responses:
      200:
        description: Pending donations (NGOs only) and the caller's own donations
        schema:
          type: object
          properties:
            pending:
              type: array
              items:
                type: object
            donations:
              type: array
              items:
                type: object
    """
    pending, own = donations_for(current_profile())
    return jsonify({
        "pending": [d.to_dict() for d in pending],
        "donations": [d.to_dict() for d in own],
    }), 200


@donations_bp.route('/api/donations/<int:donation_id>', methods=['GET'])
@jwt_required()
def get_donation(donation_id):
    profile = current_profile()
    donation = _load(donation_id)
    visible = (
        donation.status == "pending" and profile.role == "ngo"
    ) or profile.id in (donation.donor_id, donation.ngo_id)
    if not visible:
        raise not_found("Donation")
    return jsonify(donation.to_dict()), 200


@donations_bp.route('/api/donations/<int:donation_id>/accept', methods=['POST'])
@role_required("ngo")
def accept(donation_id):
    donation = accept_donation(current_profile(), donation_id)
    return jsonify({"message": "Donation accepted successfully", "donation": donation.to_dict()}), 200


@donations_bp.route('/api/donations/<int:donation_id>/complete', methods=['POST'])
@role_required("ngo")
def complete(donation_id):
    donation = complete_donation(current_profile(), donation_id)
    return jsonify({"message": "Donation marked as completed", "donation": donation.to_dict()}), 200


@donations_bp.route('/api/donations/<int:donation_id>/reject', methods=['POST'])
@role_required("ngo")
def reject(donation_id):
    donation = reject_donation(current_profile(), donation_id)
    return jsonify({"message": "Donation rejected", "donation": donation.to_dict()}), 200
