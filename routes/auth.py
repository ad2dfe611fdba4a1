from core.imports import Blueprint, jsonify, create_access_token, jwt_required, get_jwt, current_app, func, IntegrityError
from core.extensions import db, bcrypt
from core.errors import APIError, json_body
from core.security import current_profile
from models.userModel import Profile, TokenBlocklist, ROLES

auth_bp = Blueprint('auth', __name__)

DEMO_PASSWORD = "password123"
DEMO_ACCOUNTS = [
    {"email": "customer@example.com", "role": "customer", "name": "Demo Customer"},
    {"email": "seller@example.com", "role": "seller", "name": "Demo Seller"},
    {"email": "ngo@example.com", "role": "ngo", "name": "Demo NGO"},
]


def _text(data, field):
    value = data.get(field)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise APIError(f"'{field}' must be a string", 400)
    return value.strip()


def default_avatar(email):
    return f"https://i.pravatar.cc/150?u={email}"


def issue_token(profile):
    return create_access_token(
        identity=str(profile.id),
        additional_claims={"role": profile.role}
    )


def seed_demo_accounts():
    for account in DEMO_ACCOUNTS:
        profile = Profile.query.filter_by(email=account["email"]).first()
        if profile:
            print(f"ℹ️ Demo {account['role']} already exists.")
            continue

        hashed_password = bcrypt.generate_password_hash(DEMO_PASSWORD).decode('utf-8')
        db.session.add(Profile(
            name=account["name"],
            email=account["email"],
            password=hashed_password,
            role=account["role"],
            avatar_url=f"https://i.pravatar.cc/150?u={account['role']}",
        ))
        print(f"✅ Demo {account['role']} created (email={account['email']}, password={DEMO_PASSWORD})")
    db.session.commit()


@auth_bp.route('/api/auth/signup', methods=['POST'])
def signup():
    """
    Register a new account
    ---
    tags:
      - Auth
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
            - email
            - password
            - role
          properties:
            name:
              type: string
              example: "Asha Rao"
            email:
              type: string
              example: "asha@example.com"
            password:
              type: string
              example: "password123"
            role:
              type: string
              enum: [customer, seller, ngo]
    responses:
      201:
        description: Account created, access token returned
      400:
        description: Missing fields or invalid role
      409:
        description: Email already registered
    """
    data = json_body()
    name = _text(data, 'name')
    email = _text(data, 'email').lower()
    password = data.get('password')
    if password is not None and not isinstance(password, str):
        raise APIError("'password' must be a string", 400)
    role = data.get('role')

    if not all([name, email, password, role]):
        return jsonify({"message": "All required fields must be filled"}), 400

    if role not in ROLES:
        return jsonify({"message": f"Role must be one of: {', '.join(ROLES)}"}), 400

    if Profile.query.filter(func.lower(Profile.email) == email).first():
        return jsonify({"message": "Account with this email already exists"}), 409

    hashed_password = bcrypt.generate_password_hash(password).decode('utf-8')
    profile = Profile(
        name=name,
        email=email,
        password=hashed_password,
        role=role,
        avatar_url=default_avatar(email),
    )
    db.session.add(profile)

    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        return jsonify({"message": "Account with this email already exists"}), 409

    current_app.logger.info("New %s account %s", role, profile.id)

    return jsonify({
        "message": "Registration successful",
        "access_token": issue_token(profile),
        "user": profile.to_dict()
    }), 201


@auth_bp.route('/api/auth/login', methods=['POST'])
def login():
    """
    Sign in with email, password and the role the account was registered with
    ---
    tags:
      - Auth
    consumes:
      - application/json
    parameters:
      - name: body
        in: body
        required: true
        schema:
          type: object
          properties:
            email:
              type: string
            password:
              type: string
            role:
              type: string
              enum: [customer, seller, ngo]
    responses:
      200:
        description: Login successful
      401:
        description: Invalid credentials
      403:
        description: Account registered under another role
    """
    data = json_body()
    email = _text(data, 'email').lower()
    password = data.get('password')
    if password is not None and not isinstance(password, str):
        raise APIError("'password' must be a string", 400)
    role = data.get('role')

    if not email or not password:
        return jsonify({"message": "Email and password are required"}), 400

    profile = Profile.query.filter(func.lower(Profile.email) == email).first()

    if not profile or not bcrypt.check_password_hash(profile.password, password):
        return jsonify({"message": "Invalid credentials"}), 401

    if role and profile.role != role:
        return jsonify({"message": f"Invalid user role. You're not registered as a {role}."}), 403

    return jsonify({
        "message": "Welcome back!",
        "access_token": issue_token(profile),
        "user": profile.to_dict()
    }), 200


@auth_bp.route('/api/auth/logout', methods=['POST'])
@jwt_required()
def logout():
    jti = get_jwt()["jti"]
    db.session.add(TokenBlocklist(jti=jti))
    db.session.commit()
    return jsonify({"message": "Signed out"}), 200


@auth_bp.route('/api/user/profile', methods=['GET'])
@jwt_required()
def profile():
    return jsonify(current_profile().to_dict()), 200


@auth_bp.route('/api/user/profile', methods=['PATCH'])
@jwt_required()
def update_profile_details():
    """
    Partially update the authenticated user's profile
    ---
    tags:
      - User
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        required: true
        description: At least one field is required
        schema:
          type: object
          properties:
            name:
              type: string
            email:
              type: string
            address:
              type: string
            avatar_url:
              type: string
    responses:
      200:
        description: Profile updated successfully
      400:
        description: No update data provided
      409:
        description: Email already in use
    """
    user = current_profile()

    data = json_body()
    if not data:
        return jsonify({"message": "No data provided"}), 400

    updated = False

    if _text(data, 'name'):
        user.name = _text(data, 'name')
        updated = True

    email = _text(data, 'email').lower()
    if email:
        email_conflict = Profile.query.filter(func.lower(Profile.email) == email, Profile.id != user.id).first()
        if email_conflict:
            return jsonify({"message": "Email already in use"}), 409
        user.email = email
        updated = True

    if 'address' in data:
        user.address = data['address']
        updated = True

    if 'avatar_url' in data and data['avatar_url']:
        user.avatar_url = data['avatar_url']
        updated = True

    if not updated:
        return jsonify({"message": "No fields were updated"}), 200

    db.session.commit()

    return jsonify({
        "message": "Profile updated successfully",
        "user": user.to_dict()
    }), 200


@auth_bp.route('/api/demo-accounts', methods=['GET'])
def demo_accounts():
    return jsonify({
        "accounts": [dict(account, password=DEMO_PASSWORD) for account in DEMO_ACCOUNTS]
    }), 200
