from functools import wraps

from core.imports import jsonify, jwt_required, get_jwt, get_jwt_identity
from core.extensions import db, jwt
from core.errors import APIError
from models.userModel import Profile, TokenBlocklist


@jwt.token_in_blocklist_loader
def check_if_token_revoked(jwt_header, jwt_payload):
    jti = jwt_payload["jti"]
    return db.session.query(TokenBlocklist.id).filter_by(jti=jti).scalar() is not None


@jwt.unauthorized_loader
def missing_token(reason):
    return jsonify({"message": reason}), 401


@jwt.invalid_token_loader
def invalid_token(reason):
    return jsonify({"message": reason}), 401


@jwt.expired_token_loader
def expired_token(jwt_header, jwt_payload):
    return jsonify({"message": "Session expired, please log in again"}), 401


@jwt.revoked_token_loader
def revoked_token(jwt_header, jwt_payload):
    return jsonify({"message": "Session has been signed out"}), 401


def current_profile():
    """Profile of the authenticated caller. Call inside a jwt_required view."""
    profile = db.session.get(Profile, int(get_jwt_identity()))
    if not profile:
        raise APIError("User not found", 404)
    return profile


def role_required(*roles):
    def wrapper(fn):
        @wraps(fn)
        @jwt_required()
        def decorator(*args, **kwargs):
            role = get_jwt().get("role")
            if role not in roles:
                return jsonify({"message": f"Only {' or '.join(roles)} accounts can do this"}), 403
            return fn(*args, **kwargs)
        return decorator
    return wrapper
