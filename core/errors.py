from werkzeug.exceptions import HTTPException
from core.imports import jsonify, request, current_app, SQLAlchemyError
from core.extensions import db


class APIError(Exception):
    """Any failure that should reach the client as {"message": ...}."""

    status_code = 400

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self):
        return {"message": self.message}


def not_found(what):
    return APIError(f"{what} not found", 404)


def register_error_handlers(app):

    @app.errorhandler(APIError)
    def handle_api_error(error):
        current_app.logger.warning("%s %s", error.status_code, error.message)
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(SQLAlchemyError)
    def handle_store_error(error):
        db.session.rollback()
        current_app.logger.exception("Store error")
        message = str(getattr(error, "orig", None) or error)
        return jsonify({"message": message}), 500

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        current_app.logger.info("%s %s", error.code, error.description)
        return jsonify({"message": error.description}), error.code


def json_body():
    """The request's JSON object, or {} when the body is empty."""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise APIError("Invalid request body", 400)
    return data
