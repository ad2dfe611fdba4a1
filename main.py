from core.imports import Flask
from core.config import Config
from core.extensions import db, jwt, swagger, cors, bcrypt, migrate
from core.errors import register_error_handlers
from core.logger import setup_logging
from core.storage import configure_storage
import core.security  # noqa: F401  registers the JWT callbacks
from routes.auth import auth_bp, seed_demo_accounts
from routes.marketplace import marketplace_bp, seed_categories
from routes.seller import seller_bp, seed_products
from routes.uploads import uploads_bp
from routes.cart import cart_bp
from routes.orders import orders_bp
from routes.donations import donations_bp, seed_donations
from routes.requests import requests_bp, seed_requests


def create_app(config=Config):
    app = Flask(__name__)
    app.config.from_object(config)

    setup_logging(app)

    db.init_app(app)
    jwt.init_app(app)
    swagger.init_app(app)
    cors.init_app(app, origins=app.config["CORS_ORIGINS"], expose_headers=["Content-Type"],
                  allow_headers=["Content-Type", "Authorization", "X-Cart-Id"])
    bcrypt.init_app(app)
    migrate.init_app(app, db)
    configure_storage(app)

    register_error_handlers(app)

    app.register_blueprint(auth_bp)
    app.register_blueprint(marketplace_bp)
    app.register_blueprint(seller_bp)
    app.register_blueprint(uploads_bp)
    app.register_blueprint(cart_bp)
    app.register_blueprint(orders_bp)
    app.register_blueprint(donations_bp)
    app.register_blueprint(requests_bp)

    @app.route('/ping')
    def ping():
        return "Ping received", 200

    @app.cli.command("seed")
    def seed():
        """Create tables and load the demo accounts, categories and products."""
        seed_all()

    return app


def seed_all():
    db.create_all()
    seed_demo_accounts()
    seed_categories()
    seed_products()
    seed_donations()
    seed_requests()


app = create_app()


if __name__ == "__main__":
    with app.app_context():
        seed_all()

    app.run(debug=True)
