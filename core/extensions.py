from sqlalchemy import MetaData

from core.imports import Bcrypt, Swagger, JWTManager, SQLAlchemy, CORS, Migrate

# named constraints, so migrations can drop and recreate them
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

SWAGGER_TEMPLATE = {
    "info": {
        "title": "ThreadShare API",
        "description": "Clothing marketplace, donations and NGO requests",
        "version": "0.1.0",
    },
    "securityDefinitions": {
        "Bearer": {
            "type": "apiKey",
            "name": "Authorization",
            "in": "header",
            "description": "JWT token as: Bearer <your_token>",
        }
    },
}

jwt = JWTManager()
db = SQLAlchemy(metadata=MetaData(naming_convention=NAMING_CONVENTION))
migrate = Migrate(render_as_batch=True)
swagger = Swagger(template=SWAGGER_TEMPLATE)
cors = CORS()
bcrypt = Bcrypt()
