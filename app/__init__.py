from typing import Any, Mapping

from apispec import APISpec
from apispec.ext.marshmallow import MarshmallowPlugin
from flask import Flask
from flask_apispec import FlaskApiSpec
from flask_migrate import Migrate

from app.controllers import all_blueprints, documented_resources
from app.controllers.dependencies import register_savings_dependencies
from app.docs.api_documentation import API_INFO, TAGS
from app.extensions.database import db
from app.extensions.error_handlers import register_error_handlers
from app.extensions.savings_cli import register_savings_commands
from app.extensions.storage import register_collection_store
from app.middleware.cors import register_cors
from app.models.stored_collection import StoredCollection  # noqa: F401
from app.storage import CollectionStore


def create_app(
    config_overrides: Mapping[str, Any] | None = None,
    *,
    store: CollectionStore | None = None,
) -> Flask:
    app = Flask(__name__, instance_relative_config=True)
    from config import Config, validate_security_configuration

    validate_security_configuration()
    app.config.from_object(Config)

    # FLASK_* environment variables override the class defaults.
    app.config.from_prefixed_env()
    if config_overrides:
        app.config.update(config_overrides)

    db.init_app(app)
    Migrate(app, db)

    with app.app_context():
        db.create_all()

    register_collection_store(app, store)
    register_savings_dependencies(app)

    app.config.update(
        {
            "APISPEC_SPEC": APISpec(
                title=API_INFO["title"],
                version=API_INFO["version"],
                openapi_version="3.0.2",
                plugins=[MarshmallowPlugin()],
                info={
                    "description": API_INFO["description"],
                    "license": API_INFO["license"],
                },
                tags=TAGS,
            ),
            "APISPEC_SWAGGER_URL": "/docs/swagger/",
            "APISPEC_SWAGGER_UI_URL": "/docs/",
        }
    )

    docs = FlaskApiSpec(app)

    register_error_handlers(app)
    register_cors(app)

    # Blueprints must be registered before their resources are documented.
    for blueprint in all_blueprints:
        app.register_blueprint(blueprint)

    for resource, blueprint_name, endpoint in documented_resources:
        docs.register(resource, blueprint=blueprint_name, endpoint=endpoint)

    register_savings_commands(app)
    app.logger.info("app_created blueprints=%s", len(all_blueprints))
    return app


__all__ = ["create_app"]
