import logging

from flask import Flask, jsonify
from pydantic import ValidationError as SchemaValidationError

from ..errors import ServiceError
from .auth_views import auth_blueprint
from .user_views import user_blueprint
from .limits_views import limits_blueprint
from .group_views import group_blueprint
from .extension_views import extension_blueprint
from .notification_views import notification_blueprint

logger = logging.getLogger(__name__)


def handle_service_error(error: ServiceError):
    logger.warning("%s: %s", error.__class__.__name__, error.message)
    return jsonify(error.to_dict()), error.status_code


def handle_schema_error(error: SchemaValidationError):
    return jsonify({"error": "Incorrect data structure", "details": error.errors(include_url=False, include_context=False)}), 400


def register_blueprints(app: Flask):
    app.register_blueprint(auth_blueprint)
    app.register_blueprint(user_blueprint)
    app.register_blueprint(limits_blueprint)
    app.register_blueprint(group_blueprint)
    app.register_blueprint(extension_blueprint)
    app.register_blueprint(notification_blueprint)
    app.register_error_handler(ServiceError, handle_service_error)
    app.register_error_handler(SchemaValidationError, handle_schema_error)
