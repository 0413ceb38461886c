"""
Shared error handlers for the Flask application and blueprints
"""

from flask import request
from werkzeug.exceptions import HTTPException

from family_tree.services.exceptions import PartialApplyError, ServiceError
from family_tree.shared.api_response_formatter import APIResponseFormatter
from family_tree.shared.logging_config import get_project_logger


logger = get_project_logger(__name__)


def register_error_handlers(app_or_blueprint):
    """Register JSON error handlers for Flask app or blueprint"""

    @app_or_blueprint.errorhandler(ServiceError)
    def service_error(error):
        """Map service-layer errors to their HTTP status"""
        if error.status_code >= 500:
            logger.error(f"{error.__class__.__name__} on {request.method} {request.path}: {error}")
        else:
            logger.warning(f"{error.__class__.__name__} on {request.method} {request.path}: {error}")

        details = None
        if isinstance(error, PartialApplyError):
            details = {'step': error.step, 'completed_steps': error.completed_steps}
        return APIResponseFormatter.error(str(error), error.status_code, details)

    @app_or_blueprint.errorhandler(404)
    def not_found_error(error):
        """Handle 404 errors"""
        logger.warning(f"404 error: {request.url}")
        return APIResponseFormatter.error('Resource not found', 404)

    @app_or_blueprint.errorhandler(405)
    def method_not_allowed_error(error):
        """Handle 405 errors"""
        logger.warning(f"405 error: {request.method} {request.url}")
        return APIResponseFormatter.error('Method not allowed', 405)

    @app_or_blueprint.errorhandler(500)
    def internal_error(error):
        """Handle 500 errors"""
        logger.error(f"500 error: {request.url} - {str(error)}")
        return APIResponseFormatter.error('Internal server error', 500)

    @app_or_blueprint.errorhandler(Exception)
    def handle_exception(error):
        """Handle all other exceptions"""
        if isinstance(error, HTTPException):
            logger.warning(f"{error.code} error: {request.method} {request.url}")
            return APIResponseFormatter.error(error.description or error.name, error.code)

        logger.error(f"Unhandled exception: {request.url} - {str(error)}", exc_info=True)
        return APIResponseFormatter.error('An unexpected error occurred', 500)
