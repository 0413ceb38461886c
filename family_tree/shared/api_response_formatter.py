"""
API response formatting utilities for consistent JSON responses across blueprints
"""

from typing import Any

from flask import jsonify

from family_tree.services.exceptions import ValidationError


class APIResponseFormatter:
    """Utility class for formatting consistent API responses"""

    @staticmethod
    def success(data: Any = None, message: str = "", status_code: int = 200) -> tuple:
        """Format a successful API response"""
        response = {
            'success': True,
            'message': message
        }

        if data is not None:
            if isinstance(data, dict):
                response.update(data)
            else:
                response['data'] = data

        return jsonify(response), status_code

    @staticmethod
    def created(data: dict, message: str = "") -> tuple:
        """Format a 201 response for a newly created record"""
        return APIResponseFormatter.success(data, message=message, status_code=201)

    @staticmethod
    def error(error_message: str, status_code: int = 400, details: dict | None = None) -> tuple:
        """Format an error API response"""
        response = {
            'success': False,
            'error': error_message
        }

        if details:
            response['details'] = details

        return jsonify(response), status_code

    @staticmethod
    def require_json(request_data: dict | None, required_fields: list) -> dict:
        """Return the request body, raising ValidationError when it lacks required fields"""
        if not request_data or not isinstance(request_data, dict):
            raise ValidationError('No data provided')

        missing_fields = [field for field in required_fields if request_data.get(field) in (None, '')]
        if missing_fields:
            raise ValidationError(f"Missing required fields: {', '.join(missing_fields)}")

        return request_data
