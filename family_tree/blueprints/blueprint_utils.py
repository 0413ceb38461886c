"""
Request helpers shared by the API blueprints
"""

from flask import request

from family_tree.services.exceptions import ValidationError


USER_HEADER = 'X-User-Id'


def acting_user_id(data: dict | None = None, *fields: str, required: bool = False) -> str | None:
    """
    Identify who is performing the request

    The ``X-User-Id`` header wins; otherwise the first of ``fields`` present in
    the JSON body is used.
    """
    user_id = request.headers.get(USER_HEADER)
    if not user_id and data:
        user_id = next((data[field] for field in fields if data.get(field)), None)

    if required and not user_id:
        raise ValidationError(f"{USER_HEADER} header or one of {', '.join(fields)} is required")
    return str(user_id) if user_id else None


def json_body() -> dict:
    """The request JSON object, or an empty dict for a missing or non-object body"""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}
