"""
Edit approval API blueprint: proposals, approvals, rejections and history
"""

from flask import Blueprint, request

from family_tree.blueprints.blueprint_utils import acting_user_id, json_body
from family_tree.services.approval_service import approval_service
from family_tree.services.change_service import change_service
from family_tree.services.exceptions import ValidationError
from family_tree.services.person_service import person_service
from family_tree.shared.api_response_formatter import APIResponseFormatter
from family_tree.shared.logging_config import get_project_logger


logger = get_project_logger(__name__)

api_changes = Blueprint('api_changes', __name__, url_prefix='/api')


@api_changes.route('/persons/<person_id>/changes', methods=['POST'])
def propose_change(person_id):
    """
    Propose an edit to a person

    Body: ``{"changes": {field: new_value}, "reason": "..."}``; the proposer is
    the ``X-User-Id`` header or ``proposer_id``.
    """
    data = APIResponseFormatter.require_json(json_body(), ['changes'])
    proposed_values = data['changes']
    if not isinstance(proposed_values, dict):
        raise ValidationError('changes must be an object of field: value pairs')

    person = person_service.get_person(person_id)
    change_id = change_service.propose(
        person.id,
        person.family_id,
        acting_user_id(data, 'proposer_id', 'changed_by', required=True),
        person.editable_values(),
        proposed_values,
        data.get('reason'),
    )
    change = change_service.get_change(change_id)
    return APIResponseFormatter.created(
        {'pending_change_id': change_id, 'pending_change': change.to_dict()},
        'Change submitted for approval'
    )


@api_changes.route('/persons/<person_id>/changes', methods=['GET'])
def list_person_changes(person_id):
    """Pending changes for a person, newest first"""
    changes = change_service.list_pending(person_id)
    return APIResponseFormatter.success({'pending_changes': [change.to_dict() for change in changes]})


@api_changes.route('/persons/<person_id>/history', methods=['GET'])
def get_history(person_id):
    """Approved edits for a person, newest first"""
    limit = request.args.get('limit', 50, type=int)
    if limit < 1:
        raise ValidationError('limit must be positive')
    entries = change_service.get_edit_history(person_id, limit=limit)
    return APIResponseFormatter.success({'history': [entry.to_dict() for entry in entries]})


@api_changes.route('/families/<family_id>/changes', methods=['GET'])
def list_family_changes(family_id):
    family = person_service.get_family(family_id)
    changes = change_service.list_family_pending(family.id)
    return APIResponseFormatter.success({'pending_changes': [change.to_dict() for change in changes]})


@api_changes.route('/changes/<change_id>', methods=['GET'])
def get_change(change_id):
    change = change_service.get_change(change_id)
    return APIResponseFormatter.success({'pending_change': change.to_dict()})


@api_changes.route('/changes/<change_id>/approve', methods=['POST'])
def approve_change(change_id):
    """Apply a change and reject the proposals that conflict with it"""
    data = json_body()
    result = approval_service.approve(
        change_id,
        acting_user_id(data, 'approver_id', required=True),
        data.get('notes'),
    )
    return APIResponseFormatter.success(result.to_dict(), 'Change approved')


@api_changes.route('/changes/<change_id>/reject', methods=['POST'])
def reject_change(change_id):
    data = json_body()
    change = approval_service.reject(
        change_id,
        acting_user_id(data, 'rejector_id', required=True),
        data.get('reason'),
    )
    return APIResponseFormatter.success({'pending_change': change.to_dict()}, 'Change rejected')
