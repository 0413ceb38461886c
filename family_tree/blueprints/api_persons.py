"""
Person API blueprint: profiles, stories and documents
"""

from flask import Blueprint

from family_tree.blueprints.blueprint_utils import acting_user_id, json_body
from family_tree.services.person_service import person_service
from family_tree.services.relationship_service import relationship_service
from family_tree.shared.api_response_formatter import APIResponseFormatter
from family_tree.shared.logging_config import get_project_logger


logger = get_project_logger(__name__)

api_persons = Blueprint('api_persons', __name__, url_prefix='/api/persons')


@api_persons.route('', methods=['POST'])
def create_person():
    """Create a person in a family"""
    data = APIResponseFormatter.require_json(json_body(), ['family_id', 'full_name'])
    created_by = acting_user_id(data, 'created_by')
    values = {key: value for key, value in data.items() if key != 'created_by'}
    person = person_service.create_person(values, created_by=created_by)
    return APIResponseFormatter.created({'person': person.to_dict()}, 'Person created')


@api_persons.route('/<person_id>', methods=['GET'])
def get_person(person_id):
    """Person with relatives, stories and documents"""
    return APIResponseFormatter.success(person_service.get_person_details(person_id))


@api_persons.route('/<person_id>', methods=['PUT'])
def update_person(person_id):
    """Direct edit; use the changes endpoints for edits that need approval"""
    data = APIResponseFormatter.require_json(json_body(), [])
    edited_by = acting_user_id(data, 'edited_by')
    values = {key: value for key, value in data.items() if key != 'edited_by'}
    person = person_service.update_person(person_id, values, edited_by=edited_by)
    return APIResponseFormatter.success({'person': person.to_dict()}, 'Person updated')


@api_persons.route('/<person_id>', methods=['DELETE'])
def delete_person(person_id):
    deleted = person_service.delete_person(person_id)
    return APIResponseFormatter.success({'deleted': deleted}, 'Person deleted')


@api_persons.route('/<person_id>/spouses', methods=['GET'])
def list_spouses(person_id):
    relationships = relationship_service.get_spouses(person_id)
    return APIResponseFormatter.success({'spouses': [relationship.to_dict() for relationship in relationships]})


@api_persons.route('/<person_id>/stories', methods=['POST'])
def add_story(person_id):
    data = APIResponseFormatter.require_json(json_body(), ['title'])
    story = person_service.add_story(person_id, data, created_by=acting_user_id(data, 'created_by'))
    return APIResponseFormatter.created({'story': story.to_dict()}, 'Story added')


@api_persons.route('/<person_id>/documents', methods=['POST'])
def add_document(person_id):
    data = APIResponseFormatter.require_json(json_body(), ['file_url'])
    document = person_service.add_document(person_id, data, uploaded_by=acting_user_id(data, 'uploaded_by'))
    return APIResponseFormatter.created({'document': document.to_dict()}, 'Document added')
