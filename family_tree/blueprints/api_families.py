"""
Family API blueprint
"""

from flask import Blueprint

from family_tree.blueprints.blueprint_utils import acting_user_id, json_body
from family_tree.services.person_service import person_service
from family_tree.shared.api_response_formatter import APIResponseFormatter
from family_tree.shared.logging_config import get_project_logger


logger = get_project_logger(__name__)

api_families = Blueprint('api_families', __name__, url_prefix='/api/families')


@api_families.route('', methods=['POST'])
def create_family():
    """Create a new family"""
    data = APIResponseFormatter.require_json(json_body(), ['family_name'])
    family = person_service.create_family(data, created_by=acting_user_id(data, 'created_by'))
    return APIResponseFormatter.created({'family': family.to_dict()}, 'Family created')


@api_families.route('/<family_id>', methods=['GET'])
def get_family(family_id):
    family = person_service.get_family(family_id)
    return APIResponseFormatter.success({'family': family.to_dict()})


@api_families.route('/<family_id>/persons', methods=['GET'])
def list_persons(family_id):
    """All persons of a family, oldest first"""
    persons = person_service.list_family_persons(family_id)
    return APIResponseFormatter.success({'persons': [person.to_dict() for person in persons]})


@api_families.route('/<family_id>/tree', methods=['GET'])
def get_tree(family_id):
    """Nodes, edges and root nodes for tree views"""
    return APIResponseFormatter.success(person_service.get_family_tree(family_id))
