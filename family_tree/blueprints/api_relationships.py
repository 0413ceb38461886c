"""
Relationship API blueprint
"""

from flask import Blueprint

from family_tree.blueprints.blueprint_utils import json_body
from family_tree.services.relationship_service import relationship_service
from family_tree.shared.api_response_formatter import APIResponseFormatter
from family_tree.shared.logging_config import get_project_logger


logger = get_project_logger(__name__)

api_relationships = Blueprint('api_relationships', __name__, url_prefix='/api/relationships')


@api_relationships.route('/parent-child', methods=['POST'])
def add_parent_child():
    data = APIResponseFormatter.require_json(json_body(), ['parent_id', 'child_id'])
    relationship = relationship_service.add_parent_child(data['parent_id'], data['child_id'], data.get('notes'))
    return APIResponseFormatter.created({'relationship': relationship.to_dict()}, 'Parent-child relationship added')


@api_relationships.route('/spouses', methods=['POST'])
def add_spouse():
    data = APIResponseFormatter.require_json(json_body(), ['spouse1_id', 'spouse2_id'])
    relationship = relationship_service.add_spouse(data['spouse1_id'], data['spouse2_id'],
                                                   data.get('marital_status'))
    return APIResponseFormatter.created({'relationship': relationship.to_dict()}, 'Spousal relationship added')


@api_relationships.route('/parent-child/<relationship_id>', methods=['DELETE'])
def remove_parent_child(relationship_id):
    relationship_service.remove_parent_child(relationship_id)
    return APIResponseFormatter.success(message='Parent-child relationship removed')


@api_relationships.route('/spouses/<relationship_id>', methods=['DELETE'])
def remove_spouse(relationship_id):
    relationship_service.remove_spouse(relationship_id)
    return APIResponseFormatter.success(message='Spousal relationship removed')
