"""
GEDCOM API blueprint - export a family as a GEDCOM file and import GEDCOM into a family
"""

import re

from flask import Blueprint, Response, current_app, request

from family_tree.blueprints.blueprint_utils import acting_user_id
from family_tree.services.exceptions import ValidationError
from family_tree.services.gedcom_service import gedcom_service
from family_tree.services.person_service import person_service
from family_tree.shared.api_response_formatter import APIResponseFormatter
from family_tree.shared.logging_config import get_project_logger


logger = get_project_logger(__name__)

api_gedcom = Blueprint('api_gedcom', __name__, url_prefix='/api/families')


def _download_name(family_name: str) -> str:
    slug = re.sub(r'[^A-Za-z0-9]+', '_', family_name or '').strip('_')
    return f"{slug or 'family_tree'}.ged"


def _uploaded_text() -> str:
    """GEDCOM text from an uploaded ``file`` or the raw request body"""
    uploaded = request.files.get('file')
    if uploaded is not None:
        raw = uploaded.read()
    else:
        raw = request.get_data()

    try:
        return raw.decode('utf-8-sig')
    except UnicodeDecodeError as e:
        raise ValidationError('GEDCOM file must be UTF-8 encoded') from e


@api_gedcom.route('/<family_id>/gedcom', methods=['GET'])
def export_gedcom(family_id):
    """Download the family as a GEDCOM 5.5.5 file"""
    family = person_service.get_family(family_id)
    content = gedcom_service.export_family(family.id, source_name=current_app.config.get('GEDCOM_SOURCE_NAME'))
    return Response(
        content,
        mimetype='text/plain; charset=utf-8',
        headers={'Content-Disposition': f'attachment; filename="{_download_name(family.family_name)}"'},
    )


@api_gedcom.route('/<family_id>/gedcom', methods=['POST'])
def import_gedcom(family_id):
    """
    Import GEDCOM into the family

    With ``?preview=1`` the file is parsed and reported on without storing anything.
    """
    person_service.get_family(family_id)
    content = _uploaded_text()
    if request.args.get('preview', type=int):
        return APIResponseFormatter.success(gedcom_service.preview_import(content))

    result = gedcom_service.import_into_family(family_id, content, created_by=acting_user_id())
    return APIResponseFormatter.created(result, 'GEDCOM imported')
