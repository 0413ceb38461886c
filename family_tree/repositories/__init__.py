"""
Repository layer for data access
"""

from .change_repository import EditHistoryRepository, PendingChangeRepository
from .media_repository import DocumentRepository, StoryRepository
from .person_repository import FamilyRepository, PersonRepository
from .relationship_repository import RelationshipRepository


__all__ = [
    'DocumentRepository',
    'EditHistoryRepository',
    'FamilyRepository',
    'PendingChangeRepository',
    'PersonRepository',
    'RelationshipRepository',
    'StoryRepository'
]
