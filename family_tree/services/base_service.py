"""
Base service class providing common functionality for all services
"""
from datetime import UTC, datetime

from family_tree.database import db
from family_tree.shared.logging_config import get_project_logger


class BaseService:
    """Base class for all services; services own the commit of their unit of work"""

    def __init__(self, db_session=None):
        self.logger = get_project_logger(self.__class__.__module__)
        self.db_session = db_session or db.session

    @staticmethod
    def now() -> datetime:
        return datetime.now(UTC)
