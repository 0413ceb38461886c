"""
Custom exceptions for service layer
"""

import functools

import sqlalchemy.exc


class ServiceError(Exception):
    """Base exception for service layer errors"""
    status_code = 500


class ValidationError(ServiceError):
    """Raised when input validation fails"""
    status_code = 400


class NotFoundError(ServiceError):
    """Raised when a requested resource is not found"""
    status_code = 404


class ConflictError(ServiceError):
    """Raised when an operation conflicts with current state"""
    status_code = 409


class DatabaseError(ServiceError):
    """Raised when database operations fail"""
    status_code = 500


class NoChangeError(ValidationError):
    """Raised when a proposed edit does not differ from the current record"""
    pass


class ConflictComputationError(DatabaseError):
    """Raised when the scan for overlapping pending changes fails"""
    pass


class PartialApplyError(DatabaseError):
    """Raised when an approval fails part-way; the approval transaction is rolled back"""

    def __init__(self, message: str, step: str = None, completed_steps: list[str] = None):
        super().__init__(message)
        self.step = step
        self.completed_steps = list(completed_steps or [])


def handle_service_exceptions(logger=None):
    """Decorator to handle common service exceptions and convert them to service-specific exceptions"""
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except ServiceError:
                # Re-raise our own service errors
                raise
            except sqlalchemy.exc.OperationalError as e:
                if logger:
                    logger.error(f"Database operational error in {func.__name__}: {e}")
                raise DatabaseError(f"Database connection error: {e}") from e
            except sqlalchemy.exc.IntegrityError as e:
                if logger:
                    logger.error(f"Database integrity error in {func.__name__}: {e}")
                raise ConflictError(f"Data integrity violation: {e.orig}") from e
            except sqlalchemy.exc.SQLAlchemyError as e:
                if logger:
                    logger.error(f"Database error in {func.__name__}: {e}")
                raise DatabaseError(f"Database error: {e}") from e
            except ValueError as e:
                if logger:
                    logger.error(f"Validation error in {func.__name__}: {e}")
                raise ValidationError(f"Invalid input: {e}") from e
            except KeyError as e:
                if logger:
                    logger.error(f"Missing required data in {func.__name__}: {e}")
                raise ValidationError(f"Missing required field: {e}") from e
            except Exception as e:
                if logger:
                    logger.error(f"Unexpected error in {func.__name__}: {e}", exc_info=True)
                raise ServiceError(f"Unexpected service error: {e}") from e
        return wrapper
    return decorator
