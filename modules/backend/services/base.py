"""
Base Service.

Base class for all services providing common patterns for business logic.
Services orchestrate repositories, handle transactions, and implement
business rules. Every service acts on behalf of one authenticated user.

Usage:
    from modules.backend.services.base import BaseService

    class FolderService(BaseService):
        def __init__(self, session: AsyncSession, user_id: str) -> None:
            super().__init__(session, user_id)
            self.repo = FolderRepository(session, user_id)

        async def create_folder(self, data: FolderCreate) -> Folder:
            return await self._execute_db_operation(
                "create_folder",
                self.repo.create(name=data.name),
            )
"""

from typing import Any, TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from modules.backend.core.exceptions import ConflictError, DatabaseError
from modules.backend.core.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class BaseService:
    """
    Base class for all services.

    Provides:
    - Database session and owning user id
    - Logging context
    - Error wrapping for database operations

    Subclasses should:
    - Call super().__init__(session, user_id) in their __init__
    - Initialize repositories in __init__
    - Implement business logic methods
    """

    def __init__(self, session: AsyncSession, user_id: str) -> None:
        """
        Initialize the service with a database session.

        Args:
            session: SQLAlchemy async session for database operations
            user_id: Id of the user every query is scoped to
        """
        self._session = session
        self._user_id = user_id
        self._logger = get_logger(self.__class__.__module__)

    @property
    def session(self) -> AsyncSession:
        """Get the database session."""
        return self._session

    @property
    def user_id(self) -> str:
        return self._user_id

    async def _execute_db_operation(
        self,
        operation: str,
        coro: Any,
    ) -> T:
        """
        Execute a database operation with error handling.

        Wraps database operations to convert SQLAlchemy exceptions
        to application-specific exceptions.

        Args:
            operation: Description of the operation for logging
            coro: Coroutine to execute

        Returns:
            Result of the coroutine

        Raises:
            ConflictError: For unique constraint violations
            DatabaseError: For other database errors
        """
        try:
            return await coro
        except IntegrityError as e:
            self._logger.warning(
                "Database integrity error",
                extra={"operation": operation, "error": str(e)},
            )
            error_str = str(e).lower()
            if "unique" in error_str or "duplicate" in error_str:
                raise ConflictError("Resource already exists")
            raise DatabaseError(f"Database constraint violation: {operation}")
        except SQLAlchemyError as e:
            self._logger.error(
                "Database error",
                extra={"operation": operation, "error": str(e)},
            )
            raise DatabaseError(f"Database operation failed: {operation}")

    def _log_operation(
        self,
        operation: str,
        **context: Any,
    ) -> None:
        """
        Log a service operation with context.

        Args:
            operation: Description of the operation
            **context: Additional context to include in log
        """
        self._logger.info(
            operation,
            extra={"service": self.__class__.__name__, "user_id": self._user_id, **context},
        )

    def _log_debug(
        self,
        message: str,
        **context: Any,
    ) -> None:
        """Log debug information with service context."""
        self._logger.debug(
            message,
            extra={"service": self.__class__.__name__, **context},
        )
