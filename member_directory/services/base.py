# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Shared plumbing for the directory services: rejection bookkeeping and
translation of unclassified store failures into OperationFailedError.
"""

from contextlib import contextmanager
from logging import Logger
from typing import Iterator

from member_directory.core.exceptions import DirectoryError, OperationFailedError
from member_directory.metrics.prometheus import OPERATION_FAILURES
from member_directory.repositories.base import PersistenceError


class DirectoryService:
    """Base for RoleService and MemberService."""

    logger: Logger

    def _reject(self, error: DirectoryError) -> DirectoryError:
        OPERATION_FAILURES.labels(kind=error.code).inc()
        self.logger.warning("Rejected: %s", error.message)
        return error

    @contextmanager
    def _store_errors(self, action: str) -> Iterator[None]:
        """Re-raise any PersistenceError the operation did not classify."""
        try:
            yield
        except PersistenceError as exc:
            OPERATION_FAILURES.labels(kind=OperationFailedError.code).inc()
            self.logger.error("Failed to %s: %s", action, exc, exc_info=True)
            raise OperationFailedError(f"Failed to {action}: {exc}") from exc
