"""Repository base class used by all concrete repositories."""
import logging
from typing import Any

from sqlalchemy.exc import SQLAlchemyError


class BaseRepository:
    """Provides SQLAlchemy-backed persistence over a single session.

    Sub-classes stage changes on ``self._session`` and call :meth:`_commit`
    to persist them.  Callers own the session lifecycle (open and close);
    the repository only commits or rolls back.

    A failed commit rolls the session back before re-raising, so the same
    session stays usable for the next operation.
    """

    def __init__(self, session) -> None:
        self._session = session
        self._log = logging.getLogger(f'gamestore.repository.{type(self).__name__}')

    def _commit(self, instance: Any = None) -> Any:
        """Commit the session and refresh *instance* (if given)."""
        try:
            self._session.commit()
        except SQLAlchemyError:
            self._session.rollback()
            raise
        if instance is not None:
            self._session.refresh(instance)
        return instance

    def rollback(self) -> None:
        """Discard any pending changes on the session.

        A failed rollback (e.g. a dropped connection) is logged, not raised,
        so a caller recovering from one error is not aborted by a second.
        """
        try:
            self._session.rollback()
        except SQLAlchemyError as exc:
            self._log.warning("Rollback failed: %s", exc)
