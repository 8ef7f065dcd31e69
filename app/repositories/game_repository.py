"""Repository for persisted game records (the ``games`` table)."""
from typing import Dict, List, Optional

from database import Game, GAME_FIELDS
from .base import BaseRepository


class GameNotFoundError(LookupError):
    """Raised when a game id does not match any stored record."""

    def __init__(self, game_id: int) -> None:
        super().__init__(f"Game {game_id} not found")
        self.game_id = game_id


class GameRepository(BaseRepository):
    """Persists :class:`database.Game` rows.

    Field dicts use the API names (``publisherId``, ``appVersion``, ...);
    unknown keys are ignored.  The pair (``name``, ``platform``) is the
    natural key used by :meth:`find_one`, but the table does not enforce it.
    """

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get(self, game_id: int) -> Optional[Game]:
        """Return the game with primary key *game_id*, or ``None``."""
        return self._session.get(Game, game_id)

    def list_all(self) -> List[Game]:
        return self._session.query(Game).order_by(Game.id).all()

    def find_one(self, name: str, platform: str) -> Optional[Game]:
        """Return the first game matching *name* and *platform* exactly."""
        return self._session.query(Game).filter(
            Game.name == name,
            Game.platform == platform,
        ).order_by(Game.id).first()

    def search(self, name: Optional[str] = None,
               platform: Optional[str] = None) -> List[Game]:
        """Return games whose name contains *name* and whose platform equals
        *platform*, ordered by name.  Blank filters are skipped.
        """
        query = self._session.query(Game)
        if name and name.strip():
            query = query.filter(Game.name.like(f'%{name}%'))
        if platform and platform.strip():
            query = query.filter(Game.platform == platform)
        return query.order_by(Game.name.asc()).all()

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def create(self, fields: Dict) -> Game:
        """Insert a new game built from *fields* and return it."""
        game = Game(**_columns(fields))
        self._session.add(game)
        return self._commit(game)

    def update(self, game_id: int, fields: Dict) -> Game:
        """Overwrite the columns named in *fields* on game *game_id*.

        Raises:
            GameNotFoundError: If no game has that id.
        """
        game = self.get(game_id)
        if game is None:
            raise GameNotFoundError(game_id)
        return self.apply(game, fields)

    def apply(self, game: Game, fields: Dict) -> Game:
        """Overwrite the columns named in *fields* on an already-loaded *game*."""
        for attr, value in _columns(fields).items():
            setattr(game, attr, value)
        return self._commit(game)

    def delete(self, game_id: int) -> bool:
        """Hard-delete game *game_id*.  Returns ``True`` if it existed."""
        game = self.get(game_id)
        if game is None:
            return False
        self._session.delete(game)
        self._commit()
        return True


def _columns(fields: Dict) -> Dict:
    """Map API field names in *fields* to ``Game`` column attributes."""
    return {GAME_FIELDS[key]: value for key, value in fields.items() if key in GAME_FIELDS}
