"""Business logic for game records."""
from typing import Dict, List, Optional

from database import Game, GAME_FIELDS
from ..repositories.game_repository import GameRepository, GameNotFoundError


class GameService:
    """Validates and applies game CRUD operations, delegating persistence to
    :class:`~app.repositories.game_repository.GameRepository`.

    Rules
    -----
    * Only the seven game fields (``publisherId``, ``name``, ``platform``,
      ``storeId``, ``bundleId``, ``appVersion``, ``isPublished``) are read
      from a payload; other keys are ignored.
    * ``isPublished`` is coerced to ``bool`` when given.
    * :meth:`replace` is a full replace: fields missing from the payload
      are set to ``None``.
    """

    def __init__(self, repository: GameRepository) -> None:
        self._repo = repository

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def list_games(self) -> List[Game]:
        return self._repo.list_all()

    def create(self, payload: Optional[Dict]) -> Game:
        """Create a game from the known fields of *payload*."""
        return self._repo.create(extract_fields(payload))

    def replace(self, game_id: int, payload: Optional[Dict]) -> Game:
        """Overwrite every field of game *game_id* from *payload*.

        Raises:
            GameNotFoundError: If it does not exist.
        """
        fields = extract_fields(payload)
        full = {key: fields.get(key) for key in GAME_FIELDS}
        return self._repo.update(game_id, full)

    def delete(self, game_id: int) -> None:
        """Hard-delete game *game_id*.

        Raises:
            GameNotFoundError: If it does not exist.
        """
        if not self._repo.delete(game_id):
            raise GameNotFoundError(game_id)

    def search(self, name: Optional[str] = None,
               platform: Optional[str] = None) -> List[Game]:
        """Games whose name contains *name* on *platform*, ordered by name."""
        return self._repo.search(_as_text(name), _as_text(platform))


def extract_fields(payload: Optional[Dict]) -> Dict:
    """Return the game fields present in *payload*."""
    if not isinstance(payload, dict):
        return {}
    fields = {key: payload[key] for key in GAME_FIELDS if key in payload}
    if fields.get('isPublished') is not None:
        fields['isPublished'] = _as_bool(fields['isPublished'])
    return fields


def _as_bool(value) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ('1', 'true', 'yes', 'on')
    return bool(value)


def _as_text(value) -> Optional[str]:
    return value if isinstance(value, str) else None
