"""Repository package — expose all concrete repositories from one import."""
from .game_repository import GameRepository, GameNotFoundError

__all__ = [
    'GameRepository',
    'GameNotFoundError',
]
