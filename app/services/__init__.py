"""Services package — expose all concrete services from one import."""
from .game_service import GameService
from .catalog_reconciler import (
    CatalogReconciler,
    ReconcileSummary,
    normalize_entry,
    normalize_entries,
    merge_candidates,
)

__all__ = [
    'GameService',
    'CatalogReconciler',
    'ReconcileSummary',
    'normalize_entry',
    'normalize_entries',
    'merge_candidates',
]
