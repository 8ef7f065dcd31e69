"""Bulk import of the remote store catalogs into the games table."""
import logging
from dataclasses import dataclass
from functools import reduce
from typing import Dict, Iterable, List, Tuple

from database import Game
from platform_clients import CatalogSourceClient, RawCatalogEntry, fetch_catalogs
from ..repositories.game_repository import GameRepository

PLATFORM_ANDROID = 'android'
PLATFORM_IOS = 'ios'

DEFAULT_NAME = 'Unknown'
DEFAULT_APP_VERSION = '1.0'


def normalize_entry(entry: RawCatalogEntry, platform: str) -> Dict:
    """Map a raw catalog entry to a candidate game for *platform*.

    Falsy ``name`` and ``version`` fall back to ``"Unknown"`` and ``"1.0"``;
    falsy identifiers become ``None``.  Imported games are always published.
    """
    return {
        'name': entry.name or DEFAULT_NAME,
        'platform': platform,
        'publisherId': entry.publisher_id or None,
        'storeId': entry.store_id or None,
        'bundleId': entry.bundle_id or None,
        'appVersion': entry.version or DEFAULT_APP_VERSION,
        'isPublished': True,
    }


def normalize_entries(entries: Iterable[RawCatalogEntry], platform: str) -> List[Dict]:
    return [normalize_entry(entry, platform) for entry in entries]


def merge_candidates(android: List[Dict], ios: List[Dict]) -> List[Dict]:
    """Android candidates first, then iOS, each in source order."""
    return [*android, *ios]


@dataclass(frozen=True)
class ReconcileSummary:
    """Running result of a reconciliation: games processed out of total."""

    processed: int = 0
    total: int = 0

    @property
    def message(self) -> str:
        return f"Successfully processed {self.processed} out of {self.total} games"

    def counted(self, succeeded: bool) -> 'ReconcileSummary':
        return ReconcileSummary(self.processed + (1 if succeeded else 0), self.total + 1)


class CatalogReconciler:
    """Fetches the Android and iOS catalogs and upserts them by natural key.

    The natural key is (``name``, ``platform``): a candidate overwrites the
    stored game with the same key, or is inserted when none exists.
    Candidates are reconciled one at a time; a failing candidate is logged,
    rolled back and skipped without stopping the batch.

    The lookup and the write are separate statements with no lock between
    them, so two concurrent runs can still insert the same key twice.
    """

    def __init__(self, repository: GameRepository,
                 android_client: CatalogSourceClient,
                 ios_client: CatalogSourceClient) -> None:
        self._repo = repository
        self._android = android_client
        self._ios = ios_client
        self._log = logging.getLogger('gamestore.reconciler')

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def run(self) -> ReconcileSummary:
        """Fetch both catalogs and reconcile every candidate.

        Raises:
            CatalogFetchError: If either catalog fails; nothing is written.
        """
        candidates = self.fetch_candidates()
        summary = self.reconcile(candidates)
        self._log.info(summary.message)
        return summary

    def close(self) -> None:
        """Close both catalog clients."""
        try:
            self._android.close()
        finally:
            self._ios.close()

    def __enter__(self) -> 'CatalogReconciler':
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def fetch_candidates(self) -> List[Dict]:
        """Fetch both catalogs concurrently and return the merged candidates."""
        catalogs = fetch_catalogs([self._android, self._ios])
        android = normalize_entries(catalogs[self._android.platform], PLATFORM_ANDROID)
        ios = normalize_entries(catalogs[self._ios.platform], PLATFORM_IOS)
        self._log.debug("Fetched %d android and %d ios candidates", len(android), len(ios))
        return merge_candidates(android, ios)

    def reconcile(self, candidates: Iterable[Dict]) -> ReconcileSummary:
        """Upsert *candidates* sequentially and return the summary."""
        return reduce(self._reconcile_one, candidates, ReconcileSummary())

    def upsert(self, candidate: Dict) -> Tuple[Game, bool]:
        """Update the game matching *candidate*'s natural key, or insert it.

        Returns:
            ``(game, created)``.
        """
        existing = self._repo.find_one(candidate['name'], candidate['platform'])
        if existing is not None:
            return self._repo.apply(existing, candidate), False
        return self._repo.create(candidate), True

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _reconcile_one(self, summary: ReconcileSummary, candidate: Dict) -> ReconcileSummary:
        try:
            _, created = self.upsert(candidate)
        except Exception:
            self._log.exception("Error processing game %s (%s)",
                                candidate.get('name'), candidate.get('platform'))
            self._repo.rollback()
            return summary.counted(False)
        self._log.debug("%s game %s (%s)", 'Created' if created else 'Updated',
                        candidate['name'], candidate['platform'])
        return summary.counted(True)
