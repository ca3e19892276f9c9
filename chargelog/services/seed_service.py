"""
Seed service for ChargeLog.

Populates an empty record store from an external CSV source, either a local
file (initial_data.csv next to the app) or an http(s) URL. A missing source
is normal on first use and only logged at INFO level.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Optional

import requests

from ..config import Config
from ..exceptions import SeedSourceError
from ..utils.csv_codec import HEADER_MODE_POSITIONAL
from ..utils.wide_events import WideEvent
from .record_store import RecordStore, StoreResult

logger = logging.getLogger(__name__)


@dataclass
class SeedResult:
    status: str  # seeded, already_populated, unavailable, empty
    inserted: int = 0
    source: Optional[str] = None
    detail: Optional[str] = field(default=None)

    def to_dict(self):
        return {
            'status': self.status,
            'inserted': self.inserted,
            'source': self.source,
            'detail': self.detail,
        }


def _is_url(source: str) -> bool:
    return source.lower().startswith(('http://', 'https://'))


def read_seed_source(source: str, timeout: float = Config.SEED_TIMEOUT_SECONDS) -> str:
    """
    Read CSV text from a file path or URL.

    Args:
        source: Local path or http(s) URL
        timeout: Request timeout in seconds (URLs only)

    Returns:
        CSV text

    Raises:
        SeedSourceError: If the source is missing or cannot be read
    """
    if not source:
        raise SeedSourceError("No seed source configured")

    if _is_url(source):
        try:
            response = requests.get(source, timeout=timeout)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            raise SeedSourceError(f"Could not fetch seed CSV: {e}", source=source) from e
        response.encoding = response.encoding or 'utf-8'
        return response.text

    if not os.path.exists(source):
        raise SeedSourceError("Seed CSV not found", source=source)

    try:
        with open(source, 'r', encoding='utf-8-sig') as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise SeedSourceError(f"Could not read seed CSV: {e}", source=source) from e


def seed_store(
    store: RecordStore,
    source: str = Config.SEED_SOURCE,
    header_mode: str = HEADER_MODE_POSITIONAL,
    timeout: float = Config.SEED_TIMEOUT_SECONDS
) -> SeedResult:
    """
    Seed an empty store from `source`.

    The store is checked before the read starts and again by
    RecordStore.seed_from_csv once the text is in hand, so two seed attempts
    can never both insert.
    """
    event = WideEvent("store_seed")
    event.add_context(source=source, header_mode=header_mode)

    if not store.is_empty():
        event.add_business_metric("existing_records", len(store))
        event.mark_success()
        event.emit(level="debug")
        return SeedResult('already_populated', source=source)

    try:
        with event.timer("read_source"):
            text = read_seed_source(source, timeout=timeout)
    except SeedSourceError as e:
        logger.info(f"Seed source unavailable (this is fine on first use): {e}")
        event.mark_failure("unavailable")
        event.emit(level="info")
        return SeedResult('unavailable', source=source, detail=str(e))

    result, inserted = store.seed_from_csv(text, header_mode)
    event.add_business_metric("rows_inserted", inserted)
    event.mark_success()
    event.emit()

    if result is StoreResult.ALREADY_POPULATED:
        return SeedResult('already_populated', source=source)
    if inserted == 0:
        return SeedResult('empty', source=source)
    return SeedResult('seeded', inserted=inserted, source=source)
