"""Utility modules for ChargeLog."""

from .csv_codec import (
    HEADER_MODE_HEADER,
    HEADER_MODE_POSITIONAL,
    parse_document,
    parse_line,
    serialize_document,
    serialize_value,
)
from .csv_importer import ChargeLogCSVImporter
from .wide_events import WideEvent, track_operation

__all__ = [
    'HEADER_MODE_HEADER',
    'HEADER_MODE_POSITIONAL',
    'parse_document',
    'parse_line',
    'serialize_document',
    'serialize_value',
    'ChargeLogCSVImporter',
    'WideEvent',
    'track_operation',
]
