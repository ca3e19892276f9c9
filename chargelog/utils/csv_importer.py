"""CSV importer for charging record files (initial_data.csv or user uploads)."""

import logging
from typing import Any, Dict, List, Tuple

from ..schema import SCHEMA
from .csv_codec import (
    HEADER_MODE_HEADER,
    HEADER_MODE_POSITIONAL,
    build_column_map,
    parse_line,
    row_to_fields,
    split_lines,
)

logger = logging.getLogger(__name__)

MAX_REPORTED_WARNINGS = 10


class ChargeLogCSVImporter:
    """
    Parse CSV exports of the charging log into schema field mappings.

    Rows are never rejected: short rows are padded with empty values and
    extra trailing columns are dropped. Both cases are counted in the stats
    so the caller can report them.
    """

    @classmethod
    def _new_stats(cls) -> Dict[str, Any]:
        return {
            'total_rows': 0,
            'parsed_rows': 0,
            'short_rows': 0,
            'long_rows': 0,
            'columns_found': [],
            'unknown_columns': [],
            'header_mode': HEADER_MODE_POSITIONAL,
            'warnings': [],
        }

    @classmethod
    def _add_warning(cls, stats: Dict[str, Any], message: str) -> None:
        if len(stats['warnings']) < MAX_REPORTED_WARNINGS:
            stats['warnings'].append(message)

    @classmethod
    def parse_csv(
        cls,
        csv_content: str,
        header_mode: str = HEADER_MODE_POSITIONAL
    ) -> Tuple[List[Dict[str, str]], Dict[str, Any]]:
        """
        Parse CSV content into field mappings with import stats.

        Args:
            csv_content: Raw CSV file content as string
            header_mode: "positional" or "header"

        Returns:
            Tuple of (list of field mappings, stats dict)
        """
        stats = cls._new_stats()
        stats['header_mode'] = header_mode

        lines = split_lines(csv_content)
        if not lines:
            return [], stats

        header = parse_line(lines[0])
        column_map = build_column_map(header, header_mode)

        if header_mode == HEADER_MODE_HEADER:
            stats['columns_found'] = [column_map[idx] for idx in sorted(column_map)]
            stats['unknown_columns'] = [
                column for idx, column in enumerate(header) if idx not in column_map
            ]
            missing = [name for name in SCHEMA if name not in column_map.values()]
            if missing:
                cls._add_warning(stats, f"Header is missing columns: {', '.join(missing)}")
        else:
            stats['columns_found'] = list(SCHEMA[:len(header)])

        expected_width = len(header) if header_mode == HEADER_MODE_HEADER else len(SCHEMA)
        rows = []

        for row_num, line in enumerate(lines[1:], start=2):  # Header is row 1
            stats['total_rows'] += 1
            values = parse_line(line)

            if len(values) < expected_width:
                stats['short_rows'] += 1
                cls._add_warning(
                    stats,
                    f"Row {row_num}: {len(values)} of {expected_width} columns, padded with empty values"
                )
            elif len(values) > expected_width:
                stats['long_rows'] += 1
                cls._add_warning(
                    stats,
                    f"Row {row_num}: {len(values)} columns, extra columns dropped"
                )

            rows.append(row_to_fields(values, column_map))
            stats['parsed_rows'] += 1

        if stats['short_rows'] or stats['long_rows']:
            logger.info(
                f"CSV import normalised {stats['short_rows']} short and "
                f"{stats['long_rows']} long rows out of {stats['total_rows']}"
            )

        return rows, stats
