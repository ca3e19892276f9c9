"""
Dashboard Statistics

The two summary figures shown above the records table:
- Total expenditure (charging fees plus parking fees)
- Days since the last session that ended fully charged
"""

from datetime import date
from typing import Any, Dict, Iterable, Mapping, Optional

from ..schema import CHARGING_FEE, DATE, FULLY_CHARGED, PARKING_FEE
from .coercion import parse_date, parse_flag, parse_money
from .constants import EXPENDITURE_DECIMAL_PLACES


def total_expenditure(records: Iterable[Mapping[str, str]]) -> float:
    """
    Sum charging and parking fees across records.

    Args:
        records: Field mappings

    Returns:
        Total amount spent

    Examples:
        >>> total_expenditure([{"Charging-Fee": "$10", "Parking-Fee": "2.50"}])
        12.5
    """
    total = 0.0
    for fields in records:
        total += parse_money(fields.get(CHARGING_FEE))
        total += parse_money(fields.get(PARKING_FEE))
    return round(total, EXPENDITURE_DECIMAL_PLACES)


def last_full_charge_date(records: Iterable[Mapping[str, str]]) -> Optional[date]:
    """Latest Date among fully charged records, None if there is none."""
    latest = None
    for fields in records:
        if not parse_flag(fields.get(FULLY_CHARGED)):
            continue
        charged_on = parse_date(fields.get(DATE))
        if charged_on is None:
            continue
        if latest is None or charged_on > latest:
            latest = charged_on
    return latest


def days_since_last_full_charge(
    records: Iterable[Mapping[str, str]],
    today: Optional[date] = None
) -> Optional[int]:
    """
    Whole days between the last full charge and today.

    Examples:
        >>> days_since_last_full_charge(
        ...     [{"Date": "2024-03-01", "Fully-Charged": "yes"}],
        ...     today=date(2024, 3, 11),
        ... )
        10
    """
    latest = last_full_charge_date(records)
    if latest is None:
        return None
    today = today or date.today()
    return (today - latest).days


def dashboard_summary(
    records: Iterable[Mapping[str, str]],
    today: Optional[date] = None
) -> Dict[str, Any]:
    """Both dashboard figures plus the record count."""
    records = list(records)
    latest = last_full_charge_date(records)
    today = today or date.today()
    return {
        "total_expenditure": total_expenditure(records),
        "last_full_charge_date": latest.isoformat() if latest else None,
        "days_since_last_full_charge": (today - latest).days if latest else None,
        "record_count": len(records),
    }
