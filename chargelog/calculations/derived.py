"""
Derived Field Calculations

Computes the fields of a charging record that depend on other fields:
- Duration from starting/ending time (wraps past midnight)
- Distance added from starting/ending distance
- Cost per unit of energy and per unit of distance
"""

from typing import Any, Dict, Mapping, NamedTuple

from ..schema import (
    CHARGING_FEE,
    COST_PER_DISTANCE,
    COST_PER_ENERGY,
    DISTANCE_ADDED,
    DURATION,
    ENDING_DISTANCE,
    ENDING_TIME,
    ENERGY_ADDED,
    PARKING_FEE,
    STARTING_DISTANCE,
    STARTING_TIME,
    normalize_fields,
)
from .coercion import (
    format_decimal,
    format_minutes,
    parse_decimal,
    parse_money,
    parse_time_of_day,
)
from .constants import (
    DISTANCE_DECIMAL_PLACES,
    MINUTES_PER_DAY,
    UNIT_COST_DECIMAL_PLACES,
)


class UnitCosts(NamedTuple):
    cost_per_energy: str
    cost_per_distance: str


def compute_duration(start: str, end: str) -> str:
    """
    Calculate the length of a charging session as H:MM.

    If the end time is earlier than the start time the session crossed
    midnight and a day is added to the end. Equal times give 0:00.

    Args:
        start: Starting time (HH:MM)
        end: Ending time (HH:MM)

    Returns:
        Duration as H:MM, or "" if either time is invalid

    Examples:
        >>> compute_duration("22:00", "02:00")
        '4:00'
        >>> compute_duration("09:00", "17:30")
        '8:30'
        >>> compute_duration("", "10:00")
        ''
    """
    start_time = parse_time_of_day(start)
    end_time = parse_time_of_day(end)
    if start_time is None or end_time is None:
        return ""

    start_minutes = start_time.total_minutes()
    end_minutes = end_time.total_minutes()
    if end_minutes < start_minutes:
        end_minutes += MINUTES_PER_DAY

    return format_minutes(end_minutes - start_minutes)


def compute_distance_added(start_dist: str, end_dist: str) -> str:
    """
    Calculate the distance range added during a session.

    Negative results are returned as-is.

    Examples:
        >>> compute_distance_added("120", "310.5")
        '190.50'
        >>> compute_distance_added("", "310")
        ''
    """
    start_value = parse_decimal(start_dist)
    end_value = parse_decimal(end_dist)
    if start_value is None or end_value is None:
        return ""
    return format_decimal(end_value - start_value, DISTANCE_DECIMAL_PLACES)


def _cost_per_unit(total: float, divisor_raw: str) -> str:
    divisor = parse_decimal(divisor_raw)
    if divisor is None or divisor == 0:
        return ""
    return format_decimal(total / divisor, UNIT_COST_DECIMAL_PLACES)


def compute_unit_costs(
    charging_fee: str,
    parking_fee: str,
    energy_added: str,
    distance_added: str
) -> UnitCosts:
    """
    Calculate cost per energy unit and cost per distance unit.

    The total cost is charging fee plus parking fee. Each unit cost is only
    defined when its divisor parses to a nonzero number.

    Examples:
        >>> compute_unit_costs("10", "5", "0", "100")
        UnitCosts(cost_per_energy='', cost_per_distance='0.15')
    """
    total = parse_money(charging_fee) + parse_money(parking_fee)
    return UnitCosts(
        cost_per_energy=_cost_per_unit(total, energy_added),
        cost_per_distance=_cost_per_unit(total, distance_added),
    )


def apply_derived_fields(fields: Mapping[str, Any]) -> Dict[str, str]:
    """
    Return a normalized copy of a record's fields with derived fields recomputed.

    Cost per distance uses the freshly computed Distance-Added, not any value
    supplied by the caller.
    """
    record = normalize_fields(fields)

    record[DURATION] = compute_duration(record[STARTING_TIME], record[ENDING_TIME])
    record[DISTANCE_ADDED] = compute_distance_added(
        record[STARTING_DISTANCE], record[ENDING_DISTANCE]
    )

    costs = compute_unit_costs(
        record[CHARGING_FEE],
        record[PARKING_FEE],
        record[ENERGY_ADDED],
        record[DISTANCE_ADDED],
    )
    record[COST_PER_ENERGY] = costs.cost_per_energy
    record[COST_PER_DISTANCE] = costs.cost_per_distance

    return record
