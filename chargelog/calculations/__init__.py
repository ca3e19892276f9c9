"""
ChargeLog Calculation Module

Field coercion, derived-field and dashboard calculations for charging
records. Everything here is pure: no I/O, no shared state.

Usage:
    from chargelog.calculations import apply_derived_fields, parse_money
    from chargelog.calculations.constants import TRUTHY_FLAGS
"""

# Field coercion
from .coercion import (
    TimeOfDay,
    format_decimal,
    format_minutes,
    parse_date,
    parse_decimal,
    parse_flag,
    parse_money,
    parse_time_of_day,
)

# Derived fields
from .derived import (
    UnitCosts,
    apply_derived_fields,
    compute_distance_added,
    compute_duration,
    compute_unit_costs,
)

# Dashboard statistics
from .dashboard import (
    dashboard_summary,
    days_since_last_full_charge,
    last_full_charge_date,
    total_expenditure,
)

__all__ = [
    # Coercion
    "TimeOfDay",
    "format_decimal",
    "format_minutes",
    "parse_date",
    "parse_decimal",
    "parse_flag",
    "parse_money",
    "parse_time_of_day",
    # Derived
    "UnitCosts",
    "apply_derived_fields",
    "compute_distance_added",
    "compute_duration",
    "compute_unit_costs",
    # Dashboard
    "dashboard_summary",
    "days_since_last_full_charge",
    "last_full_charge_date",
    "total_expenditure",
]
