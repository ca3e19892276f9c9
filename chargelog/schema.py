"""
Record schema for ChargeLog.

The field list is fixed and ordered; the order is also the CSV column order.
"""

from typing import Any, Dict, Mapping, Optional

DATE = "Date"
LOCATION = "Location"
STARTING_TIME = "Starting Time"
ENDING_TIME = "Ending Time"
DURATION = "Duration"
STARTING_DISTANCE = "Starting-Distance"
ENDING_DISTANCE = "Ending-Distance"
DISTANCE_ADDED = "Distance-Added"
CLAIMED_POWER = "Claimed-Power"
CLAIMED_CURRENT = "Claimed-Current"
DISTANCE_RATE = "Distance-Rate"
ENERGY_ADDED = "Energy-Added"
FULLY_CHARGED = "Fully-Charged"
FULL_DISTANCE = "Full-Distance"
CHARGING_FEE = "Charging-Fee"
PARKING_FEE = "Parking-Fee"
COST_PER_ENERGY = "Cost-Per-Energy"
COST_PER_DISTANCE = "Cost-Per-Distance"
ODOMETER = "Odometer"
MAINTENANCE_NOTE = "Maintenance-Note"
REMARKS = "Remarks"

SCHEMA = (
    DATE,
    LOCATION,
    STARTING_TIME,
    ENDING_TIME,
    DURATION,
    STARTING_DISTANCE,
    ENDING_DISTANCE,
    DISTANCE_ADDED,
    CLAIMED_POWER,
    CLAIMED_CURRENT,
    DISTANCE_RATE,
    ENERGY_ADDED,
    FULLY_CHARGED,
    FULL_DISTANCE,
    CHARGING_FEE,
    PARKING_FEE,
    COST_PER_ENERGY,
    COST_PER_DISTANCE,
    ODOMETER,
    MAINTENANCE_NOTE,
    REMARKS,
)

# Always recomputed from other fields, never edited directly
DERIVED_FIELDS = (DURATION, DISTANCE_ADDED, COST_PER_ENERGY, COST_PER_DISTANCE)


def _field_text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def normalize_fields(fields: Optional[Mapping[str, Any]]) -> Dict[str, str]:
    """
    Build a canonical field mapping in schema order.

    Unknown keys are dropped, missing keys become "" and None becomes "".
    """
    fields = fields or {}
    return {name: _field_text(fields.get(name)) for name in SCHEMA}
