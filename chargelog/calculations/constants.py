"""
Calculation Constants for ChargeLog

Centralized location for the constants used when coercing user input and
computing derived fields.
"""

# Flag parsing. This set is a versioned contract: adding a synonym changes
# how existing records are read.
TRUTHY_FLAGS = frozenset({"yes", "y", "true", "✓"})

# Money parsing keeps only these characters before conversion
MONEY_ALLOWED_CHARS = "0123456789.-"

# Time Constants
MINUTES_PER_HOUR = 60
MINUTES_PER_DAY = 1440  # Added to the end time when a session crosses midnight

# Display precision
DISTANCE_DECIMAL_PLACES = 2
UNIT_COST_DECIMAL_PLACES = 2
EXPENDITURE_DECIMAL_PLACES = 2

# Date formats accepted for the Date field, tried in order
DATE_FORMATS = [
    '%Y-%m-%d',      # 2024-01-31
    '%Y/%m/%d',      # 2024/01/31
    '%d/%m/%Y',      # 31/01/2024
    '%d-%b-%Y',      # 31-Jan-2024
    '%d %b %Y',      # 31 Jan 2024
    '%b %d, %Y',     # Jan 31, 2024
    '%B %d, %Y',     # January 31, 2024
]
