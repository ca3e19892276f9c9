"""ChargeLog: a personal log of electric-vehicle charging sessions."""

__version__ = "1.0.0"
