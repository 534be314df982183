"""Market-hours core of the tradedash trading dashboard."""

__version__ = "0.1.0"
