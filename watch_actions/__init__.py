"""Watch Actions - templated email actions for alerting rules."""

__version__ = "0.1.0"
