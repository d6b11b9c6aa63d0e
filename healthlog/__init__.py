"""Offline daily health log: date-keyed record store and chart geometry."""

__version__ = "1.0.0"
