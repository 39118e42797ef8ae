"""Recurring scheduling & conflict engine for team sports."""

__version__ = "0.1.0"
