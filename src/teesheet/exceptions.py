"""Exceptions for the teesheet scheduling engine."""


class TeesheetError(Exception):
    """Base exception for all teesheet errors."""


class ScheduleValidationError(TeesheetError):
    """Raised when generation inputs are malformed (missing week/season ids)."""


class ConfigurationError(TeesheetError):
    """Raised when a config file cannot be read or is invalid."""


class PairingHistoryError(TeesheetError):
    """Raised when the pairing history store cannot record or load pairings."""
