"""Base exception for adl."""


class AdlError(Exception):
    """Base exception for all adl failures surfaced to the user."""
