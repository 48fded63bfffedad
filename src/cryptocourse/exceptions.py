"""Custom exceptions for the course site and rate refresh endpoint.

Kept in one module so the rates and site packages can share them
without importing each other.
"""


class SiteError(Exception):
    """Base exception for all course site errors."""


class UpstreamError(SiteError):
    """Raised when the market-data provider fails or answers with a non-success status."""


class PersistenceError(SiteError):
    """Raised when a database read or write fails."""


class RatesFetchError(SiteError):
    """Raised when the page cannot fetch or parse the live rates response."""


class LeadValidationError(SiteError):
    """Raised when a lead form is submitted without any selected interest."""


class RelayTransportError(SiteError):
    """Raised when the lead relay request fails at the transport level."""
