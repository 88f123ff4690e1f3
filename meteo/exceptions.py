"""
Custom Exception Hierarchy for Meteo

Every failure the client or server can hit outside the protocol statuses
(SUCCESS / CITY_NOT_FOUND / INVALID_REQ are normal payload values, not errors).
All custom exceptions inherit from MeteoError and carry an ErrorCode so callers
can turn them into tagged outcomes.
"""
from typing import Optional

from meteo.models import ErrorCode


class MeteoError(Exception):
    """
    Base exception for all meteo-specific errors.

    Subclasses set ``code`` to the ErrorCode they report.
    """
    code: Optional[ErrorCode] = None

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


# Configuration Errors

class ConfigurationError(MeteoError):
    """Invalid settings or command-line values."""
    pass


# Protocol Errors

class ProtocolError(MeteoError):
    """
    Wire-level decoding failures.

    Base class for datagrams that cannot be turned into messages.
    """
    pass


class MalformedRequestError(ProtocolError):
    """Request datagram shorter than the 1-byte minimum."""
    code = ErrorCode.MALFORMED


class TruncatedResponseError(ProtocolError):
    """Response datagram shorter than the fixed 9-byte layout."""
    code = ErrorCode.TRUNCATED


# Client Input Errors

class InvalidInputError(MeteoError):
    """
    Request string cannot be split into a type and a city.

    Raised before any network activity takes place.
    """
    code = ErrorCode.INVALID_INPUT


# Network and Transport Errors

class TransportError(MeteoError):
    """
    Socket failures.

    Base class for all network communication errors.
    """
    code = ErrorCode.TRANSPORT_ERROR


class ResolutionError(TransportError):
    """Host name could not be resolved to an address."""
    pass


class BindError(TransportError):
    """Server socket could not be created or bound."""
    pass


class SendError(TransportError):
    """Failed to send a datagram."""
    pass


class ReceiveError(TransportError):
    """Failed to receive a datagram."""
    pass


class ReceiveTimeoutError(ReceiveError):
    """No datagram arrived before the receive timeout."""
    pass
