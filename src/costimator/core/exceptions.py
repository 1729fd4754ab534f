"""Custom exceptions for the cost estimator."""

from typing import Optional, Dict, Any


DECODE_ERROR_PREFIX = "Error Decoding."


class CostimatorException(Exception):
    """Base exception for the cost estimator."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class DecodeException(CostimatorException):
    """Raised when a manifest cannot be decoded into a known kind and version."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(f"{DECODE_ERROR_PREFIX} {message}", details)


class PriceLookupException(CostimatorException):
    """Raised when the billing catalog cannot resolve a required unit price."""
    pass


class ClientConnectionException(CostimatorException):
    """Raised when client connections fail."""

    def __init__(self, client_type: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.client_type = client_type
        super().__init__(f"{client_type} connection failed: {message}", details)


class ConfigurationException(CostimatorException):
    """Raised when configuration is invalid."""
    pass
