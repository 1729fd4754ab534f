from .exceptions import *
from .base_client import BaseClient
from .utils import *

__all__ = [
    "BaseClient",
    "CostimatorException",
    "DecodeException",
    "PriceLookupException",
    "ClientConnectionException",
    "ConfigurationException",
    "retry_with_backoff",
    "setup_logging",
    "quantity_to_millis",
    "quantity_to_value",
]
