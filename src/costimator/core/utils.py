"""Utility functions and decorators."""

import logging.config
import math
import structlog
import yaml
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Type, Union
from kubernetes.utils import parse_quantity
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential


def retry_with_backoff(
    max_retries: int = 3,
    backoff_factor: float = 1.5,
    max_wait: float = 60.0,
    retry_on: Tuple[Type[BaseException], ...] = (Exception,)
):
    """Decorator for retry with exponential backoff."""
    return retry(
        stop=stop_after_attempt(max_retries),
        wait=wait_exponential(multiplier=backoff_factor, max=max_wait),
        retry=retry_if_exception_type(retry_on),
        reraise=True
    )


def setup_logging(config_path: Optional[Union[str, Path]] = None, log_level: str = "INFO",
                  json_format: bool = False) -> None:
    """Setup structured logging configuration.

    Logs render as JSON when a logging config file is used or json_format is set.
    """
    if config_path and Path(config_path).exists():
        with open(config_path, 'r') as f:
            config = yaml.safe_load(f)
        logging.config.dictConfig(config)
    else:
        logging.basicConfig(
            level=getattr(logging, log_level.upper()),
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer() if (config_path or json_format) else structlog.dev.ConsoleRenderer()
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def safe_get(dictionary: Dict[str, Any], key: str, default: Any = None) -> Any:
    """Safely get a value from a nested dictionary using dot notation."""
    keys = key.split('.')
    value = dictionary

    try:
        for k in keys:
            value = value[k]
        return default if value is None else value
    except (KeyError, TypeError):
        return default


def quantity_to_millis(quantity: Any) -> int:
    """Parse a Kubernetes quantity (e.g. '250m', '1', 2) to millis, rounding up."""
    if quantity is None or quantity == "":
        return 0
    return int(math.ceil(parse_quantity(quantity) * 1000))


def quantity_to_value(quantity: Any) -> int:
    """Parse a Kubernetes quantity (e.g. '64Mi', '64M', '1e3') to a whole value, rounding up.

    Binary suffixes (Ki, Mi, Gi, ...) and decimal suffixes (k, M, G, ...) are
    distinct: '64Mi' is 67108864 while '64M' is 64000000.
    """
    if quantity is None or quantity == "":
        return 0
    return int(math.ceil(parse_quantity(quantity)))


def format_bytes(bytes_value: float, unit: str = "auto") -> str:
    """Format bytes to human readable format."""
    if unit == "auto":
        for unit in ['B', 'KiB', 'MiB', 'GiB', 'TiB']:
            if bytes_value < 1024.0:
                return f"{bytes_value:.2f} {unit}"
            bytes_value /= 1024.0
        return f"{bytes_value:.2f} PiB"

    units = {'B': 1, 'KIB': 1024, 'MIB': 1024**2, 'GIB': 1024**3, 'TIB': 1024**4}
    if unit.upper() in units:
        return f"{bytes_value / units[unit.upper()]:.2f} {unit}"

    return str(bytes_value)


def format_cpu(millicores: float) -> str:
    """Format millicores to human readable format."""
    if millicores >= 1000:
        return f"{millicores / 1000:.2f} cores"
    return f"{millicores:.0f}m"
