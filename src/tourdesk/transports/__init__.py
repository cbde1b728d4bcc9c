"""Delivery transports to the remote hosting account."""

from .transports_base import DeliveryTransport, FallbackReport, OrderedFallback
from .transports_ftp import FtpTransport
from .transports_http import HttpTransport, parse_handler_reply

__all__ = [
    "DeliveryTransport",
    "FallbackReport",
    "FtpTransport",
    "HttpTransport",
    "OrderedFallback",
    "parse_handler_reply",
]
