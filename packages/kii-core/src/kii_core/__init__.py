"""Kii IoT Core - endpoints, HTTP client and shared utilities."""

from .app import App
from .client import KiiClient
from .errors import KiiError, KiiRemoteError, KiiSerializationError, KiiTransportError
from .states import *

__version__ = "0.1.0"
__all__ = [
    "App",
    "KiiClient",
    "KiiError",
    "KiiRemoteError",
    "KiiSerializationError",
    "KiiTransportError",
    "LayoutPosition",
]
