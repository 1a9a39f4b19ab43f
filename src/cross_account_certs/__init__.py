"""Cross-account ACM certificate and Route 53 record custom resources for AWS Lambda."""

from .config import HandlerSettings, load_settings
from .context import InvocationContext
from .dispatcher import handle_alias_event, handle_certificate_event

__all__ = [
    "HandlerSettings",
    "InvocationContext",
    "handle_alias_event",
    "handle_certificate_event",
    "load_settings",
]
