"""Short link registry and click analytics."""

from .shortcode import ShortCodeGenerator
from .service import ShortLinkRegistry
from .storage.models import ClickEvent, ShortLinkRecord

__all__ = ["ShortCodeGenerator", "ShortLinkRegistry", "ClickEvent", "ShortLinkRecord"]
