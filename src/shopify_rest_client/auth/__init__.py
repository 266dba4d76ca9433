"""Session access for the Shopify REST client.

Credential acquisition is out of scope for this package; callers build a
:class:`Session` (or any object satisfying :class:`SessionProvider`) from
credentials they already hold.
"""

from .session import Session, SessionProvider

__all__ = ["Session", "SessionProvider"]
