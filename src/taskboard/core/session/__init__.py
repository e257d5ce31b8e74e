"""
Session handling for taskboard.

Provides the SessionContext passed to the store client, its on-disk
persistence, and the AuthService that drives its lifecycle.
"""

from taskboard.core.session.models import AuthResult, SessionContext
from taskboard.core.session.service import AuthBackend, AuthService
from taskboard.core.session.store import (
    SessionStore,
    SessionStoreError,
    get_default_session_path,
)

__all__ = [
    "AuthResult",
    "SessionContext",
    "AuthBackend",
    "AuthService",
    "SessionStore",
    "SessionStoreError",
    "get_default_session_path",
]
