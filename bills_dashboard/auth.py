"""Resolve the user whose bills and subscriptions are shown.

Providers are tried in order and the first non-empty id wins:

1. the ``user_id`` stored in the (Streamlit) session state,
2. the ``BILLS_USER_ID`` environment variable,
3. ``config.DEFAULT_USER_ID``.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Callable, Mapping, Optional, Sequence

from . import config
from .errors import AuthenticationError

logger = logging.getLogger(__name__)

UserProvider = Callable[[], Optional[str]]
SESSION_USER_KEY = 'user_id'


def session_provider(session_state: Mapping[str, Any]) -> UserProvider:
    def _provider() -> Optional[str]:
        return session_state.get(SESSION_USER_KEY)
    _provider.__name__ = 'session'
    return _provider


def environment_provider(var_name: str = config.USER_ID_ENV_VAR) -> UserProvider:
    def _provider() -> Optional[str]:
        return os.getenv(var_name)
    _provider.__name__ = 'environment'
    return _provider


def default_provider() -> Optional[str]:
    return config.DEFAULT_USER_ID


class CurrentUserResolver:
    """Try each provider in turn and return the first user id found."""

    def __init__(self, providers: Sequence[UserProvider]):
        self.providers = list(providers)

    def current_user(self) -> str:
        for provider in self.providers:
            user_id = provider()
            if user_id is not None and str(user_id).strip():
                logger.debug("Resolved user via %s provider", getattr(provider, '__name__', provider))
                return str(user_id).strip()
        raise AuthenticationError("No signed-in user; set BILLS_USER_ID or sign in")


def default_resolver(session_state: Optional[Mapping[str, Any]] = None) -> CurrentUserResolver:
    providers = []
    if session_state is not None:
        providers.append(session_provider(session_state))
    providers.extend([environment_provider(), default_provider])
    return CurrentUserResolver(providers)
