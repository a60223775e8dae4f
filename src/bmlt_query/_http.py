"""Internal HTTP session management."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

import requests

logger = logging.getLogger(__name__)


class _HttpSession:
    """
    Manages a requests.Session with reuse.

    The session is opened on first use and kept for the lifetime of the
    owning client so keep-alive connections are pooled by requests.
    Callers classify transport exceptions themselves; nothing is caught here.
    """

    def __init__(self, name: str):
        self._name = name
        self._session: requests.Session | None = None

    def get_session(self) -> requests.Session:
        """Return the open session, creating one if needed."""
        if self._session is None:
            logger.debug("Opening HTTP session for %s", self._name)
            self._session = requests.Session()
        return self._session

    def get(
        self,
        url: str,
        *,
        timeout: float,
        params: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> requests.Response:
        """Perform one blocking GET request."""
        return self.get_session().get(
            url, params=params, headers=headers, timeout=timeout
        )

    @property
    def is_open(self) -> bool:
        return self._session is not None

    def close(self) -> None:
        """Close the session if open."""
        if self._session is not None:
            self._session.close()
            self._session = None
