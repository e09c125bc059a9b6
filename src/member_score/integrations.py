"""Registry of membership plugin integrations.

An integration adapter is any object with an ``is_active()`` method. What an
adapter does once active is up to the adapter; this registry only tracks
which ones exist.
"""

from __future__ import annotations

import logging
from typing import Optional, Protocol

logger = logging.getLogger(__name__)


class IntegrationAdapter(Protocol):
    def is_active(self) -> bool: ...


class MembershipPluginIntegrations:
    """Named integration adapters, in registration order."""

    def __init__(self):
        self._adapters: dict[str, IntegrationAdapter] = {}

    def register(self, name: str, adapter: IntegrationAdapter) -> None:
        if not name:
            raise ValueError("integration name must not be empty")
        if name in self._adapters:
            logger.warning("Replacing integration %s", name)
        self._adapters[name] = adapter

    def unregister(self, name: str) -> bool:
        return self._adapters.pop(name, None) is not None

    def get(self, name: str) -> Optional[IntegrationAdapter]:
        return self._adapters.get(name)

    def names(self) -> list[str]:
        return list(self._adapters)

    def active(self) -> dict[str, IntegrationAdapter]:
        """Adapters whose ``is_active()`` returns true."""
        return {name: a for name, a in self._adapters.items() if a.is_active()}
