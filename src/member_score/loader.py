"""Collaborator module loading.

The plugin needs its collaborators importable before any hook is
registered. A collaborator that cannot be imported aborts plugin boot.
"""

from __future__ import annotations

import importlib
import logging
from types import ModuleType
from typing import Mapping

logger = logging.getLogger(__name__)

DEPENDENCIES: Mapping[str, str] = {
    "i18n": "member_score.i18n",
    "admin": "member_score.admin",
    "public": "member_score.public",
    "integrations": "member_score.integrations",
}


class DependencyError(ImportError):
    """Raised when a collaborator module cannot be loaded."""

    def __init__(self, module: str, cause: BaseException):
        super().__init__(f"Required module {module!r} could not be loaded: {cause}", name=module)
        self.module = module


def load_dependencies(modules: Mapping[str, str] = DEPENDENCIES) -> dict[str, ModuleType]:
    """Import every collaborator module, keyed by its short name.

    Raises:
        DependencyError: On the first module that fails to import.
    """
    loaded = {}
    for key, module_name in modules.items():
        try:
            loaded[key] = importlib.import_module(module_name)
        except ImportError as exc:
            logger.critical("Cannot load %s: %s", module_name, exc)
            raise DependencyError(module_name, exc) from exc
    logger.debug("Loaded %d collaborator module(s)", len(loaded))
    return loaded
