"""The core plugin class.

Wires the collaborators (i18n, admin, public, integrations) into a host:
builds one registration table mapping extension points to collaborator
callbacks and hands it to the host's hook registry.

Composition roots construct ``MemberScore(host)`` and call ``boot()``.
Code that just needs "the" plugin calls ``member_score()``, which boots a
shared instance on first use.
"""

from __future__ import annotations

import logging
from typing import Optional

from .config import PluginSettings, load_settings
from .hooks import (
    ADMIN_ENQUEUE_SCRIPTS,
    ADMIN_INIT,
    DEFAULT_PRIORITY,
    ENQUEUE_SCRIPTS,
    PLUGINS_LOADED,
    USER_UPLOAD_ADD_BATCH,
    HookBinding,
)
from .host import Host
from .loader import load_dependencies

logger = logging.getLogger(__name__)

PLUGIN_NAME = "member-score"
VERSION = "1.4.0"


class MemberScore:
    """Plugin name, version, collaborators and their hook registrations."""

    _instance: Optional["MemberScore"] = None

    def __init__(self, host: Optional[Host] = None, settings: Optional[PluginSettings] = None):
        self._plugin_name = PLUGIN_NAME
        self._version = VERSION
        self.host = host or Host()
        self.settings = settings or load_settings()

        self.i18n = None
        self.admin = None
        self.public = None
        self.integrations = None

        self._table: list[HookBinding] = []
        self._booted = False

    @classmethod
    def instance(cls, host: Optional[Host] = None) -> "MemberScore":
        """Return the shared instance, creating and booting it on first call.

        ``host`` only applies to the first call.
        """
        if cls._instance is None:
            cls._instance = cls(host).boot()
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        cls._instance = None

    @property
    def booted(self) -> bool:
        return self._booted

    def boot(self) -> "MemberScore":
        """Load collaborators and register their hooks. Runs once."""
        if self._booted:
            return self

        modules = load_dependencies()
        table = [
            *self._set_locale(modules["i18n"]),
            *self._define_admin_hooks(modules["admin"]),
            *self._define_public_hooks(modules["public"]),
        ]
        self.integrations = modules["integrations"].MembershipPluginIntegrations()

        self._table = table
        self.host.hooks.register_table(table)
        self._booted = True
        logger.info("%s %s booted with %d hook(s)", self._plugin_name, self._version, len(self._table))
        return self

    def hook_table(self) -> list[HookBinding]:
        return list(self._table)

    def _set_locale(self, i18n_module) -> list[HookBinding]:
        self.i18n = i18n_module.MemberScoreI18n(
            self.get_plugin_name(),
            self.host.text_domains,
            self.settings.languages_dir,
        )
        return [HookBinding(PLUGINS_LOADED, self.i18n.load_plugin_textdomain)]

    def _define_admin_hooks(self, admin_module) -> list[HookBinding]:
        self.admin = admin_module.MemberScoreAdmin(
            self.get_plugin_name(),
            self.get_version(),
            host=self.host,
            settings=self.settings,
        )

        return [
            HookBinding(ADMIN_ENQUEUE_SCRIPTS, self.admin.enqueue_styles),
            HookBinding(ADMIN_ENQUEUE_SCRIPTS, self.admin.enqueue_scripts),
            HookBinding(ADMIN_INIT, self.admin.user_upload),
            HookBinding(USER_UPLOAD_ADD_BATCH, self.admin.member_score_user_upload, DEFAULT_PRIORITY, 3),
            HookBinding(ADMIN_INIT, self.admin.csv_export),
        ]

    def _define_public_hooks(self, public_module) -> list[HookBinding]:
        self.public = public_module.MemberScorePublic(
            self.get_plugin_name(),
            self.get_version(),
            host=self.host,
            settings=self.settings,
        )

        return [
            HookBinding(ENQUEUE_SCRIPTS, self.public.enqueue_styles),
            HookBinding(ENQUEUE_SCRIPTS, self.public.enqueue_scripts),
        ]

    def get_plugin_name(self) -> str:
        """The name that identifies the plugin to the host and its text domain."""
        return self._plugin_name

    def get_version(self) -> str:
        return self._version


def member_score() -> MemberScore:
    """The shared, booted plugin instance."""
    return MemberScore.instance()
