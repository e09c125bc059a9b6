"""Front-end hooks: stylesheet and script for public pages."""

from __future__ import annotations

from typing import Optional

from .config import PluginSettings, load_settings
from .host import Host


class MemberScorePublic:
    """Enqueues the public assets under the plugin-name handle."""

    def __init__(
        self,
        plugin_name: str,
        version: str,
        host: Optional[Host] = None,
        settings: Optional[PluginSettings] = None,
    ):
        self.plugin_name = plugin_name
        self.version = version
        self.host = host or Host()
        self.settings = settings or load_settings()

    def enqueue_styles(self, hook_suffix: Optional[str] = None) -> None:
        self.host.assets.enqueue_style(
            self.plugin_name,
            f"{self.settings.assets_url}/public/css/member-score-public.css",
            version=self.version,
        )

    def enqueue_scripts(self, hook_suffix: Optional[str] = None) -> None:
        self.host.assets.enqueue_script(
            self.plugin_name,
            f"{self.settings.assets_url}/public/js/member-score-public.js",
            deps=["jquery"],
            version=self.version,
        )
