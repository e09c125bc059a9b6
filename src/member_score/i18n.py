"""Text domain registration for the plugin."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from .host import TextDomainRegistry

logger = logging.getLogger(__name__)


class MemberScoreI18n:
    """Registers the plugin text domain with the host on plugins_loaded."""

    def __init__(self, domain: str, text_domains: TextDomainRegistry, languages_dir: Path):
        self.domain = domain
        self.text_domains = text_domains
        self.languages_dir = Path(languages_dir)

    def load_plugin_textdomain(self, *_: Any) -> bool:
        return self.text_domains.load(self.domain, self.languages_dir)
