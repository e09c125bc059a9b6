"""Host framework services exposed to plugins.

A `Host` bundles the hook registry with the asset queue and the text domain
registry. Plugins only touch the host through these three objects.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Optional

from .core.models import Asset, AssetKind
from .hooks import HookRegistry

logger = logging.getLogger(__name__)


class AssetQueue:
    """Stylesheets and scripts enqueued for the current page, keyed by (kind, handle)."""

    def __init__(self):
        self._assets: dict[tuple[AssetKind, str], Asset] = {}

    def enqueue_style(
        self,
        handle: str,
        src: str,
        deps: Iterable[str] = (),
        version: Optional[str] = None,
        media: str = "all",
    ) -> Asset:
        return self._enqueue(Asset(handle=handle, kind=AssetKind.STYLE, src=src, deps=list(deps), version=version, media=media))

    def enqueue_script(
        self,
        handle: str,
        src: str,
        deps: Iterable[str] = (),
        version: Optional[str] = None,
        in_footer: bool = False,
    ) -> Asset:
        return self._enqueue(Asset(handle=handle, kind=AssetKind.SCRIPT, src=src, deps=list(deps), version=version, in_footer=in_footer))

    def _enqueue(self, asset: Asset) -> Asset:
        key = (asset.kind, asset.handle)
        # First enqueue of a handle wins.
        if key in self._assets:
            return self._assets[key]
        self._assets[key] = asset
        logger.debug("Enqueued %s %s -> %s", asset.kind.value, asset.handle, asset.src)
        return asset

    def is_enqueued(self, handle: str, kind: AssetKind) -> bool:
        return (kind, handle) in self._assets

    def styles(self) -> list[Asset]:
        return [a for a in self._assets.values() if a.kind == AssetKind.STYLE]

    def scripts(self) -> list[Asset]:
        return [a for a in self._assets.values() if a.kind == AssetKind.SCRIPT]

    def clear(self) -> None:
        self._assets.clear()


class TextDomainRegistry:
    """Text domains registered by plugins, mapped to their languages directory."""

    def __init__(self):
        self._domains: dict[str, Path] = {}

    def load(self, domain: str, path: Path) -> bool:
        """Register `domain`. Returns whether its languages directory exists."""
        path = Path(path)
        self._domains[domain] = path
        if not path.is_dir():
            logger.warning("Languages directory for %s not found: %s", domain, path)
            return False
        logger.info("Loaded text domain %s from %s", domain, path)
        return True

    def is_loaded(self, domain: str) -> bool:
        return domain in self._domains

    def path_for(self, domain: str) -> Optional[Path]:
        return self._domains.get(domain)


class Host:
    """The services a plugin is composed into."""

    def __init__(
        self,
        hooks: Optional[HookRegistry] = None,
        assets: Optional[AssetQueue] = None,
        text_domains: Optional[TextDomainRegistry] = None,
    ):
        self.hooks = hooks or HookRegistry()
        self.assets = assets or AssetQueue()
        self.text_domains = text_domains or TextDomainRegistry()
