"""Plugin settings read from the environment.

Data is stored in ~/.member-score by default. Every value can be overridden
with a MEMBER_SCORE_* environment variable.
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import BaseModel, Field

DEFAULT_DATA_DIR = os.path.expanduser("~/.member-score")
DEFAULT_UPLOAD_BATCH_SIZE = 100
DEFAULT_ASSETS_URL = "/plugins/member-score"
DEFAULT_CRON_INTERVAL_SECONDS = 60

PACKAGE_DIR = Path(__file__).resolve().parent


class PluginSettings(BaseModel):
    """Runtime configuration shared by the plugin collaborators."""

    data_dir: Path = Field(default_factory=lambda: Path(DEFAULT_DATA_DIR))
    upload_batch_size: int = Field(DEFAULT_UPLOAD_BATCH_SIZE, ge=1)
    assets_url: str = DEFAULT_ASSETS_URL
    languages_dir: Path = Field(default_factory=lambda: PACKAGE_DIR / "languages")
    cron_interval_seconds: int = Field(DEFAULT_CRON_INTERVAL_SECONDS, ge=1)


def load_settings() -> PluginSettings:
    """Build settings from MEMBER_SCORE_* environment variables."""
    env = os.environ
    return PluginSettings(
        data_dir=Path(env.get("MEMBER_SCORE_DATA_DIR", DEFAULT_DATA_DIR)),
        upload_batch_size=int(env.get("MEMBER_SCORE_UPLOAD_BATCH_SIZE", str(DEFAULT_UPLOAD_BATCH_SIZE))),
        assets_url=env.get("MEMBER_SCORE_ASSETS_URL", DEFAULT_ASSETS_URL).rstrip("/"),
        languages_dir=Path(env.get("MEMBER_SCORE_LANGUAGES_DIR", str(PACKAGE_DIR / "languages"))),
        cron_interval_seconds=int(env.get(
            "MEMBER_SCORE_CRON_INTERVAL_SECONDS",
            str(DEFAULT_CRON_INTERVAL_SECONDS),
        )),
    )
