"""Pydantic data models: the shared business objects.

The collaborators, the store, and the server all exchange these models,
so none of them depends on another's internals.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class NoticeLevel(str, Enum):
    """Admin notice severity."""

    SUCCESS = "success"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AssetKind(str, Enum):
    STYLE = "style"
    SCRIPT = "script"


class MemberScoreEntry(BaseModel):
    """A member's stored score, keyed by email."""

    email: str = Field(min_length=1, description="Member email, stored lowercased")
    score: float = Field(allow_inf_nan=False)
    updated_at: Optional[datetime] = None

    @field_validator("email")
    @classmethod
    def _normalise_email(cls, value: str) -> str:
        value = value.strip().lower()
        if not value:
            raise ValueError("email must not be blank")
        return value


class AdminNotice(BaseModel):
    """A message shown to the admin after a request is handled."""

    level: NoticeLevel
    message: str


class ExportFile(BaseModel):
    """A file download produced in response to an admin request."""

    filename: str
    content_type: str = "text/csv"
    body: str


class AdminRequest(BaseModel):
    """The admin page request passed to admin_init callbacks.

    Callbacks read ``action`` and ``files`` and write back ``notices`` and
    ``response``.
    """

    action: str = ""
    files: dict[str, str] = Field(default_factory=dict, description="Upload field name to file contents")
    can_manage_options: bool = True
    notices: list[AdminNotice] = Field(default_factory=list)
    response: Optional[ExportFile] = None

    def add_notice(self, level: NoticeLevel, message: str) -> None:
        self.notices.append(AdminNotice(level=level, message=message))


class Asset(BaseModel):
    """An enqueued stylesheet or script."""

    handle: str
    kind: AssetKind
    src: str
    deps: list[str] = Field(default_factory=list)
    version: Optional[str] = None
    media: str = "all"
    in_footer: bool = False
