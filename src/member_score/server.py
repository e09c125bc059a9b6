"""MemberScore MCP server.

FastMCP server acting as the host for the plugin: it boots the plugin into
a `Host`, fires the host's extension points from tool calls, and drains
scheduled upload batches in the background.
Run: member-score-mcp
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations

from . import store
from .admin import EXPORT_ACTION, UPLOAD_ACTION, UPLOAD_FIELD
from .core.models import AdminRequest
from .db import close_db, init_db
from .hooks import ADMIN_ENQUEUE_SCRIPTS, ADMIN_INIT, ENQUEUE_SCRIPTS, PLUGINS_LOADED
from .plugin import MemberScore, member_score
from .scheduler import EventScheduler

logger = logging.getLogger(__name__)

READ_ONLY = ToolAnnotations(readOnlyHint=True, destructiveHint=False, idempotentHint=True, openWorldHint=False)
WRITES = ToolAnnotations(readOnlyHint=False, destructiveHint=True, idempotentHint=True, openWorldHint=False)

_scheduler: EventScheduler | None = None


@asynccontextmanager
async def lifespan(server: FastMCP) -> AsyncIterator[None]:
    """Initialize the database, boot the plugin, start the batch scheduler."""
    global _scheduler
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")
    plugin = member_score()
    await init_db(plugin.settings)
    await plugin.host.hooks.do_action(PLUGINS_LOADED)
    _scheduler = EventScheduler(plugin.host.hooks, plugin.settings.cron_interval_seconds)
    await _scheduler.start()
    try:
        yield
    finally:
        await _scheduler.stop()
        _scheduler = None
        await close_db()


mcp = FastMCP(
    "MemberScore",
    instructions="Upload, list and export member scores. Uploads are CSV text with an email,score header.",
    lifespan=lifespan,
)


def _plugin() -> MemberScore:
    return member_score()


def _notices(request: AdminRequest) -> list[dict]:
    return [n.model_dump(mode="json") for n in request.notices]


# ─── Tool 1: Plugin info ─────────────────────────────────────────────────────


@mcp.tool(annotations=READ_ONLY)
async def member_score_info() -> dict:
    """Plugin name, version, and the hooks it registered with the host."""
    plugin = _plugin()
    return {
        "name": plugin.get_plugin_name(),
        "version": plugin.get_version(),
        "hooks": [
            {
                "hook": b.hook,
                "callback": b.callback_name,
                "priority": b.priority,
                "accepted_args": b.accepted_args,
            }
            for b in plugin.hook_table()
        ],
        "integrations": plugin.integrations.names(),
        "stored_scores": await store.count_scores(),
    }


# ─── Tool 2: Upload ──────────────────────────────────────────────────────────


@mcp.tool(annotations=WRITES)
async def upload_member_scores(csv_text: str) -> dict:
    """Import member scores from CSV text.

    Args:
        csv_text: CSV with a header row containing 'email' and 'score' columns.
    """
    if not csv_text.strip():
        raise ValueError("csv_text must not be empty")

    plugin = _plugin()
    request = AdminRequest(action=UPLOAD_ACTION, files={UPLOAD_FIELD: csv_text})
    await plugin.host.hooks.do_action(ADMIN_INIT, request)
    batches = await plugin.host.hooks.run_scheduled()

    return {
        "title": "Member Score Upload",
        "batches": batches,
        "stored_scores": await store.count_scores(),
        "last_import": await store.get_meta("last_import"),
        "skipped_rows": int(await store.get_meta("last_import_skipped") or 0) if batches else 0,
        "notices": _notices(request),
    }


# ─── Tool 3: Export ──────────────────────────────────────────────────────────


@mcp.tool(annotations=READ_ONLY)
async def export_member_scores() -> dict:
    """Export every stored member score as CSV text."""
    plugin = _plugin()
    request = AdminRequest(action=EXPORT_ACTION)
    await plugin.host.hooks.do_action(ADMIN_INIT, request)

    if request.response is None:
        return {"title": "Member Score Export", "notices": _notices(request), "csv": ""}
    return {
        "title": "Member Score Export",
        "filename": request.response.filename,
        "content_type": request.response.content_type,
        "csv": request.response.body,
        "notices": _notices(request),
    }


# ─── Tool 4: List ────────────────────────────────────────────────────────────


@mcp.tool(annotations=READ_ONLY)
async def list_member_scores(limit: int = 100, offset: int = 0) -> dict:
    """Stored member scores, highest first.

    Args:
        limit: Maximum rows to return (1-1000). Default 100.
        offset: Rows to skip. Default 0.
    """
    if not 1 <= limit <= 1000:
        raise ValueError(f"limit must be between 1 and 1000, got {limit}")
    if offset < 0:
        raise ValueError(f"offset must not be negative, got {offset}")

    scores = await store.list_scores(limit=limit, offset=offset)
    total = await store.count_scores()
    return {
        "title": "Member Scores",
        "scores": scores,
        "total": total,
        "summary": f"Showing {len(scores)} of {total} member score(s)",
    }


# ─── Tools 5-6: Assets ───────────────────────────────────────────────────────


@mcp.tool(annotations=READ_ONLY)
async def admin_assets() -> dict:
    """Stylesheets and scripts the plugin enqueues on admin pages."""
    return await _assets_for(ADMIN_ENQUEUE_SCRIPTS)


@mcp.tool(annotations=READ_ONLY)
async def public_assets() -> dict:
    """Stylesheets and scripts the plugin enqueues on public pages."""
    return await _assets_for(ENQUEUE_SCRIPTS)


async def _assets_for(hook: str) -> dict:
    assets = _plugin().host.assets
    assets.clear()
    await _plugin().host.hooks.do_action(hook)
    return {
        "hook": hook,
        "styles": [a.model_dump(mode="json") for a in assets.styles()],
        "scripts": [a.model_dump(mode="json") for a in assets.scripts()],
    }


def main():
    """Entry point for the CLI command."""
    mcp.run()


if __name__ == "__main__":
    main()
