"""Admin-area hooks: asset enqueueing, CSV score upload and CSV export.

An upload is handled in two steps. `user_upload` runs on admin_init, reads
the CSV and schedules one member_score_user_upload_add_batch event per
batch. Each batch is stored later by `member_score_user_upload` when the
host drains its scheduled events.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional

from . import store
from .config import PluginSettings, load_settings
from .core.csv_io import CSVImportError, chunk_rows, parse_member_rows, to_entries, write_member_csv
from .core.models import AdminRequest, ExportFile, NoticeLevel
from .hooks import USER_UPLOAD_ADD_BATCH
from .host import Host

logger = logging.getLogger(__name__)

UPLOAD_ACTION = "member_score_user_upload"
EXPORT_ACTION = "member_score_csv_export"
UPLOAD_FIELD = "member_score_csv"


class MemberScoreAdmin:
    """Callbacks for the admin side of the plugin."""

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
            f"{self.settings.assets_url}/admin/css/member-score-admin.css",
            version=self.version,
        )

    def enqueue_scripts(self, hook_suffix: Optional[str] = None) -> None:
        self.host.assets.enqueue_script(
            self.plugin_name,
            f"{self.settings.assets_url}/admin/js/member-score-admin.js",
            deps=["jquery"],
            version=self.version,
        )

    def user_upload(self, request: AdminRequest) -> int:
        """Schedule the batches of an uploaded score CSV.

        Returns the number of batches scheduled (0 when the request is not an
        upload or is rejected).
        """
        if request.action != UPLOAD_ACTION:
            return 0
        if not request.can_manage_options:
            request.add_notice(NoticeLevel.ERROR, "You are not allowed to upload member scores.")
            return 0

        text = request.files.get(UPLOAD_FIELD)
        if text is None:
            request.add_notice(NoticeLevel.ERROR, "No CSV file was uploaded.")
            return 0

        try:
            rows = parse_member_rows(text)
        except CSVImportError as exc:
            logger.warning("Rejected member score upload: %s", exc)
            request.add_notice(NoticeLevel.ERROR, f"Could not read the uploaded CSV: {exc}")
            return 0

        if not rows:
            request.add_notice(NoticeLevel.WARNING, "The uploaded CSV has no member rows.")
            return 0

        batches = chunk_rows(rows, self.settings.upload_batch_size)
        total = len(batches)
        for number, batch in enumerate(batches, start=1):
            self.host.hooks.schedule_single_event(USER_UPLOAD_ADD_BATCH, batch, number, total)

        logger.info("Scheduled %d row(s) in %d batch(es)", len(rows), total)
        request.add_notice(
            NoticeLevel.SUCCESS,
            f"Scheduled {len(rows)} member score(s) for import in {total} batch(es).",
        )
        return total

    async def member_score_user_upload(self, rows: list[dict], batch_number: int, total_batches: int) -> int:
        """Store one scheduled batch. Returns the number of members written."""
        entries, skipped = to_entries(rows)
        written = await store.upsert_scores(entries)
        if skipped:
            logger.warning("Batch %d/%d: skipped %d unreadable row(s)", batch_number, total_batches, skipped)
        logger.info("Batch %d/%d: stored %d member score(s)", batch_number, total_batches, written)

        # Skipped rows are totalled over one upload; the first batch starts a new total.
        previous = 0 if batch_number <= 1 else int(await store.get_meta("last_import_skipped") or 0)
        await store.set_meta("last_import_skipped", str(previous + skipped))

        if batch_number >= total_batches:
            await store.set_meta("last_import", datetime.utcnow().isoformat())
        return written

    async def csv_export(self, request: AdminRequest) -> Optional[ExportFile]:
        """Attach a CSV of every stored score to the request."""
        if request.action != EXPORT_ACTION:
            return None
        if not request.can_manage_options:
            request.add_notice(NoticeLevel.ERROR, "You are not allowed to export member scores.")
            return None

        entries = await store.list_entries()
        export = ExportFile(
            filename=f"{self.plugin_name}-export-{date.today().isoformat()}.csv",
            body=write_member_csv(entries),
        )
        request.response = export
        logger.info("Exported %d member score(s)", len(entries))
        return export
