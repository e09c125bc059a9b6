"""
Tests for the admin collaborator: asset enqueueing, the two-step CSV
upload (schedule batches, then store them), and CSV export.
"""

import pytest

from member_score import store
from member_score.admin import EXPORT_ACTION, UPLOAD_ACTION, UPLOAD_FIELD, MemberScoreAdmin
from member_score.core.models import AdminRequest, AssetKind, NoticeLevel
from member_score.hooks import ADMIN_ENQUEUE_SCRIPTS, ADMIN_INIT, USER_UPLOAD_ADD_BATCH
from member_score.host import Host
from member_score.plugin import MemberScore

CSV = (
    "email,score\n"
    "ann@example.com,10\n"
    "bob@example.com,7.5\n"
    "cy@example.com,3\n"
)


@pytest.fixture
def admin(host, settings):
    return MemberScoreAdmin("member-score", "1.4.0", host=host, settings=settings)


def upload_request(text=CSV, **kwargs):
    return AdminRequest(action=UPLOAD_ACTION, files={UPLOAD_FIELD: text}, **kwargs)


class TestAssets:

    def test_enqueue_styles(self, admin, host):
        admin.enqueue_styles()
        [style] = host.assets.styles()
        assert style.handle == "member-score"
        assert style.src == "/plugins/member-score/admin/css/member-score-admin.css"
        assert style.version == "1.4.0"

    def test_enqueue_scripts(self, admin, host):
        admin.enqueue_scripts()
        [script] = host.assets.scripts()
        assert script.handle == "member-score"
        assert script.deps == ["jquery"]
        assert host.assets.is_enqueued("member-score", AssetKind.SCRIPT)

    async def test_admin_enqueue_hook(self, plugin, host):
        await host.hooks.do_action(ADMIN_ENQUEUE_SCRIPTS)
        assert len(host.assets.styles()) == 1
        assert len(host.assets.scripts()) == 1


class TestUserUpload:
    """First step: read the CSV and schedule batches."""

    def test_schedules_batches(self, admin, host):
        request = upload_request()
        assert admin.user_upload(request) == 2

        events = host.hooks.pending_events
        assert [e.hook for e in events] == [USER_UPLOAD_ADD_BATCH] * 2
        rows, number, total = events[0].args
        assert [r["email"] for r in rows] == ["ann@example.com", "bob@example.com"]
        assert (number, total) == (1, 2)
        assert events[1].args[1:] == (2, 2)
        assert request.notices[0].level == NoticeLevel.SUCCESS

    def test_other_actions_ignored(self, admin, host):
        request = AdminRequest(action="something_else", files={UPLOAD_FIELD: CSV})
        assert admin.user_upload(request) == 0
        assert host.hooks.pending_events == []
        assert request.notices == []

    def test_requires_permission(self, admin, host):
        request = upload_request(can_manage_options=False)
        assert admin.user_upload(request) == 0
        assert host.hooks.pending_events == []
        assert request.notices[0].level == NoticeLevel.ERROR

    def test_missing_file(self, admin):
        request = AdminRequest(action=UPLOAD_ACTION)
        assert admin.user_upload(request) == 0
        assert "No CSV" in request.notices[0].message

    def test_unreadable_file(self, admin, host):
        request = upload_request("name,points\nann,1\n")
        assert admin.user_upload(request) == 0
        assert host.hooks.pending_events == []
        assert request.notices[0].level == NoticeLevel.ERROR

    def test_header_only_file(self, admin, host):
        request = upload_request("email,score\n")
        assert admin.user_upload(request) == 0
        assert request.notices[0].level == NoticeLevel.WARNING


class TestStoreBatch:
    """Second step: a scheduled batch is written to the store."""

    async def test_stores_rows(self, admin, db):
        rows = [{"email": "ann@example.com", "score": "10"}, {"email": "bad", "score": "x"}]
        assert await admin.member_score_user_upload(rows, 1, 2) == 1
        assert await store.get_score("ann@example.com") == 10.0
        assert await store.get_meta("last_import") is None

    async def test_final_batch_records_import(self, admin, db):
        await admin.member_score_user_upload([{"email": "ann@example.com", "score": "1"}], 2, 2)
        assert await store.get_meta("last_import") is not None

    async def test_skipped_rows_totalled_over_upload(self, admin, db):
        await admin.member_score_user_upload([{"email": "ann@example.com", "score": "1"}, {"email": "", "score": "2"}], 1, 2)
        await admin.member_score_user_upload([{"email": "bob@example.com", "score": "x"}], 2, 2)
        assert await store.get_meta("last_import_skipped") == "2"

    async def test_new_upload_resets_skipped_rows(self, admin, db):
        await admin.member_score_user_upload([{"email": "bad", "score": "x"}], 1, 1)
        await admin.member_score_user_upload([{"email": "ann@example.com", "score": "1"}], 1, 1)
        assert await store.get_meta("last_import_skipped") == "0"


class TestCsvExport:

    async def test_attaches_export(self, admin, db):
        await admin.member_score_user_upload([{"email": "ann@example.com", "score": "4"}], 1, 1)
        request = AdminRequest(action=EXPORT_ACTION)

        export = await admin.csv_export(request)

        assert request.response is export
        assert export.content_type == "text/csv"
        assert export.filename.startswith("member-score-export-")
        assert export.body == "email,score\nann@example.com,4\n"

    async def test_other_actions_ignored(self, admin, db):
        request = AdminRequest(action=UPLOAD_ACTION)
        assert await admin.csv_export(request) is None
        assert request.response is None

    async def test_requires_permission(self, admin, db):
        request = AdminRequest(action=EXPORT_ACTION, can_manage_options=False)
        assert await admin.csv_export(request) is None
        assert request.notices[0].level == NoticeLevel.ERROR


class TestThroughHooks:
    """The upload and export flow as the host drives it."""

    async def test_upload_then_export(self, plugin, host, db):
        request = upload_request()
        await host.hooks.do_action(ADMIN_INIT, request)
        assert request.response is None
        assert await host.hooks.run_scheduled() == 2
        assert await store.count_scores() == 3

        export_request = AdminRequest(action=EXPORT_ACTION)
        await host.hooks.do_action(ADMIN_INIT, export_request)
        assert export_request.response.body == (
            "email,score\n"
            "ann@example.com,10\n"
            "bob@example.com,7.5\n"
            "cy@example.com,3\n"
        )

    async def test_malformed_csv_becomes_notice(self, settings):
        host = Host()
        MemberScore(host, settings).boot()
        request = upload_request("email,score\n" + "a" * 200_000 + "@example.com,1\n")

        await host.hooks.do_action(ADMIN_INIT, request)

        assert [n.level for n in request.notices] == [NoticeLevel.ERROR]
        assert "Malformed CSV" in request.notices[0].message
        assert host.hooks.pending_events == []
