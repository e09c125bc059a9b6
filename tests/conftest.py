import pytest

from member_score.config import PluginSettings
from member_score.db import close_db, init_db
from member_score.hooks import HookRegistry
from member_score.host import Host
from member_score.plugin import MemberScore


@pytest.fixture(autouse=True)
def _isolated_env(tmp_path, monkeypatch):
    """Point the data directory at a temp dir and forget the shared instance."""
    monkeypatch.setenv("MEMBER_SCORE_DATA_DIR", str(tmp_path / "data"))
    MemberScore.reset_instance()
    yield
    MemberScore.reset_instance()


@pytest.fixture
async def db():
    await init_db()
    yield
    await close_db()


@pytest.fixture
def settings(tmp_path):
    return PluginSettings(data_dir=tmp_path / "data", upload_batch_size=2)


@pytest.fixture
def host():
    return Host(hooks=HookRegistry(strict=True))


@pytest.fixture
def plugin(host, settings):
    return MemberScore(host, settings).boot()
