import httpx
import pytest

from jimeng_errors.config import hierarchy


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep user/project config files and JIMENG_* env vars out of tests."""
    monkeypatch.setattr(hierarchy, "_GLOBAL_CONFIG_PATH", tmp_path / "global" / "config.yaml")
    monkeypatch.chdir(tmp_path)
    for env_key in hierarchy._ENV_MAP:
        monkeypatch.delenv(env_key, raising=False)


@pytest.fixture
def sleeps(monkeypatch):
    """Record retry delays instead of sleeping."""
    calls: list[float] = []

    async def fake_sleep(delay):
        calls.append(delay)

    monkeypatch.setattr("jimeng_errors.errors.handler.asyncio.sleep", fake_sleep)
    return calls


@pytest.fixture
def jimeng_request():
    return httpx.Request("POST", "https://jimeng.jianying.com/mweb/v1/aigc_draft/generate")
