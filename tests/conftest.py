"""
Shared test fixtures for agent-hoppscotch tests.
Points the config store at a temp dir and clears credential env vars so
no test reads ~/.hoppscotch or reaches a real endpoint.
"""

import pytest

from hoppscotch_cli import config


@pytest.fixture(autouse=True)
def _isolate_config(monkeypatch, tmp_path):
    """Ensure every test starts with a clean config state."""
    monkeypatch.setenv(config.ENV_CONFIG_DIR, str(tmp_path / "hoppscotch"))
    monkeypatch.delenv(config.ENV_ENDPOINT, raising=False)
    monkeypatch.delenv(config.ENV_COOKIE, raising=False)
    monkeypatch.setattr(config, "HTTP_LOG_ENABLED", False)


@pytest.fixture
def store(tmp_path):
    return config.ConfigStore(str(tmp_path / "store"))


@pytest.fixture
def cfg():
    return config.EffectiveConfig(
        endpoint="https://hopp.example.com/graphql",
        cookie="access_token=secretcookie123",
        team_id="team-1",
        collection_id="coll-1",
    )
