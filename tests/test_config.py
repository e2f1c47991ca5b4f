"""Tests for configuration, session handling and backend selection."""

from unittest.mock import patch

import pytest

from vibratodo.adapters.local_store import LocalTaskStore
from vibratodo.adapters.record_store import RecordStoreAdapter
from vibratodo.config import Config, Session, load_config
from vibratodo.repository import build_repository, resolve_backend


@pytest.fixture
def conf_file(tmp_path):
    return tmp_path / "vibratodo.conf"


@pytest.fixture(autouse=True)
def no_env_credentials(monkeypatch):
    monkeypatch.delenv("VIBRATODO_PROJECT_ID", raising=False)
    monkeypatch.delenv("VIBRATODO_PUBLIC_KEY", raising=False)


class TestLoadConfig:
    def test_missing_file_gives_defaults(self, conf_file):
        config = load_config(conf_file)
        assert config.store_backend == "auto"
        assert config.collection == "task5"
        assert config.request_timeout == 10.0

    def test_parses_values(self, conf_file):
        conf_file.write_text(
            "# VibraToDo settings\n"
            "STORE_BACKEND=remote\n"
            'API_BASE="https://store.test/api/" # trailing slash is dropped\n'
            "COLLECTION='tasks'\n"
            "REQUEST_TIMEOUT=2.5\n"
            "DATA_DIR=~/todo # inline comment\n"
            "not a setting\n"
        )
        config = load_config(conf_file)
        assert config.store_backend == "remote"
        assert config.api_base == "https://store.test/api"
        assert config.collection == "tasks"
        assert config.request_timeout == 2.5
        assert config.data_dir == "~/todo"

    def test_invalid_values_keep_defaults(self, conf_file):
        conf_file.write_text("STORE_BACKEND=cloud\nREQUEST_TIMEOUT=soon\n")
        config = load_config(conf_file)
        assert config.store_backend == "auto"
        assert config.request_timeout == 10.0

    def test_env_overrides_credentials(self, conf_file, monkeypatch):
        conf_file.write_text("PROJECT_ID=from-file\nPUBLIC_KEY=file-key\n")
        monkeypatch.setenv("VIBRATODO_PROJECT_ID", "from-env")
        config = load_config(conf_file)
        assert config.project_id == "from-env"
        assert config.public_key == "file-key"


class TestSession:
    def test_round_trip(self, tmp_path):
        session_file = tmp_path / "config" / ".session.json"
        with patch("vibratodo.config.SESSION_FILE", session_file):
            Session(project_id="p", public_key="k").save()
            loaded = Session.load()
            assert loaded.is_authenticated
            assert session_file.stat().st_mode & 0o777 == 0o600

            loaded.logout()
            assert not loaded.is_authenticated
            assert not session_file.exists()
            assert not Session.load().is_authenticated

    def test_config_credentials_win(self, tmp_path):
        with patch("vibratodo.config.SESSION_FILE", tmp_path / "missing.json"):
            session = Session.load(Config(project_id="p", public_key="k"))
        assert session.is_authenticated

    def test_corrupt_file(self, tmp_path):
        session_file = tmp_path / ".session.json"
        session_file.write_text("{")
        with patch("vibratodo.config.SESSION_FILE", session_file):
            assert not Session.load().is_authenticated

    @pytest.mark.parametrize("content", ['["p", "k"]', '"p:k"', "null", "7"])
    def test_file_without_object(self, tmp_path, content):
        session_file = tmp_path / ".session.json"
        session_file.write_text(content)
        with patch("vibratodo.config.SESSION_FILE", session_file):
            assert not Session.load().is_authenticated


class TestBackendSelection:
    def test_auto_without_api_base_is_local(self):
        assert resolve_backend(Config()) == "local"

    def test_auto_with_api_base_is_remote(self):
        assert resolve_backend(Config(api_base="https://store.test")) == "remote"

    def test_forced_local(self):
        assert resolve_backend(Config(store_backend="local", api_base="https://store.test")) == "local"

    def test_remote_requires_api_base(self):
        with pytest.raises(ValueError):
            resolve_backend(Config(store_backend="remote"))

    def test_builds_local_store(self, tmp_path):
        repo = build_repository(Config(data_dir=str(tmp_path)))
        assert isinstance(repo, LocalTaskStore)
        assert repo.data_dir == tmp_path

    def test_builds_remote_store(self):
        session = Session(project_id="p", public_key="k")
        repo = build_repository(Config(api_base="https://store.test"), session)
        assert isinstance(repo, RecordStoreAdapter)
        assert repo.session is session
