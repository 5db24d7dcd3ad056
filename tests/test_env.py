import os

import pytest

from tablescout.core.env import find_project_root, get_project_root, load_dotenv_if_present, resolve_project_path


@pytest.fixture
def fresh_env_caches():
    get_project_root.cache_clear()
    load_dotenv_if_present.cache_clear()
    yield
    get_project_root.cache_clear()
    load_dotenv_if_present.cache_clear()


def test_find_project_root_stops_at_pyproject_or_dotenv(tmp_path):
    (tmp_path / "pyproject.toml").write_text("[project]\nname = 'x'\n", encoding="utf-8")
    nested = tmp_path / "src" / "pkg"
    nested.mkdir(parents=True)
    assert find_project_root(nested) == tmp_path.resolve()

    other = tmp_path / "other"
    (other / "deep").mkdir(parents=True)
    (other / ".env").write_text("", encoding="utf-8")
    assert find_project_root(other / "deep") == other.resolve()


def test_project_root_override_and_path_resolution(monkeypatch, tmp_path, fresh_env_caches):
    monkeypatch.setenv("TABLESCOUT_PROJECT_ROOT", str(tmp_path))
    assert get_project_root() == tmp_path.resolve()
    assert resolve_project_path("data/catalogs/tables.json") == (tmp_path / "data/catalogs/tables.json").resolve()

    absolute = tmp_path / "elsewhere.json"
    assert resolve_project_path(absolute) == absolute


def test_project_root_is_discovered_from_cwd(monkeypatch, tmp_path, fresh_env_caches):
    monkeypatch.delenv("TABLESCOUT_PROJECT_ROOT", raising=False)
    (tmp_path / "pyproject.toml").write_text("", encoding="utf-8")
    (tmp_path / "sub").mkdir()
    monkeypatch.chdir(tmp_path / "sub")
    assert get_project_root() == tmp_path.resolve()


def test_dotenv_is_loaded_without_overriding_existing_vars(monkeypatch, tmp_path, fresh_env_caches):
    (tmp_path / ".env").write_text(
        "TABLESCOUT_TEST_FROM_FILE=file-value\nTABLESCOUT_TEST_PRESET=file-value\n", encoding="utf-8"
    )
    monkeypatch.setenv("TABLESCOUT_PROJECT_ROOT", str(tmp_path))
    monkeypatch.setenv("TABLESCOUT_TEST_PRESET", "process-value")
    # Registers the var with monkeypatch so whatever the .env sets is removed afterwards.
    monkeypatch.setenv("TABLESCOUT_TEST_FROM_FILE", "")
    monkeypatch.delenv("TABLESCOUT_TEST_FROM_FILE")

    assert load_dotenv_if_present() == tmp_path.resolve() / ".env"
    assert os.environ["TABLESCOUT_TEST_FROM_FILE"] == "file-value"
    assert os.environ["TABLESCOUT_TEST_PRESET"] == "process-value"


def test_missing_dotenv_returns_none(monkeypatch, tmp_path, fresh_env_caches):
    monkeypatch.setenv("TABLESCOUT_PROJECT_ROOT", str(tmp_path))
    assert load_dotenv_if_present() is None
