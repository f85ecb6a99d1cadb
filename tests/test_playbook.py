import json
from pathlib import Path

import pytest

from src.ace_trail.trajectory import playbook
from src.ace_trail.utils import settings


@pytest.fixture
def ace_dir(tmp_path: Path) -> Path:
    return tmp_path / ".cursor" / "ace"


def test_state_file_name(ace_dir: Path) -> None:
    assert playbook.playbook_state_file("sess-1", ace_dir) == ace_dir / "patterns-used-sess-1.json"


def test_load_existing(ace_dir: Path) -> None:
    ace_dir.mkdir(parents=True)
    (ace_dir / "patterns-used-sess-1.json").write_text('["p1", "p2"]', encoding="utf-8")

    assert playbook.load_playbook_used("sess-1", ace_dir) == ["p1", "p2"]


def test_load_missing_file(ace_dir: Path) -> None:
    assert playbook.load_playbook_used("nope", ace_dir) == []


@pytest.mark.parametrize("content", ["{not json", '{"ids": ["p1"]}', "[1, 2]", "", '"p1"'])
def test_load_corrupt_state(ace_dir: Path, content: str) -> None:
    ace_dir.mkdir(parents=True)
    (ace_dir / "patterns-used-sess-1.json").write_text(content, encoding="utf-8")

    assert playbook.load_playbook_used("sess-1", ace_dir) == []


def test_load_empty_array(ace_dir: Path) -> None:
    ace_dir.mkdir(parents=True)
    (ace_dir / "patterns-used-sess-1.json").write_text("[]", encoding="utf-8")

    assert playbook.load_playbook_used("sess-1", ace_dir) == []


def test_save_creates_directory(ace_dir: Path) -> None:
    assert not ace_dir.exists()

    assert playbook.save_playbook_used("sess-1", ["p1"], ace_dir)

    state = ace_dir / "patterns-used-sess-1.json"
    assert json.loads(state.read_text(encoding="utf-8")) == ["p1"]


def test_save_overwrites(ace_dir: Path) -> None:
    playbook.save_playbook_used("sess-1", ["p1", "p2"], ace_dir)
    playbook.save_playbook_used("sess-1", ["p3"], ace_dir)

    assert playbook.load_playbook_used("sess-1", ace_dir) == ["p3"]


def test_save_load_round_trip_preserves_order(ace_dir: Path) -> None:
    ids = [f"pattern-{i}" for i in (5, 1, 9, 3, 7)]

    playbook.save_playbook_used("sess-1", ids, ace_dir)

    assert playbook.load_playbook_used("sess-1", ace_dir) == ids


def test_save_failure_reported(tmp_path: Path) -> None:
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("file", encoding="utf-8")

    assert playbook.save_playbook_used("sess-1", ["p1"], blocker / "ace") is False


def test_append_to_existing(ace_dir: Path) -> None:
    playbook.save_playbook_used("sess-1", ["p1"], ace_dir)

    result = playbook.append_playbook_used("sess-1", "p2", ace_dir)

    assert result == ["p1", "p2"]
    assert playbook.load_playbook_used("sess-1", ace_dir) == ["p1", "p2"]


def test_append_creates_new_list(ace_dir: Path) -> None:
    playbook.append_playbook_used("sess-1", "p1", ace_dir)

    assert playbook.load_playbook_used("sess-1", ace_dir) == ["p1"]


def test_append_is_idempotent(ace_dir: Path) -> None:
    playbook.append_playbook_used("sess-1", "p1", ace_dir)
    playbook.append_playbook_used("sess-1", "p1", ace_dir)

    assert playbook.load_playbook_used("sess-1", ace_dir) == ["p1"]


def test_sessions_are_independent(ace_dir: Path) -> None:
    playbook.append_playbook_used("a", "p1", ace_dir)
    playbook.append_playbook_used("b", "p2", ace_dir)

    assert playbook.load_playbook_used("a", ace_dir) == ["p1"]
    assert playbook.load_playbook_used("b", ace_dir) == ["p2"]


def test_default_dir_from_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv(settings.ACE_DIR_ENV_VAR, str(tmp_path / "state"))

    playbook.append_playbook_used("sess-1", "p1")

    assert (tmp_path / "state" / "patterns-used-sess-1.json").exists()


def test_default_dir_is_cursor_ace(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.delenv(settings.ACE_DIR_ENV_VAR, raising=False)
    monkeypatch.chdir(tmp_path)

    assert settings.resolve_ace_dir().resolve() == (tmp_path / ".cursor" / "ace").resolve()
    assert settings.resolve_ace_dir("/explicit") == Path("/explicit")
