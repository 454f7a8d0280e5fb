"""
Tests: export/writer.py and export/service.py
"""

import pytest

from prompt_manager.core.errors import HttpError
from prompt_manager.export.service import export_prompt
from prompt_manager.export.writer import write_prompt_file
from prompt_manager.storage import history, settings


# ──────────────────────────────────────────────────────────────────────────────
# Writer
# ──────────────────────────────────────────────────────────────────────────────

def test_write_leaves_only_the_target(tmp_path):
    target = tmp_path / "prompt.txt"
    assert write_prompt_file(str(target), "red hair") == 8
    assert sorted(p.name for p in tmp_path.iterdir()) == ["prompt.txt"]


def test_failed_replace_removes_temp_file(tmp_path):
    target = tmp_path / "taken"
    target.mkdir()

    with pytest.raises(HttpError) as excinfo:
        write_prompt_file(str(target), "text")
    assert excinfo.value.status_code == 400
    assert sorted(p.name for p in tmp_path.iterdir()) == ["taken"]
    assert list(target.iterdir()) == []


def test_blank_path_is_rejected():
    with pytest.raises(HttpError) as excinfo:
        write_prompt_file("  ", "text")
    assert excinfo.value.status_code == 400


# ──────────────────────────────────────────────────────────────────────────────
# Export service
# ──────────────────────────────────────────────────────────────────────────────

def test_export_of_empty_tokens_is_recorded(db, tmp_path):
    target = tmp_path / "prompt.txt"
    settings.update_settings(db, {"prompt_output_path": str(target)})

    result = export_prompt(db, [], "space")
    assert (result["bytes_written"], result["final_text"]) == (0, "")
    assert target.read_bytes() == b""

    entries = history.list_history(db)
    assert len(entries) == 1
    assert (entries[0]["source"], entries[0]["content"]) == ("export", "")


def test_failed_write_records_no_history(db, tmp_path):
    target = tmp_path / "taken"
    target.mkdir()
    settings.update_settings(db, {"prompt_output_path": str(target)})

    with pytest.raises(HttpError):
        export_prompt(db, ["a"], "space")
    assert history.list_history(db) == []
