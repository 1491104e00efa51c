"""Tests for the run artifact store."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from userlens.errors import ArtifactIOError
from userlens.models import ChangeSet
from userlens.stores import ArtifactStore


def test_write_if_changed_skips_identical_payload(tmp_path: Path) -> None:
    store = ArtifactStore(tmp_path / "out")
    payload = [{"name": "LoginForm", "props": []}]

    assert store.write_if_changed("components", payload) is True
    mtime = store.path_for("components").stat().st_mtime_ns
    assert store.write_if_changed("components", payload) is False
    assert store.path_for("components").stat().st_mtime_ns == mtime

    assert store.write_if_changed("components", [{"name": "Navigation", "props": []}]) is True
    assert json.loads(store.path_for("components").read_text(encoding="utf-8"))[0]["name"] == "Navigation"


def test_unreadable_artifact_counts_as_changed(tmp_path: Path) -> None:
    store = ArtifactStore(tmp_path)
    store.path_for("patterns").write_text("{oops", encoding="utf-8")

    assert store.write_if_changed("patterns", []) is True
    assert store.path_for("patterns").read_text(encoding="utf-8") == "[]"


def test_reformatted_artifact_is_not_rewritten(tmp_path: Path) -> None:
    store = ArtifactStore(tmp_path)
    store.path_for("workflows").write_text('[{"name":"Form Submission"}]', encoding="utf-8")

    assert store.write_if_changed("workflows", [{"name": "Form Submission"}]) is False


def test_changeset_round_trip(tmp_path: Path) -> None:
    store = ArtifactStore(tmp_path / "out")
    assert store.load_changeset() is None

    changeset = ChangeSet(
        new_components=["src/A.jsx"],
        deleted_components=["src/B.jsx"],
        components_json_changed=True,
    )
    path = store.write_changeset(changeset)

    payload = json.loads(path.read_text(encoding="utf-8"))
    assert payload["newComponents"] == ["src/A.jsx"]
    assert payload["componentsJsonChanged"] is True
    assert store.load_changeset() == changeset


def test_fingerprint_depends_on_content_only() -> None:
    assert ArtifactStore.fingerprint({"a": 1}) == ArtifactStore.fingerprint({"a": 1})
    assert ArtifactStore.fingerprint({"a": 1}) != ArtifactStore.fingerprint({"a": 2})


def test_unwritable_output_dir_raises_artifact_error(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("file, not a directory", encoding="utf-8")
    store = ArtifactStore(blocker / "out")

    with pytest.raises(ArtifactIOError):
        store.write_changeset(ChangeSet())
