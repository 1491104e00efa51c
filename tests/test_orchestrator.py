"""Tests for userlens.orchestrator."""

from __future__ import annotations

import json
import os
from pathlib import Path

import pytest

from tests._fixtures.project_builder import LOGIN_FORM, NAVIGATION
from userlens.analyzers import ReactExtractor
from userlens.config import UserLensConfig
from userlens.errors import CacheIOError
from userlens.models import ComponentCategory
from userlens.orchestrator import Orchestrator
from userlens.stores import ArtifactStore, ComponentCache

LOGIN = "src/components/LoginForm.jsx"


def _artifact_bytes(root: Path) -> dict[str, bytes]:
    out = root / "userlens-analysis"
    return {name: (out / f"{name}.json").read_bytes() for name in ("components", "patterns", "workflows")}


def test_first_run_records_everything_as_new(project_builder) -> None:
    files = project_builder.write_samples()
    result = Orchestrator(project_builder.path()).analyze_batch(files)

    assert [c.name for c in result.components] == ["LoginForm", "Navigation", "ProductSearch"]
    assert result.changeset.new_components == [
        "src/components/LoginForm.jsx",
        "src/components/Navigation.jsx",
        "src/components/ProductSearch.jsx",
    ]
    assert result.changeset.components_json_changed is True
    assert result.summary.misses == 3
    assert result.summary.succeeded

    login = result.components[0]
    assert login.file_path == LOGIN
    assert login.semantic_category is ComponentCategory.FORM
    assert any(action.type == "submit" for action in login.user_actions)

    components = json.loads(project_builder.path("userlens-analysis/components.json").read_text("utf-8"))
    assert components[0]["filePath"] == LOGIN
    assert len(list(project_builder.path(".userlens_cache/metadata").glob("*.json"))) == 3


def test_second_run_without_edits_is_idempotent(project_builder) -> None:
    files = project_builder.write_samples()
    orchestrator = Orchestrator(project_builder.path())
    first = orchestrator.analyze_batch(files)
    before = _artifact_bytes(project_builder.path())

    second = orchestrator.analyze_batch(files)

    assert second.changeset.is_empty()
    assert second.summary.hits == 3
    assert _artifact_bytes(project_builder.path()) == before
    assert [c.to_dict() for c in second.components] == [c.to_dict() for c in first.components]
    stored = ArtifactStore(project_builder.path("userlens-analysis")).load_changeset()
    assert stored is not None and stored.is_empty()


def test_changed_file_is_reported_and_rehashed(project_builder) -> None:
    files = project_builder.write_samples()
    orchestrator = Orchestrator(project_builder.path())
    orchestrator.analyze_batch(files)

    updated = LOGIN_FORM.replace("redirectUrl, ", "redirectUrl, onForgotPassword, ")
    project_builder.write({LOGIN: updated})
    result = orchestrator.analyze_batch(files)

    assert result.changeset.changed_components == [LOGIN]
    assert result.changeset.new_components == []
    assert result.changeset.components_json_changed is True
    entry = ComponentCache(project_builder.path(".userlens_cache")).get(LOGIN)
    assert entry is not None
    assert entry.source_file_hash == ComponentCache.hash_content(
        project_builder.path(LOGIN).read_text(encoding="utf-8")
    )
    assert "onForgotPassword" in [p.name for p in entry.component_metadata.props]


def test_deleted_file_is_reported_and_evicted(project_builder) -> None:
    navigation = "src/components/Navigation"
    files = project_builder.write({LOGIN: LOGIN_FORM, navigation: NAVIGATION})
    orchestrator = Orchestrator(project_builder.path())
    first = orchestrator.analyze_batch(files)
    assert navigation in first.changeset.new_components

    project_builder.delete(navigation)
    result = orchestrator.analyze_batch([project_builder.path(LOGIN)])

    assert result.changeset.deleted_components == [navigation]
    assert result.summary.deleted == 1
    assert ComponentCache(project_builder.path(".userlens_cache")).get(navigation) is None
    assert [c.name for c in result.components] == ["LoginForm"]


def test_parse_failure_skips_file_and_keeps_prior_entry(project_builder) -> None:
    files = project_builder.write_samples()
    orchestrator = Orchestrator(project_builder.path())
    orchestrator.analyze_batch(files)
    cache = ComponentCache(project_builder.path(".userlens_cache"))
    original_hash = cache.get(LOGIN).source_file_hash

    project_builder.write({LOGIN: "const LoginForm = () => <div>;\n"})
    result = orchestrator.analyze_batch(files)

    assert result.summary.errors == 1
    assert result.summary.skipped == [LOGIN]
    assert not result.summary.succeeded
    assert [c.name for c in result.components] == ["Navigation", "ProductSearch"]
    assert LOGIN not in result.changeset.deleted_components
    assert LOGIN not in result.changeset.changed_components
    assert cache.get(LOGIN).source_file_hash == original_hash


def test_unreadable_file_is_skipped(project_builder) -> None:
    files = project_builder.write_samples()
    project_builder.path(LOGIN).write_bytes(b"\xff\xfe\x00")

    result = Orchestrator(project_builder.path()).analyze_batch(files)

    assert result.summary.skipped == [LOGIN]
    assert len(result.components) == 2


def test_legacy_absolute_file_path_is_normalized(project_builder) -> None:
    (path,) = project_builder.write({LOGIN: LOGIN_FORM})
    text = path.read_text(encoding="utf-8")
    cache = ComponentCache.create(project_builder.path(".userlens_cache"))
    legacy = ReactExtractor().parse_component(text, path, str(path))
    cache.store(LOGIN, ComponentCache.hash_content(text), legacy)

    result = Orchestrator(project_builder.path()).analyze_batch([path])

    assert result.summary.hits == 1
    assert result.components[0].file_path == LOGIN
    assert result.changeset.deleted_components == []
    assert result.changeset.new_components == []


def test_entry_recorded_under_another_checkout_is_not_deleted(project_builder) -> None:
    (path,) = project_builder.write({LOGIN: LOGIN_FORM})
    text = path.read_text(encoding="utf-8")
    cache = ComponentCache.create(project_builder.path(".userlens_cache"))
    legacy = ReactExtractor().parse_component(text, path, "/old/checkout/" + LOGIN)
    cache.store(LOGIN, ComponentCache.hash_content(text), legacy)
    orchestrator = Orchestrator(project_builder.path())

    for _ in range(2):
        result = orchestrator.analyze_batch([path])
        assert result.summary.hits == 1
        assert result.summary.deleted == 0
        assert result.changeset.deleted_components == []
        assert result.components[0].file_path == LOGIN
    assert cache.get(LOGIN) is not None


def test_entry_recorded_under_another_checkout_is_evicted_by_key(project_builder) -> None:
    (path,) = project_builder.write({LOGIN: LOGIN_FORM})
    text = path.read_text(encoding="utf-8")
    cache = ComponentCache.create(project_builder.path(".userlens_cache"))
    legacy = ReactExtractor().parse_component(text, path, "/old/checkout/" + LOGIN)
    cache.store(LOGIN, ComponentCache.hash_content(text), legacy)
    orchestrator = Orchestrator(project_builder.path())

    first = orchestrator.analyze_batch([])
    second = orchestrator.analyze_batch([])

    assert first.changeset.deleted_components == ["/old/checkout/" + LOGIN]
    assert second.changeset.deleted_components == []
    assert cache.get(LOGIN) is None


def test_duplicate_paths_are_processed_once(project_builder) -> None:
    (path,) = project_builder.write({LOGIN: LOGIN_FORM})

    result = Orchestrator(project_builder.path()).analyze_batch([path, path, Path(LOGIN)])

    assert result.summary.processed == 1
    assert (result.summary.misses, result.summary.hits) == (1, 0)
    assert [c.name for c in result.components] == ["LoginForm"]
    assert result.changeset.new_components == [LOGIN]


def test_cache_write_failure_skips_file_and_keeps_prior_entry(project_builder, monkeypatch) -> None:
    files = project_builder.write_samples()
    orchestrator = Orchestrator(project_builder.path())
    orchestrator.analyze_batch(files)
    cache = ComponentCache(project_builder.path(".userlens_cache"))
    original_hash = cache.get(LOGIN).source_file_hash

    failing_target = cache.entry_path(LOGIN).name
    real_replace = os.replace

    def _replace(src, dst):
        if Path(dst).name == failing_target:
            raise OSError("disk full")
        return real_replace(src, dst)

    monkeypatch.setattr(os, "replace", _replace)
    updated = LOGIN_FORM.replace("redirectUrl, ", "redirectUrl, onForgotPassword, ")
    project_builder.write({LOGIN: updated})
    project_builder.write({"src/components/Navigation.jsx": NAVIGATION + "\n// footer\n"})
    result = orchestrator.analyze_batch(files)

    assert result.summary.skipped == [LOGIN]
    assert result.summary.errors == 1
    assert [c.name for c in result.components] == ["Navigation", "ProductSearch"]
    assert result.changeset.changed_components == ["src/components/Navigation.jsx"]
    assert LOGIN not in result.changeset.deleted_components
    assert cache.get(LOGIN).source_file_hash == original_hash
    assert list(cache.metadata_dir.glob("*.tmp")) == []


def test_cache_initialization_failure_is_fatal(project_builder) -> None:
    files = project_builder.write_samples()
    blocker = project_builder.path("blocker")
    blocker.write_text("file, not a directory", encoding="utf-8")
    config = UserLensConfig(root=project_builder.path(), cache_dir=blocker / "cache")

    with pytest.raises(CacheIOError):
        Orchestrator(config=config).analyze_batch(files)


def test_run_analyze_reads_configuration(project_builder) -> None:
    project_builder.write_samples()
    project_builder.write(
        {
            "ui/Button.jsx": "export default function Button({ onClick }) { return <button>Go</button>; }\n",
            ".userlens.yml": """
                entry: src
                output: analysis
                exclude_patterns: ["Navigation.jsx"]
                custom_mappings:
                  LoginForm: "Sign in with your company account"
            """,
        }
    )

    orchestrator = Orchestrator()
    result = orchestrator.run_analyze(project_builder.path())

    assert [c.name for c in result.components] == ["LoginForm", "ProductSearch"]
    assert result.components[0].description == "Sign in with your company account"
    assert project_builder.path("analysis/components.json").exists()

    override = orchestrator.run_analyze(project_builder.path(), entry="ui")
    assert [c.name for c in override.components] == ["Button"]
    assert sorted(override.changeset.deleted_components) == [
        "src/components/LoginForm.jsx",
        "src/components/ProductSearch.jsx",
    ]


def test_run_analyze_missing_project(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        Orchestrator().run_analyze(tmp_path / "missing")
