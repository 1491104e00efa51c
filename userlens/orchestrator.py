"""Pipeline orchestration for incremental component analysis runs."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Iterable, List, Set

from .analyzers import ComponentExtractor, available_frameworks, get_extractor
from .config import ConfigError, UserLensConfig, load_config
from .errors import CacheIOError, HashingError, ParseError
from .logging import CACHE_DELETE, CACHE_HIT, CACHE_MISS, CACHE_STALE, get_logger, log_cache_event
from .models import AnalysisResult, ChangeSet, ComponentMetadata, RunSummary
from .nlp import PatternDetector
from .repo_scanner import ComponentScanner
from .stores import ArtifactStore, ComponentCache
from .stores.component_cache import normalize_relative

COMPONENTS_ARTIFACT = "components"
PATTERNS_ARTIFACT = "patterns"
WORKFLOWS_ARTIFACT = "workflows"


@dataclass
class _BatchState:
    """Bookkeeping for one ``analyze_batch`` call."""

    seen: Set[str] = field(default_factory=set)
    components: List[ComponentMetadata] = field(default_factory=list)
    new: List[str] = field(default_factory=list)
    changed: List[str] = field(default_factory=list)
    summary: RunSummary = field(default_factory=RunSummary)


class Orchestrator:
    """Coordinates extraction, caching, detection and artifact writes for a project."""

    def __init__(
        self,
        project_root: Path | str | None = None,
        *,
        config: UserLensConfig | None = None,
        extractor: ComponentExtractor | None = None,
        detector: PatternDetector | None = None,
        scanner: ComponentScanner | None = None,
    ) -> None:
        if config is None:
            root = Path(project_root or ".").expanduser().resolve()
            config = UserLensConfig(root=root)
        self.config = config
        self.detector = detector or PatternDetector()
        self.logger = get_logger("orchestrator")
        self._extractor_override = extractor
        self._scanner_override = scanner

    @property
    def project_root(self) -> Path:
        return self.config.root

    def run_analyze(
        self,
        path: Path | str | None = None,
        *,
        entry: str | None = None,
        output: str | None = None,
        framework: str | None = None,
        config_path: Path | str | None = None,
    ) -> AnalysisResult:
        """Load configuration, scan the entry directory and analyze every candidate.

        ``config_path`` names an explicit config file; otherwise ``.userlens.yml``
        is read from the project root.
        """
        project_root = Path(path).expanduser().resolve() if path is not None else self.project_root
        if not project_root.exists():
            raise FileNotFoundError(f"Project path not found: {project_root}")
        if not project_root.is_dir():
            raise NotADirectoryError(f"Project path is not a directory: {project_root}")

        if config_path is not None:
            config_file = Path(config_path).expanduser()
            if not config_file.is_file():
                raise ConfigError(f"Config file not found: {config_file}")
            config = load_config(config_file, root=project_root)
        else:
            config = load_config(project_root)
        if entry is not None:
            config = replace(config, entry=Path(entry))
        if output is not None:
            config = replace(config, output=Path(output))
        if framework is not None:
            if framework.lower() not in available_frameworks():
                supported = ", ".join(available_frameworks())
                raise ConfigError(f"Unsupported framework '{framework}' (supported: {supported})")
            config = replace(config, framework=framework.lower())
        self.config = config

        self.logger.info("Starting analysis of %s", config.entry)
        files = list(self._scanner().scan(config.root, config.entry))
        self.logger.debug("Scanner discovered %d candidate files", len(files))
        return self.analyze_batch(files)

    def analyze_batch(self, files: Iterable[Path | str]) -> AnalysisResult:
        """Analyze ``files`` against the cache and write run artifacts."""
        cache = ComponentCache.create(self.config.cache_dir)
        previous = cache.cached_paths(self.project_root)
        extractor = self._extractor()
        state = _BatchState()

        for file_path in files:
            self._process_file(Path(file_path), cache, extractor, state)

        seen_keys = {cache.key_for(relative_path) for relative_path in state.seen}
        removed = {key: path for key, path in previous.items() if key not in seen_keys}
        for key, relative_path in removed.items():
            cache.remove_key(key)
            log_cache_event(self.logger, CACHE_DELETE, relative_path)
        deleted = sorted(removed.values())
        state.summary.deleted = len(deleted)

        patterns = self.detector.detect_patterns(state.components)
        workflows = self.detector.detect_workflows(state.components)
        self.logger.debug(
            "Detected %d patterns and %d workflows across %d components",
            len(patterns),
            len(workflows),
            len(state.components),
        )

        store = ArtifactStore(self.config.output)
        changeset = ChangeSet(
            new_components=state.new,
            changed_components=state.changed,
            deleted_components=deleted,
            components_json_changed=store.write_if_changed(
                COMPONENTS_ARTIFACT, [component.to_dict() for component in state.components]
            ),
            patterns_json_changed=store.write_if_changed(
                PATTERNS_ARTIFACT, [pattern.to_dict() for pattern in patterns]
            ),
            workflows_json_changed=store.write_if_changed(
                WORKFLOWS_ARTIFACT, [workflow.to_dict() for workflow in workflows]
            ),
        )
        store.write_changeset(changeset)

        summary = state.summary
        self.logger.info("Analysis complete: %s", summary.describe())
        if summary.skipped:
            self.logger.warning(
                "%d file(s) could not be analyzed: %s", len(summary.skipped), ", ".join(summary.skipped)
            )
        return AnalysisResult(
            components=state.components,
            patterns=patterns,
            workflows=workflows,
            changeset=changeset,
            summary=summary,
        )

    # ------------------------------------------------------------------
    # Internal helpers

    def _process_file(
        self,
        path: Path,
        cache: ComponentCache,
        extractor: ComponentExtractor,
        state: _BatchState,
    ) -> None:
        absolute = path if path.is_absolute() else self.project_root / path
        relative_path = normalize_relative(str(absolute), self.project_root)
        if relative_path in state.seen:
            return
        state.seen.add(relative_path)
        state.summary.processed += 1

        if not extractor.supports(absolute):
            self.logger.debug("Ignoring unsupported file %s", relative_path)
            return

        try:
            source = cache.read_source(absolute)
            source_hash = cache.hash_content(source)
            entry = cache.get(relative_path)

            if entry is not None and entry.source_file_hash == source_hash:
                log_cache_event(self.logger, CACHE_HIT, relative_path)
                state.summary.hits += 1
                state.components.append(replace(entry.component_metadata, file_path=relative_path))
                return

            metadata = extractor.parse_component(source, absolute, relative_path)
            cache.store(relative_path, source_hash, metadata)
        except (ParseError, HashingError, CacheIOError) as exc:
            self._log_skip(relative_path, exc)
            state.summary.errors += 1
            state.summary.skipped.append(relative_path)
            return

        if entry is None:
            log_cache_event(self.logger, CACHE_MISS, relative_path)
            state.summary.misses += 1
            state.new.append(relative_path)
        else:
            log_cache_event(self.logger, CACHE_STALE, relative_path)
            state.summary.stale += 1
            state.changed.append(relative_path)
        state.components.append(metadata)

    def _extractor(self) -> ComponentExtractor:
        if self._extractor_override is not None:
            return self._extractor_override
        return get_extractor(self.config.framework, custom_mappings=self.config.custom_mappings)

    def _scanner(self) -> ComponentScanner:
        if self._scanner_override is not None:
            return self._scanner_override
        return ComponentScanner(self.config.exclude_patterns)

    def _log_skip(self, relative_path: str, exc: Exception) -> None:
        if self.logger.isEnabledFor(logging.DEBUG):
            self.logger.warning("Skipping %s: %s", relative_path, exc, exc_info=exc)
        else:
            self.logger.warning("Skipping %s: %s", relative_path, exc)


__all__ = ["Orchestrator"]
