"""Run artifacts written to the output directory."""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Any, Optional

from ..errors import ArtifactIOError
from ..logging import get_logger
from ..models import ChangeSet

CHANGESET_NAME = "changeset"


def canonical_json(payload: Any) -> str:
    return json.dumps(payload, indent=2)


class ArtifactStore:
    """Writes ``<name>.json`` artifacts, skipping writes that would not change them."""

    def __init__(self, output_dir: Path) -> None:
        self.output_dir = output_dir
        self.logger = get_logger("stores.artifacts")

    @staticmethod
    def fingerprint(payload: Any) -> str:
        return hashlib.md5(canonical_json(payload).encode("utf-8")).hexdigest()

    def path_for(self, name: str) -> Path:
        return self.output_dir / f"{name}.json"

    def stored_fingerprint(self, name: str) -> Optional[str]:
        path = self.path_for(name)
        try:
            existing = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            self.logger.debug("Treating unreadable artifact %s as changed: %s", path, exc)
            return None
        return self.fingerprint(existing)

    def write_if_changed(self, name: str, payload: Any) -> bool:
        """Rewrite ``<name>.json`` when its content differs; return whether it did."""
        if self.stored_fingerprint(name) == self.fingerprint(payload):
            return False
        self._write(name, payload)
        return True

    def write_changeset(self, changeset: ChangeSet) -> Path:
        return self._write(CHANGESET_NAME, changeset.to_dict())

    def load_changeset(self) -> Optional[ChangeSet]:
        path = self.path_for(CHANGESET_NAME)
        try:
            return ChangeSet.from_dict(json.loads(path.read_text(encoding="utf-8")))
        except FileNotFoundError:
            return None
        except (OSError, json.JSONDecodeError, ValueError) as exc:
            self.logger.warning("Ignoring unreadable change set %s: %s", path, exc)
            return None

    def _write(self, name: str, payload: Any) -> Path:
        path = self.path_for(name)
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            path.write_text(canonical_json(payload), encoding="utf-8")
        except OSError as exc:
            raise ArtifactIOError(f"Cannot write {path}: {exc}") from exc
        return path


__all__ = ["ArtifactStore", "CHANGESET_NAME", "canonical_json"]
