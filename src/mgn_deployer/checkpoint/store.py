"""JSON-file checkpoint store.

One document per environment maps a unit name to the identifier (contract
address) it produced. The file is the output artifact of a deployment task,
so it stays a flat ``{"name": "0x..."}`` object.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, Iterable, List, Union

from ..errors import CheckpointCorruptError, PersistFailedError

logger = logging.getLogger(__name__)

CheckpointRecord = Dict[str, str]


class CheckpointStore:
    """Loads and saves checkpoint records for one deployment task."""

    def __init__(
        self,
        output_dir: Union[str, Path],
        filename_template: str = "Checkpoint-{environment}.json",
    ) -> None:
        self.output_dir = Path(output_dir)
        self.filename_template = filename_template

    def path_for(self, environment: str) -> Path:
        return self.output_dir / self.filename_template.format(environment=environment)

    def load(self, environment: str) -> CheckpointRecord:
        """Return the persisted record, creating an empty file on first run."""
        path = self.path_for(environment)
        if not path.exists():
            logger.info("📄 No checkpoint at %s, starting fresh", path)
            try:
                self.save(environment, {})
            except PersistFailedError as exc:
                logger.warning("⚠️  %s", exc)
            return {}

        try:
            payload = json.loads(path.read_text(encoding="utf-8") or "{}")
        except json.JSONDecodeError as exc:
            raise CheckpointCorruptError(f"Checkpoint {path} is not valid JSON: {exc}") from exc
        if not isinstance(payload, dict):
            raise CheckpointCorruptError(
                f"Checkpoint {path} must contain a JSON object, got {type(payload).__name__}"
            )

        record: CheckpointRecord = {}
        for name, identifier in payload.items():
            if isinstance(identifier, str) and identifier:
                record[name] = identifier
            else:
                logger.warning("Ignoring checkpoint entry %r=%r in %s", name, identifier, path)
        return record

    def save(self, environment: str, record: CheckpointRecord) -> None:
        """Replace the stored record with ``record``.

        The document is written to a sibling temp file, flushed and fsynced,
        then renamed over the target, so readers see either the old or the new
        content and never a partial write.
        """
        path = self.path_for(environment)
        tmp_name = None
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            content = json.dumps(dict(record), indent=2)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=str(path.parent),
                prefix=f".{path.name}.",
                suffix=".tmp",
                delete=False,
            ) as handle:
                tmp_name = handle.name
                handle.write(content)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, path)
            tmp_name = None
        except (OSError, TypeError, ValueError) as exc:
            raise PersistFailedError(str(path), exc) from exc
        finally:
            if tmp_name is not None:
                try:
                    os.unlink(tmp_name)
                except OSError:
                    logger.debug("Could not remove temp file %s", tmp_name)

    @staticmethod
    def has(record: CheckpointRecord, name: str) -> bool:
        identifier = record.get(name)
        return isinstance(identifier, str) and bool(identifier)

    def discard(self, environment: str, names: Iterable[str]) -> List[str]:
        """Drop ``names`` from the stored record so they get deployed again."""
        record = self.load(environment)
        removed = [name for name in names if record.pop(name, None) is not None]
        if removed:
            self.save(environment, record)
            logger.warning("🗑️  Cleared checkpoint entries: %s", ", ".join(removed))
        return removed
