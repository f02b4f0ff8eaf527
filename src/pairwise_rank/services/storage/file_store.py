"""JSON file storage for rating snapshots."""

from __future__ import annotations

import os
from pathlib import Path

import structlog

from pairwise_rank.models import RatingSnapshot

logger = structlog.get_logger()


class SnapshotStore:
    """Load and save a RatingSnapshot as a single JSON document.

    Saves go to a temporary sibling file that is then renamed over the
    target, so a crash mid-write never leaves a truncated snapshot.
    """

    def __init__(self, path: str | Path) -> None:
        """Initialize snapshot store.

        Args:
            path: Location of the snapshot JSON file.
        """
        self.path = Path(path)

    @property
    def temp_path(self) -> Path:
        return self.path.with_name(self.path.name + ".tmp")

    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> RatingSnapshot:
        """Load the snapshot, or an empty one if the file does not exist."""
        if not self.path.exists():
            logger.debug("snapshot_missing", path=str(self.path))
            return RatingSnapshot()
        content = self.path.read_text(encoding="utf-8")
        snapshot = RatingSnapshot.model_validate_json(content)
        logger.debug(
            "snapshot_loaded",
            path=str(self.path),
            items=len(snapshot.items),
            history=len(snapshot.history),
        )
        return snapshot

    def save(self, snapshot: RatingSnapshot) -> Path:
        """Write the snapshot atomically."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        temp_path = self.temp_path
        try:
            temp_path.write_text(snapshot.model_dump_json(indent=2), encoding="utf-8")
            os.replace(temp_path, self.path)
        except OSError:
            temp_path.unlink(missing_ok=True)
            raise
        logger.debug("snapshot_saved", path=str(self.path), items=len(snapshot.items))
        return self.path
