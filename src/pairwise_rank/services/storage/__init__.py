from .file_store import SnapshotStore

__all__ = ["SnapshotStore"]
