"""System-level services (state snapshot/restore)."""

from .snapshot import RestoredWorld, SnapshotService

__all__ = ["SnapshotService", "RestoredWorld"]
