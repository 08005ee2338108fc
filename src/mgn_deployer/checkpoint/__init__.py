"""Checkpoint persistence for resumable deployments."""

from .store import CheckpointRecord, CheckpointStore

__all__ = ["CheckpointRecord", "CheckpointStore"]
