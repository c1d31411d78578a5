"""Reading and writing trip snapshot files used by the CLI."""

import logging
from pathlib import Path

from pydantic import ValidationError

from .exceptions import SnapshotError
from .models import TripSnapshot

logger = logging.getLogger(__name__)


def load_snapshot(path: Path) -> TripSnapshot:
    """
    Load a trip snapshot from a JSON file.

    Args:
        path: Path to the snapshot file

    Returns:
        The parsed snapshot

    Raises:
        SnapshotError: If the file is missing or does not match the schema
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise SnapshotError(f"Cannot read snapshot {path}: {e}") from e

    try:
        snapshot = TripSnapshot.model_validate_json(raw)
    except ValidationError as e:
        raise SnapshotError(f"Invalid snapshot {path}:\n{e}") from e

    logger.debug(
        f"Loaded snapshot {path}: {len(snapshot.members)} members, "
        f"{len(snapshot.entries)} entries"
    )
    return snapshot


def save_snapshot(path: Path, snapshot: TripSnapshot) -> None:
    """Write a snapshot to a JSON file, replacing it atomically."""
    tmp_path = path.with_name(path.name + ".tmp")
    try:
        tmp_path.write_text(snapshot.model_dump_json(indent=2), encoding="utf-8")
        tmp_path.replace(path)
    except OSError as e:
        raise SnapshotError(f"Cannot write snapshot {path}: {e}") from e

    logger.info(f"Saved snapshot {path} ({len(snapshot.entries)} entries)")
