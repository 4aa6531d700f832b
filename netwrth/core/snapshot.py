"""Record snapshots exported from the external store.

The hosted database owns the data; the CLI works on a JSON export of it
and never writes back.
"""

import json
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from netwrth.core.exceptions import SnapshotLoadError
from netwrth.core.models import Budget, Goal, Record
from netwrth.logging_setup import get_logger

logger = get_logger(__name__)


class Snapshot(BaseModel):
    """Point-in-time copy of a user's records."""

    expenses: list[Record] = Field(default_factory=list)
    income: list[Record] = Field(default_factory=list)
    budgets: list[Budget] = Field(default_factory=list)
    goals: list[Goal] = Field(default_factory=list)


def load_snapshot(path: Path) -> Snapshot:
    """Load and validate a snapshot file.

    Args:
        path: Path to a JSON snapshot.

    Returns:
        Validated Snapshot.

    Raises:
        SnapshotLoadError: If the file is missing, not JSON, or contains
            invalid records.
    """
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        raise SnapshotLoadError(f"Snapshot file not found: {path}") from None
    except OSError as e:
        raise SnapshotLoadError(f"Cannot read {path}: {e}") from e
    except UnicodeDecodeError as e:
        raise SnapshotLoadError(f"{path} is not valid UTF-8: {e}") from e
    except json.JSONDecodeError as e:
        raise SnapshotLoadError(f"Invalid JSON in {path}: {e}") from e

    try:
        snapshot = Snapshot.model_validate(raw)
    except ValidationError as e:
        first = e.errors()[0]
        loc = ".".join(str(p) for p in first["loc"])
        raise SnapshotLoadError(
            f"Invalid snapshot {path}: {loc}: {first['msg']} ({e.error_count()} errors)"
        ) from e

    logger.info(
        "Loaded %s: %d expenses, %d income, %d budgets, %d goals",
        path,
        len(snapshot.expenses),
        len(snapshot.income),
        len(snapshot.budgets),
        len(snapshot.goals),
    )
    return snapshot
