# src/shot_chart/quality.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Callable, Iterable, Mapping, Sequence
import logging
import math

import pandas as pd

from shot_chart.records import Record

logger = logging.getLogger(__name__)


def _non_finite(value) -> bool:
    return not math.isfinite(value)


@dataclass
class RecordSchema:
    """Describe which Record fields we *expect* to be populated."""
    # field name -> predicate returning True when the value is invalid
    checks: Mapping[str, Callable[[Record], bool]] = field(default_factory=lambda: {
        "x": lambda r: _non_finite(r.position.x),
        "y": lambda r: _non_finite(r.position.y),
        "distance": lambda r: _non_finite(r.distance),
        "timestamp": lambda r: r.timestamp is None,
        "period": lambda r: r.period is None,
    })


def audit_records(records: Sequence[Record],
                  schema: RecordSchema | None = None) -> pd.DataFrame:
    """
    Return one row per checked field with the number of invalid values.
    Nothing is raised; caller decides how to log.
    """
    schema = schema or RecordSchema()
    total = len(records)
    rows = []
    for name, is_invalid in schema.checks.items():
        bad = sum(1 for r in records if is_invalid(r))
        rows.append({
            "field": name,
            "invalid_count": bad,
            "total_rows": total,
            "invalid_pct": 100 * bad / total if total else 0.0,
        })
    return pd.DataFrame(rows, columns=["field", "invalid_count", "total_rows", "invalid_pct"])


def log_audit(report: pd.DataFrame, *, name: str = "shots",
              fields: Iterable[str] | None = None) -> int:
    """Log a warning for every field with invalid values; returns how many fields were flagged."""
    flagged = report[report["invalid_count"] > 0]
    if fields is not None:
        flagged = flagged[flagged["field"].isin(list(fields))]
    for _, row in flagged.iterrows():
        logger.warning(
            f"[{name}] {row['field']}: {row['invalid_count']} of {row['total_rows']} "
            f"rows invalid ({row['invalid_pct']:.1f}%)"
        )
    if flagged.empty:
        logger.debug(f"[{name}] no invalid values found")
    return len(flagged)
