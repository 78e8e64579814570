"""Diagnostic logger for backend calls.

Uses the standard ``logging`` module with the ``"universe_rng"`` logger.
No ``print()`` statements. Supports three verbosity levels and an
in-memory diagnostic mode for post-hoc analysis.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict
from typing import TYPE_CHECKING, Any

from universe_rng.config import LOG_LEVELS, check_choice

if TYPE_CHECKING:
    from universe_rng.config import UniverseRNGConfig
    from universe_rng.logging.types import ProviderCallRecord

logger = logging.getLogger("universe_rng")


class CallLogger:
    """Per-call diagnostic logger.

    Log levels:
        ``"none"``: No logging output. Records are still stored if
        ``diagnostic_mode=True``.

        ``"summary"``: One line per call with backend, operation, count,
        latency and outcome.

        ``"full"``: Full JSON dump of all record fields.

    Diagnostic mode stores all records in memory for post-hoc analysis via
    ``get_diagnostic_data()`` and ``get_summary_stats()``.
    """

    def __init__(self, config: UniverseRNGConfig) -> None:
        """Initialize the logger from configuration.

        Args:
            config: Configuration providing ``log_level`` and ``diagnostic_mode``.

        Raises:
            ValidationError: If ``log_level`` is not a known level.
        """
        self._log_level = check_choice("log_level", config.log_level, LOG_LEVELS)
        self._diagnostic_mode = config.diagnostic_mode
        self._records: list[ProviderCallRecord] = []

    def log_call(self, record: ProviderCallRecord) -> None:
        """Log a single backend call.

        Args:
            record: Immutable record of the call.
        """
        if self._diagnostic_mode:
            self._records.append(record)

        if self._log_level == "none":
            return

        if self._log_level == "summary":
            if record.success:
                logger.info(
                    "backend=%s op=%s count=%d elapsed=%.2fms%s",
                    record.backend,
                    record.operation,
                    record.count,
                    record.elapsed_ms,
                    f" requests_left={record.requests_left}"
                    if record.requests_left is not None
                    else "",
                )
            else:
                logger.warning(
                    "backend=%s op=%s count=%d elapsed=%.2fms failed: %s",
                    record.backend,
                    record.operation,
                    record.count,
                    record.elapsed_ms,
                    record.error_type,
                )
        elif self._log_level == "full":
            logger.info("call_record: %s", json.dumps(asdict(record), default=str))

    def get_diagnostic_data(self) -> list[ProviderCallRecord]:
        """Return all stored records (requires ``diagnostic_mode=True``)."""
        return list(self._records)

    def get_summary_stats(self) -> dict[str, Any]:
        """Compute summary statistics over all stored records.

        Returns:
            Dictionary with aggregate stats, or empty dict if no records.
        """
        if not self._records:
            return {}

        n = len(self._records)
        elapsed = [r.elapsed_ms for r in self._records]
        failures = sum(1 for r in self._records if not r.success)
        per_backend: dict[str, int] = {}
        for r in self._records:
            per_backend[r.backend] = per_backend.get(r.backend, 0) + 1

        return {
            "total_calls": n,
            "total_values": sum(r.count for r in self._records if r.success),
            "mean_elapsed_ms": sum(elapsed) / n,
            "max_elapsed_ms": max(elapsed),
            "failure_count": failures,
            "failure_rate": failures / n,
            "calls_per_backend": per_backend,
        }
