#!/usr/bin/env python3
"""
cli.py
------
Shared CLI helpers: logger setup and run statistics.

Functions:
    setup_logger: Initialize DiaristLogger for CLI operations

Classes:
    SyncStats: Counters for one synchronization run

Usage:
    from diarist.core.cli import setup_logger, SyncStats

    logger = setup_logger(log_dir, "sync")
    stats = SyncStats.from_result(result)
    click.echo(stats.summary())
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, Optional

# --- Local imports ---
from diarist.core.logging_manager import DiaristLogger

if TYPE_CHECKING:
    from diarist.pipeline.sync import SyncResult


def setup_logger(
    log_dir: Path, component_name: str, verbose: bool = False
) -> DiaristLogger:
    """
    Setup logging for CLI operations.

    Creates ``<log_dir>/operations`` if needed and returns a logger for the
    component. With ``verbose`` the console also shows INFO messages.

    Args:
        log_dir: Base log directory (typically paths.LOG_DIR)
        component_name: Component identifier ('sync', 'cli', ...)
        verbose: Echo INFO and above to the console

    Returns:
        Configured DiaristLogger instance
    """
    operations_log_dir = Path(log_dir) / "operations"
    operations_log_dir.mkdir(parents=True, exist_ok=True)
    return DiaristLogger(
        operations_log_dir,
        component_name=component_name,
        console_level=logging.INFO if verbose else logging.WARNING,
    )


@dataclass
class SyncStats:
    """
    Counters for a synchronization run.

    Attributes:
        files_collected: Source files found in the directory
        entries_stored: Entries written under the new version
        entries_skipped: Entries already stored with identical content
        errors: Source files that could not be materialized
        cleanup_errors: Source files that could not be removed
        start_time: When the run started
    """

    files_collected: int = 0
    entries_stored: int = 0
    entries_skipped: int = 0
    errors: int = 0
    cleanup_errors: int = 0
    exec_version: Optional[int] = None
    start_time: datetime = field(default_factory=datetime.now)
    _duration_cached: Optional[float] = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        for name in (
            "files_collected",
            "entries_stored",
            "entries_skipped",
            "errors",
            "cleanup_errors",
        ):
            value = getattr(self, name)
            if value < 0:
                raise ValueError(f"{name} must be non-negative, got {value}")

    @classmethod
    def from_result(
        cls, result: "SyncResult", start_time: Optional[datetime] = None
    ) -> "SyncStats":
        """Build stats from a finished SyncResult."""
        return cls(
            files_collected=result.collected,
            entries_stored=result.stored,
            entries_skipped=result.skipped,
            errors=len(result.failures),
            cleanup_errors=len(result.cleanup_failures),
            exec_version=result.exec_version,
            start_time=start_time or datetime.now(),
        )

    def duration(self) -> float:
        """Elapsed seconds since start_time (cached after first call)."""
        if self._duration_cached is None:
            self._duration_cached = (datetime.now() - self.start_time).total_seconds()
        return self._duration_cached

    def summary(self) -> str:
        """Human-readable one-line summary."""
        parts = [
            f"{self.files_collected} files collected",
            f"{self.entries_stored} stored",
            f"{self.entries_skipped} unchanged",
            f"{self.errors} errors",
        ]
        if self.cleanup_errors:
            parts.append(f"{self.cleanup_errors} not removed")
        parts.append(f"{self.duration():.2f}s")
        return ", ".join(parts)

    def to_dict(self) -> Dict[str, Any]:
        """Dictionary form for JSON output and logs."""
        return {
            "files_collected": self.files_collected,
            "entries_stored": self.entries_stored,
            "entries_skipped": self.entries_skipped,
            "errors": self.errors,
            "cleanup_errors": self.cleanup_errors,
            "exec_version": self.exec_version,
            "duration": self.duration(),
        }
