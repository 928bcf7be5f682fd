"""
Debug trace logging for interpretations.

When VT_DEBUG=1 every interpretation is written as a JSON file (input, intermediate stage
values and result) into a session subfolder of the trace directory, so surprising parses
can be inspected after the fact.
"""

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from .config import config


class TraceLogger:
    """
    Writes per-interpretation JSON traces.

    Traces are stored in {trace_dir}/session_{timestamp}/ with one file per call.
    """

    def __init__(self, trace_dir: Optional[Path] = None, enabled: Optional[bool] = None):
        """
        Initialize trace logger.

        Args:
            trace_dir: Directory for trace storage, VT_TRACE_DIR when None
            enabled: Override debug enable flag, uses VT_DEBUG env var if None
        """
        self.trace_dir = Path(trace_dir) if trace_dir is not None else config.trace_dir
        self.enabled = enabled if enabled is not None else config.debug
        self.session_id = datetime.now().strftime("%Y%m%d_%H%M%S")
        self._counter = 0

        if self.enabled:
            self._setup_log_directory()

    def _setup_log_directory(self) -> None:
        """Create trace directory structure."""
        self.session_dir = self.trace_dir / f"session_{self.session_id}"
        self.session_dir.mkdir(parents=True, exist_ok=True)

    def log_interpretation(self, kind: str, text: str, stages: Dict[str, Any], result: Dict[str, Any]) -> Optional[Path]:
        """
        Log one interpretation.

        Args:
            kind: "utterance" or "query"
            text: Raw input text
            stages: Intermediate values worth keeping
            result: JSON-ready result

        Returns:
            Path of the written trace, or None when disabled
        """
        if not self.enabled:
            return None

        self._counter += 1
        timestamp = datetime.now().isoformat()
        log_data = {
            "timestamp": timestamp,
            "session_id": self.session_id,
            "type": kind,
            "input": text,
            "stages": stages,
            "result": result,
        }

        filename = f"{kind}_{self._counter:04d}_{timestamp.replace(':', '-').replace('.', '_')}.json"
        log_file = self.session_dir / filename

        with open(log_file, "w", encoding="utf-8") as f:
            json.dump(log_data, f, indent=2, ensure_ascii=False, default=str)
        return log_file


# Global trace logger instance
_trace_logger: Optional[TraceLogger] = None


def get_trace_logger() -> TraceLogger:
    """
    Get or create the global trace logger.

    The instance is rebuilt when the debug flag or trace directory changed since it was created.
    """
    global _trace_logger
    if _trace_logger is None or _trace_logger.enabled != config.debug or _trace_logger.trace_dir != config.trace_dir:
        _trace_logger = TraceLogger()
    return _trace_logger


def is_debug_enabled() -> bool:
    """Check if debug tracing is enabled via VT_DEBUG=1."""
    return config.debug
