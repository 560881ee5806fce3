"""
Structured operation logging for the Snap API.
Index builds, match queries, provider calls and library generation all log
through one StructuredLogger so the lines share a single format.
"""

import logging
from typing import Any, Dict, List, Optional

MAX_VALUE_LENGTH = 50


def _truncate(value: str, limit: int = MAX_VALUE_LENGTH) -> str:
    return value[:limit] + "..." if len(value) > limit else value


class StructuredLogger:
    """Structured logger for index, matching and generation operations."""

    def __init__(self, name: str = "snap_api"):
        self.logger = logging.getLogger(name)
        self.logger.setLevel(logging.INFO)

        # Create handler if not already set
        if not self.logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            )
            handler.setFormatter(formatter)
            self.logger.addHandler(handler)

    def log_operation(self, operation: str, status: str, details: Dict[str, Any] = None, level: int = logging.INFO):
        """Log a structured operation."""
        message = f"Operation: {operation}, Status: {status}"
        if details:
            message += f", Details: {details}"

        self.logger.log(level, message)

    def log_index_build(self, indexed: int, skipped: List[str], dimension: Optional[int], duration_ms: float):
        """Log the outcome of a similarity index build."""
        details = {
            "indexed": indexed,
            "skipped_count": len(skipped),
            "dimension": dimension,
            "duration_ms": duration_ms,
        }
        if skipped:
            details["skipped"] = skipped[:10]
            self.log_operation("index.build", "partial", details, level=logging.WARNING)
        else:
            self.log_operation("index.build", "success", details)

    def log_index_skip(self, identifier: str, reason: str):
        """Log a catalog entry left out of the index."""
        self.log_operation(
            "index.skip",
            "skipped",
            {"identifier": identifier, "reason": _truncate(reason, 200)},
            level=logging.WARNING,
        )

    def log_match(self, query_tags: List[str], identifier: Optional[str], score: Optional[float], status: str = "success"):
        """Log a best-match query."""
        details = {"query": _truncate(", ".join(query_tags))}
        if identifier is not None:
            details["identifier"] = identifier
        if score is not None:
            details["score"] = round(score, 4)
        level = logging.INFO if status == "success" else logging.WARNING
        self.log_operation("index.match", status, details, level=level)

    def log_provider_call(self, provider: str, operation: str, duration_ms: float, status: str = "success", details: Dict[str, Any] = None):
        """Log a call to an embedding or generation backend."""
        log_details = {"provider": provider, "duration_ms": duration_ms}
        if details:
            log_details.update(details)
        level = logging.INFO if status == "success" else logging.ERROR
        self.log_operation(f"provider.{operation}", status, log_details, level=level)

    def log_library_generation(self, processed: int, skipped: int, range_str: str, csv_path: Optional[str] = None, status: str = "success"):
        """Log an image library generation run."""
        details = {"processed": processed, "skipped": skipped, "range": range_str}
        if csv_path:
            details["csv_path"] = csv_path
        level = logging.INFO if status == "success" else logging.ERROR
        self.log_operation("library.generate", status, details, level=level)

    # Standard logging methods for compatibility
    def info(self, message: str) -> None:
        """Log an info message."""
        self.logger.info(message)

    def warning(self, message: str) -> None:
        """Log a warning message."""
        self.logger.warning(message)

    def error(self, message: str) -> None:
        """Log an error message."""
        self.logger.error(message)

    def debug(self, message: str) -> None:
        """Log a debug message."""
        self.logger.debug(message)

# Global logger instance
logger = StructuredLogger()
