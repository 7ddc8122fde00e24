"""
Exchange capture for offline inspection.

Each successful call can be saved as two sibling plain-text files in a
capture directory:

    20260118_142530_request.txt   (the prompt)
    20260118_142530_response.txt  (the raw response text)

Capture is a debugging aid: write failures are logged and counted, never
raised. Filenames have one-second resolution, so two exchanges captured
within the same second overwrite each other.
"""

from collections.abc import Iterator
from datetime import datetime
from pathlib import Path
from typing import Optional

import structlog

from codesplit.models.split_models import ExchangeRecord
from codesplit.monitoring.metrics import capture_failures_total

logger = structlog.get_logger(__name__)

TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"
REQUEST_SUFFIX = "_request.txt"
RESPONSE_SUFFIX = "_response.txt"


class ExchangeRecorder:
    """
    Persists prompt/response pairs under a capture directory.

    The directory is created on first write (idempotent); nothing is
    touched on construction.
    """

    def __init__(self, directory: Path | str):
        self.directory = Path(directory)

    def paths_for(self, timestamp: datetime) -> tuple[Path, Path]:
        """Return (request_path, response_path) for a capture timestamp."""
        prefix = timestamp.strftime(TIMESTAMP_FORMAT)
        return (
            self.directory / f"{prefix}{REQUEST_SUFFIX}",
            self.directory / f"{prefix}{RESPONSE_SUFFIX}",
        )

    def record(
        self,
        prompt: str,
        response: str,
        timestamp: Optional[datetime] = None,
    ) -> Optional[ExchangeRecord]:
        """
        Write one exchange.

        Args:
            prompt: Prompt text sent to the model
            response: Raw response text
            timestamp: Capture time (default: now, local time)

        Returns:
            The persisted ExchangeRecord, or None if writing failed
        """
        timestamp = timestamp or datetime.now()
        request_path, response_path = self.paths_for(timestamp)

        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            request_path.write_text(prompt, encoding="utf-8")
            response_path.write_text(response, encoding="utf-8")
        except (OSError, ValueError) as e:
            capture_failures_total.inc()
            logger.warning(
                "Capture failed",
                directory=str(self.directory),
                error=str(e),
                error_type=type(e).__name__,
            )
            return None

        logger.info("Captured exchange", timestamp=timestamp.strftime(TIMESTAMP_FORMAT))
        return ExchangeRecord(
            timestamp=timestamp.replace(microsecond=0),
            prompt=prompt,
            response=response,
            request_path=request_path,
            response_path=response_path,
        )

    def iter_records(self) -> Iterator[ExchangeRecord]:
        """
        Yield captured exchanges, oldest first.

        Request files without a matching response file (or with an
        unparseable timestamp prefix) are skipped.
        """
        if not self.directory.is_dir():
            return

        for request_path in sorted(self.directory.glob(f"*{REQUEST_SUFFIX}")):
            prefix = request_path.name[: -len(REQUEST_SUFFIX)]
            try:
                timestamp = datetime.strptime(prefix, TIMESTAMP_FORMAT)
            except ValueError:
                continue

            response_path = self.directory / f"{prefix}{RESPONSE_SUFFIX}"
            if not response_path.is_file():
                logger.debug("Skipping incomplete exchange", prefix=prefix)
                continue

            yield ExchangeRecord(
                timestamp=timestamp,
                prompt=request_path.read_text(encoding="utf-8"),
                response=response_path.read_text(encoding="utf-8"),
                request_path=request_path,
                response_path=response_path,
            )

    def __repr__(self) -> str:
        return f"ExchangeRecorder(directory={self.directory})"
