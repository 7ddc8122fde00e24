"""
File-based persistence.

- exchange_recorder.py: prompt/response capture for offline inspection

Storage Strategy:
- Two plain-text files per exchange, YYYYMMDD_HHMMSS prefix
- Capture directory created on first write
- Write failures logged as warnings, never surfaced to callers
"""

from codesplit.persistence.exchange_recorder import ExchangeRecorder

__all__ = [
    "ExchangeRecorder",
]
