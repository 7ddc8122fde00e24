"""
Structured results recovered from model responses, and persisted exchanges.
"""

from datetime import datetime
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

FilenamePlan = list[str]
"""Ordered proposed output filenames, first-seen order, duplicates kept."""


class SplitPair(BaseModel):
    """
    Source file and companion test file generated together.

    An empty ``test`` means no test content was recovered.
    """
    model_config = ConfigDict(frozen=True)

    source: str = Field(..., description="Source file content")
    test: str = Field(default="", description="Test file content, empty when absent")

    @property
    def has_test(self) -> bool:
        return bool(self.test)


class ExchangeRecord(BaseModel):
    """
    One captured prompt/response pair.

    Persisted as two sibling plain-text files sharing a timestamp prefix.
    """
    model_config = ConfigDict(frozen=True)

    timestamp: datetime
    prompt: str
    response: str
    request_path: Optional[Path] = None
    response_path: Optional[Path] = None
