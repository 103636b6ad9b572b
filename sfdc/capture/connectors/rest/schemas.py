"""Pydantic schema for a REST query result page."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class RestQueryPage(BaseModel):
    """``{totalSize, done, records, nextRecordsUrl?}``"""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    total_size: int = Field(alias="totalSize", ge=0)
    done: bool
    records: list[Any]
    next_records_url: str | None = Field(default=None, alias="nextRecordsUrl")
