"""Pydantic schemas for the Aura action envelope."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class AuraQueryStatus(BaseModel):
    """``returnValue.status`` block of the initial query response."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    query_id: str | None = Field(default=None, alias="queryId")
    row_count: int | None = Field(default=None, alias="rowCount")


class AuraQueryPage(BaseModel):
    """``returnValue`` of a query action: one page of rows."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    data_rows: list[Any] = Field(alias="dataRows")
    metadata: Any = None
    returned_rows: int | None = Field(default=None, alias="returnedRows")
    status: AuraQueryStatus | None = None

    @property
    def query_id(self) -> str | None:
        return self.status.query_id if self.status else None

    @property
    def row_count(self) -> int | None:
        return self.status.row_count if self.status else None


class AuraAction(BaseModel):
    """One entry of the ``actions`` array."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str | None = None
    state: str | None = None
    return_value: Any = Field(default=None, alias="returnValue")
    error: list[Any] = Field(default_factory=list)


class AuraEnvelope(BaseModel):
    """Top-level Aura response."""

    model_config = ConfigDict(extra="ignore")

    actions: list[AuraAction] = Field(min_length=1)
