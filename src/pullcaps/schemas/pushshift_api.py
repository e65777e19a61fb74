"""Pydantic schemas for PushShift response envelopes."""

from typing import Generic, TypeVar

from pydantic import BaseModel, Field

ItemT = TypeVar("ItemT", bound=BaseModel)


class PushShiftResponse(BaseModel, Generic[ItemT]):
    """Listing envelope returned by the search endpoints.

    Maps to: {"data": [...]}
    """

    data: list[ItemT] = Field(description="Records of this page, in server order")
