"""
app/schemas/ad_imports.py

Request/response schemas for ad-export import endpoints.

Responses serialize with camelCase aliases, the shape the dashboard stores
and reads back.
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.domain.ad_export import CreativeRecord, DataType, ParseResult, TimeSeriesPoint

Number = Union[int, float]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AdImportTextRequest(BaseModel):
    """
    Raw CSV/TSV export pasted as text.
    """

    text: str = Field(..., min_length=1)


class TimeSeriesPointResponse(CamelModel):
    date: str
    impressions: Number | None = None
    clicks: Number | None = None
    conversions: Number | None = None
    cost: Number | None = None
    video_views: Number | None = None
    ctr: Number | None = None
    cpa: Number | None = None


class CreativeResponse(CamelModel):
    id: str
    creator: str
    game: str
    hook_type: str
    campaign_name: str
    launch_date: str
    impressions: int
    clicks: int
    installs: int
    spend: Number
    cpa: Number
    video_views: int = 0
    viewable_impressions: int = 0
    status: Literal["running", "paused"]
    budget: Number = 0
    campaign_type: str = ""
    bid_strategy: str = ""
    account: str = ""


class TimeSeriesResultResponse(CamelModel):
    type: Literal["timeseries"]
    data: list[TimeSeriesPointResponse]
    columns: list[str]
    stored: bool = False


class CreativesResultResponse(CamelModel):
    type: Literal["creatives"]
    data: list[CreativeResponse]
    columns: list[str]
    stored: bool = False


ParseResultResponse = Annotated[
    Union[TimeSeriesResultResponse, CreativesResultResponse],
    Field(discriminator="type"),
]


def creative_response(record: CreativeRecord) -> CreativeResponse:
    return CreativeResponse.model_validate(record.to_dict())


def parse_result_response(
    result: ParseResult,
    *,
    stored: bool = False,
) -> TimeSeriesResultResponse | CreativesResultResponse:
    """
    Convert a ParseResult into its typed API response.
    """

    columns = list(result.columns)
    if result.type is DataType.TIMESERIES:
        return TimeSeriesResultResponse(
            type="timeseries",
            data=[
                TimeSeriesPointResponse.model_validate(point.to_dict())
                for point in result.data
                if isinstance(point, TimeSeriesPoint)
            ],
            columns=columns,
            stored=stored,
        )
    return CreativesResultResponse(
        type="creatives",
        data=[creative_response(record) for record in result.data if isinstance(record, CreativeRecord)],
        columns=columns,
        stored=stored,
    )
