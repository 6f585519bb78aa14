"""
Data models for GA4 Data API responses and the reports built from them
"""

from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Base model: camelCase on the wire, snake_case in Python"""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore"
    )


class DimensionValue(ApiModel):
    """Single dimension cell"""
    value: str = ""


class MetricValue(ApiModel):
    """Single metric cell; absent values read as zero"""
    value: str = "0"

    @field_validator("value", mode="before")
    @classmethod
    def _default_missing(cls, value):
        if value is None or value == "":
            return "0"
        return str(value)


class ResponseRow(ApiModel):
    """One row of a report response"""
    dimension_values: List[DimensionValue] = Field(default_factory=list)
    metric_values: List[MetricValue] = Field(default_factory=list)

    def dimension(self, index: int) -> str:
        if index < len(self.dimension_values):
            return self.dimension_values[index].value
        return ""

    def metric(self, index: int) -> str:
        if index < len(self.metric_values):
            return self.metric_values[index].value
        return "0"


class Header(ApiModel):
    """Dimension or metric column header"""
    name: str
    type: Optional[str] = None


class ReportResponse(ApiModel):
    """Response of runReport / runRealtimeReport"""
    dimension_headers: List[Header] = Field(default_factory=list)
    metric_headers: List[Header] = Field(default_factory=list)
    rows: List[ResponseRow] = Field(default_factory=list)
    totals: List[ResponseRow] = Field(default_factory=list)
    row_count: int = 0

    def first_row(self) -> ResponseRow:
        return self.rows[0] if self.rows else ResponseRow()

    def totals_row(self) -> ResponseRow:
        return self.totals[0] if self.totals else ResponseRow()


class PropertySummary(ApiModel):
    """GA4 property visible to the credentials"""
    property_id: str
    display_name: str = ""
    account: str = ""


class RealtimeSummary(ApiModel):
    """Activity over the last 30 minutes"""
    property_id: str
    active_users: str = "0"
    pageviews: str = "0"
    event_count: str = "0"


class MetricRow(ApiModel):
    """Eight report metrics for one concrete page path"""
    path: str = ""
    sessions: str = "0"
    total_users: str = "0"
    new_users: str = "0"
    pageviews: str = "0"
    event_count: str = "0"
    average_session_duration: str = "0"
    bounce_rate: str = "0"
    engagement_rate: str = "0"


class SummaryMetrics(ApiModel):
    """Eight report metrics without a path key"""
    sessions: str = "0"
    total_users: str = "0"
    new_users: str = "0"
    pageviews: str = "0"
    event_count: str = "0"
    average_session_duration: str = "0"
    bounce_rate: str = "0"
    engagement_rate: str = "0"


class ReportSummary(SummaryMetrics):
    """Property-wide summary for a date range"""
    property_id: str
    start_date: str
    end_date: str


class TopPage(ApiModel):
    """One ranked page"""
    path: str
    pageviews: str = "0"
    total_users: str = "0"
    average_session_duration: str = "0"
    bounce_rate: str = "0"


class TopPagesReport(ApiModel):
    """Pages ranked by pageviews"""
    property_id: str
    start_date: str
    end_date: str
    limit: int
    pages: List[TopPage] = Field(default_factory=list)


class AggregatedReport(SummaryMetrics):
    """Summary for one URL path, merged over every matching page path"""
    property_id: str
    path: str
    path_variants: List[str]
    start_date: str
    end_date: str
    match_type: str = "exact"
    by_path: List[MetricRow] = Field(default_factory=list)
