"""
Display formatting for metric values
"""

from enum import Enum

from ga4cli.domain.aggregator import to_number


class MetricKind(str, Enum):
    COUNT = "count"
    RATE = "rate"
    DURATION = "duration"


def format_rate(value) -> str:
    """
    Render a rate as a percentage with one decimal.

    The Data API is not consistent about rate scale: some endpoints
    return fractions (0.41), others percentages (41). Values strictly
    between 0 and 1 are taken as fractions and scaled; anything else is
    assumed to be a percentage already.
    """
    number = to_number(value)
    if 0 < number < 1:
        number *= 100
    return f"{number:.1f}"


def format_duration(value) -> str:
    """Seconds, one decimal"""
    return f"{to_number(value):.1f}"


def format_count(value) -> str:
    number = to_number(value)
    if number.is_integer():
        return str(int(number))
    return f"{number:.1f}"


_FORMATTERS = {
    MetricKind.COUNT: format_count,
    MetricKind.RATE: format_rate,
    MetricKind.DURATION: format_duration,
}


def format_metric(value, kind: MetricKind | str) -> str:
    return _FORMATTERS[MetricKind(kind)](value)


FIELD_KINDS = {
    "average_session_duration": MetricKind.DURATION,
    "bounce_rate": MetricKind.RATE,
    "engagement_rate": MetricKind.RATE,
}


def format_field(field: str, value) -> str:
    """Format a model field by its name"""
    return format_metric(value, FIELD_KINDS.get(field, MetricKind.COUNT))
