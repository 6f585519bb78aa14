"""
Reduce per-path metric rows into one summary
"""

import logging
import math
from typing import List, Sequence

from ga4cli.constants import SUMMED_FIELDS, WEIGHTED_FIELDS
from ga4cli.models import MetricRow, SummaryMetrics

logger = logging.getLogger(__name__)


def to_number(value) -> float:
    """Parse a metric value; anything unparseable counts as 0."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(number) or math.isinf(number):
        return 0.0
    return number


def number_to_str(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def weighted_average(values: Sequence[float], weights: Sequence[float]) -> float:
    total_weight = sum(weights)
    if total_weight == 0:
        return 0.0
    return sum(v * w for v, w in zip(values, weights)) / total_weight


def aggregate(rows: List[MetricRow]) -> SummaryMetrics:
    """
    Merge rows into summary metrics.

    - no rows: every metric is "0"
    - one row: the row's values, untouched
    - several rows: counts are summed, duration and rates are averaged
      weighted by each row's pageviews
    """
    if not rows:
        return SummaryMetrics()

    if len(rows) == 1:
        return SummaryMetrics.model_validate(
            rows[0].model_dump(include=set(SUMMED_FIELDS + WEIGHTED_FIELDS))
        )

    weights = [to_number(row.pageviews) for row in rows]
    summary = {}

    for field in SUMMED_FIELDS:
        summary[field] = number_to_str(sum(to_number(getattr(row, field)) for row in rows))

    for field in WEIGHTED_FIELDS:
        values = [to_number(getattr(row, field)) for row in rows]
        summary[field] = number_to_str(weighted_average(values, weights))

    logger.debug(f"Aggregated {len(rows)} rows over {summary['pageviews']} pageviews")
    return SummaryMetrics(**summary)
