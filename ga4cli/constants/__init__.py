"""
Constants for ga4cli reports
"""

from .metrics import (
    PAGE_PATH_DIMENSION,
    PAGEVIEWS_INDEX,
    REALTIME_METRICS,
    REPORT_METRIC_FIELDS,
    REPORT_METRIC_NAMES,
    REPORT_METRICS,
    SUMMED_FIELDS,
    TOP_PAGES_METRICS,
    WEIGHTED_FIELDS,
)

__all__ = [
    'PAGE_PATH_DIMENSION',
    'PAGEVIEWS_INDEX',
    'REALTIME_METRICS',
    'REPORT_METRIC_FIELDS',
    'REPORT_METRIC_NAMES',
    'REPORT_METRICS',
    'SUMMED_FIELDS',
    'TOP_PAGES_METRICS',
    'WEIGHTED_FIELDS',
]
