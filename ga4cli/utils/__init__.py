"""
Formatting and rendering helpers
"""

from .formatting import MetricKind, format_duration, format_field, format_metric, format_rate

__all__ = [
    'MetricKind',
    'format_duration',
    'format_field',
    'format_metric',
    'format_rate',
]
