"""
FilterExpression and OrderBy builders for the Data API
"""

from typing import Iterable

from google.analytics.data_v1beta.types import Filter, FilterExpression, OrderBy


def in_list_filter(field_name: str, values: Iterable[str], case_sensitive: bool = False) -> FilterExpression:
    return FilterExpression(
        filter=Filter(
            field_name=field_name,
            in_list_filter=Filter.InListFilter(
                values=list(values),
                case_sensitive=case_sensitive,
            ),
        )
    )


def begins_with_filter(field_name: str, value: str, case_sensitive: bool = False) -> FilterExpression:
    return FilterExpression(
        filter=Filter(
            field_name=field_name,
            string_filter=Filter.StringFilter(
                match_type=Filter.StringFilter.MatchType.BEGINS_WITH,
                value=value,
                case_sensitive=case_sensitive,
            ),
        )
    )


def order_by_metric(metric_name: str, desc: bool = True) -> OrderBy:
    return OrderBy(metric=OrderBy.MetricOrderBy(metric_name=metric_name), desc=desc)
