"""
GA4 dimension and metric names used by the reports
"""

PAGE_PATH_DIMENSION = "pagePath"

# (GA4 metric name, model field name); order is the positional order of
# metric values in every path/summary response
REPORT_METRICS = [
    ("sessions", "sessions"),
    ("totalUsers", "total_users"),
    ("newUsers", "new_users"),
    ("screenPageViews", "pageviews"),
    ("eventCount", "event_count"),
    ("averageSessionDuration", "average_session_duration"),
    ("bounceRate", "bounce_rate"),
    ("engagementRate", "engagement_rate"),
]

REPORT_METRIC_NAMES = [name for name, _ in REPORT_METRICS]
REPORT_METRIC_FIELDS = [field for _, field in REPORT_METRICS]

PAGEVIEWS_INDEX = REPORT_METRIC_NAMES.index("screenPageViews")

SUMMED_FIELDS = ["sessions", "total_users", "new_users", "pageviews", "event_count"]
WEIGHTED_FIELDS = ["average_session_duration", "bounce_rate", "engagement_rate"]

REALTIME_METRICS = [
    ("activeUsers", "active_users"),
    ("screenPageViews", "pageviews"),
    ("eventCount", "event_count"),
]

TOP_PAGES_METRICS = [
    ("screenPageViews", "pageviews"),
    ("totalUsers", "total_users"),
    ("averageSessionDuration", "average_session_duration"),
    ("bounceRate", "bounce_rate"),
]
