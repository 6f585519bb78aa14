"""
GA4 terminal client

Structure:
- clients/ - Data API / Admin API client and filter builders
- constants/ - Dimension and metric names
- domain/ - Path variants, aggregation, request-scoped entities
- utils/ - Metric formatting and headless rendering
- models.py - Pydantic response and report models
- service.py - Report workflows (realtime, summary, top pages, path lookup)
- config.py - Settings and the credential store
- cli.py - Command line entry point
- tui.py - Interactive dashboard
"""

from .clients import ReportingClient
from .config import Settings, load_settings
from .models import AggregatedReport
from .service import AnalyticsService, resolve_path_report

__all__ = [
    'AggregatedReport',
    'AnalyticsService',
    'ReportingClient',
    'Settings',
    'load_settings',
    'resolve_path_report',
]

__version__ = '1.0.0'
