"""
Clients for external services
"""

from .api import ReportingClient

__all__ = ['ReportingClient']
