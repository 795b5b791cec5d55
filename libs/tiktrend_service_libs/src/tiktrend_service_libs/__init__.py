"""
TikTrend Service Libraries Package.

Shared infrastructure for TikTrend services: structured logging, error
handling, settings base classes, the typed Quart app and metrics middleware.
"""

from .quart_app import TikTrendApp

__all__ = ["TikTrendApp"]
