"""
Type-safe Quart application class for TikTrend services.

Provides typed attributes for app-level infrastructure instead of
setattr()/getattr() on a plain Quart instance.
"""

from __future__ import annotations

from typing import Any

from dishka import AsyncContainer
from quart import Quart


class TikTrendApp(Quart):
    """Quart application with guaranteed TikTrend infrastructure.

    GUARANTEED INFRASTRUCTURE (Non-Optional):
        container: Dishka async container for dependency injection
        extensions: Standard Quart extensions dictionary

    The container MUST be assigned in the service's create_app factory
    immediately after construction.

    Examples:
        >>> def create_app() -> TikTrendApp:
        ...     app = TikTrendApp(__name__)
        ...     app.container = make_async_container(...)
        ...     return app
    """

    container: AsyncContainer
    """Dishka async container for dependency injection."""

    extensions: dict[str, Any]
    """Quart extensions dictionary (metrics, etc.)."""

    def __init__(self, import_name: str, *args: Any, **kwargs: Any) -> None:
        super().__init__(import_name, *args, **kwargs)
        self.extensions = {}
