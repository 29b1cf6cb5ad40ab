"""Backend API integration: HTTP client, demo provider and response models."""

from arbview.api.client import (
    AuthenticationRequiredError,
    DashboardAPIError,
    DashboardClient,
    DashboardClientError,
)
from arbview.api.demo import DemoDataSource
from arbview.api.source import DashboardDataSource


__all__ = [
    "AuthenticationRequiredError",
    "DashboardAPIError",
    "DashboardClient",
    "DashboardClientError",
    "DashboardDataSource",
    "DemoDataSource",
]
