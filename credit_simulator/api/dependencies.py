"""Dependency injection for FastAPI endpoints"""

from fastapi import Request
from credit_simulator.domain.comparison import ComparisonStore
from credit_simulator.infrastructure.clients.catalog import CatalogClient
from credit_simulator.infrastructure.clients.notifications import NotificationClient


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_catalog_client() -> CatalogClient:
    """Provide product catalog client instance"""
    return CatalogClient()


def get_notification_client() -> NotificationClient:
    """Provide mail webhook client instance"""
    return NotificationClient()


def get_comparison_store(request: Request) -> ComparisonStore:
    """Per-application store of session comparison baskets"""
    return request.app.state.comparison_store
