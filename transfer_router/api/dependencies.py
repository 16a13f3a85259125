"""Dependency injection for FastAPI endpoints"""

from fastapi import Request
from transfer_router.domain.paths import PathCacheRegistry
from transfer_router.infrastructure.clients.transfer_data import TransferDataClient

# Path memo for transfer data service snapshots, one cache per transfer matrix
path_cache_registry = PathCacheRegistry()


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_path_cache_registry() -> PathCacheRegistry:
    """Provide the process-wide path cache registry"""
    return path_cache_registry


def get_transfer_data_client() -> TransferDataClient:
    """Provide transfer data API client instance"""
    return TransferDataClient()
