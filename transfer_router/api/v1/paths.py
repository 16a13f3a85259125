"""POST /v1/paths/cache/invalidate - reset memoized path discovery"""

import logging
from fastapi import APIRouter, Depends, Request

from transfer_router.api.v1.schemas import CacheInvalidationResponse
from transfer_router.api.dependencies import get_request_id, get_path_cache_registry
from transfer_router.domain.paths import PathCacheRegistry
from transfer_router.infrastructure.observability.metrics import path_cache_invalidations_counter

router = APIRouter()


@router.post("/paths/cache/invalidate", response_model=CacheInvalidationResponse)
def invalidate_path_cache(request: Request, path_caches: PathCacheRegistry = Depends(get_path_cache_registry)):
    """Drop every cached path for every transfer matrix"""
    cleared = path_caches.clear()
    path_cache_invalidations_counter.inc()
    logging.info("Path cache invalidated", extra={"request_id": get_request_id(request), "cleared": cleared})
    return CacheInvalidationResponse(cleared=cleared)
