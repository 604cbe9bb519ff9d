"""Store directory lookup endpoints."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Query, status

from ...schemas.zones import StoreModel
from ...services.stores import get_store_resolver

router = APIRouter(prefix="/stores", tags=["stores"])


def _store_model(entry) -> StoreModel:
    return StoreModel(identifier=entry.identifier, display_name=entry.display_name)


@router.get("", response_model=List[StoreModel], status_code=status.HTTP_200_OK)
def list_stores() -> List[StoreModel]:
    return [_store_model(entry) for entry in get_store_resolver().entries]


@router.get("/resolve", status_code=status.HTTP_200_OK)
def resolve_store(
    name: str = Query(..., description="Free-text store name typed by the operator"),
    limit: int = Query(default=10, ge=1, le=100),
) -> dict:
    resolver = get_store_resolver()
    matches = resolver.search(name, limit=limit)
    return {
        "query": name,
        "identifier": resolver.resolve(name),
        "matches": [_store_model(entry).model_dump() for entry in matches],
    }


@router.post("/refresh", status_code=status.HTTP_200_OK)
def refresh_stores() -> dict:
    """Drop the cached store directory snapshot and load a fresh one."""
    get_store_resolver.cache_clear()
    return {"count": len(get_store_resolver().entries)}
