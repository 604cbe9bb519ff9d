"""API routes for delivery zones that already exist on the backend."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, HTTPException, Response, status

from ...schemas.zones import DeliveryZone, DeliveryZoneUpdate
from ..errors import backend_http_error
from .imports import get_zone_client

router = APIRouter(prefix="/zones", tags=["zones"])


@router.get("/{store_identifier}", response_model=List[DeliveryZone], status_code=status.HTTP_200_OK)
def list_zones(store_identifier: str) -> List[DeliveryZone]:
    try:
        return get_zone_client().list_zones(store_identifier)
    except ConnectionError as exc:
        raise backend_http_error(exc) from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc


@router.patch("/{zone_id}", response_model=DeliveryZone, status_code=status.HTTP_200_OK)
def update_zone(zone_id: str, payload: DeliveryZoneUpdate) -> DeliveryZone:
    if not payload.to_payload():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No zone fields to update.")
    try:
        return get_zone_client().update_zone(zone_id, payload)
    except ConnectionError as exc:
        raise backend_http_error(exc) from exc


@router.delete("/{zone_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_zone(zone_id: str) -> Response:
    try:
        get_zone_client().delete_zone(zone_id)
    except ConnectionError as exc:
        raise backend_http_error(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)
