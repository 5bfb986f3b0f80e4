"""投票所エンドポイント"""
import logging
from typing import Optional, List, Sequence
from fastapi import APIRouter, Depends, Query, HTTPException

from ..config import DEFAULT_RADIUS_M, FIT_PADDING, MIN_REGION_SPAN, DEFAULT_REGION_SPAN
from ..schemas import (
    PlaceOut, PlaceDetailOut, RegionOut, CoordinateOut, RadiusOptionsOut,
    LocationIn, LocationOut,
)
from ..services.catalog import get_catalog, find_place
from ..services.location import LocationProvider, get_location_provider
from ..services.locator import nearby, fit_region, distance_between
from ..services.places import (
    Coordinate, Place, Region, SearchContext, RADIUS_PRESETS, format_distance,
    format_distance_detail, directions_url,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["polling-places"])

VOTING_HOURS = "6:00 AM - 7:00 PM"
VOTING_HOURS_NOTE = "Virginia polls are open from 6am to 7pm on Election Day."
ACCESSIBILITY = ("Wheelchair accessible", "Parking available")


def _place_to_out(place: Place) -> PlaceOut:
    style = place.type.style
    return PlaceOut(
        id=place.id,
        name=place.name,
        type=place.type.value,
        type_label=style["label"],
        icon=style["icon"],
        color=style["color"],
        address=place.address,
        latitude=place.coordinate.latitude,
        longitude=place.coordinate.longitude,
        distance_m=round(place.distance, 1) if place.distance is not None else None,
        distance_label=format_distance(place.distance) if place.distance is not None else None,
    )


def _reference(lat: Optional[float], lng: Optional[float], provider: LocationProvider) -> Coordinate:
    """lat/lngが両方指定されればそれを、無ければ現在地（既定地点）"""
    if lat is None and lng is None:
        return provider.last_known()
    if lat is None or lng is None:
        raise HTTPException(status_code=400, detail="lat と lng は両方指定してください")
    return Coordinate(lat, lng)


def _search(lat, lng, radius, catalog, provider) -> tuple:
    ctx = SearchContext(_reference(lat, lng, provider), radius)
    return ctx.reference, nearby(ctx.reference, catalog, ctx.radius_m)


@router.get("/polling-places/radii", response_model=RadiusOptionsOut)
def radius_options():
    return RadiusOptionsOut(presets=list(RADIUS_PRESETS), default=DEFAULT_RADIUS_M)


@router.get("/polling-places/nearby", response_model=List[PlaceOut])
def nearby_polling_places(
    lat: Optional[float] = Query(None, ge=-90, le=90, description="緯度（省略時は現在地）"),
    lng: Optional[float] = Query(None, ge=-180, le=180, description="経度（省略時は現在地）"),
    radius: int = Query(DEFAULT_RADIUS_M, description="半径 (m) 1000/5000/10000/25000"),
    catalog: Sequence[Place] = Depends(get_catalog),
    provider: LocationProvider = Depends(get_location_provider),
):
    ref, results = _search(lat, lng, radius, catalog, provider)
    logger.debug(f"Nearby: {len(results)} places within {radius}m of ({ref.latitude}, {ref.longitude})")
    return [_place_to_out(p) for p in results]


@router.get("/polling-places/region", response_model=RegionOut)
def fit_all_region(
    lat: Optional[float] = Query(None, ge=-90, le=90),
    lng: Optional[float] = Query(None, ge=-180, le=180),
    radius: int = Query(DEFAULT_RADIUS_M),
    padding: float = Query(FIT_PADDING, ge=1.0, le=10.0, description="余白倍率"),
    catalog: Sequence[Place] = Depends(get_catalog),
    provider: LocationProvider = Depends(get_location_provider),
):
    """全件表示用の地図範囲。結果が無ければ基準点中心の既定範囲"""
    ref, results = _search(lat, lng, radius, catalog, provider)
    if results:
        region = fit_region([p.coordinate for p in results], padding).with_min_span(MIN_REGION_SPAN)
    else:
        region = Region(ref, DEFAULT_REGION_SPAN, DEFAULT_REGION_SPAN)

    return RegionOut(
        center=CoordinateOut(latitude=region.center.latitude, longitude=region.center.longitude),
        latitude_delta=region.latitude_delta,
        longitude_delta=region.longitude_delta,
        place_count=len(results),
    )


@router.get("/polling-places/{place_id}", response_model=PlaceDetailOut)
def polling_place_detail(
    place_id: str,
    lat: Optional[float] = Query(None, ge=-90, le=90),
    lng: Optional[float] = Query(None, ge=-180, le=180),
    catalog: Sequence[Place] = Depends(get_catalog),
    provider: LocationProvider = Depends(get_location_provider),
):
    place = find_place(catalog, place_id)
    if not place:
        raise HTTPException(status_code=404, detail="投票所が見つかりません")

    place = place.with_distance(distance_between(_reference(lat, lng, provider), place.coordinate))

    return PlaceDetailOut(
        **_place_to_out(place).model_dump(),
        distance_detail=format_distance_detail(place.distance),
        voting_hours=VOTING_HOURS,
        voting_hours_note=VOTING_HOURS_NOTE,
        accessibility=list(ACCESSIBILITY),
        directions_url=directions_url(place),
    )


@router.get("/location", response_model=LocationOut)
def current_location(provider: LocationProvider = Depends(get_location_provider)):
    coord = provider.last_known()
    return LocationOut(latitude=coord.latitude, longitude=coord.longitude, has_fix=provider.has_fix)


@router.post("/location", response_model=LocationOut)
def update_location(body: LocationIn, provider: LocationProvider = Depends(get_location_provider)):
    provider.update(Coordinate(body.latitude, body.longitude))
    coord = provider.last_known()
    return LocationOut(latitude=coord.latitude, longitude=coord.longitude, has_fix=True)


@router.get("/health")
def health():
    return {"status": "ok"}
