"""近隣投票所検索: 距離計算→半径フィルタ→距離順ソート、表示範囲の計算

すべて純粋関数。入力は変更せず新しいリストを返す。
"""
from typing import Iterable, List

from ..errors import InvalidArgument
from .geo import bounding_box, haversine_m, in_box
from .places import Coordinate, Place, Region

DEFAULT_PADDING = 1.3


def distance_between(a: Coordinate, b: Coordinate) -> float:
    """2地点間の大円距離（m）"""
    return haversine_m(a.latitude, a.longitude, b.latitude, b.longitude)


def compute_distances(reference_point: Coordinate, places: Iterable[Place]) -> List[Place]:
    """各Placeに基準点からの距離を入れたコピーを返す"""
    return [
        place.with_distance(distance_between(reference_point, place.coordinate))
        for place in places
    ]


def filter_and_sort(places: Iterable[Place], radius_meters: float) -> List[Place]:
    """半径以内（境界含む）を距離順に。同距離はid順。距離未計算は除外"""
    if radius_meters is None or not radius_meters > 0:
        raise InvalidArgument(f"radius must be positive (got {radius_meters})")

    within = [
        p for p in places
        if p.distance is not None and p.distance <= radius_meters
    ]
    within.sort(key=lambda p: (p.distance, p.id))
    return within


def fit_region(coordinates: Iterable[Coordinate], padding_factor: float = DEFAULT_PADDING) -> Region:
    """全座標が収まる表示範囲を返す

    外接矩形の中点を中心に、幅を padding_factor 倍する。
    座標が1点（または全点が同一）の場合は幅0のままになる。
    最小幅の底上げは呼び出し側の責任（Region.with_min_span を使う）。
    """
    coordinates = list(coordinates)
    if not coordinates:
        raise InvalidArgument("cannot fit a region to zero coordinates")
    if padding_factor is None or not padding_factor >= 1.0:
        raise InvalidArgument(f"padding factor must be >= 1.0 (got {padding_factor})")

    lats = [c.latitude for c in coordinates]
    lngs = [c.longitude for c in coordinates]
    min_lat, max_lat = min(lats), max(lats)
    min_lng, max_lng = min(lngs), max(lngs)

    center = Coordinate((min_lat + max_lat) / 2, (min_lng + max_lng) / 2)
    return Region(
        center=center,
        latitude_delta=(max_lat - min_lat) * padding_factor,
        longitude_delta=(max_lng - min_lng) * padding_factor,
    )


def nearby(reference_point: Coordinate, catalog: Iterable[Place], radius_meters: float) -> List[Place]:
    """近隣検索: バウンディングボックス→haversine精密計算"""
    if radius_meters is None or not radius_meters > 0:
        raise InvalidArgument(f"radius must be positive (got {radius_meters})")

    bbox = bounding_box(reference_point.latitude, reference_point.longitude, radius_meters)
    candidates = [
        p for p in catalog
        if in_box(p.coordinate.latitude, p.coordinate.longitude, bbox)
    ]
    return filter_and_sort(compute_distances(reference_point, candidates), radius_meters)
