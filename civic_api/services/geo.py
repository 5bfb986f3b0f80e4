"""位置計算ユーティリティ: モデル非依存のhaversine実装"""
import math

from ..errors import InvalidArgument

EARTH_RADIUS_M = 6_371_000.0
METERS_PER_DEGREE = 111_000.0  # 1度≈111km


def validate_coordinate(lat: float, lng: float) -> None:
    """緯度[-90, 90]・経度[-180, 180]の範囲外ならInvalidArgument"""
    if lat is None or lng is None:
        raise InvalidArgument("latitude and longitude are required")
    if math.isnan(lat) or math.isnan(lng):
        raise InvalidArgument("latitude/longitude must be numbers")
    if not -90.0 <= lat <= 90.0:
        raise InvalidArgument(f"latitude out of range: {lat}")
    if not -180.0 <= lng <= 180.0:
        raise InvalidArgument(f"longitude out of range: {lng}")


def haversine_m(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """2点間の距離をmで返す（haversine公式）"""
    lat1, lng1, lat2, lng2 = map(math.radians, [lat1, lng1, lat2, lng2])
    dlat = lat2 - lat1
    dlng = lng2 - lng1
    a = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlng / 2) ** 2
    # 丸め誤差で1をわずかに超えることがある
    return 2 * EARTH_RADIUS_M * math.asin(math.sqrt(min(1.0, a)))


def bounding_box(lat: float, lng: float, radius_m: float):
    """矩形バウンディングボックスを返す（粗いフィルタ用）"""
    dlat = radius_m / METERS_PER_DEGREE
    # 箱の中で最も極に近い緯度で経度幅を取る（取りこぼし防止）
    cos_lat = math.cos(math.radians(min(90.0, abs(lat) + dlat)))
    # 極付近では経度方向の幅が発散するので全経度を許す
    dlng = 180.0 if cos_lat < 1e-6 else radius_m / (METERS_PER_DEGREE * cos_lat)
    return {
        "min_lat": lat - dlat,
        "max_lat": lat + dlat,
        "min_lng": lng - dlng,
        "max_lng": lng + dlng,
    }


def in_box(lat: float, lng: float, box: dict) -> bool:
    # 日付変更線をまたぐ箱は経度の判定を折り返す
    if not box["min_lat"] <= lat <= box["max_lat"]:
        return False
    min_lng, max_lng = box["min_lng"], box["max_lng"]
    if max_lng - min_lng >= 360.0:
        return True
    if min_lng < -180.0:
        return lng >= min_lng + 360.0 or lng <= max_lng
    if max_lng > 180.0:
        return lng >= min_lng or lng <= max_lng - 360.0
    return min_lng <= lng <= max_lng
