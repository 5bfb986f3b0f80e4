"""投票所検索のデータモデル

Coordinate / Place / Region / SearchContext はすべて不変。
変更は新しい値を作って置き換える。
"""
import enum
import threading
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional, Tuple
from urllib.parse import urlencode

from ..config import DEFAULT_RADIUS_M
from ..errors import InvalidArgument
from .geo import validate_coordinate

RADIUS_PRESETS = (1000, 5000, 10000, 25000)  # m


@dataclass(frozen=True)
class Coordinate:
    latitude: float
    longitude: float

    def __post_init__(self):
        validate_coordinate(self.latitude, self.longitude)


class PlaceType(str, enum.Enum):
    SCHOOL = "school"
    LIBRARY = "library"
    COMMUNITY_CENTER = "community_center"
    GOVERNMENT_BUILDING = "government_building"
    CHURCH = "church"
    OTHER = "other"

    @property
    def style(self) -> Dict[str, str]:
        return PLACE_TYPE_STYLES[self]


# 表示用: ラベル・アイコン・色
PLACE_TYPE_STYLES = {
    PlaceType.SCHOOL: {"label": "School", "icon": "building.columns.fill", "color": "blue"},
    PlaceType.LIBRARY: {"label": "Library", "icon": "books.vertical.fill", "color": "purple"},
    PlaceType.COMMUNITY_CENTER: {"label": "Community Center", "icon": "person.3.fill", "color": "green"},
    PlaceType.GOVERNMENT_BUILDING: {"label": "Government Building", "icon": "building.2.fill", "color": "orange"},
    PlaceType.CHURCH: {"label": "Church", "icon": "building.fill", "color": "red"},
    PlaceType.OTHER: {"label": "Other", "icon": "mappin.circle.fill", "color": "gray"},
}


@dataclass(frozen=True)
class Place:
    """投票所候補。distanceは基準点に対して計算するまでNone"""
    id: str
    coordinate: Coordinate
    name: str
    type: PlaceType = PlaceType.OTHER
    address: str = ""
    distance: Optional[float] = None  # m

    def with_distance(self, distance: Optional[float]) -> "Place":
        return replace(self, distance=distance)


@dataclass(frozen=True)
class Region:
    """地図の表示範囲（中心＋緯度経度の幅）"""
    center: Coordinate
    latitude_delta: float
    longitude_delta: float

    def with_min_span(self, min_span: float) -> "Region":
        """幅をmin_span以上に底上げしたコピー"""
        return replace(
            self,
            latitude_delta=max(self.latitude_delta, min_span),
            longitude_delta=max(self.longitude_delta, min_span),
        )


@dataclass(frozen=True)
class SearchContext:
    """基準点と検索半径。変更のたびにsequenceを進めた新しい値を作る"""
    reference: Coordinate
    radius_m: int = DEFAULT_RADIUS_M
    sequence: int = 0

    def __post_init__(self):
        check_radius_preset(self.radius_m)

    def replace_reference(self, reference: Coordinate) -> "SearchContext":
        return replace(self, reference=reference, sequence=self.sequence + 1)

    def replace_radius(self, radius_m: int) -> "SearchContext":
        return replace(self, radius_m=radius_m, sequence=self.sequence + 1)


def check_radius_preset(radius_m: float) -> None:
    if radius_m not in RADIUS_PRESETS:
        presets = ", ".join(str(r) for r in RADIUS_PRESETS)
        raise InvalidArgument(f"radius must be one of {presets} (got {radius_m})")


@dataclass
class ResultSlot:
    """最新の計算結果だけを保持する（後勝ち）

    古いsequenceの結果が遅れて届いても捨てる。
    位置更新と半径変更を非同期に再計算する組み込み側向け。
    HTTP層はリクエストごとに同期計算するので使わない。
    """
    sequence: int = -1
    result: Any = None
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def offer(self, sequence: int, result: Any) -> bool:
        with self._lock:
            if sequence < self.sequence:
                return False
            self.sequence = sequence
            self.result = result
            return True

    def snapshot(self) -> Tuple[int, Any]:
        with self._lock:
            return self.sequence, self.result


def format_distance(meters: float) -> str:
    """1km未満は "830m"、以上は "1.2km" """
    if meters < 1000:
        return f"{int(meters)}m"
    return f"{meters / 1000:.1f}km"


def format_distance_detail(meters: float) -> str:
    """詳細画面用: "297 meters" / "1.06 kilometers" """
    if meters < 1000:
        return f"{int(meters)} meters"
    return f"{meters / 1000:.2f} kilometers"


MAPS_URL = "https://maps.apple.com/"


def directions_url(place: Place) -> str:
    """地図アプリで車の経路案内を開くURL"""
    c = place.coordinate
    query = urlencode({
        "daddr": f"{c.latitude},{c.longitude}",
        "q": place.name,
        "dirflg": "d",
    })
    return f"{MAPS_URL}?{query}"
