"""投票所カタログ

CATALOG_PATH にJSONがあればそれを、無ければ組み込みのTysons Corner一覧を使う。
JSON形式: [{"id", "name", "type", "address", "latitude", "longitude"}, ...]
"""
import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import List, Optional, Sequence

from ..config import CATALOG_PATH
from ..errors import InvalidArgument
from .places import Coordinate, Place, PlaceType

logger = logging.getLogger(__name__)

TYSONS_CATALOG = (
    Place("tysons-01", Coordinate(38.9187, -77.2311), "Tysons Corner Center",
          PlaceType.OTHER, "1961 Chain Bridge Rd, Tysons, VA 22102"),
    Place("tysons-02", Coordinate(38.9210, -77.2390), "Westbriar Elementary School",
          PlaceType.SCHOOL, "1741 Pine Valley Dr, Vienna, VA 22182"),
    Place("tysons-03", Coordinate(38.9145, -77.2215), "Tysons-Pimmit Regional Library",
          PlaceType.LIBRARY, "7584 Leesburg Pike, Falls Church, VA 22043"),
    Place("tysons-04", Coordinate(38.9250, -77.2350), "First Baptist Church of Vienna",
          PlaceType.CHURCH, "450 Orchard St NW, Vienna, VA 22180"),
    Place("tysons-05", Coordinate(38.9100, -77.2400), "McLean Community Center",
          PlaceType.COMMUNITY_CENTER, "1234 Ingleside Ave, McLean, VA 22101"),
    Place("tysons-06", Coordinate(38.9300, -77.2250), "Vienna Town Hall",
          PlaceType.GOVERNMENT_BUILDING, "127 Center St S, Vienna, VA 22180"),
    Place("tysons-07", Coordinate(38.9050, -77.2300), "McLean High School",
          PlaceType.SCHOOL, "1633 Davidson Rd, McLean, VA 22101"),
    Place("tysons-08", Coordinate(38.9200, -77.2150), "Patrick Henry Library",
          PlaceType.LIBRARY, "101 Maple Ave E, Vienna, VA 22180"),
)


def _parse_place(record: dict) -> Place:
    if not isinstance(record, dict):
        raise InvalidArgument(f"place record must be an object: {record!r}")
    try:
        place_id = str(record["id"]).strip()
        name = str(record["name"]).strip()
        lat = float(record["latitude"])
        lng = float(record["longitude"])
    except (KeyError, TypeError, ValueError) as e:
        raise InvalidArgument(f"invalid place record {record!r}: {e}") from e
    if not place_id or not name:
        raise InvalidArgument(f"place record needs id and name: {record!r}")

    try:
        place_type = PlaceType(record.get("type") or PlaceType.OTHER.value)
    except ValueError:
        # 未知の種別は「その他」
        logger.warning(f"Unknown place type {record.get('type')!r} for {place_id}, using 'other'")
        place_type = PlaceType.OTHER

    return Place(
        id=place_id,
        coordinate=Coordinate(lat, lng),
        name=name,
        type=place_type,
        address=str(record.get("address") or ""),
    )


def parse_catalog(records: list) -> List[Place]:
    """レコード配列をPlaceに変換。idの重複はInvalidArgument"""
    if not isinstance(records, list):
        raise InvalidArgument("catalog must be a JSON array")
    places = [_parse_place(r) for r in records]
    seen = set()
    for p in places:
        if p.id in seen:
            raise InvalidArgument(f"duplicate place id: {p.id}")
        seen.add(p.id)
    return places


def load_catalog(path: Path) -> List[Place]:
    """JSONファイルからカタログを読む"""
    with open(path, encoding="utf-8") as f:
        try:
            records = json.load(f)
        except json.JSONDecodeError as e:
            raise InvalidArgument(f"catalog {path} is not valid JSON: {e}") from e
    places = parse_catalog(records)
    logger.info(f"Catalog: loaded {len(places)} places from {path}")
    return places


@lru_cache(maxsize=1)
def get_catalog() -> Sequence[Place]:
    """プロセス内で共有するカタログ（読み取り専用）"""
    path = Path(CATALOG_PATH)
    if path.exists():
        return tuple(load_catalog(path))
    logger.info("Catalog: no catalog file, using built-in Tysons Corner places")
    return TYSONS_CATALOG


def find_place(catalog: Sequence[Place], place_id: str) -> Optional[Place]:
    for place in catalog:
        if place.id == place_id:
            return place
    return None
