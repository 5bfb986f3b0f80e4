"""Pydantic スキーマ定義"""
from typing import Optional, List
from pydantic import BaseModel, Field


# === リクエスト ===

class LocationIn(BaseModel):
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


# === レスポンス ===

class CoordinateOut(BaseModel):
    latitude: float
    longitude: float


class LocationOut(CoordinateOut):
    has_fix: bool  # Falseなら既定地点


class PlaceOut(BaseModel):
    """一覧用"""
    id: str
    name: str
    type: str
    type_label: str
    icon: str
    color: str
    address: str
    latitude: float
    longitude: float
    distance_m: Optional[float] = None
    distance_label: Optional[str] = None


class PlaceDetailOut(PlaceOut):
    """詳細用"""
    distance_detail: Optional[str] = None
    voting_hours: str
    voting_hours_note: str
    accessibility: List[str]
    directions_url: str


class RegionOut(BaseModel):
    center: CoordinateOut
    latitude_delta: float
    longitude_delta: float
    place_count: int


class RadiusOptionsOut(BaseModel):
    presets: List[int]
    default: int


class ArticleOut(BaseModel):
    title: str
    summary: str
    source: str
    date: str
    icon: str


class NewsOut(BaseModel):
    articles: List[ArticleOut]
    source: str
    error: Optional[str] = None
