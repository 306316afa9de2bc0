from __future__ import annotations

from typing import Any, Literal, Union

from pydantic import BaseModel, Field

LEGACY_ADDED_AT = "added_at"  # created_at과 중복되어 제거 대상
VISITED_AT = "visited_at"
PLANNED = "planned"
PLACE_ADDRESS = "place_address"
GPS_FIELDS = ("gps_known", "gps_recorded")  # 우선순위 순서
REQUIRED_FIELDS = ("user_id", "place_name", "created_at", "updated_at")


class GeoPoint(BaseModel):
    lat: float
    lon: float

    @property
    def in_range(self) -> bool:
        return -90 <= self.lat <= 90 and -180 <= self.lon <= 180


class AddressComponents(BaseModel):
    """역지오코딩 결과에서 추출한 주소 구성 요소"""
    county: str | None = None  # county / state_district / region / state 중 첫 값
    country: str | None = None


class SetField(BaseModel):
    op: Literal["set"] = "set"
    name: str
    value: Any = None


class DeleteField(BaseModel):
    op: Literal["delete"] = "delete"
    name: str


FieldEdit = Union[SetField, DeleteField]


class EnrichmentResult(BaseModel):
    edits: list[FieldEdit] = Field(default_factory=list)
    attempted: bool = False  # 외부 조회를 실제로 호출했는지
    geocoded: bool = False
    failed: bool = False
