"""방문(visit) 문서 검증 및 스키마 정규화"""
from __future__ import annotations

from datetime import datetime
from numbers import Real
from typing import Any

from bson import ObjectId

from ..schemas.visits import (
    GPS_FIELDS,
    LEGACY_ADDED_AT,
    PLANNED,
    REQUIRED_FIELDS,
    VISITED_AT,
    DeleteField,
    FieldEdit,
    GeoPoint,
    SetField,
)


class MissingCreatedAtError(ValueError):
    pass


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def _read_point(gps: Any) -> tuple[Any, Any]:
    if not isinstance(gps, dict):
        return None, None
    return gps.get("lat"), gps.get("long")


def validate_visit(doc: dict) -> list[str]:
    """
    마이그레이션 전에 문서 구조를 검증

    Returns:
        위반 메시지 목록 (비어 있으면 유효)
    """
    errors: list[str] = []

    for field in REQUIRED_FIELDS:
        if not doc.get(field):
            errors.append(f"Missing required field: {field}")

    # GPS 좌표가 있으면 위도/경도 모두 숫자여야 함
    for field in GPS_FIELDS:
        if doc.get(field) is None:
            continue
        lat, lon = _read_point(doc[field])
        if not _is_number(lat) or not _is_number(lon):
            errors.append(f"Invalid {field} coordinates")

    return errors


def is_fully_migrated(doc: dict) -> bool:
    return LEGACY_ADDED_AT not in doc and VISITED_AT in doc and PLANNED in doc


def normalize_fields(doc: dict) -> list[FieldEdit]:
    """
    새 스키마로 맞추기 위한 필드 단위 수정 목록을 계산

    값 비교가 아니라 필드 존재 여부로만 판단하므로 이미 마이그레이션된
    문서에는 빈 목록을 반환한다.
    """
    edits: list[FieldEdit] = []

    if LEGACY_ADDED_AT in doc:
        edits.append(DeleteField(name=LEGACY_ADDED_AT))

    if VISITED_AT not in doc:
        created_at = doc.get("created_at")
        if not created_at:
            raise MissingCreatedAtError(f"Document {doc.get('_id')} has no created_at field")
        edits.append(SetField(name=VISITED_AT, value=created_at))

    if PLANNED not in doc:
        edits.append(SetField(name=PLANNED, value=False))

    return edits


def select_coordinates(doc: dict) -> GeoPoint | None:
    """gps_known을 gps_recorded보다 우선 사용"""
    for field in GPS_FIELDS:
        if doc.get(field) is not None:
            lat, lon = _read_point(doc[field])
            if lat is None or lon is None:
                return None
            return GeoPoint(lat=lat, lon=lon)
    return None


def _json_value(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, ObjectId):
        return str(value)
    return value


def to_json_document(doc: dict) -> dict:
    """덤프 출력을 위해 ObjectId/datetime/GPS 값을 JSON 직렬화 가능한 형태로 변환"""
    data = {key: _json_value(value) for key, value in doc.items() if key != "_id"}
    json_doc = {"id": str(doc.get("_id")), **data}

    for field in GPS_FIELDS:
        gps = json_doc.get(field)
        if isinstance(gps, dict) and gps.get("lat") is not None:
            json_doc[field] = {"lat": gps.get("lat"), "long": gps.get("long")}

    return json_doc
