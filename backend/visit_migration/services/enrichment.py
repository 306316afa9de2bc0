"""누락된 county/region, country를 역지오코딩으로 채우는 주소 보강"""
from __future__ import annotations

import logging

from ..schemas.visits import PLACE_ADDRESS, AddressComponents, EnrichmentResult, SetField
from .geocoding import GeocodingError, NominatimClient, extract_address_components
from .visits import select_coordinates

logger = logging.getLogger(__name__)


class AddressEnricher:
    def __init__(self, geocoder: NominatimClient) -> None:
        self.geocoder = geocoder

    async def _lookup(self, doc: dict) -> AddressComponents | None:
        point = select_coordinates(doc)
        if point is None:
            return None

        if not point.in_range:
            logger.warning(
                "Invalid coordinates for document %s: lat=%s, lon=%s", doc.get("_id"), point.lat, point.lon
            )
            return None

        payload = await self.geocoder.reverse(point.lat, point.lon)
        return extract_address_components(payload)

    async def enrich(self, doc: dict) -> EnrichmentResult:
        """
        주소에 빠진 필드만 조회 결과로 채운다. 기존 값은 조회 결과와 달라도 유지.

        - county/region 모두 없음: county와 country(없을 때)를 채움
        - county/region 있고 country 없음: country만 채움
        """
        result = EnrichmentResult()
        address = doc.get(PLACE_ADDRESS)
        if not isinstance(address, dict):
            return result

        missing_subregion = not address.get("county") and not address.get("region")
        if not missing_subregion and address.get("country"):
            return result

        try:
            components = await self._lookup(doc)
        except GeocodingError as exc:
            logger.warning("Failed to geocode document %s: %s", doc.get("_id"), exc)
            result.attempted = True
            result.failed = True
            return result

        if components is None:
            return result
        result.attempted = True

        updates: dict[str, str] = {}
        if missing_subregion and components.county:
            updates["county"] = components.county
        if components.country and not address.get("country"):
            updates["country"] = components.country

        if updates:
            result.edits.append(SetField(name=PLACE_ADDRESS, value={**address, **updates}))
            result.geocoded = True
        return result
