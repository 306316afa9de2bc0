"""좌표를 주소로 변환하는 역지오코딩 서비스 (Nominatim)"""
from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from typing import Any

import httpx
from pydantic import ValidationError

from ..core.config import settings
from ..schemas.visits import AddressComponents

logger = logging.getLogger(__name__)

# Nominatim은 국가마다 다른 필드명을 사용하므로 우선순위대로 시도
SUBREGION_KEYS = ("county", "state_district", "region", "state")


class GeocodingError(Exception):
    pass


class RateLimiter:
    """연속 호출 사이에 최소 간격을 보장하는 프로세스 전역 리미터"""

    def __init__(
        self,
        min_interval: float,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self.min_interval = min_interval
        self._clock = clock
        self._sleep = sleep
        self._last_call: float | None = None

    async def wait(self) -> None:
        if self._last_call is not None:
            elapsed = self._clock() - self._last_call
            if elapsed < self.min_interval:
                await self._sleep(self.min_interval - elapsed)
        self._last_call = self._clock()


class NominatimClient:
    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        limiter: RateLimiter | None = None,
        base_url: str | None = None,
        user_agent: str | None = None,
    ) -> None:
        self._client = client or httpx.AsyncClient(timeout=settings.geocoding_timeout)
        self._owns_client = client is None
        self.limiter = limiter or RateLimiter(settings.geocoding_min_interval)
        self.base_url = (base_url or settings.nominatim_base_url).rstrip("/")
        self.user_agent = user_agent or settings.geocoding_user_agent

    async def reverse(self, lat: float, lon: float) -> dict[str, Any]:
        """
        위도/경도로 Nominatim reverse API 호출

        Raises:
            GeocodingError: 네트워크 오류, 타임아웃, 200 이외 응답, 잘못된 응답 형식
        """
        await self.limiter.wait()

        try:
            response = await self._client.get(
                f"{self.base_url}/reverse",
                params={
                    "lat": lat,
                    "lon": lon,
                    "format": "json",
                    "addressdetails": 1,
                    "zoom": 10,
                },
                headers={"User-Agent": self.user_agent},
                timeout=settings.geocoding_timeout,
            )
        except httpx.TimeoutException as exc:
            raise GeocodingError("Nominatim API request timeout") from exc
        except httpx.HTTPError as exc:
            raise GeocodingError(f"Nominatim API 호출 실패: {exc}") from exc

        if response.status_code != 200:
            raise GeocodingError(f"Nominatim API returned status {response.status_code}")

        try:
            data = response.json()
        except ValueError as exc:
            raise GeocodingError(f"Failed to parse Nominatim response: {exc}") from exc

        if not isinstance(data, dict):
            raise GeocodingError("Invalid geocoding response format")
        return data

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()


def extract_address_components(payload: dict[str, Any]) -> AddressComponents:
    address = payload.get("address") or {}
    if not isinstance(address, dict):
        return AddressComponents()

    county = next((address[key] for key in SUBREGION_KEYS if address.get(key)), None)
    try:
        return AddressComponents(county=county, country=address.get("country") or None)
    except ValidationError as exc:
        raise GeocodingError(f"Invalid geocoding response format: {exc.error_count()} invalid address field(s)") from exc
