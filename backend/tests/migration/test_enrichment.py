"""
주소 보강 테스트: 좌표 우선순위, 범위 검사, 기존 값 보존
"""
import pytest

from backend.tests.fakes import FakeGeocoder
from backend.visit_migration.services.enrichment import AddressEnricher
from backend.visit_migration.services.geocoding import GeocodingError

KNOWN = {"lat": -36.85, "long": 174.76}
RECORDED = {"lat": 51.5, "long": -0.12}


def _address_edit(result):
    assert len(result.edits) == 1
    edit = result.edits[0]
    assert edit.name == "place_address"
    return edit.value


@pytest.mark.asyncio
async def test_missing_subregion_and_country_are_filled(make_visit, nominatim_payload):
    geocoder = FakeGeocoder(nominatim_payload)
    doc = make_visit(place_address={"street": "1 Queen St"}, gps_known=KNOWN)

    result = await AddressEnricher(geocoder).enrich(doc)

    assert _address_edit(result) == {"street": "1 Queen St", "county": "Auckland", "country": "New Zealand"}
    assert result.geocoded
    assert not result.failed


@pytest.mark.asyncio
async def test_existing_county_is_kept(make_visit):
    # 조회 결과가 달라도 county는 그대로, country만 추가
    geocoder = FakeGeocoder({"address": {"county": "Other County", "country": "New Zealand"}})
    doc = make_visit(place_address={"county": "X"}, gps_known=KNOWN)

    result = await AddressEnricher(geocoder).enrich(doc)

    assert geocoder.calls == [(KNOWN["lat"], KNOWN["long"])]
    assert _address_edit(result) == {"county": "X", "country": "New Zealand"}


@pytest.mark.asyncio
async def test_existing_country_is_kept_when_subregion_missing(make_visit, nominatim_payload):
    geocoder = FakeGeocoder(nominatim_payload)
    doc = make_visit(place_address={"country": "Aotearoa"}, gps_known=KNOWN)

    result = await AddressEnricher(geocoder).enrich(doc)

    assert _address_edit(result) == {"country": "Aotearoa", "county": "Auckland"}


@pytest.mark.asyncio
async def test_region_counts_as_subregion(make_visit, nominatim_payload):
    geocoder = FakeGeocoder(nominatim_payload)
    doc = make_visit(place_address={"region": "Northland"}, gps_known=KNOWN)

    result = await AddressEnricher(geocoder).enrich(doc)

    assert _address_edit(result) == {"region": "Northland", "country": "New Zealand"}


@pytest.mark.asyncio
async def test_complete_address_skips_lookup(make_visit, nominatim_payload):
    geocoder = FakeGeocoder(nominatim_payload)
    doc = make_visit(place_address={"county": "X", "country": "Y"}, gps_known=KNOWN)

    result = await AddressEnricher(geocoder).enrich(doc)

    assert geocoder.calls == []
    assert result.edits == []
    assert not result.attempted


@pytest.mark.asyncio
async def test_known_coordinates_are_used(make_visit, nominatim_payload):
    geocoder = FakeGeocoder(nominatim_payload)
    doc = make_visit(place_address={}, gps_known=KNOWN, gps_recorded=RECORDED)

    await AddressEnricher(geocoder).enrich(doc)

    assert geocoder.calls == [(KNOWN["lat"], KNOWN["long"])]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "gps",
    [
        {"lat": 90.5, "long": 10.0},
        {"lat": -91.0, "long": 10.0},
        {"lat": 10.0, "long": 180.01},
        {"lat": 10.0, "long": -200.0},
    ],
)
async def test_out_of_range_coordinates_never_call_geocoder(make_visit, nominatim_payload, gps):
    geocoder = FakeGeocoder(nominatim_payload)
    doc = make_visit(place_address={}, gps_known=gps)

    result = await AddressEnricher(geocoder).enrich(doc)

    assert geocoder.calls == []
    assert result.edits == []
    assert not result.failed


@pytest.mark.asyncio
async def test_no_coordinates_means_no_lookup(make_visit, nominatim_payload):
    geocoder = FakeGeocoder(nominatim_payload)

    result = await AddressEnricher(geocoder).enrich(make_visit(place_address={}))

    assert geocoder.calls == []
    assert result.edits == []


@pytest.mark.asyncio
async def test_lookup_failure_is_not_fatal(make_visit):
    geocoder = FakeGeocoder(error=GeocodingError("Nominatim API returned status 500"))
    doc = make_visit(place_address={}, gps_known=KNOWN)

    result = await AddressEnricher(geocoder).enrich(doc)

    assert result.failed
    assert result.edits == []


@pytest.mark.asyncio
async def test_missing_address_object_is_ignored(make_visit, nominatim_payload):
    geocoder = FakeGeocoder(nominatim_payload)

    result = await AddressEnricher(geocoder).enrich(make_visit(place_address="1 Queen St", gps_known=KNOWN))

    assert geocoder.calls == []
    assert result.edits == []


@pytest.mark.asyncio
async def test_non_string_address_fields_count_as_failure(make_visit):
    geocoder = FakeGeocoder({"address": {"county": 42, "country": ["NZ"]}})
    doc = make_visit(place_address={}, gps_known=KNOWN)

    result = await AddressEnricher(geocoder).enrich(doc)

    assert result.failed
    assert not result.geocoded
    assert result.edits == []
