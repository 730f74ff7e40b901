"""Delivery resolution engine tests over in-memory configuration."""

from decimal import Decimal

import pytest

from app.models import CompanyDelivery, DeliveryZone
from app.services.delivery_engine import (
    REASON_AREA_NOT_SERVED,
    REASON_ERROR,
    REASON_NO_COMPANY_LOCATION,
    REASON_NO_HOME_DELIVERY,
    REASON_NOT_AVAILABLE,
    Coordinates,
    CustomerAddress,
    find_applicable_zone,
    rank_zones,
    resolve_delivery,
)
from app.utils.enums import DeliveryType, DeliveryZoneType, FeeCalculationType

ORIGIN = Coordinates(0.0, 0.0)
NEARBY = CustomerAddress(latitude=0.0, longitude=0.01)


def _config(**overrides) -> CompanyDelivery:
    values = {
        "is_enabled": True,
        "available_types": [DeliveryType.DELIVERY.value, DeliveryType.PICKUP.value],
        "fee_calculation_type": FeeCalculationType.FIXED,
        "base_fee": Decimal("10.00"),
        "fee_per_km": None,
        "free_delivery_min_value": None,
        "estimated_time_minutes": 40,
        "minimum_order_value": None,
        "maximum_order_value": None,
    }
    values.update(overrides)
    return CompanyDelivery(**values)


def _zone(name: str = "Center", **overrides) -> DeliveryZone:
    values = {
        "name": name,
        "zone_type": DeliveryZoneType.RADIUS,
        "radius_km": Decimal("5"),
        "coordinates": None,
        "neighborhoods": None,
        "postal_codes": None,
        "delivery_fee": Decimal("7.50"),
        "estimated_time_minutes": 25,
        "minimum_order_value": None,
        "is_enabled": True,
        "priority": 0,
    }
    values.update(overrides)
    return DeliveryZone(**values)


def test_radius_zone_matches_nearby_customer() -> None:
    zone = _zone()
    quote = resolve_delivery(_config(), [zone], ORIGIN, NEARBY)

    assert quote.can_deliver is True
    assert quote.zone is zone
    assert quote.fee == Decimal("10.00")
    assert quote.estimated_time == 25
    assert quote.distance_km == pytest.approx(1.112, abs=0.001)


def test_customer_at_company_location_is_always_in_radius() -> None:
    zone = _zone(radius_km=Decimal("0.01"))
    quote = resolve_delivery(_config(), [zone], ORIGIN, CustomerAddress(latitude=0.0, longitude=0.0))
    assert quote.can_deliver is True


def test_radius_zone_fails_closed_without_company_location() -> None:
    quote = resolve_delivery(_config(), [_zone()], None, NEARBY)
    assert quote.can_deliver is False
    assert quote.reason == REASON_AREA_NOT_SERVED


def test_free_delivery_threshold_overrides_fixed_fee() -> None:
    config = _config(free_delivery_min_value=Decimal("50"))
    quote = resolve_delivery(config, [_zone()], ORIGIN, NEARBY, order_value=Decimal("60"))
    assert quote.can_deliver is True
    assert quote.fee == Decimal("0.00")


@pytest.mark.parametrize("fee_type", list(FeeCalculationType))
def test_free_delivery_threshold_applies_to_every_fee_type(fee_type) -> None:
    config = _config(fee_calculation_type=fee_type, fee_per_km=Decimal("3"), free_delivery_min_value=Decimal("50"))
    quote = resolve_delivery(config, [_zone()], ORIGIN, NEARBY, order_value=50)
    assert quote.fee == Decimal("0.00")


def test_fee_by_zone_uses_zone_fee() -> None:
    config = _config(fee_calculation_type=FeeCalculationType.BY_ZONE)
    quote = resolve_delivery(config, [_zone()], ORIGIN, NEARBY)
    assert quote.fee == Decimal("7.50")


def test_fee_by_distance_adds_per_km_charge() -> None:
    config = _config(
        fee_calculation_type=FeeCalculationType.BY_DISTANCE,
        base_fee=Decimal("5.00"),
        fee_per_km=Decimal("2.00"),
    )
    quote = resolve_delivery(config, [_zone()], ORIGIN, NEARBY)
    assert quote.fee == Decimal("7.22")


def test_fee_by_distance_without_per_km_charges_base_fee() -> None:
    config = _config(fee_calculation_type=FeeCalculationType.BY_DISTANCE, base_fee=Decimal("5.00"))
    quote = resolve_delivery(config, [_zone()], ORIGIN, NEARBY)
    assert quote.fee == Decimal("5.00")


def test_fee_by_distance_without_company_location_is_refused() -> None:
    config = _config(fee_calculation_type=FeeCalculationType.BY_DISTANCE, fee_per_km=Decimal("1"))
    zone = _zone(zone_type=DeliveryZoneType.NEIGHBORHOOD, radius_km=None, neighborhoods="Centro")
    quote = resolve_delivery(config, [zone], None, CustomerAddress(neighborhood="Centro"))
    assert quote.can_deliver is False
    assert quote.reason == REASON_NO_COMPANY_LOCATION


def test_free_and_by_order_value_fees() -> None:
    free = resolve_delivery(_config(fee_calculation_type=FeeCalculationType.FREE), [_zone()], ORIGIN, NEARBY)
    by_value = resolve_delivery(
        _config(fee_calculation_type=FeeCalculationType.BY_ORDER_VALUE), [_zone()], ORIGIN, NEARBY
    )
    assert free.fee == Decimal("0.00")
    assert by_value.fee == Decimal("10.00")


def test_fee_is_never_negative() -> None:
    quote = resolve_delivery(_config(base_fee=Decimal("-5")), [_zone()], ORIGIN, NEARBY)
    assert quote.can_deliver is True
    assert quote.fee == Decimal("0.00")


def test_disabled_or_missing_config_is_refused() -> None:
    assert resolve_delivery(None, [], ORIGIN, NEARBY).reason == REASON_NOT_AVAILABLE
    assert resolve_delivery(_config(is_enabled=False), [_zone()], ORIGIN, NEARBY).reason == REASON_NOT_AVAILABLE


def test_pickup_only_config_refuses_home_delivery() -> None:
    config = _config(available_types=[DeliveryType.PICKUP.value])
    quote = resolve_delivery(config, [_zone()], ORIGIN, NEARBY)
    assert quote.can_deliver is False
    assert quote.reason == REASON_NO_HOME_DELIVERY


def test_order_value_bounds() -> None:
    config = _config(minimum_order_value=Decimal("20"), maximum_order_value=Decimal("500"))

    too_small = resolve_delivery(config, [_zone()], ORIGIN, NEARBY, order_value=Decimal("19.99"))
    too_large = resolve_delivery(config, [_zone()], ORIGIN, NEARBY, order_value=Decimal("500.01"))
    unknown = resolve_delivery(config, [_zone()], ORIGIN, NEARBY)

    assert too_small.reason == "minimum order value: 20.00"
    assert too_large.reason == "maximum order value: 500.00"
    assert unknown.can_deliver is True


def test_zone_minimum_order_value() -> None:
    zone = _zone(minimum_order_value=Decimal("30"))
    quote = resolve_delivery(_config(), [zone], ORIGIN, NEARBY, order_value=25)
    assert quote.can_deliver is False
    assert quote.reason == "minimum order value for this zone: 30.00"


def test_no_matching_zone_is_area_not_served() -> None:
    far_away = CustomerAddress(latitude=1.0, longitude=1.0)
    quote = resolve_delivery(_config(), [_zone()], ORIGIN, far_away)
    assert quote.can_deliver is False
    assert quote.reason == REASON_AREA_NOT_SERVED
    assert quote.fee == Decimal("0.00")


def test_neighborhood_match_ignores_case_and_whitespace() -> None:
    zone = _zone(zone_type=DeliveryZoneType.NEIGHBORHOOD, radius_km=None, neighborhoods="Centro, Bairro Novo")
    quote = resolve_delivery(_config(), [zone], ORIGIN, CustomerAddress(neighborhood="centro "))
    miss = resolve_delivery(_config(), [zone], ORIGIN, CustomerAddress(neighborhood="Jardins"))
    assert quote.can_deliver is True
    assert miss.reason == REASON_AREA_NOT_SERVED


def test_postal_code_prefix_match_uses_digits_only() -> None:
    zone = _zone(zone_type=DeliveryZoneType.POSTAL_CODE, radius_km=None, postal_codes="01310, 04500-")
    assert resolve_delivery(_config(), [zone], ORIGIN, CustomerAddress(postal_code="01310-100")).can_deliver
    assert resolve_delivery(_config(), [zone], ORIGIN, CustomerAddress(postal_code="04500-000")).can_deliver
    assert not resolve_delivery(_config(), [zone], ORIGIN, CustomerAddress(postal_code="02000-000")).can_deliver
    assert not resolve_delivery(_config(), [zone], ORIGIN, CustomerAddress(postal_code=None)).can_deliver


def test_polygon_zone_uses_longitude_latitude_ring() -> None:
    ring = [[-46.70, -23.60], [-46.60, -23.60], [-46.60, -23.50], [-46.70, -23.50]]
    zone = _zone(zone_type=DeliveryZoneType.POLYGON, radius_km=None, coordinates=ring)
    inside = CustomerAddress(latitude=-23.55, longitude=-46.65)
    outside = CustomerAddress(latitude=-23.40, longitude=-46.65)

    assert resolve_delivery(_config(), [zone], None, inside).can_deliver is True
    assert resolve_delivery(_config(), [zone], None, outside).reason == REASON_AREA_NOT_SERVED


def test_malformed_polygon_never_matches() -> None:
    zone = _zone(zone_type=DeliveryZoneType.POLYGON, radius_km=None, coordinates=[[0, 0], [1]])
    quote = resolve_delivery(_config(), [zone], ORIGIN, NEARBY)
    assert quote.reason == REASON_AREA_NOT_SERVED


def test_highest_priority_enabled_zone_wins() -> None:
    low = _zone("Low", priority=1, delivery_fee=Decimal("3"))
    high = _zone("High", priority=9, delivery_fee=Decimal("9"))
    disabled = _zone("Disabled", priority=50, is_enabled=False)

    zone = find_applicable_zone([low, disabled, high], ORIGIN, NEARBY)

    assert zone is high
    assert [item.name for item in rank_zones([low, disabled, high])] == ["High", "Low"]


def test_priority_order_matches_manual_scan() -> None:
    zones = [
        _zone("A", priority=5, radius_km=Decimal("0.5")),
        _zone("B", priority=3),
        _zone("C", priority=8, zone_type=DeliveryZoneType.NEIGHBORHOOD, radius_km=None, neighborhoods="Elsewhere"),
        _zone("D", priority=3, radius_km=Decimal("2")),
    ]
    address = NEARBY

    expected = None
    for zone in sorted(zones, key=lambda item: item.priority, reverse=True):
        if zone.zone_type == DeliveryZoneType.RADIUS and float(zone.radius_km) >= 1.112:
            expected = zone
            break

    assert find_applicable_zone(zones, ORIGIN, address) is expected
    assert expected.name == "B"


def test_zone_without_eta_falls_back_to_config() -> None:
    quote = resolve_delivery(_config(), [_zone(estimated_time_minutes=None)], ORIGIN, NEARBY)
    assert quote.estimated_time == 40


def test_resolution_is_repeatable() -> None:
    config = _config(fee_calculation_type=FeeCalculationType.BY_DISTANCE, fee_per_km=Decimal("1.5"))
    zones = [_zone()]
    first = resolve_delivery(config, zones, ORIGIN, NEARBY, order_value=Decimal("42"))
    second = resolve_delivery(config, zones, ORIGIN, NEARBY, order_value=Decimal("42"))
    assert first.to_dict() == second.to_dict()


def test_computation_fault_becomes_refusal() -> None:
    zone = _zone(radius_km="not-a-number")
    quote = resolve_delivery(_config(), [zone], ORIGIN, NEARBY)
    assert quote.can_deliver is False
    assert quote.reason == REASON_ERROR
