"""Delivery resolution: zone matching and fee computation.

Everything here is pure computation over already-loaded configuration. The
callers (``delivery_service`` and the quote endpoint) load the company, its
``CompanyDelivery`` row and zones, then call :func:`resolve_delivery`.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from app.services.geo import haversine_km, parse_ring, point_in_polygon
from app.utils.enums import DeliveryType, DeliveryZoneType, FeeCalculationType

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")
ZERO = Decimal("0.00")

REASON_NOT_AVAILABLE = "delivery not configured or not enabled"
REASON_NO_HOME_DELIVERY = "home delivery unavailable"
REASON_AREA_NOT_SERVED = "area not served"
REASON_NO_COMPANY_LOCATION = "company location unavailable"
REASON_ERROR = "error calculating delivery fee"


@dataclass(frozen=True)
class Coordinates:
    latitude: float
    longitude: float


@dataclass(frozen=True)
class CustomerAddress:
    """Where the order should be delivered."""

    latitude: float | None = None
    longitude: float | None = None
    postal_code: str | None = None
    neighborhood: str | None = None

    @property
    def coordinates(self) -> Coordinates | None:
        if self.latitude is None or self.longitude is None:
            return None
        return Coordinates(float(self.latitude), float(self.longitude))


@dataclass
class DeliveryQuote:
    """Result of a delivery resolution."""

    can_deliver: bool
    fee: Decimal = ZERO
    estimated_time: int = 0
    zone: Any | None = None
    reason: str | None = None
    distance_km: float | None = None

    def to_dict(self) -> dict:
        return {
            "can_deliver": self.can_deliver,
            "fee": float(self.fee),
            "estimated_time": self.estimated_time,
            "zone_id": getattr(self.zone, "id", None),
            "zone_name": getattr(self.zone, "name", None),
            "reason": self.reason,
            "distance_km": self.distance_km,
        }


def _decimal(value: Any) -> Decimal | None:
    if value is None:
        return None
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def _money(value: Decimal) -> Decimal:
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def _refuse(reason: str) -> DeliveryQuote:
    return DeliveryQuote(can_deliver=False, reason=reason)


def company_coordinates(company: Any) -> Coordinates | None:
    """Extract coordinates from a company-like object, ``None`` when unset."""
    if company is None:
        return None
    latitude = getattr(company, "latitude", None)
    longitude = getattr(company, "longitude", None)
    if latitude is None or longitude is None:
        return None
    return Coordinates(float(latitude), float(longitude))


def distance_km(origin: Coordinates | None, destination: Coordinates | None) -> float | None:
    if origin is None or destination is None:
        return None
    return haversine_km(origin.latitude, origin.longitude, destination.latitude, destination.longitude)


def split_list(raw: str | None) -> list[str]:
    if not raw:
        return []
    return [item.strip() for item in raw.split(",") if item.strip()]


def _digits(value: str) -> str:
    return "".join(ch for ch in value if ch.isdigit())


def _matches_radius(zone: Any, company_location: Coordinates | None, address: CustomerAddress) -> bool:
    radius = zone.radius_km
    distance = distance_km(company_location, address.coordinates)
    if radius is None or distance is None:
        return False
    return distance <= float(radius)


def _matches_polygon(zone: Any, address: CustomerAddress) -> bool:
    point = address.coordinates
    ring = parse_ring(zone.coordinates)
    if point is None or ring is None:
        return False
    return point_in_polygon((point.longitude, point.latitude), ring)


def _matches_neighborhood(zone: Any, address: CustomerAddress) -> bool:
    if not address.neighborhood:
        return False
    wanted = address.neighborhood.strip().lower()
    return wanted in {name.lower() for name in split_list(zone.neighborhoods)}


def _matches_postal_code(zone: Any, address: CustomerAddress) -> bool:
    customer_digits = _digits(address.postal_code or "")
    if not customer_digits:
        return False
    for prefix in split_list(zone.postal_codes):
        prefix_digits = _digits(prefix)
        if prefix_digits and customer_digits.startswith(prefix_digits):
            return True
    return False


def zone_matches(zone: Any, company_location: Coordinates | None, address: CustomerAddress) -> bool:
    """Run the geometry test for the zone's type; unknown types never match."""
    zone_type = zone.zone_type
    if zone_type == DeliveryZoneType.RADIUS:
        return _matches_radius(zone, company_location, address)
    if zone_type == DeliveryZoneType.POLYGON:
        return _matches_polygon(zone, address)
    if zone_type == DeliveryZoneType.NEIGHBORHOOD:
        return _matches_neighborhood(zone, address)
    if zone_type == DeliveryZoneType.POSTAL_CODE:
        return _matches_postal_code(zone, address)
    return False


def rank_zones(zones: Iterable[Any]) -> list[Any]:
    """Enabled zones by priority descending; ties keep their given order."""
    enabled = [zone for zone in zones if zone.is_enabled]
    return sorted(enabled, key=lambda zone: zone.priority or 0, reverse=True)


def find_applicable_zone(
    zones: Iterable[Any],
    company_location: Coordinates | None,
    address: CustomerAddress,
) -> Any | None:
    """Return the highest-priority enabled zone whose geometry contains the address."""
    for zone in rank_zones(zones):
        if zone_matches(zone, company_location, address):
            return zone
    return None


def compute_fee(config: Any, zone: Any, distance: float | None) -> Decimal:
    """Apply the configured fee policy before free-delivery and floor rules.

    BY_ORDER_VALUE has no tier table and charges ``base_fee``.
    """
    base_fee = _decimal(config.base_fee) or ZERO
    fee_type = config.fee_calculation_type

    if fee_type == FeeCalculationType.FREE:
        return ZERO
    if fee_type == FeeCalculationType.BY_ZONE:
        return _decimal(zone.delivery_fee) or ZERO
    if fee_type == FeeCalculationType.BY_DISTANCE:
        if distance is None:
            raise ValueError("distance unavailable")
        fee_per_km = _decimal(config.fee_per_km) or ZERO
        return base_fee + Decimal(str(distance)) * fee_per_km
    return base_fee


def resolve_delivery(
    config: Any | None,
    zones: Iterable[Any],
    company_location: Coordinates | None,
    address: CustomerAddress,
    order_value: Decimal | float | None = None,
) -> DeliveryQuote:
    """Decide whether and at what fee the company delivers to ``address``.

    Checks short-circuit in order: configuration, home delivery offered,
    order value bounds, zone match, zone minimum. Faults while computing
    never propagate; they become a refusal with a readable reason.
    """
    try:
        if config is None or not config.is_enabled:
            return _refuse(REASON_NOT_AVAILABLE)

        available = {str(getattr(item, "value", item)) for item in (config.available_types or [])}
        if DeliveryType.DELIVERY.value not in available:
            return _refuse(REASON_NO_HOME_DELIVERY)

        value = _decimal(order_value)
        minimum = _decimal(config.minimum_order_value)
        maximum = _decimal(config.maximum_order_value)
        if minimum is not None and value is not None and value < minimum:
            return _refuse(f"minimum order value: {_money(minimum)}")
        if maximum is not None and value is not None and value > maximum:
            return _refuse(f"maximum order value: {_money(maximum)}")

        zone = find_applicable_zone(zones, company_location, address)
        if zone is None:
            return _refuse(REASON_AREA_NOT_SERVED)

        zone_minimum = _decimal(zone.minimum_order_value)
        if zone_minimum is not None and value is not None and value < zone_minimum:
            return _refuse(f"minimum order value for this zone: {_money(zone_minimum)}")

        distance = distance_km(company_location, address.coordinates)
        if config.fee_calculation_type == FeeCalculationType.BY_DISTANCE and distance is None:
            return _refuse(REASON_NO_COMPANY_LOCATION)

        fee = compute_fee(config, zone, distance)

        free_from = _decimal(config.free_delivery_min_value)
        if free_from is not None and value is not None and value >= free_from:
            fee = ZERO

        return DeliveryQuote(
            can_deliver=True,
            fee=_money(max(ZERO, fee)),
            estimated_time=zone.estimated_time_minutes or config.estimated_time_minutes or 0,
            zone=zone,
            distance_km=round(distance, 3) if distance is not None else None,
        )
    except Exception:
        logger.exception("[DELIVERY] Failed to resolve delivery quote")
        return _refuse(REASON_ERROR)
