"""Delivery configuration management, listings and quoting."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.errors import NotFoundError, ValidationError
from app.models import Company, CompanyDelivery, DeliveryZone, Place, User
from app.schemas.delivery import (
    CompanyDeliveryCreate,
    CompanyDeliveryUpdate,
    DeliveryQuoteRequest,
    DeliveryZoneCreate,
    DeliveryZoneUpdate,
)
from app.services.audit_service import log_action, snapshot
from app.services.delivery_engine import (
    REASON_NOT_AVAILABLE,
    CustomerAddress,
    DeliveryQuote,
    company_coordinates,
    resolve_delivery,
    split_list,
)
from app.services.geo import parse_ring
from app.services.security_guards import ensure_can_manage
from app.utils.enums import DeliveryType, DeliveryZoneType, RoleType

logger = logging.getLogger(__name__)

GEOMETRY_FIELDS: dict[DeliveryZoneType, str] = {
    DeliveryZoneType.RADIUS: "radius_km",
    DeliveryZoneType.POLYGON: "coordinates",
    DeliveryZoneType.NEIGHBORHOOD: "neighborhoods",
    DeliveryZoneType.POSTAL_CODE: "postal_codes",
}

ZONE_FIELDS: tuple[str, ...] = (
    "name",
    "zone_type",
    "radius_km",
    "coordinates",
    "neighborhoods",
    "postal_codes",
    "delivery_fee",
    "estimated_time_minutes",
    "minimum_order_value",
    "is_enabled",
    "priority",
    "description",
)

REQUIRED_CONFIG_FIELDS: set[str] = {
    "is_enabled",
    "available_types",
    "fee_calculation_type",
    "base_fee",
    "estimated_time_minutes",
    "pickup_time_minutes",
    "accepts_cash",
    "accepts_card",
    "accepts_pix",
}
REQUIRED_ZONE_FIELDS: set[str] = {"name", "zone_type", "delivery_fee", "estimated_time_minutes", "is_enabled", "priority"}

MAX_RADIUS_KM = Decimal("100")


def _is_blank(value: Any) -> bool:
    return value is None or value == "" or value == []


def _reject_nulls(changes: dict[str, Any], required: set[str]) -> None:
    for key, value in changes.items():
        if key in required and value is None:
            raise ValidationError(f"{key} cannot be null")


def validate_order_bounds(minimum: Any, maximum: Any) -> None:
    if minimum is None or maximum is None:
        return
    if Decimal(str(minimum)) >= Decimal(str(maximum)):
        raise ValidationError("minimum order value must be lower than maximum order value")


def validate_zone(fields: dict[str, Any]) -> dict[str, Any]:
    """Check zone geometry against its type and return normalized field values.

    Exactly the geometry field belonging to ``zone_type`` may be populated.
    Polygon rings are stored as ``[lon, lat]`` pairs; list fields are stored
    comma separated without blanks.
    """
    zone_type = DeliveryZoneType(fields["zone_type"])
    expected = GEOMETRY_FIELDS[zone_type]
    for field in GEOMETRY_FIELDS.values():
        if field != expected and not _is_blank(fields.get(field)):
            raise ValidationError(f"{zone_type.value} zone must not define {field}")

    normalized = dict(fields)
    normalized["name"] = (fields.get("name") or "").strip()
    if not normalized["name"]:
        raise ValidationError("zone name is required")
    normalized["zone_type"] = zone_type
    for field in GEOMETRY_FIELDS.values():
        if field != expected:
            normalized[field] = None

    if zone_type == DeliveryZoneType.RADIUS:
        radius = fields.get("radius_km")
        if radius is None or not (0 < Decimal(str(radius)) <= MAX_RADIUS_KM):
            raise ValidationError("RADIUS zone requires radius_km greater than 0 and at most 100")
    elif zone_type == DeliveryZoneType.POLYGON:
        ring = parse_ring(fields.get("coordinates"))
        if ring is None:
            raise ValidationError("POLYGON zone requires at least 3 [longitude, latitude] points")
        normalized["coordinates"] = [[lon, lat] for lon, lat in ring]
    elif zone_type == DeliveryZoneType.NEIGHBORHOOD:
        names = split_list(fields.get("neighborhoods"))
        if not names:
            raise ValidationError("NEIGHBORHOOD zone requires at least one neighborhood")
        normalized["neighborhoods"] = ", ".join(names)
    else:
        codes = [code for code in split_list(fields.get("postal_codes")) if any(ch.isdigit() for ch in code)]
        if not codes:
            raise ValidationError("POSTAL_CODE zone requires at least one postal code")
        normalized["postal_codes"] = ", ".join(codes)
    return normalized


def _delivery_snapshot(config: CompanyDelivery) -> dict[str, Any] | None:
    data = snapshot(config)
    if data is not None:
        data["zones"] = [snapshot(zone) for zone in config.zones]
    return data


def _apply_config(config: CompanyDelivery, values: dict[str, Any]) -> None:
    for key, value in values.items():
        if key == "available_types":
            value = [DeliveryType(item).value for item in value]
        setattr(config, key, value)


def _replace_zones(config: CompanyDelivery, company_id: int, zones: list[dict[str, Any]]) -> None:
    """Sync the zone collection by name: update matches, add new, drop missing."""
    normalized = [validate_zone(zone) for zone in zones]
    names = [zone["name"] for zone in normalized]
    if len(names) != len(set(names)):
        raise ValidationError("zone names must be unique per company")

    existing = {zone.name: zone for zone in config.zones}
    for fields in normalized:
        zone = existing.get(fields["name"])
        if zone is None:
            config.zones.append(DeliveryZone(company_id=company_id, **fields))
            continue
        for key, value in fields.items():
            setattr(zone, key, value)

    for name, zone in existing.items():
        if name not in names:
            config.zones.remove(zone)


def get_delivery(db: Session, delivery_id: int) -> CompanyDelivery:
    config = db.get(CompanyDelivery, delivery_id)
    if config is None:
        raise NotFoundError(f"Delivery configuration {delivery_id} not found")
    return config


def get_delivery_by_company(db: Session, company_id: int) -> CompanyDelivery | None:
    return db.scalar(select(CompanyDelivery).where(CompanyDelivery.company_id == company_id).limit(1))


def create_delivery(db: Session, user: User, company_id: int, payload: CompanyDeliveryCreate) -> CompanyDelivery:
    company = ensure_can_manage(db, user, company_id)
    if get_delivery_by_company(db, company.id) is not None:
        raise ValidationError("delivery configuration already exists for this company")

    values = payload.model_dump(exclude={"zones"})
    validate_order_bounds(values["minimum_order_value"], values["maximum_order_value"])

    config = CompanyDelivery(company_id=company.id)
    _apply_config(config, values)
    if payload.zones:
        _replace_zones(config, company.id, [zone.model_dump() for zone in payload.zones])
    db.add(config)
    db.flush()

    log_action(
        db,
        actor=user,
        action_type="delivery_created",
        company_id=company.id,
        entity_id=config.id,
        after_snapshot=_delivery_snapshot(config),
    )
    db.commit()
    db.refresh(config)
    logger.info("[DELIVERY] Configuration %s created for company %s by user_id=%s", config.id, company.id, user.id)
    return config


def _changes(payload: CompanyDeliveryCreate | CompanyDeliveryUpdate) -> dict[str, Any]:
    """Provided top-level fields; zones are always taken whole."""
    changes = payload.model_dump(exclude_unset=True, exclude={"zones"})
    if payload.zones is not None:
        changes["zones"] = [zone.model_dump() for zone in payload.zones]
    return changes


def _update_delivery(db: Session, user: User, config: CompanyDelivery, changes: dict[str, Any]) -> CompanyDelivery:
    zones = changes.pop("zones", None)
    _reject_nulls(changes, REQUIRED_CONFIG_FIELDS)
    validate_order_bounds(
        changes.get("minimum_order_value", config.minimum_order_value),
        changes.get("maximum_order_value", config.maximum_order_value),
    )

    before = _delivery_snapshot(config)
    _apply_config(config, changes)
    if zones is not None:
        _replace_zones(config, config.company_id, zones)
    db.flush()

    log_action(
        db,
        actor=user,
        action_type="delivery_updated",
        company_id=config.company_id,
        entity_id=config.id,
        before_snapshot=before,
        after_snapshot=_delivery_snapshot(config),
    )
    db.commit()
    db.refresh(config)
    logger.info("[DELIVERY] Configuration %s updated by user_id=%s", config.id, user.id)
    return config


def update_delivery(db: Session, user: User, delivery_id: int, payload: CompanyDeliveryUpdate) -> CompanyDelivery:
    """Apply provided fields; a provided ``zones`` list replaces the zone set."""
    config = get_delivery(db, delivery_id)
    ensure_can_manage(db, user, config.company_id)
    return _update_delivery(db, user, config, _changes(payload))


def upsert_delivery(db: Session, user: User, company_id: int, payload: CompanyDeliveryCreate) -> CompanyDelivery:
    ensure_can_manage(db, user, company_id)
    config = get_delivery_by_company(db, company_id)
    if config is None:
        return create_delivery(db, user, company_id, payload)
    return _update_delivery(db, user, config, _changes(payload))


def remove_delivery(db: Session, user: User, delivery_id: int) -> None:
    config = get_delivery(db, delivery_id)
    ensure_can_manage(db, user, config.company_id)
    before = _delivery_snapshot(config)
    company_id = config.company_id
    db.delete(config)
    log_action(
        db,
        actor=user,
        action_type="delivery_removed",
        company_id=company_id,
        entity_id=delivery_id,
        before_snapshot=before,
    )
    db.commit()
    logger.info("[DELIVERY] Configuration %s removed by user_id=%s", delivery_id, user.id)


def _ensure_unique_zone_name(config: CompanyDelivery, name: str, exclude_id: int | None = None) -> None:
    for zone in config.zones:
        if zone.name == name and zone.id != exclude_id:
            raise ValidationError(f"zone '{name}' already exists for this company")


def add_zone(db: Session, user: User, company_id: int, payload: DeliveryZoneCreate) -> DeliveryZone:
    ensure_can_manage(db, user, company_id)
    config = get_delivery_by_company(db, company_id)
    if config is None:
        raise NotFoundError("Delivery configuration not found for this company")

    fields = validate_zone(payload.model_dump())
    _ensure_unique_zone_name(config, fields["name"])
    zone = DeliveryZone(company_id=company_id, **fields)
    config.zones.append(zone)
    db.flush()

    log_action(
        db,
        actor=user,
        action_type="delivery_zone_added",
        company_id=company_id,
        entity_id=zone.id,
        after_snapshot=snapshot(zone),
    )
    db.commit()
    db.refresh(zone)
    logger.info("[DELIVERY] Zone %s (%s) added to company %s", zone.id, zone.name, company_id)
    return zone


def _get_zone(db: Session, zone_id: int) -> DeliveryZone:
    zone = db.get(DeliveryZone, zone_id)
    if zone is None:
        raise NotFoundError(f"Delivery zone {zone_id} not found")
    return zone


def update_zone(db: Session, user: User, zone_id: int, payload: DeliveryZoneUpdate) -> DeliveryZone:
    zone = _get_zone(db, zone_id)
    ensure_can_manage(db, user, zone.company_id)

    changes = payload.model_dump(exclude_unset=True)
    if not changes:
        raise ValidationError("no fields to update")
    _reject_nulls(changes, REQUIRED_ZONE_FIELDS)

    merged = {field: getattr(zone, field) for field in ZONE_FIELDS}
    if "zone_type" in changes:
        for field in GEOMETRY_FIELDS.values():
            if field not in changes:
                merged[field] = None
    merged.update(changes)
    fields = validate_zone(merged)
    _ensure_unique_zone_name(zone.delivery, fields["name"], exclude_id=zone.id)

    before = snapshot(zone)
    for key, value in fields.items():
        setattr(zone, key, value)
    db.flush()

    log_action(
        db,
        actor=user,
        action_type="delivery_zone_updated",
        company_id=zone.company_id,
        entity_id=zone.id,
        before_snapshot=before,
        after_snapshot=snapshot(zone),
    )
    db.commit()
    db.refresh(zone)
    return zone


def remove_zone(db: Session, user: User, zone_id: int) -> None:
    zone = _get_zone(db, zone_id)
    company_id = zone.company_id
    ensure_can_manage(db, user, company_id)
    before = snapshot(zone)
    zone.delivery.zones.remove(zone)
    log_action(
        db,
        actor=user,
        action_type="delivery_zone_removed",
        company_id=company_id,
        entity_id=zone_id,
        before_snapshot=before,
    )
    db.commit()
    logger.info("[DELIVERY] Zone %s removed from company %s", zone_id, company_id)


def list_deliveries_for_user(db: Session, user: User) -> list[CompanyDelivery]:
    """Return configurations inside the user's administrative scope."""
    stmt = select(CompanyDelivery).join(Company, Company.id == CompanyDelivery.company_id)
    if user.role == RoleType.SUPER_ADMIN:
        pass
    elif user.role == RoleType.ORGANIZATION_ADMIN:
        stmt = stmt.join(Place, Place.id == Company.place_id).where(Place.organization_id == user.organization_id)
    elif user.role == RoleType.PLACE_ADMIN:
        stmt = stmt.where(Company.place_id == user.place_id)
    elif user.role == RoleType.COMPANY_ADMIN:
        stmt = stmt.where(Company.id == user.company_id)
    else:
        return []
    return list(db.scalars(stmt.order_by(Company.name.asc())).all())


def _deliveries(db: Session, place_id: int | None) -> list[CompanyDelivery]:
    stmt = select(CompanyDelivery).join(Company, Company.id == CompanyDelivery.company_id)
    if place_id is not None:
        stmt = stmt.where(Company.place_id == place_id)
    return list(db.scalars(stmt.order_by(Company.name.asc())).all())


def _offers(config: CompanyDelivery, delivery_type: DeliveryType) -> bool:
    return delivery_type.value in (config.available_types or [])


def list_companies_with_delivery(db: Session, place_id: int | None = None) -> list[Company]:
    """Active companies with an enabled configuration that offers home delivery."""
    return [
        config.company
        for config in _deliveries(db, place_id)
        if config.is_enabled and config.company.is_active and _offers(config, DeliveryType.DELIVERY)
    ]


def delivery_statistics(db: Session, place_id: int | None = None) -> dict[str, Any]:
    configs = _deliveries(db, place_id)
    enabled = [config for config in configs if config.is_enabled]

    fees = [Decimal(config.base_fee) for config in enabled if config.base_fee and config.base_fee > 0]
    times = [config.estimated_time_minutes for config in enabled if config.estimated_time_minutes]
    type_stats = {
        delivery_type: sum(1 for config in enabled if _offers(config, delivery_type))
        for delivery_type in DeliveryType
    }

    return {
        "total_companies": len(configs),
        "companies_with_delivery": len(enabled),
        "average_delivery_fee": round(float(sum(fees) / len(fees)), 2) if fees else 0.0,
        "average_delivery_time": round(sum(times) / len(times)) if times else 0,
        "delivery_type_stats": type_stats,
    }


def quote_for_company(db: Session, company_id: int, request: DeliveryQuoteRequest) -> DeliveryQuote:
    """Resolve a quote for ``company_id``; unknown companies are refused, not raised."""
    company = db.get(Company, company_id)
    if company is None or not company.is_active:
        return DeliveryQuote(can_deliver=False, reason=REASON_NOT_AVAILABLE)

    config = company.delivery
    address = CustomerAddress(
        latitude=request.latitude,
        longitude=request.longitude,
        postal_code=request.postal_code,
        neighborhood=request.neighborhood,
    )
    quote = resolve_delivery(
        config,
        config.zones if config is not None else [],
        company_coordinates(company),
        address,
        order_value=request.order_value,
    )
    logger.info(
        "[DELIVERY] Quote company_id=%s can_deliver=%s fee=%s reason=%s",
        company_id,
        quote.can_deliver,
        quote.fee,
        quote.reason,
    )
    return quote
