"""Shared domain terms used across models, schemas and services."""

from datetime import date
from enum import Enum


class RoleType(str, Enum):
    SUPER_ADMIN = "SUPER_ADMIN"
    ORGANIZATION_ADMIN = "ORGANIZATION_ADMIN"
    PLACE_ADMIN = "PLACE_ADMIN"
    COMPANY_ADMIN = "COMPANY_ADMIN"
    PUBLIC_USER = "PUBLIC_USER"


class DayOfWeek(str, Enum):
    SEGUNDA = "SEGUNDA"
    TERCA = "TERCA"
    QUARTA = "QUARTA"
    QUINTA = "QUINTA"
    SEXTA = "SEXTA"
    SABADO = "SABADO"
    DOMINGO = "DOMINGO"

    @classmethod
    def from_date(cls, value: date) -> "DayOfWeek":
        """Map a calendar date to its weekday (Monday is SEGUNDA)."""
        return _WEEKDAY_ORDER[value.weekday()]

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]


_WEEKDAY_ORDER: tuple[DayOfWeek, ...] = (
    DayOfWeek.SEGUNDA,
    DayOfWeek.TERCA,
    DayOfWeek.QUARTA,
    DayOfWeek.QUINTA,
    DayOfWeek.SEXTA,
    DayOfWeek.SABADO,
    DayOfWeek.DOMINGO,
)

_DISPLAY_NAMES: dict[DayOfWeek, str] = {
    DayOfWeek.SEGUNDA: "Monday",
    DayOfWeek.TERCA: "Tuesday",
    DayOfWeek.QUARTA: "Wednesday",
    DayOfWeek.QUINTA: "Thursday",
    DayOfWeek.SEXTA: "Friday",
    DayOfWeek.SABADO: "Saturday",
    DayOfWeek.DOMINGO: "Sunday",
}


class ScheduleType(str, Enum):
    REGULAR = "REGULAR"
    SPECIAL = "SPECIAL"
    HOLIDAY = "HOLIDAY"
    VACATION = "VACATION"
    TEMPORARY_CLOSURE = "TEMPORARY_CLOSURE"


class DeliveryType(str, Enum):
    DELIVERY = "DELIVERY"
    PICKUP = "PICKUP"
    DINE_IN = "DINE_IN"
    DRIVE_THRU = "DRIVE_THRU"


class DeliveryZoneType(str, Enum):
    RADIUS = "RADIUS"
    POLYGON = "POLYGON"
    NEIGHBORHOOD = "NEIGHBORHOOD"
    POSTAL_CODE = "POSTAL_CODE"


class FeeCalculationType(str, Enum):
    FIXED = "FIXED"
    BY_DISTANCE = "BY_DISTANCE"
    BY_ZONE = "BY_ZONE"
    BY_ORDER_VALUE = "BY_ORDER_VALUE"
    FREE = "FREE"
