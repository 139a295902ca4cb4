"""
Static reference data: serviceable locations in Sikkim and wash-service tiers.

The tables are built once at import time and never mutated.
"""

from typing import Tuple

from .models import Location, WashService


SIKKIM_LOCATIONS: Tuple[Location, ...] = (
    Location(id="1", name="Gangtok", pincode="737101", distance_from_office=0),
    Location(id="2", name="Namchi", pincode="737126", distance_from_office=78),
    Location(id="3", name="Pelling", pincode="737113", distance_from_office=115),
    Location(id="4", name="Mangan", pincode="737116", distance_from_office=68),
    Location(id="5", name="Geyzing", pincode="737111", distance_from_office=110),
    Location(id="6", name="Jorethang", pincode="737121", distance_from_office=95),
    Location(id="7", name="Rangpo", pincode="737132", distance_from_office=45),
)

WASH_SERVICES: Tuple[WashService, ...] = (
    WashService(
        id="normal",
        name="Normal Wash",
        description="Basic exterior wash with soap and water",
        base_price=150,
        duration=30,
    ),
    WashService(
        id="premium",
        name="Premium Wash",
        description="Complete wash with interior cleaning, wax, and polish",
        base_price=300,
        duration=60,
    ),
)


def get_location(location_id: str) -> Location | None:
    """Find a location by its identifier."""
    for location in SIKKIM_LOCATIONS:
        if location.id == location_id:
            return location
    return None


def get_location_by_pincode(pincode: str) -> Location | None:
    """Find a location by its postal code."""
    pincode = pincode.strip()
    for location in SIKKIM_LOCATIONS:
        if location.pincode == pincode:
            return location
    return None


def is_serviceable_pincode(pincode: str) -> bool:
    """Check whether a postal code belongs to a serviceable location."""
    return get_location_by_pincode(pincode) is not None


def get_service(service_id: str) -> WashService | None:
    """Find a wash service by its identifier (case-insensitive)."""
    for service in WASH_SERVICES:
        if service.id == service_id.lower():
            return service
    return None
