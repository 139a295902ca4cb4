"""
Price calculation for wash services.

Fuel is charged for the round trip from the depot to the customer's
location. Everything here is pure: no I/O and no failure modes.
"""

from dataclasses import dataclass

from .models import Location, WashService

# Currency units per kilometre
FUEL_RATE = 8


@dataclass(frozen=True)
class Quote:
    """Price breakdown for a service at a location, not yet persisted."""
    base_price: float
    fuel_charge: float
    total_price: float


def fuel_charge(location: Location, rate: float = FUEL_RATE) -> float:
    """Round-trip fuel charge for a location."""
    return location.distance_from_office * rate * 2


def total_price(service: WashService, location: Location, rate: float = FUEL_RATE) -> float:
    """Base price of the service plus the fuel charge for the location."""
    return service.base_price + fuel_charge(location, rate)


def quote(service: WashService, location: Location, rate: float = FUEL_RATE) -> Quote:
    """Build the full price breakdown for a service/location pair."""
    charge = fuel_charge(location, rate)
    return Quote(
        base_price=service.base_price,
        fuel_charge=charge,
        total_price=service.base_price + charge,
    )


def service_price(
    service: WashService,
    location: Location | None = None,
    rate: float = FUEL_RATE,
) -> float:
    """
    Price shown next to a service while browsing.

    Before a location is chosen only the base price is known.
    """
    if location is None:
        return service.base_price
    return total_price(service, location, rate)
