"""
Airport registry and location classifier
=========================================

Static table of major U.S. airports and the ``AirportLocator`` capability
used by the pricing engine to decide whether a trip endpoint is an
airport.

The classifier must stay a pure function of its coordinates (no network,
no caching with invalidation) so that fare estimates remain deterministic.
Alternative geofence implementations only need to satisfy the
``AirportLocator`` protocol.

Typical usage::

    from farecompare.integrations.airports import StaticAirportLocator

    locator = StaticAirportLocator()
    airport = locator.locate(Coordinates(lat=37.6213, lng=-122.379))
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Mapping, Optional, Protocol

from farecompare.services.geoService import Coordinates

# Half-width (degrees) of the square geofence around each airport
DEFAULT_TOLERANCE_DEG: float = 0.05

_AIRPORT_CODE_RE = re.compile(r"([A-Z]{3})")


@dataclass(frozen=True)
class Airport:
    """A recognised airport and its reference coordinates."""

    code: str
    name: str
    city: str
    state: str
    coordinates: Coordinates
    timezone: str

    @property
    def display_name(self) -> str:
        return f"{self.name} ({self.code})"


class AirportLocator(Protocol):
    """Resolves a coordinate pair to the airport it belongs to, if any."""

    def locate(self, point: Coordinates) -> Optional[Airport]:
        ...


# ---------------------------------------------------------------------------
# Airport table
# ---------------------------------------------------------------------------

AIRPORTS: dict[str, Airport] = {
    airport.code: airport
    for airport in (
        # Bay Area
        Airport("SFO", "San Francisco International Airport", "San Francisco", "CA",
                Coordinates(37.6213, -122.379), "America/Los_Angeles"),
        Airport("SJC", "San Jose International Airport", "San Jose", "CA",
                Coordinates(37.3639, -121.9289), "America/Los_Angeles"),
        Airport("OAK", "Oakland International Airport", "Oakland", "CA",
                Coordinates(37.7126, -122.2197), "America/Los_Angeles"),
        # Los Angeles
        Airport("LAX", "Los Angeles International Airport", "Los Angeles", "CA",
                Coordinates(33.9425, -118.4085), "America/Los_Angeles"),
        # New York area
        Airport("JFK", "John F. Kennedy International Airport", "New York", "NY",
                Coordinates(40.6413, -73.7781), "America/New_York"),
        Airport("EWR", "Newark Liberty International Airport", "Newark", "NJ",
                Coordinates(40.6895, -74.1745), "America/New_York"),
        # Chicago
        Airport("ORD", "O'Hare International Airport", "Chicago", "IL",
                Coordinates(41.9742, -87.9073), "America/Chicago"),
        # Atlanta
        Airport("ATL", "Hartsfield-Jackson Atlanta International Airport", "Atlanta", "GA",
                Coordinates(33.6407, -84.4277), "America/New_York"),
        # Seattle
        Airport("SEA", "Seattle-Tacoma International Airport", "Seattle", "WA",
                Coordinates(47.4502, -122.3088), "America/Los_Angeles"),
        # Denver
        Airport("DEN", "Denver International Airport", "Denver", "CO",
                Coordinates(39.8561, -104.6737), "America/Denver"),
        # Boston
        Airport("BOS", "Logan International Airport", "Boston", "MA",
                Coordinates(42.3656, -71.0096), "America/New_York"),
        # Dallas
        Airport("DFW", "Dallas/Fort Worth International Airport", "Dallas", "TX",
                Coordinates(32.8968, -97.0372), "America/Chicago"),
    )
}


# ---------------------------------------------------------------------------
# Locator
# ---------------------------------------------------------------------------

class StaticAirportLocator:
    """Tolerance-box lookup against a static airport table.

    A point matches an airport when both its latitude and longitude lie
    strictly within ``tolerance`` degrees of the airport's reference
    coordinates.  Airports are checked in table order; the first match wins.
    """

    def __init__(
        self,
        airports: Optional[Mapping[str, Airport]] = None,
        tolerance: float = DEFAULT_TOLERANCE_DEG,
    ) -> None:
        self._airports = tuple((airports if airports is not None else AIRPORTS).values())
        self._tolerance = tolerance

    def locate(self, point: Coordinates) -> Optional[Airport]:
        for airport in self._airports:
            ref = airport.coordinates
            if (
                abs(point.lat - ref.lat) < self._tolerance
                and abs(point.lng - ref.lng) < self._tolerance
            ):
                return airport
        return None


# ---------------------------------------------------------------------------
# Lookup helpers
# ---------------------------------------------------------------------------

def get_airport_by_code(code: str) -> Optional[Airport]:
    return AIRPORTS.get(code.upper())


def get_all_airports() -> list[Airport]:
    return list(AIRPORTS.values())


def search_airports(query: str) -> list[Airport]:
    """Case-insensitive substring search over code, name, city and display name."""
    needle = query.strip().lower()
    if not needle:
        return []
    return [
        airport
        for airport in AIRPORTS.values()
        if needle in airport.code.lower()
        or needle in airport.name.lower()
        or needle in airport.city.lower()
        or needle in airport.display_name.lower()
    ]


def parse_airport_code(location: str) -> Optional[str]:
    """Extract a known three-letter airport code from free text.

    Only the first three-letter uppercase run is considered, so
    ``"sfo terminal 2"`` resolves to ``"SFO"``.
    """
    match = _AIRPORT_CODE_RE.search(location.upper())
    if match and match.group(1) in AIRPORTS:
        return match.group(1)
    return None
