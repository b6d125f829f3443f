"""
Workshop directory helpers: loading, distance sorting and suggestions.

Distances use the haversine formula on a spherical Earth. Without a client
position workshops are listed alphabetically.
"""

import logging
import math
from dataclasses import dataclass
from typing import Iterable, Optional

from mechapp.api.client import MechAppClient
from mechapp.api.results import ApiResult, Ok, Unauthenticated
from mechapp.availability.registry import WorkshopRegistry
from mechapp.schemas.workshop_schema import Workshop

logger = logging.getLogger(__name__)

EARTH_RADIUS_KM = 6371
MAX_SUGGESTIONS = 4


@dataclass(frozen=True)
class Coordinates:
    lat: float
    lng: float


@dataclass(frozen=True)
class WorkshopSuggestion:
    """A workshop option with its distance from the client, when known."""

    workshop: Workshop
    distance_km: Optional[float] = None

    @property
    def value(self) -> str:
        return f"{self.workshop.name} · {self.workshop.address}"

    @property
    def distance_label(self) -> str:
        return format_distance(self.distance_km) if self.distance_km is not None else ""


def haversine_distance(a: Coordinates, b: Coordinates) -> float:
    """Great-circle distance in kilometres."""
    d_lat = math.radians(b.lat - a.lat)
    d_lng = math.radians(b.lng - a.lng)
    lat1 = math.radians(a.lat)
    lat2 = math.radians(b.lat)
    h = math.sin(d_lat / 2) ** 2 + math.sin(d_lng / 2) ** 2 * math.cos(lat1) * math.cos(lat2)
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def format_distance(kilometers: float) -> str:
    """Human label: metres under 1 km, one decimal under 10 km, whole km above.

    Examples:
        >>> format_distance(0.85)
        '850 m'
        >>> format_distance(3.24)
        '3.2 km'
        >>> format_distance(12.4)
        '12 km'
    """
    if not math.isfinite(kilometers):
        return ""
    if kilometers < 1:
        return f"{_round_half_up(kilometers * 1000)} m"
    if kilometers < 10:
        return f"{kilometers:.1f} km"
    return f"{_round_half_up(kilometers)} km"


def sort_by_distance(
    workshops: Iterable[Workshop], position: Optional[Coordinates] = None
) -> list[WorkshopSuggestion]:
    """Nearest first; workshops without coordinates go last, by name."""
    items = list(workshops)
    if position is None:
        return [WorkshopSuggestion(w) for w in sorted(items, key=lambda w: w.name.casefold())]

    located = [
        WorkshopSuggestion(w, haversine_distance(position, Coordinates(w.lat, w.lng)))
        for w in items
        if w.lat is not None and w.lng is not None
    ]
    located.sort(key=lambda s: s.distance_km)
    unlocated = sorted(
        (w for w in items if w.lat is None or w.lng is None), key=lambda w: w.name.casefold()
    )
    return located + [WorkshopSuggestion(w) for w in unlocated]


def suggest_workshops(
    workshops: Iterable[Workshop],
    position: Optional[Coordinates] = None,
    limit: int = MAX_SUGGESTIONS,
) -> list[WorkshopSuggestion]:
    return sort_by_distance(workshops, position)[:limit]


async def load_workshops(client: MechAppClient, registry: WorkshopRegistry) -> ApiResult[list[Workshop]]:
    """Rebuild ``registry`` from the public listing; failures leave it empty."""
    result = await client.list_workshops()
    if isinstance(result, Ok):
        registry.rebuild(result.value)
    elif not isinstance(result, Unauthenticated):
        logger.warning("Workshop listing unavailable: %s", result)
        registry.rebuild([])
    return result
