"""
Geocoding providers.

NominatimGeocoder calls the free OpenStreetMap Nominatim search API.
StaticGeocoder serves a fixed address book, for offline runs and demos.
Both accept an injected cache; the engine works with or without one.
"""

from collections import OrderedDict
from collections.abc import Mapping, MutableMapping
from typing import Iterator, Optional, Protocol

import httpx

from anchor_scheduler.config import GeocoderConfig, settings
from anchor_scheduler.exceptions import GeocoderUnavailableError
from anchor_scheduler.logging_context import get_request_logger
from anchor_scheduler.schemas.location_schema import ResolvedLocation

logger = get_request_logger(__name__)


class Geocoder(Protocol):
    def geocode(self, address: str) -> Optional[ResolvedLocation]:
        """Return the best candidate for ``address`` or ``None`` if nothing matches."""
        ...


class LRUCache(MutableMapping):
    """Bounded address -> location cache evicting the least recently used entry."""

    def __init__(self, max_size: int = 1024) -> None:
        self.max_size = max_size
        self._data: OrderedDict[str, ResolvedLocation] = OrderedDict()

    def __getitem__(self, key: str) -> ResolvedLocation:
        value = self._data[key]
        self._data.move_to_end(key)
        return value

    def __setitem__(self, key: str, value: ResolvedLocation) -> None:
        if self.max_size <= 0:
            return
        self._data[key] = value
        self._data.move_to_end(key)
        while len(self._data) > self.max_size:
            self._data.popitem(last=False)

    def __delitem__(self, key: str) -> None:
        del self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)


class NominatimGeocoder:
    """OpenStreetMap Nominatim geocoder (no API key required)."""

    def __init__(
        self,
        config: Optional[GeocoderConfig] = None,
        cache: Optional[MutableMapping] = None,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self.config = config or settings.geocoder
        self.cache = cache
        self._client = client or httpx.Client(
            base_url=self.config.nominatim_url,
            timeout=self.config.timeout_sec,
            # Nominatim rejects requests without an identifying User-Agent
            headers={"User-Agent": self.config.user_agent},
        )

    def geocode(self, address: str) -> Optional[ResolvedLocation]:
        if self.cache is not None and address in self.cache:
            return self.cache[address]

        try:
            response = self._client.get(
                "/search",
                params={"q": address, "format": "json", "limit": 1, "addressdetails": 1},
            )
            response.raise_for_status()
            candidates = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Geocoding request failed for %r: %s", address, exc)
            raise GeocoderUnavailableError(f"Geocoding service unavailable: {exc}") from exc

        if not candidates:
            logger.info("No geocoding candidate for %r", address)
            return None

        best = candidates[0]
        location = ResolvedLocation(
            latitude=float(best["lat"]),
            longitude=float(best["lon"]),
            formatted_address=best.get("display_name") or address,
        )
        if self.cache is not None:
            self.cache[address] = location
        return location

    def close(self) -> None:
        self._client.close()


class StaticGeocoder:
    """Resolves addresses from a fixed ``address -> (lat, lng)`` table.

    Lookups are case- and whitespace-insensitive.
    """

    def __init__(
        self,
        addresses: Mapping[str, tuple[float, float]],
        cache: Optional[MutableMapping] = None,
    ) -> None:
        self._table = {self._key(addr): (addr, coords) for addr, coords in addresses.items()}
        self.cache = cache
        self.lookups = 0

    @staticmethod
    def _key(address: str) -> str:
        return " ".join(address.lower().split())

    def geocode(self, address: str) -> Optional[ResolvedLocation]:
        if self.cache is not None and address in self.cache:
            return self.cache[address]
        self.lookups += 1
        entry = self._table.get(self._key(address))
        if entry is None:
            return None
        name, (lat, lng) = entry
        location = ResolvedLocation(latitude=lat, longitude=lng, formatted_address=name)
        if self.cache is not None:
            self.cache[address] = location
        return location
