"""Reverse geocoding of suggested project locations."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional

from geopy.exc import GeocoderServiceError
from geopy.geocoders import Nominatim
from geopy.point import Point

from src.utils.logger import logger

_NEIGHBORHOOD_KEYS: tuple[str, ...] = ("neighbourhood", "suburb", "quarter", "city_district")
_PLACE_KEYS: tuple[str, ...] = ("amenity", "park", "building", "leisure")


@dataclass
class ReverseGeocoder:
    """Describe a coordinate with a street-level name and a neighborhood."""

    user_agent: str = "streetwise"
    timeout: int = 5
    language: str = "en"

    def __post_init__(self) -> None:
        self._geolocator = Nominatim(user_agent=self.user_agent, timeout=self.timeout)

    def describe(self, latitude: float, longitude: float) -> tuple[Optional[str], Optional[str]]:
        """Return ``(location_name, neighborhood)``; either may be ``None``."""
        logger.debug("Reverse geocoding ({}, {})", latitude, longitude)
        try:
            location = self._geolocator.reverse(
                Point(latitude=latitude, longitude=longitude),
                language=self.language,
                exactly_one=True,
                addressdetails=True,
            )
        except (GeocoderServiceError, ValueError) as error:
            logger.warning("Reverse geocoding failed for ({}, {}): {}", latitude, longitude, error)
            return None, None

        if location is None:
            logger.info("No address found for ({}, {})", latitude, longitude)
            return None, None

        address = getattr(location, "raw", {}).get("address", {})
        if not isinstance(address, Mapping):
            return None, None

        return self._location_name(address), self._neighborhood(address)

    @staticmethod
    def _location_name(address: Mapping[str, object]) -> Optional[str]:
        road = address.get("road")
        if isinstance(road, str) and road.strip():
            number = address.get("house_number")
            if isinstance(number, str) and number.strip():
                return f"{number.strip()} {road.strip()}"
            return road.strip()

        for key in _PLACE_KEYS:
            value = address.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
        return None

    @staticmethod
    def _neighborhood(address: Mapping[str, object]) -> Optional[str]:
        for key in _NEIGHBORHOOD_KEYS:
            value = address.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
        return None


__all__ = ["ReverseGeocoder"]
