"""Single-shot position requests with a deterministic fallback.

A position source may be slow, absent, or refuse; ``acquire_position``
bounds the wait with ``asyncio.wait_for`` and falls back to a caller-given
location (the viewport center) so the request never hangs.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Protocol

import httpx
from loguru import logger

from greenside.errors import GeolocationError

GEOLOCATION_TIMEOUT = 10.0  # seconds


@dataclass(frozen=True)
class Position:
    lng: float
    lat: float
    accuracy: float | None = None  # meters


class PositionSource(Protocol):
    async def get_position(
        self,
        enable_high_accuracy: bool,
        timeout: float,
        maximum_age: float,
    ) -> Position: ...


class NullPositionSource:
    """No positioning hardware."""

    async def get_position(self, enable_high_accuracy, timeout, maximum_age) -> Position:
        raise GeolocationError("Geolocation not supported")


class HttpPositionSource:
    """Reads the current fix from a GPS relay serving JSON.

    Expected body: ``{"lat": .., "lng"|"lon"|"longitude": .., "accuracy": ..}``.
    """

    def __init__(self, url: str, client: httpx.AsyncClient | None = None) -> None:
        self.url = url
        self._client = client

    async def get_position(
        self,
        enable_high_accuracy: bool = True,
        timeout: float = GEOLOCATION_TIMEOUT,
        maximum_age: float = 0.0,
    ) -> Position:
        params = {
            "enableHighAccuracy": str(enable_high_accuracy).lower(),
            "maximumAge": maximum_age,
        }
        try:
            if self._client is not None:
                resp = await self._client.get(self.url, params=params, timeout=timeout)
            else:
                async with httpx.AsyncClient(timeout=timeout) as client:
                    resp = await client.get(self.url, params=params)
            resp.raise_for_status()
            data = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            raise GeolocationError(f"GPS relay request failed: {e}") from e
        return _parse_fix(data)


def _parse_fix(data) -> Position:
    if not isinstance(data, dict):
        raise GeolocationError("GPS relay returned a non-object body")
    coords = data.get("coords") if isinstance(data.get("coords"), dict) else data
    lng = next((coords[k] for k in ("lng", "lon", "longitude") if k in coords), None)
    lat = next((coords[k] for k in ("lat", "latitude") if k in coords), None)
    if lng is None or lat is None:
        raise GeolocationError("GPS relay response has no position")
    try:
        accuracy = coords.get("accuracy")
        return Position(
            lng=float(lng),
            lat=float(lat),
            accuracy=float(accuracy) if accuracy is not None else None,
        )
    except (TypeError, ValueError) as e:
        raise GeolocationError(f"GPS relay returned a bad position: {e}") from e


async def acquire_position(
    source: PositionSource,
    fallback: tuple[float, float],
    enable_high_accuracy: bool = True,
    timeout: float = GEOLOCATION_TIMEOUT,
    maximum_age: float = 0.0,
) -> tuple[Position, bool]:
    """Ask ``source`` for a fix, waiting at most ``timeout`` seconds.

    Returns:
        ``(position, from_device)``. On failure, denial or timeout the
        position is ``fallback`` (lng, lat) and ``from_device`` is False.
    """
    try:
        position = await asyncio.wait_for(
            source.get_position(enable_high_accuracy, timeout, maximum_age),
            timeout=timeout,
        )
        return position, True
    except asyncio.TimeoutError:
        logger.warning(f"Geolocation timed out after {timeout}s; using {fallback}")
    except GeolocationError as e:
        logger.warning(f"Geolocation failed: {e}; using {fallback}")
    return Position(lng=fallback[0], lat=fallback[1]), False
