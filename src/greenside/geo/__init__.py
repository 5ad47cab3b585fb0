"""Device position acquisition."""

from greenside.geo.geolocation import (
    HttpPositionSource,
    NullPositionSource,
    Position,
    PositionSource,
    acquire_position,
)

__all__ = [
    "HttpPositionSource",
    "NullPositionSource",
    "Position",
    "PositionSource",
    "acquire_position",
]
