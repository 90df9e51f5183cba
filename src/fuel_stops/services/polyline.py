from __future__ import annotations

import math

from fuel_stops.services.types import Coordinate

POLYLINE_PRECISION = 1e5
DEFAULT_MAX_POINTS = 180


def evenly_spaced_indices(length: int, count: int) -> list[int]:
    if count <= 0 or length <= 0:
        return []
    if count == 1:
        return [0]
    return [math.floor(index * (length - 1) / (count - 1) + 0.5) for index in range(count)]


def simplify(
    coordinates: list[Coordinate], max_points: int = DEFAULT_MAX_POINTS
) -> list[Coordinate]:
    """Downsample to at most ``max_points`` while keeping both endpoints."""
    if len(coordinates) <= max_points:
        return coordinates
    return [coordinates[index] for index in evenly_spaced_indices(len(coordinates), max_points)]


def _scale(value: float) -> int:
    # Half-up rounding, matching the reference polyline encoder.
    return math.floor(value * POLYLINE_PRECISION + 0.5)


def _encode_value(value: int) -> str:
    shifted = ~(value << 1) if value < 0 else (value << 1)
    chunks = []
    while shifted >= 0x20:
        chunks.append(chr((0x20 | (shifted & 0x1F)) + 63))
        shifted >>= 5
    chunks.append(chr(shifted + 63))
    return "".join(chunks)


def encode(coordinates: list[Coordinate]) -> str:
    """Encode (lon, lat) pairs as a Google polyline (lat first, 1e5 precision)."""
    previous_lat = 0
    previous_lon = 0
    out = []
    for lon, lat in coordinates:
        scaled_lat = _scale(lat)
        scaled_lon = _scale(lon)
        out.append(_encode_value(scaled_lat - previous_lat))
        out.append(_encode_value(scaled_lon - previous_lon))
        previous_lat = scaled_lat
        previous_lon = scaled_lon
    return "".join(out)


def _decode_value(encoded: str, index: int) -> tuple[int, int]:
    result = 0
    shift = 0
    while True:
        chunk = ord(encoded[index]) - 63
        index += 1
        result |= (chunk & 0x1F) << shift
        shift += 5
        if chunk < 0x20:
            break
    delta = ~(result >> 1) if (result & 1) else (result >> 1)
    return delta, index


def decode(encoded: str) -> list[Coordinate]:
    """Decode a Google polyline back into (lon, lat) pairs."""
    index = 0
    lat = 0
    lon = 0
    coordinates: list[Coordinate] = []
    while index < len(encoded):
        delta_lat, index = _decode_value(encoded, index)
        delta_lon, index = _decode_value(encoded, index)
        lat += delta_lat
        lon += delta_lon
        coordinates.append((lon / POLYLINE_PRECISION, lat / POLYLINE_PRECISION))
    return coordinates
