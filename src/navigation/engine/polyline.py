# polyline.py
# Encoded polyline codec (signed varint deltas, 1e-5 degree precision).
# OSRM returns geometries in this format when asked for geometries=polyline.

from typing import Iterable, List

from .models import Coord


PRECISION = 5


def _read_value(encoded: str, index: int):
    """Read one zig-zag varint starting at index. Returns (value, next_index)."""
    result = 0
    shift = 0
    while True:
        if index >= len(encoded):
            raise ValueError("Truncated polyline string.")
        b = ord(encoded[index]) - 63
        index += 1
        if b < 0 or b > 0x3F:
            raise ValueError(f"Invalid polyline character {encoded[index - 1]!r}.")
        result |= (b & 0x1F) << shift
        shift += 5
        if b < 0x20:
            break
    value = ~(result >> 1) if result & 1 else result >> 1
    return value, index


def decode(encoded: str, precision: int = PRECISION) -> List[Coord]:
    """
    Decode a polyline string into coordinates.

    Args:
        encoded:   Encoded polyline; an empty string gives an empty list.
        precision: Number of decimal places the encoder used.

    Returns:
        List of Coord in path order.
    """
    factor = 10 ** precision
    coords: List[Coord] = []
    index = 0
    lat = 0
    lon = 0
    while index < len(encoded):
        d_lat, index = _read_value(encoded, index)
        d_lon, index = _read_value(encoded, index)
        lat += d_lat
        lon += d_lon
        coords.append(Coord(lat / factor, lon / factor))
    return coords


def _write_value(value: int, out: List[str]) -> None:
    value = ~(value << 1) if value < 0 else value << 1
    while value >= 0x20:
        out.append(chr((0x20 | (value & 0x1F)) + 63))
        value >>= 5
    out.append(chr(value + 63))


def encode(coords: Iterable[Coord], precision: int = PRECISION) -> str:
    """Reference encoder, the inverse of decode() at the given precision."""
    factor = 10 ** precision
    out: List[str] = []
    prev_lat = 0
    prev_lon = 0
    for c in coords:
        lat = int(round(c.lat * factor))
        lon = int(round(c.lon * factor))
        _write_value(lat - prev_lat, out)
        _write_value(lon - prev_lon, out)
        prev_lat, prev_lon = lat, lon
    return "".join(out)
