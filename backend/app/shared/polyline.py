"""
Google encoded polyline decoding.

Strava returns routes as `summary_polyline` in this format
(precision 5). This is the SINGLE place it is decoded.
"""

PRECISION = 5


def _decode_value(encoded: str, index: int) -> tuple[int, int]:
    result = 0
    shift = 0
    while True:
        if index >= len(encoded):
            raise ValueError("Truncated polyline")
        byte = ord(encoded[index]) - 63
        index += 1
        result |= (byte & 0x1F) << shift
        shift += 5
        if byte < 0x20:
            break
    delta = ~(result >> 1) if result & 1 else result >> 1
    return delta, index


def decode_polyline(encoded: str | None, precision: int = PRECISION) -> list[list[float]]:
    """
    Decode an encoded polyline.

    Args:
        encoded: Encoded polyline string (None/empty allowed)
        precision: Number of decimal places used when encoding

    Returns:
        List of [lat, lng] pairs

    Raises:
        ValueError: If the string is truncated
    """
    if not encoded:
        return []

    factor = 10 ** precision
    points = []
    index = lat = lng = 0

    while index < len(encoded):
        d_lat, index = _decode_value(encoded, index)
        d_lng, index = _decode_value(encoded, index)
        lat += d_lat
        lng += d_lng
        points.append([lat / factor, lng / factor])

    return points
