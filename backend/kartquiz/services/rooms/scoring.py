import math

EARTH_RADIUS_KM = 6371.0
MAX_POINTS = 1000


def round_half_up(value: float) -> int:
    """Round halves up, as JavaScript Math.round does; round() rounds them to even."""
    return int(math.floor(value + 0.5))


def distance(a, b) -> float:
    """Great-circle distance in kilometres between two (lat, lng) pairs in degrees."""
    lat1, lng1 = a
    lat2, lng2 = b
    d_lat = math.radians(lat2 - lat1)
    d_lng = math.radians(lng2 - lng1)
    h = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lng / 2) ** 2
    )
    h = min(1.0, h)
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def score(distance_km: float, max_distance_km: float) -> int:
    """Points for a guess ``distance_km`` away when answers score up to ``max_distance_km``.

    A non-positive radius never scores.
    """
    if max_distance_km <= 0 or distance_km > max_distance_km:
        return 0
    return round_half_up(MAX_POINTS * (1 - distance_km / max_distance_km))
