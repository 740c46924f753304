# Geo helpers - great-circle distance between coordinates

import math

EARTH_RADIUS = 6371000  # m


def haversine(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Distance in meters between (lat1, lon1) and (lat2, lon2) on earth,
    coordinates in degrees.
    """
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)

    a = (
        math.sin(d_lat / 2.0) ** 2
        + math.sin(d_lon / 2.0) ** 2 * math.cos(math.radians(lat1)) * math.cos(math.radians(lat2))
    )

    return EARTH_RADIUS * 2.0 * math.asin(math.sqrt(min(1.0, a)))
