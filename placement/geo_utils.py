# geo_utils.py
import math

EARTH_RADIUS_M = 6378137.0


def destination_point(lat, lon, bearing, distance_m, radius_m=EARTH_RADIUS_M):
    """Point reached from (lat, lon) after distance_m along bearing (degrees)."""
    phi1 = math.radians(lat)
    lambda1 = math.radians(lon)
    theta = math.radians(bearing)
    delta = distance_m / radius_m

    phi2 = math.asin(
        math.sin(phi1) * math.cos(delta)
        + math.cos(phi1) * math.sin(delta) * math.cos(theta)
    )
    lambda2 = lambda1 + math.atan2(
        math.sin(theta) * math.sin(delta) * math.cos(phi1),
        math.cos(delta) - math.sin(phi1) * math.sin(phi2),
    )
    return math.degrees(phi2), math.degrees(lambda2)


def haversine_distance(lat1, lon1, lat2, lon2, radius_m=EARTH_RADIUS_M):
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlambda = math.radians(lon2 - lon1)

    a = math.sin(dphi/2)**2 + math.cos(phi1)*math.cos(phi2)*math.sin(dlambda/2)**2
    return 2 * radius_m * math.atan2(math.sqrt(a), math.sqrt(1-a))


def normalize_bearing(angle):
    # float modulo can round up to exactly 360 for tiny negative inputs
    normalized = angle % 360.0
    return 0.0 if normalized >= 360.0 else normalized
