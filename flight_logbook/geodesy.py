import numpy as np

EARTH_R = 6371000.0  # meters

def _deg2rad(x):
    return np.deg2rad(np.asarray(x, dtype=float))

def surface_distance(lat1_deg, lon1_deg, lat2_deg, lon2_deg):
    """
    Great-circle distance in meters (haversine on a sphere of radius EARTH_R).

    Accepts scalars or equally shaped arrays. Scalar input returns a float.
    """
    lat1 = _deg2rad(lat1_deg)
    lat2 = _deg2rad(lat2_deg)
    dlat = _deg2rad(np.subtract(lat2_deg, lat1_deg, dtype=float))
    dlon = _deg2rad(np.subtract(lon2_deg, lon1_deg, dtype=float))

    a = np.sin(dlat / 2) ** 2 + np.cos(lat1) * np.cos(lat2) * np.sin(dlon / 2) ** 2
    # rounding can push a just past 1 for antipodal points
    a = np.clip(a, 0.0, 1.0)

    c = 2 * np.arctan2(np.sqrt(a), np.sqrt(1 - a))
    d = EARTH_R * c
    if np.ndim(d) == 0:
        return float(d)
    return d
