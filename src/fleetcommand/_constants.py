"""Internal constants shared across the library."""

EARTH_RADIUS_KM = 6371.0

# ------------------------------------------------------------------
# Unit conversion factors
# ------------------------------------------------------------------

KMH_PER_MPH = 1.60934
MILES_PER_KM = 0.621371
METERS_PER_KM = 1000.0

# ------------------------------------------------------------------
# Movement classification
# ------------------------------------------------------------------

# Anything at or below this is GPS jitter on a parked truck.
MOVING_SPEED_THRESHOLD_KPH = 5.0

DEFAULT_AVERAGE_SPEED_KMH = 60.0

FUEL_MIN_PCT = 0.0
FUEL_MAX_PCT = 100.0

# Bus topics look like ``fleet/{vehicleId}/gps``.
BUS_TOPIC_SEPARATOR = "/"
BUS_TOPIC_VEHICLE_SEGMENT = 1
