"""Internal constants shared across the library."""

BASE_URL = "https://svc.metrotransit.org"
USER_AGENT = "pynextrip/0.1"

#: Seconds between vehicle refresh cycles.
VEHICLE_POLL_INTERVAL_S = 10.0
REQUEST_TIMEOUT_S = 10.0

MAX_POPUP_DEPARTURES = 5
FIT_PADDING_PX = 50
POPUP_OFFSET_PX = 25
STOP_DETAIL_CONCURRENCY = 4

ROUTE_LINE_LAYER_ID = "route-line"

# Downtown Minneapolis, (lon, lat)
DEFAULT_CENTER: tuple[float, float] = (-93.265, 44.9778)
DEFAULT_ZOOM = 12.0

# Departure texts carrying a minute countdown come from live vehicle tracking.
REALTIME_DEPARTURE_MARKER = "Min"
