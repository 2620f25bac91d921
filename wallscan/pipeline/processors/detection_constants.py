"""
Shared constants for raster wall detection.

All distances are in pixels of the binarized plan unless the name says
otherwise. These are heuristic defaults; DetectionConfig carries the values
actually used by a run.
"""

# ---------------------------------------------------------------------------
# BINARIZE
# ---------------------------------------------------------------------------
# ITU-R BT.601 luma weights
LUMINANCE_WEIGHTS = (0.299, 0.587, 0.114)
# Pixels with luminance strictly below this are dark (wall candidates)
DARK_THRESHOLD = 128

# ---------------------------------------------------------------------------
# Wall thickness range (px), shared by calibration and scanning
# ---------------------------------------------------------------------------
MIN_THICKNESS_PX = 5
MAX_THICKNESS_PX = 100

# ---------------------------------------------------------------------------
# CALIBRATE_SCALE
# ---------------------------------------------------------------------------
# Drawing scale label -> pixels per meter
STANDARD_SCALES = {
    "1:50": 600.0,
    "1:100": 300.0,
    "1:200": 150.0,
    "1:500": 60.0,
}
DEFAULT_SCALE_LABEL = "1:100"
# Real thickness (m) a typical sampled wall is assumed to have
ASSUMED_WALL_THICKNESS_M = 0.25

# ---------------------------------------------------------------------------
# SCAN_SEGMENTS
# ---------------------------------------------------------------------------
MIN_RUN_LENGTH_PX = 20
SCAN_STEP_PX = 2
# Points along a run (fractions of its length) where thickness is probed,
# in order of preference. Later points are used when a perpendicular wall
# meets the run at an earlier one.
PROBE_FRACTIONS = ((1, 2), (1, 4), (3, 4), (1, 8), (3, 8), (5, 8), (7, 8))

# ---------------------------------------------------------------------------
# MERGE_SEGMENTS
# ---------------------------------------------------------------------------
MERGE_CROSS_AXIS_TOL_PX = 5
MERGE_THICKNESS_TOL_PX = 3
MERGE_GAP_TOL_PX = 10

# ---------------------------------------------------------------------------
# CONNECT_WALLS
# ---------------------------------------------------------------------------
# Endpoint distance (px, inclusive) at which two segments belong to one wall
CONNECT_ENDPOINT_GAP_PX = 20.0
# Slack added to the spatial index query; the exact check uses the gap itself
CONNECT_QUERY_EPS_PX = 1e-6

# ---------------------------------------------------------------------------
# CLASSIFY_WALLS (first match wins, in this order)
# ---------------------------------------------------------------------------
PERIMETER_MARGIN_PX = 50
EXTERIOR_MIN_THICKNESS_PX = 20.0
INSULATED_MIN_THICKNESS_PX = 25.0
LOAD_BEARING_MIN_THICKNESS_PX = 15.0
DRYWALL_MAX_THICKNESS_PX = 8.0
