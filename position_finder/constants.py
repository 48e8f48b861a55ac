"""
Default constants for the image position finder.

Search parameters, acceptance thresholds, recognized file extensions and
the black rectangle finder limits.
"""

# Fractional tolerance; the acceptance floor is 1.0 - DEFAULT_TOLERANCE
DEFAULT_TOLERANCE = 0.1

# Coarse scan stride over placements and needle pixels
PIXEL_STEP = 4

# Per-channel RGB tolerance
COLOR_TOLERANCE = 30

# Stop scanning once a placement scores at least this much
EARLY_STOP_THRESHOLD = 0.98

# Refinement window half-width, in strides
REFINE_RADIUS_STEPS = 2

IMAGE_EXTENSIONS = ('.jpg', '.jpeg', '.png')

# Decimal places kept for matchPercentage in reports
PERCENTAGE_DECIMALS = 4

RECTANGLE_PARAMS = {
    'BLACK_THRESHOLD': 30,  # channel values below this are black
    'MIN_RECT_WIDTH': 10,
    'MIN_RECT_HEIGHT': 10,
    'COLUMN_GROUPING_THRESHOLD': 20.0,  # pixels
}

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
