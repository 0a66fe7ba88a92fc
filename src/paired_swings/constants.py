"""Physical and model constants used as configuration defaults."""

from __future__ import annotations

MPH_TO_FEET_PER_SECOND = 1.467
GRAVITY_FT_PER_S2 = 32.174
DRAG_COEFFICIENT = 0.0004
CONTACT_HEIGHT_FT = 3.0

SCAN_DT_SECONDS = 0.01
SAMPLE_DT_SECONDS = 0.02
SCAN_MAX_DISTANCE_FT = 600.0
SAMPLE_MARGIN_FT = 50.0
MAX_INTEGRATION_STEPS = 200_000

MATCH_TOLERANCE_SECONDS = 7.0
QUALITY_THRESHOLD_PCT = 80.0
DEFAULT_INPUT_SPEED_MPH = 75.0

SOURCE_SPEED_COEFFICIENT = 1.23
INPUT_SPEED_BREAKPOINTS_MPH = (40.0, 55.0, 70.0)
INPUT_SPEED_COEFFICIENTS = (0.50, 0.10, 0.17, 0.23)
