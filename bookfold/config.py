"""Centralized configuration constants for bookfold."""

# Detection defaults
DEFAULT_THRESHOLD = 128  # Grayscale cutoff: value < threshold is dark
MIN_THRESHOLD = 0
MAX_THRESHOLD = 255

# Grayscale conversion
BACKGROUND_COLOR = (255, 255, 255)  # Transparent pixels are flattened onto this

# Units and precision
CM_PER_INCH = 2.54
MM_PER_CM = 10
DEFAULT_UNIT = "cm"  # cm | in
DEFAULT_PRECISION = "0.1mm"  # 0.1mm | 0.5mm | 1mm | exact
DISPLAY_DECIMALS = 2  # Every reported measurement keeps at most 2 decimals
ZONE_HEIGHT_TOLERANCE_CM = 0.01  # Allowed drift between height and end - start

# Grid steps per millimeter for each snapping precision
PRECISION_STEPS_PER_MM = {
    "0.1mm": 10,
    "0.5mm": 2,
    "1mm": 1,
}

# Mode-specific defaults
DEFAULT_COMBI_EDGE_WIDTH_CM = 2.0
DEFAULT_SHADOW_FOLD_PERIOD = "1:1"  # 1:1 (fold 1, skip 1) | 2:1 (fold 2, skip 1)

# Book geometry
LOGICAL_PAGES_PER_SHEET = 2  # Recto and verso

# Output
SCHEMA_VERSION = "1.0.0"  # JSON schema version
