"""
Analysis Constants

Tunable thresholds shared by the analysis passes.
"""

# Pre-scaling
DEFAULT_MAX_DIMENSION = 800

# Sampling strides
REGION_SAMPLE_STRIDE = 2
TEXTURE_SAMPLE_STRIDE = 4
COLOR_SAMPLE_STEP = 4  # every 4th pixel in flat order

# Sobel thresholds
EDGE_THRESHOLD = 30            # region pixel counts as an edge
CONTOUR_THRESHOLD = 60         # region pixel counts as a strong edge
EDGE_STRENGTH_THRESHOLD = 40   # edge-strength mean and contour membership
CONTOUR_SEED_THRESHOLD = 50    # pixel may start a new contour

# Contour tracing
MAX_CONTOUR_LENGTH = 100
MIN_CONTOUR_LENGTH = 10  # contours must be strictly longer

# Texture
TEXTURED_COMPLEXITY = 1000
SMOOTH_COMPLEXITY = 200
UNIFORMITY_DIVISOR = 20

# Region statistics
DEFAULT_BRIGHTNESS = 128
MAX_DOMINANT_COLORS = 5
MAX_TEXTURE_COMPLEXITY = 100

# Whole-image color analysis
BACKGROUND_BRIGHTNESS_LOW = 25
BACKGROUND_BRIGHTNESS_HIGH = 230
MIN_COLOR_PERCENTAGE = 2
REPORTED_COLORS = 3

# Garment classification
TALL_ASPECT_RATIO = 0.7
WIDE_ASPECT_RATIO = 1.3
DRESS_COMPLEXITY_DELTA = 20
BOTTOM_DOMINANCE_FACTOR = 1.5

# Silhouette
SILHOUETTE_WIDE_RATIO = 1.2
SILHOUETTE_ELONGATED_RATIO = 0.6
STRUCTURED_EDGE_STRENGTH = 60
COMPLEX_SHAPE_CONTOURS = 10

# Confidence
BASE_CONFIDENCE = 60
MAX_CONFIDENCE = 95

# Clothing content validation
VALIDATION_THRESHOLD = 75

FABRIC_POINTS = 30
NECKLINE_POINTS = 12
SLEEVE_POINTS = 13
COLOR_AREA_POINTS = 20
FOCUS_POINTS = 10
SKIN_POINTS = 5
ANTI_PATTERN_POINTS = 10

FABRIC_BLOCK_SIZE = 8
FABRIC_FLAT_VARIANCE = 2
FABRIC_MAX_VARIANCE = 1500

NECKLINE_COLUMN_STEP = 4
NECKLINE_MIN_COLUMNS = 5
NECKLINE_MIN_SPREAD = 2

SLEEVE_STRIP_FRACTION = 0.2
SLEEVE_MIN_RATIO = 0.01
SLEEVE_MAX_RATIO = 0.3

COLOR_GRID_SIZE = 4
MAX_BLOCK_COLORS = 5
COLOR_CONSISTENCY_RATIO = 0.5

FOCUS_BORDER_FRACTION = 0.15
FOCUS_VARIANCE_FACTOR = 1.2
FOCUS_VARIANCE_MARGIN = 10
SKIN_SAMPLE_STRIDE = 4
SKIN_MIN_RATIO = 0.005
SKIN_MAX_RATIO = 0.35
# a wider red-green gap is a saturated red, not skin
SKIN_MAX_RED_GREEN_GAP = 100

STRAIGHT_LINE_COVERAGE = 0.6
MAX_LINE_DENSITY = 0.02

SUGGESTION_UNCLEAR_BAND = 50
SUGGESTION_WEAK_BAND = 25

# Fallback records
FALLBACK_CONFIDENCE = 40
