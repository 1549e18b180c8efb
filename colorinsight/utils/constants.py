"""Constants used throughout the application."""

# Scoring weights, fixed and summing to 1.00
SCORE_WEIGHTS = {
    "match": 0.30,
    "trend": 0.25,
    "market": 0.20,
    "innovation": 0.15,
    "harmony": 0.10,
}

SCORE_LABELS = {
    "match": "Requirement Match",
    "trend": "Trend Alignment",
    "market": "Market Viability",
    "innovation": "Innovation",
    "harmony": "Color Harmony",
}

# Upload and extraction limits
PDF_MIME_TYPE = "application/pdf"
MAX_UPLOAD_MB = 20
MAX_PDF_PAGES = 20
REQUIREMENTS_CHAR_LIMIT = 15000

# Generation contract
SCHEME_COUNT = 4
MAX_SEARCH_SOURCES = 5
PREVIEW_CONTEXT_REQUIREMENTS = 3
PREVIEW_ASPECT_RATIO = "16:9"

DEFAULT_CUSTOMER_NAME = "Unknown Client"

DEFAULT_ARCHETYPES = (
    {"name": "Global Trend", "brief": "Based on the market search trends"},
    {"name": "Market Safe", "brief": "Conservative, luxurious"},
    {"name": "Bold Innovation", "brief": "Avant-garde"},
    {"name": "Balanced Classic", "brief": "Timeless"},
)

# Export
REPORT_FILE_SUFFIX = "_Color_Strategy.pdf"
EXPORT_STRATEGIES = ("structured", "snapshot")
SNAPSHOT_SCALE = 2
