"""Application constants."""

USER_AGENT = "rubbishtips-data/2.0 (+https://www.rubbishtips.com.au)"
STAGES = (
    "convert",
    "validate",
)
EXIT_SUCCESS = 0
EXIT_PARTIAL = 10
EXIT_HARD_FAIL = 20
JSON_LOG_FIELDS = (
    "timestamp",
    "run_id",
    "stage",
    "source",
    "event",
    "status",
    "row",
    "city",
    "rows_in",
    "rows_out",
    "error_code",
    "message",
)

MIN_ROW_FIELDS = 5
CONTENT_MAX_CHARS = 5000
DESCRIPTION_MIN_CONTENT_CHARS = 100

ADDRESS_FALLBACK = "Address not available"
HOURS_FALLBACK = "Contact for hours"
FACILITY_TYPE_FALLBACK = "Waste Facility"
UNKNOWN_NAME = "Unknown"
PLACEHOLDER_VALUES = ("undefined", "null")

ISSUE_TOO_FEW_FIELDS = "Too few fields"
ISSUE_EMPTY_ROW = "Empty row"
ISSUE_MISSING_COORDINATES = "Missing coordinates"
ISSUE_MISSING_TITLE = "Missing title"
