"""Application constants."""

USER_AGENT = "ausvotes/0.4 (+research; contact: configured-email)"

EVENT_TYPES = ("Federal Election", "Referendum", "By-Election")
FAMILIES = (
    "pva_date",
    "pva_party",
    "ppv",
    "prepoll",
    "overseas",
    "elected",
    "group",
    "candidates",
    "reps",
    "ccd",
    "coords",
)
BOUNDARY_LEVELS = ("CED", "SA1", "MB", "POA")
BOUNDARY_KINDS = ("allocation", "correspondence")
BOUNDARY_REF_DATE_MIN = 2011
BOUNDARY_REF_DATE_MAX = 2024
COMPARISON_TYPES = ("SA1", "POA", "CED")

STATE_ABBREVIATIONS = {
    "New South Wales": "NSW",
    "Victoria": "VIC",
    "Queensland": "QLD",
    "Western Australia": "WA",
    "South Australia": "SA",
    "Tasmania": "TAS",
    "Australian Capital Territory": "ACT",
    "Northern Territory": "NT",
}
MISSING_STATE = "ZZZ"
RATIO_TOLERANCE = 0.01

EXIT_SUCCESS = 0
EXIT_PARTIAL = 10
EXIT_HARD_FAIL = 20
FATAL_ERROR_CODES = ("SCHEMA_ERROR", "INVALID_BOUNDARY_COMBINATION", "TYPE_MISMATCH")

JSON_LOG_FIELDS = (
    "timestamp",
    "run_id",
    "stage",
    "action",
    "family",
    "election",
    "status",
    "rows_in",
    "rows_out",
    "error_code",
    "message",
)
