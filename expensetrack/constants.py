CATEGORIES = (
    "groceries",
    "utilities",
    "transportation",
    "entertainment",
    "healthcare",
    "dining",
    "shopping",
    "education",
    "travel",
    "housing",
    "insurance",
    "savings",
    "other",
)

DESCRIPTION_MAX_LENGTH = 200
NOTES_MAX_LENGTH = 500
MIN_YEAR = 2000
MAX_YEAR = 2100

# Utilisation thresholds in percent, lower bound inclusive
EXCEEDED_THRESHOLD = 100
WARNING_THRESHOLD = 90
CAUTION_THRESHOLD = 75

STATUS_COLORS = {
    "success": "#10B981",
    "caution": "#F59E0B",
    "warning": "#EF4444",
    "danger": "#DC2626",
}

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100
TOP_EXPENSES_LIMIT = 5
