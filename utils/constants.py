APP_NAME = "Household Budget"
APP_WIDTH = 1240
APP_HEIGHT = 780
DB_FILE = "household_budget.db"

DATE_FORMAT = "%Y-%m-%d"
MONTH_FORMAT = "%Y-%m"
DEFAULT_CURRENCY_SYMBOL = "zł"

RECURRING_INTERVALS = ["daily", "weekly", "monthly", "yearly"]

# Override aspects; also the prefix of every override key
ASPECT_PAID = "paid"
ASPECT_DELETED = "deleted"
OVERRIDE_ASPECTS = (ASPECT_PAID, ASPECT_DELETED)

SHARED_PERSON_LABEL = "Together"
DEFAULT_PERSON_LABELS = ["Person A", "Person B", SHARED_PERSON_LABEL]

SUBSCRIPTION_CATEGORY = "Subscription"
UPCOMING_DUE_SOON_DAYS = 3
CHART_MONTHS = 6

# Approximate multipliers to a monthly cost
MONTHLY_EQUIVALENT = {
    "daily": 30.0,
    "weekly": 52 / 12,
    "monthly": 1.0,
    "yearly": 1 / 12,
}

DEFAULT_CATEGORIES = [
    {"name": "Bills",          "color_hex": "#F44336", "is_expense": 1, "emoji": "💸"},
    {"name": "Food",           "color_hex": "#FF9800", "is_expense": 1, "emoji": "🍽️"},
    {"name": "Transportation", "color_hex": "#2196F3", "is_expense": 1, "emoji": "🚗"},
    {"name": "Entertainment",  "color_hex": "#FF5722", "is_expense": 1, "emoji": "🎬"},
    {"name": "Shopping",       "color_hex": "#E91E63", "is_expense": 1, "emoji": "🛍️"},
    {"name": "Health",         "color_hex": "#00BCD4", "is_expense": 1, "emoji": "⚕️"},
    {"name": "Travel",         "color_hex": "#3F51B5", "is_expense": 1, "emoji": "✈️"},
    {"name": "Subscription",   "color_hex": "#9C27B0", "is_expense": 1, "emoji": "🔄"},
    {"name": "Other",          "color_hex": "#888888", "is_expense": 1, "emoji": "📦"},
    {"name": "Income",         "color_hex": "#4CAF50", "is_expense": 0, "emoji": "💰"},
    {"name": "Gift",           "color_hex": "#8BC34A", "is_expense": 0, "emoji": "🎁"},
]
