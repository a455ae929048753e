"""Pure analytics/pacing constants: thresholds, cadence, labels. No I/O."""
# Weak area = current_accuracy < MASTERY_THRESHOLD
# Review session inserted on every REVIEW_EVERY_N_SLOTS-th weekend slot

MASTERY_THRESHOLD = 90
REVIEW_EVERY_N_SLOTS = 4

PRACTICE_TASK = "Practice quizzes"
REVIEW_SUBJECT = "Review"
REVIEW_TASK = "Review weak areas"
STUDY_FREQUENCY = "Weekends (Saturdays + Sundays)"

PROGRESS_LOOKBACK_DAYS = 90
TREND_DAYS = 7

TIME_RANGES = ("daily", "weekly", "monthly")
TIME_RANGE_DAYS = {"weekly": 7, "monthly": 30}

# Accuracy colour bands: < RED_BELOW red, < YELLOW_BELOW yellow, else green
RED_BELOW = 70
YELLOW_BELOW = 90

ATTEMPTS_TABLE = "quiz_attempts"
PROGRESS_TABLE = "subdomain_progress"
PAGE_SIZE = 1000

LOAD_ERROR = "Failed to load analytics"
INVALID_DOMAIN_ERROR = "Invalid domain selected"
