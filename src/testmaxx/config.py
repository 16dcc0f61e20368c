"""
Configuration file for the TestMaxx test-taking engine.

Modify these values to customize timing, scoring bands and the
improvement suggestions shown after a test.
"""

# Test Configuration
MIN_TEST_DURATION_MINUTES = 5
ALLOWED_CLASSES = (6, 7, 8)
MIN_CHOICE_OPTIONS = 2
TRUE_FALSE_OPTIONS = 2

# Timer Configuration
TICK_INTERVAL_SECONDS = 1.0
LOW_TIME_WARNING_SECONDS = 300

# Scoring Thresholds (percentages)
TOPIC_FOCUS_THRESHOLD = 60
OUTSTANDING_THRESHOLD = 90
GOOD_THRESHOLD = 70
ON_TRACK_THRESHOLD = 50

# Topic bar bands used by the results view
TOPIC_STRONG_THRESHOLD = 80
TOPIC_FAIR_THRESHOLD = 60

# Storage Configuration
DATA_DIR = "data"
TESTS_FILE = "tests.json"
ATTEMPTS_FILE = "test_attempts.jsonl"
RESULTS_OUTPUT_DIR = "output"

# Logging
LOG_LEVEL = "INFO"

# History
RECENT_ATTEMPTS_LIMIT = 3

# Suggestion Templates
FOCUS_TOPIC_TEMPLATE = (
    "Focus more on {topic} - you got {correct}/{total} questions correct."
)
GREAT_JOB_TEMPLATE = "Great job on {topic}! You answered every question correctly."

OUTSTANDING_MESSAGE = (
    "Outstanding performance! You have mastered this test. Keep up the excellent work!"
)
GOOD_MESSAGE = (
    "Good work! Review the questions you missed to push your score even higher."
)
ON_TRACK_MESSAGE = (
    "You're on the right track. Keep practicing to strengthen your understanding."
)
NEEDS_REVIEW_MESSAGE = (
    "Review the study materials for this subject and try the test again."
)

# Confirmation Prompts
ABANDON_CONFIRMATION_MESSAGE = (
    "Are you sure you want to leave this test? Your progress will be lost."
)
