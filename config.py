import os
import sys

# Base directory
IF_FROZEN = getattr(sys, "frozen", False)
BASE_DIR = sys._MEIPASS if IF_FROZEN else os.path.dirname(os.path.abspath(__file__))

# Paths
LOG_FILE = os.getenv("TESTPREP_LOG_FILE", os.path.join(BASE_DIR, "launch.log"))

# Server
DEFAULT_HOST = os.getenv("HOST", "127.0.0.1")
DEFAULT_PORT = int(os.getenv("PORT", "8000"))
DEFAULT_TIMEOUT = 15.0

# Session store
SESSION_TTL = int(os.getenv("TESTPREP_SESSION_TTL", "3600"))  # 1 hour
SESSION_CLEANUP_INTERVAL = 300

# Exam defaults
MOCK_TEST_DURATION_MINUTES = 180   # 3 hours
MOCK_TEST_NUM_QUESTIONS = 180
PRACTICE_TEST_MINUTES_PER_QUESTION = 1
SAMPLE_TEST_DURATION_MINUTES = 10

# Marking scheme (negative marking)
CORRECT_MARKS = 4
INCORRECT_MARKS = -1
UNANSWERED_MARKS = 0

# Timer
TIMER_WARNING_SECONDS = 60
