"""
Domain Constants

Centrally manages constants shared by the quality evaluator, the strategy
catalog and the learning orchestrator.
"""

# Weight of each quality metric in the overall score (sums to 1.0)
QUALITY_WEIGHTS = {
    "completeness": 0.35,   # Has all required fields
    "length": 0.25,         # Appropriate answer length
    "structure": 0.20,      # Well-structured content
    "relevance": 0.20,      # Prompt keywords present in the answer
}

# Lower bound of each quality level (checked from the top)
QUALITY_THRESHOLDS = {
    "excellent": 0.85,
    "good": 0.70,
    "acceptable": 0.50,
    "poor": 0.30,
}

# A score at or above this value passes
ACCEPTABLE_THRESHOLD = QUALITY_THRESHOLDS["acceptable"]

# A breakdown metric below this value names the failure scenario
METRIC_FAILURE_THRESHOLD = 0.5

# Fields an FAQ candidate must fill in
REQUIRED_FAQ_FIELDS = ("title", "answer", "category", "keywords")

# Words ignored when extracting prompt keywords
STOP_WORDS = frozenset({"what", "how", "why", "when", "where", "who", "is", "are", "the", "a", "an"})

# Generation calls allowed per request
MAX_ATTEMPTS = 3

# Prompt length bounds (characters, inclusive)
PROMPT_MIN_LENGTH = 5
PROMPT_MAX_LENGTH = 5000

# Default generation parameters
DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_TOKENS = 1024
DEFAULT_TOP_P = 0.9

DEFAULT_MODEL = "gemini-2.5-flash"

# Category used when the model omits one
DEFAULT_CATEGORY = "General"
