"""Constants and configuration values for partyviews."""

# Pillar Constants
class PillarConstants:
    """Constants for the five ideological pillars."""

    AXES = ("economy", "social", "environment", "governance", "foreign")

    # Score bounds
    MIN_SCORE = 0
    MAX_SCORE = 100
    DEFAULT_SCORE = 50  # neutral

    # Delta bounds (per analysis pass)
    MIN_DELTA = -10
    MAX_DELTA = 10

    DEFAULT_RATIONALE = "default starting point"
    INCOMPLETE_RATIONALE = "incomplete"

# Issue Constants
class IssueConstants:
    """Constants for per-user issue lists."""

    MAX_ISSUES = 10  # hard ceiling after merge
    MAX_SUMMARY_LENGTH = 140  # chars
    MAX_QUOTES = 3  # quotes kept per issue
    MIN_MENTIONS = 1
    MAX_MENTIONS = 10  # analyzer emphasis scale

    OPS = ("add", "update", "remove")

# Aggregate Constants
class AggregateConstants:
    """Constants for party-wide aggregation."""

    MAX_TOP_ISSUES = 10
    MAX_QUOTES_PER_ISSUE = 3

    # Compass histogram
    COMPASS_POINT_CAP = 500  # first N points, not a sample
    COMPASS_BINS = 10
    COMPASS_MIN = -100
    COMPASS_MAX = 100

    NO_DATA_REASON = "No user data found"

# Contributor Constants
class ContributorConstants:
    """Constants for top contributor ranking."""

    WINDOW_DAYS = 14

    # Score weights
    RELEVANT_MESSAGE_WEIGHT = 1.0
    DISTINCT_TOPIC_WEIGHT = 0.5
    UPDATE_EVENT_WEIGHT = 0.2
    NONZERO_PILLAR_DELTA_WEIGHT = 0.5
    ISSUE_OP_WEIGHT = 0.3

    MAX_EXAMPLES = 3
    EXCERPT_LENGTH = 100  # chars

    NO_ACTIVITY_LABEL = "No recent activity"
    GENERAL_TOPIC = "general"

# Prompt Constants
class PromptConstants:
    """Constants for oracle prompts."""

    PROMPT_VERSION = "v1.0"  # bump to invalidate cached responses

    SURVEY_TEMPERATURE = 0.2
    SURVEY_MAX_TOKENS = 1500
    ANALYZER_TEMPERATURE = 0.2
    ANALYZER_MAX_TOKENS = 800
    SUMMARY_TEMPERATURE = 0.3
    SUMMARY_MAX_TOKENS = 200

    MAX_SUMMARY_ISSUES = 10  # issues listed in the party summary prompt

# Cache Constants
class CacheConstants:
    """Constants for caching behavior."""

    CACHE_TTL_HOURS = 24  # cache time-to-live in hours
    CACHE_KEY_LENGTH = 8  # length of cache key for logging

# Error Handling Constants
class ErrorConstants:
    """Constants for error handling and retries."""

    MAX_RETRY_ATTEMPTS = 3
    REQUEST_TIMEOUT = 60  # timeout for API requests

# File and Path Constants
class FileConstants:
    """Constants for file operations."""

    CACHE_DIR = "cache/llm_cache"
    COOLDOWN_DIR = "cache/cooldowns"
    LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    EXPORT_VERSION = "1.0.0"
