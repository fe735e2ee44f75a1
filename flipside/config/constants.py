"""
Static constants configuration.

Process-wide defaults for query runs. Every value can be overridden per
``Query``; none of them change after import.
"""

# =============================================================================
# SERVICE ENDPOINT
# =============================================================================

API_BASE_URL = "https://api-v2.flipsidecrypto.xyz/json-rpc"
API_KEY_HEADER = "x-api-key"

# =============================================================================
# QUERY RUN DEFAULTS
# =============================================================================

# Cache settings (minutes)
TTL_MINUTES = 60
MAX_AGE_MINUTES = 0  # No floor on cached result reuse
CACHED = True

# Data source routing
DATA_PROVIDER = "flipside"
DATA_SOURCE = "snowflake-default"

# Polling (seconds)
TIMEOUT_SECONDS = 20 * 60  # 20 minutes
RETRY_INTERVAL_SECONDS = 0.5

# =============================================================================
# RESULT PAGINATION
# =============================================================================

PAGE_SIZE = 100000
PAGE_NUMBER = 1

# =============================================================================
# HTTP TRANSPORT
# =============================================================================

DEFAULT_HTTP_TIMEOUT = 30.0
DEFAULT_MAX_CONNECTIONS = 100
DEFAULT_MAX_KEEPALIVE_CONNECTIONS = 20
DEFAULT_KEEPALIVE_EXPIRY = 5.0
