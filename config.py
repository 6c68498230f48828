"""Application configuration driven by environment variables.

All settings have sensible defaults for local development.
"""

import os

# ---------------------------------------------------------------------------
# Behaviour state persistence
# ---------------------------------------------------------------------------

# Name of the slot holding the behaviour snapshot.
STATE_SLOT: str = os.getenv("CAREERFEED_STATE_SLOT", "spark_user_behavior")

# Directory used by the local JSON file sink.
STATE_DIR: str = os.getenv("CAREERFEED_STATE_DIR", os.path.expanduser("~/.careerfeed"))

# If set, snapshots go to a remote key-value store over gRPC instead of
# STATE_DIR, e.g. "localhost:50061".
STATE_STORE_ADDRESS: str = os.getenv("CAREERFEED_STATE_STORE_ADDRESS", "")

# Deadline (seconds) for each call to the remote state store.
STATE_STORE_TIMEOUT_SECONDS: float = float(
    os.getenv("CAREERFEED_STATE_STORE_TIMEOUT_SECONDS", "2.0")
)

# ---------------------------------------------------------------------------
# Behaviour model
# ---------------------------------------------------------------------------

CATEGORY_HISTORY_CAPACITY: int = 10   # high-engagement watches remembered
SCROLL_HISTORY_CAPACITY: int = 100    # scroll events remembered

# ---------------------------------------------------------------------------
# Feed
# ---------------------------------------------------------------------------

FEED_LIMIT: int = int(os.getenv("CAREERFEED_FEED_LIMIT", "20"))

# Probability that the next fetch uses the preferred category.
PREFERRED_FETCH_RATIO: float = float(os.getenv("CAREERFEED_PREFERRED_FETCH_RATIO", "0.8"))
