"""Entry point: wires the behaviour store and engine, then prints a feed.

Usage::

    python main.py candidates.json [--limit 20]

``candidates.json`` holds a JSON array of candidate videos as returned by the
content fetchers.  The feed, career insights and next fetch category are
written to stdout as JSON.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any

import config
from careerfeed.engine import RecommendationEngine
from careerfeed.fetch_planner import FetchPlanner
from careerfeed.models import CandidateVideo
from careerfeed.persistence import GrpcStateSink, JsonFileStateSink, StateSink
from careerfeed.user_state import BehaviorStore

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def build_sink() -> StateSink:
    """Return the configured snapshot sink.

    Uses the remote gRPC store when ``CAREERFEED_STATE_STORE_ADDRESS`` is set,
    otherwise JSON files under ``CAREERFEED_STATE_DIR``.
    """
    if config.STATE_STORE_ADDRESS:
        return GrpcStateSink.connect(
            config.STATE_STORE_ADDRESS,
            timeout_seconds=config.STATE_STORE_TIMEOUT_SECONDS,
        )
    return JsonFileStateSink(config.STATE_DIR)


def build_store(sink: StateSink) -> BehaviorStore:
    """Construct the session's behaviour store and load its snapshot."""
    store = BehaviorStore(
        sink=sink,
        slot=config.STATE_SLOT,
        history_capacity=config.CATEGORY_HISTORY_CAPACITY,
        scroll_capacity=config.SCROLL_HISTORY_CAPACITY,
    )
    store.load()
    return store


def load_candidates(path: str) -> list[CandidateVideo]:
    """Read a JSON array of candidate videos from *path*.

    Raises:
        ValueError: If the file does not hold a JSON array.
    """
    with open(path, encoding="utf-8") as handle:
        data = json.load(handle)
    if not isinstance(data, list):
        raise ValueError(f"{path}: expected a JSON array of videos")
    return [CandidateVideo.from_dict(item) for item in data if isinstance(item, dict)]


def run(argv: list[str] | None = None) -> dict[str, Any]:
    parser = argparse.ArgumentParser(description="Build a personalised career-discovery feed.")
    parser.add_argument("candidates", help="JSON file holding candidate videos")
    parser.add_argument("--limit", type=int, default=config.FEED_LIMIT, help="feed length")
    args = parser.parse_args(argv)

    store = build_store(build_sink())
    engine = RecommendationEngine(store)
    planner = FetchPlanner(preferred_ratio=config.PREFERRED_FETCH_RATIO)

    candidates = load_candidates(args.candidates)
    logger.info("Loaded %d candidates from %s", len(candidates), args.candidates)

    feed = engine.get_personalized_feed(candidates, limit=args.limit)
    insights = engine.get_career_insights()
    preferred = store.get_preferred_category()

    return {
        "feed": [scored.to_dict() for scored in feed],
        "insights": {
            "message": insights.message,
            "topCareer": vars(insights.top_career) if insights.top_career else None,
            "suggestions": [vars(s) for s in insights.suggestions],
        },
        "predictedNextInterest": engine.predict_next_interest(),
        "preferredCategory": preferred,
        "nextFetchCategory": planner.initial_category(preferred),
    }


def main() -> None:
    try:
        result = run()
    except (OSError, ValueError) as exc:
        logger.error("%s", exc)
        sys.exit(1)
    json.dump(result, sys.stdout, indent=2)
    sys.stdout.write("\n")


if __name__ == "__main__":
    main()
