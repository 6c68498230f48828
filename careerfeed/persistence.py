"""Behaviour snapshots: JSON codec and the storage sinks that hold them.

A snapshot is one JSON document stored under a single named *slot*.  Sets are
written as lists and timestamps as RFC 3339 strings.  Epoch-millisecond
numbers are also accepted when reading, so snapshots written by the browser
client load unchanged.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import grpc
from google.protobuf.timestamp_pb2 import Timestamp

from careerfeed.models import (
    BehaviorState,
    CategoryStreak,
    CategoryWatch,
    Comment,
    Reaction,
    ScrollEvent,
)

logger = logging.getLogger(__name__)

DEFAULT_SLOT = "spark_user_behavior"


class SnapshotError(ValueError):
    """Raised when a persisted snapshot cannot be decoded."""


# ---------------------------------------------------------------------------
# Codec
# ---------------------------------------------------------------------------


def dump_state(state: BehaviorState) -> str:
    """Serialise *state* to a JSON snapshot string."""
    streak = state.category_streak
    doc: dict[str, Any] = {
        "watchTime": dict(state.watch_time_ms),
        "likes": sorted(state.liked_videos),
        "replays": dict(state.replay_counts),
        "reactions": {
            vid: [{"type": r.kind, "timestamp": _encode_ts(r.at)} for r in items]
            for vid, items in state.reactions.items()
        },
        "comments": {
            vid: [{"text": c.text, "timestamp": _encode_ts(c.at)} for c in items]
            for vid, items in state.comments.items()
        },
        "skippedVideos": sorted(state.skipped_videos),
        "highEngagement": sorted(state.high_engagement_videos),
        "interests": dict(state.interest_scores),
        "categoryWatchHistory": [
            {"category": w.category, "timestamp": _encode_ts(w.at)}
            for w in state.category_watch_history
        ],
        "currentCategoryStreak": {
            "category": streak.category,
            "count": streak.count,
            "runLength": streak.run_length,
        },
        "preferredCategory": state.preferred_category,
        "scrollPatterns": [
            {"direction": s.direction, "videoId": s.video_id, "timestamp": _encode_ts(s.at)}
            for s in state.scroll_patterns
        ],
        "lastUpdated": _encode_ts(state.last_updated) if state.last_updated else None,
    }
    return json.dumps(doc)


def load_state(payload: str) -> BehaviorState:
    """Decode a JSON snapshot produced by :func:`dump_state`.

    Missing keys take their zero value.

    Raises:
        SnapshotError: If *payload* is not valid JSON or has the wrong shape.
    """
    try:
        doc = json.loads(payload)
        if not isinstance(doc, dict):
            raise TypeError(f"snapshot root must be an object, got {type(doc).__name__}")
        streak_doc = doc.get("currentCategoryStreak") or {}
        last_updated = doc.get("lastUpdated")
        return BehaviorState(
            watch_time_ms={k: int(v) for k, v in (doc.get("watchTime") or {}).items()},
            liked_videos=set(doc.get("likes") or ()),
            replay_counts={k: int(v) for k, v in (doc.get("replays") or {}).items()},
            reactions={
                vid: [Reaction(kind=r["type"], at=_decode_ts(r["timestamp"])) for r in items]
                for vid, items in (doc.get("reactions") or {}).items()
            },
            comments={
                vid: [Comment(text=c["text"], at=_decode_ts(c["timestamp"])) for c in items]
                for vid, items in (doc.get("comments") or {}).items()
            },
            skipped_videos=set(doc.get("skippedVideos") or ()),
            high_engagement_videos=set(doc.get("highEngagement") or ()),
            interest_scores={k: float(v) for k, v in (doc.get("interests") or {}).items()},
            category_watch_history=[
                CategoryWatch(category=w["category"], at=_decode_ts(w["timestamp"]))
                for w in doc.get("categoryWatchHistory") or ()
            ],
            category_streak=CategoryStreak(
                category=streak_doc.get("category"),
                count=int(streak_doc.get("count", 0)),
                run_length=int(streak_doc.get("runLength", 0)),
            ),
            preferred_category=doc.get("preferredCategory"),
            scroll_patterns=[
                ScrollEvent(
                    direction=s["direction"],
                    video_id=s["videoId"],
                    at=_decode_ts(s["timestamp"]),
                )
                for s in doc.get("scrollPatterns") or ()
            ],
            last_updated=_decode_ts(last_updated) if last_updated is not None else None,
        )
    except (ValueError, TypeError, KeyError, AttributeError, OverflowError) as exc:
        raise SnapshotError(f"Malformed behaviour snapshot: {exc}") from exc


def _encode_ts(dt: datetime) -> str:
    ts = Timestamp()
    ts.FromDatetime(dt if dt.tzinfo else dt.replace(tzinfo=timezone.utc))
    return ts.ToJsonString()


def _decode_ts(value: Any) -> datetime:
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    ts = Timestamp()
    ts.FromJsonString(value)
    return ts.ToDatetime(tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Sinks
# ---------------------------------------------------------------------------


class StateSink(ABC):
    """Key-value storage holding behaviour snapshots.

    Implementations may raise on I/O failure;
    :class:`~careerfeed.user_state.BehaviorStore` catches and logs.
    """

    @abstractmethod
    def load(self, slot: str) -> str | None:
        """Return the payload stored under *slot*, or ``None`` if absent."""

    @abstractmethod
    def save(self, slot: str, payload: str) -> None:
        """Store *payload* under *slot*, replacing any previous value."""

    @abstractmethod
    def delete(self, slot: str) -> None:
        """Remove *slot*.  Deleting an absent slot is not an error."""


class InMemoryStateSink(StateSink):
    """Dictionary-backed sink, used for tests and throwaway sessions."""

    def __init__(self) -> None:
        self.slots: dict[str, str] = {}

    def load(self, slot: str) -> str | None:
        return self.slots.get(slot)

    def save(self, slot: str, payload: str) -> None:
        self.slots[slot] = payload

    def delete(self, slot: str) -> None:
        self.slots.pop(slot, None)


class JsonFileStateSink(StateSink):
    """Stores each slot as ``<directory>/<slot>.json``.

    Writes go to a temporary file in the same directory which is then renamed
    over the target, so a crash mid-write never leaves a truncated snapshot.

    Args:
        directory: Where snapshot files live.  Created on first save.
    """

    def __init__(self, directory: str | os.PathLike[str]) -> None:
        self._directory = Path(directory)

    def path_for(self, slot: str) -> Path:
        return self._directory / f"{slot}.json"

    def load(self, slot: str) -> str | None:
        path = self.path_for(slot)
        if not path.exists():
            return None
        with path.open("r", encoding="utf-8") as fh:
            return fh.read()

    def save(self, slot: str, payload: str) -> None:
        self._directory.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self._directory, prefix=f".{slot}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(payload)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_name, self.path_for(slot))
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def delete(self, slot: str) -> None:
        self.path_for(slot).unlink(missing_ok=True)


class GrpcStateSink(StateSink):
    """Remote key-value store reached over gRPC.

    Talks to a ``careerfeed.StateStore`` service exposing three unary methods
    (``Get``, ``Put``, ``Delete``).  Messages are UTF-8 JSON objects so no
    generated stubs are needed:

    ========  ==========================  ======================
    Method    Request                     Response
    ========  ==========================  ======================
    Get       ``{"key": ...}``            ``{"value": str|null}``
    Put       ``{"key": ..., "value"}``   ``{}``
    Delete    ``{"key": ...}``            ``{}``
    ========  ==========================  ======================

    Args:
        channel: An open :class:`grpc.Channel` (or compatible mock).
        timeout_seconds: Deadline applied to every call.
    """

    _SERVICE = "/careerfeed.StateStore"

    def __init__(self, channel: Any, timeout_seconds: float = 2.0) -> None:
        self._timeout = timeout_seconds
        self._get = channel.unary_unary(
            f"{self._SERVICE}/Get",
            request_serializer=_json_bytes,
            response_deserializer=_json_object,
        )
        self._put = channel.unary_unary(
            f"{self._SERVICE}/Put",
            request_serializer=_json_bytes,
            response_deserializer=_json_object,
        )
        self._delete = channel.unary_unary(
            f"{self._SERVICE}/Delete",
            request_serializer=_json_bytes,
            response_deserializer=_json_object,
        )

    @classmethod
    def connect(cls, address: str, timeout_seconds: float = 2.0) -> GrpcStateSink:
        """Open an insecure channel to *address* and wrap it."""
        logger.info("Connecting to state store at %s", address)
        return cls(grpc.insecure_channel(address), timeout_seconds=timeout_seconds)

    def load(self, slot: str) -> str | None:
        try:
            response = self._get({"key": slot}, timeout=self._timeout)
        except grpc.RpcError as exc:
            if exc.code() == grpc.StatusCode.NOT_FOUND:
                return None
            raise
        return response.get("value")

    def save(self, slot: str, payload: str) -> None:
        self._put({"key": slot, "value": payload}, timeout=self._timeout)

    def delete(self, slot: str) -> None:
        self._delete({"key": slot}, timeout=self._timeout)


def _json_bytes(message: dict[str, Any]) -> bytes:
    return json.dumps(message).encode("utf-8")


def _json_object(data: bytes) -> dict[str, Any]:
    return json.loads(data.decode("utf-8")) if data else {}
