"""Persisted daily food journal.

The whole journal lives in a single blob keyed by ``storage_key``. Every read
re-parses the blob and every mutation rewrites it, which keeps a single
writer consistent without any partial updates.
"""

import json
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Protocol
from uuid import uuid4

from nutriplan.domain.food_log import (
    DailyGoals,
    DailySummary,
    LogItem,
    LogItemKind,
    NutritionFacts,
    NutritionTotals,
)
from nutriplan.services.clock import Clock

STORAGE_KEY = "nutriplan_foodlog"
WEEK_DAYS = 7
UNKNOWN_ITEM_NAME = "Unknown item"

_WEEKDAY_LABELS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")

_logger = logging.getLogger(__name__)

JournalRecords = dict[str, object]
JournalBuckets = dict[str, list[dict[str, object]]]


class BlobStore(Protocol):
    """Synchronous key-value string storage."""

    def get(self, key: str) -> str | None:
        """Return the stored string for a key, if any."""

    def set(self, key: str, value: str) -> None:
        """Store a string under a key, replacing any previous value."""


def _new_item_id() -> str:
    return uuid4().hex


@dataclass
class JournalStore:
    """Food journal bucketed by local calendar date."""

    blob_store: BlobStore
    clock: Clock
    goals: DailyGoals = field(default_factory=DailyGoals)
    storage_key: str = STORAGE_KEY
    id_factory: Callable[[], str] = _new_item_id

    def today_key(self) -> str:
        """Return today's bucket key as YYYY-MM-DD."""
        return self.clock.now().date().isoformat()

    def add_item(self, candidate: Mapping[str, object]) -> LogItem:
        """Append a normalized item to today's bucket and persist the journal.

        When storage cannot be read the item is returned but not saved, so a
        transient read failure never overwrites other days.
        """
        records = self._load_records()
        writable = records is not None
        if records is None:
            records = {}
        key = self.today_key()
        today = records.get(key)
        if not isinstance(today, list):
            today = []
            records[key] = today
        existing_ids = {
            record.get("id") for record in today if isinstance(record, dict)
        }
        item_id = self.id_factory()
        while item_id in existing_ids:
            item_id = self.id_factory()

        logged_at = self.clock.now()
        last_logged_at = _last_timestamp(today)
        if last_logged_at is not None and logged_at < last_logged_at:
            logged_at = last_logged_at

        item = LogItem(
            id=item_id,
            name=_clean_name(candidate.get("name")),
            kind=LogItemKind.parse(candidate.get("kind", candidate.get("type"))),
            image_url=_clean_image(candidate.get("image_url", candidate.get("image"))),
            nutrition=_coerce_nutrition(candidate.get("nutrition")),
            logged_at=logged_at,
        )
        if not writable:
            _logger.error("Food log storage unavailable, %s was not saved", item.id)
            return item
        today.append(item_to_record(item))
        self._write_records(records)
        _logger.info("Logged %s %r (%s)", item.kind.value, item.name, item.id)
        return item

    def remove_item(self, item_id: str) -> None:
        """Remove an item from today's bucket; unknown ids are ignored."""
        records = self._load_records()
        if records is None:
            _logger.error("Food log storage unavailable, %s was not removed", item_id)
            return
        key = self.today_key()
        today = records.get(key)
        if not isinstance(today, list):
            return
        records[key] = [
            record
            for record in today
            if not (isinstance(record, dict) and record.get("id") == item_id)
        ]
        self._write_records(records)

    def clear_today(self) -> None:
        """Empty today's bucket, leaving other days untouched."""
        records = self._load_records()
        if records is None:
            _logger.error("Food log storage unavailable, today was not cleared")
            return
        records[self.today_key()] = []
        self._write_records(records)

    def get_today_items(self) -> list[LogItem]:
        """Return today's items in insertion order."""
        records = self._read_records()
        return _parse_bucket(self.today_key(), records.get(self.today_key(), []))

    def get_all_data(self) -> dict[str, list[LogItem]]:
        """Return every bucket of the journal."""
        return {
            key: _parse_bucket(key, bucket)
            for key, bucket in self._read_records().items()
        }

    def get_today_totals(self) -> NutritionTotals:
        """Sum today's nutrition across all items."""
        return _sum_nutrition(self.get_today_items())

    def get_progress(self, nutrient: str) -> float:
        """Return today's progress toward a goal as a percentage capped at 100.

        Nutrients without a configured goal are divided by 1.
        """
        total = self.get_today_totals().amount(nutrient)
        goal = self.goals.get(nutrient) or 1.0
        return min(total / goal * 100.0, 100.0)

    def get_weekly_data(self) -> list[DailySummary]:
        """Return summaries for the seven days ending today, oldest first."""
        records = self._read_records()
        today = self.clock.now().date()
        weekly: list[DailySummary] = []
        for offset in range(WEEK_DAYS - 1, -1, -1):
            day = today - timedelta(days=offset)
            key = day.isoformat()
            totals = _sum_nutrition(_parse_bucket(key, records.get(key, [])))
            weekly.append(
                DailySummary(
                    date_key=key,
                    weekday_label=_WEEKDAY_LABELS[day.weekday()],
                    calories=totals.calories,
                    protein=totals.protein,
                    carbohydrates=totals.carbohydrates,
                    fat=totals.fat,
                )
            )
        return weekly

    def _load_records(self) -> JournalRecords | None:
        """Return the raw journal, or None when storage could not be read.

        Undecodable content counts as an empty journal so the next write
        can recover it.
        """
        try:
            raw = self.blob_store.get(self.storage_key)
        except Exception:
            _logger.exception("Error reading food log from storage")
            return None
        if not raw:
            return {}
        try:
            data = json.loads(raw)
        except ValueError:
            _logger.warning("Ignoring food log blob that is not valid JSON")
            return {}
        if not isinstance(data, dict):
            _logger.warning("Ignoring food log blob that is not an object")
            return {}
        return data

    def _read_records(self) -> JournalBuckets:
        return {
            str(key): [record for record in bucket if isinstance(record, dict)]
            for key, bucket in (self._load_records() or {}).items()
            if isinstance(bucket, list)
        }

    def _write_records(self, records: JournalRecords) -> None:
        try:
            self.blob_store.set(self.storage_key, json.dumps(records))
        except Exception:
            _logger.exception("Error saving food log to storage")


def item_to_record(item: LogItem) -> dict[str, object]:
    """Serialize a log item into its persisted JSON shape."""
    return {
        "id": item.id,
        "name": item.name,
        "type": item.kind.value,
        "image": item.image_url,
        "nutrition": item.nutrition.as_dict(),
        "timestamp": item.logged_at.isoformat(),
    }


def item_from_record(record: Mapping[str, object]) -> LogItem:
    """Parse a persisted record; raises ValueError when it is unusable."""
    item_id = record.get("id")
    timestamp = record.get("timestamp")
    if not isinstance(item_id, str) or not item_id:
        raise ValueError("log item without id")
    if not isinstance(timestamp, str):
        raise ValueError(f"log item {item_id} without timestamp")
    return LogItem(
        id=item_id,
        name=_clean_name(record.get("name")),
        kind=LogItemKind.parse(record.get("type")),
        image_url=_clean_image(record.get("image")),
        nutrition=_coerce_nutrition(record.get("nutrition")),
        logged_at=datetime.fromisoformat(timestamp),
    )


def _parse_bucket(key: str, bucket: list[dict[str, object]]) -> list[LogItem]:
    items: list[LogItem] = []
    for record in bucket:
        try:
            items.append(item_from_record(record))
        except ValueError as exc:
            _logger.warning("Skipping malformed food log entry on %s: %s", key, exc)
    return items


def _sum_nutrition(items: list[LogItem]) -> NutritionTotals:
    total = NutritionFacts()
    for item in items:
        total = total.plus(item.nutrition)
    return total


def _last_timestamp(bucket: list[object]) -> datetime | None:
    if not bucket or not isinstance(bucket[-1], dict):
        return None
    timestamp = bucket[-1].get("timestamp")
    if not isinstance(timestamp, str):
        return None
    try:
        parsed = datetime.fromisoformat(timestamp)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return None
    return parsed


def _coerce_nutrition(value: object) -> NutritionFacts:
    if isinstance(value, NutritionFacts):
        return value
    if isinstance(value, Mapping):
        return NutritionFacts.from_mapping(value)
    return NutritionFacts()


def _clean_name(value: object) -> str:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return UNKNOWN_ITEM_NAME


def _clean_image(value: object) -> str:
    if isinstance(value, str):
        return value
    return ""
