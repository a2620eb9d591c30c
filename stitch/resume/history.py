# stitch/resume/history.py
# Modification history persisted as JSON w/ paginated listing & revert

from __future__ import annotations

import uuid
from dataclasses import asdict, dataclass, fields
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from ..core.exceptions import HistoryError, HistoryRecordNotFoundError
from ..core.validation import parse_iso_date, raise_for_result, validate_history_query
from ..core.verbose import vlog
from ..stitch_io.generics import read_json_safe, write_json_safe
from .field_path import delete_field_value, set_field_value

HISTORY_VERSION = 1


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


# * One applied change w/ before/after values at its field path
@dataclass
class ModificationRecord:
    id: str
    resume: str
    operation_type: str
    field_path: str
    old_value: Any = None
    new_value: Any = None
    # keyword scores around this change alone; None when it shared a session w/ other changes
    score_before: Optional[float] = None
    score_after: Optional[float] = None
    created_at: str = ""
    # False when the field did not exist before the change
    old_exists: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ModificationRecord":
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})


class HistoryStore:
    """JSON-file backed log of applied modifications.

    Records are appended in application order; listings return newest first.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def _load(self) -> List[ModificationRecord]:
        if not self.path.exists():
            return []
        data = read_json_safe(self.path)
        if not isinstance(data, dict) or not isinstance(data.get("records"), list):
            raise HistoryError(f"History file {self.path} is not a valid history log")
        return [ModificationRecord.from_dict(r) for r in data["records"]]

    def _save(self, records: List[ModificationRecord]) -> None:
        write_json_safe(
            {"version": HISTORY_VERSION, "records": [r.to_dict() for r in records]},
            self.path,
        )

    # * Append a record & return it
    def record(
        self,
        *,
        resume: str,
        operation_type: str,
        field_path: str,
        old_value: Any = None,
        new_value: Any = None,
        score_before: Optional[float] = None,
        score_after: Optional[float] = None,
        old_exists: bool = True,
    ) -> ModificationRecord:
        entry = ModificationRecord(
            id=uuid.uuid4().hex,
            resume=resume,
            operation_type=operation_type,
            field_path=field_path,
            old_value=old_value,
            new_value=new_value,
            score_before=score_before,
            score_after=score_after,
            created_at=_utc_now(),
            old_exists=old_exists,
        )
        records = self._load()
        records.append(entry)
        self._save(records)
        vlog("HISTORY", f"Recorded {operation_type}", f"field_path={field_path}, id={entry.id}")
        return entry

    # * Paginated listing, newest first; returns (page of records, total matching)
    def list(
        self,
        resume: Optional[str] = None,
        page: int = 1,
        limit: int = 20,
        date_from: Optional[str] = None,
        date_to: Optional[str] = None,
    ) -> Tuple[List[ModificationRecord], int]:
        raise_for_result(validate_history_query(page, limit, date_from, date_to))

        start = parse_iso_date(date_from) if date_from else None
        end = parse_iso_date(date_to) if date_to else None
        # a bare date includes the whole day
        if end is not None and len(str(date_to).strip()) == 10:
            end = end + timedelta(days=1) - timedelta(microseconds=1)

        matching: List[ModificationRecord] = []
        for rec in reversed(self._load()):
            if resume is not None and rec.resume != resume:
                continue
            created = parse_iso_date(rec.created_at)
            if created is not None and (start or end):
                if start and _before(created, start):
                    continue
                if end and _before(end, created):
                    continue
            matching.append(rec)

        offset = (page - 1) * limit
        return matching[offset : offset + limit], len(matching)

    def get(self, record_id: str) -> ModificationRecord:
        for rec in self._load():
            if rec.id == record_id:
                return rec
        raise HistoryRecordNotFoundError(record_id)

    # * Expand a full id or unique id prefix to the stored id
    def resolve_id(self, id_or_prefix: str) -> str:
        ids = [rec.id for rec in self._load()]
        if id_or_prefix in ids:
            return id_or_prefix
        matches = [i for i in ids if id_or_prefix and i.startswith(id_or_prefix)]
        if not matches:
            raise HistoryRecordNotFoundError(id_or_prefix)
        if len(matches) > 1:
            raise HistoryError(
                f"Record id prefix '{id_or_prefix}' is ambiguous ({len(matches)} matches)"
            )
        return matches[0]

    # * Restore a record's old value; returns (reverted resume, revert record)
    def revert(
        self, record_id: str, current: Dict[str, Any]
    ) -> Tuple[Dict[str, Any], ModificationRecord]:
        original = self.get(record_id)

        if original.old_exists:
            reverted = set_field_value(current, original.field_path, original.old_value)
        else:
            reverted = delete_field_value(current, original.field_path)

        revert_record = self.record(
            resume=original.resume,
            operation_type="replace",
            field_path=original.field_path,
            old_value=original.new_value,
            new_value=original.old_value,
            score_before=original.score_after,
            score_after=original.score_before,
            old_exists=True,
        )
        vlog("HISTORY", f"Reverted {original.id}", f"field_path={original.field_path}")
        return reverted, revert_record


# compare aware & naive datetimes on a common footing
def _before(a: datetime, b: datetime) -> bool:
    if (a.tzinfo is None) != (b.tzinfo is None):
        a = a.replace(tzinfo=None)
        b = b.replace(tzinfo=None)
    return a < b
