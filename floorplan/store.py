from __future__ import annotations
import abc
import json
import logging
import os
import re
import uuid
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Dict, List, Optional
from urllib.parse import quote

import requests

log = logging.getLogger(__name__)

DEFAULT_NAME = "Untitled"
EMPTY_JSON = "{}"


class FloorPlanNotFound(KeyError):
    pass


@dataclass
class FloorPlanSummary:
    id: str
    name: str
    updated_at: datetime


@dataclass
class FloorPlanRecord:
    id: str
    name: str
    json: str
    updated_at: datetime

    def summary(self) -> FloorPlanSummary:
        return FloorPlanSummary(self.id, self.name, self.updated_at)

    def to_document(self) -> Dict:
        return {"id": self.id, "name": self.name, "json": self.json,
                "updatedAt": self.updated_at.isoformat()}

    @classmethod
    def from_document(cls, data: Dict) -> "FloorPlanRecord":
        return cls(id=str(data["id"]), name=str(data.get("name") or DEFAULT_NAME),
                   json=str(data.get("json") or EMPTY_JSON),
                   updated_at=_parse_time(data.get("updatedAt")))


def _now() -> datetime:
    return datetime.now(timezone.utc)


_FRACTION = re.compile(r"(?<=\.)(\d+)")


def _parse_time(value) -> datetime:
    if not value:
        return datetime.fromtimestamp(0, timezone.utc)
    text = str(value)
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    # the web API writes 7 fractional digits; fromisoformat wants exactly 3 or 6 before 3.11
    text = _FRACTION.sub(lambda m: (m.group(1) + "000000")[:6], text)
    parsed = datetime.fromisoformat(text)
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


def _blank(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()


class FloorPlanStore(abc.ABC):
    """Key-value store of floor-plan documents keyed by id."""

    @abc.abstractmethod
    def list(self) -> List[FloorPlanSummary]: ...

    @abc.abstractmethod
    def get(self, plan_id: str) -> FloorPlanRecord: ...

    @abc.abstractmethod
    def create(self, id: Optional[str] = None, name: Optional[str] = None,
               json: Optional[str] = None) -> FloorPlanRecord: ...

    @abc.abstractmethod
    def update(self, plan_id: str, name: Optional[str] = None,
               json: Optional[str] = None) -> FloorPlanRecord: ...

    @abc.abstractmethod
    def delete(self, plan_id: str) -> None: ...

    @staticmethod
    def _new_record(id, name, json) -> FloorPlanRecord:
        return FloorPlanRecord(
            id=uuid.uuid4().hex if _blank(id) else str(id),
            name=DEFAULT_NAME if _blank(name) else str(name),
            json=EMPTY_JSON if _blank(json) else str(json),
            updated_at=_now(),
        )

    @staticmethod
    def _patched(existing: FloorPlanRecord, name, json) -> FloorPlanRecord:
        return replace(existing,
                       name=existing.name if _blank(name) else str(name),
                       json=existing.json if _blank(json) else str(json),
                       updated_at=_now())


class MemoryFloorPlanStore(FloorPlanStore):
    def __init__(self):
        self._records: Dict[str, FloorPlanRecord] = {}

    def list(self) -> List[FloorPlanSummary]:
        return [r.summary() for r in self._records.values()]

    def get(self, plan_id: str) -> FloorPlanRecord:
        try:
            return self._records[plan_id]
        except KeyError:
            raise FloorPlanNotFound(plan_id) from None

    def create(self, id=None, name=None, json=None) -> FloorPlanRecord:
        record = self._new_record(id, name, json)
        self._records[record.id] = record
        return record

    def update(self, plan_id, name=None, json=None) -> FloorPlanRecord:
        record = self._patched(self.get(plan_id), name, json)
        self._records[plan_id] = record
        return record

    def delete(self, plan_id: str) -> None:
        self._records.pop(plan_id, None)


class FileFloorPlanStore(FloorPlanStore):
    """One `<id>.json` document per plan inside `root`."""

    def __init__(self, root: str):
        self.root = root

    def _path(self, plan_id: str) -> str:
        # ids become file names; keep them inside root
        safe = os.path.basename(str(plan_id))
        if not safe or safe in (".", ".."):
            raise FloorPlanNotFound(plan_id)
        return os.path.join(self.root, f"{safe}.json")

    def _write(self, record: FloorPlanRecord):
        os.makedirs(self.root, exist_ok=True)
        with open(self._path(record.id), "w", encoding="utf-8") as f:
            json.dump(record.to_document(), f, ensure_ascii=False)

    def list(self) -> List[FloorPlanSummary]:
        if not os.path.isdir(self.root):
            return []
        out = []
        for fn in sorted(os.listdir(self.root)):
            if not fn.endswith(".json"):
                continue
            path = os.path.join(self.root, fn)
            try:
                with open(path, "r", encoding="utf-8") as f:
                    out.append(FloorPlanRecord.from_document(json.load(f)).summary())
            except (OSError, ValueError, KeyError, TypeError) as e:
                log.warning("skipping unreadable plan file %s: %s", path, e)
        return out

    def get(self, plan_id: str) -> FloorPlanRecord:
        path = self._path(plan_id)
        if not os.path.exists(path):
            raise FloorPlanNotFound(plan_id)
        with open(path, "r", encoding="utf-8") as f:
            try:
                return FloorPlanRecord.from_document(json.load(f))
            except (ValueError, KeyError, TypeError):
                raise FloorPlanNotFound(plan_id) from None

    def create(self, id=None, name=None, json=None) -> FloorPlanRecord:
        record = self._new_record(id, name, json)
        self._write(record)
        return record

    def update(self, plan_id, name=None, json=None) -> FloorPlanRecord:
        record = self._patched(self.get(plan_id), name, json)
        self._write(record)
        return record

    def delete(self, plan_id: str) -> None:
        path = self._path(plan_id)
        if os.path.exists(path):
            os.remove(path)


class HttpFloorPlanStore(FloorPlanStore):
    """Client for the home-maintenance API's /api/FloorPlans resource."""

    def __init__(self, base_url: str, session: Optional[requests.Session] = None, timeout: float = 10):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def _url(self, plan_id: Optional[str] = None) -> str:
        url = f"{self.base_url}/api/FloorPlans"
        return f"{url}/{quote(str(plan_id), safe='')}" if plan_id is not None else url

    def _request(self, method: str, url: str, plan_id=None, **kwargs) -> requests.Response:
        resp = self.session.request(method, url, timeout=self.timeout, **kwargs)
        if resp.status_code == 404 and plan_id is not None:
            raise FloorPlanNotFound(plan_id)
        resp.raise_for_status()
        return resp

    def list(self) -> List[FloorPlanSummary]:
        resp = self._request("GET", self._url())
        return [FloorPlanSummary(str(d["id"]), str(d.get("name") or DEFAULT_NAME), _parse_time(d.get("updatedAt")))
                for d in resp.json()]

    def get(self, plan_id: str) -> FloorPlanRecord:
        resp = self._request("GET", self._url(plan_id), plan_id=plan_id)
        return FloorPlanRecord.from_document(resp.json())

    def create(self, id=None, name=None, json=None) -> FloorPlanRecord:
        body = {"id": id or "", "name": name or "", "json": json or ""}
        resp = self._request("POST", self._url(), json=body)
        return FloorPlanRecord.from_document(resp.json())

    def update(self, plan_id, name=None, json=None) -> FloorPlanRecord:
        body = {"id": plan_id, "name": name or "", "json": json or ""}
        resp = self._request("PUT", self._url(plan_id), plan_id=plan_id, json=body)
        return FloorPlanRecord.from_document(resp.json())

    def delete(self, plan_id: str) -> None:
        try:
            self._request("DELETE", self._url(plan_id), plan_id=plan_id)
        except FloorPlanNotFound:
            pass
