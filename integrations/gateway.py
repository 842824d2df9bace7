"""Submission gateway clients for persisting record patches.

The wizard hands a patch to a :class:`SubmissionGateway` and receives a
:class:`SubmissionResult`. Transport failures never escape ``submit``; they
are logged and surfaced through ``SubmissionResult.message`` so the wizard
keeps the user's values intact.
"""

from __future__ import annotations

import copy
import logging
import uuid
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, Callable, Protocol

import requests

from config import GatewaySettings, load_gateway_settings
from core.errors import (
    GatewayError,
    GatewayRejectedError,
    GatewayTimeoutError,
    GatewayUnavailableError,
)
from utils.retry import TRANSPORT_RETRY_EXCEPTIONS, retry_with_backoff

logger = logging.getLogger(__name__)

Record = dict[str, Any]

DEFAULT_REJECTION_MESSAGE = "The server rejected the submission."


@dataclass(frozen=True)
class SubmissionResult:
    """Outcome of a create or update call."""

    ok: bool
    record: Record | None = None
    message: str | None = None
    field_errors: dict[str, str] = field(default_factory=dict)


class SubmissionGateway(Protocol):
    """Persistence boundary used by the wizard controller."""

    def submit(self, record_id: str | None, patch: Mapping[str, Any]) -> SubmissionResult:
        """Create a record when ``record_id`` is ``None``, otherwise update it."""

    def fetch_record(self, record_id: str) -> Record | None:
        """Return the stored record or ``None`` when it does not exist."""


def compute_patch(
    original: Mapping[str, Any] | None,
    current: Mapping[str, Any],
    fields: Iterable[str] | None = None,
) -> Record:
    """Return the keys of ``current`` whose values differ from ``original``."""

    baseline = original or {}
    keys = list(current) if fields is None else [key for key in fields if key in current]
    patch: Record = {}
    for key in keys:
        value = current[key]
        if key not in baseline or baseline[key] != value:
            patch[key] = copy.deepcopy(value)
    return patch


def parse_field_errors(payload: Any) -> dict[str, str]:
    """Extract ``field -> message`` pairs from a server error payload.

    Accepts ``{"fieldErrors": {...}}`` as well as a list of
    ``{"path": [...], "message": ...}`` entries under ``errors``.
    """

    if not isinstance(payload, Mapping):
        return {}
    errors: dict[str, str] = {}
    raw = payload.get("fieldErrors")
    if isinstance(raw, Mapping):
        for name, message in raw.items():
            if isinstance(message, (list, tuple)):
                message = message[0] if message else None
            if isinstance(name, str) and isinstance(message, str) and message:
                errors.setdefault(name, message)
    issues = payload.get("errors")
    if isinstance(issues, list):
        for issue in issues:
            if not isinstance(issue, Mapping):
                continue
            path = issue.get("path")
            message = issue.get("message")
            if isinstance(path, (list, tuple)) and path:
                path = path[0]
            if isinstance(path, str) and isinstance(message, str) and message:
                errors.setdefault(path, message)
    return errors


def _error_message(payload: Any) -> str | None:
    if not isinstance(payload, Mapping):
        return None
    for key in ("message", "error"):
        value = payload.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


class HttpSubmissionGateway:
    """Gateway backed by the JSON REST API of the back office."""

    def __init__(
        self,
        collection: str,
        *,
        settings: GatewaySettings | None = None,
        session: requests.Session | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> None:
        self._collection = collection.strip("/")
        self._settings = settings or load_gateway_settings()
        self._session = session or requests.Session()
        self._headers = {"Accept": "application/json", **dict(headers or {})}
        self._send = retry_with_backoff(
            exceptions=TRANSPORT_RETRY_EXCEPTIONS,
            max_tries=self._settings.max_tries,
        )(self._send_once)

    @property
    def settings(self) -> GatewaySettings:
        return self._settings

    def _url(self, record_id: str | None = None) -> str:
        base = f"{self._settings.base_url}/{self._collection}"
        return base if record_id is None else f"{base}/{record_id}"

    def _send_once(self, method: str, url: str, payload: Mapping[str, Any] | None = None) -> requests.Response:
        return self._session.request(
            method,
            url,
            json=payload,
            headers=self._headers,
            timeout=self._settings.timeout_seconds,
        )

    def _request(self, method: str, url: str, payload: Mapping[str, Any] | None = None) -> requests.Response:
        """Send the request, translating transport failures into gateway errors."""

        try:
            return self._send(method, url, payload)
        except requests.Timeout as exc:
            raise GatewayTimeoutError() from exc
        except requests.RequestException as exc:
            raise GatewayUnavailableError() from exc

    @staticmethod
    def _json(response: requests.Response) -> Any:
        try:
            return response.json()
        except ValueError:
            return None

    def _raise_for_status(self, response: requests.Response) -> None:
        if response.status_code < 400:
            return
        payload = self._json(response)
        message = _error_message(payload)
        if response.status_code >= 500:
            raise GatewayUnavailableError(message)
        raise GatewayRejectedError(
            message or DEFAULT_REJECTION_MESSAGE,
            status_code=response.status_code,
            field_errors=parse_field_errors(payload),
        )

    def submit(self, record_id: str | None, patch: Mapping[str, Any]) -> SubmissionResult:
        method = "POST" if record_id is None else "PATCH"
        url = self._url(record_id)
        try:
            response = self._request(method, url, dict(patch))
            self._raise_for_status(response)
        except GatewayRejectedError as exc:
            logger.warning("Gateway rejected %s %s (status %s)", method, url, exc.status_code)
            return SubmissionResult(ok=False, message=exc.message, field_errors=exc.field_errors)
        except GatewayError as exc:
            logger.error("Gateway %s %s failed: %s", method, url, exc.message)
            return SubmissionResult(ok=False, message=exc.message)
        payload = self._json(response)
        record = dict(payload) if isinstance(payload, Mapping) else {**dict(patch)}
        logger.info("Gateway %s %s succeeded", method, url)
        return SubmissionResult(ok=True, record=record)

    def fetch_record(self, record_id: str) -> Record | None:
        """Return the stored record; raise :class:`GatewayError` on failures."""

        url = self._url(record_id)
        try:
            response = self._request("GET", url)
            if response.status_code == 404:
                return None
            self._raise_for_status(response)
        except GatewayError as exc:
            logger.error("Gateway GET %s failed: %s", url, exc.message)
            raise
        payload = self._json(response)
        return dict(payload) if isinstance(payload, Mapping) else None


class InMemorySubmissionGateway:
    """Gateway that merges patches over records held in a dict.

    ``validator`` may return server-side field errors for a merged record to
    simulate rejected submissions.
    """

    def __init__(
        self,
        records: Mapping[str, Mapping[str, Any]] | None = None,
        *,
        validator: Callable[[Record], Mapping[str, str]] | None = None,
        id_field: str = "id",
    ) -> None:
        self._records: dict[str, Record] = {key: dict(value) for key, value in (records or {}).items()}
        self._validator = validator
        self._id_field = id_field
        self.calls: list[tuple[str | None, Record]] = []

    @property
    def records(self) -> dict[str, Record]:
        return self._records

    def submit(self, record_id: str | None, patch: Mapping[str, Any]) -> SubmissionResult:
        self.calls.append((record_id, copy.deepcopy(dict(patch))))
        if record_id is not None and record_id not in self._records:
            return SubmissionResult(ok=False, message="Record not found")
        prior = self._records.get(record_id, {}) if record_id is not None else {}
        merged: Record = {**copy.deepcopy(prior), **copy.deepcopy(dict(patch))}
        if self._validator is not None:
            errors = dict(self._validator(merged))
            if errors:
                return SubmissionResult(ok=False, message=DEFAULT_REJECTION_MESSAGE, field_errors=errors)
        new_id = record_id or uuid.uuid4().hex
        merged[self._id_field] = new_id
        self._records[new_id] = merged
        return SubmissionResult(ok=True, record=copy.deepcopy(merged))

    def fetch_record(self, record_id: str) -> Record | None:
        stored = self._records.get(record_id)
        return copy.deepcopy(stored) if stored is not None else None


__all__ = [
    "DEFAULT_REJECTION_MESSAGE",
    "HttpSubmissionGateway",
    "InMemorySubmissionGateway",
    "Record",
    "SubmissionGateway",
    "SubmissionResult",
    "compute_patch",
    "parse_field_errors",
]
