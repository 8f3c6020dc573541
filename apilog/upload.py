"""Upload of the head spec log to a spec service.

The service stores the log and returns ids used for documentation links.
POST {spec_service_url}/specs with the raw event array as the JSON body.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Protocol
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from .errors import UploadError


@dataclass(frozen=True)
class UploadResult:
    spec_id: str
    person_id: str | None = None


class SpecUploader(Protocol):
    def upload(self, events: list[Any]) -> UploadResult:
        ...


class HttpSpecUploader:
    def __init__(self, service_url: str, api_key: str, timeout_s: float = 10.0) -> None:
        self._url = f"{service_url.rstrip('/')}/specs"
        self._api_key = api_key
        self._timeout_s = timeout_s

    def upload(self, events: list[Any]) -> UploadResult:
        req = Request(
            self._url,
            data=json.dumps(events).encode("utf-8"),
            method="POST",
            headers={
                "Authorization": f"Token {self._api_key}",
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
        )
        try:
            with urlopen(req, timeout=self._timeout_s) as resp:
                payload = json.loads(resp.read().decode("utf-8") or "{}")
        except HTTPError as e:
            raise UploadError(f"Spec upload HTTP error {e.code}: {e.reason}") from e
        except URLError as e:
            raise UploadError(f"Spec upload connection error: {e.reason}") from e
        except json.JSONDecodeError as e:
            raise UploadError(f"Spec upload returned invalid JSON: {e.msg}") from e

        spec_id = payload.get("specId") if isinstance(payload, dict) else None
        if not spec_id:
            raise UploadError("Spec upload response has no specId")
        return UploadResult(spec_id=str(spec_id), person_id=payload.get("personId"))
