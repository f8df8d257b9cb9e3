from __future__ import annotations

import logging
from typing import Any

import httpx

from quickquiz.core.config import settings
from quickquiz.services.content_store import ContentStoreError, EntityKind


log = logging.getLogger(__name__)

# Our field name -> CMS attribute name, where they differ.
_OUTGOING_FIELDS: dict[EntityKind, dict[str, str]] = {
    EntityKind.question: {"correct_answer": "correctAnswer"},
}

_FILTER_FIELDS: dict[str, str] = {"document_id": "documentId"}


def _to_cms(kind: EntityKind, data: dict[str, Any]) -> dict[str, Any]:
    mapping = _OUTGOING_FIELDS.get(kind, {})
    return {mapping.get(k, k): v for k, v in data.items()}


def _from_cms(kind: EntityKind, item: dict[str, Any]) -> dict[str, Any]:
    reverse = {v: k for k, v in _OUTGOING_FIELDS.get(kind, {}).items()}
    out: dict[str, Any] = {}
    for k, v in (item or {}).items():
        if k == "documentId":
            out["document_id"] = v
        elif k == "id":
            out["cms_id"] = v
        else:
            out[reverse.get(k, k)] = v
    return out


class CmsContentStore:
    """Content store backed by the headless CMS REST API.

    Collections live under /api/<kind>s; requests authenticate with a bearer
    API token. Each call is a single attempt: failures surface as
    ContentStoreError and the caller decides what to do.
    """

    def __init__(
        self,
        *,
        base_url: str,
        api_token: str | None = None,
        timeout_seconds: float = 15.0,
        page_size: int = 100,
        transport: httpx.BaseTransport | None = None,
    ):
        headers = {"Accept": "application/json"}
        token = (api_token or "").strip()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self.page_size = max(1, int(page_size))
        self.client = httpx.Client(
            base_url=base_url.rstrip("/"),
            headers=headers,
            timeout=httpx.Timeout(float(timeout_seconds), connect=min(5.0, float(timeout_seconds))),
            transport=transport,
        )

    @classmethod
    def from_settings(cls) -> CmsContentStore:
        return cls(
            base_url=str(settings.cms_base_url or ""),
            api_token=settings.cms_api_token,
            timeout_seconds=float(settings.cms_timeout_seconds),
            page_size=int(settings.cms_page_size),
        )

    def _request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        try:
            r = self.client.request(method, path, **kwargs)
            r.raise_for_status()
            return r.json()
        except httpx.HTTPStatusError as e:
            body = e.response.text[:600]
            raise ContentStoreError(f"{method} {path} -> HTTP {e.response.status_code}: {body}") from e
        except (httpx.HTTPError, ValueError) as e:
            raise ContentStoreError(f"{method} {path} failed: {type(e).__name__}: {e}") from e

    def find(self, kind: EntityKind, filters: dict[str, Any]) -> list[dict[str, Any]]:
        params: dict[str, Any] = {}
        for field, value in filters.items():
            params[f"filters[{_FILTER_FIELDS.get(field, field)}][$eq]"] = value
        payload = self._request("GET", f"/api/{kind.plural}", params=params)
        return [_from_cms(kind, item) for item in payload.get("data") or []]

    def find_published(self, kind: EntityKind) -> list[dict[str, Any]]:
        out: list[dict[str, Any]] = []
        page = 1
        while True:
            payload = self._request(
                "GET",
                f"/api/{kind.plural}",
                params={
                    "status": "published",
                    "pagination[page]": page,
                    "pagination[pageSize]": self.page_size,
                },
            )
            out.extend(_from_cms(kind, item) for item in payload.get("data") or [])
            pagination = ((payload.get("meta") or {}).get("pagination") or {})
            page_count = int(pagination.get("pageCount") or 1)
            if page >= page_count:
                break
            page += 1
        log.debug("cms: loaded %s %s record(s)", len(out), kind.value)
        return out

    def create(self, kind: EntityKind, data: dict[str, Any]) -> dict[str, Any]:
        payload = self._request(
            "POST",
            f"/api/{kind.plural}",
            params={"status": "published"},
            json={"data": _to_cms(kind, data)},
        )
        return _from_cms(kind, payload.get("data") or {})

    def close(self) -> None:
        self.client.close()
