"""Search index client - Solr select and update handlers (JSON)."""

import logging

from .errors import ServiceError
from .http import RestClient

logger = logging.getLogger(__name__)

SOURCE_ID_FIELD = "source_id_t"
DEFAULT_ROWS = 1000


def _quote(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


class SearchService(RestClient):
    """Client for the Solr index."""

    def query(self, q: str, fields: list[str] | None = None, rows: int = DEFAULT_ROWS) -> list[dict]:
        """Run a query and return the matching documents."""
        params = {"q": q, "rows": rows, "wt": "json"}
        if fields:
            params["fl"] = ",".join(fields)

        data = self._request("GET", "select", params=params).json()
        try:
            return data["response"]["docs"]
        except (KeyError, TypeError) as e:
            raise ServiceError(f"Unexpected search response for {q!r}") from e

    def query_by_source_id(self, source_id: str) -> list[str]:
        """Druids whose source id matches exactly."""
        docs = self.query(f"{SOURCE_ID_FIELD}:{_quote(source_id)}", fields=["id"])
        return [doc["id"] for doc in docs if "id" in doc]

    def _update(self, payload) -> None:
        self._request("POST", "update", json=payload)

    def delete(self, pid: str) -> None:
        self._update({"delete": {"id": pid}})
        logger.debug(f"Deleted index entry for {pid}")

    def add(self, doc: dict) -> None:
        if "id" not in doc:
            raise ValueError("Search documents need an 'id'")
        self._update([doc])
        logger.debug(f"Indexed {doc['id']}")

    def commit(self) -> None:
        self._update({"commit": {}})
