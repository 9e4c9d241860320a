"""
Repository client - Fedora 3 REST API plus the DOR services publish endpoint.

Handles:
- Object lookup and deletion
- Reading and replacing datastream content
- FOXML export and ingest
- Re-publishing public metadata
"""

import logging
from dataclasses import dataclass

import requests
from lxml import etree

from .errors import NotFoundError, ServiceError
from .http import RestClient

logger = logging.getLogger(__name__)

FOXML_FORMAT = "info:fedora/fedora-system:FOXML-1.1"
ACCESS_NS = "http://www.fedora.info/definitions/1/0/access/"


@dataclass
class RepositoryObject:
    """Profile of an object in the repository."""

    pid: str
    label: str = ""
    state: str = ""


class RepositoryService(RestClient):
    """Client for the Fedora repository."""

    def __init__(
        self, base_url: str, session: requests.Session | None = None, dor_services_url: str | None = None
    ):
        super().__init__(base_url, session)
        self.dor_services_url = dor_services_url.rstrip("/") if dor_services_url else None

    def find(self, pid: str) -> RepositoryObject:
        """
        Load an object profile.

        Raises:
            NotFoundError: If the object does not exist
        """
        response = self._request("GET", f"objects/{pid}", params={"format": "xml"})
        try:
            root = etree.fromstring(response.content)
        except etree.XMLSyntaxError as e:
            raise ServiceError(f"Invalid object profile for {pid}: {e}") from e

        def text(tag: str) -> str:
            node = root.find(f"{{{ACCESS_NS}}}{tag}")
            if node is None:
                node = root.find(tag)
            return (node.text or "") if node is not None else ""

        return RepositoryObject(pid=root.get("pid") or pid, label=text("objLabel"), state=text("objState"))

    def datastream_content(self, pid: str, dsid: str) -> str | None:
        """Get the raw content of a datastream, or None if it does not exist."""
        try:
            response = self._request("GET", f"objects/{pid}/datastreams/{dsid}/content")
        except NotFoundError:
            return None
        return response.text

    def save_datastream(self, pid: str, dsid: str, content: str) -> None:
        """Replace the whole content of an existing datastream."""
        self._request(
            "PUT",
            f"objects/{pid}/datastreams/{dsid}",
            data=content.encode("utf-8", "surrogateescape"),
            headers={"Content-Type": "text/xml"},
        )
        logger.debug(f"Saved {dsid} for {pid}")

    def delete(self, pid: str) -> None:
        """Purge an object from the repository."""
        self._request("DELETE", f"objects/{pid}")
        logger.debug(f"Deleted {pid}")

    def export(self, pid: str) -> bytes:
        """Export an object as archival FOXML."""
        response = self._request("GET", f"objects/{pid}/export", params={"context": "archive", "format": FOXML_FORMAT})
        return response.content

    def ingest(self, foxml: bytes) -> str:
        """
        Ingest a FOXML document.

        Returns:
            The pid assigned by the repository
        """
        response = self._request(
            "POST",
            "objects/new",
            data=foxml,
            headers={"Content-Type": "text/xml"},
        )
        return response.text.strip()

    def publish_metadata(self, pid: str) -> None:
        """Ask DOR services to re-publish the object's public metadata."""
        if not self.dor_services_url:
            raise ServiceError("dor_services_url not configured")
        url = f"{self.dor_services_url}/v1/objects/{pid}/publish"
        try:
            response = self.session.post(url)
        except requests.RequestException as e:
            raise ServiceError(f"Network error calling {url}: {e}") from e
        if not response.ok:
            raise ServiceError(f"POST {url} failed: {response.status_code} {response.reason}")
        logger.debug(f"Published {pid}")
