"""Shared HTTP plumbing for the REST service clients."""

import logging
from pathlib import Path
from urllib.parse import urljoin

import requests

from .errors import NotFoundError, ServiceError

logger = logging.getLogger(__name__)


def build_session(cert_file: Path | None = None, key_file: Path | None = None) -> requests.Session:
    """Create a session, presenting the client certificate when configured."""
    session = requests.Session()
    if cert_file and key_file:
        session.cert = (str(cert_file), str(key_file))
    elif cert_file:
        session.cert = str(cert_file)
    return session


class RestClient:
    """Base for clients talking to one REST endpoint."""

    def __init__(self, base_url: str, session: requests.Session | None = None):
        """
        Initialize the client.

        Args:
            base_url: Base URL of the service (e.g., "https://sul-lyberservices-dev/workflow")
            session: Optional shared session
        """
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()

    def url(self, path: str) -> str:
        return urljoin(self.base_url + "/", path.lstrip("/"))

    def _request(self, method: str, path: str, **kwargs) -> requests.Response:
        """
        Make an HTTP request to the service.

        Raises:
            NotFoundError: On a 404 response
            ServiceError: On any other failure
        """
        url = self.url(path)
        logger.debug(f"{method} {url}")

        try:
            response = self.session.request(method, url, **kwargs)
        except requests.RequestException as e:
            raise ServiceError(f"Network error calling {url}: {e}") from e

        if response.status_code == 404:
            raise NotFoundError(f"Not found: {method} {url}")
        if not response.ok:
            raise ServiceError(f"{method} {url} failed: {response.status_code} {response.reason}. {response.text}")

        return response
