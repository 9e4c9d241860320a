"""
Services layer - Clients for the external systems DOR tools talk to.

Clients are constructed once from an explicit AppConfig and passed to
the actions; there is no module-level connection state.
"""

from dataclasses import dataclass

from ..config import AppConfig
from .errors import NotFoundError, RemoteCommandError, ServiceError
from .http import build_session
from .remote import RemoteShell
from .repository import RepositoryObject, RepositoryService
from .search import SearchService
from .workflow import WorkflowService


@dataclass
class Services:
    """The set of clients used by the actions."""

    workflow: WorkflowService
    repository: RepositoryService
    search: SearchService
    repository_name: str = "dor"
    stacks_host: str | None = None
    stacks_user: str = "lyberadmin"

    @classmethod
    def from_config(cls, config: AppConfig) -> "Services":
        """Build every client from configuration."""
        svc = config.services
        session = build_session(svc.cert_file, svc.key_file)
        return cls(
            workflow=WorkflowService(svc.workflow_url or "", session),
            repository=RepositoryService(svc.fedora_url or "", session, svc.dor_services_url),
            search=SearchService(svc.solr_url or "", session),
            repository_name=svc.repository,
            stacks_host=config.stacks_host,
            stacks_user=config.stacks.user,
        )

    def remote_shell(self) -> RemoteShell:
        """New (unopened) shell session on the stacks host."""
        if not self.stacks_host:
            raise ServiceError("No stacks host configured for this environment")
        return RemoteShell(self.stacks_host, self.stacks_user)


__all__ = [
    "NotFoundError",
    "RemoteCommandError",
    "RemoteShell",
    "RepositoryObject",
    "RepositoryService",
    "SearchService",
    "ServiceError",
    "Services",
    "WorkflowService",
]
