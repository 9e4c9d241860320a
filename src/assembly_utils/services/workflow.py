"""
Workflow service client - step status queries and updates over REST/XML.

Endpoints used:
    GET    {repo}/objects/{druid}/workflows
    GET    {repo}/objects/{druid}/workflows/{workflow}
    PUT    {repo}/objects/{druid}/workflows/{workflow}/{step}
    DELETE {repo}/objects/{druid}/workflows/{workflow}
    GET    workflow_queue?repository=..&workflow=..&completed=..&waiting=..
"""

import logging

from lxml import etree

from .errors import NotFoundError, ServiceError
from .http import RestClient

logger = logging.getLogger(__name__)

XML_HEADERS = {"Content-Type": "application/xml"}


def _parse(content: bytes) -> etree._Element:
    try:
        return etree.fromstring(content)
    except etree.XMLSyntaxError as e:
        raise ServiceError(f"Invalid XML from workflow service: {e}") from e


def _process_xml(step: str, status: str, error_message: str | None = None) -> bytes:
    process = etree.Element("process", name=step, status=status)
    if error_message is not None:
        process.set("errorMessage", error_message)
    return etree.tostring(process)


class WorkflowService(RestClient):
    """Client for the workflow status service."""

    def _workflow_path(self, repo: str, druid: str, workflow: str | None = None) -> str:
        path = f"{repo}/objects/{druid}/workflows"
        return f"{path}/{workflow}" if workflow else path

    def get_workflow_xml(self, repo: str, druid: str, workflow: str) -> etree._Element:
        response = self._request("GET", self._workflow_path(repo, druid, workflow))
        return _parse(response.content)

    def get_workflow_status(self, repo: str, druid: str, workflow: str, step: str) -> str:
        """
        Get the status of one step.

        Raises:
            NotFoundError: If the workflow or step does not exist for the object
        """
        root = self.get_workflow_xml(repo, druid, workflow)
        # Steps may appear once per version; the last entry is the current one
        statuses = [p.get("status") for p in root.iter("process") if p.get("name") == step]
        if not statuses or statuses[-1] is None:
            raise NotFoundError(f"{workflow}:{step} not found for {druid}")
        return statuses[-1]

    def update_workflow_status(self, repo: str, druid: str, workflow: str, step: str, status: str) -> None:
        """Set a step to an arbitrary status."""
        self._request(
            "PUT",
            f"{self._workflow_path(repo, druid, workflow)}/{step}",
            data=_process_xml(step, status),
            headers=XML_HEADERS,
        )
        logger.debug(f"{druid} {workflow}:{step} -> {status}")

    def update_workflow_error_status(self, repo: str, druid: str, workflow: str, step: str, message: str) -> None:
        """Set a step to error, recording message."""
        self._request(
            "PUT",
            f"{self._workflow_path(repo, druid, workflow)}/{step}",
            data=_process_xml(step, "error", message),
            headers=XML_HEADERS,
        )
        logger.debug(f"{druid} {workflow}:{step} -> error ({message})")

    def get_objects_for_workstep(self, completed: str, waiting: str, repo: str, workflow: str) -> list[str]:
        """List druids whose `completed` step is done and `waiting` step is waiting."""
        params = {"repository": repo, "workflow": workflow, "completed": completed, "waiting": waiting}
        response = self._request("GET", "workflow_queue", params=params)
        root = _parse(response.content)
        return [obj.get("id") for obj in root.iter("object") if obj.get("id")]

    def get_workflows(self, repo: str, druid: str) -> list[str]:
        """Names of all workflows recorded for an object."""
        response = self._request("GET", self._workflow_path(repo, druid))
        root = _parse(response.content)
        names = []
        for wf in root.iter("workflow"):
            name = wf.get("id")
            if name and name not in names:
                names.append(name)
        return names

    def delete_workflow(self, repo: str, druid: str, workflow: str) -> None:
        self._request("DELETE", self._workflow_path(repo, druid, workflow))
        logger.debug(f"Deleted {workflow} for {druid}")

    def delete_all_workflows(self, repo: str, druid: str) -> list[str]:
        """
        Delete every workflow recorded for an object.

        Returns:
            Names of the deleted workflows
        """
        try:
            workflows = self.get_workflows(repo, druid)
        except NotFoundError:
            return []

        for workflow in workflows:
            self.delete_workflow(repo, druid, workflow)
        return workflows
