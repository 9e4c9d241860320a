"""
Datastream actions - Bulk replacement of metadata datastreams.

A druid whose datastream does not exist is reported as skipped; service
errors mark the druid as failed. Neither stops the batch.
"""

from collections.abc import Callable

from ..constants import DEFAULT_RIGHTS_DATASTREAM, RIGHTS_DATASTREAM
from ..results import BatchCallbacks, BatchReport, ItemResult
from ..services import NotFoundError, Services
from .batch import run_batch


def replace_datastreams(
    druids: list[str],
    datastream_name: str,
    new_content: str,
    services: Services,
    callbacks: BatchCallbacks | None = None,
) -> BatchReport:
    """
    Replace the entire content of a datastream for a series of objects.

    Example:
        replace_datastreams(
            ["druid:aa111aa1111", "druid:bb222bb2222"],
            "rightsMetadata",
            "<xml><more nodes>this should be the whole datastream</more nodes></xml>",
            services,
        )
    """

    def worker(result: ItemResult, note: Callable[[str], None]) -> None:
        if services.repository.datastream_content(result.druid, datastream_name) is None:
            result.skip(f"{datastream_name} does not exist for {result.druid}")
            return
        services.repository.save_datastream(result.druid, datastream_name, new_content)
        note(f"replaced {datastream_name} for {result.druid}")

    return run_batch("replace-datastream", druids, worker, callbacks)


def update_datastreams(
    druids: list[str],
    datastream_name: str,
    find_content: str,
    replace_content: str,
    services: Services,
    callbacks: BatchCallbacks | None = None,
) -> BatchReport:
    """Search and replace (literal, all occurrences) within a datastream."""

    def worker(result: ItemResult, note: Callable[[str], None]) -> None:
        content = services.repository.datastream_content(result.druid, datastream_name)
        if content is None:
            result.skip(f"{datastream_name} does not exist for {result.druid}")
            return
        updated = content.replace(find_content, replace_content)
        services.repository.save_datastream(result.druid, datastream_name, updated)
        note(f"updated {datastream_name} for {result.druid}")

    return run_batch("update-datastream", druids, worker, callbacks)


def update_rights_metadata(
    druids: list[str], apo_druid: str, services: Services, callbacks: BatchCallbacks | None = None
) -> BatchReport:
    """
    Replace rightsMetadata with the default object rights of an APO.

    Raises:
        NotFoundError: If the APO has no defaultObjectRights datastream
    """
    rights = services.repository.datastream_content(apo_druid, DEFAULT_RIGHTS_DATASTREAM)
    if rights is None:
        raise NotFoundError(f"{DEFAULT_RIGHTS_DATASTREAM} does not exist for {apo_druid}")
    return replace_datastreams(druids, RIGHTS_DATASTREAM, rights, services, callbacks)


def republish_metadata(druids: list[str], services: Services, callbacks: BatchCallbacks | None = None) -> BatchReport:
    """Re-publish public metadata for each druid."""

    def worker(result: ItemResult, note: Callable[[str], None]) -> None:
        services.repository.publish_metadata(result.druid)
        note(f"published {result.druid}")

    return run_batch("republish", druids, worker, callbacks)
