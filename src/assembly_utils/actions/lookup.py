"""Lookup actions - Find druids from other identifiers."""

from ..services import Services


def druids_by_source_id(source_ids: list[str], services: Services) -> list[str]:
    """
    Get the druids matching a list of source ids.

    Example:
        druids_by_source_id(["revs-01", "revs-02"], services)
        -> ["druid:aa000aa0001", "druid:aa000aa0002"]
    """
    druids: list[str] = []
    for source_id in source_ids:
        druids.extend(services.search.query_by_source_id(source_id))
    return druids
