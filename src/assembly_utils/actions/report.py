"""
Report actions - Completion reports built from search index documents.

Used for the pre-assembly completion and project tag reports.
"""

import logging
from pathlib import Path

from ..constants import ACCESSION_WF, PURL_BASE_URL
from ..druid import bare_druid
from ..services import Services
from .workflow import get_workflow_status, write_csv

logger = logging.getLogger(__name__)

REPORT_HEADER = ["druid", "label", "title", "source_id", "accessioned", "shelved", "purl_link", "files", "file_types"]
REPORT_FIELDS = ["id", "objectLabel_t", "public_dc_title_t", "wf_wps_facet", "source_id_t", "content_file_t"]

PUBLISHED = f"{ACCESSION_WF}:publish:completed"
SHELVED = f"{ACCESSION_WF}:shelve:completed"


def _first(value):
    """Solr returns multi-valued fields as lists; take the first value."""
    if isinstance(value, list):
        return value[0] if value else ""
    return value if value is not None else ""


def file_type_summary(files: list[str]) -> str:
    """
    Count files by extension, in first-seen order.

    Example:
        file_type_summary(["a.tif", "b.tif", "c.jp2"]) -> ".tif=2 | .jp2=1"
    """
    counts: dict[str, int] = {}
    for name in files:
        ext = Path(name).suffix
        counts[ext] = counts.get(ext, 0) + 1
    return " | ".join(f"{ext}={count}" for ext, count in counts.items())


def solr_doc_parser(doc: dict, services: Services | None = None, check_status_in_dor: bool = False) -> list:
    """
    Turn a search document into a completion report row.

    Args:
        doc: Search index document
        services: Service clients, needed when check_status_in_dor is True
        check_status_in_dor: Ask the workflow service instead of trusting the index

    Returns:
        [druid, label, title, source_id, accessioned, shelved, purl_link, num_files, file_type_list]
    """
    druid = doc["id"]
    label = _first(doc.get("objectLabel_t"))
    title = _first(doc.get("public_dc_title_t"))

    if check_status_in_dor:
        if services is None:
            raise ValueError("services are required to check status in DOR")
        accessioned = get_workflow_status(druid, ACCESSION_WF, "publish", services) == "completed"
        shelved = get_workflow_status(druid, ACCESSION_WF, "shelve", services) == "completed"
    else:
        facets = doc.get("wf_wps_facet") or []
        accessioned = PUBLISHED in facets
        shelved = SHELVED in facets

    source_id = _first(doc.get("source_id_t"))
    files = doc.get("content_file_t") or []
    purl_link = f"{PURL_BASE_URL}/{bare_druid(druid)}"

    return [druid, label, title, source_id, accessioned, shelved, purl_link, len(files), file_type_summary(files)]


def completion_report(
    query: str,
    services: Services,
    filename: Path | None = None,
    check_status_in_dor: bool = False,
    rows: int = 10000,
) -> list[list]:
    """
    Run a search and build a completion report.

    Returns:
        Header row followed by one row per document
    """
    docs = services.search.query(query, fields=REPORT_FIELDS, rows=rows)
    report = [REPORT_HEADER]
    report.extend(solr_doc_parser(doc, services, check_status_in_dor) for doc in docs)

    if filename:
        write_csv(filename, report)
        logger.info(f"Report generated in {filename}")

    return report
