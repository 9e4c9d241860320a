"""
Local file inputs - plain text, YAML project configs and progress logs.

Progress logs are written by pre-assembly as a stream of YAML documents,
one per processed object, with Ruby symbol keys:

    ---
    :pid: druid:bc006dj2846
    :pre_assem_finished: true
"""

import logging
from pathlib import Path

import yaml

from .keys import symbolize_keys

logger = logging.getLogger(__name__)

PID_KEY = "pid"
FINISHED_KEY = "pre_assem_finished"


def read_file(filename: str | Path) -> str:
    """
    Read a file from disk.

    Bytes that are not valid UTF-8 are kept as surrogate escapes, so
    `text.encode("utf-8", "surrogateescape")` gives back the exact file bytes.

    Returns:
        The file contents, or an empty string if the file is missing or unreadable
    """
    path = Path(filename)
    try:
        with open(path, encoding="utf-8", errors="surrogateescape", newline="") as f:
            return f.read()
    except OSError:
        logger.debug(f"Could not read {path}")
        return ""


def load_project_config(filename: str | Path) -> dict:
    """
    Read a YAML project configuration file into a dict.

    Example:
        config = load_project_config("/thumpers/SC1017_SOHP/sohp_prod_accession.yaml")
        config["progress_log_file"]  # "/dor/preassembly/sohp_accession_log.yaml"
    """
    return yaml.safe_load(read_file(filename)) or {}


def read_progress_log(progress_log_file: str | Path) -> list[dict]:
    """Parse every record of a progress log, with symbol keys normalized."""
    records = []
    for document in yaml.safe_load_all(read_file(progress_log_file)):
        if isinstance(document, dict):
            records.append(symbolize_keys(document))
    return records


def druids_from_log(progress_log_file: str | Path, completed: bool = True) -> list[str]:
    """
    Read druids from a pre-assembly progress log.

    Args:
        progress_log_file: Progress log filename
        completed: True for druids that finished, False for those that did not

    Returns:
        Druids in file order
    """
    return [
        record[PID_KEY]
        for record in read_progress_log(progress_log_file)
        if PID_KEY in record and bool(record.get(FINISHED_KEY)) == completed
    ]
