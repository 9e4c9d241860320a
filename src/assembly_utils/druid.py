"""
Druid parsing and path sharding.

A druid such as ``druid:aa000aa0001`` is sharded into the directory tree
``aa/000/aa/0001/aa000aa0001`` used by the DOR workspace, the assembly
staging area and the stacks.
"""

import re
from pathlib import Path

DRUID_PREFIX = "druid:"
DRUID_PATTERN = re.compile(r"^(?:druid:)?([a-z]{2})(\d{3})([a-z]{2})(\d{4})$")


def _match(pid: str) -> re.Match:
    match = DRUID_PATTERN.match(pid.strip())
    if match is None:
        raise ValueError(f"Invalid druid: {pid!r}")
    return match


def bare_druid(pid: str) -> str:
    """Strip the ``druid:`` prefix, if any."""
    pid = pid.strip()
    return pid[len(DRUID_PREFIX) :] if pid.startswith(DRUID_PREFIX) else pid


def is_valid_druid(pid: str) -> bool:
    return DRUID_PATTERN.match(pid.strip()) is not None


def druid_tree(pid: str) -> list[str]:
    """
    Get the sharded tree segments for a druid, ending with the bare id.

    Examples:
        druid_tree("druid:aa000aa0001") -> ["aa", "000", "aa", "0001", "aa000aa0001"]
    """
    match = _match(pid)
    return [*match.groups(), "".join(match.groups())]


def druid_path(pid: str, base_path: str | Path) -> Path:
    """Full object directory under base_path, including the bare id leaf."""
    return Path(base_path).joinpath(*druid_tree(pid))


def staging_path(pid: str, base_path: str = "") -> str:
    """
    Get the staging directory tree for a druid, optionally under base_path.

    The bare id leaf is not included. Without a base path the result is
    relative and never starts with a path separator.

    Examples:
        staging_path("aa000aa0001")          -> "aa/000/aa/0001"
        staging_path("aa000aa0001", "/tmp")  -> "/tmp/aa/000/aa/0001"
    """
    segments = druid_tree(pid)[:-1]
    if not base_path:
        return "/".join(segments)
    return str(Path(base_path).joinpath(*segments))
