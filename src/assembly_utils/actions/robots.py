"""
Robot actions - Check and describe the assembly and accession robots.

Nothing here starts or stops a robot; start commands are only returned.
"""

import subprocess

from ..config import AppConfig
from ..constants import ACCESSION_WF, ASSEMBLY_WF

ACCESSION_ROBOTS = [
    "content-metadata",
    "descriptive-metadata",
    "rights-metadata",
    "remediate-object",
    "publish",
    "shelve",
    "provenance-metadata",
    "cleanup",
]
ASSEMBLY_ROBOTS = ["jp2-create", "checksum-compute", "exif-collect", "accessioning-initiate"]

# Minimum matching processes for robots to count as running
MIN_PROCESSES = {ACCESSION_WF: 2, ASSEMBLY_WF: 1}


def count_processes(pattern: str, ps_output: str) -> int:
    return sum(1 for line in ps_output.splitlines() if pattern in line)


def robot_status() -> dict[str, bool]:
    """
    Check whether robots are running on this server.

    Returns:
        Workflow name -> running
    """
    result = subprocess.run(["ps", "-ef"], capture_output=True, text=True, timeout=30)
    output = result.stdout if result.returncode == 0 else ""
    return {wf: count_processes(wf, output) >= minimum for wf, minimum in MIN_PROCESSES.items()}


def start_robots_commands(config: AppConfig) -> list[str]:
    """Shell commands that start the accession and assembly robots."""
    env = f"ROBOT_ENVIRONMENT={config.environment}"
    accession = " ".join(f"{ACCESSION_WF}:{robot}" for robot in ACCESSION_ROBOTS)
    assembly = " ".join(f"{ASSEMBLY_WF}:{robot}" for robot in ASSEMBLY_ROBOTS)
    return [
        f"cd {config.robots.accession_dir}; {env} ./bin/run_robot start {accession}",
        f"cd {config.robots.assembly_dir}; {env} ./bin/run_robot start {assembly}",
    ]
