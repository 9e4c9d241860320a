"""
Centralized constants for Assembly Utils.

Workflow names, step lists and default locations shared by the
actions and the CLI are defined here.
"""

# Base PURL URL
PURL_BASE_URL = "http://purl.stanford.edu"

# Default workspaces (overridable in config)
DOR_WORKSPACE = "/dor/workspace"
ASSEMBLY_WORKSPACE = "/dor/assembly"
STACKS_ROOT = "/stacks"

# Repository name used by the workflow service
DEFAULT_REPOSITORY = "dor"

ASSEMBLY_WF = "assemblyWF"
ACCESSION_WF = "accessionWF"

# Assembly workflow steps with their expected initial status, in order
ASSEMBLY_WF_STEPS = [
    ("start-assembly", "completed"),
    ("jp2-create", "waiting"),
    ("checksum-compute", "waiting"),
    ("exif-collect", "waiting"),
    ("accessioning-initiate", "waiting"),
]

# Accession steps shown in the workflow status report
ACCESSION_REPORT_STEPS = ["content-metadata", "descriptive-metadata", "rights-metadata", "shelve", "publish"]

# Sentinel for a workflow step that could not be looked up
NOT_FOUND = "NOT FOUND"

# Message recorded when steps are pushed to error by these tools
DEFAULT_ERROR_MESSAGE = "Integration testing"

# Stacks file host per environment
STACKS_HOSTS = {
    "development": "stacks-dev",
    "test": "stacks-test",
    "production": "stacks",
}

PRODUCTION_ENVIRONMENT = "production"

# Datastreams used by the rights update
DEFAULT_RIGHTS_DATASTREAM = "defaultObjectRights"
RIGHTS_DATASTREAM = "rightsMetadata"
