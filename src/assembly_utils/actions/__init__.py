"""
Actions layer - Plain Python functions for DOR administration.

All functions are CLI-agnostic: they take explicit Services/AppConfig
objects and return typed results, so they can be called from Python code
without going through the CLI.
"""

from .cleanup import (
    CleanupAborted,
    CleanupStep,
    cleanup,
    cleanup_object,
    confirmation_prompts,
    is_affirmative,
    parse_steps,
    required_endpoints,
)
from .datastreams import replace_datastreams, republish_metadata, update_datastreams, update_rights_metadata
from .lookup import druids_by_source_id
from .report import completion_report, solr_doc_parser
from .repository import delete_from_dor, export_objects, import_objects, unregister
from .robots import robot_status, start_robots_commands
from .workflow import (
    ReportWorkflow,
    clear_stray_workflows,
    delete_workflows,
    get_workflow_status,
    reset_workflow_states,
    set_workflow_step_to_error,
    workflow_status_report,
)

__all__ = [
    "CleanupAborted",
    "CleanupStep",
    "ReportWorkflow",
    "cleanup",
    "cleanup_object",
    "clear_stray_workflows",
    "completion_report",
    "confirmation_prompts",
    "delete_from_dor",
    "delete_workflows",
    "druids_by_source_id",
    "export_objects",
    "get_workflow_status",
    "import_objects",
    "is_affirmative",
    "parse_steps",
    "replace_datastreams",
    "reset_workflow_states",
    "republish_metadata",
    "required_endpoints",
    "robot_status",
    "set_workflow_step_to_error",
    "solr_doc_parser",
    "start_robots_commands",
    "unregister",
    "update_datastreams",
    "update_rights_metadata",
    "workflow_status_report",
]
