"""
Assembly Utils (asu) - Administrative helpers for the digital object repository

Operator utilities around DOR accessioning:
- Druid lookups and staging path sharding
- Workflow step inspection, reset and error marking
- Destructive cleanup of objects, staged content and stacks files
- Bulk datastream replacement
- CSV status and completion reports
"""

__version__ = "0.1.0"
__package_name__ = "assembly-utils"
__short_name__ = "asu"
