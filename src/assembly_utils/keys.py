"""
Key normalization for YAML data written by Ruby tools.

Ruby serializes symbols as strings with a leading colon (``:pid``).
"Symbolizing" turns such strings into plain identifiers: the leading
colon is dropped and dashes and spaces become underscores.
"""

from typing import Any


def to_symbol(value: str) -> str:
    """
    Normalize a string into an identifier-like symbol.

    Examples:
        to_symbol(":pid")           -> "pid"
        to_symbol("project-name")   -> "project_name"
    """
    if value.startswith(":"):
        value = value[1:]
    return value.replace("-", "_").replace(" ", "_")


def symbolize_keys(obj: Any) -> Any:
    """Recursively convert string dict keys to symbols; values are left alone."""
    if isinstance(obj, dict):
        return {(to_symbol(k) if isinstance(k, str) else k): symbolize_keys(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [symbolize_keys(v) for v in obj]
    return obj


def values_to_symbols(data: dict) -> dict:
    """Convert top-level string values to symbols in place (not recursive)."""
    for key, value in data.items():
        if isinstance(value, str):
            data[key] = to_symbol(value)
    return data
