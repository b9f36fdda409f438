"""Auto-detect what kind of file the CLI was given."""

from pathlib import Path

import yaml


def detect_format(file_path: Path) -> str:
    """Detect the content of a YAML/JSON file.

    Returns: 'asyncapi', 'description', 'schema' or 'unknown'.
    """
    text = file_path.read_text(encoding="utf-8")

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError:
        return "unknown"

    if isinstance(data, list) and data and all(isinstance(d, dict) for d in data):
        data = data[0] if "operations" in data[0] else None
    if not isinstance(data, dict):
        return "unknown"
    if "asyncapi" in data:
        return "asyncapi"
    if isinstance(data.get("operations"), list):
        return "description"
    if any(key in data for key in ("type", "properties", "$schema", "const", "enum")):
        return "schema"
    return "unknown"
