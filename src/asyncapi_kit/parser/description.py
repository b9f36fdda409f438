"""Loader for API description files (YAML or JSON)."""

from pathlib import Path

import yaml

from asyncapi_kit.generator.document import ApiDescription


def load_descriptions(file_path: Path) -> list[ApiDescription]:
    """Load one description, or a list of them, from a file."""
    data = yaml.safe_load(file_path.read_text(encoding="utf-8"))
    if isinstance(data, dict):
        data = [data]
    if not isinstance(data, list):
        raise ValueError(f"{file_path} does not contain an API description")
    return [ApiDescription.model_validate(item) for item in data]
