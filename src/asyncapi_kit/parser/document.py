"""AsyncAPI document codec.

Reads YAML or JSON text into a Document and writes a Document back out with
wire (camelCase) names and unset fields omitted.
"""

import json
from pathlib import Path

import yaml

from asyncapi_kit.document.models import Document


def read_document(source: Path | str) -> Document:
    """Parse a document from a file path or from YAML/JSON text."""
    text = source.read_text(encoding="utf-8") if isinstance(source, Path) else source
    data = yaml.safe_load(text)
    if not isinstance(data, dict):
        raise ValueError("An AsyncAPI document must be a mapping")
    return Document.model_validate(data)


def write_document(document: Document, fmt: str = "yaml") -> str:
    """Serialize a document as ``yaml`` or ``json``."""
    data = document.model_dump(mode="json", by_alias=True, exclude_none=True)
    if fmt == "json":
        return json.dumps(data, indent=2, ensure_ascii=False) + "\n"
    if fmt == "yaml":
        return yaml.safe_dump(data, sort_keys=False, allow_unicode=True)
    raise ValueError(f"Unsupported format: {fmt}")
