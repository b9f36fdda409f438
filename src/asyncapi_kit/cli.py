"""CLI entry point for asyncapi-kit."""

import json
import random
import re
from pathlib import Path

import click
import yaml

from asyncapi_kit.document.models import Document
from asyncapi_kit.document.references import ChannelNotFoundError
from asyncapi_kit.generator.document import DocumentGenerator, GenerationOptions
from asyncapi_kit.generator.example import ExampleGenerator
from asyncapi_kit.parser.description import load_descriptions
from asyncapi_kit.parser.detect import detect_format
from asyncapi_kit.parser.document import read_document, write_document
from asyncapi_kit.validation.validators import validate_document

FORMAT_OPTION = click.option(
    "--format", "fmt", default="yaml", envvar="ASYNCAPI_KIT_FORMAT",
    type=click.Choice(["yaml", "json"]), help="Output format.",
)


def _load_document(doc_path: Path) -> Document:
    """Read an AsyncAPI document, failing with a CLI error if it is not one."""
    if detect_format(doc_path) != "asyncapi":
        raise click.ClickException(f"{doc_path} is not an AsyncAPI document")
    try:
        return read_document(doc_path)
    except ValueError as e:
        raise click.ClickException(f"Unable to read {doc_path}: {e}")


def _slug(document: Document, index: int) -> str:
    name = document.id or (document.info.title if document.info else None) or f"document-{index}"
    return re.sub(r"[^a-zA-Z0-9]+", "-", name).strip("-").lower()


@click.group()
def main():
    """asyncapi-kit: build, validate and generate AsyncAPI documents."""
    pass


@main.command()
@click.argument("descriptions_path", type=click.Path(exists=True, path_type=Path))
@click.option("-o", "--output", required=True, type=click.Path(path_type=Path), help="Output directory for generated documents.")
@FORMAT_OPTION
@click.option("--no-examples", is_flag=True, help="Do not generate message examples.")
@click.option("--seed", type=int, default=None, help="Seed for reproducible examples.")
def generate(descriptions_path: Path, output: Path, fmt: str, no_examples: bool, seed: int | None):
    """Generate AsyncAPI documents from an API description file."""
    click.echo(f"Loading descriptions from {descriptions_path}...")
    try:
        descriptions = load_descriptions(descriptions_path)
    except (ValueError, yaml.YAMLError) as e:
        raise click.ClickException(str(e))
    click.echo(f"Found {len(descriptions)} API description(s).")

    generator = DocumentGenerator(ExampleGenerator(random.Random(seed)))
    options = GenerationOptions(automatically_generate_examples=not no_examples)
    try:
        documents = generator.generate(descriptions, options)
    except ValueError as e:
        raise click.ClickException(str(e))

    output.mkdir(parents=True, exist_ok=True)
    for index, document in enumerate(documents, start=1):
        file_path = output / f"{_slug(document, index)}.asyncapi.{fmt}"
        file_path.write_text(write_document(document, fmt), encoding="utf-8")
        click.echo(f"  Created {file_path}")

    click.echo(f"Generated {len(documents)} document(s) in {output}")


@main.command()
@click.argument("doc_path", type=click.Path(exists=True, path_type=Path))
def validate(doc_path: Path):
    """Validate an AsyncAPI document."""
    document = _load_document(doc_path)
    failures = validate_document(document)
    if failures:
        for failure in failures:
            click.echo(f"  {failure}", err=True)
        raise click.ClickException(f"{doc_path} has {len(failures)} validation error(s)")
    click.echo(f"{doc_path} is valid.")


@main.command()
@click.argument("doc_path", type=click.Path(exists=True, path_type=Path))
@click.argument("operation_id")
def resolve(doc_path: Path, operation_id: str):
    """Show the channel and messages an operation resolves to."""
    document = _load_document(doc_path)
    operation, channel_name = document.find_operation_by_id(operation_id)
    if operation is None:
        raise click.ClickException(f"No operation with id '{operation_id}'")

    click.echo(f"Operation: {operation_id} ({operation.action.value if operation.action else 'unknown'})")
    click.echo(f"Channel: {channel_name}")
    try:
        messages = document.resolve_messages_for_operation(operation)
    except ChannelNotFoundError as e:
        raise click.ClickException(str(e))
    for message in messages:
        click.echo(f"  Message: {message}")


@main.command()
@click.argument("schema_path", type=click.Path(exists=True, path_type=Path))
@click.option("--required-only", is_flag=True, help="Only generate required properties.")
@click.option("--seed", type=int, default=None, help="Seed for reproducible examples.")
def example(schema_path: Path, required_only: bool, seed: int | None):
    """Print an example payload for a JSON Schema file."""
    try:
        schema = yaml.safe_load(schema_path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise click.ClickException(f"Unable to read {schema_path}: {e}")
    if not isinstance(schema, (dict, bool)):
        raise click.ClickException(f"{schema_path} does not contain a JSON Schema")
    generator = ExampleGenerator(random.Random(seed))
    result = generator.generate_example(schema, required_properties_only=required_only)
    click.echo(json.dumps(result.payload, indent=2, ensure_ascii=False, default=str))
