"""
TOML file I/O for settings.

Reading uses tomllib; writing uses tomlkit so generated files carry the
field descriptions as comments.
"""

import tomllib
from pathlib import Path
from typing import Any

import tomlkit

from cochain.config.schema import ConfigField


class TOMLError(Exception):
    """Base exception for TOML-related errors."""

    pass


def read_toml(file_path: Path) -> dict[str, Any]:
    """
    Read and parse a TOML file.

    Raises:
        TOMLError: If the file is missing or cannot be parsed
    """
    try:
        with open(file_path, "rb") as f:
            return tomllib.load(f)
    except FileNotFoundError as e:
        raise TOMLError(f"TOML file not found: {file_path}") from e
    except tomllib.TOMLDecodeError as e:
        raise TOMLError(f"Failed to parse TOML file {file_path}: {e}") from e


def write_toml(file_path: Path, content: str) -> None:
    """
    Write TOML text to a file, creating parent directories.

    Raises:
        TOMLError: If the file cannot be written
    """
    try:
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(content, encoding="utf-8")
    except OSError as e:
        raise TOMLError(f"Failed to write TOML file {file_path}: {e}") from e


def generate_toml_from_schema(
    section: str, schema: dict[str, ConfigField], values: dict[str, Any]
) -> str:
    """
    Render one settings section as TOML, with each field's description and
    allowed choices as comments above it.

    Args:
        section: Table name
        schema: field_name -> ConfigField
        values: field_name -> value (missing fields use defaults)
    """
    doc = tomlkit.document()
    doc.add(tomlkit.comment(f"Settings for {section}"))
    doc.add(tomlkit.nl())

    table = tomlkit.table()
    for field_name, field in schema.items():
        if field.description:
            table.add(tomlkit.comment(field.description))
        if field.choices is not None:
            table.add(tomlkit.comment(f"Choices: {', '.join(map(str, field.choices))}"))
        table.add(field_name, values.get(field_name, field.default))
        table.add(tomlkit.nl())

    doc.add(section, table)
    return tomlkit.dumps(doc)
