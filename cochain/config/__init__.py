"""
cochain settings - TOML-backed registry configuration.

Example usage:
    from cochain.config import load_settings
    from cochain import Emitter

    settings = load_settings()  # reads [cochain] from config/cochain.toml
    events = Emitter(settings=settings)

Example file:
    [cochain]
    enforce_styles = true
    warn_unhandled = false
    default_style = "auto"
"""

from dataclasses import asdict, dataclass
from pathlib import Path

from cochain.config.schema import (
    ConfigField,
    ValidationError,
    generate_default_config,
    validate_config,
)
from cochain.config.toml_handler import (
    TOMLError,
    generate_toml_from_schema,
    read_toml,
    write_toml,
)

DEFAULT_SECTION = "cochain"

# Default config file path
DEFAULT_CONFIG_FILE = Path("config/cochain.toml")

SCHEMA: dict[str, ConfigField] = {
    "enforce_styles": ConfigField(
        bool,
        True,
        "Reject handlers whose calling convention differs from the chain's first handler",
    ),
    "warn_unhandled": ConfigField(
        bool,
        False,
        "Emit a RuntimeWarning when dispatching a chain with no handlers",
    ),
    "default_style": ConfigField(
        str,
        "auto",
        "Calling convention assumed for untagged handlers",
        choices=["auto", "sync", "suspending"],
    ),
}


class ConfigError(Exception):
    """Raised when settings cannot be loaded or are invalid."""

    pass


@dataclass(frozen=True)
class RegistrySettings:
    """Validated registry settings."""

    enforce_styles: bool = True
    warn_unhandled: bool = False
    default_style: str = "auto"

    def __post_init__(self):
        try:
            validate_config(asdict(self), SCHEMA)
        except ValidationError as e:
            raise ConfigError(str(e)) from e


def load_settings(
    path: Path | None = None, section: str = DEFAULT_SECTION
) -> RegistrySettings:
    """
    Load registry settings from a TOML file.

    Missing file or missing section yields the defaults; missing fields are
    filled from the schema.

    Args:
        path: TOML file (default: config/cochain.toml)
        section: Table holding the settings

    Raises:
        ConfigError: If the file cannot be parsed or a value is invalid
    """
    config_file = path if path is not None else DEFAULT_CONFIG_FILE
    values = generate_default_config(SCHEMA)

    if config_file.exists():
        try:
            data = read_toml(config_file)
        except TOMLError as e:
            raise ConfigError(f"Failed to load settings: {e}") from e

        raw = data.get(section, {})
        if not isinstance(raw, dict):
            raise ConfigError(f"Section '{section}' in {config_file} must be a table")
        values.update(raw)

    try:
        validate_config(values, SCHEMA)
    except ValidationError as e:
        raise ConfigError(f"Invalid settings in {config_file}: {e}") from e

    return RegistrySettings(**values)


def write_default_config(path: Path, section: str = DEFAULT_SECTION) -> None:
    """
    Write a commented settings file holding the defaults.

    Raises:
        ConfigError: If the file cannot be written
    """
    content = generate_toml_from_schema(section, SCHEMA, generate_default_config(SCHEMA))
    try:
        write_toml(path, content)
    except TOMLError as e:
        raise ConfigError(str(e)) from e


__all__ = [
    "SCHEMA",
    "ConfigError",
    "RegistrySettings",
    "load_settings",
    "write_default_config",
]
