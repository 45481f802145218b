import json
import os
from pathlib import Path
from typing import Any, Literal

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from schema2dts.exceptions import ConfigurationError

DEFAULT_FILENAMES = ['schema2dts.yaml', 'schema2dts.yml']
ENV_PREFIX = 'SCHEMA2DTS_'


class GeneratorConfig(BaseSettings):
    """Settings for one generation run."""

    model_config = SettingsConfigDict(env_prefix=ENV_PREFIX)

    sources: list[str] = Field(
        ..., description='Schema files, glob patterns or http(s) URLs to read.'
    )

    output: str | None = Field(
        None, description='Output file for the declarations; stdout when unset.'
    )

    indent: str = Field('    ', description='Indentation used for nested blocks.')

    type_reduction: Literal['merge-numeric', 'distinct'] = Field(
        'merge-numeric',
        description='How type arrays are reduced: "merge-numeric" folds integer into number.',
    )

    timeout: float = Field(
        30.0, gt=0, description='Timeout in seconds for fetching remote documents.'
    )

    @field_validator('sources')
    @classmethod
    def _require_sources(cls, value: list[str]) -> list[str]:
        if not value:
            raise ValueError('at least one source is required')
        return value


def load_yaml(path: str | Path) -> dict:
    import yaml

    return yaml.load(Path(path).read_text(), Loader=yaml.FullLoader)


def load_json(path: str | Path) -> dict:
    return json.loads(Path(path).read_text())


def load_config_file(path: str | Path) -> dict:
    path = Path(path)
    if not path.exists():
        raise ConfigurationError('Configuration file not found', config_path=str(path))
    if path.suffix.lower() == '.json':
        return load_json(path)
    return load_yaml(path) or {}


def find_config_data(path: str | None = None) -> dict | None:
    """Load raw configuration from a file or the default locations."""
    if path:
        return load_config_file(path)

    cwd = os.getcwd()

    for filename in DEFAULT_FILENAMES:
        candidate = Path(cwd) / filename
        if candidate.exists():
            return load_config_file(candidate)

    candidate = Path(cwd) / 'pyproject.toml'

    if candidate.exists():
        import tomllib

        pyproject = tomllib.loads(candidate.read_text())
        tools = pyproject.get('tool', {})

        if 'schema2dts' in tools:
            return tools['schema2dts']

    return None


def get_config(path: str | None = None, **overrides: Any) -> GeneratorConfig:
    """Load configuration from a file, merging explicit overrides on top.

    Overrides whose value is None are ignored. Environment variables prefixed
    with `SCHEMA2DTS_` fill in anything neither the file nor the overrides set.

    Raises:
        ConfigurationError: If no configuration is found or it is invalid.
    """
    overrides = {key: value for key, value in overrides.items() if value is not None}
    data = find_config_data(path)

    if data is None and not overrides and not _has_env_settings():
        raise ConfigurationError('config not found')

    try:
        return GeneratorConfig(**{**(data or {}), **overrides})
    except ValidationError as e:
        error = e.errors()[0]
        field = '.'.join(str(loc) for loc in error['loc']) or None
        raise ConfigurationError(
            f'Invalid configuration: {error["msg"]}', config_path=path, field=field
        )


def _has_env_settings() -> bool:
    return any(key.upper().startswith(ENV_PREFIX) for key in os.environ)
