"""Configuration management for jschunker."""

import json
import logging
import os
from pathlib import Path
from typing import Any, Literal, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from .beautifier import BeautifierOptions
from .chunking import DEFAULT_MAX_CHUNK_SIZE, ChunkerOptions
from .chunking.strategies import Strategy
from .errors import ConfigError
from .parser import ParseOptions

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "jschunker.config.json"


class Config(BaseModel):
    """Application configuration.

    Layers, lowest precedence first: defaults, environment, config file,
    command line options.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    # Chunking
    strategy: Strategy = Field(default="auto")
    max_chunk_size: int = Field(default=DEFAULT_MAX_CHUNK_SIZE, gt=0)  # bytes
    min_chunk_size: Optional[int] = Field(default=None, gt=0)  # bytes

    # Parsing
    source_type: Literal["script", "module"] = Field(default="module")
    tolerant: bool = Field(default=False)

    # Formatting
    beautify: bool = Field(default=True)
    beautify_options: BeautifierOptions = Field(default_factory=BeautifierOptions)

    # Input / output
    exclude: list[str] = Field(default_factory=list)
    continue_on_error: bool = Field(default=False)
    output_dir: Path = Field(default=Path("output"))
    node_entry: bool = Field(default=False)
    loader_template: Optional[Path] = Field(default=None)

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        def _parse_int(value: Optional[str], fallback: Optional[int]) -> Optional[int]:
            try:
                return int(value) if value is not None else fallback
            except ValueError:
                return fallback

        values: dict[str, Any] = {
            "max_chunk_size": _parse_int(
                os.getenv("JSCHUNKER_MAX_CHUNK_SIZE"), DEFAULT_MAX_CHUNK_SIZE
            ),
            "min_chunk_size": _parse_int(os.getenv("JSCHUNKER_MIN_CHUNK_SIZE"), None),
        }
        strategy = os.getenv("JSCHUNKER_STRATEGY")
        if strategy:
            values["strategy"] = strategy
        output_dir_env = os.getenv("JSCHUNKER_OUTPUT_DIR")
        if output_dir_env:
            values["output_dir"] = Path(output_dir_env)

        try:
            return cls(**values)
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration in environment: {e}") from e

    @staticmethod
    def read_file(config_path: Path) -> dict[str, Any]:
        """Read raw settings from a JSON or YAML config file.

        A missing file yields no settings. An unreadable or malformed file is
        reported and ignored.
        """
        if not config_path.exists():
            return {}

        try:
            text = config_path.read_text(encoding="utf-8")
            if config_path.suffix.lower() in (".yml", ".yaml"):
                data = yaml.safe_load(text)
            else:
                data = json.loads(text)
        except (OSError, ValueError, yaml.YAMLError) as e:
            logger.warning("Failed to parse config file %s: %s", config_path, e)
            return {}

        if data is None:
            return {}
        if not isinstance(data, dict):
            logger.warning("Config file %s must contain a mapping, ignoring it", config_path)
            return {}
        return data

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Config":
        """Load environment settings overlaid with a config file."""
        base = cls.from_env()
        config_path = config_path or Path(DEFAULT_CONFIG_FILE)
        file_data = cls.read_file(config_path)
        if not file_data:
            return base

        try:
            from_file = cls.model_validate(file_data)
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration in {config_path}: {e}") from e

        return base.with_overrides(**from_file.model_dump(exclude_unset=True))

    def with_overrides(self, **overrides: Any) -> "Config":
        """Return a validated copy with the given fields replaced.

        None values are ignored so unset command line options keep the
        configured value.
        """
        values = self.model_dump()
        for key, value in overrides.items():
            if value is None:
                continue
            if key == "beautify_options" and isinstance(value, dict):
                value = {**values["beautify_options"], **value}
            values[key] = value

        try:
            return Config(**values)
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration: {e}") from e

    def chunker_options(self) -> ChunkerOptions:
        return ChunkerOptions(
            strategy=self.strategy,
            max_chunk_size=self.max_chunk_size,
            min_chunk_size=self.min_chunk_size,
        )

    def parse_options(self) -> ParseOptions:
        return ParseOptions(source_type=self.source_type, tolerant=self.tolerant)
