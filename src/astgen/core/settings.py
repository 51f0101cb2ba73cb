"""
Configuration loading and run settings.

Settings come from three layers, highest priority first: command line
options, an `.astgenrc` TOML file, and the safety defaults in
`astgen.config`. Everything is validated up front; any problem is a
ConfigurationError raised before a single input file is touched.

Example .astgenrc:

    [patterns]
    python = ["pyi$", "pyw$"]

    [ignore]
    patterns = ["_generated"]
    directories = ["vendor"]

    [output]
    format = "json"
    truncate = 2000

    [performance]
    max_threads = 8
    max_file_size_mb = 20
    parser_pool_size = 4
"""

from __future__ import annotations

import logging
import re
import tomllib
from pathlib import Path
from typing import Dict, FrozenSet, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from .. import config
from ..discovery import WalkOptions
from ..languages import LanguageRegistry, create_default_registry
from ..output import OutputFormat
from ..parsing.processor import ProcessOptions
from .errors import ConfigurationError

logger = logging.getLogger(__name__)


class IgnoreConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    patterns: List[str] = Field(default_factory=list)
    directories: List[str] = Field(default_factory=list)


class OutputConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    format: Optional[OutputFormat] = None
    truncate: Optional[int] = Field(default=None, ge=1)
    pretty: Optional[bool] = None


class PerformanceConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    max_threads: Optional[int] = None
    max_file_size_mb: Optional[int] = None
    parser_pool_size: Optional[int] = Field(default=None, ge=1)


class FileConfig(BaseModel):
    """Contents of an `.astgenrc` file. Every section is optional."""

    model_config = ConfigDict(extra="forbid")

    # Language name -> extra extension regexes bound to that language
    patterns: Dict[str, List[str]] = Field(default_factory=dict)
    ignore: IgnoreConfig = Field(default_factory=IgnoreConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    performance: PerformanceConfig = Field(default_factory=PerformanceConfig)

    @classmethod
    def load(cls, path: Path) -> "FileConfig":
        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
        except OSError as e:
            raise ConfigurationError(f"Cannot read config file {path}: {e}") from e
        except tomllib.TOMLDecodeError as e:
            raise ConfigurationError(
                f"Invalid config file {path}: {e}\n\n"
                f"Check the TOML syntax and ensure all fields are spelled correctly."
            ) from e

        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid config file {path}: {_first_error(e)}") from e

    @staticmethod
    def find_default() -> Optional[Path]:
        """Look for .astgenrc in the current directory, then the home directory."""
        for candidate in config.default_config_locations():
            if candidate.is_file():
                return candidate
        return None

    @classmethod
    def load_default(cls) -> "FileConfig":
        path = cls.find_default()
        if path is None:
            return cls()
        logger.debug(f"Using config file {path}")
        return cls.load(path)


def _first_error(error: ValidationError) -> str:
    """Human message for the first validation problem, without pydantic's prefixes."""
    first = error.errors()[0]
    cause = first.get("ctx", {}).get("error")
    if cause is not None:
        return str(cause)
    location = ".".join(str(part) for part in first.get("loc", ()))
    return f"{location}: {first['msg']}" if location else first["msg"]


class RunSettings(BaseModel):
    """Fully resolved and validated settings for one run."""

    files: List[Path] = Field(default_factory=list)
    output_format: OutputFormat = OutputFormat.JSON
    truncate: Optional[int] = None
    verbose: bool = False
    quiet: bool = False
    threads: Optional[int] = None
    dry_run: bool = False
    max_file_size_mb: int = config.MAX_FILE_SIZE_MB
    follow_links: bool = False
    max_depth: int = config.MAX_DIRECTORY_DEPTH
    include: List[str] = Field(default_factory=list)
    exclude: List[str] = Field(default_factory=list)
    output: Optional[Path] = None
    progress: bool = False
    strict: bool = False
    ignore_dirs: FrozenSet[str] = config.IGNORE_DIRECTORIES
    parser_pool_size: int = config.PARSER_POOL_SIZE
    extra_patterns: Dict[str, List[str]] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _check_ranges(self) -> "RunSettings":
        if self.threads is not None:
            if self.threads < 1:
                raise ValueError(
                    "Thread count must be at least 1. Try using --parallel 1 "
                    "or omit the flag to use the default."
                )
            if self.threads > config.MAX_THREADS:
                raise ValueError(
                    f"Thread count cannot exceed {config.MAX_THREADS}. "
                    f"Try using a smaller number like --parallel 8."
                )

        if self.max_file_size_mb < 1:
            raise ValueError("Max file size must be at least 1 MB. Try using --max-file-size 1.")
        if self.max_file_size_mb > config.MAX_FILE_SIZE_LIMIT_MB:
            raise ValueError(
                f"Max file size cannot exceed {config.MAX_FILE_SIZE_LIMIT_MB} MB. "
                f"Try using a smaller limit like --max-file-size 100."
            )

        if self.max_depth < 1:
            raise ValueError(
                "Max depth must be at least 1. Try using --max-depth 1 "
                "or omit the flag to use the default."
            )

        if self.truncate is not None and self.truncate < 1:
            raise ValueError("Truncate length must be at least 1.")

        if self.parser_pool_size < 1:
            raise ValueError("Parser pool size must be at least 1.")

        if self.verbose and self.quiet:
            raise ValueError(
                "Cannot use both --verbose and --quiet flags together. Choose one or neither."
            )

        if self.output is not None and not self.output.parent.exists():
            raise ValueError(
                f"Output directory does not exist: {self.output.parent}. "
                f"Create the directory first."
            )

        for pattern in self.include:
            if not pattern:
                raise ValueError(
                    "Include pattern cannot be empty. Use a valid pattern like '*.rs'."
                )
        for pattern in self.exclude:
            if not pattern:
                raise ValueError(
                    "Exclude pattern cannot be empty. Use a valid pattern like 'target/*'."
                )
        return self

    @classmethod
    def resolve(cls, file_config: FileConfig | None = None, **cli) -> "RunSettings":
        """
        Merge command line values over config-file values over defaults.

        A command line value of None means "not given". Exclude patterns and
        ignored directories from the config file are added to, not replaced
        by, the command line and built-in values.
        """
        file_config = file_config or FileConfig()
        perf = file_config.performance
        out = file_config.output

        output_format = cli.pop("output_format", None) or out.format
        if output_format is None:
            output_format = OutputFormat.PRETTY_JSON if out.pretty else OutputFormat.JSON

        values = {key: value for key, value in cli.items() if value is not None}
        values["output_format"] = output_format
        values.setdefault("threads", perf.max_threads)
        values.setdefault("truncate", out.truncate)
        values.setdefault(
            "max_file_size_mb",
            perf.max_file_size_mb if perf.max_file_size_mb is not None else config.MAX_FILE_SIZE_MB,
        )
        if perf.parser_pool_size is not None:
            values.setdefault("parser_pool_size", perf.parser_pool_size)
        values["exclude"] = list(values.get("exclude", [])) + file_config.ignore.patterns
        values["ignore_dirs"] = config.IGNORE_DIRECTORIES | frozenset(file_config.ignore.directories)
        values["extra_patterns"] = dict(file_config.patterns)

        try:
            return cls(**values)
        except ValidationError as e:
            raise ConfigurationError(_first_error(e)) from e

    def walk_options(self) -> WalkOptions:
        return WalkOptions(
            follow_symlinks=self.follow_links,
            max_depth=self.max_depth,
            include_patterns=list(self.include),
            exclude_patterns=list(self.exclude),
            ignore_dirs=self.ignore_dirs,
        )

    def process_options(self) -> ProcessOptions:
        return ProcessOptions(
            max_file_size_bytes=config.max_file_size_bytes(self.max_file_size_mb),
            truncate=self.truncate,
            dry_run=self.dry_run,
            strict=self.strict,
            output_format=self.output_format,
        )

    def build_registry(self) -> LanguageRegistry:
        """
        Built-in languages first, then config-file patterns in file order.

        Raises:
            ConfigurationError: Unknown language name or invalid regex.
        """
        registry = create_default_registry()
        for language, patterns in self.extra_patterns.items():
            binding = registry.find_by_name(language)
            if binding is None:
                raise ConfigurationError(f"Unknown language in [patterns]: '{language}'")
            for pattern in patterns:
                try:
                    registry.register(pattern, binding.language_id, binding.name)
                except re.error as e:
                    raise ConfigurationError(
                        f"Invalid pattern for {language}: '{pattern}' ({e})"
                    ) from e
        return registry


