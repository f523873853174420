"""TOML config loading for literaltree.toml."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path

CONFIG_FILENAME = "literaltree.toml"


@dataclass
class ParserConfig:
    max_depth: int | None = None
    max_length: int | None = None


@dataclass
class OutputConfig:
    color: bool = True


@dataclass
class LiteralTreeConfig:
    parser: ParserConfig = field(default_factory=ParserConfig)
    output: OutputConfig = field(default_factory=OutputConfig)


def find_config(start_path: Path | None = None) -> Path:
    """Walk up directories to find literaltree.toml. Raises FileNotFoundError."""
    path = (start_path or Path.cwd()).resolve()
    if path.is_file():
        path = path.parent
    while True:
        candidate = path / CONFIG_FILENAME
        if candidate.exists():
            return candidate
        parent = path.parent
        if parent == path:
            raise FileNotFoundError(f"No {CONFIG_FILENAME} found in any parent directory")
        path = parent


def _limit(value: object, name: str) -> int | None:
    # 0 (or absent) means unlimited
    if value is None or value == 0:
        return None
    if not isinstance(value, int) or isinstance(value, bool) or value < 0:
        raise ValueError(f"{name} must be a non-negative integer, got {value!r}")
    return value


def _flag(value: object, name: str) -> bool:
    if not isinstance(value, bool):
        raise ValueError(f"{name} must be true or false, got {value!r}")
    return value


def load_config(path: Path) -> LiteralTreeConfig:
    """Parse a literaltree.toml file into a LiteralTreeConfig."""
    with open(path, "rb") as f:
        data = tomllib.load(f)

    config = LiteralTreeConfig()

    if "parser" in data:
        psr = data["parser"]
        config.parser = ParserConfig(
            max_depth=_limit(psr.get("max_depth"), "parser.max_depth"),
            max_length=_limit(psr.get("max_length"), "parser.max_length"),
        )

    if "output" in data:
        out = data["output"]
        config.output = OutputConfig(
            color=_flag(out.get("color", True), "output.color"),
        )

    return config


def discover_config(start_path: Path | None = None) -> LiteralTreeConfig:
    """Load the nearest literaltree.toml, or defaults when there is none."""
    try:
        return load_config(find_config(start_path))
    except FileNotFoundError:
        return LiteralTreeConfig()
