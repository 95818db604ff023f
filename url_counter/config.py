"""
Loading and validation of the UrlCounter runtime configuration.
Pydantic describes the schema; YAML and JSON files are accepted.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from url_counter import __version__


class CounterConfig(BaseModel):
    """Configuration of a single counting run."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    concurrency: int = Field(5, ge=1, description="Maximum number of URLs processed at once.")
    pattern: str = Field("Go", min_length=1, description="Literal, case-sensitive substring to count.")
    timeout: Optional[float] = Field(None, gt=0, description="Per-fetch timeout in seconds; None disables it.")
    idle_timeout: float = Field(10.0, gt=0, description="Keep-alive for idle pooled connections (seconds).")
    user_agent: str = Field(f"UrlCounter/{__version__}", min_length=1, description="User-Agent header.")
    report_failures: bool = Field(False, description="Log dropped URLs at WARNING instead of DEBUG.")

    @property
    def pattern_bytes(self) -> bytes:
        return self.pattern.encode("utf-8")

    def override(self, **changes: Any) -> CounterConfig:
        """Return a re-validated copy with every non-None value in *changes* applied."""
        updates = {k: v for k, v in changes.items() if v is not None}
        if not updates:
            return self
        return CounterConfig(**{**self.model_dump(), **updates})


_DEFAULT_CFG = Path("configs/default.yaml")


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of YAML must be a mapping, got {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of JSON must be a mapping, got {type(data).__name__}")
    return data


def load_config(path: Union[str, Path, None] = None) -> CounterConfig:
    """
    Read YAML or JSON and return a validated CounterConfig.

    With ``path=None`` the project default ``configs/default.yaml`` is used when
    it exists, otherwise the built-in defaults are returned.
    """
    if path is None:
        if not _DEFAULT_CFG.is_file():
            return CounterConfig()
        path_obj = _DEFAULT_CFG
    else:
        path_obj = Path(path).expanduser().resolve()
        if not path_obj.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        data = _read_yaml(path_obj)
    elif suffix == ".json":
        data = _read_json(path_obj)
    else:
        raise ValueError(f"Unsupported config format: {suffix}")

    return CounterConfig(**data)


__all__ = ["CounterConfig", "load_config", "ValidationError"]
