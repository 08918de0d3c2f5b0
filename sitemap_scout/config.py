# === FILE: sitemap_scout/config.py ===
"""
Loading and validation of SitemapScout settings.
Pydantic describes the schema and checks values, including values assigned
after construction.
"""
from __future__ import annotations

import json
import os
import errno
from pathlib import Path
from typing import Any, Literal, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)


class FetchConfig(BaseModel):
    """Settings for a single logical HTTP GET of a sitemap document."""
    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    validate_content_type: bool = Field(
        True, description="Accept only XML, RSS and gzip content types."
    )
    max_retries: int = Field(1, ge=1, le=10, description="Extra attempts after the first one.")
    timeout_ms: int = Field(3000, gt=0, description="Connect and per-read timeout (ms).")
    user_agent: str = Field(DEFAULT_USER_AGENT, min_length=1, description="User-Agent header.")
    proxy_uri: Optional[str] = Field(None, description="Proxy every request through this URI.")
    retry_backoff: float = Field(
        0.0, ge=0, description="Base delay of exponential backoff between attempts (s)."
    )

    @field_validator("proxy_uri", mode="before")
    def _empty_proxy_is_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v


class ParserConfig(BaseModel):
    """Settings for one recursive sitemap traversal."""
    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    max_depth: int = Field(2, ge=1, le=10, description="Maximum number of index levels.")
    fetch: FetchConfig = Field(default_factory=lambda: FetchConfig(max_retries=3))
    batch_size: Optional[int] = Field(
        None, ge=1, description="Children fetched at once per index level (None: all)."
    )
    batch_pause_ms: int = Field(0, ge=0, description="Pause between two batches (ms).")
    extractor: Literal["lines", "xml"] = Field("lines", description="URL extraction strategy.")


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


def load_config(path: Union[str, Path, None]) -> ParserConfig:
    """
    Read YAML or JSON and return a validated ParserConfig.
    Without a path, ``configs/default.yaml`` is used when present, defaults otherwise.
    """
    if path is None:
        if not _DEFAULT_CFG.exists():
            return ParserConfig()
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

    return ParserConfig(**data)
