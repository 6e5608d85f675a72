"""
Loading and validation of the LinkScout crawl configuration.
The schema is described with Pydantic; files may be YAML or JSON.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, List, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from link_scout import __version__

DEFAULT_USER_AGENT = f"link_scout/{__version__}"
SEARCH_USER_AGENT = "Mozilla/5.0 (compatible; Googlebot/2.1; +http://www.google.com/bot.html)"


class CrawlConfig(BaseModel):
    """Configuration for one crawl run."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    urls: List[str] = Field(default_factory=list, description="Seed addresses.")
    input_file: Optional[Path] = Field(None, description="File with one seed address per line.")
    filter_patterns: List[str] = Field(
        default_factory=list, description="Substrings (OR-combined) that allow expanding a page's children."
    )
    search_site: Optional[str] = Field(None, description="Site fed into the frontier through a site: search.")
    search_limit: int = Field(10, ge=0, description="Maximum number of search results to retrieve.")
    search_delay: float = Field(0.5, ge=0, description="Pause between search result pages (seconds).")
    output_path: Optional[Path] = Field(None, description="Write addresses here instead of stdout.")
    wget: bool = Field(False, description="Download addresses that pass the filter with wget -r.")
    max_concurrency: Optional[int] = Field(None, ge=1, description="Cap on in-flight fetches; None is unbounded.")
    fetch_timeout: Optional[float] = Field(None, gt=0, description="Total timeout per fetch (seconds).")
    user_agent: str = Field(DEFAULT_USER_AGENT, min_length=1, description="User-Agent for page fetches.")
    search_user_agent: str = Field(SEARCH_USER_AGENT, min_length=1, description="User-Agent for search requests.")

    @field_validator("urls", mode="before")
    def _strip_seeds(cls, v: Any) -> Any:
        if isinstance(v, (list, tuple)):
            return [s.strip() for s in v if isinstance(s, str) and s.strip()]
        return v

    @field_validator("search_site", mode="before")
    def _blank_site_is_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v


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


def load_config(path: Union[str, Path, None]) -> CrawlConfig:
    """
    Read a YAML or JSON file and return a validated CrawlConfig.
    With *path* set to None the defaults are returned.
    """
    if path is None:
        return CrawlConfig()

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

    return CrawlConfig(**data)


__all__ = ["CrawlConfig", "load_config", "DEFAULT_USER_AGENT", "SEARCH_USER_AGENT"]
