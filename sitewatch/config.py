# === FILE: sitewatch/config.py ===
"""
Loading and validation of the SiteWatch crawler configuration.
Pydantic describes the schema; YAML and JSON files are accepted.
"""
from __future__ import annotations

import errno
import json
import os
from datetime import timedelta
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


class EmailSettings(BaseModel):
    """SMTP settings for crawl and comparison notifications."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    send_output_emails: bool = Field(False, description="Send a summary email after each run.")
    from_email: str = Field("", description="Sender address.")
    to_email: str = Field("", description="Recipient address.")
    smtp_host: str = Field("localhost", min_length=1, description="SMTP server host.")
    port: int = Field(25, gt=0, lt=65536, description="SMTP server port.")
    username: Optional[str] = Field(None, description="SMTP login, if the server needs one.")
    password: Optional[str] = Field(None, description="SMTP password.")
    use_tls: bool = Field(False, description="Issue STARTTLS before logging in.")

    @field_validator("username", "password", mode="before")
    def _strip_blank(cls, v: Any) -> Any:
        return _blank_to_none(v)

    @model_validator(mode="after")
    def _check_addresses(self) -> EmailSettings:
        if self.send_output_emails and not (self.from_email and self.to_email):
            raise ValueError("from_email and to_email are required when send_output_emails is set")
        return self


class CrawlerConfig(BaseModel):
    """Configuration of a single crawl run."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    root_url: str = Field(..., description="Root URL the crawl starts from.")
    file_path: Path = Field(Path("output"), description="Base directory for run folders.")
    url_limit: Optional[int] = Field(None, ge=0, description="Stop once more URLs than this are visited.")
    time_limit: Optional[timedelta] = Field(None, description="Stop once a round runs longer than this.")
    header_name: Optional[str] = Field(None, description="Name of a custom request header.")
    header_value: Optional[str] = Field(None, description="Value of the custom request header.")
    iteration_break: bool = Field(False, description="Ask for confirmation between rounds.")
    run_scheduled: bool = Field(False, description="Use originalFolder/latestFolder run directories.")
    request_timeout: float = Field(30.0, gt=0, description="Timeout of a single request (seconds).")
    user_agent: str = Field("SiteWatchBot/1.0", min_length=1, description="User-Agent header.")
    email: EmailSettings = Field(default_factory=EmailSettings)

    @field_validator("root_url", mode="before")
    def _check_root_url(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = v.strip()
            if not v.startswith(("http://", "https://")):
                raise ValueError("root_url must start with http:// or https://")
            return v.rstrip("/")
        return v

    @field_validator("url_limit", "header_name", "header_value", mode="before")
    def _strip_blank(cls, v: Any) -> Any:
        return _blank_to_none(v)

    @field_validator("time_limit", mode="before")
    def _parse_time_limit(cls, v: Any) -> Any:
        v = _blank_to_none(v)
        if isinstance(v, str) and v.strip().isdigit():
            return int(v.strip())
        return v

    @property
    def custom_header(self) -> Dict[str, str]:
        """The configured static header, or an empty mapping."""
        if self.header_name and self.header_value:
            return {self.header_name: self.header_value}
        return {}


DEFAULT_CONFIG_PATH = Path("configs/default.yaml")


def _parse_yaml(text: str) -> Any:
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML: {exc}") from exc


def _parse_json(text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON: {exc}") from exc


_PARSERS = {".yaml": _parse_yaml, ".yml": _parse_yaml, ".json": _parse_json}


def read_settings(path: Path) -> Dict[str, Any]:
    """Parse *path* by its suffix; the top level must be a mapping."""
    parser = _PARSERS.get(path.suffix.lower())
    if parser is None:
        raise ValueError(f"Unsupported config format: {path.suffix or path.name}")
    data = parser(path.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise TypeError(f"{path.name}: top level must be a mapping, got {type(data).__name__}")
    return data


def load_config(path: Union[str, Path, None]) -> CrawlerConfig:
    """
    Load and validate the crawler settings.

    Without *path* the file ``configs/default.yaml`` in the working directory is
    used. Raises FileNotFoundError, ValueError/TypeError for unreadable files and
    pydantic's ValidationError for bad values.
    """
    path_obj = DEFAULT_CONFIG_PATH if path is None else Path(path).expanduser().resolve()
    if not path_obj.is_file():
        raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))
    return CrawlerConfig(**read_settings(path_obj))
