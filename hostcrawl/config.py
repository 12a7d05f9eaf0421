"""
Модуль для загрузки и валидации конфигурации краулера HostCrawl.
Используется Pydantic для описания схемы и проверки данных.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Union
from urllib.parse import urlsplit, urlunsplit

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from hostcrawl.crawler.link_extractor import normalize_url
from hostcrawl.errors import InvalidRootError, MalformedURLError

DEFAULT_USER_AGENT = "HostCrawlBot"


def validate_root(root: str) -> str:
    """Return the canonical form of *root* or raise :class:`InvalidRootError`."""
    if not root or not root.strip():
        raise InvalidRootError(root)
    root = root.strip()
    try:
        canonical = normalize_url(root, root)
    except MalformedURLError as exc:
        raise InvalidRootError(root, str(exc)) from exc
    parts = urlsplit(canonical)
    if parts.scheme not in ("http", "https") or not parts.hostname:
        raise InvalidRootError(root, "root must be an absolute http(s) url")
    if not parts.path:
        parts = parts._replace(path="/")
    return urlunsplit(parts._replace(fragment=""))


class CrawlerConfig(BaseModel):
    """Конфигурация для одного запуска обхода."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    root_url: str = Field(..., description="Корневой URL для обхода.")
    user_agent: str = Field(
        DEFAULT_USER_AGENT, min_length=1, description="User-Agent и имя группы в robots.txt."
    )
    enforce_robots: bool = Field(
        False, description="Не загружать страницы, запрещённые robots.txt."
    )
    robots_at_host_root: bool = Field(
        False, description="Искать robots.txt в корне хоста, а не под root_url."
    )
    log_level: str = Field("INFO", description="Уровень логирования.")

    @field_validator("root_url", mode="before")
    @classmethod
    def _check_root(cls, v: Any) -> Any:
        if v is None:
            raise InvalidRootError("")
        return validate_root(str(v))

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, v: str) -> str:
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"unknown log level {v!r}")
        return level


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Неправильный YAML в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень YAML должен быть mapping, получено {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Неправильный JSON в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень JSON должен быть mapping, получено {type(data).__name__}")
    return data


def read_config_file(path: Union[str, Path]) -> dict[str, Any]:
    """Читает YAML или JSON и возвращает сырой mapping без валидации."""
    path_obj = Path(path).expanduser().resolve()
    if not path_obj.is_file():
        raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        return _read_yaml(path_obj)
    if suffix == ".json":
        return _read_json(path_obj)
    raise ValueError(f"Неподдерживаемый формат конфига: {suffix}")


def load_config(path: Union[str, Path, None] = None, **overrides: Any) -> CrawlerConfig:
    """
    Собирает CrawlerConfig из файла (если указан) и явных переопределений.
    Переопределения со значением None игнорируются.
    """
    data: dict[str, Any] = read_config_file(path) if path is not None else {}
    data.update({k: v for k, v in overrides.items() if v is not None})
    return CrawlerConfig(**data)
