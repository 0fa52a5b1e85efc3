# === FILE: site_mapper/config.py ===
"""
Загрузка и валидация конфигурации SiteMapper.
Схема описана через Pydantic; файл может быть в формате YAML или JSON,
а значения из командной строки перекрывают значения из файла.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator


class MapperConfig(BaseModel):
    """Конфигурация одного обхода сайта."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    start_url: str = Field(..., min_length=1, description="Стартовый URL (схема по умолчанию http).")
    workers: int = Field(4, ge=1, description="Число одновременно работающих воркеров.")
    timeout: float = Field(5.0, gt=0, description="Таймаут на один запрос (секунд).")
    user_agent: str = Field("SiteMapperBot/1.0", min_length=1, description="Заголовок User-Agent.")
    listen_address: Optional[str] = Field(
        None, description="Адрес host:port для отдачи графа в JSON во время обхода."
    )

    @field_validator("start_url", mode="before")
    def _strip_whitespace(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("listen_address")
    def _check_listen_address(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        host, sep, port = v.rpartition(":")
        if not sep or not port.isdigit() or not 0 < int(port) < 65536:
            raise ValueError(f"listen_address должен иметь вид host:port, получено {v!r}")
        return v

    def listen_host_port(self) -> tuple[str, int]:
        """Разбирает listen_address на (host, port); пустой host означает 0.0.0.0."""
        if self.listen_address is None:
            raise ValueError("listen_address не задан")
        host, _, port = self.listen_address.rpartition(":")
        return host or "0.0.0.0", int(port)


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
    """Читает YAML или JSON файл конфигурации и возвращает сырой mapping."""
    path_obj = Path(path).expanduser().resolve()
    if not path_obj.is_file():
        raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        return _read_yaml(path_obj)
    if suffix == ".json":
        return _read_json(path_obj)
    raise ValueError(f"Неподдерживаемый формат конфига: {suffix}")


def load_config(path: Union[str, Path, None] = None, **overrides: Any) -> MapperConfig:
    """
    Возвращает проверенный объект MapperConfig.

    Значения из файла *path* (если задан) дополняются *overrides*;
    ключи со значением None игнорируются, чтобы не затирать файл
    незаданными опциями CLI.
    """
    data: dict[str, Any] = read_config_file(path) if path is not None else {}
    data.update({k: v for k, v in overrides.items() if v is not None})
    return MapperConfig(**data)


__all__ = ["MapperConfig", "load_config", "read_config_file"]
