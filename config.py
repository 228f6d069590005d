"""Конфигурация приложения Today"""
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


class Config:
    """Конфигурация приложения"""

    APP_ID = "today"
    DATA_FILE_NAME = "today.json"

    # Отображение идентификаторов
    ID_MIN_LENGTH = int(os.getenv("TODAY_ID_MIN_LENGTH", "5"))

    # Режим наблюдения
    WATCH_INTERVAL = float(os.getenv("TODAY_WATCH_INTERVAL", "0.3"))
    QUIT_KEY = os.getenv("TODAY_QUIT_KEY", "q")

    # Логирование
    LOG_LEVEL = os.getenv("TODAY_LOG_LEVEL", "WARNING").upper()
    LOG_DIR = os.getenv("TODAY_LOG_DIR", "")

    @classmethod
    def get_log_dir(cls) -> Optional[Path]:
        """Каталог для файловых логов (None - логирование только в консоль)"""
        return Path(cls.LOG_DIR) if cls.LOG_DIR else None


@dataclass(frozen=True)
class AppPaths:
    """Пути приложения. Незаданное поле (None) не перекрывает другие источники"""
    config_dir: Optional[Path] = None
    data_dir: Optional[Path] = None

    @property
    def data_file(self) -> Path:
        if self.data_dir is None:
            raise ValueError("data_dir is not resolved")
        return self.data_dir / Config.DATA_FILE_NAME

    def __str__(self) -> str:
        return f"config-dir: {self.config_dir}\ndata-dir: {self.data_dir}"


def merge_paths(*sources: AppPaths) -> AppPaths:
    """
    Объединение частичных конфигураций.

    Источники перечисляются от низшего приоритета к высшему:
    каждое заданное поле более позднего источника заменяет предыдущее.
    """
    merged = AppPaths()
    for source in sources:
        overrides = {
            f.name: getattr(source, f.name)
            for f in fields(AppPaths)
            if getattr(source, f.name) is not None
        }
        merged = replace(merged, **overrides)
    return merged


def read_xdg() -> AppPaths:
    """Пути по умолчанию согласно XDG Base Directory"""
    home = Path.home()
    config_home = os.getenv("XDG_CONFIG_HOME") or str(home / ".config")
    data_home = os.getenv("XDG_DATA_HOME") or str(home / ".local" / "share")
    return AppPaths(
        config_dir=Path(config_home) / Config.APP_ID,
        data_dir=Path(data_home) / Config.APP_ID,
    )


def read_env() -> AppPaths:
    """Пути из переменных окружения TODAY_CONFIG_PATH / TODAY_DATA_PATH"""
    config_dir = os.getenv("TODAY_CONFIG_PATH")
    data_dir = os.getenv("TODAY_DATA_PATH")
    return AppPaths(
        config_dir=Path(config_dir) if config_dir else None,
        data_dir=Path(data_dir) if data_dir else None,
    )


def resolve_paths(
    data_dir: Optional[str] = None,
    config_dir: Optional[str] = None
) -> AppPaths:
    """Итоговые пути: XDG < окружение < аргументы командной строки"""
    from_args = AppPaths(
        config_dir=Path(config_dir) if config_dir else None,
        data_dir=Path(data_dir) if data_dir else None,
    )
    return merge_paths(read_xdg(), read_env(), from_args)
