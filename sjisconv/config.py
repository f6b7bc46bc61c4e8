import os
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union
from dotenv import load_dotenv

# Загрузка переменных окружения (например, из .env)
load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE: int = 65536


def _positive_int_from_env(name: str, default: int) -> int:
    """Читает положительное целое из окружения, при ошибке возвращает default."""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning(f"Некорректное значение {name}={raw!r}, используется {default}")
        return default
    if value <= 0:
        logger.warning(f"{name} должен быть положительным, используется {default}")
        return default
    return value


# Конфигурация
DEFAULT_OUTPUT_PATH: str = os.getenv("SJISCONV_OUTPUT", "convert")
CHUNK_SIZE: int = _positive_int_from_env("SJISCONV_CHUNK_SIZE", DEFAULT_CHUNK_SIZE)
LOG_LEVEL: str = os.getenv("SJISCONV_LOG_LEVEL", "INFO")

PathLike = Union[str, os.PathLike]


class ConfigurationError(ValueError):
    """Неверные входные параметры: конвертация не запускается."""


@dataclass(frozen=True)
class ConvertSettings:
    """Явная конфигурация обхода: откуда читать и куда писать."""
    input_path: Path
    output_path: Path
    output_is_dir: bool
    chunk_size: int = CHUNK_SIZE


def resolve_settings(
    input_path: Optional[PathLike],
    output_path: Optional[PathLike] = None,
    chunk_size: Optional[int] = None,
) -> ConvertSettings:
    """
    Проверяет пары вход/выход и готовит ConvertSettings.
    Если выходного пути нет, он создается как директория.
    """
    if input_path is None or not str(input_path):
        raise ConfigurationError("Укажите входной путь (-i)")
    source = Path(input_path)
    if not source.exists():
        raise ConfigurationError(f"Входной путь не найден: {source}")

    size = CHUNK_SIZE if chunk_size is None else chunk_size
    if size <= 0:
        raise ConfigurationError(f"Размер блока чтения должен быть положительным: {size}")

    target = Path(output_path if output_path else DEFAULT_OUTPUT_PATH)
    # Для директории на входе выход тоже должен быть директорией
    if source.is_dir() and target.suffix:
        raise ConfigurationError(
            f"Вход {source} — директория, а выход {target} похож на файл (расширение {target.suffix})"
        )

    if not target.exists():
        try:
            target.mkdir(parents=True)
            logger.info(f"Создана выходная директория: {target}")
        except OSError as e:
            raise ConfigurationError(f"Не удалось создать выходную директорию {target}: {e}") from e

    return ConvertSettings(
        input_path=source,
        output_path=target,
        output_is_dir=target.is_dir(),
        chunk_size=size,
    )
