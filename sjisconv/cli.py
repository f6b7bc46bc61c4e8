import argparse
import logging
from typing import List, Optional

from sjisconv import __version__
from sjisconv.config import (
    CHUNK_SIZE,
    DEFAULT_OUTPUT_PATH,
    LOG_LEVEL,
    ConfigurationError,
    resolve_settings,
)
from sjisconv.walker import TreeWalker

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="sjisconv",
        description="Конвертация текстовых файлов между UTF-8 и Shift-JIS с автоопределением кодировки.",
    )
    parser.add_argument("-i", "--input", type=str, required=True, help="Входной файл или директория (рекурсивно).")
    parser.add_argument(
        "-o",
        "--output",
        type=str,
        default=DEFAULT_OUTPUT_PATH,
        help=f"Выходной файл или директория (по умолчанию: {DEFAULT_OUTPUT_PATH}). Несуществующий путь создается как директория.",
    )
    parser.add_argument("--chunk-size", type=int, default=CHUNK_SIZE, help=f"Размер блока чтения в байтах (по умолчанию: {CHUNK_SIZE}).")
    parser.add_argument("--log-level", type=str, default=LOG_LEVEL, help=f"Уровень логирования (по умолчанию: {LOG_LEVEL}).")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Точка входа. Возвращает код завершения: 0 — успех, 1 — ошибка ввода-вывода, 2 — неверные параметры."""
    args = parse_args(argv)

    # Настройка логирования
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format='%(asctime)s - %(levelname)s - %(message)s',
    )

    try:
        settings = resolve_settings(args.input, args.output, args.chunk_size)
    except ConfigurationError as e:
        logger.error(f"❌ {e}")
        return 2

    logger.info(f"🛠️ Запуск конвертации: {settings.input_path} -> {settings.output_path}")
    walker = TreeWalker(settings)
    try:
        count = walker.walk()
    except OSError as e:
        logger.error(f"❌ Ошибка ввода-вывода, конвертация прервана: {e}")
        return 1

    logger.info(f"Обработано файлов: {count}")
    logger.info("✅ done")
    return 0
