"""Конвертация текстовых файлов между UTF-8 и Shift-JIS с автоопределением кодировки."""

__version__ = "0.1.0"
