import logging
from dataclasses import dataclass
from typing import BinaryIO, Optional

import chardet

logger = logging.getLogger(__name__)

UTF8_LABEL: str = "UTF-8"
LEGACY_LABEL: str = "SHIFT_JIS"
# Уверенность, с которой корректный многобайтовый UTF-8 перебивает ответ chardet
VALID_UTF8_CONFIDENCE: float = 0.99
# Сколько байт из начала буфера получает chardet
DETECTION_SAMPLE_SIZE: int = 65536

_LABEL_ALIASES = {
    "ascii": UTF8_LABEL,
    "utf-8": UTF8_LABEL,
    "utf8": UTF8_LABEL,
    "utf-8-sig": UTF8_LABEL,
    "utf8-sig": UTF8_LABEL,
    "shift_jis": LEGACY_LABEL,
    "shift-jis": LEGACY_LABEL,
    "sjis": LEGACY_LABEL,
    "cp932": LEGACY_LABEL,
    "windows-31j": LEGACY_LABEL,
}


@dataclass(frozen=True)
class CharsetVerdict:
    """Результат определения кодировки буфера."""
    label: str                # нормализованная метка: "UTF-8", "SHIFT_JIS", ...
    confidence: float         # уверенность от 0 до 1
    detected: Optional[str] = None  # сырой ответ chardet

    @property
    def is_utf8(self) -> bool:
        return self.label == UTF8_LABEL


def normalize_label(encoding: Optional[str]) -> Optional[str]:
    """Приводит имя кодировки от chardet к одной из наших меток."""
    if not encoding:
        return None
    return _LABEL_ALIASES.get(encoding.lower(), encoding.upper())


def _is_valid_utf8(buffer: bytes) -> bool:
    try:
        buffer.decode("utf-8")
        return True
    except UnicodeDecodeError:
        return False


def detect(buffer: bytes) -> CharsetVerdict:
    """
    Определяет кодировку буфера.
    Строгая проверка UTF-8 решает метку: корректный UTF-8 (в том числе чистый ASCII)
    всегда получает "UTF-8", некорректный — никогда. Статистику по первым
    DETECTION_SAMPLE_SIZE байтам дает chardet. Ответ "не знаю" превращается в SHIFT_JIS.
    Ошибки самого классификатора пробрасываются вызывающему.
    """
    if not buffer:
        return CharsetVerdict(UTF8_LABEL, 1.0)

    valid_utf8 = _is_valid_utf8(buffer)
    result = chardet.detect(buffer[:DETECTION_SAMPLE_SIZE])
    detected = result.get("encoding")
    confidence = float(result.get("confidence") or 0.0)
    label = normalize_label(detected)

    if valid_utf8:
        if label != UTF8_LABEL:
            logger.debug(f"chardet предложил {detected} ({confidence:.2f}), но буфер — корректный UTF-8")
            confidence = max(confidence, VALID_UTF8_CONFIDENCE)
        return CharsetVerdict(UTF8_LABEL, confidence, detected)

    if label is None or label == UTF8_LABEL:
        # Буфер не декодируется как UTF-8: остается только Shift-JIS
        return CharsetVerdict(LEGACY_LABEL, 0.0, detected)
    return CharsetVerdict(label, confidence, detected)


def guess(source: BinaryIO) -> CharsetVerdict:
    """Читает поток целиком, возвращает позицию в начало и определяет кодировку."""
    try:
        data = source.read()
    finally:
        source.seek(0)
    return detect(data)


def is_utf8(source: BinaryIO) -> bool:
    """
    True, если содержимое потока похоже на UTF-8.
    Любая ошибка определения не фатальна: считаем, что это Shift-JIS.
    """
    try:
        verdict = guess(source)
    except Exception as e:
        logger.warning(f"⚠️ Не удалось определить кодировку ({e}), считаем файл Shift-JIS")
        return False
    logger.debug(f"Кодировка: {verdict.label} (chardet: {verdict.detected}, уверенность {verdict.confidence:.2f})")
    return verdict.is_utf8
