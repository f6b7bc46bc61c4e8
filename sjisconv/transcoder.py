import codecs
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Iterator

from sjisconv.config import CHUNK_SIZE
from sjisconv.detector import is_utf8

logger = logging.getLogger(__name__)

UTF8_CODEC: str = "utf-8"
LEGACY_CODEC: str = "cp932"
PLACEHOLDER: bytes = b"?"


class RuneWriter:
    """
    Пишет декодированные символы в байтовый поток в целевой кодировке по одному.
    Символ, который не удалось закодировать или записать, заменяется на placeholder.
    Ошибка записи самого placeholder прерывает поток.
    """

    def __init__(self, sink: BinaryIO, encoding: str, placeholder: bytes = PLACEHOLDER):
        self.sink = sink
        self.encoding = codecs.lookup(encoding).name
        self.placeholder = placeholder
        self.runes = 0
        self.substituted = 0

    def write_rune(self, rune: str) -> int:
        """Записывает один символ, возвращает число записанных байт."""
        self.runes += 1
        try:
            data = rune.encode(self.encoding)
            self.sink.write(data)
            return len(data)
        except (UnicodeEncodeError, OSError) as e:
            logger.debug(f"Символ U+{ord(rune):04X} заменен на {self.placeholder!r}: {e}")
        self.substituted += 1
        self.sink.write(self.placeholder)
        return len(self.placeholder)

    def write(self, text: str) -> int:
        return sum(self.write_rune(rune) for rune in text)


@dataclass
class TranscodeStats:
    """Итог перекодирования одного потока."""
    source_encoding: str
    target_encoding: str
    runes: int = 0
    substituted: int = 0
    truncated: bool = False


@dataclass(frozen=True)
class ConversionJob:
    """Пара вход/выход для одного файла."""
    input_path: Path
    output_path: Path
    output_is_dir: bool

    @property
    def destination(self) -> Path:
        # Только имя файла: подкаталоги входа не повторяются, одинаковые имена перезаписываются
        if self.output_is_dir:
            return self.output_path / self.input_path.name
        return self.output_path


class RuneReader:
    """
    Читает байтовый поток блоками и отдает его по одному символу.
    На некорректной последовательности отдает корректный префикс, молча
    останавливается и выставляет truncated. Ошибки чтения пробрасываются.
    """

    def __init__(self, source: BinaryIO, encoding: str, chunk_size: int = CHUNK_SIZE, errors: str = "strict"):
        self.source = source
        self.encoding = codecs.lookup(encoding).name
        self.chunk_size = chunk_size
        self.errors = errors
        self.truncated = False

    def __iter__(self) -> Iterator[str]:
        decoder = codecs.getincrementaldecoder(self.encoding)(self.errors)
        while True:
            chunk = self.source.read(self.chunk_size)
            final = not chunk
            try:
                text = decoder.decode(chunk, final=final)
            except UnicodeDecodeError as e:
                # e.object включает байты, накопленные декодером с прошлого блока
                yield from e.object[:e.start].decode(self.encoding, self.errors)
                logger.debug(f"Некорректная последовательность {self.encoding} ({e.reason}), остаток потока отброшен")
                self.truncated = True
                return
            yield from text
            if final:
                return


def iter_runes(
    source: BinaryIO,
    encoding: str,
    chunk_size: int = CHUNK_SIZE,
    errors: str = "strict",
) -> Iterator[str]:
    """Символы потока по одному, см. RuneReader."""
    return iter(RuneReader(source, encoding, chunk_size, errors))


def transcode(
    source: BinaryIO,
    sink: BinaryIO,
    source_is_utf8: bool,
    chunk_size: int = CHUNK_SIZE,
) -> TranscodeStats:
    """
    Перекодирует поток: UTF-8 -> Shift-JIS (Windows-31J), если source_is_utf8, иначе обратно.
    Shift-JIS на входе не проверяется: неизвестные байты становятся U+FFFD.
    """
    if source_is_utf8:
        reader = RuneReader(source, UTF8_CODEC, chunk_size)
        writer = RuneWriter(sink, LEGACY_CODEC)
    else:
        reader = RuneReader(source, LEGACY_CODEC, chunk_size, errors="replace")
        writer = RuneWriter(sink, UTF8_CODEC)

    # Поток нужно дочитать до конца, иначе запись не завершится
    for rune in reader:
        writer.write_rune(rune)

    return TranscodeStats(
        source_encoding=reader.encoding,
        target_encoding=writer.encoding,
        runes=writer.runes,
        substituted=writer.substituted,
        truncated=reader.truncated,
    )


def convert_file(job: ConversionJob, chunk_size: int = CHUNK_SIZE) -> TranscodeStats:
    """
    Конвертирует один файл: определяет кодировку по полному содержимому,
    создает (перезаписывает) файл назначения и перекодирует поток.
    Ошибки ввода-вывода пробрасываются.
    """
    with job.input_path.open("rb") as src:
        source_is_utf8 = is_utf8(src)
        if job.output_is_dir:
            job.output_path.mkdir(parents=True, exist_ok=True)
        destination = job.destination
        with destination.open("wb") as dst:
            stats = transcode(src, dst, source_is_utf8, chunk_size)

    logger.info(f"{job.input_path} -> {destination} ({stats.source_encoding} -> {stats.target_encoding})")
    if stats.substituted:
        logger.debug(f"{job.input_path.name}: заменено символов на '?': {stats.substituted}")
    return stats
