import logging
from functools import partial
from pathlib import Path
from typing import Any, Callable, Optional

from sjisconv.config import ConvertSettings
from sjisconv.transcoder import ConversionJob, convert_file

logger = logging.getLogger(__name__)

Work = Callable[[ConversionJob], Any]


class TreeWalker:
    """
    Рекурсивно обходит входной путь и запускает конвертацию для каждого файла.
    Все файлы пишутся в один выходной каталог по имени файла, поэтому
    одинаковые имена из разных подкаталогов перезаписывают друг друга.
    Единственное исключение из обхода всех записей: выходная директория,
    если она лежит внутри входного дерева, пропускается целиком, и ее файлы
    не становятся источниками конвертации.
    """

    def __init__(self, settings: ConvertSettings, work: Optional[Work] = None):
        self.settings = settings
        self.work: Work = work or partial(convert_file, chunk_size=settings.chunk_size)
        self.dispatched = 0

    def walk(self) -> int:
        """Обходит дерево, возвращает число обработанных файлов. Ошибки пробрасываются."""
        root = self.settings.input_path
        if root.is_dir():
            self._walk_directory(root)
        else:
            self._dispatch(root)
        return self.dispatched

    def _walk_directory(self, directory: Path) -> None:
        # Порядок файловой системы, без сортировки
        for entry in list(directory.iterdir()):
            if entry.is_dir():
                if self._is_output_dir(entry):
                    logger.debug(f"Пропуск выходной директории: {entry}")
                    continue
                self._walk_directory(entry)
            else:
                self._dispatch(entry)

    def _is_output_dir(self, directory: Path) -> bool:
        if not self.settings.output_is_dir:
            return False
        try:
            return directory.samefile(self.settings.output_path)
        except FileNotFoundError:
            return False

    def _dispatch(self, file_path: Path) -> None:
        job = ConversionJob(
            input_path=file_path,
            output_path=self.settings.output_path,
            output_is_dir=self.settings.output_is_dir,
        )
        self.work(job)
        self.dispatched += 1
