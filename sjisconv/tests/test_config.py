import pytest

from sjisconv import config
from sjisconv.config import ConfigurationError, resolve_settings


def test_resolve_settings_requires_input():
    with pytest.raises(ConfigurationError, match="-i"):
        resolve_settings(None)
    with pytest.raises(ConfigurationError):
        resolve_settings("")


def test_resolve_settings_missing_input(tmp_path):
    with pytest.raises(ConfigurationError, match="не найден"):
        resolve_settings(tmp_path / "missing", tmp_path / "out")


def test_resolve_settings_dir_input_with_file_output(tmp_path):
    """Директория на входе и путь с расширением на выходе — ошибка до любой работы."""
    (tmp_path / "in").mkdir()
    with pytest.raises(ConfigurationError, match="расширение"):
        resolve_settings(tmp_path / "in", tmp_path / "out.txt")
    assert not (tmp_path / "out.txt").exists()


def test_resolve_settings_creates_output_dir(tmp_path):
    (tmp_path / "in").mkdir()
    settings = resolve_settings(tmp_path / "in", tmp_path / "nested" / "out")
    assert (tmp_path / "nested" / "out").is_dir()
    assert settings.output_is_dir
    assert settings.chunk_size == config.CHUNK_SIZE


def test_resolve_settings_file_to_existing_file(tmp_path):
    src = tmp_path / "a.txt"
    src.write_bytes(b"a")
    dst = tmp_path / "b.txt"
    dst.write_bytes(b"b")
    settings = resolve_settings(src, dst, chunk_size=16)
    assert not settings.output_is_dir
    assert settings.chunk_size == 16


def test_resolve_settings_default_output(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "in").mkdir()
    settings = resolve_settings("in")
    assert str(settings.output_path) == config.DEFAULT_OUTPUT_PATH
    assert settings.output_is_dir


def test_resolve_settings_rejects_bad_chunk_size(tmp_path):
    (tmp_path / "in").mkdir()
    with pytest.raises(ConfigurationError):
        resolve_settings(tmp_path / "in", tmp_path / "out", chunk_size=0)
    assert not (tmp_path / "out").exists()


@pytest.mark.parametrize("raw, expected", [
    (None, 100),
    ("", 100),
    ("4096", 4096),
    ("abc", 100),
    ("-5", 100),
])
def test_positive_int_from_env(monkeypatch, raw, expected):
    if raw is None:
        monkeypatch.delenv("SJISCONV_TEST_INT", raising=False)
    else:
        monkeypatch.setenv("SJISCONV_TEST_INT", raw)
    assert config._positive_int_from_env("SJISCONV_TEST_INT", 100) == expected
