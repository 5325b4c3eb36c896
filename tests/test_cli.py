import os

import pytest

from arcpack import UnsupportedFormat, compress, decompress
from arcpack.cli import main
from arcpack.handlers import get_handler, supported_formats

from .helpers import snapshot, write_file


def test_supported_formats():
    assert sorted(supported_formats()) == ["7z", "zip"]


def test_get_handler_by_extension_and_format():
    assert get_handler("x.zip").format_name == "zip"
    assert get_handler("x.7z").format_name == "7z"
    assert get_handler("x.bin", fmt="zip").format_name == "zip"
    assert get_handler("x.zip", fmt="7z").format_name == "7z"


def test_unknown_extension_is_rejected(tmp_path):
    source = write_file(str(tmp_path / "a.txt"), b"a")

    with pytest.raises(UnsupportedFormat):
        compress(source, str(tmp_path / "out.rar"))
    with pytest.raises(UnsupportedFormat):
        get_handler("x.zip", fmt="tar")
    assert not (tmp_path / "out.rar").exists()


def test_explicit_format_overrides_extension(tmp_path):
    source = str(tmp_path / "src")
    write_file(os.path.join(source, "a.txt"), b"a")
    archive = str(tmp_path / "backup.dat")

    compress(source, archive, fmt="7z")
    decompress(archive, str(tmp_path / "out"), fmt="7z")

    assert snapshot(str(tmp_path / "out" / "src")) == snapshot(source)


def test_cli_compress_decompress_and_list(tmp_path, sample_tree, capsys):
    archive = str(tmp_path / "cli.zip")
    out = str(tmp_path / "out")

    assert main(["compress", sample_tree, archive]) == 0
    assert main(["--chunk-size", "16", "decompress", archive, out]) == 0
    printed = capsys.readouterr().out.splitlines()
    assert os.path.join(os.path.abspath(out), "tree", "a.txt") in printed

    assert main(["list", archive]) == 0
    listing = capsys.readouterr().out
    assert "tree/a.txt" in listing
    assert "<DIR>" in listing

    assert snapshot(os.path.join(out, "tree")) == snapshot(sample_tree)


def test_cli_compress_multiple_sources(tmp_path):
    first = write_file(str(tmp_path / "one.txt"), b"1")
    second = write_file(str(tmp_path / "two.txt"), b"2")
    archive = str(tmp_path / "many.7z")

    assert main(["compress", first, second, archive]) == 0
    assert main(["--format", "7z", "decompress", archive, str(tmp_path / "out")]) == 0

    assert snapshot(str(tmp_path / "out")) == {"one.txt": b"1", "two.txt": b"2"}


def test_cli_reports_archive_errors_with_exit_code(tmp_path, caplog):
    code = main(["compress", str(tmp_path / "missing"), str(tmp_path / "out.zip")])

    assert code == 1
    assert "missing" in caplog.text
    assert not (tmp_path / "out.zip").exists()


def test_cli_rejects_bad_chunk_size(tmp_path):
    with pytest.raises(SystemExit) as excinfo:
        main(["--chunk-size", "0", "list", str(tmp_path / "x.zip")])
    assert excinfo.value.code == 2


def test_cli_writes_log_file(tmp_path, sample_tree):
    log_file = tmp_path / "logs" / "arcpack.log"

    assert main(["--debug", "--log-file", str(log_file), "compress", sample_tree,
                 str(tmp_path / "logged.zip")]) == 0

    assert log_file.exists()
    assert "tree/a.txt" in log_file.read_text(encoding="utf-8")
