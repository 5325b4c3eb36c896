import os

import pytest

from arcpack import (
    PackConfig, SourceNotFound, UnsupportedEntry, compress, compress_files, decompress, list_entries
)
from arcpack.handler.zip_handler import ZipHandler
from arcpack.writer import ArchiveWriter

from .helpers import archive_name, snapshot, write_file

requires_symlink = pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlink not available")


def test_missing_source_raises_and_creates_nothing(tmp_path, fmt):
    archive = archive_name(tmp_path, fmt, stem="out")

    with pytest.raises(SourceNotFound) as excinfo:
        compress(str(tmp_path / "nonexistent"), archive)

    assert excinfo.value.path == str(tmp_path / "nonexistent")
    assert isinstance(excinfo.value, FileNotFoundError)
    assert not os.path.exists(archive)


def test_missing_source_in_list_creates_nothing(tmp_path):
    present = write_file(str(tmp_path / "present.txt"), b"x")
    archive = str(tmp_path / "out.zip")

    with pytest.raises(SourceNotFound):
        compress_files([present, str(tmp_path / "absent.txt")], archive)

    assert not os.path.exists(archive)


def test_compress_files_places_sources_at_root(tmp_path, fmt):
    file_a = write_file(str(tmp_path / "src" / "a.txt"), b"a")
    folder = str(tmp_path / "src" / "folder")
    write_file(os.path.join(folder, "inner", "b.txt"), b"b")
    os.makedirs(os.path.join(folder, "void"))
    archive = archive_name(tmp_path, fmt)
    out = str(tmp_path / "out")

    compress_files([file_a, folder], archive)

    names = sorted(e.name for e in list_entries(archive))
    assert names == ["a.txt", "folder/inner/b.txt", "folder/void/"]

    decompress(archive, out)
    assert snapshot(out) == {
        "a.txt": b"a",
        "folder/": None,
        "folder/inner/": None,
        "folder/inner/b.txt": b"b",
        "folder/void/": None,
    }


def test_compress_files_requires_sources(tmp_path):
    with pytest.raises(ValueError):
        compress_files([], str(tmp_path / "out.zip"))


def test_archive_inside_source_is_skipped(tmp_path, fmt):
    source = str(tmp_path / "src")
    write_file(os.path.join(source, "keep.txt"), b"keep")
    archive = os.path.join(source, f"self.{fmt}")

    compress(source, archive)

    names = [e.name for e in list_entries(archive)]
    assert names == ["src/keep.txt"]


def test_existing_archive_is_overwritten(tmp_path, fmt):
    source = str(tmp_path / "src")
    write_file(os.path.join(source, "first.txt"), b"1")
    archive = archive_name(tmp_path, fmt)
    compress(source, archive)

    os.remove(os.path.join(source, "first.txt"))
    write_file(os.path.join(source, "second.txt"), b"2")
    compress(source, archive)

    assert [e.name for e in list_entries(archive)] == ["src/second.txt"]


@requires_symlink
def test_symlink_is_rejected_by_default(tmp_path, fmt):
    source = str(tmp_path / "src")
    target = write_file(os.path.join(source, "real.txt"), b"real")
    os.symlink(target, os.path.join(source, "link.txt"))

    with pytest.raises(UnsupportedEntry) as excinfo:
        compress(source, archive_name(tmp_path, fmt))

    assert excinfo.value.path.endswith("link.txt")


@requires_symlink
def test_symlink_is_followed_when_configured(tmp_path, fmt):
    source = str(tmp_path / "src")
    target = write_file(str(tmp_path / "elsewhere" / "real.txt"), b"real")
    write_file(os.path.join(source, "plain.txt"), b"plain")
    os.symlink(target, os.path.join(source, "link.txt"))
    archive = archive_name(tmp_path, fmt)
    out = str(tmp_path / "out")
    config = PackConfig(follow_symlinks=True)

    compress(source, archive, config=config)
    decompress(archive, out, config=config)

    with open(os.path.join(out, "src", "link.txt"), 'rb') as f:
        assert f.read() == b"real"
    assert not os.path.islink(os.path.join(out, "src", "link.txt"))


@requires_symlink
def test_symlink_loop_is_rejected_when_following(tmp_path):
    source = tmp_path / "src"
    (source / "sub").mkdir(parents=True)
    (source / "sub" / "file.txt").write_bytes(b"x")
    os.symlink(str(source), str(source / "sub" / "loop"))

    with pytest.raises(UnsupportedEntry):
        compress(str(source), str(tmp_path / "loop.zip"), config=PackConfig(follow_symlinks=True))


def test_writer_logs_each_entry(tmp_path, caplog):
    from logutils import setup_logging, INFO

    setup_logging(INFO)
    source = str(tmp_path / "src")
    write_file(os.path.join(source, "logged.txt"), b"x")

    with caplog.at_level(INFO):
        ArchiveWriter(ZipHandler()).compress(source, str(tmp_path / "log.zip"))

    assert "src/logged.txt" in caplog.text


def test_writer_returns_archive_path(tmp_path):
    source = write_file(str(tmp_path / "one.txt"), b"1")
    archive = str(tmp_path / "one.zip")

    assert ArchiveWriter(ZipHandler()).compress(source, archive) == archive
