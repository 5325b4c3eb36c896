"""
7zアーカイブハンドラ

py7zr を使って 7z 書庫の作成と展開を行うハンドラ。
エントリのメタデータ（サイズ・タイムスタンプ）は書き込み時に元ファイルから取得する。
"""

import lzma
import os
import struct
import threading
from typing import BinaryIO, Dict, List, Optional, Set

import py7zr
from py7zr.exceptions import ArchiveError as Py7zrArchiveError
from py7zr.io import Py7zIO, WriterFactory

from ..arc import ArchiveEntry, EntryType
from ..config import PackConfig
from ..errors import ArchiveError, ArchiveIOError, CorruptArchive, UnsupportedEntry
from ..path_utils import normalize_path
from .handler import ArchiveHandler, ArchiveReadHandle, ArchiveWriteHandle, ExtractSink

# py7zr が書庫の破損時に送出する例外
_SEVENZ_CORRUPTION_ERRORS = (Py7zrArchiveError, EOFError, lzma.LZMAError, struct.error)

# ヘッダの解析中に py7zr が送出する例外（壊れたヘッダは汎用の例外になることがある）
_SEVENZ_HEADER_ERRORS = _SEVENZ_CORRUPTION_ERRORS + (ValueError, IndexError, KeyError)


def _error_path(e: OSError, default: str) -> str:
    """OSError から問題のファイルパスを取り出す"""
    if e.filename:
        return os.fsdecode(e.filename)
    return default


class SevenZipWriteHandle(ArchiveWriteHandle):
    """
    7z書庫の書き込みハンドル

    ファイル内容の読み込みは py7zr が固定サイズのブロック単位で行う。
    """

    def __init__(self, handler: 'SevenZipHandler', archive_path: str, config: PackConfig):
        super().__init__(handler, archive_path, config)
        try:
            self._archive = py7zr.SevenZipFile(archive_path, 'w', dereference=config.follow_symlinks)
        except OSError as e:
            raise ArchiveIOError(archive_path, e) from e

    def add_file(self, name: str, source_path: str) -> int:
        arcname = normalize_path(name)
        try:
            size = os.path.getsize(source_path)
            self._archive.write(source_path, arcname=arcname)
        except OSError as e:
            raise ArchiveIOError(_error_path(e, self.archive_path), e) from e

        self.debug_info(f"書き込み完了 ==> {arcname} ({size} バイト)")
        return size

    def add_directory(self, name: str, source_path: Optional[str] = None) -> None:
        if source_path is None:
            raise ValueError("7z のディレクトリエントリには元ディレクトリのパスが必要です")
        # 7z ではディレクトリかどうかは属性で表すため、名前に末尾の '/' は付けない
        arcname = normalize_path(name).rstrip('/')
        try:
            self._archive.write(source_path, arcname=arcname)
        except OSError as e:
            raise ArchiveIOError(_error_path(e, self.archive_path), e) from e
        self.debug_info(f"ディレクトリを書き込みました ==> {arcname}/")

    def _close(self) -> None:
        self._archive.close()


class _SinkIO(Py7zIO):
    """py7zr から渡される伸長データを展開先ファイルへ流す出力先"""

    def __init__(self, factory: '_SinkWriterFactory', entry: ArchiveEntry):
        self._factory = factory
        self.entry = entry
        self.fp: Optional[BinaryIO] = None
        self._length = 0

    def write(self, s) -> int:
        self._factory.write(self, s)
        self._length += len(s)
        return len(s)

    def read(self, size: Optional[int] = None) -> bytes:
        return b''

    def seek(self, offset: int, whence: int = 0) -> int:
        return offset if whence == 0 else self._length

    def flush(self) -> None:
        if self.fp is not None:
            self.fp.flush()

    def size(self) -> int:
        return self._length


class _SinkWriterFactory(WriterFactory):
    """
    エントリごとの _SinkIO を作るファクトリ

    py7zr は展開前に全エントリ分の出力先を作るため、ファイルは最初の書き込みで開き、
    同時に開いておくのは1つだけにする。
    """

    def __init__(self, sink: ExtractSink, files: Dict[str, ArchiveEntry]):
        self._sink = sink
        self._files = files
        self._lock = threading.Lock()
        self._current: Optional[_SinkIO] = None
        self._opened: Set[str] = set()

    def create(self, filename: str) -> _SinkIO:
        if os.path.isabs(filename):
            filename = os.path.relpath(filename, self._sink.dest_dir)
        name = normalize_path(filename)
        entry = self._files.get(name)
        if entry is None:
            entry = ArchiveEntry(name, EntryType.FILE)
            self._files[name] = entry
        return _SinkIO(self, entry)

    def write(self, target: _SinkIO, data) -> None:
        with self._lock:
            if self._current is not target:
                self._release()
                name = target.entry.name
                target.fp = self._sink.open_output(target.entry, append=name in self._opened)
                self._opened.add(name)
                self._current = target
            try:
                target.fp.write(data)
            except OSError as e:
                raise ArchiveIOError(target.fp.name, e) from e

    def _release(self) -> None:
        current, self._current = self._current, None
        if current is not None and current.fp is not None:
            fp, current.fp = current.fp, None
            fp.close()

    def close(self) -> None:
        with self._lock:
            self._release()

    def finish(self) -> None:
        """一度も書き込みのなかったファイル（0バイトのファイル）を作成する"""
        for name, entry in self._files.items():
            if name not in self._opened:
                self._sink.open_output(entry).close()
                self._opened.add(name)


class SevenZipReadHandle(ArchiveReadHandle):
    """7z書庫の読み込みハンドル"""

    def __init__(self, handler: 'SevenZipHandler', archive_path: str, config: PackConfig):
        super().__init__(handler, archive_path, config)
        try:
            self._archive = py7zr.SevenZipFile(archive_path, 'r')
        except _SEVENZ_HEADER_ERRORS as e:
            self.debug_error(f"7zファイル解析エラー: {e}, パス: {archive_path}")
            raise CorruptArchive(archive_path, e) from e
        except OSError as e:
            raise ArchiveIOError(archive_path, e) from e

    def list_entries(self) -> List[ArchiveEntry]:
        symlinks = {normalize_path(f.filename) for f in self._archive.files if f.is_symlink}
        entries = []
        for info in self._archive.list():
            name = normalize_path(info.filename)
            if name in symlinks:
                entries.append(ArchiveEntry(name, EntryType.SYMLINK))
            elif info.is_directory:
                entries.append(ArchiveEntry(name, EntryType.DIRECTORY))
            else:
                entries.append(ArchiveEntry(name, EntryType.FILE, size=info.uncompressed or 0))
        return entries

    def extract(self, sink: ExtractSink) -> None:
        entries = self.list_entries()

        # 展開を始める前に全エントリ名を検査する
        for entry in entries:
            if entry.type == EntryType.SYMLINK:
                raise UnsupportedEntry(entry.name, "シンボリックリンクは展開できません")
            sink.resolve(entry)

        for entry in entries:
            if entry.is_directory:
                sink.on_directory(entry)

        files = {entry.name: entry for entry in entries if not entry.is_directory}
        if not files:
            return

        factory = _SinkWriterFactory(sink, files)
        try:
            self._archive.extractall(path=sink.dest_dir, factory=factory)
        except ArchiveError:
            raise
        except _SEVENZ_CORRUPTION_ERRORS as e:
            self.debug_error(f"7zエントリ展開エラー: {self.archive_path} - {e}")
            raise CorruptArchive(self.archive_path, e) from e
        except OSError as e:
            raise ArchiveIOError(_error_path(e, self.archive_path), e) from e
        finally:
            factory.close()
        factory.finish()

    def _close(self) -> None:
        self._archive.close()


class SevenZipHandler(ArchiveHandler):
    """7zアーカイブハンドラ"""

    format_name = "7z"

    supported_extensions = ['.7z']

    def open_writer(self, archive_path: str, config: Optional[PackConfig] = None) -> SevenZipWriteHandle:
        return SevenZipWriteHandle(self, archive_path, self._config(config))

    def open_reader(self, archive_path: str, config: Optional[PackConfig] = None) -> SevenZipReadHandle:
        return SevenZipReadHandle(self, archive_path, self._config(config))
