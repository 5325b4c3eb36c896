"""
ZIPアーカイブハンドラ

zipfile を使って ZIP 書庫の作成と展開を行うハンドラ。
エントリ名は固定のレガシーコードページ（既定は GBK）で読み書きする。
"""
import lzma
import stat
import zipfile
import zlib
from typing import BinaryIO, List, Optional

from ..arc import ArchiveEntry, EntryType
from ..config import PackConfig
from ..errors import ArchiveError, ArchiveIOError, CorruptArchive, UnsupportedEntry
from ..path_utils import directory_entry_name, normalize_path
from .common_encodings import UTF8_FLAG, can_encode, decode_entry_name, encode_entry_name
from .handler import (
    ArchiveHandler, ArchiveReadHandle, ArchiveWriteHandle, ExtractSink, copy_stream
)

# 解析・伸長中に zipfile が送出する書庫破損系の例外
# 圧縮方式やバージョンのフィールドが壊れていると NotImplementedError になる
_ZIP_CORRUPTION_ERRORS = (zipfile.BadZipFile, zlib.error, lzma.LZMAError, EOFError,
                          UnicodeDecodeError, NotImplementedError)

# 汎用フラグの暗号化ビット
_ENCRYPTED_FLAG = 0x1


class _LegacyNameZipInfo(zipfile.ZipInfo):
    """
    エントリ名をUTF-8ではなく指定のコードページで書き込む ZipInfo

    ローカルヘッダと中央ディレクトリの両方が _encodeFilenameFlags を使うので、
    ここを差し替えるだけで両方の名前が揃う。
    """

    __slots__ = ('name_encoding',)

    def _encodeFilenameFlags(self):
        return encode_entry_name(self.filename, self.name_encoding), self.flag_bits & ~UTF8_FLAG


class _MemberReader:
    """
    書庫メンバーのストリーム

    bz2 は不正な圧縮データを OSError で報告するので、CorruptArchive に変換する。
    """

    def __init__(self, src: BinaryIO, info: zipfile.ZipInfo, archive_path: str):
        self._src = src
        self._info = info
        self._archive_path = archive_path

    def read(self, size: int = -1) -> bytes:
        try:
            return self._src.read(size)
        except OSError as e:
            if self._info.compress_type != zipfile.ZIP_BZIP2:
                raise
            raise CorruptArchive(self._archive_path, e) from e


class ZipWriteHandle(ArchiveWriteHandle):
    """ZIP書庫の書き込みハンドル"""

    def __init__(self, handler: 'ZipHandler', archive_path: str, config: PackConfig):
        super().__init__(handler, archive_path, config)
        try:
            self._zf = zipfile.ZipFile(archive_path, 'w', compression=config.zip_compression,
                                       allowZip64=True)
        except OSError as e:
            raise ArchiveIOError(archive_path, e) from e

    def _make_info(self, name: str, source_path: Optional[str]) -> _LegacyNameZipInfo:
        encoding = self.config.zip_name_encoding
        if not can_encode(name, encoding):
            raise UnsupportedEntry(source_path or name, f"エントリ名を {encoding} で表現できません")

        if source_path is not None:
            try:
                zinfo = _LegacyNameZipInfo.from_file(source_path, name, strict_timestamps=False)
            except OSError as e:
                raise ArchiveIOError(source_path, e) from e
        else:
            zinfo = _LegacyNameZipInfo(name)
            if name.endswith('/'):
                zinfo.external_attr = (0o40775 << 16) | 0x10
        zinfo.name_encoding = encoding
        # ディレクトリマーカーは無圧縮で格納する
        zinfo.compress_type = zipfile.ZIP_STORED if zinfo.is_dir() else self.config.zip_compression
        return zinfo

    def add_file(self, name: str, source_path: str) -> int:
        zinfo = self._make_info(normalize_path(name), source_path)
        try:
            src = open(source_path, 'rb')
        except OSError as e:
            raise ArchiveIOError(source_path, e) from e

        with src:
            try:
                dst = self._zf.open(zinfo, 'w')
            except OSError as e:
                raise ArchiveIOError(self.archive_path, e) from e
            with dst:
                written = copy_stream(src, dst, self.config.chunk_size, source_path, self.archive_path)

        self.debug_info(f"書き込み完了 ==> {zinfo.filename} ({written} バイト)")
        return written

    def add_directory(self, name: str, source_path: Optional[str] = None) -> None:
        zinfo = self._make_info(directory_entry_name(name), source_path)
        try:
            self._zf.writestr(zinfo, b'')
        except OSError as e:
            raise ArchiveIOError(self.archive_path, e) from e
        self.debug_info(f"ディレクトリを書き込みました ==> {zinfo.filename}")

    def _close(self) -> None:
        self._zf.close()


class ZipReadHandle(ArchiveReadHandle):
    """ZIP書庫の読み込みハンドル"""

    def __init__(self, handler: 'ZipHandler', archive_path: str, config: PackConfig):
        super().__init__(handler, archive_path, config)
        try:
            self._zf = zipfile.ZipFile(archive_path, 'r')
        except _ZIP_CORRUPTION_ERRORS as e:
            self.debug_error(f"ZIPファイル解析エラー: {e}, パス: {archive_path}")
            raise CorruptArchive(archive_path, e) from e
        except OSError as e:
            raise ArchiveIOError(archive_path, e) from e

    def _decode_name(self, info: zipfile.ZipInfo) -> str:
        try:
            name = decode_entry_name(info.orig_filename, info.flag_bits, self.config.zip_name_encoding)
        except UnicodeError as e:
            raise CorruptArchive(
                self.archive_path, e,
                detail=f"エントリ名を {self.config.zip_name_encoding} でデコードできません: {info.orig_filename!r}"
            ) from e
        return normalize_path(name)

    def _to_entry(self, info: zipfile.ZipInfo) -> ArchiveEntry:
        name = self._decode_name(info)
        mode = info.external_attr >> 16
        if stat.S_ISLNK(mode):
            return ArchiveEntry(name, EntryType.SYMLINK, size=info.file_size)
        if name.endswith('/'):
            return ArchiveEntry(name, EntryType.DIRECTORY)
        return ArchiveEntry(name, EntryType.FILE, size=info.file_size)

    def list_entries(self) -> List[ArchiveEntry]:
        return [self._to_entry(info) for info in self._zf.infolist()]

    def extract(self, sink: ExtractSink) -> None:
        for info in self._zf.infolist():
            entry = self._to_entry(info)
            if entry.type == EntryType.SYMLINK:
                raise UnsupportedEntry(entry.name, "シンボリックリンクは展開できません")
            if entry.is_directory:
                sink.on_directory(entry)
                continue
            if info.flag_bits & _ENCRYPTED_FLAG:
                raise UnsupportedEntry(entry.name, "暗号化されたエントリは展開できません")

            try:
                with self._zf.open(info, 'r') as src:
                    entry.content = _MemberReader(src, info, self.archive_path)
                    sink.on_file(entry)
            except ArchiveError:
                raise
            except _ZIP_CORRUPTION_ERRORS as e:
                self.debug_error(f"ZIPエントリ展開エラー: {entry.name} - {e}")
                raise CorruptArchive(self.archive_path, e) from e
            except OSError as e:
                raise ArchiveIOError(self.archive_path, e) from e
            finally:
                entry.content = None

    def _close(self) -> None:
        self._zf.close()


class ZipHandler(ArchiveHandler):
    """
    ZIPアーカイブハンドラ

    エントリ名の文字コードは PackConfig.zip_name_encoding で、
    書き込みと読み込みで同じ値を使う必要がある。
    """

    format_name = "zip"

    supported_extensions = ['.zip']

    def open_writer(self, archive_path: str, config: Optional[PackConfig] = None) -> ZipWriteHandle:
        return ZipWriteHandle(self, archive_path, self._config(config))

    def open_reader(self, archive_path: str, config: Optional[PackConfig] = None) -> ZipReadHandle:
        return ZipReadHandle(self, archive_path, self._config(config))
