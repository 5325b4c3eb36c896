"""
アーカイブリーダー

書庫のエントリを順に読み出し、ファイルとディレクトリを展開先に再構築する。
"""

import os
from typing import BinaryIO, List, Optional

from .arc import ArchiveEntry
from .config import PackConfig, DEFAULT_CONFIG
from .errors import ArchiveIOError, CorruptArchive, SourceNotFound
from .handler.handler import ArchiveHandler, ExtractSink, LoggingMixin, copy_stream
from .path_utils import resolve_destination


class DirectorySink(ExtractSink, LoggingMixin):
    """
    展開先ディレクトリへエントリを書き出すシンク

    書き出したファイルのパスを written に書き込み順で記録する。
    ディレクトリマーカーは記録しない。
    """

    def __init__(self, archive_path: str, dest_dir: str, chunk_size: int):
        super().__init__(dest_dir)
        self.archive_path = archive_path
        self.chunk_size = chunk_size
        self.written: List[str] = []

    def resolve(self, entry: ArchiveEntry) -> str:
        target = resolve_destination(self.dest_dir, entry.name)
        if target is None:
            self.debug_error(f"展開先の外を指すエントリ名です: {entry.name}")
            raise CorruptArchive(self.archive_path, detail=f"不正なエントリ名: {entry.name!r}")
        return target

    def ensure_directory(self, path: str) -> None:
        try:
            os.makedirs(path, exist_ok=True)
        except OSError as e:
            raise ArchiveIOError(path, e) from e

    def on_directory(self, entry: ArchiveEntry) -> None:
        target = self.resolve(entry)
        self.ensure_directory(target)
        self.debug_debug(f"ディレクトリを作成しました: {target}")

    def open_output(self, entry: ArchiveEntry, append: bool = False) -> BinaryIO:
        target = self.resolve(entry)
        self.ensure_directory(os.path.dirname(target))
        try:
            fp = open(target, 'ab' if append else 'wb')
        except OSError as e:
            raise ArchiveIOError(target, e) from e
        if not append:
            self.written.append(target)
            self.debug_debug(f"展開しました: {target}")
        return fp

    def on_file(self, entry: ArchiveEntry) -> None:
        with self.open_output(entry) as dst:
            copy_stream(entry.content, dst, self.chunk_size, self.archive_path, dst.name)


class ArchiveReader(LoggingMixin):
    """書庫を展開先ディレクトリに展開するクラス"""

    def __init__(self, handler: ArchiveHandler, config: Optional[PackConfig] = None):
        """
        Args:
            handler: 書庫形式のハンドラ
            config: 設定（省略時は既定値）
        """
        self.handler = handler
        self.config = config if config is not None else DEFAULT_CONFIG

    def decompress(self, archive_path: str, dest_dir: str) -> List[str]:
        """
        書庫を展開する

        既存のファイルは上書きする。失敗しても展開済みのファイルは残る。

        Args:
            archive_path: 展開する書庫
            dest_dir: 展開先ディレクトリ（なければ作成する）

        Returns:
            書き出したファイルの絶対パスのリスト（書き込み順、ディレクトリは含まない）

        Raises:
            SourceNotFound: 書庫が存在しない
            CorruptArchive: 書庫が壊れている、または展開先の外を指すエントリ名がある
            UnsupportedEntry: シンボリックリンクなど展開できないエントリがある
            ArchiveIOError: 展開先への書き込みに失敗した
        """
        if not os.path.isfile(archive_path):
            self.debug_error(f"書庫が存在しません: {archive_path}")
            raise SourceNotFound(archive_path)

        sink = DirectorySink(archive_path, dest_dir, self.config.chunk_size)
        self.debug_info(f"展開開始: {archive_path} -> {sink.dest_dir}")
        with self.handler.open_reader(archive_path, self.config) as handle:
            sink.ensure_directory(sink.dest_dir)
            handle.extract(sink)
        self.debug_info(f"展開完了: {archive_path} ({len(sink.written)} ファイル)")
        return sink.written

    def list_entries(self, archive_path: str) -> List[ArchiveEntry]:
        """
        書庫内のエントリを内容なしで列挙する

        Args:
            archive_path: 書庫のパス

        Returns:
            エントリのリスト（書庫内の順序）
        """
        if not os.path.isfile(archive_path):
            raise SourceNotFound(archive_path)
        with self.handler.open_reader(archive_path, self.config) as handle:
            return handle.list_entries()
