"""
アーカイブライター

ディレクトリツリーを深さ優先でたどり、ファイルごとにひとつのエントリ、
空ディレクトリごとにひとつのディレクトリマーカーを書庫に書き込む。
"""

import os
from typing import List, Optional, Sequence, Set, Tuple

from .arc import SourceNode
from .config import PackConfig, DEFAULT_CONFIG
from .errors import ArchiveIOError, SourceNotFound, UnsupportedEntry
from .handler.handler import ArchiveHandler, ArchiveWriteHandle, LoggingMixin
from .path_utils import base_entry_name, is_same_path


class ArchiveWriter(LoggingMixin):
    """
    ファイルシステムのツリーを書庫に書き込むクラス

    走査は明示的なスタックで行うため、ディレクトリの深さが呼び出しスタックに影響しない。
    子要素の順序はOSの列挙順で、ソートはしない。
    """

    def __init__(self, handler: ArchiveHandler, config: Optional[PackConfig] = None):
        """
        Args:
            handler: 書庫形式のハンドラ
            config: 設定（省略時は既定値）
        """
        self.handler = handler
        self.config = config if config is not None else DEFAULT_CONFIG

    def compress(self, source_path: str, archive_path: str) -> str:
        """
        ファイルまたはディレクトリを書庫に圧縮する

        Args:
            source_path: 圧縮するファイルまたはディレクトリ
            archive_path: 作成する書庫のパス（既存ファイルは上書き）

        Returns:
            作成した書庫のパス

        Raises:
            SourceNotFound: source_path が存在しない（書庫は作成されない）
            ArchiveIOError: 読み書きに失敗した（書庫は途中までの状態で残る）
            UnsupportedEntry: シンボリックリンクなど表現できないエントリがある
        """
        return self.compress_files([source_path], archive_path)

    def compress_files(self, sources: Sequence[str], archive_path: str) -> str:
        """
        複数のファイル・ディレクトリを書庫のルートに並べて圧縮する

        各要素は名前（パスの末尾要素）で書庫ルートに置かれ、
        ディレクトリは compress と同じ規則でたどられる。

        Args:
            sources: 圧縮するファイルまたはディレクトリのリスト
            archive_path: 作成する書庫のパス

        Returns:
            作成した書庫のパス
        """
        if not sources:
            raise ValueError("圧縮するファイルが指定されていません")

        # 書庫を作る前にすべての入力を確認する
        for source in sources:
            if not os.path.exists(source):
                self.debug_error(f"圧縮元が存在しません: {source}")
                raise SourceNotFound(source)

        self.debug_info(f"圧縮開始: {', '.join(sources)} -> {archive_path}")
        count = 0
        with self.handler.open_writer(archive_path, self.config) as handle:
            for source in sources:
                count += self._write_tree(handle, source, archive_path)
        self.debug_info(f"圧縮完了: {archive_path} ({count} エントリ)")
        return archive_path

    def _write_tree(self, handle: ArchiveWriteHandle, source_path: str, archive_path: str) -> int:
        """
        ひとつのツリーを書き込む

        Returns:
            書き込んだエントリ数
        """
        root = SourceNode(os.path.abspath(source_path), base_entry_name(source_path),
                          self.config.follow_symlinks)
        stack: List[SourceNode] = [root]
        visited: Set[Tuple[int, int]] = set()
        count = 0

        while stack:
            node = stack.pop()

            # 書き込み中の書庫自身は含めない
            if is_same_path(node.path, archive_path):
                self.debug_debug(f"書庫自身をスキップします: {node.path}")
                continue

            if node.is_symlink and not self.config.follow_symlinks:
                raise UnsupportedEntry(node.path, "シンボリックリンクは格納できません")

            if node.is_directory:
                try:
                    if self.config.follow_symlinks:
                        # リンクを辿る場合は同じディレクトリへの再訪を循環とみなす
                        st = os.stat(node.path)
                        key = (st.st_dev, st.st_ino)
                        if key in visited:
                            raise UnsupportedEntry(node.path, "シンボリックリンクが循環しています")
                        visited.add(key)
                    children = node.children()
                except OSError as e:
                    raise ArchiveIOError(node.path, e) from e

                if not children:
                    handle.add_directory(node.name, node.path)
                    count += 1
                else:
                    # 列挙順に処理するため逆順で積む
                    stack.extend(reversed(children))
            elif node.is_regular_file:
                handle.add_file(node.name, node.path)
                count += 1
            else:
                raise UnsupportedEntry(node.path, "通常ファイルでもディレクトリでもありません")

        return count
