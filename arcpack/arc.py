"""
アーカイブエントリ情報と型定義

書庫に格納する/書庫から取り出すファイル・ディレクトリ情報を表すクラス
"""

import os
from enum import Enum
from typing import BinaryIO, List, Optional

from .path_utils import join_entry_name


class EntryType(Enum):
    """エントリタイプを表す列挙型"""
    FILE = 1
    DIRECTORY = 2
    SYMLINK = 4

    def is_dir(self) -> bool:
        """ディレクトリタイプかどうかを判定する"""
        return self == EntryType.DIRECTORY

    def is_file(self) -> bool:
        """ファイルタイプかどうかを判定する"""
        return self == EntryType.FILE


class ArchiveEntry:
    """
    書庫内のひとつのエントリ（ファイルまたはディレクトリマーカー）

    名前は書庫ルートからの相対パスで、OSに関係なく '/' 区切り。
    ディレクトリマーカーの名前は末尾が '/' になる。
    ディレクトリは内容を持たず、ファイルは必ず内容ストリームを持つ（0バイトも可）。
    ストリームは現在の反復ステップの間だけ有効。
    """

    def __init__(self,
                 name: str,
                 type: EntryType = EntryType.FILE,
                 content: Optional[BinaryIO] = None,
                 size: int = 0):
        """
        エントリ情報を初期化する

        Args:
            name: 書庫内の名前
            type: エントリのタイプ（FILE, DIRECTORY, SYMLINK）
            content: ファイル内容のストリーム（ディレクトリはNone）
            size: サイズ（バイト）
        """
        if type == EntryType.DIRECTORY:
            if content is not None:
                raise ValueError(f"ディレクトリエントリは内容を持てません: {name}")
            if not name.endswith('/'):
                name += '/'
        self.name = name
        self.type = type
        self.content = content
        self.size = size

    @property
    def is_directory(self) -> bool:
        return self.type.is_dir()

    def __repr__(self) -> str:
        return f"ArchiveEntry(name={self.name!r}, type={self.type.name}, size={self.size})"


class SourceNode:
    """
    書き込み対象となるファイルシステム上のノード

    走査中に必要になった時点で子要素を列挙する（順序はOSの列挙順のまま）。
    """

    def __init__(self, path: str, name: str, follow_symlinks: bool = False):
        """
        Args:
            path: ファイルシステム上の絶対パス
            name: 書庫内で使う名前
            follow_symlinks: シンボリックリンクを辿るかどうか
        """
        self.path = path
        self.name = name
        self.follow_symlinks = follow_symlinks
        self.is_symlink = os.path.islink(path)
        if self.is_symlink and not follow_symlinks:
            self.is_directory = False
        else:
            self.is_directory = os.path.isdir(path)

    @property
    def is_regular_file(self) -> bool:
        if self.is_symlink and not self.follow_symlinks:
            return False
        return os.path.isfile(self.path)

    def children(self) -> List['SourceNode']:
        """
        子ノードを列挙する

        Returns:
            子ノードのリスト（ディレクトリでなければ空リスト）
        """
        if not self.is_directory:
            return []
        with os.scandir(self.path) as it:
            return [
                SourceNode(entry.path, join_entry_name(self.name, entry.name), self.follow_symlinks)
                for entry in it
            ]

    def __repr__(self) -> str:
        return f"SourceNode(path={self.path!r}, name={self.name!r}, is_directory={self.is_directory})"
