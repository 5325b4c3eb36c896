"""
圧縮・展開処理の設定値

設定は操作ごとに呼び出し側から明示的に渡す。PackConfig は生成後に変更できない。
"""

import codecs
import zipfile
from typing import Any

# ストリーミングコピーのチャンクサイズ（5MiB）
DEFAULT_CHUNK_SIZE = 5 * 1024 * 1024

# ZIPエントリ名の文字コード
# 書き込み側と読み込み側で一致していないとファイル名が黙って化けるため、
# 書庫形式レベルの固定値として扱う
ZIP_NAME_ENCODING = 'gbk'

# ZIPの圧縮方式
DEFAULT_ZIP_COMPRESSION = zipfile.ZIP_DEFLATED


class PackConfig:
    """
    圧縮・展開の設定

    Attributes:
        chunk_size: ストリーミングコピー時のチャンクサイズ（バイト）
        zip_name_encoding: ZIPエントリ名の文字コード
        zip_compression: ZIPの圧縮方式（zipfile.ZIP_STORED / ZIP_DEFLATED など）
        follow_symlinks: 圧縮時にシンボリックリンクを辿るかどうか
    """

    __slots__ = ('_chunk_size', '_zip_name_encoding', '_zip_compression', '_follow_symlinks')

    def __init__(self,
                 chunk_size: int = DEFAULT_CHUNK_SIZE,
                 zip_name_encoding: str = ZIP_NAME_ENCODING,
                 zip_compression: int = DEFAULT_ZIP_COMPRESSION,
                 follow_symlinks: bool = False):
        if not isinstance(chunk_size, int) or chunk_size <= 0:
            raise ValueError(f"チャンクサイズは正の整数で指定してください: {chunk_size!r}")
        try:
            codecs.lookup(zip_name_encoding)
        except LookupError:
            raise ValueError(f"不明な文字コードです: {zip_name_encoding!r}") from None

        object.__setattr__(self, '_chunk_size', chunk_size)
        object.__setattr__(self, '_zip_name_encoding', zip_name_encoding)
        object.__setattr__(self, '_zip_compression', zip_compression)
        object.__setattr__(self, '_follow_symlinks', bool(follow_symlinks))

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("PackConfig は変更できません。replace() を使用してください")

    @property
    def chunk_size(self) -> int:
        return self._chunk_size

    @property
    def zip_name_encoding(self) -> str:
        return self._zip_name_encoding

    @property
    def zip_compression(self) -> int:
        return self._zip_compression

    @property
    def follow_symlinks(self) -> bool:
        return self._follow_symlinks

    def replace(self, **changes: Any) -> 'PackConfig':
        """
        一部の値を差し替えた新しい設定を返す

        Args:
            **changes: 変更する設定値

        Returns:
            新しいPackConfig
        """
        values = {
            'chunk_size': self.chunk_size,
            'zip_name_encoding': self.zip_name_encoding,
            'zip_compression': self.zip_compression,
            'follow_symlinks': self.follow_symlinks,
        }
        unknown = set(changes) - set(values)
        if unknown:
            raise TypeError(f"不明な設定項目: {', '.join(sorted(unknown))}")
        values.update(changes)
        return PackConfig(**values)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PackConfig):
            return NotImplemented
        return (self.chunk_size, self.zip_name_encoding, self.zip_compression, self.follow_symlinks) == \
               (other.chunk_size, other.zip_name_encoding, other.zip_compression, other.follow_symlinks)

    def __hash__(self) -> int:
        return hash((self.chunk_size, self.zip_name_encoding, self.zip_compression, self.follow_symlinks))

    def __repr__(self) -> str:
        return (f"PackConfig(chunk_size={self.chunk_size}, zip_name_encoding={self.zip_name_encoding!r}, "
                f"zip_compression={self.zip_compression}, follow_symlinks={self.follow_symlinks})")


# 既定の設定
DEFAULT_CONFIG = PackConfig()
