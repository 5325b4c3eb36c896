"""
arcpack 書庫の作成・展開モジュール

ディレクトリツリーを 7z / zip 書庫に圧縮し、書庫をディレクトリに展開する
"""

from .arc import ArchiveEntry, EntryType, SourceNode
from .config import PackConfig, DEFAULT_CONFIG, DEFAULT_CHUNK_SIZE, ZIP_NAME_ENCODING
from .errors import (
    ArchiveError, SourceNotFound, ArchiveIOError, CorruptArchive,
    UnsupportedEntry, UnsupportedFormat
)
from .interface import compress, compress_files, decompress, list_entries

__version__ = "0.1.0"

__all__ = [
    'ArchiveEntry', 'EntryType', 'SourceNode',
    'PackConfig', 'DEFAULT_CONFIG', 'DEFAULT_CHUNK_SIZE', 'ZIP_NAME_ENCODING',
    'ArchiveError', 'SourceNotFound', 'ArchiveIOError', 'CorruptArchive',
    'UnsupportedEntry', 'UnsupportedFormat',
    'compress', 'compress_files', 'decompress', 'list_entries',
]
