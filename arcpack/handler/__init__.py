"""
書庫形式ごとのハンドラ
"""

from .handler import ArchiveHandler, ArchiveReadHandle, ArchiveWriteHandle, ExtractSink
from .zip_handler import ZipHandler
from .sevenz_handler import SevenZipHandler

__all__ = [
    'ArchiveHandler', 'ArchiveReadHandle', 'ArchiveWriteHandle', 'ExtractSink',
    'ZipHandler', 'SevenZipHandler',
]
