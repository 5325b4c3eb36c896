"""
標準ハンドラーの選択

書庫のパス（拡張子）または形式名から、対応するハンドラを操作ごとに新しく作成する
"""

from typing import List, Optional, Type

from .errors import UnsupportedFormat
from .handler.handler import ArchiveHandler
from .handler.sevenz_handler import SevenZipHandler
from .handler.zip_handler import ZipHandler

# 標準のハンドラクラス（判定順）
STANDARD_HANDLERS: List[Type[ArchiveHandler]] = [SevenZipHandler, ZipHandler]


def supported_formats() -> List[str]:
    """
    サポートしている形式名のリストを返す

    Returns:
        形式名のリスト
    """
    return [cls.format_name for cls in STANDARD_HANDLERS]


def get_handler(archive_path: Optional[str] = None, fmt: Optional[str] = None) -> ArchiveHandler:
    """
    書庫に対応するハンドラを作成する

    Args:
        archive_path: 書庫ファイルのパス（拡張子で形式を判定する）
        fmt: 形式名（'zip', '7z'）。指定された場合は拡張子より優先する

    Returns:
        ハンドラのインスタンス

    Raises:
        UnsupportedFormat: 対応するハンドラがない場合
    """
    if fmt:
        key = fmt.lower().lstrip('.')
        for cls in STANDARD_HANDLERS:
            if cls.format_name == key:
                return cls()
        raise UnsupportedFormat(fmt)

    if archive_path:
        for cls in STANDARD_HANDLERS:
            handler = cls()
            if handler.can_handle(archive_path):
                return handler

    raise UnsupportedFormat(archive_path or "")
