"""
圧縮・展開の公開インターフェース

呼び出しごとにハンドラとライター/リーダーを作成する。
共有される状態はなく、設定は引数で渡す。
"""

from typing import List, Optional, Sequence

from .arc import ArchiveEntry
from .config import PackConfig
from .handlers import get_handler
from .reader import ArchiveReader
from .writer import ArchiveWriter


def compress(source_path: str, archive_path: str, fmt: Optional[str] = None,
             config: Optional[PackConfig] = None) -> str:
    """
    ファイルまたはディレクトリを書庫に圧縮する

    Args:
        source_path: 圧縮するファイルまたはディレクトリ
        archive_path: 作成する書庫のパス（拡張子で形式を判定）
        fmt: 形式名（'zip', '7z'）。省略時は拡張子から判定
        config: 設定

    Returns:
        作成した書庫のパス
    """
    handler = get_handler(archive_path, fmt)
    return ArchiveWriter(handler, config).compress(source_path, archive_path)


def compress_files(sources: Sequence[str], archive_path: str, fmt: Optional[str] = None,
                   config: Optional[PackConfig] = None) -> str:
    """
    複数のファイル・ディレクトリを書庫のルートに並べて圧縮する

    Args:
        sources: 圧縮するファイルまたはディレクトリのリスト
        archive_path: 作成する書庫のパス
        fmt: 形式名。省略時は拡張子から判定
        config: 設定

    Returns:
        作成した書庫のパス
    """
    handler = get_handler(archive_path, fmt)
    return ArchiveWriter(handler, config).compress_files(sources, archive_path)


def decompress(archive_path: str, dest_dir: str, fmt: Optional[str] = None,
               config: Optional[PackConfig] = None) -> List[str]:
    """
    書庫を展開する

    Args:
        archive_path: 展開する書庫
        dest_dir: 展開先ディレクトリ
        fmt: 形式名。省略時は拡張子から判定
        config: 設定

    Returns:
        書き出したファイルのパスのリスト（ディレクトリは含まない）
    """
    handler = get_handler(archive_path, fmt)
    return ArchiveReader(handler, config).decompress(archive_path, dest_dir)


def list_entries(archive_path: str, fmt: Optional[str] = None,
                 config: Optional[PackConfig] = None) -> List[ArchiveEntry]:
    """
    書庫内のエントリを列挙する

    Args:
        archive_path: 書庫のパス
        fmt: 形式名。省略時は拡張子から判定
        config: 設定

    Returns:
        エントリのリスト
    """
    handler = get_handler(archive_path, fmt)
    return ArchiveReader(handler, config).list_entries(archive_path)
