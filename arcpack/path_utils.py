"""
書庫内エントリ名とファイルシステムパスを扱うユーティリティ

エントリ名はOSに関係なく '/' 区切りで扱う
"""

import os
from typing import Optional


def normalize_path(path: str) -> str:
    """
    OSに依存しないパス正規化関数

    Args:
        path: 正規化する元のパス文字列

    Returns:
        正規化されたパス文字列
    """
    if path is None:
        return ""

    # バックスラッシュをスラッシュに変換
    normalized = path.replace('\\', '/')

    # 連続するスラッシュを1つに
    while '//' in normalized:
        normalized = normalized.replace('//', '/')

    return normalized


def join_entry_name(parent: str, child: str) -> str:
    """
    親エントリ名と子の名前から書庫内の名前を組み立てる

    Args:
        parent: 親のエントリ名（空文字列ならルート）
        child: 子の名前

    Returns:
        '<parent>/<child>' 形式のエントリ名
    """
    parent = normalize_path(parent).rstrip('/')
    child = normalize_path(child).strip('/')
    if not parent:
        return child
    return f"{parent}/{child}"


def directory_entry_name(name: str) -> str:
    """ディレクトリマーカー用の名前（末尾 '/'）を返す"""
    name = normalize_path(name)
    return name if name.endswith('/') else name + '/'


def base_entry_name(path: str) -> str:
    """
    ファイルシステムパスから書庫ルートに置くときの名前を求める

    Args:
        path: ファイルまたはディレクトリのパス

    Returns:
        パスの末尾要素
    """
    return os.path.basename(os.path.normpath(os.path.abspath(path)))


def resolve_destination(dest_dir: str, entry_name: str) -> Optional[str]:
    """
    エントリ名を展開先ディレクトリ配下の実パスに変換する

    絶対パスや '..' で展開先の外を指すエントリ名、NUL文字を含むエントリ名は None を返す。

    Args:
        dest_dir: 展開先ディレクトリ
        entry_name: 書庫内のエントリ名

    Returns:
        展開先の絶対パス。安全でない名前の場合はNone
    """
    name = normalize_path(entry_name)
    if not name or name.startswith('/') or (len(name) > 1 and name[1] == ':'):
        return None
    if '\x00' in name:
        return None

    parts = [part for part in name.split('/') if part and part != '.']
    if not parts or '..' in parts:
        return None

    root = os.path.abspath(dest_dir)
    target = os.path.join(root, *parts)
    if os.path.commonpath([root, target]) != root:
        return None
    return target


def is_same_path(a: str, b: str) -> bool:
    """2つのパスが同じファイルを指すかどうか"""
    if os.path.exists(a) and os.path.exists(b):
        return os.path.samefile(a, b)
    return os.path.normcase(os.path.abspath(a)) == os.path.normcase(os.path.abspath(b))
