"""
アーカイブ処理の例外定義

各例外は同じ状況で標準ライブラリが送出する組み込み例外も継承するため、
組み込み例外で捕捉している呼び出し側もそのまま動作する。
"""

from typing import Optional


class ArchiveError(Exception):
    """アーカイブ処理の例外の基底クラス"""

    def __init__(self, message: str, path: Optional[str] = None,
                 cause: Optional[BaseException] = None):
        super().__init__(message)
        self.path = path
        self.cause = cause


class SourceNotFound(ArchiveError, FileNotFoundError):
    """圧縮元または展開元のパスが存在しない"""

    def __init__(self, path: str):
        super().__init__(f"指定されたパスが存在しません: {path}", path=path)


class ArchiveIOError(ArchiveError, IOError):
    """特定のファイルの読み書きに失敗した"""

    def __init__(self, path: str, cause: BaseException):
        super().__init__(f"I/Oエラー: {path} - {cause}", path=path, cause=cause)


class CorruptArchive(ArchiveError, ValueError):
    """書庫の構造が壊れている、または安全に展開できないエントリ名を含む"""

    def __init__(self, path: str, cause: Optional[BaseException] = None, detail: str = ""):
        message = f"書庫が壊れています: {path}"
        if detail:
            message += f" ({detail})"
        elif cause is not None:
            message += f" - {cause}"
        super().__init__(message, path=path, cause=cause)


class UnsupportedEntry(ArchiveError, ValueError):
    """書庫形式で表現できないエントリ（シンボリックリンクなど）"""

    def __init__(self, path: str, detail: str = "サポートされていないエントリです"):
        super().__init__(f"{detail}: {path}", path=path)


class UnsupportedFormat(ArchiveError, ValueError):
    """対応するハンドラがない書庫形式"""

    def __init__(self, path: str):
        super().__init__(f"サポートされていない書庫形式です: {path}", path=path)
