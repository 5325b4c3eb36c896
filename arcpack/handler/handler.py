"""
アーカイブハンドラ基底クラス

書庫形式ごとの差異を ArchiveEntry という共通の形に閉じ込めるための
ハンドラ・ハンドル・展開先シンクの基底クラスを定義
"""
import os
from typing import Any, BinaryIO, List, Optional

from ..arc import ArchiveEntry
from ..config import PackConfig, DEFAULT_CONFIG
from ..errors import ArchiveError, ArchiveIOError
from logutils import log_print, log_trace, DEBUG, INFO, WARNING, ERROR


class LoggingMixin:
    """
    クラス名をロガー名に使うログ出力ヘルパー

    ロガー名は '<log_namespace>.<クラス名>' になる。
    """

    log_namespace = "arcpack"

    def debug_print(self, message: Any, *args, level: int = INFO, trace: bool = False, **kwargs):
        """
        デバッグ出力のラッパーメソッド

        Args:
            message: 出力するメッセージ
            *args: メッセージのフォーマット用引数
            level: ログレベル（デフォルトはINFO）
            trace: Trueならスタックトレース情報も出力する（デフォルトはFalse）
            **kwargs: 追加のキーワード引数
        """
        name = f"{self.log_namespace}.{self.__class__.__name__}"

        if trace:
            log_trace(None, level, message, *args, name=name, **kwargs)
        else:
            log_print(level, message, *args, name=name, **kwargs)

    def debug_debug(self, message: Any, *args, trace: bool = False, **kwargs):
        """DEBUGレベルのログ出力"""
        self.debug_print(message, *args, level=DEBUG, trace=trace, **kwargs)

    def debug_info(self, message: Any, *args, trace: bool = False, **kwargs):
        """INFOレベルのログ出力"""
        self.debug_print(message, *args, level=INFO, trace=trace, **kwargs)

    def debug_warning(self, message: Any, *args, trace: bool = False, **kwargs):
        """WARNINGレベルのログ出力"""
        self.debug_print(message, *args, level=WARNING, trace=trace, **kwargs)

    def debug_error(self, message: Any, *args, trace: bool = False, **kwargs):
        """ERRORレベルのログ出力"""
        self.debug_print(message, *args, level=ERROR, trace=trace, **kwargs)


def copy_stream(src: BinaryIO, dst: BinaryIO, chunk_size: int,
                src_name: str, dst_name: str) -> int:
    """
    ストリームを固定サイズのチャンクでコピーする

    読み込み側・書き込み側の OSError はそれぞれのパスを付けた ArchiveIOError になる。
    それ以外の例外（書庫の伸長エラーなど）はそのまま送出する。

    Args:
        src: 読み込み元ストリーム
        dst: 書き込み先ストリーム
        chunk_size: 一度に読み込むバイト数
        src_name: エラー報告用の読み込み元の名前
        dst_name: エラー報告用の書き込み先の名前

    Returns:
        コピーしたバイト数
    """
    total = 0
    while True:
        try:
            chunk = src.read(chunk_size)
        except OSError as e:
            raise ArchiveIOError(src_name, e) from e
        if not chunk:
            return total
        try:
            dst.write(chunk)
        except OSError as e:
            raise ArchiveIOError(dst_name, e) from e
        total += len(chunk)


class ExtractSink:
    """
    展開されたエントリの受け取り先

    ハンドルはエントリを読み出すたびにこのクラスのメソッドを呼ぶ。
    形式によって2通りの渡し方がある:
    - on_file: 読み出し可能な content を持つエントリを渡す（プル型）
    - open_output: 書き込み先ファイルを受け取り、形式側が書き込む（プッシュ型）
    """

    def __init__(self, dest_dir: str):
        self.dest_dir = os.path.abspath(dest_dir)

    def resolve(self, entry: ArchiveEntry) -> str:
        """エントリの展開先パスを返す（展開先の外を指す名前はエラー）"""
        raise NotImplementedError

    def on_directory(self, entry: ArchiveEntry) -> None:
        raise NotImplementedError

    def on_file(self, entry: ArchiveEntry) -> None:
        raise NotImplementedError

    def open_output(self, entry: ArchiveEntry, append: bool = False) -> BinaryIO:
        raise NotImplementedError


class ArchiveHandle(LoggingMixin):
    """
    開いている書庫を所有するハンドルの基底クラス

    with 文で使用し、close() は何度呼ばれても一度だけ実処理を行う。
    例外で抜けた場合は abort() で資源だけを解放する。
    """

    def __init__(self, handler: 'ArchiveHandler', archive_path: str, config: PackConfig):
        self.handler = handler
        self.archive_path = archive_path
        self.config = config
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def _close(self) -> None:
        raise NotImplementedError

    def close(self) -> None:
        """書庫を閉じる（フッタや中央ディレクトリはここで書き込まれる）"""
        if self._closed:
            return
        self._closed = True
        try:
            self._close()
        except ArchiveError:
            raise
        except OSError as e:
            raise ArchiveIOError(self.archive_path, e) from e
        self.debug_debug(f"書庫を閉じました: {self.archive_path}")

    def abort(self) -> None:
        """
        エラー発生時に資源を解放する

        元の例外を隠さないよう、クローズ時の二次エラーはログに残すだけにする。
        """
        if self._closed:
            return
        try:
            self.close()
        except Exception as e:
            self.debug_warning(f"エラー後のクローズに失敗しました: {self.archive_path} - {e}")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        if exc_type is None:
            self.close()
        else:
            self.abort()
        return False


class ArchiveWriteHandle(ArchiveHandle):
    """書き込み用ハンドル"""

    def add_file(self, name: str, source_path: str) -> int:
        """
        ファイルをひとつのエントリとして書き込む

        Args:
            name: 書庫内の名前
            source_path: 読み込むファイルのパス

        Returns:
            書き込んだバイト数
        """
        raise NotImplementedError

    def add_directory(self, name: str, source_path: Optional[str] = None) -> None:
        """
        空ディレクトリのマーカーを書き込む

        Args:
            name: 書庫内の名前（末尾の '/' は有無どちらでもよい）
            source_path: メタデータの取得元ディレクトリ（省略可能）
        """
        raise NotImplementedError


class ArchiveReadHandle(ArchiveHandle):
    """読み込み用ハンドル"""

    def list_entries(self) -> List[ArchiveEntry]:
        """
        書庫内の全エントリを内容なしで列挙する

        Returns:
            エントリ情報のリスト（書庫内の順序）
        """
        raise NotImplementedError

    def extract(self, sink: ExtractSink) -> None:
        """
        全エントリを順に sink へ渡す

        Args:
            sink: 展開先
        """
        raise NotImplementedError


class ArchiveHandler(LoggingMixin):
    """
    アーカイブハンドラの抽象基底クラス

    状態を持たず、書庫ごとの状態はすべて open_writer / open_reader が返す
    ハンドルが持つ。
    """

    log_namespace = "arcpack.handler"

    # このハンドラの形式名
    format_name = ""

    # このハンドラがサポートするファイル拡張子のリスト
    supported_extensions: List[str] = []

    def can_handle(self, path: str) -> bool:
        """
        指定されたパスがこのハンドラで処理可能かどうか（拡張子で判定）

        Args:
            path: 書庫ファイルのパス

        Returns:
            処理可能な場合はTrue
        """
        norm_path = path.replace('\\', '/').rstrip('/')
        _, ext = os.path.splitext(norm_path.lower())
        return ext in self.supported_extensions

    def open_writer(self, archive_path: str, config: Optional[PackConfig] = None) -> ArchiveWriteHandle:
        """
        書庫を書き込み用に開く（既存ファイルは切り詰められる）

        Args:
            archive_path: 作成する書庫のパス
            config: 設定

        Returns:
            書き込み用ハンドル
        """
        raise NotImplementedError

    def open_reader(self, archive_path: str, config: Optional[PackConfig] = None) -> ArchiveReadHandle:
        """
        書庫を読み込み用に開く

        Args:
            archive_path: 書庫のパス
            config: 設定

        Returns:
            読み込み用ハンドル
        """
        raise NotImplementedError

    @staticmethod
    def _config(config: Optional[PackConfig]) -> PackConfig:
        return config if config is not None else DEFAULT_CONFIG
