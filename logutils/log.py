"""
ロギング用ユーティリティ

arcpack 全体でのロギング操作を統一的に扱うためのユーティリティ関数群
"""
import os
import sys
import traceback
from typing import Optional, Any, Dict

# Pythonの標準loggingモジュールをインポート
import logging as py_logging

# ログレベルの定数定義
DEBUG = 10
INFO = 20
WARNING = 30
ERROR = 40
CRITICAL = 50

# 名前を省略したときのロガー名
DEFAULT_LOGGER_NAME = 'arcpack'

# ログの書式
LOG_FORMAT = '%(asctime)s [%(name)s] %(levelname)s: %(message)s'

# デフォルトのログレベル
_log_level = ERROR

# ロガーオブジェクトの格納用辞書
_loggers: Dict[str, py_logging.Logger] = {}

# ロギング先のファイルパス
_log_file: Optional[str] = None


def _make_file_handler(path: str) -> py_logging.Handler:
    """ログファイル用のハンドラを作成する"""
    handler = py_logging.FileHandler(path, encoding='utf-8', delay=True)
    handler.setFormatter(py_logging.Formatter(LOG_FORMAT))
    return handler


def setup_logging(level: int = ERROR, logfile: Optional[str] = None) -> None:
    """
    ロギングシステムをセットアップする

    既に作成済みのロガーにも新しいレベルとログファイルを反映する。

    Args:
        level: ログレベル（デフォルトはERROR）
        logfile: ログの出力先ファイル（デフォルトはNone）
    """
    global _log_level, _log_file
    _log_level = level

    if logfile:
        # ログディレクトリが存在しない場合は作成
        log_dir = os.path.dirname(logfile)
        if log_dir and not os.path.exists(log_dir):
            os.makedirs(log_dir)
        _log_file = os.path.abspath(logfile)

    # 既存のロガーを更新
    for logger in _loggers.values():
        logger.setLevel(_log_level)
        if _log_file and not _has_file_handler(logger, _log_file):
            logger.addHandler(_make_file_handler(_log_file))


def _has_file_handler(logger: py_logging.Logger, path: str) -> bool:
    """指定ファイルへのハンドラが既に登録されているか"""
    for handler in logger.handlers:
        if isinstance(handler, py_logging.FileHandler) and handler.baseFilename == path:
            return True
    return False


def get_log_level() -> int:
    """現在のログレベルを返す"""
    return _log_level


def get_logger(name: str) -> py_logging.Logger:
    """
    名前付きのロガーを取得する

    Args:
        name: ロガー名

    Returns:
        設定済みのロガーオブジェクト
    """
    if name in _loggers:
        return _loggers[name]

    # 新しいロガーを作成
    logger = py_logging.getLogger(name)
    logger.setLevel(_log_level)

    # コンソールハンドラーを追加（標準エラー出力）
    console = py_logging.StreamHandler(sys.stderr)
    console.setFormatter(py_logging.Formatter(LOG_FORMAT))
    logger.addHandler(console)

    # ファイルハンドラーも設定されていれば追加
    if _log_file:
        logger.addHandler(_make_file_handler(_log_file))

    _loggers[name] = logger
    return logger


def log_print(level: int, message: Any, *args, name: Optional[str] = None, **kwargs) -> None:
    """
    指定したレベルでメッセージをログに出力する

    Args:
        level: ログレベル
        message: 出力するメッセージ
        *args: メッセージのフォーマット引数
        name: ロガー名（デフォルトは'arcpack'）
        **kwargs: その他のキーワード引数
    """
    if level < _log_level:
        return

    logger = get_logger(name or DEFAULT_LOGGER_NAME)
    logger.log(level, message, *args, **kwargs)


def log_trace(e: Optional[BaseException], level: int, message: Any, *args,
              name: Optional[str] = None, **kwargs) -> None:
    """
    例外のトレース情報を含めてログに出力する

    Args:
        e: 例外オブジェクト（NoneでもOK）
        level: ログレベル
        message: 出力するメッセージ
        *args: メッセージのフォーマット引数
        name: ロガー名（デフォルトは'arcpack'）
        **kwargs: その他のキーワード引数
    """
    if level < _log_level:
        return

    # まずメッセージを出力
    log_print(level, message, *args, name=name, **kwargs)

    # スタックトレースを取得して出力
    if e is not None:
        stack = ''.join(traceback.format_exception(type(e), e, e.__traceback__))
    else:
        stack = ''.join(traceback.format_stack()[:-1])  # 自分自身の呼び出しを除外

    get_logger(name or DEFAULT_LOGGER_NAME).log(level, "スタックトレース:\n%s", stack)


def reset_logging() -> None:
    """
    ログ設定を初期状態に戻す

    ログファイルのハンドラを外し、ログレベルをERRORに戻す。
    """
    global _log_level, _log_file
    _log_level = ERROR
    _log_file = None

    for logger in _loggers.values():
        logger.setLevel(_log_level)
        for handler in list(logger.handlers):
            if isinstance(handler, py_logging.FileHandler):
                logger.removeHandler(handler)
                handler.close()
