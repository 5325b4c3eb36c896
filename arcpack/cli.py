"""
arcpack コマンドラインツール

使い方:
    arcpack compress SOURCE [SOURCE ...] ARCHIVE
    arcpack decompress ARCHIVE DEST_DIR
    arcpack list ARCHIVE
"""

import argparse
import sys
from typing import List, Optional

from logutils import setup_logging, log_print, log_trace, DEBUG, INFO, ERROR

from .config import PackConfig, DEFAULT_CHUNK_SIZE, ZIP_NAME_ENCODING
from .errors import ArchiveError
from .handlers import supported_formats
from .interface import compress, compress_files, decompress, list_entries

LOGGER_NAME = "arcpack.cli"


def build_parser() -> argparse.ArgumentParser:
    """コマンドライン引数のパーサーを作成する"""
    parser = argparse.ArgumentParser(prog="arcpack", description="arcpack - 7z / zip 書庫の作成と展開")
    parser.add_argument("--format", dest="fmt", choices=supported_formats(), default=None,
                        help="書庫形式（省略時は拡張子から判定）")
    parser.add_argument("--debug", action="store_true", help="デバッグログを出力する")
    parser.add_argument("--log-file", default=None, help="ログの出力先ファイル")
    parser.add_argument("--chunk-size", type=int, default=DEFAULT_CHUNK_SIZE,
                        help=f"ストリーミングコピーのチャンクサイズ（デフォルト: {DEFAULT_CHUNK_SIZE}）")
    parser.add_argument("--encoding", default=ZIP_NAME_ENCODING,
                        help=f"ZIPエントリ名の文字コード（デフォルト: {ZIP_NAME_ENCODING}）")
    parser.add_argument("--follow-symlinks", action="store_true",
                        help="圧縮時にシンボリックリンクを辿る")

    subparsers = parser.add_subparsers(dest="command", required=True)

    p_compress = subparsers.add_parser("compress", help="ファイル・ディレクトリを圧縮する")
    p_compress.add_argument("sources", nargs="+", help="圧縮するファイルまたはディレクトリ")
    p_compress.add_argument("archive", help="作成する書庫のパス")

    p_decompress = subparsers.add_parser("decompress", help="書庫を展開する")
    p_decompress.add_argument("archive", help="展開する書庫のパス")
    p_decompress.add_argument("dest", help="展開先ディレクトリ")

    p_list = subparsers.add_parser("list", help="書庫内のエントリを一覧表示する")
    p_list.add_argument("archive", help="書庫のパス")

    return parser


def run(args: argparse.Namespace, config: PackConfig) -> None:
    """解析済みの引数に従ってコマンドを実行する"""
    if args.command == "compress":
        if len(args.sources) == 1:
            compress(args.sources[0], args.archive, fmt=args.fmt, config=config)
        else:
            compress_files(args.sources, args.archive, fmt=args.fmt, config=config)
        log_print(INFO, f"書庫を作成しました: {args.archive}", name=LOGGER_NAME)
    elif args.command == "decompress":
        for path in decompress(args.archive, args.dest, fmt=args.fmt, config=config):
            print(path)
    elif args.command == "list":
        for entry in list_entries(args.archive, fmt=args.fmt, config=config):
            if entry.is_directory:
                print(f"{'<DIR>':>12}  {entry.name}")
            else:
                print(f"{entry.size:>12}  {entry.name}")


def main(argv: Optional[List[str]] = None) -> int:
    """
    エントリポイント

    Args:
        argv: コマンドライン引数（省略時は sys.argv）

    Returns:
        終了コード（成功は0、書庫処理のエラーは1、引数エラーは2）
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(DEBUG if args.debug else ERROR, args.log_file)

    try:
        config = PackConfig(chunk_size=args.chunk_size, zip_name_encoding=args.encoding,
                            follow_symlinks=args.follow_symlinks)
    except ValueError as e:
        parser.error(str(e))

    try:
        run(args, config)
    except ArchiveError as e:
        log_trace(e, DEBUG, f"{args.command} に失敗しました", name=LOGGER_NAME)
        log_print(ERROR, str(e), name=LOGGER_NAME)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
