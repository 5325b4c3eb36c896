"""
arcpack エントリーポイント

このモジュールは `python -m arcpack` コマンドで実行されたときに
cli.py のメイン機能を呼び出します。
"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
