"""テスト用のツリー作成・比較ヘルパー"""

import os
import random
from typing import Dict, Optional

# テストで使う小さいチャンクサイズ
SMALL_CHUNK = 64

# 非ASCIIのファイル名（GBKで表現できる文字）
CJK_DIR = "中文目录"
CJK_FILE = "文件名.txt"


def random_bytes(size: int, seed: int = 0) -> bytes:
    return random.Random(seed).randbytes(size)


def write_file(path: str, data: bytes) -> str:
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, 'wb') as f:
        f.write(data)
    return path


def build_tree(root: str, chunk_size: int = SMALL_CHUNK) -> str:
    """
    入れ子のディレクトリ・空ディレクトリ・0バイトファイル・
    チャンク境界をまたぐファイル・非ASCII名を含むツリーを作る
    """
    write_file(os.path.join(root, "a.txt"), b"hello")
    write_file(os.path.join(root, "zero.bin"), b"")
    write_file(os.path.join(root, "nested", "deeper", "deepest", "data.bin"),
               random_bytes(chunk_size * 3 + 5, seed=1))
    write_file(os.path.join(root, "nested", "minus.bin"), random_bytes(chunk_size - 1, seed=2))
    write_file(os.path.join(root, "nested", "exact.bin"), random_bytes(chunk_size, seed=3))
    write_file(os.path.join(root, "nested", "plus.bin"), random_bytes(chunk_size + 1, seed=4))
    os.makedirs(os.path.join(root, "nested", "empty_dir"))
    os.makedirs(os.path.join(root, "only_empty", "inner_empty"))
    write_file(os.path.join(root, CJK_DIR, CJK_FILE), "内容".encode('utf-8'))
    return root


def snapshot(root: str) -> Dict[str, Optional[bytes]]:
    """
    ツリーを {相対パス: 内容} の辞書にする

    ディレクトリは末尾 '/' のキーで値は None
    """
    result: Dict[str, Optional[bytes]] = {}
    for dirpath, dirnames, filenames in os.walk(root):
        rel = os.path.relpath(dirpath, root).replace(os.sep, '/')
        prefix = "" if rel == "." else rel + "/"
        if prefix:
            result[prefix] = None
        for name in filenames:
            with open(os.path.join(dirpath, name), 'rb') as f:
                result[prefix + name] = f.read()
    return result


def archive_name(tmp_path, fmt: str, stem: str = "archive") -> str:
    return os.path.join(str(tmp_path), f"{stem}.{fmt}")


# ランダムなツリーで使う名前（GBKで表現できる文字のみ）
RANDOM_NAME_STEMS = ["data", "log", "画像", "资料", "notes", "ファイル"]


def random_file_size(rng: random.Random, chunk_size: int = SMALL_CHUNK) -> int:
    """0バイト、チャンク境界の前後、数チャンク分のいずれかのサイズを返す"""
    return rng.choice([
        0,
        1,
        chunk_size - 1,
        chunk_size,
        chunk_size + 1,
        chunk_size * 2,
        rng.randrange(chunk_size * 4),
    ])


def build_random_tree(root: str, seed: int, max_depth: int = 4, chunk_size: int = SMALL_CHUNK) -> str:
    """
    seed から決まるランダムなツリーを作る

    入れ子の深さ・空ディレクトリ・0バイトファイル・チャンク境界付近のサイズを含む。
    同じディレクトリ内の名前は番号で重複しないようにする。
    """
    rng = random.Random(seed)
    os.makedirs(root)
    stack = [(root, 0)]
    while stack:
        path, depth = stack.pop()
        for i in range(rng.randrange(4)):
            name = f"{rng.choice(RANDOM_NAME_STEMS)}_{i}.bin"
            write_file(os.path.join(path, name), rng.randbytes(random_file_size(rng, chunk_size)))
        if depth >= max_depth:
            continue
        for i in range(rng.randrange(4)):
            child = os.path.join(path, f"{rng.choice(RANDOM_NAME_STEMS)}_dir{i}")
            os.makedirs(child)
            stack.append((child, depth + 1))
    return root


def damage(data: bytes, rng: random.Random) -> bytes:
    """書庫のバイト列を1ビット反転させるか、途中で切り詰める"""
    if rng.random() < 0.3:
        return data[:rng.randrange(1, len(data))]
    broken = bytearray(data)
    pos = rng.randrange(len(broken))
    broken[pos] ^= 1 << rng.randrange(8)
    return bytes(broken)
