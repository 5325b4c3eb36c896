"""
ZIPエントリ名の文字コード変換ユーティリティ

ZIPのエントリ名はUTF-8フラグ（汎用フラグのビット11）が立っていなければ
レガシーコードページのバイト列として格納される。
zipfile はフラグのない名前を cp437 として解釈するので、
cp437 でバイト列に戻してから指定のコードページで解釈し直す。
"""

# 汎用フラグのUTF-8ビット
UTF8_FLAG = 0x800


def is_ascii(text: str) -> bool:
    """
    文字列がASCII文字のみで構成されているかチェック

    Args:
        text: チェックする文字列

    Returns:
        ASCII文字のみの場合はTrue、そうでなければFalse
    """
    return all(ord(c) < 128 for c in text)


def encode_entry_name(name: str, encoding: str) -> bytes:
    """
    エントリ名をコードページのバイト列に変換する

    Args:
        name: エントリ名
        encoding: コードページ名

    Returns:
        ヘッダに書き込むバイト列

    Raises:
        UnicodeEncodeError: コードページで表現できない文字を含む場合
    """
    return name.encode(encoding)


def can_encode(name: str, encoding: str) -> bool:
    """エントリ名がコードページで表現できるかどうか"""
    try:
        encode_entry_name(name, encoding)
    except UnicodeEncodeError:
        return False
    return True


def decode_entry_name(raw_name: str, flag_bits: int, encoding: str) -> str:
    """
    zipfile が読み込んだエントリ名を本来の文字列に戻す

    Args:
        raw_name: ZipInfo.orig_filename（cp437 または UTF-8 で解釈済みの名前）
        flag_bits: ZipInfo.flag_bits
        encoding: コードページ名

    Returns:
        デコードされたエントリ名

    Raises:
        UnicodeDecodeError: コードページとして不正なバイト列の場合
    """
    # UTF-8フラグ付きの名前は zipfile がすでに正しく解釈している
    if flag_bits & UTF8_FLAG or is_ascii(raw_name):
        return raw_name
    return raw_name.encode('cp437').decode(encoding)
