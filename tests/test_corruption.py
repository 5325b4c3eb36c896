import random

import pytest

from arcpack import CorruptArchive, UnsupportedEntry, compress, decompress

from .helpers import archive_name, damage, write_file

# 1つの seed で試す壊れた書庫の数
CASES_PER_SEED = 25


@pytest.mark.parametrize("seed", [3, 11, 29, 97])
def test_damaged_archives_raise_typed_errors(tmp_path, sample_tree, fmt, small_config, seed):
    archive = archive_name(tmp_path, fmt)
    compress(sample_tree, archive, config=small_config)
    with open(archive, 'rb') as f:
        data = f.read()
    rng = random.Random(seed)

    for i in range(CASES_PER_SEED):
        broken = write_file(str(tmp_path / "damaged" / f"case{i}.{fmt}"), damage(data, rng))
        # 壊れ方によっては検出されずに展開できることもある
        try:
            decompress(broken, str(tmp_path / "out" / f"case{i}"), config=small_config)
        except (CorruptArchive, UnsupportedEntry):
            pass


@pytest.mark.parametrize("seed", [5, 13])
def test_truncated_archives_are_corrupt(tmp_path, sample_tree, fmt, seed):
    archive = archive_name(tmp_path, fmt)
    compress(sample_tree, archive)
    with open(archive, 'rb') as f:
        data = f.read()
    rng = random.Random(seed)

    for i in range(10):
        cut = rng.randrange(1, len(data) - 1)
        broken = write_file(str(tmp_path / "truncated" / f"case{i}.{fmt}"), data[:cut])
        with pytest.raises(CorruptArchive):
            decompress(broken, str(tmp_path / "out" / f"case{i}"))
