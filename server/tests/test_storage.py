"""
Tests for local upload storage.
"""

import asyncio
import re

import pytest

from server.storage import LocalFileStorage, StorageError


def test_make_name_format():
    """Test stored name format."""
    name = LocalFileStorage.make_name("report.pdf", timestamp_ms=1700000000000)
    assert re.fullmatch(r"1700000000000-[0-9a-f]{8}-report\.pdf", name)


def test_make_name_is_unique_within_a_millisecond():
    """Test stored names are unique within a millisecond."""
    names = {LocalFileStorage.make_name("a.pdf", timestamp_ms=1) for _ in range(50)}
    assert len(names) == 50


@pytest.mark.parametrize(
    "original, expected_suffix",
    [
        ("../../etc/passwd.pdf", "-passwd.pdf"),
        ("C:\\Users\\me\\doc.pdf", "-doc.pdf"),
        ("", "-upload.pdf"),
    ],
)
def test_make_name_drops_directories(original, expected_suffix):
    """Test stored names drop directory components."""
    name = LocalFileStorage.make_name(original)
    assert name.endswith(expected_suffix)
    assert "/" not in name and "\\" not in name


def test_save_and_delete(tmp_path):
    """Test save and delete."""
    storage = LocalFileStorage(tmp_path / "uploads")

    path = asyncio.run(storage.save("doc.pdf", b"%PDF-1.4"))

    assert path.parent == tmp_path / "uploads"
    assert path.read_bytes() == b"%PDF-1.4"
    assert [p.name for p in path.parent.iterdir()] == [path.name]

    asyncio.run(storage.delete(path))
    assert not path.exists()


def test_delete_missing_file_is_a_noop(tmp_path):
    """Test deleting a missing file is a no-op."""
    asyncio.run(LocalFileStorage(tmp_path).delete(tmp_path / "nothing.pdf"))


def test_failed_write_raises_and_leaves_no_partial_file(tmp_path, monkeypatch):
    """Test failed write raises and leaves no partial file."""
    storage = LocalFileStorage(tmp_path)

    def broken_replace(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr("server.storage.os.replace", broken_replace)

    with pytest.raises(StorageError):
        asyncio.run(storage.save("doc.pdf", b"data"))

    assert list(tmp_path.iterdir()) == []
