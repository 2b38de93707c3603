import pytest

from midnotes.attachments import AttachmentError, AttachmentManager, AttachmentNotFoundError


@pytest.fixture
def manager(tmp_path):
    return AttachmentManager(tmp_path / ".attachments")


def test_storing_and_retrieving_attachment_bytes_works(manager):
    path = manager.store("test.txt", b"hello world")
    assert path.endswith(".txt")
    assert manager.get(path) == b"hello world"


def test_deleting_an_attachment_removes_it(manager):
    path = manager.store("test.txt", b"data")
    manager.delete(path)
    assert not manager.path(path).exists()
    with pytest.raises(AttachmentNotFoundError):
        manager.get(path)


def test_getting_nonexistent_attachment_returns_error(manager):
    with pytest.raises(AttachmentNotFoundError) as excinfo:
        manager.get("nonexistent.txt")
    assert excinfo.value.relative_path == "nonexistent.txt"
    assert isinstance(excinfo.value, AttachmentError)


def test_file_without_extension_is_stored_as_bin(manager):
    path = manager.store("README", b"x")
    assert path.endswith(".bin")
    assert manager.get(path) == b"x"


def test_hidden_file_without_extension_is_stored_as_bin(manager):
    path = manager.store(".profile", b"y")
    assert path.endswith(".bin")


def test_store_creates_base_directory(tmp_path):
    base = tmp_path / "a" / "b"
    mgr = AttachmentManager(base)
    path = mgr.store("pic.png", b"\x89PNG")
    assert base.is_dir()
    assert (base / path).read_bytes() == b"\x89PNG"


def test_path_joins_base_and_relative(manager, tmp_path):
    assert manager.path("x.txt") == tmp_path / ".attachments" / "x.txt"


def test_each_store_gets_a_fresh_name(manager):
    first = manager.store("same.txt", b"1")
    second = manager.store("same.txt", b"2")
    assert first != second
    assert manager.get(first) == b"1"
    assert manager.get(second) == b"2"


def test_deleting_missing_attachment_is_harmless(manager):
    kept = manager.store("keep.txt", b"kept")
    manager.delete("missing.txt")
    assert manager.get(kept) == b"kept"