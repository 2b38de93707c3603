import pytest

from midnotes.database import Database
from midnotes.errors import InvalidInputError, NoteServiceError
from midnotes.note import NoteService
from midnotes.tag import TagService


@pytest.fixture
def db():
    database = Database.open_in_memory()
    yield database
    database.close()


@pytest.fixture
def svc(db):
    # Tag-only tests assign tags to note ids that do not exist.
    with db.conn() as conn:
        conn.execute("PRAGMA foreign_keys = OFF")
    return TagService(db)


def test_creating_a_tag_and_getting_by_id_returns_it(svc):
    tag = svc.create("work", None, None)
    assert tag.name == "work"
    fetched = svc.get(tag.id)
    assert fetched is not None
    assert fetched.name == "work"


def test_creating_a_tag_with_parent_creates_hierarchy(svc):
    parent = svc.create("work", None, None)
    child = svc.create("projects", parent.id, None)
    assert child.parent_id == parent.id
    assert svc.get(child.id).parent_id == parent.id


def test_getting_a_tag_by_name_returns_correct_tag(svc):
    svc.create("unique-name", None, None)
    tag = svc.get_by_name("unique-name")
    assert tag.name == "unique-name"


def test_getting_missing_tag_by_name_returns_none(svc):
    assert svc.get_by_name("missing") is None


def test_updating_tag_name_and_color_persists_changes(svc):
    tag = svc.create("old", None, None)
    svc.update(tag.id, "new", None, "#ff0000")
    updated = svc.get(tag.id)
    assert updated.name == "new"
    assert updated.color == "#ff0000"


def test_deleting_a_tag_removes_it(svc):
    tag = svc.create("delete-me", None, None)
    svc.delete(tag.id)
    assert svc.get(tag.id) is None


def test_root_tags_have_no_parent(svc):
    svc.create("root1", None, None)
    svc.create("root2", None, None)
    parent = svc.create("parent", None, None)
    svc.create("child", parent.id, None)
    roots = svc.list_roots()
    assert len(roots) == 3
    assert [t.name for t in roots] == ["parent", "root1", "root2"]


def test_getting_children_of_a_parent_tag_works(svc):
    parent = svc.create("parent", None, None)
    svc.create("c2", parent.id, None)
    svc.create("c1", parent.id, None)
    children = svc.get_children(parent.id)
    assert [t.name for t in children] == ["c1", "c2"]


def test_assigning_tag_to_note_and_listing_tags_works(svc):
    tag = svc.create("devops", None, None)
    svc.assign_to_note(tag.id, "note-1")
    tags = svc.get_tags_for_note("note-1")
    assert len(tags) == 1
    assert tags[0].name == "devops"


def test_assigning_twice_keeps_one_assignment(svc):
    tag = svc.create("devops", None, None)
    svc.assign_to_note(tag.id, "note-1")
    svc.assign_to_note(tag.id, "note-1")
    assert svc.get_notes_for_tag(tag.id) == ["note-1"]


def test_removing_tag_from_note_clears_it(svc):
    tag = svc.create("temp", None, None)
    svc.assign_to_note(tag.id, "note-1")
    svc.remove_from_note(tag.id, "note-1")
    assert svc.get_tags_for_note("note-1") == []


def test_deleting_tag_clears_note_assignments(svc):
    tag = svc.create("gone", None, None)
    svc.assign_to_note(tag.id, "note-1")
    svc.delete(tag.id)
    assert svc.get_tags_for_note("note-1") == []
    assert svc.get_notes_for_tag(tag.id) == []


def test_creating_tag_with_empty_name_is_rejected(svc):
    with pytest.raises(InvalidInputError):
        svc.create("", None, None)


def test_updating_tag_with_empty_name_is_rejected(svc):
    tag = svc.create("keep", None, None)
    with pytest.raises(InvalidInputError):
        svc.update(tag.id, "", None, None)
    assert svc.get(tag.id).name == "keep"


def test_duplicate_tag_name_is_rejected(svc):
    svc.create("dup", None, None)
    with pytest.raises(NoteServiceError):
        svc.create("dup", None, None)


def test_listing_all_tags_returns_every_tag(svc):
    svc.create("b", None, None)
    svc.create("a", None, None)
    assert [t.name for t in svc.get_all()] == ["a", "b"]


def test_get_notes_for_tag_orders_by_note_id(svc):
    tag = svc.create("t", None, None)
    svc.assign_to_note(tag.id, "note-b")
    svc.assign_to_note(tag.id, "note-a")
    assert svc.get_notes_for_tag(tag.id) == ["note-a", "note-b"]


def test_creating_assigning_and_removing_tags_from_notes(db):
    note_svc = NoteService(db)
    tag_svc = TagService(db)
    note = note_svc.create("Tagged Note", "Content")
    tag_a = tag_svc.create("work", None, None)
    tag_b = tag_svc.create("personal", None, None)

    tag_svc.assign_to_note(tag_a.id, note.id)
    tag_svc.assign_to_note(tag_b.id, note.id)
    assert len(tag_svc.get_tags_for_note(note.id)) == 2
    assert note.id in tag_svc.get_notes_for_tag(tag_a.id)

    tag_svc.remove_from_note(tag_b.id, note.id)
    tags = tag_svc.get_tags_for_note(note.id)
    assert len(tags) == 1
    assert tags[0].name == "work"


def test_tag_parent_child_hierarchy_update_and_delete(db):
    tag_svc = TagService(db)
    root = tag_svc.create("work", None, None)
    child = tag_svc.create("projects", root.id, None)
    tag_svc.create("internal", root.id, None)

    assert len(tag_svc.get_children(root.id)) == 2
    assert any(t.id == root.id for t in tag_svc.list_roots())

    tag_svc.update(child.id, "public-projects", None, "#ff0000")
    updated = tag_svc.get(child.id)
    assert updated.name == "public-projects"
    assert updated.color == "#ff0000"

    tag_svc.delete(child.id)
    assert tag_svc.get(child.id) is None


def test_tagging_notes_and_listing_roots(db):
    note_svc = NoteService(db)
    tag_svc = TagService(db)
    n1 = note_svc.create("Rust Ownership", "Learn about borrowing")
    n2 = note_svc.create("Rust Traits", "Learn about generics")
    tag = tag_svc.create("rust", None, None)
    tag_svc.assign_to_note(tag.id, n1.id)
    tag_svc.assign_to_note(tag.id, n2.id)

    assert any(t.name == "rust" for t in tag_svc.list_roots())
    assert any(t.name == "rust" for t in tag_svc.get_tags_for_note(n1.id))

    tag_svc.remove_from_note(tag.id, n1.id)
    assert tag_svc.get_tags_for_note(n1.id) == []
    assert tag_svc.get_notes_for_tag(tag.id) == [n2.id]