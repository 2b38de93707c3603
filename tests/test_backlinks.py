import pytest

from midnotes.backlinks import BacklinkService
from midnotes.database import Database
from midnotes.note import NoteService


@pytest.fixture
def services():
    db = Database.open_in_memory()
    yield NoteService(db), BacklinkService(db)
    db.close()


def test_extracting_wiki_links_from_content_returns_titles():
    links = BacklinkService.extract_links("See [[Data Models]] and [[API Design]].")
    assert links == ["Data Models", "API Design"]


def test_content_without_wiki_links_returns_empty():
    assert BacklinkService.extract_links("No links here.") == []


def test_empty_content_returns_empty_link_list():
    assert BacklinkService.extract_links("") == []


def test_wiki_links_with_whitespace_are_trimmed():
    assert BacklinkService.extract_links("[[  Spaced Out  ]]") == ["Spaced Out"]


def test_blank_wiki_links_are_dropped():
    assert BacklinkService.extract_links("[[   ]] and [[Real]]") == ["Real"]


def test_refreshing_backlinks_and_getting_mentions_works(services):
    note_svc, bl_svc = services
    target = note_svc.create("Target Note", "Content")
    source = note_svc.create("Source Note", "See [[Target Note]] for details.")
    bl_svc.refresh(source.id, source.content)
    mentions = bl_svc.get_linked_mentions(target.id)
    assert len(mentions) == 1
    assert mentions[0].id == source.id
    assert mentions[0].title == "Source Note"


def test_getting_outgoing_links_from_a_note_works(services):
    note_svc, bl_svc = services
    target = note_svc.create("Target", "Content")
    source = note_svc.create("Source", "See [[Target]].")
    bl_svc.refresh(source.id, source.content)
    outgoing = bl_svc.get_outgoing_links(source.id)
    assert len(outgoing) == 1
    assert outgoing[0].id == target.id


def test_refreshing_backlinks_replaces_previous_links(services):
    note_svc, bl_svc = services
    t1 = note_svc.create("Target1", "C")
    t2 = note_svc.create("Target2", "C")
    src = note_svc.create("Source", "[[Target1]]")
    bl_svc.refresh(src.id, src.content)
    assert len(bl_svc.get_linked_mentions(t1.id)) == 1
    bl_svc.refresh(src.id, "[[Target2]]")
    assert len(bl_svc.get_linked_mentions(t1.id)) == 0
    assert len(bl_svc.get_linked_mentions(t2.id)) == 1


def test_repeated_link_is_stored_once(services):
    note_svc, bl_svc = services
    target = note_svc.create("Target", "C")
    src = note_svc.create("Source", "[[Target]] and again [[Target]]")
    bl_svc.refresh(src.id, src.content)
    assert [n.id for n in bl_svc.get_linked_mentions(target.id)] == [src.id]


def test_unresolved_links_are_ignored(services):
    note_svc, bl_svc = services
    src = note_svc.create("Source", "[[Nowhere At All]]")
    bl_svc.refresh(src.id, src.content)
    assert bl_svc.get_outgoing_links(src.id) == []


def test_resolving_exact_title_match_returns_note_id(services):
    note_svc, bl_svc = services
    note = note_svc.create("Exact Title", "Content")
    assert bl_svc.resolve_title("Exact Title") == note.id


def test_resolving_title_prefix_uses_full_text_search(services):
    note_svc, bl_svc = services
    note = note_svc.create("Design Doc", "Content")
    assert bl_svc.resolve_title("Design") == note.id


def test_resolving_nonexistent_title_returns_none(services):
    _, bl_svc = services
    assert bl_svc.resolve_title("Nonexistent Note") is None


def test_resolving_title_with_quotes_returns_none(services):
    _, bl_svc = services
    assert bl_svc.resolve_title('Say "hi"') is None


def test_backlinks_refresh_mentions_outgoing_and_clear(services):
    note_svc, bl_svc = services
    target = note_svc.create("Design Doc", "Content")
    source = note_svc.create("Meeting Notes", "See [[Design Doc]] for details.")

    bl_svc.refresh(source.id, source.content)
    mentions = bl_svc.get_linked_mentions(target.id)
    assert len(mentions) == 1
    assert mentions[0].id == source.id

    outgoing = bl_svc.get_outgoing_links(source.id)
    assert len(outgoing) == 1
    assert outgoing[0].id == target.id

    bl_svc.refresh(source.id, "No links here.")
    assert len(bl_svc.get_linked_mentions(target.id)) == 0