# midnotes

A notes library. Notes live in a SQLite database and come with full-text
search (FTS5), hierarchical tags, `[[wiki-link]]` backlinks, version
history with line diffs, saved smart views, file attachments, optional
application-level encryption of note text, and password-protected
encrypted ZIP export.

## Installation

```
pip install midnotes
```

To run the test suite:

```
pip install "midnotes[test]"
pytest
```

The SQLite library behind Python's `sqlite3` module must have FTS5
enabled. Key derivation needs a `cryptography` release with Argon2id
support (44 or later).

## Quick start

```python
from midnotes.database import Database
from midnotes.note import NoteService
from midnotes.tag import TagService
from midnotes.backlinks import BacklinkService
from midnotes.history import HistoryService
from midnotes.search import SearchService

with Database.open_in_memory() as db:
    notes = NoteService(db)
    tags = TagService(db)
    links = BacklinkService(db)

    design = notes.create("Design Doc", "System design")
    meeting = notes.create("Meeting Notes", "See [[Design Doc]] for details.")

    backend = tags.create("backend", None, None)
    tags.assign_to_note(backend.id, design.id)

    links.refresh(meeting.id, meeting.content)
    mentions = links.get_linked_mentions(design.id)   # [meeting note]

    notes.update(design.id, "Design Doc", "Revised system design")
    snapshots = HistoryService(db).list(design.id)    # one snapshot: "System design"

    results = SearchService(db).search("tag:backend design")
```

`Database.open(path)` opens or creates a database file, turns on WAL
journalling and foreign keys, and applies the schema migrations
(`midnotes.migrations.run`). `Database.conn()` is a context manager that
holds the connection lock and yields the `sqlite3.Connection`.

## Notes

`NoteService` creates, reads and updates notes, moves them to the trash
(`trash`), restores them (`restore`), toggles pinned and archived flags
(`toggle_pin`, `toggle_archive`, which raise `NotFoundError` for an unknown
id), and lists them (`list_active`, `list_archived`, `list_trashed`).
`delete` removes a note row; `delete_permanently` also removes its tag
assignments, backlinks and history. `search(query)` runs an FTS5 query and
returns up to 50 `(Note, rank)` pairs, best first.

Every `update` stores the previous content as a snapshot.
`HistoryService` lists snapshots (newest first, up to 100), restores one
into its note, and diffs snapshots line by line (`diff`,
`diff_with_current`), returning `DiffLine` items whose `kind` is
`DiffKind.LEFT`, `RIGHT` or `BOTH`. `midnotes.history.diff_lines` does the
same for any two texts.

## Tags and backlinks

`TagService` creates, renames and deletes tags, nests them under a parent
(`list_roots`, `get_children`, `get_all`), and assigns them to notes
(`assign_to_note`, `remove_from_note`, `get_tags_for_note`,
`get_notes_for_tag`). An empty tag name raises `InvalidInputError`.

`BacklinkService.refresh(note_id, content)` replaces a note's outgoing
links with the `[[Title]]` references in the content. Titles resolve by
exact match first, then by a full-text prefix match; unresolved titles are
skipped.

## Search syntax

`SearchService.search` takes full-text terms together with filters and
returns up to 50 untrashed notes as `SearchResult` items (pinned first,
then most recently updated; `snippet` is the first 200 characters):

- `tag:<name>` keeps only notes carrying the tag
- `has:todo` keeps only notes containing an open `[ ]` item
- `path:<prefix>` is recognised by `parse_query` and taken out of the
  full-text part, but does not narrow the results

Queries can be saved as smart views with `save_smart_view`, listed with
`list_smart_views`, removed with `delete_smart_view` and run with
`execute_smart_view`, which raises `NotFoundError` for an unknown name.

## Encryption

- `midnotes.keychain.derive_key(password, salt)` derives a 32-byte key
  with Argon2id; `generate_salt()` returns 16 random bytes;
  `validate_password_strength` raises `WeakPasswordError` below 8 bytes.
- `midnotes.cipher` provides XChaCha20-Poly1305 and AES-256-GCM; the
  random nonce is prepended to the ciphertext, and failures raise
  `CipherError`.
- After `Database.set_encryption_key(key)`, `NoteService.create` stores
  the title and content encrypted (hex-encoded), and `NoteService.get` and
  the `list_*` methods decrypt them. `update`, `search`, backlinks and
  history work on the stored text as it is.

## Export and import

```python
from midnotes.export import ExportService

password = "password"
exporter = ExportService(db)
exporter.export_notes([design.id], "backup.zip", password)
imported = exporter.import_notes("backup.zip", password)
```

The archive holds a `_metadata.json` entry with the salt, and one
`<note id>.enc` entry per note, encrypted with a key derived from the
password. Importing with another password raises `InvalidInputError`.
Imported notes whose id already exists are not overwritten.

## Other pieces

- `midnotes.markup` renders Markdown (tables, footnotes, strikethrough,
  task lists) to HTML, strips HTML tags, builds plain-text summaries, and
  extracts wiki-link titles.
- `midnotes.attachments.AttachmentManager` stores files under a directory
  with generated names that keep the file extension.
- `midnotes.watcher.FileWatcher.watch(path)` reports `FileEvent`s
  (created, modified, deleted) under a directory; `next_event(timeout)`
  waits, `try_next_event()` returns `None` when nothing is pending.
- `midnotes.seeder.seed_database(db)` fills an empty database with demo
  notes and tags.
- `midnotes.plugin_host.PluginManager` registers the `.wasm` files in a
  directory by file stem; `midnotes.plugin_api` defines `PluginInput`,
  `PluginOutput` and `validate_output`.

## What it does not do

- It is a library only: there is no command, desktop window or vault
  lock screen.
- Plugins are registered but not executed: there is no module runtime,
  so `WasmPlugin.process` returns an empty string.