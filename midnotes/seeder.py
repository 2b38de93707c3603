"""Demo content for a fresh vault."""

from __future__ import annotations

import sqlite3
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from .database import Database
from .errors import NoteServiceError
from .note import NoteService
from .tag import TagService


@dataclass(frozen=True)
class _SeedNote:
    title: str
    body: str
    tags: tuple[str, ...]


def _block(tag: str, text: str) -> str:
    return f"<{tag}>{text}</{tag}>"


def _list(tag: str, items: Iterable[str]) -> str:
    return "\n".join([f"<{tag}>", *(_block("li", item) for item in items), f"</{tag}>"])


def _table(header: Sequence[str], rows: Iterable[Sequence[str]]) -> str:
    def row(cell: str, cells: Sequence[str]) -> str:
        return "<tr>" + "".join(_block(cell, value) for value in cells) + "</tr>"

    return "\n".join(
        [
            "<table>",
            _block("thead", row("th", header)),
            "<tbody>",
            *(row("td", cells) for cells in rows),
            "</tbody>",
            "</table>",
        ]
    )


def _page(*parts: str) -> str:
    return "\n".join(parts)


_ERROR_ENUM_SNIPPET = "\n".join(
    (
        "#[derive(thiserror::Error)]",
        "pub enum ServiceError {",
        '    #[error("not found: {0}")]',
        "    NotFound(String),",
        '    #[error("validation failed: {0}")]',
        "    Validation(String),",
        "}",
    )
)

SEED_NOTES: tuple[_SeedNote, ...] = (
    _SeedNote(
        "Project Alpha — Architecture Overview",
        _page(
            _block("h1", "Project Alpha"),
            _block(
                "p",
                "This document outlines the architecture for "
                "<b>Project Alpha</b>, our next-gen platform.",
            ),
            _block("h2", "System Design"),
            _block(
                "p",
                "The system follows a <b>microservices architecture</b> "
                "with three primary services:",
            ),
            _list(
                "ul",
                (
                    "<b>API Gateway</b> — handles auth, rate limiting, and routing",
                    "<b>Core Service</b> — business logic and data processing",
                    "<b>Event Bus</b> — async message passing between services",
                ),
            ),
            _block("h2", "Tech Stack"),
            _list(
                "ul",
                (
                    "<b>Backend:</b> Rust + Actix-web",
                    "<b>Database:</b> PostgreSQL + Redis cache",
                    "<b>Frontend:</b> React + TypeScript",
                    "<b>Infrastructure:</b> Kubernetes + Docker",
                ),
            ),
            _block(
                "blockquote",
                "<i>Key insight:</i> The event bus ensures loose coupling between "
                "services, enabling independent deployment.",
            ),
        ),
        ("architecture", "project-alpha"),
    ),
    _SeedNote(
        "Sprint Planning — Week 20",
        _page(
            _block("h1", "Sprint 20 — Planning"),
            _block("h2", "Goals"),
            _list(
                "ol",
                (
                    "Complete API integration tests",
                    "Deploy beta to staging environment",
                    "Begin performance benchmarking",
                ),
            ),
            _block("h2", "Team Assignments"),
            _list(
                "ul",
                (
                    "<b>@alice</b> — API test suite &amp; CI pipeline",
                    "<b>@bob</b> — Staging deployment &amp; monitoring",
                    "<b>@carol</b> — Load testing with k6",
                ),
            ),
            _block("h2", "Risks"),
            _block(
                "p",
                "The database migration for v2 schema is <b>critical path</b>. "
                "Must be completed before Thursday.",
            ),
        ),
        ("sprint", "project-alpha"),
    ),
    _SeedNote(
        "Meeting Notes — Architecture Review",
        _page(
            _block("h1", "Architecture Review — 14 May"),
            _block("h2", "Attendees"),
            _block("p", "Alice, Bob, Carol, Dave"),
            _block("h2", "Agenda"),
            _list(
                "ol",
                (
                    "Review current API response times",
                    "Discuss caching strategy for user profiles",
                    "Plan migration to WebSockets for real-time features",
                ),
            ),
            _block("h2", "Decisions"),
            _list(
                "ul",
                (
                    "✅ Adopt <b>Redis</b> for session caching (target: &lt;5ms latency)",
                    "✅ Migrate to <b>WebSockets</b> by end of Q2",
                    "❌ Postpone GraphQL adoption to Q3",
                ),
            ),
            _block("h2", "Action Items"),
            _list(
                "ul",
                (
                    "[ ] Alice: Benchmark current API endpoints by Friday",
                    "[ ] Bob: Draft WebSocket migration plan",
                    "[ ] Carol: Research Redis cluster configuration",
                ),
            ),
        ),
        ("meetings", "project-alpha"),
    ),
    _SeedNote(
        "Personal Knowledge Base — Rust Patterns",
        _page(
            _block("h1", "Rust Patterns &amp; Best Practices"),
            _block("h2", "Error Handling"),
            _block(
                "p",
                "Use <code>thiserror</code> for library crates and "
                "<code>anyhow</code> for applications.",
            ),
            _block("pre", _block("code", _ERROR_ENUM_SNIPPET)),
            _block("h2", "Async Patterns"),
            _block(
                "p",
                "Prefer <code>tokio</code> for async runtime. "
                "Use <code>spawn</code> for fire-and-forget tasks.",
            ),
            _block("h2", "Testing"),
            _list(
                "ul",
                (
                    "Unit tests with <code>#[cfg(test)]</code>",
                    "Integration tests in <code>tests/</code> directory",
                    "Property-based testing with <code>proptest</code>",
                ),
            ),
        ),
        ("rust", "learning"),
    ),
    _SeedNote(
        "Travel Plans — Summer 2026",
        _page(
            _block("h1", "Summer Travel Plans"),
            _block("h2", "Destinations"),
            _list(
                "ul",
                (
                    "<b>Tokyo</b> — June 15-22",
                    "<b>Kyoto</b> — June 22-28",
                    "<b>Osaka</b> — June 28-July 2",
                ),
            ),
            _block("h2", "Packing List"),
            _list(
                "ul",
                (
                    "[ ] Passport &amp; visa documents",
                    "[ ] Travel insurance",
                    "[ ] Portable charger",
                    "[ ] Universal adapter",
                    "[ ] Lightweight rain jacket",
                ),
            ),
            _block("h2", "Budget"),
            _table(
                ("Category", "Budget"),
                (
                    ("Flights", "$1,200"),
                    ("Accommodation", "$2,400"),
                    ("Food &amp; Activities", "$1,800"),
                ),
            ),
        ),
        ("personal", "travel"),
    ),
    _SeedNote(
        "Weekly Review — 2026-W19",
        _page(
            _block("h1", "Weekly Review — Week 19"),
            _block("h2", "Accomplished"),
            _list(
                "ul",
                (
                    "✅ Shipped v2.1.0 with performance improvements",
                    "✅ Resolved 12 out of 15 open bugs",
                    "✅ Completed team performance reviews",
                ),
            ),
            _block("h2", "In Progress"),
            _list(
                "ul",
                (
                    "🔄 Documentation overhaul (60% complete)",
                    "🔄 CI/CD pipeline optimization",
                ),
            ),
            _block("h2", "Blockers"),
            _list("ul", ("⏳ Awaiting security audit results for deployment",)),
            _block("h2", "Next Week Priorities"),
            _list(
                "ol",
                (
                    "Finalize documentation overhaul",
                    "Begin Q3 roadmap planning",
                    "Schedule 1:1s with direct reports",
                ),
            ),
        ),
        ("work", "reviews"),
    ),
)


def _note_count(db: Database) -> int:
    try:
        with db.conn() as conn:
            return int(conn.execute("SELECT count(*) FROM notes").fetchone()[0])
    except sqlite3.Error:
        return 0


def _find_or_create_tag(tag_svc: TagService, name: str):
    try:
        tag = tag_svc.get_by_name(name)
    except NoteServiceError:
        tag = None
    if tag is not None:
        return tag
    try:
        return tag_svc.create(name, None, None)
    except NoteServiceError:
        return None


def seed_database(db: Database) -> None:
    """Fill an empty database with demo notes and tags; a non-empty one is left alone."""
    if _note_count(db) > 0:
        return

    note_svc = NoteService(db)
    tag_svc = TagService(db)
    for seed in SEED_NOTES:
        try:
            note = note_svc.create(seed.title, seed.body)
        except NoteServiceError:
            continue
        for tag_name in seed.tags:
            tag = _find_or_create_tag(tag_svc, tag_name)
            if tag is None:
                continue
            try:
                tag_svc.assign_to_note(tag.id, note.id)
            except NoteServiceError:
                pass