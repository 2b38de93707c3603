"""Data exchanged between the application and its plugins."""

from __future__ import annotations

from dataclasses import dataclass, field

MAX_OUTPUT_BYTES = 1_000_000


class PluginApi:
    """Functions the application exposes to plugins."""


@dataclass
class PluginInput:
    """What a plugin is given to process."""

    content: str
    title: str
    tags: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.tags = list(self.tags)


@dataclass
class PluginOutput:
    """What a plugin hands back."""

    content: str
    additions: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.additions = list(self.additions)


def validate_output(output: PluginOutput) -> None:
    """Check a plugin's output before it is applied; raise ValueError if it is unusable."""
    if not output.content:
        raise ValueError("plugin returned empty content")
    if len(output.content.encode("utf-8")) > MAX_OUTPUT_BYTES:
        raise ValueError("plugin output exceeds 1MB limit")