"""
Text acquisition strategies for the Intake context.

Every way of collecting free text from the user (job descriptions, final letters)
implements the same contract:

    acquire_text(prompt_label) -> str

The command line picks a strategy; nothing downstream knows which one was used.
"""

import sys
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, TextIO

import click
import typer

PASTE_TERMINATOR = "END"


class TextAcquirer(ABC):
    """Collects one block of text from the user."""

    @abstractmethod
    def acquire_text(self, prompt_label: str) -> str:
        """Return the collected text, stripped of surrounding whitespace."""
        pass


class PromptAcquirer(TextAcquirer):
    """Single-line prompt, with an optional default returned on empty input."""

    def __init__(self, default: Optional[str] = None):
        self.default = default

    def acquire_text(self, prompt_label: str) -> str:
        value = typer.prompt(prompt_label, default=self.default, show_default=False)
        return value.strip()


class PasteAcquirer(TextAcquirer):
    """
    Multi-line paste read from a stream.

    Reading stops at end of input or at a line containing only the terminator.
    """

    def __init__(self, stream: Optional[TextIO] = None, terminator: str = PASTE_TERMINATOR):
        self.stream = stream
        self.terminator = terminator

    def acquire_text(self, prompt_label: str) -> str:
        stream = self.stream or sys.stdin
        typer.echo(f"{prompt_label} (finish with a line containing only {self.terminator})", err=True)

        lines = []
        for line in stream:
            if line.strip() == self.terminator:
                break
            lines.append(line.rstrip("\n"))
        return "\n".join(lines).strip()


class FileAcquirer(TextAcquirer):
    """Reads the whole text from a file."""

    def __init__(self, file_path: Path):
        self.file_path = Path(file_path)

    def acquire_text(self, prompt_label: str) -> str:
        if not self.file_path.exists():
            raise FileNotFoundError(f"{prompt_label}: file not found: {self.file_path}")
        return self.file_path.read_text(encoding="utf-8").strip()


class EditorAcquirer(TextAcquirer):
    """
    Round-trips text through the user's $EDITOR.

    Returns the initial text unchanged if the editor is closed without saving.
    """

    def __init__(self, initial_text: str = "", extension: str = ".md"):
        self.initial_text = initial_text
        self.extension = extension

    def acquire_text(self, prompt_label: str) -> str:
        typer.echo(f"{prompt_label} (opening editor...)", err=True)
        edited = click.edit(self.initial_text, extension=self.extension)
        if edited is None:
            return self.initial_text.strip()
        return edited.strip()


def get_acquirer(
    source: str,
    file_path: Optional[Path] = None,
    initial_text: str = "",
) -> TextAcquirer:
    """
    Build a text acquirer by name.

    Args:
        source: One of "prompt", "paste", "file", "editor"
        file_path: Required when source is "file"
        initial_text: Starting text for "editor", default for "prompt"

    Returns:
        TextAcquirer instance

    Raises:
        ValueError: If source is unknown or "file" is requested without a path
    """
    source = source.lower()
    if source == "prompt":
        return PromptAcquirer(default=initial_text or None)
    elif source == "paste":
        return PasteAcquirer()
    elif source == "file":
        if file_path is None:
            raise ValueError("A file path is required when source is 'file'")
        return FileAcquirer(file_path)
    elif source == "editor":
        return EditorAcquirer(initial_text=initial_text)
    else:
        raise ValueError(
            f"Unknown text source: {source}. Use 'prompt', 'paste', 'file' or 'editor'"
        )
