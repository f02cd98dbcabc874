"""
Presenters for zbookmarks
Convert entry index rows, descriptions and keybindings to Markdown for the host
"""

from __future__ import annotations

from typing import List, Sequence

from ..index import BookmarkRow, FailedRow
from ..keybindings import Keybindings
from ..navigation import Mode


class BasePresenter:
    """Base presenter with common formatting utilities"""

    def escape_markdown(self, text: str) -> str:
        """Escape markdown special characters"""
        if not text:
            return ""

        # Backslash first, so the escapes added below are not doubled
        chars_to_escape = ['\\', '*', '_', '`', '[', ']', '|', '#']
        for char in chars_to_escape:
            text = text.replace(char, f'\\{char}')

        return text


class UsagePresenter(BasePresenter):
    """Keybinding help shown in Usage mode"""

    HEADER = ("KeyBinding", "Action", "Mode", "Configurable")

    def rows(self, keybindings: Keybindings) -> List[List[str]]:
        """Rows of the usage table, fixed keys first"""
        bookmarks, labels = str(Mode.BOOKMARKS), str(Mode.LABELS)
        listing = f"{bookmarks}|{labels}"
        return [
            ["Esc|Ctrl c", "Exit the zellij-bookmarks.", "*", "False"],
            ["Tab|Down Up", "Navigate through the list of bookmarks or labels.", listing, "False"],
            ["Left Right", "Switch between modes.", "*", "False"],
            ["Backspace", "Remove the last character from the filter.", listing, "False"],
            ["Enter", "Paste the selected bookmark into the terminal.", bookmarks, "False"],
            ["Enter", "Find all bookmarks associated with the selected label.", labels, "False"],
            [f"Ctrl {Mode.BOOKMARKS.value}", "Switch to Bookmarks mode.", "*", "False"],
            [f"Ctrl {Mode.LABELS.value}", "Switch to Labels mode.", "*", "False"],
            [f"Ctrl {Mode.USAGE.value}", "Switch to Usage mode to view instructions.", "*", "False"],
            [str(keybindings.edit), "Open the bookmark configuration file in an editor.", "*", "True"],
            [str(keybindings.reload), "Reload bookmarks. Required after modifying the configuration file.", "*", "True"],
            [str(keybindings.switch_filter_label), "Switch to label filtering mode.", bookmarks, "True"],
            [str(keybindings.switch_filter_id), "Switch to id filtering mode.", listing, "True"],
            [str(keybindings.describe), "Show the description of the selected bookmark.", bookmarks, "True"],
        ]

    def to_markdown(self, keybindings: Keybindings) -> str:
        markdown = [
            "## Usage",
            "",
            "| " + " | ".join(self.HEADER) + " |",
            "| " + " | ".join(["---"] * len(self.HEADER)) + " |",
        ]
        for row in self.rows(keybindings):
            markdown.append("| " + " | ".join(self.escape_markdown(cell) for cell in row) + " |")
        return "\n".join(markdown)


class BookmarksPresenter(BasePresenter):
    """Convert visible bookmark rows (and failed ones) to a Markdown table"""

    def to_markdown(self, rows: Sequence[BookmarkRow], failures: Sequence[FailedRow] = ()) -> str:
        if not rows and not failures:
            return "## Bookmarks\n\n**No bookmarks.**"

        markdown = [
            f"## Bookmarks ({len(rows)})",
            "",
            "| # | Name | Labels |",
            "|---|------|--------|",
        ]
        for row in rows:
            labels = ", ".join(self.escape_markdown(label) for label in row.labels)
            markdown.append(f"| {row.id} | **{self.escape_markdown(row.name)}** | {labels} |")

        if failures:
            markdown.extend(["", "### ⚠️ Not resolved", ""])
            for failed in failures:
                markdown.append(f"- {failed.id}. **{self.escape_markdown(failed.name)}**: {failed.message}")

        return "\n".join(markdown)


class DescribePresenter(BasePresenter):
    """Description of one bookmark with its resolved command"""

    def to_markdown(self, row: BookmarkRow) -> str:
        markdown = [f"## {self.escape_markdown(row.name)}", ""]
        markdown.append(row.description if row.description else "*No description.*")
        markdown.extend(["", "```sh", row.command, "```"])
        return "\n".join(markdown)


# Factory function for easy access
def create_presenter(content_type: str) -> BasePresenter:
    """Create appropriate presenter for content type"""
    presenters = {
        'usage': UsagePresenter(),
        'bookmarks': BookmarksPresenter(),
        'describe': DescribePresenter(),
    }
    if content_type not in presenters:
        raise ValueError(f"Unknown presenter type: {content_type}")
    return presenters[content_type]
