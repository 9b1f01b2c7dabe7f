"""The standard test tree fixture."""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class TreeEntry:
    """A node of a test tree; directories have no contents."""

    path: str
    contents: str | None = None

    @property
    def is_directory(self) -> bool:
        return self.contents is None


def _file(path: str) -> TreeEntry:
    name = path.rsplit("/", 1)[-1]
    return TreeEntry(path, f"This is the file '{name}'.\n")


GREEK_TREE: Sequence[TreeEntry] = (
    _file("iota"),
    TreeEntry("A"),
    _file("A/mu"),
    TreeEntry("A/B"),
    _file("A/B/lambda"),
    TreeEntry("A/B/E"),
    _file("A/B/E/alpha"),
    _file("A/B/E/beta"),
    TreeEntry("A/B/F"),
    TreeEntry("A/C"),
    TreeEntry("A/D"),
    _file("A/D/gamma"),
    TreeEntry("A/D/G"),
    _file("A/D/G/pi"),
    _file("A/D/G/rho"),
    _file("A/D/G/tau"),
    TreeEntry("A/D/H"),
    _file("A/D/H/chi"),
    _file("A/D/H/psi"),
    _file("A/D/H/omega"),
)


def write_tree(root: Path, entries: Iterable[TreeEntry] = GREEK_TREE) -> Path:
    """Create ENTRIES below ROOT and return ROOT.

    Parent directories are created as needed, so entries may come in any
    order.
    """
    root.mkdir(parents=True, exist_ok=True)
    for entry in entries:
        target = root / entry.path
        if entry.contents is None:
            target.mkdir(parents=True, exist_ok=True)
        else:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(entry.contents)
    return root
