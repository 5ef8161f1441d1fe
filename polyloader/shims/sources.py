"""Lookup of polyfill source files on disk."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Sequence


class ShimNotFoundError(LookupError):
    """Raised when a polyfill source file cannot be located."""

    def __init__(self, path: str, searched: Sequence[Path] = ()) -> None:
        locations = ", ".join(str(item) for item in searched)
        message = f"Could not find a file at {path}"
        if locations:
            message += f" (searched {locations})"
        super().__init__(message)
        self.path = path
        self.searched = list(searched)


def node_modules_dirs(start: Path) -> List[Path]:
    """Return ``node_modules`` directories from ``start`` up to the filesystem root."""
    current = start.expanduser().resolve()
    dirs: List[Path] = []
    for directory in (current, *current.parents):
        candidate = directory / "node_modules"
        if candidate.is_dir():
            dirs.append(candidate)
    return dirs


class ShimSourceLoader:
    """Reads polyfill sources from package directories or plain file paths."""

    def __init__(self, search_paths: Iterable[Path] = ()) -> None:
        self.search_paths = [Path(path) for path in search_paths]

    @classmethod
    def from_root(cls, root: Path, extra: Iterable[Path] = ()) -> "ShimSourceLoader":
        """Search ``extra`` first, then every node_modules above ``root``."""
        return cls([*extra, *node_modules_dirs(root)])

    def load_package_file(self, package_path: str) -> str:
        """Return the text of ``<package>/<file>`` from the first search path holding it."""
        for base in self.search_paths:
            candidate = base / package_path
            if candidate.is_file():
                return candidate.read_text(encoding="utf-8")
        raise ShimNotFoundError(package_path, self.search_paths)

    def load_file(self, path: str) -> str:
        candidate = Path(path).expanduser()
        if not candidate.is_file():
            raise ShimNotFoundError(path)
        return candidate.read_text(encoding="utf-8")


__all__ = ["ShimNotFoundError", "ShimSourceLoader", "node_modules_dirs"]
