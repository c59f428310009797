"""The user's set of chosen file paths, and the repo it belongs to."""

from __future__ import annotations

from collections.abc import Iterable, Iterator


class SelectionSet:
    """Unordered set of selected file paths, iterated in sorted order."""

    def __init__(self, paths: Iterable[str] = ()) -> None:
        self._paths: set[str] = set(paths)

    def toggle(self, path: str, included: bool) -> None:
        if included:
            self._paths.add(path)
        else:
            self._paths.discard(path)

    def clear(self) -> None:
        self._paths.clear()

    def set_all(self, paths: Iterable[str], included: bool) -> int:
        """Include or exclude every path currently in view.

        Returns how many memberships actually changed.
        """
        changed = 0
        for path in paths:
            if (path in self._paths) != included:
                self.toggle(path, included)
                changed += 1
        return changed

    def sorted(self) -> list[str]:
        return sorted(self._paths)

    def __contains__(self, path: object) -> bool:
        return path in self._paths

    def __len__(self) -> int:
        return len(self._paths)

    def __iter__(self) -> Iterator[str]:
        return iter(self.sorted())

    def __repr__(self) -> str:
        return f"SelectionSet({self.sorted()!r})"


class RepoSession:
    """Current repository plus its selection.

    Switching repositories always starts from an empty selection.
    """

    def __init__(self) -> None:
        self.owner: str | None = None
        self.name: str | None = None
        self.selection = SelectionSet()

    @property
    def repo_id(self) -> str | None:
        if self.owner is None or self.name is None:
            return None
        return f"{self.owner}/{self.name}"

    def switch_repo(self, owner: str, name: str) -> None:
        self.owner = owner
        self.name = name
        self.selection.clear()
