"""Tests for repopick.tree: flat listing to nested hierarchy."""

import random

import pytest
from pydantic import ValidationError

from repopick.tree import Entry, EntryKind, Node, build_tree, count_nodes, iter_files


def _walk(node: Node):
    for child in node.children or []:
        yield child
        yield from _walk(child)


def _shape(node: Node):
    """Structural fingerprint of a tree for equality checks."""
    return (
        node.name,
        node.path,
        node.kind.value,
        node.id,
        None if node.children is None else [_shape(c) for c in node.children],
    )


# ── Entry ───────────────────────────────────────────────────────────


class TestEntry:
    def test_kind_aliases(self):
        assert Entry(path="a", kind="tree").kind is EntryKind.DIR
        assert Entry(path="a", kind="directory").kind is EntryKind.DIR
        assert Entry(path="a", kind="blob").kind is EntryKind.FILE
        assert Entry(path="a", kind="commit").kind is EntryKind.FILE

    def test_unknown_kind_rejected(self):
        with pytest.raises(ValidationError):
            Entry(path="a", kind="symlink")

    def test_slashes_stripped(self):
        assert Entry(path="/src/a.py/", kind="file").path == "src/a.py"

    def test_empty_path_rejected(self):
        with pytest.raises(ValidationError):
            Entry(path="/", kind="file")


# ── build_tree ──────────────────────────────────────────────────────


class TestBuildTree:
    def test_empty_input_gives_empty_root(self):
        root = build_tree([])
        assert root.path == ""
        assert root.kind is EntryKind.DIR
        assert root.children == []

    def test_root_name(self):
        assert build_tree([], root_name="widget-api").name == "widget-api"

    def test_every_entry_appears_exactly_once(self, sample_entries):
        root = build_tree(sample_entries)
        paths = [n.path for n in _walk(root)]
        assert sorted(paths) == sorted(e.path for e in sample_entries)
        assert len(paths) == len(set(paths))

    def test_nesting(self, sample_entries):
        root = build_tree(sample_entries)
        src = next(c for c in root.children if c.path == "src")
        assert [c.path for c in src.children] == ["src/utils", "src/main.py"]
        utils = src.children[0]
        assert [c.name for c in utils.children] == ["helpers.py"]

    def test_files_have_no_children_dirs_have_list(self, sample_entries):
        root = build_tree(sample_entries)
        for node in _walk(root):
            if node.is_dir:
                assert isinstance(node.children, list)
            else:
                assert node.children is None

    def test_directories_before_files_then_alphabetical(self):
        entries = [
            Entry(path="zeta.txt", kind="file"),
            Entry(path="alpha.txt", kind="file"),
            Entry(path="zdir", kind="dir"),
            Entry(path="adir", kind="dir"),
        ]
        root = build_tree(entries)
        assert [c.name for c in root.children] == ["adir", "zdir", "alpha.txt", "zeta.txt"]

    def test_name_ordering_is_case_insensitive(self):
        entries = [
            Entry(path="b.txt", kind="file"),
            Entry(path="README.md", kind="file"),
            Entry(path="a.txt", kind="file"),
        ]
        root = build_tree(entries)
        assert [c.name for c in root.children] == ["a.txt", "b.txt", "README.md"]

    def test_case_tie_is_deterministic(self):
        entries = [Entry(path="a.txt", kind="file"), Entry(path="A.txt", kind="file")]
        first = [c.name for c in build_tree(entries).children]
        second = [c.name for c in build_tree(list(reversed(entries))).children]
        assert first == second == ["A.txt", "a.txt"]

    def test_accented_names_sort_with_base_letter(self):
        entries = [
            Entry(path="f.txt", kind="file"),
            Entry(path="été.txt", kind="file"),
            Entry(path="e.txt", kind="file"),
            Entry(path="École.txt", kind="file"),
        ]
        root = build_tree(entries)
        assert [c.name for c in root.children] == [
            "e.txt",
            "École.txt",
            "été.txt",
            "f.txt",
        ]

    def test_sibling_order_invariant_under_permutation(self, sample_entries):
        expected = _shape(build_tree(sample_entries))
        rng = random.Random(1234)
        for _ in range(10):
            shuffled = sample_entries[:]
            rng.shuffle(shuffled)
            assert _shape(build_tree(shuffled)) == expected

    def test_every_directory_sorted(self, sample_entries):
        root = build_tree(sample_entries)
        for node in [root, *_walk(root)]:
            if not node.is_dir:
                continue
            kinds = [c.is_dir for c in node.children]
            assert kinds == sorted(kinds, reverse=True)
            dirs = [c.name.casefold() for c in node.children if c.is_dir]
            files = [c.name.casefold() for c in node.children if not c.is_dir]
            assert dirs == sorted(dirs)
            assert files == sorted(files)

    @pytest.mark.parametrize("reverse", [False, True])
    def test_parent_resolution_is_order_independent(self, reverse):
        entries = [
            Entry(path="src/a.js", kind="file"),
            Entry(path="src", kind="dir"),
        ]
        if reverse:
            entries.reverse()
        root = build_tree(entries)
        assert len(root.children) == 1
        src = root.children[0]
        assert (src.name, src.kind) == ("src", EntryKind.DIR)
        assert [(c.name, c.kind) for c in src.children] == [("a.js", EntryKind.FILE)]

    def test_orphan_promoted_to_root(self):
        """An entry whose parent dir is missing (truncated listing) is kept at root."""
        root = build_tree([Entry(path="orphan/x.js", kind="file", id="o1")])
        assert len(root.children) == 1
        orphan = root.children[0]
        assert orphan.path == "orphan/x.js"
        assert orphan.name == "x.js"

    def test_orphan_directory_keeps_its_children(self):
        entries = [
            Entry(path="missing/pkg", kind="dir"),
            Entry(path="missing/pkg/mod.py", kind="file"),
        ]
        root = build_tree(entries)
        assert [c.path for c in root.children] == ["missing/pkg"]
        assert [c.path for c in root.children[0].children] == ["missing/pkg/mod.py"]

    def test_parent_that_is_a_file_promotes_child(self):
        entries = [
            Entry(path="weird", kind="file"),
            Entry(path="weird/inner.txt", kind="file"),
        ]
        root = build_tree(entries)
        assert sorted(c.path for c in root.children) == ["weird", "weird/inner.txt"]

    def test_duplicate_path_last_write_wins(self):
        entries = [
            Entry(path="a.txt", kind="file", id="first"),
            Entry(path="a.txt", kind="file", id="second"),
        ]
        root = build_tree(entries)
        assert [(c.path, c.id) for c in root.children] == [("a.txt", "second")]

    def test_idempotent(self, sample_entries):
        assert _shape(build_tree(sample_entries)) == _shape(build_tree(sample_entries))


# ── helpers ─────────────────────────────────────────────────────────


class TestHelpers:
    def test_iter_files_in_display_order(self, sample_entries):
        root = build_tree(sample_entries)
        assert [n.path for n in iter_files(root)] == [
            "docs/guide.md",
            "src/utils/helpers.py",
            "src/main.py",
            "Dockerfile",
            "README.md",
        ]

    def test_count_nodes(self, sample_entries):
        assert count_nodes(build_tree(sample_entries)) == (3, 5)

    def test_to_dict_omits_children_on_files(self):
        root = build_tree([Entry(path="d", kind="dir"), Entry(path="d/f", kind="file", id="x")])
        data = root.to_dict()
        d = data["children"][0]
        assert d["type"] == "dir"
        assert d["children"][0] == {"name": "f", "path": "d/f", "type": "file", "id": "x"}
