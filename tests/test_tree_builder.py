"""Tests for tree_builder module."""

from wfmclient.models import TreeNode
from wfmclient.path_set import segment_count
from wfmclient.tree_builder import build_subtree, iter_paths, render_tree


def _labels(node: TreeNode) -> list[str]:
    return [child.label for child in node.children]


class TestBuildSubtree:
    def test_empty(self):
        root = build_subtree("Server", [])
        assert root.label == "Server"
        assert root.path is None
        assert root.children == []

    def test_nested_structure(self):
        root = build_subtree("Server", ["a", "a/b", "a/b/c.txt", "d.txt"])
        assert _labels(root) == ["a", "d.txt"]

        a = root.children[0]
        assert a.path == "a"
        assert _labels(a) == ["b"]
        assert _labels(a.children[0]) == ["c.txt"]
        assert a.children[0].children[0].path == "a/b/c.txt"
        assert root.children[1].is_leaf

    def test_keeps_server_order(self):
        paths = ["z.txt", "docs", "a.txt", "docs/2.md", "docs/1.md"]
        root = build_subtree("Server", paths)
        assert _labels(root) == ["z.txt", "docs", "a.txt"]
        assert _labels(root.children[1]) == ["2.md", "1.md"]

    def test_children_listed_before_parent(self):
        root = build_subtree("Server", ["docs/readme.txt", "docs"])
        assert _labels(root) == ["docs"]
        assert _labels(root.children[0]) == ["readme.txt"]

    def test_every_path_once_at_its_depth(self):
        paths = [
            "src",
            "src/app",
            "src/app/main.py",
            "src/app/util.py",
            "src/lib",
            "README",
            "empty",
            "src/app/static",
            "src/app/static/site.css",
        ]
        root = build_subtree("Server", paths)
        found = {node.path: depth for depth, node in root.walk() if node.path}
        assert len([n for _, n in root.walk()]) - 1 == len(paths)
        assert found == {p: segment_count(p) for p in paths}

    def test_prefix_siblings_do_not_nest(self):
        root = build_subtree("Server", ["abc", "abcx", "abcx/y"])
        assert _labels(root) == ["abc", "abcx"]
        assert root.children[0].is_leaf
        assert _labels(root.children[1]) == ["y"]

    def test_unlisted_parent_is_skipped(self):
        root = build_subtree("Server", ["orphan/file.txt", "top.txt"])
        assert _labels(root) == ["top.txt"]


class TestIterPaths:
    def test_depth_first(self):
        root = build_subtree("Server", ["a", "a/b.txt", "c"])
        assert list(iter_paths(root)) == ["a", "a/b.txt", "c"]

    def test_leaves_only(self):
        root = build_subtree("Server", ["a", "a/b.txt", "c"])
        assert list(iter_paths(root, leaves_only=True)) == ["a/b.txt", "c"]


class TestRenderTree:
    def test_empty(self):
        assert render_tree(TreeNode(label="Server")) == ""

    def test_single_file(self):
        root = build_subtree("Server", ["README.md"])
        assert render_tree(root) == "└── README.md"

    def test_nested_structure(self):
        root = build_subtree("Server", ["src", "src/main.py", "src/utils.py", "README.md"])
        lines = render_tree(root).split("\n")
        assert lines == [
            "├── src/",
            "│   ├── main.py",
            "│   └── utils.py",
            "└── README.md",
        ]

    def test_deep_nesting(self):
        root = build_subtree("Server", ["a", "a/b", "a/b/c", "a/b/c/d.txt"])
        result = render_tree(root)
        assert "└── a/" in result
        assert "    └── b/" in result
        assert "        └── c/" in result
        assert "            └── d.txt" in result
