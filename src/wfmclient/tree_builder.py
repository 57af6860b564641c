"""Rebuild a server's flat path listing into a tree, and render it."""

from __future__ import annotations

from typing import Iterator, Sequence

from wfmclient.models import TreeNode
from wfmclient.path_set import direct_children_of, has_descendants, last_segment


def build_subtree(root_label: str, all_paths: Sequence[str]) -> TreeNode:
    """Build a tree labelled *root_label* from a flat list of paths.

    Children keep the order in which the server listed them. Every listed
    path whose parent directory is also listed appears exactly once, at a
    depth equal to its number of segments.
    """
    root = TreeNode(label=root_label)
    _add_children(root, all_paths, direct_children_of(None, all_paths))
    return root


def _add_children(
    node: TreeNode,
    all_paths: Sequence[str],
    paths: list[str],
) -> None:
    for path in paths:
        child = TreeNode(label=last_segment(path), path=path)
        if has_descendants(path, all_paths):
            _add_children(child, all_paths, direct_children_of(path, all_paths))
        node.add(child)


def iter_paths(node: TreeNode, leaves_only: bool = False) -> Iterator[str]:
    """Yield the server path of every node below *node*, depth-first."""
    for _, descendant in node.walk():
        if descendant.path is None:
            continue
        if not leaves_only or descendant.is_leaf:
            yield descendant.path


def render_tree(node: TreeNode) -> str:
    """Render the children of *node* as an ASCII tree.

    Example output:
        ├── docs/
        │   └── readme.txt
        └── notes.txt
    """
    lines: list[str] = []
    _render_children(node, lines, prefix="")
    return "\n".join(lines)


def _render_children(node: TreeNode, lines: list[str], prefix: str) -> None:
    for i, child in enumerate(node.children):
        is_last = i == len(node.children) - 1
        connector = "└── " if is_last else "├── "

        # Nodes with children are directories; empty ones can't be told apart
        display_name = child.label if child.is_leaf else f"{child.label}/"
        lines.append(f"{prefix}{connector}{display_name}")

        if child.children:
            extension = "    " if is_last else "│   "
            _render_children(child, lines, prefix + extension)
