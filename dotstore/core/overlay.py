"""Merge engine: read and edit a document tree at a sub-path.

All functions are pure. The input tree is never mutated; containers along
the edited path are copied and everything else is shared with the input.

Segment semantics:
    - on a map, a segment is a key
    - on an array, a segment must be a canonical non-negative index
      ("0", "1", ...); anything else does not address an element
    - on a primitive, nothing is addressable
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from dotstore.core.exceptions import NotAnArrayError
from dotstore.core.models import ABSENT, Absent, Document
from dotstore.core.paths import SEPARATOR, parse_index


def get_at(root: Document | Absent, sub_path: Sequence[str]) -> Document | Absent:
    """Node at sub_path, or ABSENT if the path does not lead anywhere."""
    node: Any = root
    for segment in sub_path:
        if isinstance(node, dict):
            if segment not in node:
                return ABSENT
            node = node[segment]
        elif isinstance(node, list):
            index = parse_index(segment)
            if index is None or index >= len(node):
                return ABSENT
            node = node[index]
        else:
            return ABSENT
    return node


def set_at(root: Document | Absent, sub_path: Sequence[str], value: Document) -> Document:
    """Return a new tree with value placed at sub_path.

    Missing or primitive intermediate nodes are replaced by empty maps.
    An array is descended into when the segment is an index up to its
    length (equal to the length appends); otherwise it is promoted to a
    map keyed by the string form of its indices so no element is lost.
    """
    if not sub_path:
        return value

    head, rest = sub_path[0], sub_path[1:]

    if isinstance(root, list):
        index = parse_index(head)
        if index is not None and index <= len(root):
            updated_list = list(root)
            if index < len(root):
                updated_list[index] = set_at(root[index], rest, value)
            else:
                updated_list.append(set_at(ABSENT, rest, value))
            return updated_list
        container: dict[str, Any] = {str(i): item for i, item in enumerate(root)}
    elif isinstance(root, dict):
        container = dict(root)
    else:
        container = {}

    container[head] = set_at(container.get(head, ABSENT), rest, value)
    return container


def append_at(root: Document | Absent, sub_path: Sequence[str], value: Document) -> Document:
    """Return a new tree with value appended to the array at sub_path.

    An absent target becomes ``[value]``. Raises NotAnArrayError if the
    target exists and is not an array; the input tree is left as it was.
    """
    target = get_at(root, sub_path)
    if target is ABSENT:
        return set_at(root, sub_path, [value])
    if not isinstance(target, list):
        where = SEPARATOR.join(sub_path) or "<root>"
        raise NotAnArrayError(
            f"'{where}' holds a {type(target).__name__}, not an array; "
            "use put to replace it with an array first"
        )
    return set_at(root, sub_path, [*target, value])


def remove_at(root: Document | Absent, sub_path: Sequence[str]) -> Document | Absent:
    """Return a new tree without the node at sub_path.

    An empty sub_path returns ABSENT: the whole record goes away, which the
    caller handles as a record delete. Removing a node that does not exist
    returns the tree unchanged. Removing an array element shifts the
    elements after it down by one.
    """
    if not sub_path:
        return ABSENT

    parent_path, last = sub_path[:-1], sub_path[-1]
    parent = get_at(root, parent_path)

    if isinstance(parent, dict):
        if last not in parent:
            return root
        updated: Document = {key: child for key, child in parent.items() if key != last}
    elif isinstance(parent, list):
        index = parse_index(last)
        if index is None or index >= len(parent):
            return root
        updated = parent[:index] + parent[index + 1 :]
    else:
        return root

    return set_at(root, parent_path, updated)
