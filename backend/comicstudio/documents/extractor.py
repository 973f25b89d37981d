"""
Comic Studio Backend — Image Reference Extractor
==================================================

What:  Collects every image reference in a chapter document.
How:   Depth-first walk over each scene's node tree with an explicit stack,
       so arbitrarily deep split nesting never hits the recursion limit.

Malformed input (non-list documents, scenes without a root, nodes of unknown
type, splits whose `children` is not a list, frames with no image fields) is
skipped without raising and without stopping the walk over siblings.
"""

from typing import Any, Dict, Iterator, List

from comicstudio.documents.tree import (
    ImageRef,
    frame_reference,
    scene_root,
    split_children,
)


def iter_references(tree: Any) -> Iterator[ImageRef]:
    """
    Yield image references in depth-first order, scene by scene.

    Duplicates are yielded every time they occur.
    """
    if not isinstance(tree, list):
        return

    for scene in tree:
        root = scene_root(scene)
        if root is None:
            continue

        stack: List[Any] = [root]
        while stack:
            node = stack.pop()
            ref = frame_reference(node)
            if ref is not None:
                yield ref
                continue
            # reversed() so children are visited in document order
            stack.extend(reversed(split_children(node)))


def extract_references(tree: Any) -> Dict[str, ImageRef]:
    """
    Map each resolved identifier in `tree` to its ImageRef.

    Insertion order follows the first occurrence in traversal order; a later
    duplicate overwrites the value (last write wins).
    """
    references: Dict[str, ImageRef] = {}
    for ref in iter_references(tree):
        references[ref.identifier] = ref
    return references
