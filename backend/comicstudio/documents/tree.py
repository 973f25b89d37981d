"""
Comic Studio Backend — Chapter Document Tree Model
====================================================

What:  Shape of a chapter's `data` document and the identity of an image
       reference inside it.
How:   Documents stay as the plain JSON the editor sends (lists and dicts);
       this module names the keys and resolves a frame into an ImageRef.

Document shape:
    [                                   ← chapter.data: ordered scenes
        {"root": {                      ← each scene has one root node
            "type": "split",
            "children": [
                {"type": "frame", "imageId": "file_abc", "image": "https://..."},
                {"type": "frame", "image": "https://ik.imagekit.io/x/old.png"},
            ],
        }},
    ]

Reference identity:
    A frame's asset is identified by `imageId` when present, otherwise by the
    raw `image` URL. Older documents only stored URLs, so both forms coexist.
    The two spaces are never merged: a URL is never translated into an id,
    and two URL-only frames are the same asset only when the URLs are equal.
"""

import enum
from dataclasses import dataclass
from typing import Any, List, Optional

# ── Node keys ─────────────────────────────────────────────────────────────
NODE_TYPE = "type"
FRAME = "frame"
SPLIT = "split"
CHILDREN = "children"
SCENE_ROOT = "root"
IMAGE_ID = "imageId"
IMAGE_URL = "image"


class RefKind(str, enum.Enum):
    """Which identity space an image reference lives in."""

    ID = "id"
    URL = "url"


@dataclass(frozen=True)
class ImageRef:
    """
    A resolved image reference: the tagged variant ID(value) | URL(value).

    `value` is the identifier used for equality between documents.
    """

    kind: RefKind
    value: str

    @property
    def identifier(self) -> str:
        return self.value


def _non_empty_str(value: Any) -> Optional[str]:
    if isinstance(value, str) and value:
        return value
    return None


def resolve_reference(image_id: Any, image_url: Any) -> Optional[ImageRef]:
    """
    Apply the ID-over-URL policy to a pair of raw fields.

    Returns None when neither field is a non-empty string. Shared by frames
    and by series/chapter cover fields.
    """
    resolved_id = _non_empty_str(image_id)
    if resolved_id is not None:
        return ImageRef(RefKind.ID, resolved_id)
    resolved_url = _non_empty_str(image_url)
    if resolved_url is not None:
        return ImageRef(RefKind.URL, resolved_url)
    return None


def is_frame(node: Any) -> bool:
    return isinstance(node, dict) and node.get(NODE_TYPE) == FRAME


def is_split(node: Any) -> bool:
    return isinstance(node, dict) and node.get(NODE_TYPE) == SPLIT


def frame_reference(node: Any) -> Optional[ImageRef]:
    """Image reference carried by a frame node, or None for anything else."""
    if not is_frame(node):
        return None
    return resolve_reference(node.get(IMAGE_ID), node.get(IMAGE_URL))


def split_children(node: Any) -> List[Any]:
    """Children of a split node; empty for malformed or non-split nodes."""
    if not is_split(node):
        return []
    children = node.get(CHILDREN)
    if not isinstance(children, list):
        return []
    return children


def scene_root(scene: Any) -> Optional[Any]:
    """Root node of a scene; None when the scene is malformed or rootless."""
    if not isinstance(scene, dict):
        return None
    return scene.get(SCENE_ROOT)
