"""
Comic Studio Backend — Chapter Document Logic
===============================================

Pure, synchronous helpers over the chapter document tree. No database,
HTTP or asset-store access happens here.

    tree.py: node keys, ImageRef, identity resolution
    extractor.py: document → {identifier: ImageRef}
    reconcile.py: (old, new) → abandoned ImageRefs
"""

from comicstudio.documents.extractor import extract_references, iter_references
from comicstudio.documents.reconcile import reconcile, reconcile_cover
from comicstudio.documents.tree import ImageRef, RefKind, resolve_reference

__all__ = [
    "ImageRef",
    "RefKind",
    "extract_references",
    "iter_references",
    "reconcile",
    "reconcile_cover",
    "resolve_reference",
]
