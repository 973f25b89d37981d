"""
Comic Studio Backend — Image Reference Reconciliation
=======================================================

What:  Computes which image assets an edit abandons.
How:   Extracts the references of the stored document and of the submitted
       document, and keeps the old ones whose identifier no longer appears.
Who:   ChapterService (document + cover) and SeriesService (cover).

Scope:
    Reconciliation only ever compares the two versions of ONE document.
    There is no reference counting across chapters or series: an image that
    another chapter also uses is still reported once this chapter drops it.
"""

from typing import Any, List, Optional, Tuple

from comicstudio.documents.extractor import extract_references
from comicstudio.documents.tree import ImageRef, RefKind, resolve_reference


def reconcile(old_tree: Any, new_tree: Any) -> List[ImageRef]:
    """
    References present in `old_tree` and absent from `new_tree`.

    Identity is the resolved identifier, so a frame moved to another scene or
    branch is retained. The result follows the old tree's traversal order.
    """
    old_refs = extract_references(old_tree)
    if not old_refs:
        return []
    new_ids = extract_references(new_tree).keys()
    return [ref for identifier, ref in old_refs.items() if identifier not in new_ids]


def reconcile_cover(
    old_image_id: Optional[str],
    old_image_url: Optional[str],
    new_image_id: Optional[str],
    new_image_url: Optional[str],
    ignore_urls: Tuple[str, ...] = (),
) -> Optional[ImageRef]:
    """
    Single-reference case of `reconcile` for cover images.

    Returns the old cover's reference when it differs from the new one, or
    None when there is no old cover or it is unchanged. The old cover is
    compared in its own identity space: a legacy URL against the new URL,
    an id against the new id. URLs listed in `ignore_urls` (placeholders
    that were never uploaded) are never returned.
    """
    old_ref = resolve_reference(old_image_id, old_image_url)
    if old_ref is None:
        return None
    if old_ref.kind is RefKind.URL and old_ref.value in ignore_urls:
        return None

    if old_ref.kind is RefKind.URL:
        unchanged = new_image_url == old_ref.value
    else:
        unchanged = new_image_id == old_ref.value
    if unchanged:
        return None
    return old_ref
