"""
Comic Studio Backend — Reconciliation Tests
=============================================

What we test:
    ✅ No self-diff deletions; nothing old → nothing deleted
    ✅ Clearing the document abandons every reference
    ✅ Moved frames are retained
    ✅ The reference example (ID kept, URL dropped)
    ✅ Cover reconciliation, including the placeholder cover
"""

from comicstudio.config import DEFAULT_SERIES_COVER
from comicstudio.documents.reconcile import reconcile, reconcile_cover
from comicstudio.documents.tree import ImageRef, RefKind

from conftest import frame, scene, split

TREE = [
    scene(split(frame(image_id="a"), split(frame(image="http://x/b.png"), frame(image_id="c")))),
    scene(frame(image="http://x/d.png")),
]


class TestReconcile:
    def test_identical_trees(self):
        assert reconcile(TREE, TREE) == []

    def test_empty_old_tree(self):
        assert reconcile([], TREE) == []

    def test_empty_new_tree_abandons_everything(self):
        assert [ref.value for ref in reconcile(TREE, [])] == [
            "a",
            "http://x/b.png",
            "c",
            "http://x/d.png",
        ]

    def test_reference_example(self, sample_documents):
        result = reconcile(sample_documents["old"], sample_documents["new"])
        assert result == [ImageRef(RefKind.URL, "http://x/b.png")]

    def test_moved_frame_is_retained(self):
        old = [scene(split(frame(image_id="a"), frame(image_id="b")))]
        new = [scene(frame(image_id="b")), scene(split(frame(), split(frame(image_id="a"))))]
        assert reconcile(old, new) == []

    def test_url_frame_gaining_id_abandons_url_identity(self):
        # The identity spaces are never merged
        old = [scene(frame(image="http://x/a.png"))]
        new = [scene(frame(image_id="file_a", image="http://x/a.png"))]
        assert reconcile(old, new) == [ImageRef(RefKind.URL, "http://x/a.png")]

    def test_duplicate_old_references_reported_once(self):
        old = [scene(split(frame(image_id="a"), frame(image_id="a")))]
        assert reconcile(old, []) == [ImageRef(RefKind.ID, "a")]

    def test_malformed_new_tree_treated_as_empty(self):
        old = [scene(frame(image_id="a"))]
        assert reconcile(old, "garbage") == [ImageRef(RefKind.ID, "a")]


class TestReconcileCover:
    def test_replaced_id_cover(self):
        assert reconcile_cover("old", "http://x/o.png", "new", "http://x/n.png") == ImageRef(
            RefKind.ID, "old"
        )

    def test_replaced_legacy_url_cover(self):
        assert reconcile_cover(None, "http://x/o.png", "new", "http://x/n.png") == ImageRef(
            RefKind.URL, "http://x/o.png"
        )

    def test_same_cover_resubmitted(self):
        assert reconcile_cover("same", "http://x/o.png", "same", "http://x/o.png") is None
        assert reconcile_cover(None, "http://x/o.png", None, "http://x/o.png") is None

    def test_no_previous_cover(self):
        assert reconcile_cover(None, None, "new", "http://x/n.png") is None

    def test_placeholder_cover_never_abandoned(self):
        result = reconcile_cover(
            None,
            DEFAULT_SERIES_COVER,
            "new",
            "http://x/n.png",
            ignore_urls=(DEFAULT_SERIES_COVER,),
        )
        assert result is None

    def test_legacy_cover_gaining_id_is_kept(self):
        url = "https://ik.imagekit.io/x/cover.png"
        assert reconcile_cover(None, url, "file_123", url) is None

    def test_legacy_cover_replaced_by_new_upload(self):
        old = "https://ik.imagekit.io/x/cover.png"
        result = reconcile_cover(None, old, "file_456", "https://ik.imagekit.io/x/new.png")
        assert result == ImageRef(RefKind.URL, old)

    def test_id_cover_compared_by_id(self):
        # Same id behind a new transformation URL is the same asset
        assert reconcile_cover("file_1", "http://x/a.png", "file_1", "http://x/a.png?tr=w-300") is None
        assert reconcile_cover("file_1", "http://x/a.png", None, "http://x/a.png") == ImageRef(
            RefKind.ID, "file_1"
        )
