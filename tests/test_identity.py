"""
Unit Tests for Identity Resolution

resolve_identity() is a pure parsing step: metadata in, (type, id) or
None out. No checker is involved anywhere in this file.
"""

import pytest

from authz_rag_pipeline.authz.identity import ResourceIdentity, resolve_identity
from authz_rag_pipeline.core import ObjectReference
from authz_rag_pipeline.retrieval.document import Document


def _doc(metadata):
    return Document(id="d", text="text", metadata=metadata)


class TestResolveIdentity:
    """Test metadata -> ResourceIdentity parsing."""

    def test_well_formed_reference(self):
        identity = resolve_identity(_doc({"spicedb_object": "document:doc1"}))

        assert identity == ResourceIdentity("document", "doc1")

    def test_missing_key(self):
        """No reference at all is not an error, just absent."""
        assert resolve_identity(_doc({})) is None

    def test_empty_value(self):
        assert resolve_identity(_doc({"spicedb_object": ""})) is None

    def test_no_colon(self):
        """A value that does not split into two parts is absent."""
        assert resolve_identity(_doc({"spicedb_object": "doc1"})) is None

    def test_splits_on_first_colon_only(self):
        """Ids may contain colons; only the first colon separates type from id."""
        identity = resolve_identity(_doc({"spicedb_object": "document:team:alpha:doc9"}))

        assert identity.resource_type == "document"
        assert identity.resource_id == "team:alpha:doc9"

    @pytest.mark.parametrize("value,expected", [
        ("document:", ("document", "")),
        (":doc1", ("", "doc1")),
    ])
    def test_empty_parts_still_split(self, value, expected):
        """Two parts are two parts, even if one is empty."""
        identity = resolve_identity(_doc({"spicedb_object": value}))

        assert (identity.resource_type, identity.resource_id) == expected

    def test_other_metadata_ignored(self):
        identity = resolve_identity(_doc({
            "author": "emilia",
            "spicedb_object": "folder:f1",
        }))

        assert identity == ResourceIdentity("folder", "f1")

    def test_custom_metadata_key(self):
        doc = _doc({"authz_ref": "document:doc2", "spicedb_object": "document:other"})

        assert resolve_identity(doc, metadata_key="authz_ref") == ResourceIdentity("document", "doc2")

    def test_custom_key_missing(self):
        doc = _doc({"spicedb_object": "document:doc1"})

        assert resolve_identity(doc, metadata_key="authz_ref") is None

    def test_deterministic(self):
        doc = _doc({"spicedb_object": "document:doc1"})

        assert resolve_identity(doc) == resolve_identity(doc)


class TestResourceIdentity:
    """Test conversion to the checker's ObjectReference."""

    def test_to_object_reference(self):
        ref = ResourceIdentity("document", "doc1").to_object_reference()

        assert ref == ObjectReference(object_type="document", object_id="doc1")
        assert str(ref) == "document:doc1"
