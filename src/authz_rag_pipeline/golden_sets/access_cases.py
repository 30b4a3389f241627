"""
Golden access cases for the reference dataset.

Each case pins down WHO asks, WHAT they ask, and EXACTLY which documents
must come back. Text matching alone is not enough to pass: charlie's
roadmap query matches doc1 by text, but charlie has no relationship to it.
"""

from dataclasses import dataclass, field


@dataclass
class AccessCase:
    """
    A single golden access-control case.

    expected_doc_ids is compared as a set; order is checked separately by
    the filter's own tests.
    """

    id: str
    description: str
    principal: str
    query: str
    expected_doc_ids: list[str] = field(default_factory=list)


ACCESS_CASES: list[AccessCase] = [

    # Owners see their own documents
    AccessCase(
        id="emilia-roadmap",
        description="Owner of doc1 finds it by text",
        principal="emilia",
        query="roadmap",
        expected_doc_ids=["doc1"],
    ),
    AccessCase(
        id="emilia-public",
        description="Viewer of the public FAQ",
        principal="emilia",
        query="public",
        expected_doc_ids=["doc3"],
    ),

    # Viewers see documents shared with them, nothing else
    AccessCase(
        id="beatrice-playbook",
        description="Viewer of doc2 finds the playbook",
        principal="beatrice",
        query="playbook",
        expected_doc_ids=["doc2"],
    ),
    AccessCase(
        id="beatrice-public",
        description="Viewer of the public FAQ",
        principal="beatrice",
        query="public",
        expected_doc_ids=["doc3"],
    ),

    # A user with only the public grant
    AccessCase(
        id="charlie-public",
        description="Public FAQ is visible to everyone",
        principal="charlie",
        query="public",
        expected_doc_ids=["doc3"],
    ),
    AccessCase(
        id="charlie-roadmap",
        description="Text matches doc1 but charlie lacks permission",
        principal="charlie",
        query="roadmap",
        expected_doc_ids=[],
    ),

    # Case-insensitive matching does not widen access
    AccessCase(
        id="beatrice-roadmap-uppercase",
        description="Upper-case query still denied for a non-owner",
        principal="beatrice",
        query="ROADMAP",
        expected_doc_ids=[],
    ),
    AccessCase(
        id="emilia-everything",
        description="Empty query matches everything; only permitted docs remain",
        principal="emilia",
        query="",
        expected_doc_ids=["doc1", "doc3"],
    ),
]


def get_all_access_cases() -> list[AccessCase]:
    """Get all golden access cases."""
    return list(ACCESS_CASES)


def get_case_by_id(case_id: str) -> AccessCase | None:
    """Get a specific case by ID."""
    for case in ACCESS_CASES:
        if case.id == case_id:
            return case
    return None
