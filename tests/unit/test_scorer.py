"""
Unit tests for the term-frequency scorer and snippet extraction.
"""

import pytest
from vault_search.search.models import Document
from vault_search.search.scorer import (
    build_preview,
    extract_context,
    is_searchable,
    score_document,
    search,
    search_documents,
)


def make_doc(doc_id, text, filename="notes.txt", status="ready"):
    return Document(id=doc_id, filename=filename, text=text, status=status)


class TestScenarios:
    """End-to-end scoring scenarios"""

    def test_q3_report(self, q3_report):
        """Two 'sales' hits (case-insensitive) + one 'revenue' hit, no filename bonus"""
        results = search_documents("sales revenue", [q3_report], limit=10)

        assert len(results) == 1
        result = results[0]
        assert result.id == "1"
        assert result.score == 3
        assert [(m.term, m.position) for m in result.matches] == [
            ("sales", 44),
            ("sales", 51),
            ("revenue", 0),
        ]
        assert result.preview == q3_report.text + "..."

    def test_q3_report_contexts(self, q3_report):
        result = score_document(["sales", "revenue"], q3_report)

        # Window around position 44 covers the whole 80-char text: no ellipsis
        assert result.matches[0].context == q3_report.text
        # Window around "Revenue" ends at 57 (before the end of the text)
        assert result.matches[2].context == (
            "Revenue grew 12% in Q3 driven by enterprise sales. Sales..."
        )

    def test_filename_only_match(self, sales_deck):
        """Filename bonus alone is enough to be included"""
        results = search_documents("sales", [sales_deck], limit=10)

        assert len(results) == 1
        assert results[0].score == 10
        assert results[0].matches == []

    def test_metadata_passthrough(self, sales_deck):
        result = score_document(["sales"], sales_deck)

        assert result.filename == "sales-deck.pptx"
        assert result.size == 1203344
        assert result.mime_type == sales_deck.mime_type
        assert result.created_at == "2025-01-14T09:30:00Z"


class TestFilenameBonus:
    """Test flat filename weighting"""

    def test_flat_per_term(self):
        doc = make_doc("1", "nothing relevant", filename="sales-sales-SALES.pdf")
        assert score_document(["sales"], doc).score == 10

    def test_each_distinct_term_counts(self):
        doc = make_doc("1", "nothing relevant", filename="Q4 Sales Forecast.xlsx")
        assert score_document(["sales", "forecast"], doc).score == 20

    def test_filename_and_content_combined(self):
        doc = make_doc("1", "Budget for the budget review", filename="budget.pdf")
        assert score_document(["budget"], doc).score == 10 + 2


class TestContentMatches:
    """Test occurrence counting and match caps"""

    def test_occurrences_capped_at_three(self):
        doc = make_doc("1", "sales " * 10)
        result = score_document(["sales"], doc)

        assert result.score == 3
        assert len(result.matches) == 3
        assert [m.position for m in result.matches] == [0, 6, 12]

    def test_matches_capped_at_five(self):
        """Every counted occurrence scores, but only 5 matches are listed"""
        doc = make_doc("1", "alpha beta gamma " * 4)
        result = score_document(["alpha", "beta", "gamma"], doc)

        assert result.score == 9
        assert len(result.matches) == 5
        assert [m.term for m in result.matches] == ["alpha", "alpha", "alpha", "beta", "beta"]

    def test_case_insensitive_positions_in_original(self):
        doc = make_doc("1", "Quarterly SALES were strong")
        result = score_document(["sales"], doc)

        assert result.matches[0].position == 10
        assert "SALES" in result.matches[0].context

    def test_substring_matching(self):
        """No word boundaries: 'sale' matches inside 'wholesale'"""
        doc = make_doc("1", "wholesale pricing")
        assert score_document(["sale"], doc).score == 1

    def test_terms_matched_literally(self):
        doc = make_doc("1", "We use C++ and (draft) notes")
        result = score_document(["c++", "(draft)"], doc)

        assert result.score == 2
        assert [m.position for m in result.matches] == [7, 15]

    def test_trailing_punctuation_term(self):
        doc = make_doc("1", "Total sales grew")
        assert score_document(["sales."], doc) is None

    def test_no_match_returns_none(self):
        doc = make_doc("1", "Unrelated content about logistics.")
        assert score_document(["revenue"], doc) is None

    def test_document_not_modified(self, q3_report):
        original_text = q3_report.text
        score_document(["sales"], q3_report)
        assert q3_report.text == original_text


class TestContextExtraction:
    """Test ±50 character snippets"""

    def test_window_in_middle(self):
        text = "x" * 100 + " needle " + "y" * 100
        position = text.index("needle")
        context = extract_context(text, position, position + len("needle"))

        assert context.startswith("...")
        assert context.endswith("...")
        assert "needle" in context
        assert len(context) <= len("needle") + 2 * 50 + 2 * len("...")

    def test_window_clamped_at_start(self):
        text = "needle " + "y" * 100
        context = extract_context(text, 0, 6)

        assert not context.startswith("...")
        assert context.endswith("...")
        assert context == text[:56].strip() + "..."

    def test_window_clamped_at_end(self):
        text = "x" * 100 + " needle"
        position = text.index("needle")
        context = extract_context(text, position, len(text))

        assert context.startswith("...")
        assert not context.endswith("...")

    def test_whitespace_trimmed(self):
        text = "a" * 60 + "     needle     " + "b" * 60
        position = text.index("needle")
        context = extract_context(text, position, position + 6, radius=5)

        assert context == "...needle..."

    def test_contexts_within_text_bounds(self, q3_report):
        result = score_document(["sales", "revenue", "targets"], q3_report)
        for match in result.matches:
            assert match.context.strip(".") in q3_report.text


class TestPreview:
    def test_short_text_always_gets_ellipsis(self):
        assert build_preview("Short text") == "Short text..."

    def test_long_text_truncated(self):
        text = "a" * 150 + "b" * 150
        preview = build_preview(text)

        assert preview == "a" * 150 + "b" * 50 + "..."
        assert len(preview) == 203


class TestCandidateFiltering:
    def test_processing_documents_excluded(self, processing_doc):
        """Filename matches, but the document is not ready"""
        assert not is_searchable(processing_doc)
        assert search(["sales"], [processing_doc], limit=10) == []

    def test_ready_without_text_excluded(self):
        doc = make_doc("1", None, filename="sales.pdf")
        assert search(["sales"], [doc], limit=10) == []

    def test_empty_text_excluded(self):
        doc = make_doc("1", "", filename="sales.pdf")
        assert search(["sales"], [doc], limit=10) == []

    def test_error_status_excluded(self):
        doc = make_doc("1", "sales figures", status="error")
        assert search(["sales"], [doc], limit=10) == []


class TestRanking:
    """Test sorting, ties and limits"""

    def test_sorted_by_descending_score(self):
        docs = [
            make_doc("low", "sales"),
            make_doc("high", "sales", filename="sales.pdf"),
            make_doc("mid", "sales sales sales"),
        ]
        results = search(["sales"], docs, limit=10)

        assert [r.id for r in results] == ["high", "mid", "low"]
        scores = [r.score for r in results]
        assert scores == sorted(scores, reverse=True)

    def test_ties_keep_candidate_order(self):
        a = make_doc("a", "sales sales revenue revenue budget")
        b = make_doc("b", "budget revenue sales revenue sales")
        terms = ["sales", "revenue", "budget"]

        assert [r.id for r in search(terms, [a, b], limit=10)] == ["a", "b"]
        assert [r.id for r in search(terms, [b, a], limit=10)] == ["b", "a"]
        assert all(r.score == 5 for r in search(terms, [a, b], limit=10))

    def test_non_matching_documents_excluded(self, q3_report, sales_deck):
        results = search(["revenue"], [q3_report, sales_deck], limit=10)
        assert [r.id for r in results] == ["1"]

    def test_every_matching_document_included(self, q3_report, sales_deck):
        results = search(["sales"], [q3_report, sales_deck], limit=10)
        assert {r.id for r in results} == {"1", "2"}
        assert all(r.score > 0 for r in results)

    def test_limit_truncates(self):
        docs = [make_doc(str(i), "sales") for i in range(15)]
        assert len(search(["sales"], docs, limit=4)) == 4

    def test_default_limit(self):
        docs = [make_doc(str(i), "sales") for i in range(15)]
        assert len(search_documents("sales", docs)) == 10

    @pytest.mark.parametrize("limit", [0, -1, -100])
    def test_non_positive_limit(self, q3_report, limit):
        assert search(["sales"], [q3_report], limit=limit) == []

    def test_no_candidates(self):
        assert search(["sales"], [], limit=10) == []

    def test_no_terms(self, q3_report):
        assert search([], [q3_report], limit=10) == []


class TestSearchDocuments:
    @pytest.mark.parametrize("query", ["", "   ", "a an to", None, 12])
    def test_empty_queries_return_nothing(self, q3_report, query):
        assert search_documents(query, [q3_report], limit=10) == []

    def test_query_is_normalized(self, q3_report):
        results = search_documents("  SALES  ", [q3_report], limit=10)
        assert results[0].matches[0].term == "sales"
