"""Unit tests for SharePoint URL decomposition."""

from __future__ import annotations

import pytest

from sharepoint_indexer.services.locator import parse_reference
from sharepoint_indexer.utils.errors import MalformedReferenceError


class TestParseReference:
    def test_decomposes_standard_url(self) -> None:
        url = "https://contoso.sharepoint.com/sites/Engineering/Shared%20Documents/specs/Q3%20Plan.docx"
        ref = parse_reference(url)
        assert ref.url == url
        assert ref.tenant == "contoso"
        assert ref.container_path == "Engineering"
        assert ref.relative_file_path == "specs/Q3 Plan.docx"

    def test_query_string_is_ignored(self) -> None:
        ref = parse_reference(
            "https://contoso.sharepoint.com/sites/HR/Shared%20Documents/policy.pdf?web=1&d=abc"
        )
        assert ref.relative_file_path == "policy.pdf"

    def test_raw_space_library_segment_is_accepted(self) -> None:
        ref = parse_reference("https://contoso.sharepoint.com/sites/HR/Shared Documents/a b.txt")
        assert ref.relative_file_path == "a b.txt"

    def test_percent_encoded_unicode_is_decoded(self) -> None:
        ref = parse_reference(
            "https://fabrikam.sharepoint.com/sites/Sales/Shared%20Documents/R%C3%A9sum%C3%A9.docx"
        )
        assert ref.tenant == "fabrikam"
        assert ref.relative_file_path == "Résumé.docx"

    def test_surrounding_whitespace_is_trimmed(self) -> None:
        ref = parse_reference("  https://contoso.sharepoint.com/sites/HR/Shared%20Documents/x.txt \n")
        assert ref.url == "https://contoso.sharepoint.com/sites/HR/Shared%20Documents/x.txt"

    @pytest.mark.parametrize(
        "url",
        [
            "",
            "   ",
            "/sites/HR/Shared%20Documents/x.txt",
            "https://contoso.sharepoint.com/teams/HR/Shared%20Documents/x.txt",
            "https://contoso.sharepoint.com/sites//Shared%20Documents/x.txt",
            "https://contoso.sharepoint.com/sites/HR/Documents/x.txt",
            "https://contoso.sharepoint.com/sites/HR/Shared%20Documents/",
            "https://contoso.sharepoint.com/sites/HR/Shared%20Documents/%FF%FE.txt",
        ],
    )
    def test_malformed_urls_raise(self, url: str) -> None:
        with pytest.raises(MalformedReferenceError):
            parse_reference(url)
