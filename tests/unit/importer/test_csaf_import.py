import copy
from datetime import datetime, timezone

import pytest

from csaf_cli.export import create_csaf_document
from csaf_cli.importer.csaf_import import (
    get_csaf_version,
    is_csaf_document,
    is_csaf_version_supported,
    parse_csaf_document,
)
from csaf_cli.exceptions import UnsupportedVersionError, ValidationError

GENERATED_AT = datetime(2024, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


class TestVersionDetection:
    def test_get_csaf_version(self, csaf_document):
        assert get_csaf_version(csaf_document) == "2.0"

    @pytest.mark.parametrize("obj", [None, [], {}, {"document": []}, {"document": {"csaf_version": 2}}])
    def test_not_csaf(self, obj):
        assert get_csaf_version(obj) is None
        assert not is_csaf_document(obj)

    def test_supported_versions(self):
        assert is_csaf_version_supported({"document": {"csaf_version": "2.0"}})
        assert not is_csaf_version_supported({"document": {"csaf_version": "1.2"}})


class TestParseCsafDocument:
    """Test conversion of CSAF documents into drafts."""

    def test_rejects_non_csaf(self):
        with pytest.raises(ValidationError):
            parse_csaf_document({"title": "nope"})

    def test_rejects_unsupported_version(self, csaf_document):
        csaf_document["document"]["csaf_version"] = "2.1"
        with pytest.raises(UnsupportedVersionError) as exc_info:
            parse_csaf_document(csaf_document)
        assert exc_info.value.details["supported_versions"] == "2.0"

    def test_document_information(self, csaf_document):
        info = parse_csaf_document(csaf_document)["document_information"]
        assert info["id"] == "ACME-2024-001"
        assert info["status"] == "final"
        assert info["publisher"]["name"] == "ACME PSIRT"
        assert info["notes"][0] == {"category": "summary", "title": "Summary", "content": "A **critical** flaw."}
        assert [r["number"] for r in info["revision_history"]] == ["1.0.0", "1.1.0"]

    def test_product_branches_keep_product_ids(self, csaf_document):
        """Test that leaf branches use the CSAF product id as draft id."""
        products = parse_csaf_document(csaf_document)["products"]
        widget = products[0]["sub_branches"][0]
        assert [b["id"] for b in widget["sub_branches"]] == ["CSAFPID-0001", "CSAFPID-0002"]
        assert widget["sub_branches"][0]["product_name"] == "ACME Widget 1.0"
        assert widget["sub_branches"][0]["identification_helper"] == {"purl": "pkg:generic/acme/widget@1.0"}
        assert "product_name" not in widget

    def test_product_status_grouped_by_parent(self, csaf_document):
        draft = parse_csaf_document(csaf_document)
        widget_id = draft["products"][0]["sub_branches"][0]["id"]
        assert draft["vulnerabilities"][0]["products"] == [
            {"product_id": widget_id, "status": "known_affected", "versions": ["CSAFPID-0001"]},
            {"product_id": widget_id, "status": "fixed", "versions": ["CSAFPID-0002"]},
        ]

    def test_scores_and_remediations(self, csaf_document):
        vulnerability = parse_csaf_document(csaf_document)["vulnerabilities"][0]
        assert vulnerability["scores"] == [{
            "cvss_version": "3.1",
            "vector_string": "CVSS:3.1/AV:N/AC:L/PR:N/UI:N/S:U/C:H/I:H/A:H",
            "product_ids": ["CSAFPID-0001"],
        }]
        assert vulnerability["remediations"][0]["product_ids"] == ["CSAFPID-0001"]
        assert vulnerability["cve"] == "CVE-2024-1234"
        assert vulnerability["cwe"] == {"id": "CWE-78", "name": "OS Command Injection"}

    def test_expanded_relationships_regrouped(self, sample_draft):
        """Test that a 2x1 expansion comes back as one declaration."""
        sample_draft["relationships"][0]["product1_version_ids"] = ["widget-1.0", "widget-2.0"]
        document = create_csaf_document(sample_draft)
        relationships = parse_csaf_document(document)["relationships"]
        assert len(relationships) == 1
        assert relationships[0]["product1_version_ids"] == ["CSAFPID-0001", "CSAFPID-0002"]
        assert relationships[0]["product2_version_ids"] == ["CSAFPID-0003"]
        assert relationships[0]["category"] == "installed_on"

    def test_unknown_status_products_dropped(self, csaf_document):
        csaf_document["vulnerabilities"][0]["product_status"]["known_affected"].append("CSAFPID-0404")
        products = parse_csaf_document(csaf_document)["vulnerabilities"][0]["products"]
        assert all("CSAFPID-0404" not in p["versions"] for p in products)

    def test_acknowledgment_urls(self, csaf_document):
        csaf_document["document"]["acknowledgments"] = [{"names": ["Alice"], "urls": ["https://a", "https://b"]}]
        info = parse_csaf_document(csaf_document)["document_information"]
        assert info["acknowledgments"] == [{"names": ["Alice"], "url": "https://a"}]

    def test_input_not_mutated(self, csaf_document):
        original = copy.deepcopy(csaf_document)
        parse_csaf_document(csaf_document)
        assert csaf_document == original


class TestRoundTrip:
    """Test export -> import -> export stability."""

    def test_round_trip_reproduces_document(self, sample_draft):
        first = create_csaf_document(sample_draft, generated_at=GENERATED_AT)
        second = create_csaf_document(parse_csaf_document(first), generated_at=GENERATED_AT)
        assert second == first

    def test_round_trip_with_base_keeps_unmodelled_fields(self, sample_draft):
        first = create_csaf_document(sample_draft, generated_at=GENERATED_AT)
        first["vulnerabilities"][0]["remediations"][0]["restart_required"] = {"category": "none"}
        second = create_csaf_document(parse_csaf_document(first), base_document=first, generated_at=GENERATED_AT)
        assert second == first
