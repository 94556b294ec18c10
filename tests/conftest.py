import copy
import json
from datetime import datetime, timezone

import pytest

from csaf_cli.export import create_csaf_document

GENERATED_AT = datetime(2024, 3, 1, 12, 0, 0, tzinfo=timezone.utc)

CRITICAL_VECTOR = "CVSS:3.1/AV:N/AC:L/PR:N/UI:N/S:U/C:H/I:H/A:H"

SAMPLE_DRAFT = {
    "document_information": {
        "id": "ACME-2024-001",
        "title": "Command injection in Widget",
        "lang": "en",
        "status": "final",
        "publisher": {
            "name": "ACME PSIRT",
            "category": "vendor",
            "namespace": "https://acme.example.com",
            "contact_details": "psirt@acme.example.com",
            "issuing_authority": "",
        },
        "revision_history": [
            {"date": "2024-01-10T10:00:00.000Z", "number": "1.0.0", "summary": "Initial release"},
            {"date": "2024-02-01T09:00:00.000Z", "number": "1.1.0", "summary": "Added fix"},
        ],
        "notes": [
            {"category": "summary", "title": "Summary", "content": "A **critical** flaw."},
        ],
        "references": [
            {"summary": "Vendor advisory", "url": "https://acme.example.com/advisories/1", "category": "self"},
        ],
        "acknowledgments": [],
    },
    "products": [
        {
            "id": "vendor-acme",
            "category": "vendor",
            "name": "ACME",
            "sub_branches": [
                {
                    "id": "product-widget",
                    "category": "product_name",
                    "name": "Widget",
                    "description": "Widget is a gadget.",
                    "sub_branches": [
                        {
                            "id": "widget-1.0",
                            "category": "product_version",
                            "name": "1.0",
                            "identification_helper": {"purl": "pkg:generic/acme/widget@1.0"},
                            "sub_branches": [],
                        },
                        {"id": "widget-2.0", "category": "product_version", "name": "2.0", "sub_branches": []},
                    ],
                },
                {
                    "id": "product-os",
                    "category": "product_name",
                    "name": "WidgetOS",
                    "sub_branches": [
                        {"id": "os-5", "category": "product_version", "name": "5", "sub_branches": []},
                    ],
                },
            ],
        },
    ],
    "relationships": [
        {
            "id": "rel-1",
            "category": "installed_on",
            "name": "Widget 1.0 on WidgetOS 5",
            "product1_version_ids": ["widget-1.0"],
            "product2_version_ids": ["os-5"],
        },
    ],
    "vulnerabilities": [
        {
            "id": "vuln-1",
            "cve": "CVE-2024-1234",
            "title": "Command injection",
            "cwe": {"id": "CWE-78", "name": "OS Command Injection"},
            "notes": [
                {"category": "description", "title": "Details", "content": "Attackers can run commands."},
            ],
            "products": [
                {"product_id": "product-widget", "status": "known_affected", "versions": ["widget-1.0"]},
                {"product_id": "product-widget", "status": "fixed", "versions": ["widget-2.0"]},
            ],
            "remediations": [
                {
                    "category": "vendor_fix",
                    "details": "Update to 2.0",
                    "url": "https://acme.example.com/download",
                    "product_ids": ["widget-1.0"],
                },
            ],
            "scores": [
                {"cvss_version": "3.1", "vector_string": CRITICAL_VECTOR, "product_ids": ["widget-1.0"]},
            ],
        },
    ],
}


@pytest.fixture
def sample_draft():
    """A complete draft with one vendor, two products, one relationship and one vulnerability."""
    return copy.deepcopy(SAMPLE_DRAFT)


@pytest.fixture
def csaf_document(sample_draft):
    """The sample draft composed at a fixed generation time."""
    return create_csaf_document(sample_draft, generated_at=GENERATED_AT)


@pytest.fixture
def write_json(tmp_path):
    """Writes an object as JSON below tmp_path and returns the file path."""
    def _write(name, data):
        path = tmp_path / name
        path.write_text(json.dumps(data), encoding="utf-8")
        return str(path)
    return _write
