import pytest
import requests
from unittest.mock import MagicMock, patch

from csaf_cli.cve.cve_fetcher import CVE_API_URL, apply_cve_record, fetch_cve_record
from csaf_cli.exceptions import ApiError, NetworkError, ValidationError

V31 = "CVSS:3.1/AV:N/AC:L/PR:N/UI:N/S:U/C:H/I:H/A:H"
V40 = "CVSS:4.0/AV:N/AC:L/AT:N/PR:N/UI:N/VC:H/VI:H/VA:H/SC:N/SI:N/SA:N"

CVE_RECORD = {
    "cveMetadata": {"cveId": "CVE-2024-1234"},
    "containers": {
        "cna": {
            "title": "Command injection in Widget",
            "descriptions": [
                {"lang": "en", "value": "Widget lets attackers run commands."},
                {"lang": "de", "value": "Widget erlaubt das Ausführen von Befehlen."},
            ],
            "metrics": [
                {"cvssV3_1": {"vectorString": V31, "baseScore": 9.8}},
                {"cvssV4_0": {"vectorString": V40, "baseScore": 9.3}},
                {"other": {"type": "ssvc"}},
            ],
            "problemTypes": [
                {"descriptions": [
                    {"type": "text", "lang": "en", "description": "Injection"},
                    {"type": "CWE", "lang": "en", "cweId": "CWE-78",
                     "description": "CWE-78 Improper Neutralization of Special Elements used in an OS Command"},
                ]},
            ],
        }
    },
}


@pytest.fixture
def vulnerability():
    return {"id": "v1", "cve": "CVE-2024-1234", "title": "", "notes": [], "scores": []}


def _response(status_code=200, payload=None, json_error=False):
    response = MagicMock(spec=requests.Response)
    response.status_code = status_code
    response.text = "body"
    if json_error:
        response.json.side_effect = ValueError("not json")
    else:
        response.json.return_value = payload
    return response


class TestFetchCveRecord:
    """Test retrieval from the CVE service."""

    @patch("csaf_cli.cve.cve_fetcher.requests.get")
    def test_success(self, mock_get):
        mock_get.return_value = _response(payload=CVE_RECORD)
        assert fetch_cve_record("CVE-2024-1234") == CVE_RECORD
        args, kwargs = mock_get.call_args
        assert args[0] == f"{CVE_API_URL}/CVE-2024-1234"
        assert kwargs["timeout"] == 30

    @patch("csaf_cli.cve.cve_fetcher.requests.get")
    def test_trailing_slash_in_url(self, mock_get):
        mock_get.return_value = _response(payload=CVE_RECORD)
        fetch_cve_record("CVE-2024-1234", "https://cve.example/api/cve/", timeout=5)
        assert mock_get.call_args[0][0] == "https://cve.example/api/cve/CVE-2024-1234"

    @patch("csaf_cli.cve.cve_fetcher.requests.get")
    def test_connection_error(self, mock_get):
        mock_get.side_effect = requests.exceptions.ConnectionError("refused")
        with pytest.raises(NetworkError):
            fetch_cve_record("CVE-2024-1234")

    @patch("csaf_cli.cve.cve_fetcher.requests.get")
    def test_timeout(self, mock_get):
        mock_get.side_effect = requests.exceptions.Timeout("slow")
        with pytest.raises(NetworkError, match="Timed out"):
            fetch_cve_record("CVE-2024-1234")

    @patch("csaf_cli.cve.cve_fetcher.requests.get")
    def test_not_found(self, mock_get):
        mock_get.return_value = _response(status_code=404)
        with pytest.raises(ApiError) as exc_info:
            fetch_cve_record("CVE-2024-9999")
        assert exc_info.value.code == "404"

    @patch("csaf_cli.cve.cve_fetcher.requests.get")
    def test_invalid_json(self, mock_get):
        mock_get.return_value = _response(json_error=True)
        with pytest.raises(ApiError):
            fetch_cve_record("CVE-2024-1234")

    @patch("csaf_cli.cve.cve_fetcher.requests.get")
    def test_non_object_json(self, mock_get):
        mock_get.return_value = _response(payload=["x"])
        with pytest.raises(ApiError):
            fetch_cve_record("CVE-2024-1234")


class TestApplyCveRecord:
    """Test copying CVE data into a draft vulnerability."""

    def test_english_document(self, vulnerability):
        updated = apply_cve_record(vulnerability, CVE_RECORD, "en")
        assert len(updated["notes"]) == 1
        note = updated["notes"][0]
        assert note["title"] == "Description - CVE-2024-1234 - 1"
        assert note["content"] == "Widget lets attackers run commands."
        assert note["category"] == "description"
        assert updated["title"] == "Command injection in Widget"

    def test_document_language_preferred(self, vulnerability):
        updated = apply_cve_record(vulnerability, CVE_RECORD, "de")
        assert updated["notes"][0]["content"] == "Widget erlaubt das Ausführen von Befehlen."
        assert updated["notes"][0]["title"] == "Beschreibung - CVE-2024-1234 - 1"

    def test_english_fallback(self, vulnerability):
        updated = apply_cve_record(vulnerability, CVE_RECORD, "fr")
        assert updated["notes"][0]["content"] == "Widget lets attackers run commands."

    def test_scores(self, vulnerability):
        updated = apply_cve_record(vulnerability, CVE_RECORD, "en")
        assert updated["scores"] == [
            {"cvss_version": "3.1", "vector_string": V31, "product_ids": []},
            {"cvss_version": "4.0", "vector_string": V40, "product_ids": []},
        ]

    def test_cwe(self, vulnerability):
        updated = apply_cve_record(vulnerability, CVE_RECORD, "en")
        assert updated["cwe"] == {
            "id": "CWE-78",
            "name": "Improper Neutralization of Special Elements used in an OS Command",
        }

    def test_existing_data_appended(self, vulnerability):
        vulnerability["notes"] = [{"category": "summary", "title": "Mine", "content": "x"}]
        updated = apply_cve_record(vulnerability, CVE_RECORD, "en")
        assert updated["notes"][0]["title"] == "Mine"
        assert len(updated["notes"]) == 2

    def test_input_not_mutated(self, vulnerability):
        apply_cve_record(vulnerability, CVE_RECORD, "en")
        assert vulnerability["notes"] == []
        assert vulnerability["scores"] == []

    def test_no_descriptions(self, vulnerability):
        with pytest.raises(ValidationError):
            apply_cve_record(vulnerability, {"containers": {"cna": {"descriptions": []}}}, "en")
