"""
Display labels for the HTML preview.

The preview template uses flat 't_*' labels. They are resolved through a
lookup function (key, fallback) -> str so a translation file can replace the
built-in English texts.
"""

import logging
from typing import Callable, Dict, Optional

from ..exceptions import ConfigurationError, FileSystemError, ValidationError
from ..utilities.document_io import load_json_file

logger = logging.getLogger(__name__)

LabelLookup = Callable[..., str]

DEFAULT_TRANSLATIONS: Dict[str, str] = {
    "products.product.label": "Product",
    "vulnerabilities.score.cvss": "CVSS",
    "vulnerabilities.score.baseScore": "Base Score",
    "vulnerabilities.remediation.productsDescription": "For products to which the remediation applies",
    "vulnerabilities.products.groups": "For groups",
    "vulnerabilities.remediation.restartRequired": "Restart required",
    "nav.documentInformation.publisher": "Publisher",
    "document.publisher.category": "Category",
    "document.engine": "Engine",
    "document.initialReleaseDate": "Initial release date",
    "document.currentReleaseDate": "Current release date",
    "document.buildDate": "Build date",
    "document.general.revisionHistory.version": "Version",
    "document.general.state": "Status",
    "vulnerabilities.score.baseSeverity": "Base Severity",
    "document.general.originalLanguage": "Original language",
    "document.general.language": "Language",
    "document.general.alias": "Also referred to as",
    "products.productGroups": "Product groups",
    "nav.vulnerabilities": "Vulnerabilities",
    "vulnerabilities.products.status.title": "Product status",
    "vulnerabilities.products.status.known_affected": "Known affected",
    "vulnerabilities.products.status.first_affected": "First affected",
    "vulnerabilities.products.status.last_affected": "Last affected",
    "vulnerabilities.products.status.known_not_affected": "Known not affected",
    "vulnerabilities.products.status.recommended": "Recommended",
    "vulnerabilities.products.status.fixed": "Fixed",
    "vulnerabilities.products.status.first_fixed": "First fixed",
    "vulnerabilities.products.status.under_investigation": "Under investigation",
    "vulnerabilities.remediations": "Remediations",
    "document.acknowledgments.title": "Acknowledgments",
    "document.acknowledgments.fromPublisher": "The publisher would like to thank the following for their contributions",
    "document.acknowledgments.involvement": "Involvement",
    "nav.documentInformation.references": "References",
    "vulnerabilities.threats": "Threats",
    "document.general.revisionHistory.history": "Revision history",
    "document.general.revisionHistory.date": "Date of the revision",
    "document.general.revisionHistory.description": "Summary of the revision",
    "document.general.tlp.sharingRules": "Sharing rules",
    "vulnerabilities.general.discoveryDate": "Discovery date",
    "vulnerabilities.general.releaseDate": "Release date",
    "document.general.id": "ID",
    "document.publisher.namespace": "Namespace",
    "document.publisher.contactDetails": "Contact details",
    "document.publisher.issuingAuthority": "Issuing authority",
    "document.general.tlp.version.url": "For the TLP version see",
    "common.from": "from",
    "common.for": "for",
    "common.see": "see",
}


def make_label_lookup(translations: Optional[Dict[str, str]] = None) -> LabelLookup:
    """Lookup over the built-in English texts overlaid with translations."""
    table = dict(DEFAULT_TRANSLATIONS)
    table.update(translations or {})

    def lookup(key: str, fallback: Optional[str] = None) -> str:
        return table.get(key, fallback if fallback is not None else key)

    return lookup


def load_label_lookup(path: Optional[str] = None) -> LabelLookup:
    """
    Builds a lookup from a flat JSON translation file.

    Raises:
        ConfigurationError: If the file cannot be used as a translation table
    """
    if not path:
        return make_label_lookup()

    try:
        translations = load_json_file(path)
    except (FileSystemError, ValidationError) as e:
        raise ConfigurationError(f"Cannot load label file: {e.message}") from e

    non_strings = [k for k, v in translations.items() if not isinstance(v, str)]
    if non_strings:
        raise ConfigurationError(
            f"Label file {path} must map keys to strings",
            details={"invalid_keys": ", ".join(non_strings[:10])},
        )

    logger.debug(f"Loaded {len(translations)} labels from {path}")
    return make_label_lookup(translations)


def create_html_template_translations(t: LabelLookup) -> Dict[str, str]:
    """Resolves every label used by the preview template."""
    return {
        "t_product": t("products.product.label"),
        "t_cvss_vector": t("vulnerabilities.score.cvss") + "-Vector",
        "t_cvss_base_score": t("vulnerabilities.score.baseScore"),
        "t_for_products": " ".join(t("vulnerabilities.remediation.productsDescription").split(" ")[:2]),
        "t_for_groups": t("vulnerabilities.products.groups"),
        "t_restart_required": t("vulnerabilities.remediation.restartRequired"),
        "t_publisher": t("nav.documentInformation.publisher"),
        "t_document_category": t("document.publisher.category"),
        "t_engine": t("document.engine"),
        "t_initial_release_date": t("document.initialReleaseDate"),
        "t_current_release_date": t("document.currentReleaseDate"),
        "t_build_date": t("document.buildDate"),
        "t_current_version": t("document.general.revisionHistory.version"),
        "t_status": t("document.general.state"),
        "t_severity": t("vulnerabilities.score.baseSeverity"),
        "t_original_language": t("document.general.originalLanguage"),
        "t_language": t("document.general.language"),
        "t_also_referred_to": t("document.general.alias"),
        "t_product_groups": t("products.productGroups"),
        "t_vulnerabilities": t("nav.vulnerabilities"),
        "t_product_status": t("vulnerabilities.products.status.title"),
        "t_known_affected": t("vulnerabilities.products.status.known_affected"),
        "t_first_affected": t("vulnerabilities.products.status.first_affected"),
        "t_last_affected": t("vulnerabilities.products.status.last_affected"),
        "t_known_not_affected": t("vulnerabilities.products.status.known_not_affected"),
        "t_recommended": t("vulnerabilities.products.status.recommended"),
        "t_fixed": t("vulnerabilities.products.status.fixed"),
        "t_first_fixed": t("vulnerabilities.products.status.first_fixed"),
        "t_under_investigation": t("vulnerabilities.products.status.under_investigation"),
        "t_remediations": t("vulnerabilities.remediations"),
        "t_acknowledgments": t("document.acknowledgments.title"),
        "t_acknowledgments_from_publisher": t("document.acknowledgments.fromPublisher"),
        "t_involvement": t("document.acknowledgments.involvement"),
        "t_references": t("nav.documentInformation.references"),
        "t_threats": t("vulnerabilities.threats"),
        "t_revision_history": t("document.general.revisionHistory.history"),
        "t_version": t("document.general.revisionHistory.version"),
        "t_date_of_revision": t("document.general.revisionHistory.date"),
        "t_summary_of_revision": t("document.general.revisionHistory.description"),
        "t_sharing_rules": t("document.general.tlp.sharingRules"),
        "t_discovery_date": t("vulnerabilities.general.discoveryDate"),
        "t_release_date": t("vulnerabilities.general.releaseDate"),
        "t_cwe": "CWE",
        "t_id": t("document.general.id"),
        "t_namespace": t("document.publisher.namespace"),
        "t_contact_details": t("document.publisher.contactDetails"),
        "t_issuing_authority": t("document.publisher.issuingAuthority"),
        "t_for_tlp_version_see": t("document.general.tlp.version.url"),
        "t_from": t("common.from"),
        "t_for": t("common.for"),
        "t_see": t("common.see"),
    }
