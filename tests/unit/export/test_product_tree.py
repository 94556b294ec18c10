from csaf_cli.export.product_tree import (
    build_full_product_names,
    get_products,
    is_product_leaf,
    normalize_identification_helper,
)


class TestProductTreeHelpers:
    """Test navigation helpers over draft branches."""

    def test_full_product_names(self, sample_draft):
        names = build_full_product_names(sample_draft["products"])
        assert names["vendor-acme"] == "ACME"
        assert names["widget-1.0"] == "ACME Widget 1.0"
        assert names["os-5"] == "ACME WidgetOS 5"

    def test_get_products(self, sample_draft):
        assert [p["id"] for p in get_products(sample_draft["products"])] == ["product-widget", "product-os"]

    def test_is_product_leaf(self):
        assert is_product_leaf({"category": "product_version", "sub_branches": []})
        assert not is_product_leaf({"category": "vendor", "sub_branches": []})
        assert not is_product_leaf({"category": "product_family"})
        assert not is_product_leaf({"category": "product_name", "sub_branches": [{"id": "x"}]})


class TestNormalizeIdentificationHelper:
    def test_purl_is_canonicalized(self):
        helper = normalize_identification_helper({"purl": "pkg:PyPI/Django@4.2"})
        assert helper == {"purl": "pkg:pypi/django@4.2"}

    def test_other_fields_kept(self):
        helper = normalize_identification_helper({"cpe": "cpe:2.3:a:acme:widget:1.0:*:*:*:*:*:*:*"})
        assert helper == {"cpe": "cpe:2.3:a:acme:widget:1.0:*:*:*:*:*:*:*"}

    def test_empty_helper(self):
        assert normalize_identification_helper(None) is None
        assert normalize_identification_helper({}) is None
