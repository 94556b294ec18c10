"""
Jinja2 templates of the HTML preview.

DOCUMENT_TEMPLATE is the page; PARTIALS are included by name for repeating
structures. Rich-text fields arrive as sanitized HTML and are emitted with
'safe'; everything else is autoescaped.
"""

PRODUCT_STATUS_HEADER = """<thead>
  <tr>
    <th>{{ t_product }}</th>
    <th>{{ t_cvss_vector }}</th>
    <th>{{ t_cvss_base_score }}</th>
    <th>{{ t_severity }}</th>
  </tr>
</thead>
"""

PRODUCT_STATUS_ROW = """<tr>
  <td>{{ row.name }}</td>
  <td>{{ row.vectorString }}</td>
  <td>{{ row.baseScore }}</td>
  <td>{{ row.baseSeverity }}</td>
</tr>
"""

REMEDIATION = """<h5>{% filter replace_underscores %}{% filter upper_case %}{{ remediation.category }}{% endfilter %}{% endfilter %}{% if remediation.date %} ({{ remediation.date }}){% endif %}</h5>
{% if remediation.details %}
<p>{{ remediation.details|safe }}</p>
{% endif %}
{% if remediation.product_ids %}
<h6>{{ t_for_products }}:</h6>
<ul>
{% for product_id in remediation.product_ids %}
  <li>{{ product_name(product_id) }}</li>
{% endfor %}
</ul>
{% endif %}
{% if remediation.group_ids %}
<h6>{{ t_for_groups }}:</h6>
<ul>
{% for group_id in remediation.group_ids %}
  <li>{{ group_id }}</li>
{% endfor %}
</ul>
{% endif %}
{% if remediation.url %}
<p>{% with url = remediation.url %}{% include "url" %}{% endwith %}</p>
{% endif %}
{% for entitlement in remediation.entitlements %}
<p>{{ entitlement|safe }}</p>
{% endfor %}
{% if remediation.restart_required %}
{{ t_restart_required }}: <b>{{ remediation.restart_required.category }}</b>
{% if remediation.restart_required.details %}
<p>{{ remediation.restart_required.details|safe }}</p>
{% endif %}
{% endif %}
"""

THREAT = """<h5>{% filter replace_underscores %}{% filter upper_case %}{{ threat.category }}{% endfilter %}{% endfilter %}{% if threat.date %} ({{ threat.date }}){% endif %}</h5>
{% if threat.details %}
<p>{{ threat.details|safe }}</p>
{% endif %}
{% if threat.product_ids %}
<h6>{{ t_for_products }}:</h6>
<ul>
{% for product_id in threat.product_ids %}
  <li>{{ product_name(product_id) }}</li>
{% endfor %}
</ul>
{% endif %}
{% if threat.group_ids %}
<h6>{{ t_for_groups }}:</h6>
<ul>
{% for group_id in threat.group_ids %}
  <li>{{ group_id }}</li>
{% endfor %}
</ul>
{% endif %}
"""

VULNERABILITY_NOTE = """{% if note.title %}<b>{{ note.title }}</b>{% endif %}{% if note.audience %} ({{ note.audience }}){% endif %}

{% if note.text %}
<p>{{ note.text|safe }}</p>
{% endif %}
"""

DOCUMENT_NOTE = """{% if note.title %}
<h2>{{ note.title }}</h2>
{% endif %}
{% if note.audience %}
<small>{{ note.audience }}</small>
{% endif %}
{% if note.text %}
<p>{{ note.text|safe }}</p>
{% endif %}
"""

ACKNOWLEDGMENT = """  <li>{% filter remove_trailing_comma %}{% for name in acknowledgment.names %}{{ name }}, {% endfor %}{% endfilter %}{% if acknowledgment.organization %}{% if acknowledgment.names %} {{ t_from }} {% endif %}{{ acknowledgment.organization }}{% endif %}{% if acknowledgment.summary %} {{ t_for }} {{ acknowledgment.summary|safe }}{% endif %}{% if acknowledgment.urls %} ({{ t_see }}: {% filter remove_trailing_comma %}{% for url in acknowledgment.urls %}{% include "url" %}, {% endfor %}{% endfilter %}){% endif %}</li>
"""

REFERENCE = """  <li>{{ reference.summary|safe }}{% if reference.category %} ({% filter replace_underscores %}{{ reference.category }}{% endfilter %}){% endif %}{% if reference.url %} {% with url = reference.url %}{% include "url" %}{% endwith %}{% endif %}</li>
"""

URL = """<a {% filter secure_href %}{{ url }}{% endfilter %}>{{ url }}</a>"""

PARTIALS = {
    "product_status_header": PRODUCT_STATUS_HEADER,
    "product_status_row": PRODUCT_STATUS_ROW,
    "remediation": REMEDIATION,
    "threat": THREAT,
    "vulnerability_note": VULNERABILITY_NOTE,
    "document_note": DOCUMENT_NOTE,
    "acknowledgment": ACKNOWLEDGMENT,
    "reference": REFERENCE,
    "url": URL,
}

DOCUMENT_TEMPLATE = """<!DOCTYPE html>
<html lang="{{ document.lang }}">
<head>
<meta charset="utf-8">
<title>{{ document.tracking.id }}: {{ document.title }}</title>
<style>
  body { font-family: sans-serif; margin: 2em; color: #222; }
  table { border-collapse: collapse; margin-bottom: 1em; }
  th, td { border: 1px solid #ccc; padding: 0.3em 0.6em; text-align: left; vertical-align: top; }
  .meta td { border: none; padding: 0.1em 0.6em 0.1em 0; }
</style>
</head>
<body>
<h1>{{ document.tracking.id }}: {{ document.title }}</h1>
<table class="meta">
  <tr><td>{{ t_id }}:</td><td>{{ document.tracking.id }}</td></tr>
  <tr><td>{{ t_publisher }}:</td><td>{{ document.publisher.name }}</td></tr>
  <tr><td>{{ t_document_category }}:</td><td>{{ document.category }}</td></tr>
{% if document.publisher.namespace %}
  <tr><td>{{ t_namespace }}:</td><td>{{ document.publisher.namespace }}</td></tr>
{% endif %}
{% if document.publisher.contact_details %}
  <tr><td>{{ t_contact_details }}:</td><td>{{ document.publisher.contact_details }}</td></tr>
{% endif %}
{% if document.publisher.issuing_authority %}
  <tr><td>{{ t_issuing_authority }}:</td><td>{{ document.publisher.issuing_authority|safe }}</td></tr>
{% endif %}
  <tr><td>{{ t_initial_release_date }}:</td><td>{{ document.tracking.initial_release_date }}</td></tr>
  <tr><td>{{ t_current_release_date }}:</td><td>{{ document.tracking.current_release_date }}</td></tr>
  <tr><td>{{ t_build_date }}:</td><td>{{ document.tracking.generator.date }}</td></tr>
  <tr><td>{{ t_current_version }}:</td><td>{{ document.tracking.version }}</td></tr>
  <tr><td>{{ t_status }}:</td><td>{{ document.tracking.status }}</td></tr>
  <tr><td>{{ t_language }}:</td><td>{{ document.lang }}</td></tr>
{% if document.source_lang %}
  <tr><td>{{ t_original_language }}:</td><td>{{ document.source_lang }}</td></tr>
{% endif %}
{% if document.tracking.aliases %}
  <tr><td>{{ t_also_referred_to }}:</td><td>{{ document.tracking.aliases|join(", ") }}</td></tr>
{% endif %}
{% if document.tracking.generator.engine %}
  <tr><td>{{ t_engine }}:</td><td>{{ document.tracking.generator.engine.name }} {{ document.tracking.generator.engine.version }}</td></tr>
{% endif %}
</table>
{% if document.distribution %}
<h2>{{ t_sharing_rules }}</h2>
{% if document.distribution.tlp %}
<p>TLP: {{ document.distribution.tlp.label }}{% if document.distribution.tlp.url %} ({{ t_for_tlp_version_see }}: {% with url = document.distribution.tlp.url %}{% include "url" %}{% endwith %}){% endif %}</p>
{% endif %}
{% if document.distribution.text %}
<p>{{ document.distribution.text|safe }}</p>
{% endif %}
{% endif %}
{% for note in document.notes %}
{% include "document_note" %}
{% endfor %}
{% if product_tree.product_groups %}
<h2>{{ t_product_groups }}</h2>
<ul>
{% for group in product_tree.product_groups %}
  <li>{{ group.group_id }}{% if group.summary %}: {{ group.summary|safe }}{% endif %}</li>
{% endfor %}
</ul>
{% endif %}
{% if vulnerabilities %}
<h2>{{ t_vulnerabilities }}</h2>
{% for vulnerability in vulnerabilities %}
<h3>{{ vulnerability.cve }}{% if vulnerability.cve and vulnerability.title %}: {% endif %}{{ vulnerability.title }}</h3>
{% if vulnerability.cwe %}
<p><b>{{ t_cwe }}:</b> {{ vulnerability.cwe.id }}{% if vulnerability.cwe.name %}: {{ vulnerability.cwe.name }}{% endif %}</p>
{% endif %}
{% if vulnerability.discovery_date %}
<p><b>{{ t_discovery_date }}:</b> {{ vulnerability.discovery_date }}</p>
{% endif %}
{% if vulnerability.release_date %}
<p><b>{{ t_release_date }}:</b> {{ vulnerability.release_date }}</p>
{% endif %}
{% for note in vulnerability.notes %}
{% include "vulnerability_note" %}
{% endfor %}
{% set status_tables = product_status_tables(vulnerability) %}
{% if status_tables %}
<h4>{{ t_product_status }}</h4>
{% for table in status_tables %}
<h5>{{ table.label }}</h5>
<table>
{% include "product_status_header" %}
<tbody>
{% for row in table.rows %}
{% include "product_status_row" %}
{% endfor %}
</tbody>
</table>
{% endfor %}
{% endif %}
{% if vulnerability.remediations %}
<h4>{{ t_remediations }}</h4>
{% for remediation in vulnerability.remediations %}
{% include "remediation" %}
{% endfor %}
{% endif %}
{% if vulnerability.threats %}
<h4>{{ t_threats }}</h4>
{% for threat in vulnerability.threats %}
{% include "threat" %}
{% endfor %}
{% endif %}
{% if vulnerability.involvements %}
<h4>{{ t_involvement }}</h4>
<ul>
{% for involvement in vulnerability.involvements %}
  <li>{% filter replace_underscores %}{{ involvement.party }}: {{ involvement.status }}{% endfilter %}{% if involvement.date %} ({{ involvement.date }}){% endif %}{% if involvement.summary %} {{ involvement.summary|safe }}{% endif %}</li>
{% endfor %}
</ul>
{% endif %}
{% if vulnerability.acknowledgments %}
<h4>{{ t_acknowledgments }}</h4>
<ul>
{% for acknowledgment in vulnerability.acknowledgments %}
{% include "acknowledgment" %}
{% endfor %}
</ul>
{% endif %}
{% if vulnerability.references %}
<h4>{{ t_references }}</h4>
<ul>
{% for reference in vulnerability.references %}
{% include "reference" %}
{% endfor %}
</ul>
{% endif %}
{% endfor %}
{% endif %}
{% if document.acknowledgments %}
<h2>{{ t_acknowledgments }}</h2>
<p>{{ t_acknowledgments_from_publisher }}:</p>
<ul>
{% for acknowledgment in document.acknowledgments %}
{% include "acknowledgment" %}
{% endfor %}
</ul>
{% endif %}
{% if document.references %}
<h2>{{ t_references }}</h2>
<ul>
{% for reference in document.references %}
{% include "reference" %}
{% endfor %}
</ul>
{% endif %}
{% if document.tracking.revision_history %}
<h2>{{ t_revision_history }}</h2>
<table>
<thead>
  <tr><th>{{ t_version }}</th><th>{{ t_date_of_revision }}</th><th>{{ t_summary_of_revision }}</th></tr>
</thead>
<tbody>
{% for revision in document.tracking.revision_history %}
  <tr><td>{{ revision.number }}</td><td>{{ revision.date }}</td><td>{{ revision.summary|safe }}</td></tr>
{% endfor %}
</tbody>
</table>
{% endif %}
</body>
</html>
"""
