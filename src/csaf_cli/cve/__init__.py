from .cve_fetcher import CVE_API_URL, apply_cve_record, fetch_cve_record

__all__ = ['CVE_API_URL', 'apply_cve_record', 'fetch_cve_record']
