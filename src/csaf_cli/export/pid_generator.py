"""
Stable product identifiers for CSAF export.

Every export pass creates its own PidGenerator. Internal branch ids from the
draft are mapped to sequential external ids (CSAFPID-0001, CSAFPID-0002, ...)
and the mapping is remembered for the lifetime of the instance, so the same
branch is referenced by the same id everywhere in one document.
"""

from typing import Dict

PRODUCT_ID_PREFIX = "CSAFPID"
RELATIONSHIP_ID_PREFIX = "CSAFRID"


class PidGenerator:
    """Memoizing generator of sequential, prefixed identifiers."""

    def __init__(self, prefix: str = PRODUCT_ID_PREFIX):
        self.prefix = prefix
        self.counter = 1
        self._generated: Dict[str, str] = {}

    def get_id(self, internal_key: str) -> str:
        """
        Return the external id for an internal key, minting one on first use.

        Keys are compared by exact equality only.

        Args:
            internal_key: Opaque internal identifier (e.g. a product tree branch id)

        Returns:
            str: Identifier of the form '<prefix>-<counter>' with at least 4 digits
        """
        previous = self._generated.get(internal_key)
        if previous is not None:
            return previous

        new_id = f"{self.prefix}-{self.counter:04d}"
        self.counter += 1
        self._generated[internal_key] = new_id
        return new_id

    @property
    def mapping(self) -> Dict[str, str]:
        """Copy of the internal key -> external id mapping in mint order."""
        return dict(self._generated)

    def __len__(self) -> int:
        return len(self._generated)
