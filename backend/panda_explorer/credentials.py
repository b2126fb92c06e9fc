"""
Holder for the Bitpanda API key used by every authenticated call.

A single shared cell: ``set_credential`` is visible to the next request, but
a request already in flight keeps the key it was built with.
"""

import logging
from typing import Optional

logger = logging.getLogger(__name__)


class CredentialContext:
    def __init__(self, secret: Optional[str] = None):
        self._secret = secret

    @property
    def secret(self) -> Optional[str]:
        return self._secret

    def has_credential(self) -> bool:
        """True when the key is non-blank after trimming"""
        return bool(self._secret and self._secret.strip())

    def set_credential(self, value: Optional[str]):
        """Overwrite the key; validation is a separate explicit call"""
        self._secret = value
        logger.info("API key updated")
