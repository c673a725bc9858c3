"""
Validation Utilities

URL validation for the listing endpoint and file-name checks for staged
assets.
"""

import re
from urllib.parse import urlparse, urlunparse
from typing import Tuple, Optional
import logging


class URLValidator:
    """
    Validates and normalizes remote URLs used by the pipeline.
    """

    def __init__(self):
        self.logger = logging.getLogger(__name__)

        self.domain_pattern = re.compile(
            r'^[a-zA-Z0-9]([a-zA-Z0-9\-]{0,61}[a-zA-Z0-9])?(\.[a-zA-Z0-9]([a-zA-Z0-9\-]{0,61}[a-zA-Z0-9])?)*$'
        )

    def validate_and_normalize(self, url: str) -> Tuple[bool, str, str]:
        """
        Validate and normalize a URL.

        Args:
            url: The URL to validate

        Returns:
            Tuple of (is_valid, normalized_url, error_message)
        """
        if not url or not isinstance(url, str):
            return False, "", "URL cannot be empty"

        url = url.strip()
        parsed = urlparse(url)

        if parsed.scheme not in ['http', 'https']:
            return False, "", "URL must use HTTP or HTTPS protocol"

        if not parsed.netloc:
            return False, "", "URL must have a valid domain"

        domain = parsed.hostname or ""
        if not self.domain_pattern.match(domain):
            return False, "", "Invalid domain format"

        normalized = urlunparse((parsed.scheme.lower(), parsed.netloc.lower(), parsed.path,
                                 parsed.params, parsed.query, ''))
        return True, normalized, ""


_validator_instance: Optional[URLValidator] = None


def get_validator() -> URLValidator:
    """Return the shared URLValidator instance."""
    global _validator_instance
    if _validator_instance is None:
        _validator_instance = URLValidator()
    return _validator_instance


def validate_url(url: str) -> Tuple[bool, str, str]:
    """
    Validate and normalize a URL.

    Returns (is_valid, normalized_url, error_message).
    """
    return get_validator().validate_and_normalize(url)


def is_safe_filename(name: str) -> bool:
    """True if name is a plain file name that stays inside its target folder."""
    if not name or name in ('.', '..'):
        return False
    if '/' in name or '\\' in name or '\x00' in name:
        return False
    return True
