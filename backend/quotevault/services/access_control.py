"""
QuoteVault Backend - Access Control Check
==========================================

What:  Decides whether a supplied credential may read, update or delete a quote.
How:   A pure comparison function plus an immutable AccessPolicy carrying the
       master override, built once from settings and injected into QuoteService.
Who:   QuoteService (get/update/delete).

Rule (a supplied credential is authorized when any holds):
    1. it equals the configured master override
    2. the quote has no credential (whatever was supplied, including nothing)
    3. it equals the stored credential

Comparison is plain string equality on unhashed values. Handlers only ever
call AccessPolicy, so a salted-hash comparison can replace
`credentials_match` without touching them.
"""

from dataclasses import dataclass
from typing import Optional

from quotevault.exceptions import UnauthorizedError


def normalize_credential(value: Optional[str]) -> Optional[str]:
    """Trims a credential; blank or missing becomes None."""
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


def credentials_match(
    stored: Optional[str],
    supplied: Optional[str],
    master_secret: Optional[str],
) -> bool:
    """
    Pure access check.

    An empty stored credential counts as absent, which opens the quote to
    any supplied value. An empty or missing master secret never matches.
    """
    if not stored:
        return True
    if master_secret and supplied == master_secret:
        return True
    return stored == supplied


@dataclass(frozen=True)
class AccessPolicy:
    """
    Immutable holder of the master override.

    Example:
        policy = AccessPolicy(master_secret=settings.master_credential)
        policy.ensure_authorized(quote.credential, supplied)
    """
    master_secret: Optional[str] = None

    def is_authorized(self, stored: Optional[str], supplied: Optional[str]) -> bool:
        return credentials_match(stored, supplied, self.master_secret)

    def ensure_authorized(self, stored: Optional[str], supplied: Optional[str]) -> None:
        """Raises UnauthorizedError (→ 401) when `is_authorized` is False."""
        if not self.is_authorized(stored, supplied):
            raise UnauthorizedError()

    def __repr__(self) -> str:
        configured = "set" if self.master_secret else "unset"
        return f"AccessPolicy(master_secret=<{configured}>)"
