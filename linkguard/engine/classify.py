"""Per-link policy classification.

Rules are applied in a fixed order and the first one that fires decides the
outcome:

1. empty or non-string URL: invalid, error
2. ``#fragment``: in-page anchor, valid
3. ``/path``: internal, valid
4. URL without a parseable host: invalid, error
5. ``.edu`` host: external, error (fires before any tenant rule)
6. host covered by a blocked entry: external, error (``competitor`` label
   when a competitor entry covers it too)
7. host covered by an allowed entry: external, valid
8. anything else: external, valid but flagged with an ``unapproved`` warning
"""

from __future__ import annotations

import re
from typing import Optional
from urllib.parse import urlsplit

from .matching import to_ascii_host
from .types import DomainRuleSet, LinkClassification, LinkViolation

RESTRICTED_SUFFIX = ".edu"

# Schemes that cannot be used without a host.
_HOST_REQUIRED_SCHEMES = {"http", "https", "ftp", "ws", "wss"}
_FORBIDDEN_NETLOC_RE = re.compile(r"[\s<>^|\"{}\\`]")

EDU_SUGGESTION = "Use your site's own content pages or approved educational resources instead"
COMPETITOR_SUGGESTION = "Link to your own content instead of competitors"
BLOCKED_SUGGESTION = "Remove this link or replace with an approved source"
UNAPPROVED_SUGGESTION = "Consider using government, BLS, or nonprofit sources"


def parse_host(url: str) -> Optional[str]:
    """Return the lowercase host of an absolute URL, or ``None`` if unparseable.

    Hosts are returned in ASCII form without a trailing dot, so
    ``https://school．edu/`` yields ``school.edu``. Schemes such as
    ``mailto:`` legitimately have no host and yield an empty string.
    """

    try:
        parts = urlsplit(url)
        parts.port  # raises for non-numeric or out-of-range ports
    except ValueError:
        return None
    if not parts.scheme:
        return None
    if _FORBIDDEN_NETLOC_RE.search(parts.netloc):
        return None
    host = to_ascii_host((parts.hostname or "").rstrip("."))
    if host is None:
        return None
    if not host and parts.scheme.lower() in _HOST_REQUIRED_SCHEMES:
        return None
    return host


def _invalid(url: str, anchor_text: str, message: str) -> LinkClassification:
    return LinkClassification(
        category="invalid",
        is_valid=False,
        violation=LinkViolation(
            domain="",
            url=url,
            anchor_text=anchor_text,
            rule_type="blocked",
            severity="error",
            suggestion=None,
            message=message,
        ),
    )


def classify_link(url: object, anchor_text: str, rule_set: DomainRuleSet) -> LinkClassification:
    """Classify one link against ``rule_set``."""

    if not url or not isinstance(url, str):
        return _invalid(url if isinstance(url, str) else "", anchor_text, "Empty or invalid URL")

    if url.startswith("#"):
        return LinkClassification(category="anchor", is_valid=True)

    if url.startswith("/"):
        return LinkClassification(category="internal", is_valid=True)

    domain = parse_host(url)
    if domain is None:
        return _invalid(url, anchor_text, "Invalid URL format")

    if domain.endswith(RESTRICTED_SUFFIX):
        return LinkClassification(
            category="external",
            is_valid=False,
            violation=LinkViolation(
                domain=domain,
                url=url,
                anchor_text=anchor_text,
                rule_type="edu_restricted",
                severity="error",
                suggestion=EDU_SUGGESTION,
                message="Direct .edu links are not allowed. Use internal pages or approved sources.",
            ),
        )

    if rule_set.blocked.match(domain) is not None:
        if rule_set.competitor.match(domain) is not None:
            rule_type = "competitor"
            suggestion = COMPETITOR_SUGGESTION
            message = f"Competitor link detected: {domain}. This link is not allowed."
        else:
            rule_type = "blocked"
            suggestion = BLOCKED_SUGGESTION
            message = f"Blocked domain: {domain}. This link violates content policy."
        return LinkClassification(
            category="external",
            is_valid=False,
            violation=LinkViolation(
                domain=domain,
                url=url,
                anchor_text=anchor_text,
                rule_type=rule_type,
                severity="error",
                suggestion=suggestion,
                message=message,
            ),
        )

    if rule_set.allowed.match(domain) is not None:
        return LinkClassification(category="external", is_valid=True)

    return LinkClassification(
        category="external",
        is_valid=True,
        violation=LinkViolation(
            domain=domain,
            url=url,
            anchor_text=anchor_text,
            rule_type="unapproved",
            severity="warning",
            suggestion=UNAPPROVED_SUGGESTION,
            message=f"External link to {domain} is not on the approved list. Review carefully.",
        ),
    )
