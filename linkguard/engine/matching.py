"""Domain normalisation and suffix matching."""

from __future__ import annotations

import re
from typing import FrozenSet, Iterable, Iterator, Optional

_SCHEME_RE = re.compile(r"^[a-z][a-z0-9+.\-]*://")


def to_ascii_host(host: str) -> Optional[str]:
    """Map ``host`` to the lowercase ASCII form browsers resolve.

    Ideographic and fullwidth dots become ``.``, compatibility characters
    such as fullwidth letters are folded and Unicode labels are punycode
    encoded, so ``bücher.de`` becomes ``xn--bcher-kva.de``. Returns ``None``
    when the host cannot be encoded (empty or overlong labels, prohibited
    characters).
    """

    if not host:
        return ""
    if host.isascii():
        ascii_host = host
    else:
        try:
            ascii_host = host.encode("idna").decode("ascii")
        except UnicodeError:
            return None
    return ascii_host.lower().rstrip(".")


def normalize_domain(value: str) -> str:
    """Return ``value`` as a bare lowercase host suitable for rule lookups.

    Accepts what administrators tend to paste: surrounding whitespace, a
    scheme, a path, a port, a ``*.`` wildcard prefix or a trailing dot.
    Internationalised hosts are returned in their ASCII form (see
    :func:`to_ascii_host`); a host that cannot be encoded is returned as is.
    Returns an empty string when nothing usable is left.
    """

    domain = (value or "").strip().lower()
    domain = _SCHEME_RE.sub("", domain)
    domain = domain.split("/", 1)[0]
    domain = domain.split("?", 1)[0].split("#", 1)[0]
    domain = domain.rsplit("@", 1)[-1]
    if ":" in domain and not domain.startswith("["):
        domain = domain.split(":", 1)[0]
    if domain.startswith("*."):
        domain = domain[2:]
    domain = domain.strip(".")
    ascii_domain = to_ascii_host(domain)
    return (ascii_domain if ascii_domain is not None else domain).strip(".")


def host_suffixes(host: str) -> Iterator[str]:
    """Yield ``host`` followed by each parent domain, longest first.

    ``a.b.com`` yields ``a.b.com``, ``b.com`` and ``com``.
    """

    labels = host.split(".")
    for index in range(len(labels)):
        suffix = ".".join(labels[index:])
        if suffix:
            yield suffix


class DomainSuffixSet:
    """Hashed suffix set answering "is this host, or a parent of it, listed?".

    A rule for ``example.com`` matches ``example.com`` and
    ``sub.example.com`` but a rule for ``sub.example.com`` never matches
    ``example.com``. Lookups cost one hash probe per host label.
    """

    __slots__ = ("_domains",)

    def __init__(self, domains: Iterable[str] = ()) -> None:
        normalized = (normalize_domain(domain) for domain in domains)
        self._domains: FrozenSet[str] = frozenset(domain for domain in normalized if domain)

    def match(self, host: str) -> Optional[str]:
        """Return the listed domain that covers ``host``, if any."""

        host = to_ascii_host((host or "").lower().rstrip(".")) or ""
        if not host or not self._domains:
            return None
        for suffix in host_suffixes(host):
            if suffix in self._domains:
                return suffix
        return None

    def __contains__(self, host: object) -> bool:
        return isinstance(host, str) and self.match(host) is not None

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._domains))

    def __len__(self) -> int:
        return len(self._domains)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DomainSuffixSet):
            return NotImplemented
        return self._domains == other._domains

    def __hash__(self) -> int:
        return hash(self._domains)

    def __repr__(self) -> str:
        return f"DomainSuffixSet({sorted(self._domains)!r})"
