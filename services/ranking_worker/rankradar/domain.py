from __future__ import annotations


def canonical_host(host: str | None) -> str:
    """Return the canonical identity used for grouping duplicate hosts.

    - Lowercase, surrounding whitespace trimmed
    - Leading "www." label removed; every other subdomain is kept
    Repeated "www." prefixes are all removed so that canonicalizing an
    already canonical host is a no-op; the old JS normalizeWebsite only
    removed the first one.
    """
    if not host:
        return ""
    out = str(host).strip().lower()
    while out.startswith("www."):
        out = out[4:].strip()
    return out
