"""
Destination allowlist for relayed datagrams.

Patterns are either exact host strings or CIDR-looking strings such as
``192.168.1.0/24``. The CIDR form is matched on whole dot-separated segments:
everything before the last segment of the network part must equal the same
number of leading segments of the candidate. The prefix length after the
slash is not interpreted, so ``10.0.0.0/8`` only admits ``10.0.0.*``.
"""

from typing import Optional, Sequence


def _prefix_matches(candidate_host: str, pattern: str) -> bool:
    parts = pattern.split("/")
    if len(parts) != 2:
        return False

    network_segments = parts[0].split(".")
    if len(network_segments) < 2:
        return False

    prefix = network_segments[:-1]
    if any(not segment for segment in prefix):
        return False

    candidate_segments = candidate_host.split(".")
    if len(candidate_segments) < len(prefix):
        return False

    return candidate_segments[: len(prefix)] == prefix


def pattern_matches(candidate_host: str, pattern: str) -> bool:
    """Check a single allowlist pattern against a destination host."""
    if pattern == candidate_host:
        return True
    if "/" in pattern:
        return _prefix_matches(candidate_host, pattern)
    return False


def is_allowed(candidate_host: str, patterns: Optional[Sequence[str]]) -> bool:
    """
    Decide whether UDP traffic may be sent to ``candidate_host``.

    Args:
        candidate_host: Destination host as supplied by the client
        patterns: Allowlist patterns, or None when no allowlist is configured

    Returns:
        True when no allowlist is configured or any pattern matches
    """
    if patterns is None:
        return True
    return any(pattern_matches(candidate_host, pattern) for pattern in patterns)
