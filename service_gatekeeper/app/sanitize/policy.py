"""
Allowlist HTML sanitization for untrusted request values.
"""

from dataclasses import dataclass, field
from typing import FrozenSet, Mapping, Optional, Tuple

import nh3

FORMATTING_TAGS = frozenset({
    "b", "i", "font", "s", "u", "o", "sup", "sub", "ins", "del",
    "strong", "strike", "tt", "code", "big", "small", "br", "span", "em",
})
LINK_TAGS = frozenset({"a"})
BLOCK_TAGS = frozenset({
    "p", "div", "h1", "h2", "h3", "h4", "h5", "h6",
    "ul", "ol", "li", "blockquote",
})

# Applied in this order, every occurrence
ENTITY_SUBSTITUTIONS: Tuple[Tuple[str, str], ...] = (
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
    ("'", "&#x27;"),
    ("/", "&#x2F;"),
)


@dataclass(frozen=True)
class SanitizationPolicy:
    """Which markup survives the allowlist pass and how the result is escaped."""

    tags: FrozenSet[str] = FORMATTING_TAGS | LINK_TAGS | BLOCK_TAGS
    attributes: Mapping[str, FrozenSet[str]] = field(
        default_factory=lambda: {"a": frozenset({"href"})}
    )
    url_schemes: FrozenSet[str] = frozenset({"http", "https", "mailto"})
    link_rel: Optional[str] = "nofollow"
    entity_substitutions: Tuple[Tuple[str, str], ...] = ENTITY_SUBSTITUTIONS


DEFAULT_POLICY = SanitizationPolicy()


class Sanitizer:
    """Two-step sanitizer: allowlist filter, then entity escaping.

    Markup the filter keeps (``<b>``, ``<a href=...>``) is escaped again by
    the second step, so it reaches handlers as inert text rather than tags.
    """

    def __init__(self, policy: SanitizationPolicy = DEFAULT_POLICY):
        self.policy = policy
        self._attributes = {tag: set(names) for tag, names in policy.attributes.items()}

    def sanitize(self, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None

        cleaned = nh3.clean(
            value,
            tags=set(self.policy.tags),
            attributes=self._attributes,
            url_schemes=set(self.policy.url_schemes),
            link_rel=self.policy.link_rel,
        )
        for char, entity in self.policy.entity_substitutions:
            cleaned = cleaned.replace(char, entity)
        return cleaned

    __call__ = sanitize
