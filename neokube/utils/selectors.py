"""Label selector parsing and matching.

Supports the equality- and set-based forms kubectl accepts:
``k=v``, ``k==v``, ``k!=v``, ``k``, ``!k``, ``k in (a,b)``, ``k notin (a,b)``.
Requirements are comma separated and ANDed.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

_SET_PATTERN = re.compile(r"^([A-Za-z0-9._/-]+)\s+(in|notin)\s+\(([^)]*)\)$")
_KEY_PATTERN = re.compile(r"^[A-Za-z0-9._/-]+$")


@dataclass(frozen=True)
class Requirement:
    """Single label requirement."""

    key: str
    operator: str  # "=", "!=", "in", "notin", "exists", "!exists"
    values: tuple[str, ...] = ()

    def matches(self, labels: dict[str, str]) -> bool:
        if self.operator == "exists":
            return self.key in labels
        if self.operator == "!exists":
            return self.key not in labels
        if self.operator in ("=", "in"):
            return self.key in labels and labels[self.key] in self.values
        # "!=" and "notin" match objects missing the key
        return labels.get(self.key) not in self.values


def _split_requirements(text: str) -> list[str]:
    """Split on commas that are not inside parentheses."""
    parts: list[str] = []
    depth = 0
    current: list[str] = []
    for char in text:
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
        if char == "," and depth == 0:
            parts.append("".join(current))
            current = []
            continue
        current.append(char)
    parts.append("".join(current))
    return [part.strip() for part in parts if part.strip()]


def _check_key(key: str, text: str) -> str:
    if not _KEY_PATTERN.match(key):
        raise ValueError(f"Invalid label selector: {text!r}")
    return key


def parse_label_selector(text: str | None) -> list[Requirement]:
    """Parse a selector string into requirements.

    Raises:
        ValueError: If the selector is malformed.
    """
    if not text:
        return []

    requirements: list[Requirement] = []
    for part in _split_requirements(text):
        set_match = _SET_PATTERN.match(part)
        if set_match:
            key, operator, raw_values = set_match.groups()
            values = tuple(v.strip() for v in raw_values.split(",") if v.strip())
            requirements.append(Requirement(key, operator, values))
        elif "!=" in part:
            key, value = part.split("!=", 1)
            requirements.append(Requirement(_check_key(key.strip(), text), "!=", (value.strip(),)))
        elif "==" in part:
            key, value = part.split("==", 1)
            requirements.append(Requirement(_check_key(key.strip(), text), "=", (value.strip(),)))
        elif "=" in part:
            key, value = part.split("=", 1)
            requirements.append(Requirement(_check_key(key.strip(), text), "=", (value.strip(),)))
        elif part.startswith("!"):
            requirements.append(Requirement(_check_key(part[1:].strip(), text), "!exists"))
        else:
            requirements.append(Requirement(_check_key(part, text), "exists"))
    return requirements


def matches_labels(selector: str | list[Requirement] | None, labels: dict[str, str]) -> bool:
    """Return True when ``labels`` satisfy every requirement of ``selector``."""
    requirements = (
        parse_label_selector(selector) if selector is None or isinstance(selector, str) else selector
    )
    return all(requirement.matches(labels) for requirement in requirements)


__all__ = [
    "Requirement",
    "matches_labels",
    "parse_label_selector",
]
