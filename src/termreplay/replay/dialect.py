# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Device CLI dialect tables and command recognition."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from functools import cached_property
from types import MappingProxyType

from termreplay.replay.models import DialectMatch

STANDALONE_CATEGORY = "standalone"


@dataclass(frozen=True)
class DialectTable:
    """Immutable command vocabulary of one device CLI.

    Attributes:
        name: Dialect identifier (e.g. "routeros")
        categories: Category -> known verbs. Categories without verbs default
            to their own name as the verb.
        default_verb: Verb assumed when a category is typed alone
        content_indicators: Patterns that mark output text as coming from
            this dialect
    """

    name: str
    categories: Mapping[str, tuple[str, ...]]
    default_verb: str = "print"
    content_indicators: tuple[re.Pattern[str], ...] = field(default=())

    @classmethod
    def build(
        cls,
        name: str,
        categories: Mapping[str, list[str] | tuple[str, ...]],
        *,
        default_verb: str = "print",
        content_indicators: tuple[str, ...] = (),
    ) -> DialectTable:
        frozen = MappingProxyType({category: tuple(verbs) for category, verbs in categories.items()})
        indicators = tuple(re.compile(pattern, re.IGNORECASE | re.MULTILINE) for pattern in content_indicators)
        return cls(name, frozen, default_verb=default_verb, content_indicators=indicators)

    @cached_property
    def verbs(self) -> frozenset[str]:
        return frozenset(verb for verbs in self.categories.values() for verb in verbs)

    @cached_property
    def keywords(self) -> tuple[str, ...]:
        """Categories and verbs, longest first so alternations prefer full words."""
        return tuple(sorted(set(self.categories) | self.verbs, key=lambda word: (-len(word), word)))

    def default_verb_for(self, category: str) -> str:
        return self.default_verb if self.categories.get(category) else category


ROUTEROS_DIALECT = DialectTable.build(
    "routeros",
    {
        "system": [
            "resource",
            "identity",
            "clock",
            "license",
            "package",
            "backup",
            "reset-configuration",
            "reboot",
            "shutdown",
        ],
        "interface": ["print", "monitor", "set", "add", "remove", "enable", "disable", "comment"],
        "ip": [
            "address",
            "route",
            "dns",
            "dhcp-server",
            "dhcp-client",
            "firewall",
            "service",
            "arp",
            "neighbor",
        ],
        "routing": ["ospf", "bgp", "rip", "static", "table"],
        "user": ["print", "add", "remove", "set", "active", "group"],
        "tool": ["ping", "traceroute", "bandwidth-test", "speed-test", "netwatch", "sniffer", "profile"],
        "firewall": ["filter", "nat", "mangle", "raw", "address-list", "service-port"],
        "file": ["print", "remove", "copy", "move"],
        "export": [],
        "import": [],
        "queue": ["simple", "tree", "type"],
        "bridge": ["print", "add", "remove", "set", "port"],
        "vlan": ["print", "add", "remove", "set"],
        "wireless": ["print", "scan", "connect", "disconnect", "security-profiles"],
        "ppp": ["secret", "profile", "active", "interface"],
        "certificate": ["print", "add", "remove", "import", "export"],
        "log": ["print", "info", "warning", "error", "critical"],
    },
    content_indicators=(
        r"\[\w+@[^\]]+\]",
        r"^\s*\d+\s+\w+=",
        r"flags:",
        r"RouterOS",
        r"MikroTik",
        r"version:\s*\d+\.\d+",
        r"uptime:",
        r"build-time:",
        r"factory-software:",
        r"free-memory:",
        r"total-memory:",
        r"architecture-name:",
        r"board-name:",
        r"platform:",
    ),
)


class CommandRecognizer:
    """Classifies typed commands against a dialect table.

    Matching is permissive: a known category is reported even when the verb
    after it is not in the category's list. A miss is reported as metadata,
    never as an error.
    """

    def __init__(self, table: DialectTable = ROUTEROS_DIALECT) -> None:
        self.table = table

    def recognize(self, command: str) -> DialectMatch:
        tokens = command.strip().lower().split()
        if tokens and tokens[0].startswith("/"):
            # Absolute menu path: "/system resource print"
            tokens[0] = tokens[0][1:]
            if not tokens[0]:
                tokens.pop(0)
        if not tokens:
            return DialectMatch(is_dialect_command=False)

        first, rest = tokens[0], tokens[1:]
        if first in self.table.categories:
            return DialectMatch(
                is_dialect_command=True,
                category=first,
                command_name=rest[0] if rest else self.table.default_verb_for(first),
                parameters=tuple(rest[1:]),
            )
        if first in self.table.verbs:
            return DialectMatch(
                is_dialect_command=True,
                category=STANDALONE_CATEGORY,
                command_name=first,
                parameters=tuple(rest),
            )
        return DialectMatch(is_dialect_command=False)

    def looks_like_dialect_content(self, text: str) -> bool:
        return any(pattern.search(text) for pattern in self.table.content_indicators)
