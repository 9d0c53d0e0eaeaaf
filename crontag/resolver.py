"""
Trust anchors configured in resolvers

Unbound names trust anchors inline (trust-anchor) or through files in zone
format (trust-anchor-file, auto-trust-anchor-file) or BIND format
(trusted-keys-file). BIND keeps them in trusted-keys, managed-keys and
trust-anchors clauses. Both are reduced to AnchorSource items which point at
something the zone file reader can parse.
"""

import logging
import os
import re
import shlex
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator, List, Optional

from crontag.errors import ResolverConfigError

logger = logging.getLogger(__name__)


class SourceKind(Enum):
    RECORD = "record"
    ZONEFILE = "zonefile"
    BINDKEYS = "bindkeys"


@dataclass
class AnchorSource:
    kind: SourceKind
    value: str
    filename: str = "-"
    lineno: Optional[int] = None


UNBOUND_OPTION = re.compile(r"^\s*([a-z-]+):\s*(.*)$")
UNBOUND_SOURCES = {
    "trust-anchor": SourceKind.RECORD,
    "trust-anchor-file": SourceKind.ZONEFILE,
    "auto-trust-anchor-file": SourceKind.ZONEFILE,
    "trusted-keys-file": SourceKind.BINDKEYS,
}

# quoted strings are kept, comments are dropped
BIND_TEXT = re.compile(
    r'("(?:[^"\\]|\\.)*")|/\*.*?\*/|//[^\n]*|#[^\n]*', re.DOTALL
)
BIND_CLAUSE = re.compile(
    r"\b(trusted-keys|managed-keys|trust-anchors)\s*\{(.*?)\}\s*;", re.DOTALL
)
BIND_ANCHOR_TYPES = {
    "initial-key": "DNSKEY",
    "static-key": "DNSKEY",
    "initial-ds": "DS",
    "static-ds": "DS",
}
WHITESPACE_RE = re.compile(r"\s+")


def unbound_value(text: str) -> str:
    text = text.strip()
    if text.startswith('"'):
        end = text.find('"', 1)
        if end < 0:
            raise ResolverConfigError("Unterminated quoted value")
        return text[1:end]
    return text.split("#", 1)[0].strip()


def scan_unbound(lines: Iterable[str], filename: str = "-") -> Iterator[AnchorSource]:
    directory = None
    for lineno, line in enumerate(lines, start=1):
        m = UNBOUND_OPTION.match(line)
        if not m:
            continue
        option = m.group(1)
        kind = UNBOUND_SOURCES.get(option)
        if kind is None and option != "directory":
            continue

        try:
            value = unbound_value(m.group(2))
        except ResolverConfigError as exc:
            exc.filename, exc.lineno = filename, lineno
            raise

        if option == "directory":
            directory = value
            continue
        if kind is not SourceKind.RECORD and directory and not os.path.isabs(value):
            value = os.path.join(directory, value)

        logger.debug("%s:%d: %s %s", filename, lineno, option, value)
        yield AnchorSource(kind, value, filename, lineno)


def _strip_comments(text: str) -> str:
    def replace(m: re.Match) -> str:
        if m.group(1):
            return m.group(1)
        # keep line numbers intact
        return "\n" * m.group(0).count("\n")

    return BIND_TEXT.sub(replace, text)


def bind_record(clause: str, fields: List[str]) -> str:
    """Zone file line for one entry of a BIND key clause"""
    if len(fields) < 2:
        raise ResolverConfigError(f"Incomplete {clause} entry")
    name = fields[0] if fields[0].endswith(".") else fields[0] + "."

    if clause == "trusted-keys":
        rdtype, rdata = "DNSKEY", fields[1:]
    else:
        rdtype = BIND_ANCHOR_TYPES.get(fields[1])
        if rdtype is None:
            raise ResolverConfigError(f"Unknown anchor type {fields[1]} for {name}")
        rdata = fields[2:]

    if len(rdata) < 4:
        raise ResolverConfigError(f"Incomplete {clause} entry for {name}")
    key = WHITESPACE_RE.sub("", "".join(rdata[3:]))
    return f"{name} IN {rdtype} {' '.join(rdata[:3])} {key}"


def scan_bind(text: str, filename: str = "-") -> Iterator[AnchorSource]:
    text = _strip_comments(text)
    for clause in BIND_CLAUSE.finditer(text):
        offset = clause.start(2)
        for statement in clause.group(2).split(";"):
            start = offset + len(statement) - len(statement.lstrip())
            offset += len(statement) + 1
            if not statement.strip():
                continue
            lineno = text.count("\n", 0, start) + 1
            try:
                record = bind_record(clause.group(1), shlex.split(statement))
            except (ResolverConfigError, ValueError) as exc:
                raise ResolverConfigError(str(exc), lineno, filename) from exc
            logger.debug("%s:%d: %s", filename, lineno, record)
            yield AnchorSource(SourceKind.RECORD, record, filename, lineno)
