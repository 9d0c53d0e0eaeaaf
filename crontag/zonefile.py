"""
Zone file reading (RFC 1035 section 5, RFC 2308 $TTL, RFC 3597 generic types)

Lines are fed one at a time to an EntryParser, which returns a ZoneEntry once
a logical entry (possibly spanning several lines through parentheses or a
quoted string) is complete. ZoneReader drives the parser over a whole file.
"""

import fileinput
import logging
import re
from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Optional, Tuple, Union

from crontag import MAX_TTL
from crontag.errors import (
    MalformedTTLError,
    UnknownClassError,
    UnterminatedParenthesisError,
    UnterminatedQuoteError,
    ZoneError,
    ZoneSyntaxError,
)
from crontag.tables import lookup_class, lookup_type
from crontag.tokenizer import Continuation, LineScanner, Token
from crontag.utils import utf8_input

logger = logging.getLogger(__name__)

TTL_RE = re.compile(r"(?:[0-9]+[wdhms]?)+", re.IGNORECASE)
TTL_PART_RE = re.compile(r"([0-9]+)([wdhms]?)", re.IGNORECASE)
TTL_UNITS = {"": 1, "s": 1, "m": 60, "h": 3600, "d": 86400, "w": 604800}
DIGITS_RE = re.compile(r"[0-9]+")


@dataclass
class ParserState:
    # trailing dot included, the root is ""
    origin: str = ""
    owner: Optional[str] = None
    default_ttl: Optional[int] = None
    default_class: Optional[Tuple[str, int]] = None
    ttl_directive: bool = False
    continuation: Continuation = field(default_factory=Continuation)


@dataclass(frozen=True)
class Empty:
    lineno: int


@dataclass(frozen=True)
class OriginDirective:
    origin: str
    lineno: int


@dataclass(frozen=True)
class TTLDirective:
    ttl: int
    lineno: int


@dataclass(frozen=True)
class IncludeDirective:
    filename: str
    origin: Optional[str]
    lineno: int


@dataclass
class ResourceRecord:
    name: str
    ttl: int
    rdclass: str
    rdclass_value: int
    rdtype: str
    rdtype_value: int
    rdata: List[str]
    lineno: int


ZoneEntry = Union[
    Empty, ResourceRecord, OriginDirective, TTLDirective, IncludeDirective
]


def parse_ttl(text: str, lineno: Optional[int] = None) -> int:
    """Parse a TTL with optional BIND style units, e.g. 1D12H"""
    if not TTL_RE.fullmatch(text):
        raise MalformedTTLError(f"Malformed TTL {text!r}", lineno)
    ttl = sum(
        int(value) * TTL_UNITS[unit.lower()]
        for value, unit in TTL_PART_RE.findall(text)
    )
    if ttl > MAX_TTL:
        raise MalformedTTLError(f"TTL {text} exceeds {MAX_TTL}", lineno)
    return ttl


def is_absolute(name: str) -> bool:
    """True if name ends in a label separator, not an escaped dot"""
    if not name.endswith("."):
        return False
    backslashes = len(name) - 1 - len(name[:-1].rstrip("\\"))
    return backslashes % 2 == 0


def absolute_origin(origin: str) -> str:
    origin = origin.lower()
    if origin in ("", "."):
        return ""
    return origin if is_absolute(origin) else origin + "."


class EntryParser:
    def __init__(self, state: ParserState):
        self.state = state
        self.tokens: List[Token] = []
        self.lineno = 0
        self.indented = False

    @property
    def continuing(self) -> bool:
        return self.state.continuation.active

    def feed(self, line: str, lineno: int) -> Optional[ZoneEntry]:
        if not self.continuing:
            self.tokens = []
            self.lineno = lineno
            self.indented = line[:1] in (" ", "\t")

        for token in LineScanner(line, lineno, self.state.continuation):
            if token.joined and self.tokens:
                previous = self.tokens[-1]
                self.tokens[-1] = previous._replace(
                    text=previous.text + token.text,
                    quoted=previous.quoted or token.quoted,
                )
            else:
                self.tokens.append(token)

        if self.continuing:
            return None
        try:
            return self.entry()
        except ZoneError as exc:
            if exc.lineno is None:
                exc.lineno = self.lineno
            raise

    def finish(self) -> None:
        """Check that no parenthesis or quoted string is left open"""
        continuation = self.state.continuation
        if continuation.quote_line is not None:
            raise UnterminatedQuoteError(
                "Unterminated quoted string", continuation.quote_line
            )
        if continuation.paren_line is not None:
            raise UnterminatedParenthesisError(
                "Unterminated parenthesis", continuation.paren_line
            )

    def resolve_name(self, name: str) -> str:
        if name == "@":
            return self.state.origin or "."
        if is_absolute(name):
            return name.lower()
        return f"{name}.{self.state.origin}".lower()

    def entry(self) -> ZoneEntry:
        tokens = self.tokens
        if not tokens:
            return Empty(self.lineno)

        first = tokens[0]
        if self.indented:
            if self.state.owner is None:
                raise ZoneSyntaxError("No owner name for record", self.lineno)
            return self.record(self.state.owner, tokens)
        if first.text.startswith("$") and not first.quoted:
            return self.directive(first.text.upper(), tokens[1:])
        return self.record(self.resolve_name(first.text), tokens[1:])

    def directive(self, name: str, args: List[Token]) -> ZoneEntry:
        if name == "$ORIGIN":
            self._check_args(name, args, 1, 1)
            self.state.origin = absolute_origin(self.resolve_name(args[0].text))
            logger.debug("Origin set to %r at line %d", self.state.origin, self.lineno)
            return OriginDirective(self.state.origin, self.lineno)

        if name == "$TTL":
            self._check_args(name, args, 1, 1)
            text = args[0].text
            if not DIGITS_RE.fullmatch(text) or int(text) > MAX_TTL:
                raise MalformedTTLError(f"Malformed $TTL {text!r}", args[0].lineno)
            self.state.default_ttl = int(text)
            self.state.ttl_directive = True
            return TTLDirective(self.state.default_ttl, self.lineno)

        if name == "$INCLUDE":
            self._check_args(name, args, 1, 2)
            origin = None
            if len(args) > 1:
                origin = absolute_origin(self.resolve_name(args[1].text))
            return IncludeDirective(args[0].text, origin, self.lineno)

        raise ZoneSyntaxError(f"Unknown directive {name}", self.lineno)

    def _check_args(
        self, name: str, args: List[Token], least: int, most: int
    ) -> None:
        if len(args) < least:
            raise ZoneSyntaxError(f"Missing argument to {name}", self.lineno)
        if len(args) > most:
            raise ZoneSyntaxError(
                f"Syntax error: unexpected {args[most].text!r} after {name}",
                args[most].lineno,
            )

    def record(self, name: str, fields: List[Token]) -> ResourceRecord:
        state = self.state
        ttl = None
        rdclass = None
        pos = 0

        # TTL and class may come in either order before the type
        if self._is_ttl(fields, pos):
            ttl = parse_ttl(fields[pos].text, fields[pos].lineno)
            pos += 1
        if pos < len(fields) and not fields[pos].quoted:
            rdclass = lookup_class(fields[pos].text)
            if rdclass is not None:
                pos += 1
        if ttl is None and self._is_ttl(fields, pos):
            ttl = parse_ttl(fields[pos].text, fields[pos].lineno)
            pos += 1

        if ttl is None:
            if state.default_ttl is None:
                raise MalformedTTLError(
                    "No TTL given and no default TTL", self.lineno
                )
            ttl = state.default_ttl
        elif not state.ttl_directive:
            state.default_ttl = ttl

        if rdclass is None:
            if state.default_class is None:
                raise UnknownClassError(
                    "No class given and no default class", self.lineno
                )
            rdclass = state.default_class
        else:
            state.default_class = rdclass

        if pos >= len(fields):
            raise ZoneSyntaxError(f"Missing record type for {name}", self.lineno)
        try:
            rdtype = lookup_type(fields[pos].text)
        except ZoneError as exc:
            exc.lineno = fields[pos].lineno
            raise

        state.owner = name
        return ResourceRecord(
            name=name,
            ttl=ttl,
            rdclass=rdclass[0],
            rdclass_value=rdclass[1],
            rdtype=rdtype[0],
            rdtype_value=rdtype[1],
            rdata=[token.text for token in fields[pos + 1 :]],
            lineno=self.lineno,
        )

    @staticmethod
    def _is_ttl(fields: List[Token], pos: int) -> bool:
        return (
            pos < len(fields)
            and not fields[pos].quoted
            and fields[pos].text[:1].isdigit()
        )


class ZoneReader:
    """Entries of one zone file

    Each reader owns its parser state; start a new reader to read again.
    """

    def __init__(
        self,
        lines: Iterable[str],
        filename: str = "-",
        origin: str = "",
        default_ttl: Optional[int] = None,
        default_class: Optional[str] = None,
        first_lineno: int = 1,
    ):
        self.lines = lines
        self.filename = filename
        self.first_lineno = first_lineno
        self.state = ParserState(
            origin=absolute_origin(origin), default_ttl=default_ttl
        )
        if default_class is not None:
            self.state.default_class = lookup_class(default_class)
            if self.state.default_class is None:
                raise UnknownClassError(f"Unknown class {default_class}")

    def __iter__(self) -> Iterator[ZoneEntry]:
        parser = EntryParser(self.state)
        try:
            for lineno, line in enumerate(self.lines, start=self.first_lineno):
                entry = parser.feed(line.rstrip("\r\n"), lineno)
                if entry is not None:
                    yield entry
            parser.finish()
        except ZoneError as exc:
            if exc.filename is None:
                exc.filename = self.filename
            raise

    def records(self) -> Iterator[ResourceRecord]:
        for entry in self:
            if isinstance(entry, ResourceRecord):
                yield entry
            elif isinstance(entry, IncludeDirective):
                logger.warning(
                    "%s:%d: $INCLUDE %s not followed",
                    self.filename,
                    entry.lineno,
                    entry.filename,
                )


def read_zonefile(filename: str, **kwargs) -> Iterator[ResourceRecord]:
    """Records of a zone file, standard input for "-" """
    with fileinput.FileInput(files=(filename,), encoding="utf-8") as fp:
        with utf8_input(filename):
            reader = ZoneReader(fp, filename=filename, **kwargs)
            yield from reader.records()
