import re
from dataclasses import dataclass
from typing import Iterator, List, NamedTuple, Optional

from crontag.errors import NestedParenthesisError, UnmatchedParenthesisError

WHITESPACE = " \t"
DELIMITERS = WHITESPACE + ';()"'

OCTAL_ESCAPE = re.compile(r"\\([0-3][0-7][0-7])")
# kept escaped in unquoted words, which may be domain names
LABEL_ESCAPES = ".\\"


@dataclass
class Continuation:
    """Open parenthesis and quote, by the line they were opened on"""

    paren_line: Optional[int] = None
    quote_line: Optional[int] = None

    @property
    def active(self) -> bool:
        return self.paren_line is not None or self.quote_line is not None


class Token(NamedTuple):
    text: str
    lineno: int
    quoted: bool = False
    # no whitespace between this token and the previous one
    joined: bool = False


class LineScanner:
    """Split one physical zone file line into tokens

    Parenthesis and quote state is kept in the given Continuation, so a
    scanner for the next line picks up where this one stopped.
    """

    def __init__(self, line: str, lineno: int, continuation: Continuation):
        self.line = line
        self.lineno = lineno
        self.continuation = continuation
        self.pos = 0
        self.resume_quote = continuation.quote_line is not None
        self.adjacent = self.resume_quote

    def __iter__(self) -> Iterator[Token]:
        while (token := self.next_token()) is not None:
            yield token

    def next_token(self) -> Optional[Token]:
        if self.resume_quote:
            self.resume_quote = False
            return self._quoted(prefix="\n")

        line = self.line
        while self.pos < len(line):
            c = line[self.pos]
            if c in WHITESPACE:
                self.pos += 1
                self.adjacent = False
            elif c == ";":
                self.pos = len(line)
            elif c == "(":
                if self.continuation.paren_line is not None:
                    raise NestedParenthesisError(
                        "Nested parentheses not allowed", self.lineno
                    )
                self.continuation.paren_line = self.lineno
                self.pos += 1
                self.adjacent = False
            elif c == ")":
                if self.continuation.paren_line is None:
                    raise UnmatchedParenthesisError(
                        "Closing parenthesis without opening parenthesis",
                        self.lineno,
                    )
                self.continuation.paren_line = None
                self.pos += 1
                self.adjacent = False
            elif c == '"':
                self.pos += 1
                self.continuation.quote_line = self.lineno
                return self._quoted()
            else:
                return self._word()
        return None

    def _emit(self, text: str, quoted: bool = False) -> Token:
        token = Token(text, self.lineno, quoted=quoted, joined=self.adjacent)
        self.adjacent = True
        return token

    def _escape(self, keep: str = "") -> str:
        if m := OCTAL_ESCAPE.match(self.line, self.pos):
            self.pos = m.end()
            char = chr(int(m.group(1), 8))
        elif self.pos + 1 < len(self.line):
            self.pos += 2
            char = self.line[self.pos - 1]
        else:
            self.pos += 1
            return "\\"
        return "\\" + char if char in keep else char

    def _quoted(self, prefix: str = "") -> Token:
        chars: List[str] = [prefix]
        line = self.line
        while self.pos < len(line):
            c = line[self.pos]
            if c == '"':
                self.pos += 1
                self.continuation.quote_line = None
                break
            if c == "\\":
                chars.append(self._escape())
            else:
                chars.append(c)
                self.pos += 1
        return self._emit("".join(chars), quoted=True)

    def _word(self) -> Token:
        chars: List[str] = []
        line = self.line
        while self.pos < len(line) and line[self.pos] not in DELIMITERS:
            if line[self.pos] == "\\":
                chars.append(self._escape(keep=LABEL_ESCAPES))
            else:
                chars.append(line[self.pos])
                self.pos += 1
        return self._emit("".join(chars))


def tokenize(
    line: str, lineno: int = 1, continuation: Optional[Continuation] = None
) -> List[Token]:
    """Tokens of a single line, with escapes decoded

    Outside quotes an escaped dot or backslash keeps its backslash, so a
    literal dot inside a label stays distinct from a label separator.
    """
    return list(LineScanner(line, lineno, continuation or Continuation()))
