"""
=============================================================================
HTTP HEADERS
=============================================================================

Header names, header collections and the header-line parser.

=============================================================================
TWO KINDS OF HEADER NAME
=============================================================================

A header name is either one of a small, fixed set of well-known names or
an arbitrary string sent by the client:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                          HeaderName                                 │
    ├──────────────────────────────────┬──────────────────────────────────┤
    │  STANDARD                        │  CUSTOM                          │
    │  ────────                        │  ──────                          │
    │  PredefinedName.CONTENT_LENGTH   │  "X-Request-Id"                  │
    │  PredefinedName.SERVER           │  "X-Forwarded-For"               │
    │  PredefinedName.REFERER          │  "Foo Bar" (not validated!)      │
    │                                  │                                  │
    │  Written as canonical lowercase  │  Written exactly as received     │
    │  "content-length"                │  "X-Request-Id"                  │
    └──────────────────────────────────┴──────────────────────────────────┘

The parser never tags names explicitly. HeaderName.lookup() compares the
raw text case-insensitively against every predefined wire string and only
falls back to CUSTOM when nothing matches:

    lookup("Content-Length")  →  STANDARD(CONTENT_LENGTH)  → "content-length"
    lookup("CONTENT-LENGTH")  →  STANDARD(CONTENT_LENGTH)  → "content-length"
    lookup("X-Foo")           →  CUSTOM("X-Foo")           → "X-Foo"

Two names are equal iff they are written the same on the wire, so a
HeaderName works as a dict key no matter how it was built.

=============================================================================
HEADER LINE FORMAT
=============================================================================

    name ":" value

    "Content-Length: 42"   →  (STANDARD(CONTENT_LENGTH), "42")
    "X-Foo:bar"            →  (CUSTOM("X-Foo"), "bar")
    "Referer:  /a:b  "     →  (STANDARD(REFERER), "/a:b")   ← first colon only
    "no-colon-here"        →  MalformedHeaderLine

The name is NOT trimmed (a name with trailing spaces is a different,
custom name). The value is trimmed on both sides.

=============================================================================
Q&A
=============================================================================

Q: "Why does formatting the merged head not drop duplicates?"
A: "format_merged() only concatenates two maps. If the primary map already
   holds content-length, the head carries it twice. The server logs a
   warning when a handler does that instead of silently picking one."

=============================================================================
"""

from dataclasses import dataclass
from enum import Enum
from itertools import chain
from typing import Dict, Iterable, Iterator, Mapping, Optional, Tuple, Union

from .errors import MalformedHeaderLine


class PredefinedName(Enum):
    """
    Well-known header names.

    The value of each member is its canonical lowercase wire string.
    """

    CONTENT_LENGTH = "content-length"
    CONTENT_TYPE = "content-type"
    SERVER = "server"
    REFERER = "referer"
    HOST = "host"
    USER_AGENT = "user-agent"
    ACCEPT = "accept"
    CONNECTION = "connection"
    DATE = "date"

    @classmethod
    def find(cls, raw: str) -> Optional["PredefinedName"]:
        """Return the member written as ``raw`` (any case), or None."""
        return _PREDEFINED_BY_WIRE.get(raw.lower())


_PREDEFINED_BY_WIRE: Dict[str, PredefinedName] = {
    member.value: member for member in PredefinedName
}


class HeaderKind(Enum):
    """Tag of a HeaderName."""

    STANDARD = "standard"
    CUSTOM = "custom"


@dataclass(frozen=True, eq=False)
class HeaderName:
    """
    A header name: STANDARD (a PredefinedName) or CUSTOM (any string).

    Build one with from_predefined(), from_custom() or lookup(). Equality
    and hashing use display(), the form written on the wire.
    """

    kind: HeaderKind
    value: Union[PredefinedName, str]

    @classmethod
    def from_predefined(cls, name: PredefinedName) -> "HeaderName":
        return cls(HeaderKind.STANDARD, name)

    @classmethod
    def from_custom(cls, name: str) -> "HeaderName":
        """Wrap ``name`` verbatim. No token validation is done."""
        return cls(HeaderKind.CUSTOM, name)

    @classmethod
    def lookup(cls, raw: str) -> "HeaderName":
        """
        Classify a raw header name.

        Returns the STANDARD name when ``raw`` matches a predefined wire
        string ignoring case, else CUSTOM(raw).
        """
        predefined = PredefinedName.find(raw)
        if predefined is not None:
            return cls.from_predefined(predefined)
        return cls.from_custom(raw)

    @property
    def predefined(self) -> Optional[PredefinedName]:
        """The PredefinedName for STANDARD names, None for CUSTOM ones."""
        if self.kind is HeaderKind.STANDARD:
            return self.value
        return None

    def is_standard(self) -> bool:
        return self.kind is HeaderKind.STANDARD

    def is_custom(self) -> bool:
        return self.kind is HeaderKind.CUSTOM

    def display(self) -> str:
        """Canonical wire string for STANDARD, the stored string for CUSTOM."""
        if self.kind is HeaderKind.STANDARD:
            return self.value.value
        return self.value

    def __eq__(self, other) -> bool:
        if not isinstance(other, HeaderName):
            return NotImplemented
        return self.display() == other.display()

    def __hash__(self) -> int:
        return hash(self.display())

    def __str__(self) -> str:
        return self.display()


CONTENT_LENGTH = HeaderName.from_predefined(PredefinedName.CONTENT_LENGTH)

# Anything HeaderMap accepts as a name
HeaderKey = Union[HeaderName, PredefinedName, str]


def _to_header_name(name: HeaderKey) -> HeaderName:
    if isinstance(name, HeaderName):
        return name
    if isinstance(name, PredefinedName):
        return HeaderName.from_predefined(name)
    return HeaderName.lookup(name)


class HeaderMap:
    """
    Mapping of HeaderName → value.

    Keys are unique (last insert wins). Entries are kept in insertion
    order so formatting the same map twice gives the same text:

        >>> headers = HeaderMap()
        >>> headers.insert("X-Foo", "bar")
        >>> headers.insert(PredefinedName.SERVER, "minihttp")
        >>> headers.format_joined("; ")
        'X-Foo: bar; server: minihttp'

    The map only grows through insert(). Formatting never modifies it.
    """

    def __init__(self):
        self._entries: Dict[HeaderName, str] = {}

    @classmethod
    def empty(cls) -> "HeaderMap":
        return cls()

    @classmethod
    def from_entries(
        cls,
        entries: Union[Mapping[HeaderKey, object], Iterable[Tuple[HeaderKey, object]]],
    ) -> "HeaderMap":
        """
        Build a map from a mapping or from (name, value) pairs.

        Pairs are inserted in order, so a repeated name keeps the last value.
        """
        if isinstance(entries, Mapping):
            entries = entries.items()
        headers = cls()
        for name, value in entries:
            headers.insert(name, value)
        return headers

    def insert(self, name: HeaderKey, value: object) -> None:
        """
        Add or replace a header.

        String names are classified with HeaderName.lookup(). The value is
        stored as ``str(value)``.
        """
        self._entries[_to_header_name(name)] = str(value)

    def get(self, name: HeaderKey, default: Optional[str] = None) -> Optional[str]:
        return self._entries.get(_to_header_name(name), default)

    def items(self):
        return self._entries.items()

    def copy(self) -> "HeaderMap":
        return HeaderMap.from_entries(self.items())

    def format_joined(self, separator: str) -> str:
        """
        Render every entry as "name: value", joined by ``separator``.

        There is no separator after the last entry; an empty map renders
        as the empty string.
        """
        return self._join(separator, self.items())

    @staticmethod
    def format_merged(separator: str, primary: "HeaderMap", secondary: "HeaderMap") -> str:
        """
        Render the entries of ``primary`` then ``secondary`` as one block.

        Neither map is modified. A name present in both maps is rendered
        twice.
        """
        return HeaderMap._join(separator, chain(primary.items(), secondary.items()))

    @staticmethod
    def _join(separator: str, entries: Iterable[Tuple[HeaderName, str]]) -> str:
        return separator.join(f"{name}: {value}" for name, value in entries)

    def __contains__(self, name) -> bool:
        if not isinstance(name, (HeaderName, PredefinedName, str)):
            return False
        return _to_header_name(name) in self._entries

    def __iter__(self) -> Iterator[HeaderName]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __eq__(self, other) -> bool:
        if not isinstance(other, HeaderMap):
            return NotImplemented
        return self._entries == other._entries

    def __repr__(self) -> str:
        entries = {name.display(): value for name, value in self.items()}
        return f"HeaderMap({entries!r})"


def parse_header_line(line: str) -> Tuple[HeaderName, str]:
    """
    Parse one "name: value" header line.

    Splits at the first colon. The name goes through HeaderName.lookup()
    untouched; the value is stripped of surrounding whitespace.

    Raises:
        MalformedHeaderLine: If the line has no colon.
    """
    name, colon, value = line.partition(":")
    if not colon:
        raise MalformedHeaderLine(line)
    return HeaderName.lookup(name), value.strip()
