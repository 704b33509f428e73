"""
Argline text patterns.

A matcher never compares text itself: it delegates to a pattern object that
answers a single question, ``match(text, case_sensitive) -> bool``. Any object
with such a method is accepted, so callers can plug in their own engines.

Ready-made patterns
- Exact(text): whole-text literal comparison (case folding when insensitive).
- Regex(pattern): whole-text regular expression match (re.fullmatch), with
  re.IGNORECASE added when insensitive.

Coercion
- pattern(object) turns a plain str into Exact, a compiled re.Pattern into
  Regex, and returns any other object exposing a callable ``match`` unchanged.
"""
import re
from typing import final


@final
class Exact:
    """Literal, whole-text pattern."""

    __slots__ = ("_text",)

    def __init__(self, text, /):
        if not isinstance(text, str):
            raise TypeError("Exact() argument must be a string")
        self._text = text

    @property
    def text(self):
        return self._text

    def match(self, text, case_sensitive, /):
        if case_sensitive:
            return text == self._text
        return text.casefold() == self._text.casefold()

    def __eq__(self, other):
        if not isinstance(other, Exact):
            return NotImplemented
        return self._text == other._text

    def __hash__(self):
        return hash((Exact, self._text))

    def __repr__(self):
        return f"exact({self._text!r})"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'Exact' is not an acceptable base type")


@final
class Regex:
    """
    Regular-expression pattern matched against the whole text.

    Both case variants are compiled upfront so that matching during a parse
    never compiles anything.
    """

    __slots__ = ("_sensitive", "_insensitive")

    def __init__(self, pattern, /):
        if isinstance(pattern, re.Pattern):
            source, flags = pattern.pattern, pattern.flags & ~re.IGNORECASE
        elif isinstance(pattern, str):
            source, flags = pattern, 0
        else:
            raise TypeError("Regex() argument must be a string or a compiled pattern")
        if isinstance(source, bytes):
            raise TypeError("Regex() argument must be a text pattern")
        try:
            self._sensitive = re.compile(source, flags)
            self._insensitive = re.compile(source, flags | re.IGNORECASE)
        except re.error as exception:
            raise ValueError(f"Regex() argument is not a valid expression: {exception}") from None

    @property
    def pattern(self):
        return self._sensitive.pattern

    def match(self, text, case_sensitive, /):
        compiled = self._sensitive if case_sensitive else self._insensitive
        return compiled.fullmatch(text) is not None

    def __eq__(self, other):
        if not isinstance(other, Regex):
            return NotImplemented
        return self._sensitive == other._sensitive

    def __hash__(self):
        return hash((Regex, self._sensitive))

    def __repr__(self):
        return f"regex({self._sensitive.pattern!r})"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'Regex' is not an acceptable base type")


def pattern(object, /):
    """
    Coerce an object into something exposing match(text, case_sensitive).

    - str → Exact
    - re.Pattern → Regex
    - any object with a callable ``match`` attribute → returned unchanged

    Raises
    - TypeError for anything else.
    """
    if isinstance(object, str):
        return Exact(object)
    if isinstance(object, re.Pattern):
        return Regex(object)
    if callable(getattr(object, "match", None)):
        return object
    raise TypeError("pattern() argument must be a string, a compiled regex or implement match(text, case_sensitive)")


__all__ = (
    "Exact",
    "Regex",
    "pattern",
)
