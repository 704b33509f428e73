r"""
Argline parser: configuration, matcher registry and the parse entry point.

Overview
- Parser holds the settings that shape scanning (quote, escape, announcer and
  terminate characters plus behavior flags) and the ordered Matchers registry.
- parse(line) snapshots both, scans the line and returns a list of Option/Param
  results, or raises the first ParseError met (nothing partial is returned).
- The module-level parse(line, *matchers, **settings) is a one-shot shortcut.

Settings (validated on assignment)
- quote_char: str (one character). Default '"'.
- option_announcer_chars: Iterable[str] of single characters. Default "-".
- option_codes_case_sensitive: bool. Default False.
- multi_char_option_code_requires_double_announcer: bool. Default False.
- option_value_announcer_chars: Iterable[str]. Default " ".
- option_values_case_sensitive: bool. Default False.
- option_values_can_start_with_announcer: bool. Default False.
- params_case_sensitive: bool. Default False.
- params_can_start_with_announcer: bool. Default False.
- embed_quote_char_with_double: bool. Default True.
- escape_char: None | str (one character). Default None.
- parse_terminate_chars: Iterable[str]. Default "<>|".

Example
    >>> parser = Parser()
    >>> verbose = parser.add_matcher(codes="v", has_value=OptionHasValue.NEVER, option_tag="verbose")
    >>> [arg.tag for arg in parser.parse("-v file.txt")]
    ['verbose', None]
"""
import logging
from collections.abc import Iterable

from .faults import ParseError, trigger
from .matchers import Matcher, Matchers
from .resolver import Resolver
from .scanner import Scanner, Settings
from .utils import Unset, rename

logger = logging.getLogger(__name__)

DEFAULT_QUOTE_CHAR = '"'
DEFAULT_OPTION_ANNOUNCER_CHARS = frozenset("-")
DEFAULT_OPTION_CODES_CASE_SENSITIVE = False
DEFAULT_MULTI_CHAR_OPTION_CODE_REQUIRES_DOUBLE_ANNOUNCER = False
DEFAULT_OPTION_VALUE_ANNOUNCER_CHARS = frozenset(" ")
DEFAULT_OPTION_VALUES_CASE_SENSITIVE = False
DEFAULT_OPTION_VALUES_CAN_START_WITH_ANNOUNCER = False
DEFAULT_PARAMS_CASE_SENSITIVE = False
DEFAULT_PARAMS_CAN_START_WITH_ANNOUNCER = False
DEFAULT_EMBED_QUOTE_CHAR_WITH_DOUBLE = True
DEFAULT_ESCAPE_CHAR = None
DEFAULT_PARSE_TERMINATE_CHARS = frozenset("<>|")


def _char(name, object):
    if not isinstance(object, str):
        raise TypeError(f"parser {name!r} must be a string")
    if len(object) != 1:
        raise ValueError(f"parser {name!r} must be a single character")
    return object


def _optional_char(name, object):
    return None if object is None else _char(name, object)


def _chars(name, object):
    # A plain string is read as a collection of characters ("<>|").
    if isinstance(object, str):
        return frozenset(object)
    if not isinstance(object, Iterable):
        raise TypeError(f"parser {name!r} must be an iterable of characters")
    return frozenset(_char(name, char) for char in object)


def _flag(name, object):
    if not isinstance(object, bool):
        raise TypeError(f"parser {name!r} must be a bool")
    return object


def _setting(name, sanitizer, /):
    """Read/write property over "_{name}", sanitizing every assignment."""

    @rename(name)
    def getter(self):
        return getattr(self, "_" + name)

    @rename(name)
    def setter(self, object):
        setattr(self, "_" + name, sanitizer(name, object))

    return property(getter, setter)


class Parser:
    """
    Configurable single-line argument parser.

    Settings may be changed and matchers added or removed between parses.
    Each parse works on a snapshot, so concurrent parses are safe as long as
    mutations are serialized against them by the caller.
    """

    __settings__ = Settings._fields

    quote_char = _setting("quote_char", _char)
    option_announcer_chars = _setting("option_announcer_chars", _chars)
    option_codes_case_sensitive = _setting("option_codes_case_sensitive", _flag)
    multi_char_option_code_requires_double_announcer = _setting("multi_char_option_code_requires_double_announcer", _flag)
    option_value_announcer_chars = _setting("option_value_announcer_chars", _chars)
    option_values_case_sensitive = _setting("option_values_case_sensitive", _flag)
    option_values_can_start_with_announcer = _setting("option_values_can_start_with_announcer", _flag)
    params_case_sensitive = _setting("params_case_sensitive", _flag)
    params_can_start_with_announcer = _setting("params_can_start_with_announcer", _flag)
    embed_quote_char_with_double = _setting("embed_quote_char_with_double", _flag)
    escape_char = _setting("escape_char", _optional_char)
    parse_terminate_chars = _setting("parse_terminate_chars", _chars)

    def __init__(
            self,
            *matchers,
            quote_char=DEFAULT_QUOTE_CHAR,
            option_announcer_chars=DEFAULT_OPTION_ANNOUNCER_CHARS,
            option_codes_case_sensitive=DEFAULT_OPTION_CODES_CASE_SENSITIVE,
            multi_char_option_code_requires_double_announcer=DEFAULT_MULTI_CHAR_OPTION_CODE_REQUIRES_DOUBLE_ANNOUNCER,
            option_value_announcer_chars=DEFAULT_OPTION_VALUE_ANNOUNCER_CHARS,
            option_values_case_sensitive=DEFAULT_OPTION_VALUES_CASE_SENSITIVE,
            option_values_can_start_with_announcer=DEFAULT_OPTION_VALUES_CAN_START_WITH_ANNOUNCER,
            params_case_sensitive=DEFAULT_PARAMS_CASE_SENSITIVE,
            params_can_start_with_announcer=DEFAULT_PARAMS_CAN_START_WITH_ANNOUNCER,
            embed_quote_char_with_double=DEFAULT_EMBED_QUOTE_CHAR_WITH_DOUBLE,
            escape_char=DEFAULT_ESCAPE_CHAR,
            parse_terminate_chars=DEFAULT_PARSE_TERMINATE_CHARS,
    ):
        self.quote_char = quote_char
        self.option_announcer_chars = option_announcer_chars
        self.option_codes_case_sensitive = option_codes_case_sensitive
        self.multi_char_option_code_requires_double_announcer = multi_char_option_code_requires_double_announcer
        self.option_value_announcer_chars = option_value_announcer_chars
        self.option_values_case_sensitive = option_values_case_sensitive
        self.option_values_can_start_with_announcer = option_values_can_start_with_announcer
        self.params_case_sensitive = params_case_sensitive
        self.params_can_start_with_announcer = params_can_start_with_announcer
        self.embed_quote_char_with_double = embed_quote_char_with_double
        self.escape_char = escape_char
        self.parse_terminate_chars = parse_terminate_chars
        self._matchers = Matchers(matchers)

    @property
    def matchers(self):
        """Read-only listing of the registered matchers, in priority order."""
        return tuple(self._matchers)

    def add_matcher(self, matcher=Unset, /, **fields):
        """
        Append a matcher (lowest priority so far) and return it.

        Either pass a Matcher, or pass Matcher keyword fields to build one.
        """
        if matcher is Unset:
            matcher = Matcher(fields.pop("name", Unset), **fields)
        elif fields:
            raise TypeError("add_matcher() takes either a Matcher or keyword fields, not both")
        return self._matchers.append(matcher)

    def remove_matcher(self, index, /):
        """Remove and return the matcher at index; IndexError when out of range."""
        return self._matchers.remove(index)

    def clear_matchers(self):
        """Remove every matcher; later parses fall back to the implicit matcher."""
        self._matchers.clear()

    def settings(self):
        """Immutable snapshot of the current settings."""
        return Settings(*(getattr(self, name) for name in self.__settings__))

    def parse(self, line, /, *, shell=False, fancy=False, colorful=False):
        """
        Parse one command line into a list of Option/Param results.

        Parameters
        - line: str
        - shell: when True a fault is printed to stderr (rich) and the process
          exits with status 1 instead of raising.
        - fancy / colorful: rendering options used in shell mode.

        Raises
        - TypeError: line is not a string.
        - ParseError subclass: the first violation met while scanning.
        """
        if not isinstance(line, str):
            raise TypeError("parse() argument must be a string")

        settings = self.settings()
        resolver = Resolver(
            self._matchers.snapshot(),
            option_codes_case_sensitive=settings.option_codes_case_sensitive,
            option_values_case_sensitive=settings.option_values_case_sensitive,
            params_case_sensitive=settings.params_case_sensitive,
            option_values_can_start_with_announcer=settings.option_values_can_start_with_announcer,
        )
        try:
            results = Scanner(settings, resolver, line).run()
        except ParseError as fault:
            logger.debug("parse of %r failed: %s", line, fault)
            trigger(fault, shell=shell, fancy=fancy, colorful=colorful)
            raise
        logger.debug("parsed %d argument(s) from %r", len(results), line)
        return results

    def __repr__(self):
        return f"parser({", ".join("%s=%r" % item for item in self.__rich_repr__())})"

    def __rich_repr__(self):
        for name in self.__settings__:
            yield name, getattr(self, name)
        yield "matchers", self.matchers


def parse(line, /, *matchers, **settings):
    """
    One-shot parse: build a Parser from matchers and settings, then parse line.

    Example
        >>> [arg.value for arg in parse('copy "my file" -f')]
        ['copy', 'my file', None]
    """
    return Parser(*matchers, **settings).parse(line)


__all__ = (
    "Parser",
    "parse",
    "DEFAULT_QUOTE_CHAR",
    "DEFAULT_OPTION_ANNOUNCER_CHARS",
    "DEFAULT_OPTION_CODES_CASE_SENSITIVE",
    "DEFAULT_MULTI_CHAR_OPTION_CODE_REQUIRES_DOUBLE_ANNOUNCER",
    "DEFAULT_OPTION_VALUE_ANNOUNCER_CHARS",
    "DEFAULT_OPTION_VALUES_CASE_SENSITIVE",
    "DEFAULT_OPTION_VALUES_CAN_START_WITH_ANNOUNCER",
    "DEFAULT_PARAMS_CASE_SENSITIVE",
    "DEFAULT_PARAMS_CAN_START_WITH_ANNOUNCER",
    "DEFAULT_EMBED_QUOTE_CHAR_WITH_DOUBLE",
    "DEFAULT_ESCAPE_CHAR",
    "DEFAULT_PARSE_TERMINATE_CHARS",
)
