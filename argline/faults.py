"""
Argline faults (parse errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every parse error.
  Codes are grouped by domain to keep copy consistent and make logs/searches
  predictable.
- ParseError: base type carrying message + options, that knows how to render
  itself with rich and how to surface itself (raise, or print and exit).
- trigger(): central entry point to surface a fault (respecting shell/fancy/colorful).
- getdoc(): optional description lookup for a code from the host application.

Structured fields (always present on faults raised by a parse)
- offset: code-point index in the line where the violation was detected.
- arg_index / option_index / param_index: zero-based ordinals at that point.
- option_code: the option code text involved, or None.
- value: the value or parameter text involved, or None.
- line: the line being parsed.

UX goals
- Position-first messages: every message names the 1-based argument position
  (“at third argument”).
- Soft but technical language: short titles, one-sentence bodies, a single clear hint.
- Lowercased tone with readable styling (configurable via __styles__ in __main__).
"""
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the parser (stable identifiers).

    grouping (by high-level domain)
    - options (2111x)
      • NO_CODE_AFTER_OPTION_ANNOUNCER, OPTION_CODE_MISSING_DOUBLE_ANNOUNCER,
        NO_MATCH_SUPPORTS_VALUE_FOR_OPTION_CODE, OPTION_VALUE_CANNOT_BEGIN_WITH_OPTION_ANNOUNCER
    - quoting (2112x)
      • QUOTED_PARAM_NOT_FOLLOWED_BY_WHITESPACE, QUOTED_OPTION_VALUE_NOT_FOLLOWED_BY_WHITESPACE,
        PARAM_MISSING_CLOSING_QUOTE, OPTION_VALUE_MISSING_CLOSING_QUOTE
    - escaping (2113x)
      • INVALID_TRAILING_ESCAPE_IN_PARAM, INVALID_TRAILING_ESCAPE_IN_OPTION_VALUE
    - matching (2114x)
      • UNMATCHED_OPTION, UNMATCHED_PARAM

    rationale
    - codes are discoverable (searchable in logs and docs) and normalized to a string
      via normalize() so hosts can remap them if desired.
    """
    # --- option errors (2111x) ---
    NO_CODE_AFTER_OPTION_ANNOUNCER                 = 21111
    OPTION_CODE_MISSING_DOUBLE_ANNOUNCER           = 21112
    NO_MATCH_SUPPORTS_VALUE_FOR_OPTION_CODE        = 21113
    OPTION_VALUE_CANNOT_BEGIN_WITH_OPTION_ANNOUNCER = 21114

    # --- quoting errors (2112x) ---
    QUOTED_PARAM_NOT_FOLLOWED_BY_WHITESPACE        = 21121
    QUOTED_OPTION_VALUE_NOT_FOLLOWED_BY_WHITESPACE = 21122
    PARAM_MISSING_CLOSING_QUOTE                    = 21123
    OPTION_VALUE_MISSING_CLOSING_QUOTE             = 21124

    # --- escaping errors (2113x) ---
    INVALID_TRAILING_ESCAPE_IN_PARAM               = 21131
    INVALID_TRAILING_ESCAPE_IN_OPTION_VALUE        = 21132

    # --- matching errors (2114x) ---
    UNMATCHED_OPTION                               = 21141
    UNMATCHED_PARAM                                = 21142

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class ParseError(Exception):
    """
    Base class of every fault a parse can raise.

    Subclasses set __fault__ (FaultCode) and __title__ (short lowercase title).
    """
    __fault__ = Unset
    __title__ = "parse error"

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def fault(self):
        return type(self).__fault__

    @property
    def offset(self):
        return self.options.get("offset")

    @property
    def arg_index(self):
        return self.options.get("arg_index")

    @property
    def option_index(self):
        return self.options.get("option_index")

    @property
    def param_index(self):
        return self.options.get("param_index")

    @property
    def option_code(self):
        return self.options.get("option_code")

    @property
    def value(self):
        return self.options.get("value")

    @property
    def hint(self):
        return self.options.get("hint")

    def __str__(self):
        return str(self.message) if self.message is not Unset else self.__title__

    def __rich__(self):
        main = __import__("__main__")

        colorful = bool(self.options.get("colorful"))
        fancy = bool(self.options.get("fancy"))

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "line": "#E6E6F0",
            "caret": "bold #FF4DA6",
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        } | getattr(main, "__styles__", {}))

        def styler(style):
            return styles[style] if colorful else ""

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not colorful:
                return Text(str(fragment))
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), style)

        prog = text(getattr(main, "__prog__", "argline"), styler("prog-name"))
        code = self.fault.normalize() if self.fault else "-"

        header = Text.assemble(
            "[ ",
            prog,
            " — ",
            text(code, styler("code")),
            " | ",
            text(self.__title__.title(), styler("error-title")),
            " ]"
        )
        parts = [text(str(self), styler("error-message"))]

        # Point at the offending character under the echoed line.
        if isinstance(line := self.options.get("line"), str) and isinstance(self.offset, int):
            parts.append(text("  " + line, styler("line")))
            parts.append(text("  " + " " * self.offset + "^", styler("caret")))

        if self.hint:
            parts.append(Text.assemble(text(" → ", styler("hint-arrow")), text(self.hint, styler("hint"))))

        if fancy:
            return Panel(Group(*parts), title=header, title_align="left")

        return Group(header, *parts)

    def __trigger__(self) -> None:
        if not self.options.get("shell"):
            raise self from None
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class NoCodeAfterOptionAnnouncerError(ParseError):
    __fault__ = FaultCode.NO_CODE_AFTER_OPTION_ANNOUNCER
    __title__ = "missing option code"


class OptionCodeMissingDoubleAnnouncerError(ParseError):
    __fault__ = FaultCode.OPTION_CODE_MISSING_DOUBLE_ANNOUNCER
    __title__ = "missing double announcer"


class NoMatchSupportsValueForOptionCodeError(ParseError):
    __fault__ = FaultCode.NO_MATCH_SUPPORTS_VALUE_FOR_OPTION_CODE
    __title__ = "unexpected option value"


class OptionValueCannotBeginWithOptionAnnouncerError(ParseError):
    __fault__ = FaultCode.OPTION_VALUE_CANNOT_BEGIN_WITH_OPTION_ANNOUNCER
    __title__ = "value starts with announcer"


class QuotedParamNotFollowedByWhitespaceError(ParseError):
    __fault__ = FaultCode.QUOTED_PARAM_NOT_FOLLOWED_BY_WHITESPACE
    __title__ = "text after closing quote"


class QuotedOptionValueNotFollowedByWhitespaceError(ParseError):
    __fault__ = FaultCode.QUOTED_OPTION_VALUE_NOT_FOLLOWED_BY_WHITESPACE
    __title__ = "text after closing quote"


class ParamMissingClosingQuoteError(ParseError):
    __fault__ = FaultCode.PARAM_MISSING_CLOSING_QUOTE
    __title__ = "missing closing quote"


class OptionValueMissingClosingQuoteError(ParseError):
    __fault__ = FaultCode.OPTION_VALUE_MISSING_CLOSING_QUOTE
    __title__ = "missing closing quote"


class InvalidTrailingEscapeInParamError(ParseError):
    __fault__ = FaultCode.INVALID_TRAILING_ESCAPE_IN_PARAM
    __title__ = "trailing escape"


class InvalidTrailingEscapeInOptionValueError(ParseError):
    __fault__ = FaultCode.INVALID_TRAILING_ESCAPE_IN_OPTION_VALUE
    __title__ = "trailing escape"


class UnmatchedOptionError(ParseError):
    __fault__ = FaultCode.UNMATCHED_OPTION
    __title__ = "unmatched option"


class UnmatchedParamError(ParseError):
    __fault__ = FaultCode.UNMATCHED_PARAM
    __title__ = "unmatched parameter"


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see ParseError).
    - options are merged into the fault via __replace__(**options) before triggering.
    - in shell mode, rendering happens via rich console and the process exits with
      status 1; otherwise the fault is raised.

    typical options
    - shell, fancy, colorful, line, hint, and any structured field to override.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    fault.__replace__(**options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    lookup
    - the host application may expose a __docs__ mapping in __main__ where keys
      are FaultCode instances and values are short documentation strings.
    - when not found, returns None.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "FaultCode",
    "ParseError",
    "NoCodeAfterOptionAnnouncerError",
    "OptionCodeMissingDoubleAnnouncerError",
    "NoMatchSupportsValueForOptionCodeError",
    "OptionValueCannotBeginWithOptionAnnouncerError",
    "QuotedParamNotFollowedByWhitespaceError",
    "QuotedOptionValueNotFollowedByWhitespaceError",
    "ParamMissingClosingQuoteError",
    "OptionValueMissingClosingQuoteError",
    "InvalidTrailingEscapeInParamError",
    "InvalidTrailingEscapeInOptionValueError",
    "UnmatchedOptionError",
    "UnmatchedParamError",
    "trigger",
    "getdoc",
)
