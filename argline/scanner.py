"""
Argline scanner: the character-level state machine.

The scanner walks the line one code point at a time. The outer state
(ArgState) tells whether it is between arguments, inside a parameter or inside
an option; while inside an option, the inner state (OptionState) tracks the
code, the gap before a value and the value itself.

Replay
- Some transitions hand the very same character to the new state at once
  (for instance the first character of an option code, or the character that
  ends an option without a value and starts the next argument). This is
  re-dispatch of the current character, never look-ahead.

Emission
- A completed argument is resolved against the matcher snapshot and appended
  to the results; counters only move on emission.
- An option whose value was taken speculatively (whitespace value announcer,
  IF_POSSIBLE matcher) that no matcher accepts with that value is emitted
  without a value, and the text is resolved again as a parameter.

Faults
- The first violation raises a ParseError subclass; nothing partial is returned.
"""
import logging
from collections import namedtuple
from enum import Enum

from .faults import (
    NoCodeAfterOptionAnnouncerError,
    OptionCodeMissingDoubleAnnouncerError,
    NoMatchSupportsValueForOptionCodeError,
    OptionValueCannotBeginWithOptionAnnouncerError,
    QuotedParamNotFollowedByWhitespaceError,
    QuotedOptionValueNotFollowedByWhitespaceError,
    ParamMissingClosingQuoteError,
    OptionValueMissingClosingQuoteError,
    InvalidTrailingEscapeInParamError,
    InvalidTrailingEscapeInOptionValueError,
    UnmatchedOptionError,
    UnmatchedParamError,
)
from .resolver import Decision
from .results import Option, Param
from .utils import ordinal

logger = logging.getLogger(__name__)


class ArgState(Enum):
    OUTSIDE = "outside"
    IN_PARAM = "in-param"
    IN_PARAM_AT_CLOSING_QUOTE = "in-param-at-closing-quote"
    IN_PARAM_ESCAPED = "in-param-escaped"
    IN_OPTION = "in-option"


class OptionState(Enum):
    JUST_ANNOUNCED = "just-announced"
    IN_CODE = "in-code"
    AWAITING_VALUE = "awaiting-value"
    IN_VALUE = "in-value"
    IN_VALUE_AT_CLOSING_QUOTE = "in-value-at-closing-quote"
    IN_VALUE_ESCAPED = "in-value-escaped"


Settings = namedtuple("Settings", (
    "quote_char",
    "option_announcer_chars",
    "option_codes_case_sensitive",
    "multi_char_option_code_requires_double_announcer",
    "option_value_announcer_chars",
    "option_values_case_sensitive",
    "option_values_can_start_with_announcer",
    "params_case_sensitive",
    "params_can_start_with_announcer",
    "embed_quote_char_with_double",
    "escape_char",
    "parse_terminate_chars",
))


class Cursor:
    """
    Transient scan position and accumulators, owned by a single parse.

    - index: code-point index of the character being dispatched (len(line) at the end).
    - start: offset where the current argument began.
    - value_start: offset where the current option value began.
    - code_start: offset of the first raw option-code character.
    - announcer: the announcer character that opened the current option.
    - code: normalized option code once the code is complete.
    - buffer: characters of the current parameter or option value.
    - quoted: the current parameter or value is enclosed in quotes.
    - ambiguous: the value announcer that ended the code was whitespace.
    - maybe_param: the value being read may turn out to be a parameter.
    """

    __slots__ = (
        "index",
        "arg_state",
        "option_state",
        "start",
        "value_start",
        "code_start",
        "announcer",
        "code",
        "buffer",
        "quoted",
        "ambiguous",
        "maybe_param",
        "arg_count",
        "option_count",
        "param_count",
    )

    def __init__(self):
        self.index = 0
        self.arg_state = ArgState.OUTSIDE
        self.option_state = OptionState.JUST_ANNOUNCED
        self.start = 0
        self.value_start = 0
        self.code_start = 0
        self.announcer = ""
        self.code = ""
        self.buffer = []
        self.quoted = False
        self.ambiguous = False
        self.maybe_param = False
        self.arg_count = 0
        self.option_count = 0
        self.param_count = 0

    @property
    def text(self):
        return "".join(self.buffer)


class Scanner:
    def __init__(self, settings, resolver, line):
        self._settings = settings
        self._resolver = resolver
        self._line = line
        self._cursor = Cursor()
        self._results = []

    def run(self):
        """Scan the whole line and return the results, or raise the first fault."""
        cursor = self._cursor
        for cursor.index, char in enumerate(self._line):
            if not self._dispatch(char):
                logger.debug("parse terminated at offset %d by %r", cursor.index, char)
                break
        else:
            cursor.index = len(self._line)
        self._finish()
        return self._results

    # --- dispatch ---

    def _dispatch(self, char):
        """Process one character in the current state; return False to stop scanning."""
        cursor = self._cursor
        match cursor.arg_state:
            case ArgState.OUTSIDE:
                return self._outside(char)
            case ArgState.IN_PARAM:
                self._in_text(char, ArgState.IN_PARAM_ESCAPED, ArgState.IN_PARAM_AT_CLOSING_QUOTE, self._complete_param)
            case ArgState.IN_PARAM_AT_CLOSING_QUOTE:
                if char == self._settings.quote_char and self._settings.embed_quote_char_with_double:
                    cursor.buffer.append(char)
                    cursor.arg_state = ArgState.IN_PARAM
                elif char.isspace():
                    self._complete_param()
                else:
                    self._fail(
                        QuotedParamNotFollowedByWhitespaceError,
                        "quoted parameter at %s argument is followed by %r instead of whitespace" % (self._position, char),
                        hint="separate arguments with whitespace or double the quote to embed it",
                        value=cursor.text,
                    )
            case ArgState.IN_PARAM_ESCAPED:
                cursor.buffer.append(char)
                cursor.arg_state = ArgState.IN_PARAM
            case ArgState.IN_OPTION:
                return self._in_option(char)
        return True

    def _outside(self, char):
        cursor = self._cursor
        settings = self._settings
        if char == settings.quote_char:
            self._begin_param(quoted=True)
        elif char in settings.option_announcer_chars:
            cursor.arg_state = ArgState.IN_OPTION
            cursor.option_state = OptionState.JUST_ANNOUNCED
            cursor.start = cursor.index
            cursor.code_start = cursor.index + 1
            cursor.announcer = char
            cursor.code = ""
        elif char in settings.parse_terminate_chars:
            return False
        elif not char.isspace():
            # The first character is taken literally, even an escape char.
            self._begin_param(quoted=False)
            cursor.buffer.append(char)
        return True

    def _begin_param(self, *, quoted):
        cursor = self._cursor
        cursor.arg_state = ArgState.IN_PARAM
        cursor.start = cursor.index
        cursor.buffer.clear()
        cursor.quoted = quoted

    def _in_text(self, char, escaped, closing, complete):
        """Shared quoting/escaping rules for parameter text and option values."""
        cursor = self._cursor
        settings = self._settings
        if settings.escape_char is not None and char == settings.escape_char:
            self._set_state(escaped)
        elif cursor.quoted:
            if char == settings.quote_char:
                self._set_state(closing)
            else:
                cursor.buffer.append(char)
        elif char.isspace():
            complete()
        else:
            cursor.buffer.append(char)

    def _set_state(self, state):
        if isinstance(state, ArgState):
            self._cursor.arg_state = state
        else:
            self._cursor.option_state = state

    def _in_option(self, char):
        cursor = self._cursor
        settings = self._settings
        match cursor.option_state:
            case OptionState.JUST_ANNOUNCED:
                if char.isspace() or char in settings.parse_terminate_chars:
                    return self._lone_announcer(char)
                cursor.option_state = OptionState.IN_CODE
                return self._dispatch(char)
            case OptionState.IN_CODE:
                return self._in_code(char)
            case OptionState.AWAITING_VALUE:
                if char.isspace():
                    return True
                if char in settings.parse_terminate_chars:
                    # Nothing can follow a terminate char, so decide as at the end of the line.
                    self._complete_awaiting_value()
                    return self._dispatch(char)
                return self._await_value(char)
            case OptionState.IN_VALUE:
                self._in_text(char, OptionState.IN_VALUE_ESCAPED, OptionState.IN_VALUE_AT_CLOSING_QUOTE, self._complete_value)
            case OptionState.IN_VALUE_AT_CLOSING_QUOTE:
                if char == settings.quote_char and settings.embed_quote_char_with_double:
                    cursor.buffer.append(char)
                    cursor.option_state = OptionState.IN_VALUE
                elif char.isspace():
                    self._complete_value()
                else:
                    self._fail(
                        QuotedOptionValueNotFollowedByWhitespaceError,
                        "quoted value of option %r at %s argument is followed by %r instead of whitespace" % (
                            cursor.code, self._position, char
                        ),
                        hint="separate arguments with whitespace or double the quote to embed it",
                        value=cursor.text,
                    )
            case OptionState.IN_VALUE_ESCAPED:
                cursor.buffer.append(char)
                cursor.option_state = OptionState.IN_VALUE
        return True

    def _lone_announcer(self, char):
        """An announcer followed by whitespace or a terminate char."""
        cursor = self._cursor
        if not self._settings.params_can_start_with_announcer:
            self._fail(
                NoCodeAfterOptionAnnouncerError,
                "option announcer %r at %s argument is not followed by an option code" % (
                    cursor.announcer, self._position
                ),
                hint="write the option code right after %r" % cursor.announcer,
            )
        cursor.buffer[:] = [cursor.announcer]
        cursor.quoted = False
        self._complete_param()
        return self._dispatch(char) if char is not None else True

    def _in_code(self, char):
        cursor = self._cursor
        settings = self._settings
        announced = char in settings.option_value_announcer_chars
        whitespace = char.isspace()
        if not (announced or whitespace or char in settings.parse_terminate_chars):
            return True

        self._set_code(cursor.index)
        if announced:
            cursor.ambiguous = whitespace
            if self._resolver.option_can_have_value(cursor):
                cursor.option_state = OptionState.AWAITING_VALUE
            elif cursor.ambiguous:
                self._complete_option(None)
            else:
                self._fail(
                    NoMatchSupportsValueForOptionCodeError,
                    "option %r at %s argument cannot have a value" % (cursor.code, self._position),
                    hint="remove the value or use a matcher that accepts one",
                )
            return True

        self._complete_option(None)
        return self._dispatch(char)

    def _set_code(self, end):
        """Normalize the raw option code between code_start and end."""
        cursor = self._cursor
        raw = self._line[cursor.code_start:end]
        if not self._settings.multi_char_option_code_requires_double_announcer:
            cursor.code = raw
        elif len(raw) <= 1:
            cursor.code = "" if raw == cursor.announcer else raw
        elif raw[0] == cursor.announcer:
            cursor.code = raw[1:]
        else:
            cursor.code = raw
            self._fail(
                OptionCodeMissingDoubleAnnouncerError,
                "multi-character option %r at %s argument needs a double announcer" % (raw, self._position),
                hint="write it as %r" % (cursor.announcer * 2 + raw),
            )

        if not cursor.code:
            self._fail(
                NoCodeAfterOptionAnnouncerError,
                "option announcer %r at %s argument is not followed by an option code" % (
                    cursor.announcer, self._position
                ),
                hint="write the option code right after the announcer",
            )

    def _await_value(self, char):
        cursor = self._cursor
        settings = self._settings
        match self._resolver.decide_value(cursor, char in settings.option_announcer_chars):
            case Decision.FORBIDDEN:
                self._fail(
                    OptionValueCannotBeginWithOptionAnnouncerError,
                    "value of option %r at %s argument cannot begin with %r" % (cursor.code, self._position, char),
                    hint="quote the value or drop the leading announcer",
                )
            case Decision.MUST_NOT:
                cursor.maybe_param = False
                self._complete_option(None)
                return self._dispatch(char)
            case decision:
                cursor.maybe_param = decision is Decision.POSSIBLY
                cursor.option_state = OptionState.IN_VALUE
                cursor.value_start = cursor.index
                cursor.buffer.clear()
                cursor.quoted = char == settings.quote_char
                if not cursor.quoted:
                    return self._dispatch(char)
        return True

    def _complete_awaiting_value(self):
        cursor = self._cursor
        if self._resolver.decide_value(cursor) is Decision.MUST:
            self._fail(
                NoMatchSupportsValueForOptionCodeError,
                "option %r at %s argument requires a value but none was given" % (cursor.code, self._position),
                hint="add a value after the option",
            )
        cursor.maybe_param = False
        self._complete_option(None)

    # --- emission ---

    def _complete_param(self):
        cursor = self._cursor
        self._emit_param(cursor.start, cursor.text)
        cursor.arg_state = ArgState.OUTSIDE

    def _complete_value(self):
        self._complete_option(self._cursor.text)

    def _complete_option(self, value):
        cursor = self._cursor
        resolver = self._resolver
        if (matcher := resolver.find_option(cursor, value)) is not None:
            self._append(Option(matcher, cursor.start, cursor.arg_count, cursor.option_count, cursor.code, value))
            cursor.option_count += 1
            cursor.arg_state = ArgState.OUTSIDE
        elif value is not None and cursor.maybe_param and (matcher := resolver.find_option(cursor)) is not None:
            logger.debug("value %r of option %r re-resolved as a parameter", value, cursor.code)
            self._append(Option(matcher, cursor.start, cursor.arg_count, cursor.option_count, cursor.code))
            cursor.option_count += 1
            cursor.arg_state = ArgState.OUTSIDE
            self._emit_param(cursor.value_start, value)
        else:
            self._fail(
                UnmatchedOptionError,
                "option %r at %s argument is not recognized" % (cursor.code, self._position),
                hint="check the option code and its value",
                value=value,
            )

    def _emit_param(self, offset, text):
        cursor = self._cursor
        if (matcher := self._resolver.find_param(cursor, text)) is None:
            self._fail(
                UnmatchedParamError,
                "parameter %r at %s argument is not recognized" % (text, self._position),
                hint="check the number and the text of the parameters",
                value=text,
            )
        self._append(Param(matcher, offset, cursor.arg_count, cursor.param_count, text))
        cursor.param_count += 1

    def _append(self, result):
        logger.debug("emitted %r", result)
        self._results.append(result)
        self._cursor.arg_count += 1

    # --- end of line ---

    def _finish(self):
        cursor = self._cursor
        match cursor.arg_state:
            case ArgState.IN_PARAM if cursor.quoted:
                self._fail(
                    ParamMissingClosingQuoteError,
                    "quoted parameter at %s argument is missing its closing quote" % self._position,
                    hint="add %r at the end of the parameter" % self._settings.quote_char,
                    value=cursor.text,
                )
            case ArgState.IN_PARAM | ArgState.IN_PARAM_AT_CLOSING_QUOTE:
                self._complete_param()
            case ArgState.IN_PARAM_ESCAPED:
                self._fail(
                    InvalidTrailingEscapeInParamError,
                    "parameter at %s argument ends with an escape character" % self._position,
                    hint="escape the escape character or remove it",
                    value=cursor.text,
                )
            case ArgState.IN_OPTION:
                self._finish_option()

    def _finish_option(self):
        cursor = self._cursor
        match cursor.option_state:
            case OptionState.JUST_ANNOUNCED:
                self._lone_announcer(None)
            case OptionState.IN_CODE:
                self._set_code(len(self._line))
                self._complete_option(None)
            case OptionState.AWAITING_VALUE:
                self._complete_awaiting_value()
            case OptionState.IN_VALUE if cursor.quoted:
                self._fail(
                    OptionValueMissingClosingQuoteError,
                    "quoted value of option %r at %s argument is missing its closing quote" % (
                        cursor.code, self._position
                    ),
                    hint="add %r at the end of the value" % self._settings.quote_char,
                    value=cursor.text,
                )
            case OptionState.IN_VALUE | OptionState.IN_VALUE_AT_CLOSING_QUOTE:
                self._complete_value()
            case OptionState.IN_VALUE_ESCAPED:
                self._fail(
                    InvalidTrailingEscapeInOptionValueError,
                    "value of option %r at %s argument ends with an escape character" % (cursor.code, self._position),
                    hint="escape the escape character or remove it",
                    value=cursor.text,
                )

    # --- faults ---

    @property
    def _position(self):
        """1-based ordinal label of the argument being scanned."""
        return ordinal(self._cursor.arg_count + 1)

    def _fail(self, exception, message, /, *, hint, **fields):
        """Raise exception with the cursor's position fields (fields override them)."""
        cursor = self._cursor
        options = {
            "offset": cursor.index,
            "arg_index": cursor.arg_count,
            "option_index": cursor.option_count,
            "param_index": cursor.param_count,
            "option_code": (cursor.code or None) if cursor.arg_state is ArgState.IN_OPTION else None,
            "value": None,
            "line": self._line,
            "hint": hint,
        } | fields
        logger.debug("%s at offset %d", exception.__name__, cursor.index)
        raise exception(message, **options)


__all__ = (
    "ArgState",
    "OptionState",
    "Settings",
    "Cursor",
    "Scanner",
)
