"""
Argline resolver: first-match-wins lookup over a matcher snapshot.

The resolver never raises faults. It answers questions about the argument
currently being scanned and the scanner turns negative answers into faults:

- option_can_have_value(cursor): does any eligible matcher allow a value?
- decide_value(cursor, first_is_announcer): once the first value character is
  known (or the line ended), must, may or must not the option take a value?
- find_option(cursor, value): first matcher accepting the option with that value
  (None meaning "no value").
- find_param(cursor, text): first matcher accepting the parameter text.

Matchers are consulted in registry order; the first eligible one wins.
"""
from enum import Enum

from .matchers import ArgType, OptionHasValue


class Decision(Enum):
    """Outcome of the value decision made when an option awaits its value."""
    MUST = "must"
    POSSIBLY = "possibly"
    MUST_NOT = "must-not"
    # The value is required to exist but starts with an option announcer.
    FORBIDDEN = "forbidden"


def _within(ordinal, filter):
    return filter is None or ordinal in filter


class Resolver:
    def __init__(
            self,
            matchers,
            *,
            option_codes_case_sensitive=False,
            option_values_case_sensitive=False,
            params_case_sensitive=False,
            option_values_can_start_with_announcer=False,
    ):
        self._matchers = tuple(matchers)
        self._option_codes_case_sensitive = option_codes_case_sensitive
        self._option_values_case_sensitive = option_values_case_sensitive
        self._params_case_sensitive = params_case_sensitive
        self._option_values_can_start_with_announcer = option_values_can_start_with_announcer

    @property
    def matchers(self):
        return self._matchers

    def _is_option_eligible(self, matcher, cursor):
        """Option filters, excluding anything about the value."""
        return (
            _within(cursor.arg_count, matcher.arg_indices)
            and matcher.arg_type in (None, ArgType.OPTION)
            and _within(cursor.option_count, matcher.option_indices)
            and (
                matcher.codes is None
                or any(code.match(cursor.code, self._option_codes_case_sensitive) for code in matcher.codes)
            )
        )

    def _accepts_option_value(self, matcher, value):
        if value is None:
            return matcher.has_value in (OptionHasValue.NEVER, OptionHasValue.IF_POSSIBLE)
        if matcher.has_value is OptionHasValue.NEVER:
            return False
        return matcher.value is None or matcher.value.match(value, self._option_values_case_sensitive)

    def _is_param_eligible(self, matcher, cursor, text):
        return (
            _within(cursor.arg_count, matcher.arg_indices)
            and matcher.arg_type in (None, ArgType.PARAM)
            and _within(cursor.param_count, matcher.param_indices)
            and (matcher.value is None or matcher.value.match(text, self._params_case_sensitive))
        )

    def option_can_have_value(self, cursor):
        return any(
            matcher.has_value is not OptionHasValue.NEVER
            for matcher in self._matchers
            if self._is_option_eligible(matcher, cursor)
        )

    def decide_value(self, cursor, first_is_announcer=False):
        """
        Classify whether the awaited option value exists.

        first_is_announcer tells whether the first non-whitespace character
        after the value announcer is an option announcer (False at end of line).
        The first MUST (or FORBIDDEN) answer wins; otherwise POSSIBLY wins over
        MUST_NOT.
        """
        decision = Decision.MUST_NOT
        for matcher in self._matchers:
            if not self._is_option_eligible(matcher, cursor):
                continue
            match matcher.has_value:
                case OptionHasValue.ALWAYS_MAY_START_WITH_ANNOUNCER:
                    return Decision.MUST
                case OptionHasValue.ALWAYS_MUST_NOT_START_WITH_ANNOUNCER:
                    return Decision.FORBIDDEN if first_is_announcer else Decision.MUST
                case OptionHasValue.IF_POSSIBLE if cursor.ambiguous:
                    # A new option right after whitespace; the option itself has no value.
                    if not first_is_announcer:
                        decision = Decision.POSSIBLY
                case OptionHasValue.IF_POSSIBLE:
                    if first_is_announcer and not self._option_values_can_start_with_announcer:
                        return Decision.FORBIDDEN
                    return Decision.MUST
        return decision

    def find_option(self, cursor, value=None):
        for matcher in self._matchers:
            if self._is_option_eligible(matcher, cursor) and self._accepts_option_value(matcher, value):
                return matcher
        return None

    def find_param(self, cursor, text):
        for matcher in self._matchers:
            if self._is_param_eligible(matcher, cursor, text):
                return matcher
        return None


__all__ = (
    "Decision",
    "Resolver",
)
