r"""
Argline matchers: declarative, ordered rules deciding what an argument is.

Overview
- Matcher
  • A rule that either accepts an argument occurrence (an option or a parameter)
    and hands back its tag, or declines it. Every filter is optional: a missing
    filter matches anything.
  • Filters: arg_indices (absolute ordinal), arg_type (ArgType.OPTION/PARAM),
    option_indices, param_indices, codes (option-code patterns, any one
    matching is enough) and value (option value or parameter text pattern).
  • Policy: has_value (OptionHasValue) tells whether an accepted option takes a value.
  • Payload: option_tag and param_tag, opaque and never interpreted.

- Matchers
  • The ordered registry a Parser consults. Position is priority: the first
    eligible matcher wins. An empty registry means the FALLBACK matcher is used.

Metadata (sanitized on construction)
- name: Unset | str (diagnostics only), non-empty when provided.
- arg_indices / option_indices / param_indices: Unset | int | Iterable[int] (>= 0).
- arg_type: Unset | ArgType.
- codes: Unset | pattern | Iterable[pattern]; plain strings become Exact patterns.
- has_value: OptionHasValue (default IF_POSSIBLE).
- value: Unset | pattern.

Example
    >>> verbose = Matcher("verbose", arg_type=ArgType.OPTION, codes=("v", "verbose"), has_value=OptionHasValue.NEVER)
    >>> verbose.codes
    (exact('v'), exact('verbose'))
"""
from collections.abc import Iterable, Sequence
from enum import Enum

from .patterns import pattern
from .utils import Unset, IntrospectableType, coalesce, indices


class OptionHasValue(Enum):
    """
    Whether an option accepted by a matcher carries a value.

    - NEVER: the option never has a value.
    - IF_POSSIBLE: the option takes a value when one follows it; when the value
      announcer is whitespace, the following text may instead turn out to be a parameter.
    - ALWAYS_MAY_START_WITH_ANNOUNCER: a value is required and may start with an option announcer.
    - ALWAYS_MUST_NOT_START_WITH_ANNOUNCER: a value is required and must not start with an option announcer.
    """
    NEVER = "never"
    IF_POSSIBLE = "if-possible"
    ALWAYS_MAY_START_WITH_ANNOUNCER = "always-may-start-with-announcer"
    ALWAYS_MUST_NOT_START_WITH_ANNOUNCER = "always-must-not-start-with-announcer"


class ArgType(Enum):
    OPTION = "option"
    PARAM = "param"


DEFAULT_OPTION_HAS_VALUE = OptionHasValue.IF_POSSIBLE


def _sanitize_matcher_metadata(cls, metadata, /):
    """
    Internal: normalize and validate matcher metadata in place.

    Raises
    - TypeError: when a field has the wrong type.
    - ValueError: when a field is empty or out of range.
    """
    owner = cls.__typename__

    if not isinstance(name := metadata["name"], str | Unset):
        raise TypeError(f"{owner} 'name' must be a string")
    elif isinstance(name, str) and not (name := name.strip()):
        raise ValueError(f"{owner} 'name' cannot be empty")
    metadata["name"] = coalesce(name)

    for field in ("arg_indices", "option_indices", "param_indices"):
        metadata[field] = indices(metadata[field], owner=owner, field=field)

    if not isinstance(arg_type := metadata["arg_type"], ArgType | Unset):
        raise TypeError(f"{owner} 'arg_type' must be an ArgType")
    metadata["arg_type"] = coalesce(arg_type)

    # An option filter is meaningless on a parameter-only matcher and vice versa.
    if metadata["arg_type"] is ArgType.PARAM and metadata["option_indices"] is not None:
        raise TypeError(f"{owner} cannot filter 'option_indices' when 'arg_type' is param")
    if metadata["arg_type"] is ArgType.OPTION and metadata["param_indices"] is not None:
        raise TypeError(f"{owner} cannot filter 'param_indices' when 'arg_type' is option")

    if (codes := metadata["codes"]) is Unset:
        metadata["codes"] = None
    else:
        if isinstance(codes, str) or not isinstance(codes, Iterable):
            codes = (codes,)
        codes = tuple(map(pattern, codes))
        if not codes:
            raise ValueError(f"{owner} 'codes' cannot be empty")
        metadata["codes"] = codes

    if not isinstance(metadata["has_value"], OptionHasValue):
        raise TypeError(f"{owner} 'has_value' must be an OptionHasValue")

    metadata["value"] = None if metadata["value"] is Unset else pattern(metadata["value"])


class Matcher(metaclass=IntrospectableType):
    """
    One rule in the ordered matcher list.

    Eligibility (option occurrence)
    - arg_indices contains the current argument ordinal,
    - arg_type is OPTION,
    - option_indices contains the current option ordinal,
    - one of codes matches the option code.
    Then has_value and value decide whether the captured value (if any) fits.

    Eligibility (parameter occurrence)
    - arg_indices, arg_type is PARAM, param_indices, value matches the text.

    Any filter left unset is ignored. Matchers are immutable once built.
    """

    __introspectable__ = (
        "name",
        "arg_indices",
        "arg_type",
        "option_indices",
        "param_indices",
        "codes",
        "has_value",
        "value",
        "option_tag",
        "param_tag",
    )

    __slots__ = tuple("_" + name for name in __introspectable__)

    def __init__(
            self,
            name=Unset,
            /,
            *,
            arg_indices=Unset,
            arg_type=Unset,
            option_indices=Unset,
            param_indices=Unset,
            codes=Unset,
            has_value=DEFAULT_OPTION_HAS_VALUE,
            value=Unset,
            option_tag=None,
            param_tag=None,
    ):
        metadata = {
            "name": name,
            "arg_indices": arg_indices,
            "arg_type": arg_type,
            "option_indices": option_indices,
            "param_indices": param_indices,
            "codes": codes,
            "has_value": has_value,
            "value": value,
            "option_tag": option_tag,
            "param_tag": param_tag,
        }
        _sanitize_matcher_metadata(type(self), metadata)

        for name, object in metadata.items():
            setattr(self, "_" + name, object)


FALLBACK = Matcher("fallback")
"""
Implicit rule used when no matcher is registered: no filters, IF_POSSIBLE, no tags.
"""


class Matchers(Sequence):
    """
    Ordered matcher registry. Index order is match priority.

    Mutations must not run concurrently with a parse; parsers work on the
    tuple returned by snapshot() so a later mutation never affects a parse
    already running.
    """

    def __init__(self, matchers=(), /):
        self._matchers = []
        for matcher in matchers:
            self.append(matcher)

    def append(self, matcher, /):
        if not isinstance(matcher, Matcher):
            raise TypeError("Matchers.append() argument must be a Matcher")
        self._matchers.append(matcher)
        return matcher

    def remove(self, index, /):
        """
        Remove and return the matcher at index.

        Raises
        - IndexError when index is out of range.
        """
        if not isinstance(index, int) or isinstance(index, bool):
            raise TypeError("Matchers.remove() argument must be an int")
        if not self._matchers:
            raise IndexError(f"matcher index {index} out of range (no matchers registered)")
        if not -len(self._matchers) <= index < len(self._matchers):
            raise IndexError(f"matcher index {index} out of range (0..{len(self._matchers) - 1})")
        return self._matchers.pop(index)

    def clear(self):
        self._matchers.clear()

    def snapshot(self):
        return tuple(self._matchers) or (FALLBACK,)

    def __getitem__(self, index):
        return self._matchers[index]

    def __len__(self):
        return len(self._matchers)

    def __repr__(self):
        return f"matchers({self._matchers!r})"

    def __rich_repr__(self):
        yield from self._matchers


__all__ = (
    "OptionHasValue",
    "ArgType",
    "DEFAULT_OPTION_HAS_VALUE",
    "Matcher",
    "Matchers",
    "FALLBACK",
)
