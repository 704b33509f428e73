"""
Argline parse results.

A parse yields a list of Arg records in left-to-right input order:
- Option: an option occurrence (code plus an optional value).
- Param: a positional parameter.

Every record keeps a reference to the matcher that accepted it; ``tag`` reads
the matcher's tag for the record's kind. The reference is a plain object
reference, so removing the matcher from a parser afterwards does not
invalidate records already produced.

Offsets and ordinals
- offset: code-point index where the argument starts (the announcer for options,
  the opening quote or first character for parameters).
- arg_index: ordinal among all results.
- option_index / param_index: ordinal among options / parameters only.
"""
from .matchers import ArgType
from .utils import IntrospectableType


class Arg(metaclass=IntrospectableType):
    """Base of Option and Param; not produced directly."""

    __slots__ = ("_matcher", "_offset", "_arg_index")

    kind = None

    def __init__(self, matcher, offset, arg_index):
        self._matcher = matcher
        self._offset = offset
        self._arg_index = arg_index

    def __eq__(self, other):
        if type(self) is not type(other):
            return NotImplemented
        return all(getattr(self, name) == getattr(other, name) for name in type(self).__introspectable__)

    __hash__ = None


class Option(Arg):
    __introspectable__ = (
        "matcher",
        "offset",
        "arg_index",
        "option_index",
        "code",
        "value",
    )
    __displayable__ = ("offset", "arg_index", "option_index", "code", "value")

    __slots__ = ("_option_index", "_code", "_value")

    kind = ArgType.OPTION

    def __init__(self, matcher, offset, arg_index, option_index, code, value=None):
        super().__init__(matcher, offset, arg_index)
        self._option_index = option_index
        self._code = code
        self._value = value

    @property
    def tag(self):
        return self._matcher.option_tag

    @property
    def has_value(self):
        return self._value is not None


class Param(Arg):
    __introspectable__ = (
        "matcher",
        "offset",
        "arg_index",
        "param_index",
        "value",
    )
    __displayable__ = ("offset", "arg_index", "param_index", "value")

    __slots__ = ("_param_index", "_value")

    kind = ArgType.PARAM

    def __init__(self, matcher, offset, arg_index, param_index, value):
        super().__init__(matcher, offset, arg_index)
        self._param_index = param_index
        self._value = value

    @property
    def tag(self):
        return self._matcher.param_tag


__all__ = (
    "Arg",
    "Option",
    "Param",
)
