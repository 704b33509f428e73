"""
Parser behavioral tests (settings, matcher registry, parse entry points).

Scope
- Validate setting defaults and validation on construction and assignment.
- Validate add/remove/clear of matchers and their effect on later parses.
- Validate the parse entry points (method and module-level shortcut).

Conventions
- Test method names follow CamelCase per project convention.
- Tests use the public API (Parser, Matcher, parse).
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from argline import (
    Parser,
    Matcher,
    ArgType,
    OptionHasValue,
    FALLBACK,
    UnmatchedOptionError,
    ParamMissingClosingQuoteError,
    parse,
)
from argline.scanner import Settings


class TestSettings(TestCase):
    """Defaults and validation."""

    def testDefaults(self):
        settings = Parser().settings()
        self.assertIsInstance(settings, Settings)
        self.assertEqual(settings.quote_char, '"')
        self.assertEqual(settings.option_announcer_chars, frozenset("-"))
        self.assertFalse(settings.option_codes_case_sensitive)
        self.assertFalse(settings.multi_char_option_code_requires_double_announcer)
        self.assertEqual(settings.option_value_announcer_chars, frozenset(" "))
        self.assertFalse(settings.option_values_case_sensitive)
        self.assertFalse(settings.option_values_can_start_with_announcer)
        self.assertFalse(settings.params_case_sensitive)
        self.assertFalse(settings.params_can_start_with_announcer)
        self.assertTrue(settings.embed_quote_char_with_double)
        self.assertIsNone(settings.escape_char)
        self.assertEqual(settings.parse_terminate_chars, frozenset("<>|"))

    def testCharacterSets(self):
        parser = Parser(option_announcer_chars=["-", "/"], parse_terminate_chars="|")
        self.assertEqual(parser.option_announcer_chars, frozenset({"-", "/"}))
        self.assertEqual(parser.parse_terminate_chars, frozenset({"|"}))

    def testInvalidQuoteChar(self):
        with self.assertRaises(ValueError):
            Parser(quote_char="")
        with self.assertRaises(ValueError):
            Parser(quote_char="''")
        with self.assertRaises(TypeError):
            Parser(quote_char=None)

    def testInvalidCharacterSet(self):
        with self.assertRaises(ValueError):
            Parser(option_announcer_chars=["--"])
        with self.assertRaises(TypeError):
            Parser(parse_terminate_chars=5)
        with self.assertRaises(TypeError):
            Parser(option_value_announcer_chars=[1])

    def testInvalidFlag(self):
        with self.assertRaises(TypeError):
            Parser(params_case_sensitive=1)

    def testUnknownSetting(self):
        with self.assertRaises(TypeError):
            Parser(quote="'")

    def testAssignmentIsValidated(self):
        parser = Parser()
        parser.escape_char = "\\"
        self.assertEqual(parser.escape_char, "\\")
        parser.escape_char = None
        self.assertIsNone(parser.escape_char)
        with self.assertRaises(ValueError):
            parser.escape_char = "\\\\"
        with self.assertRaises(TypeError):
            parser.embed_quote_char_with_double = "no"
        self.assertTrue(parser.embed_quote_char_with_double)

    def testSettingsAreSnapshots(self):
        parser = Parser()
        before = parser.settings()
        parser.quote_char = "'"
        self.assertEqual(before.quote_char, '"')
        self.assertEqual(parser.settings().quote_char, "'")

    def testChangedSettingsApplyToNextParse(self):
        parser = Parser()
        self.assertEqual([arg.value for arg in parser.parse("'a b'")], ["'a", "b'"])
        parser.quote_char = "'"
        self.assertEqual([arg.value for arg in parser.parse("'a b'")], ["a b"])

    def testRepr(self):
        text = repr(Parser())
        self.assertTrue(text.startswith("parser(quote_char='\"'"))
        self.assertIn("matchers=()", text)


class TestMatcherRegistry(TestCase):
    """add_matcher, remove_matcher, clear_matchers."""

    def testAddMatcherInstance(self):
        parser = Parser()
        matcher = Matcher("verbose", codes="v")
        self.assertIs(parser.add_matcher(matcher), matcher)
        self.assertEqual(parser.matchers, (matcher,))

    def testAddMatcherFromFields(self):
        parser = Parser()
        matcher = parser.add_matcher(name="verbose", codes="v", has_value=OptionHasValue.NEVER)
        self.assertEqual(matcher.name, "verbose")
        self.assertIs(matcher.has_value, OptionHasValue.NEVER)

    def testAddMatcherRejectsBothForms(self):
        with self.assertRaises(TypeError):
            Parser().add_matcher(Matcher(), codes="v")
        with self.assertRaises(TypeError):
            Parser().add_matcher("verbose", codes="v")

    def testNamedMatchersFromFields(self):
        parser = Parser(escape_char="\\")
        parser.add_matcher(name="verbose", arg_type=ArgType.OPTION, codes=("v", "verbose"), has_value=OptionHasValue.NEVER, option_tag="verbose")
        parser.add_matcher(name="output", arg_type=ArgType.OPTION, codes=("o", "output"), option_tag="output")
        parser.add_matcher(name="file", arg_type=ArgType.PARAM, param_tag="file")
        self.assertEqual([matcher.name for matcher in parser.matchers], ["verbose", "output", "file"])
        args = parser.parse('copy "my file.txt" -v -o out.txt > log.txt')
        self.assertEqual([arg.tag for arg in args], ["file", "file", "verbose", "output"])
        self.assertEqual(args[3].value, "out.txt")

    def testAddMatcherRejectsOtherObjects(self):
        with self.assertRaises(TypeError):
            Parser().add_matcher("verbose")

    def testAddedMatchersHaveLowerPriority(self):
        parser = Parser(Matcher(option_tag="first"))
        parser.add_matcher(option_tag="second")
        self.assertEqual(parser.parse("-x")[0].tag, "first")

    def testRemoveMatcher(self):
        first, second = Matcher("first", option_tag="first"), Matcher("second", option_tag="second")
        parser = Parser(first, second)
        self.assertIs(parser.remove_matcher(0), first)
        self.assertEqual(parser.matchers, (second,))
        self.assertEqual(parser.parse("-x")[0].tag, "second")

    def testRemoveMatcherOutOfRange(self):
        parser = Parser(Matcher())
        with self.assertRaises(IndexError):
            parser.remove_matcher(1)
        with self.assertRaises(IndexError):
            Parser().remove_matcher(0)

    def testClearMatchersFallsBack(self):
        parser = Parser(Matcher(codes="a"))
        with self.assertRaises(UnmatchedOptionError):
            parser.parse("-b")
        parser.clear_matchers()
        self.assertEqual(parser.matchers, ())
        self.assertIs(parser.parse("-b")[0].matcher, FALLBACK)

    def testResultsOutliveRemovedMatcher(self):
        parser = Parser(Matcher("files", arg_type=ArgType.PARAM, param_tag="file"))
        args = parser.parse("a.txt")
        parser.clear_matchers()
        self.assertEqual(args[0].tag, "file")
        self.assertEqual(args[0].matcher.name, "files")

    def testMatchersListingIsReadOnly(self):
        parser = Parser(Matcher())
        self.assertIsInstance(parser.matchers, tuple)


class TestParse(TestCase):
    """Entry points."""

    def testRejectsNonString(self):
        with self.assertRaises(TypeError):
            Parser().parse(b"-v")

    def testParserIsReusableAfterFault(self):
        parser = Parser()
        with self.assertRaises(ParamMissingClosingQuoteError):
            parser.parse('"abc')
        self.assertEqual([arg.value for arg in parser.parse('"abc"')], ["abc"])

    def testModuleLevelParse(self):
        args = parse('copy "my file" -f', Matcher(has_value=OptionHasValue.NEVER, option_tag="flag"))
        self.assertEqual([arg.value for arg in args], ["copy", "my file", None])
        self.assertEqual(args[2].tag, "flag")

    def testModuleLevelParseSettings(self):
        args = parse("/a", option_announcer_chars="/")
        self.assertEqual(args[0].code, "a")

    def testParseIsLogged(self):
        with self.assertLogs("argline.parser", level="DEBUG") as logs:
            Parser().parse("a b")
        self.assertTrue(any("parsed 2 argument(s)" in message for message in logs.output))

    def testEmissionIsLogged(self):
        with self.assertLogs("argline.scanner", level="DEBUG") as logs:
            Parser().parse("-v")
        self.assertTrue(any("emitted" in message for message in logs.output))


if __name__ == "__main__":
    unittest.main()
