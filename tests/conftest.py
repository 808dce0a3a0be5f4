"""
Pytest configuration and shared fixtures for jtree tests.

Provides immutable test case fixtures for documents that must parse and
documents that must fail with a specific error kind.
"""

from dataclasses import dataclass
from typing import Any

import pytest

from jtree import ErrorKind


@dataclass(frozen=True)
class JsonTestCase:
    """
    Immutable container for JSON test case data.

    Holds test input and expected behavior for consistent test execution.
    """

    description: str
    input_data: str
    should_fail: bool = False
    expected_output: Any = None
    expected_kind: ErrorKind | None = None


@pytest.fixture
def json_fail_cases() -> list[JsonTestCase]:
    """
    Provides documents that must fail, with the error kind each raises.

    Most are adapted from the json.org JSON_checker failure suite; cases
    the parser deliberately tolerates (trailing data, repeated delimiters,
    leading zeroes) are left out.
    """
    unexpected = ErrorKind.UNEXPECTED_CHARACTER
    fail_docs = [
        (
            '"A JSON payload should be an object or array, not a string."',
            ErrorKind.MALFORMED_ROOT,
        ),
        ("42", ErrorKind.MALFORMED_ROOT),
        ("   \n\t", ErrorKind.MALFORMED_ROOT),
        ("", ErrorKind.EMPTY_INPUT),
        ('["Unclosed array"', ErrorKind.UNEXPECTED_END),
        ('{unquoted_key: "keys must be quoted"}', unexpected),
        ('{"Illegal expression": 1 + 2}', unexpected),
        ('{"Illegal invocation": alert()}', unexpected),
        ('{"Numbers cannot be hex": 0x14}', unexpected),
        ('["Illegal backslash escape: \\x15"]', unexpected),
        ("[\\naked]", unexpected),
        ('["Illegal backslash escape: \\017"]', unexpected),
        ('{"Missing colon" null}', unexpected),
        ('{"Comma instead of colon", null}', unexpected),
        ('["Bad value", truth]', unexpected),
        ("['single quote']", unexpected),
        ('["tab\\   character\\   in\\  string\\  "]', unexpected),
        ('["line\\\nbreak"]', unexpected),
        ("[0e]", unexpected),
        ('{"Comma instead if closing brace": true,', ErrorKind.UNEXPECTED_END),
        ('["mismatch"}', unexpected),
        ('{"mismatch"]', unexpected),
        ("[1.2.3]", unexpected),
        ("[-]", ErrorKind.NUMBER_FORMAT),
        ("[1-2]", ErrorKind.NUMBER_FORMAT),
        ("[9223372036854775808]", ErrorKind.NUMBER_FORMAT),
        ('{"a" "b": 1}', unexpected),
        ('{"key without value"}', unexpected),
        ('{"key": }', unexpected),
        ("{: 1}", unexpected),
        ("{{}}", unexpected),
        ('{"a": 1 2}', unexpected),
        ("[nul]", unexpected),
        ("[Infinite]", unexpected),
        ('["unterminated', ErrorKind.UNEXPECTED_END),
        ('["dangling escape \\', ErrorKind.UNEXPECTED_END),
        ("[tr", ErrorKind.UNEXPECTED_END),
    ]

    return [
        JsonTestCase(
            description=f"fail{idx + 1}",
            input_data=doc,
            should_fail=True,
            expected_kind=kind,
        )
        for idx, (doc, kind) in enumerate(fail_docs)
    ]


@pytest.fixture
def json_pass_cases() -> list[JsonTestCase]:
    """
    Provides documents that must parse successfully.

    pass1 is the JSON_checker document without exponent notation, which
    this parser does not read.
    """
    return [
        JsonTestCase(
            description="pass1 - complex nested structure",
            input_data="""[
    "JSON Test Pattern pass1",
    {"object with 1 member":["array with 1 element"]},
    {},
    [],
    -42,
    true,
    false,
    null,
    {
        "integer": 1234567890,
        "real": -9876.543210,
        "small": 0.000000000123456789,
        "zero": 0,
        "one": 1,
        "space": " ",
        "quote": "\\"",
        "backslash": "\\\\",
        "controls": "\\b\\f\\n\\r\\t",
        "slash": "/ & \\/",
        "alpha": "abcdefghijklmnopqrstuvwyz",
        "ALPHA": "ABCDEFGHIJKLMNOPQRSTUVWYZ",
        "digit": "0123456789",
        "0123456789": "digit",
        "special": "`1~!@#$%^&*()_+-={':[,]}|;.</>?",
        "hex": "\\u0123\\u4567\\u89AB\\uCDEF\\uabcd\\uef4A",
        "true": true,
        "false": false,
        "null": null,
        "array":[  ],
        "object":{  },
        "address": "50 St. James Street",
        "url": "https://www.JSON.org/",
        "comment": "// /* <!-- --",
        "# -- --> */": " ",
        " s p a c e d " :[1,2 , 3

,

4 , 5        ,          6           ,7        ],"compact":[1,2,3,4,5,6,7],
        "jsontext": "{\\"object with 1 member\\":[\\"array with 1 element\\"]}"
    },
    0.5,
    98.6,
    99.44,
    1066,
    "rosebud"]""",
        ),
        JsonTestCase(
            description="pass2 - deep nesting",
            input_data='[[[[[[[[[[[[[[[[[[["Not too deep"]]]]]]]]]]]]]]]]]]]',
        ),
        JsonTestCase(
            description="pass3 - simple object",
            input_data='{"JSON Test Pattern pass3": {"The outermost value": "must be an object or array.", "In this test": "It is an object."}}',
        ),
    ]


@pytest.fixture
def basic_json_values() -> list[JsonTestCase]:
    """
    Provides single-element documents covering every scalar kind.
    """
    return [
        JsonTestCase("null value", "[null]", False, [None]),
        JsonTestCase("true boolean", "[true]", False, [True]),
        JsonTestCase("false boolean", "[false]", False, [False]),
        JsonTestCase("integer", "[42]", False, [42]),
        JsonTestCase("negative integer", "[-17]", False, [-17]),
        JsonTestCase("decimal", "[2.5]", False, [2.5]),
        JsonTestCase("negative decimal", "[-3.25]", False, [-3.25]),
        JsonTestCase("empty string", '[""]', False, [""]),
        JsonTestCase("simple string", '["hello"]', False, ["hello"]),
        JsonTestCase("empty array", "[]", False, []),
        JsonTestCase("empty object", "{}", False, {}),
        JsonTestCase("simple array", "[1, 2, 3]", False, [1, 2, 3]),
        JsonTestCase(
            "simple object", '{"key": "value"}', False, {"key": "value"}
        ),
    ]
