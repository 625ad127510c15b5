"""Tests for package extraction from yarn.lock files."""

import pytest

from lockfile_audit.errors import (
    LockfileError,
    LockfileSpecifierError,
    LockfileStructureError,
    LockfileSyntaxError,
)
from lockfile_audit.models import PackageDescriptor
from lockfile_audit.parsers.yarn_lock import parse, parse_file, split_specifier

LOCKFILE = """\
# THIS IS AN AUTOGENERATED FILE. DO NOT EDIT THIS FILE DIRECTLY.
# yarn lockfile v1


"@babel/code-frame@^7.0.0", "@babel/code-frame@^7.10.4":
  version "7.12.13"
  resolved "https://registry.yarnpkg.com/@babel/code-frame/-/code-frame-7.12.13.tgz#dcfc826beef65e75c50e21d3837d7d95798dd658"
  integrity sha512-HV1Cm0Q3ZrpCR93tkWOYiuYIgLxZXZFVG2VgK+MBWjUqZTundupbfx2aXarXuw5Ik+aTxtHJo0Fe2nOmPOB7g==
  dependencies:
    "@babel/highlight" "^7.12.13"

js-tokens@^4.0.0:
  version "4.0.0"
  resolved "https://registry.yarnpkg.com/js-tokens/-/js-tokens-4.0.0.tgz#19203fb59991df98e3a287050d4647cdeaf32499"
  integrity sha512-RdJUflcE3cUzKiMqQgsCu06FPu9UdIJO0beYbPhHN4k6apgJtifcoCtT9bcxOpYBtpD2kCM6Sbzg4CausW/PKQ==

"js-tokens@^3.0.0 || ^4.0.0":
  version "4.0.0"
  resolved "https://registry.yarnpkg.com/js-tokens/-/js-tokens-4.0.0.tgz#19203fb59991df98e3a287050d4647cdeaf32499"

lodash@^4.17.15, lodash@^4.17.19:
  version "4.17.21"
  optionalDependencies:
    fsevents "~2.3.1"
"""


def _pairs(descriptors):
    return [(d.name, d.version) for d in descriptors]


# ---------------------------------------------------------------------------
# split_specifier
# ---------------------------------------------------------------------------

def test_split_specifier_plain():
    assert split_specifier("react@^16.8.0") == "react"

def test_split_specifier_scoped():
    assert split_specifier("@scope/pkg@1.2.3") == "@scope/pkg"

def test_split_specifier_splits_at_first_at():
    assert split_specifier("alias@npm:other@^1.0.0") == "alias"

@pytest.mark.parametrize("specifier", ["react", "@scope/pkg", "@", ""])
def test_split_specifier_missing_separator(specifier):
    with pytest.raises(LockfileSpecifierError, match="Unable to parse package specifier"):
        split_specifier(specifier)

def test_split_specifier_empty_name():
    with pytest.raises(LockfileSpecifierError, match="empty package name"):
        split_specifier("@@1.0.0")


# ---------------------------------------------------------------------------
# parse
# ---------------------------------------------------------------------------

def test_parse_lockfile():
    assert _pairs(parse(LOCKFILE)) == [
        ("@babel/code-frame", "7.12.13"),
        ("js-tokens", "4.0.0"),
        ("lodash", "4.17.21"),
    ]

def test_parse_tags_ecosystem():
    descriptors = parse(LOCKFILE)
    assert all(d.ecosystem == "npm" for d in descriptors)
    assert descriptors[0] == PackageDescriptor("@babel/code-frame", "7.12.13", "npm")

def test_parse_is_deterministic():
    assert parse(LOCKFILE) == parse(LOCKFILE)

def test_parse_output_is_unique():
    descriptors = parse(LOCKFILE)
    assert len(set(_pairs(descriptors))) == len(descriptors)

def test_parse_keeps_distinct_versions():
    text = 'a@^1.0.0:\n  version "1.2.0"\n\na@^2.0.0:\n  version "2.0.1"\n'
    assert _pairs(parse(text)) == [("a", "1.2.0"), ("a", "2.0.1")]

def test_parse_duplicate_keeps_first_occurrence():
    text = 'b@1:\n  version "1"\n\na@1:\n  version "1"\n\nb@^1:\n  version "1"\n'
    assert _pairs(parse(text)) == [("b", "1"), ("a", "1")]

def test_parse_empty_lockfile():
    assert parse("# yarn lockfile v1\n") == []

def test_parse_crlf_lockfile():
    assert _pairs(parse('a@1:\r\n  version "1.0.0"\r\n')) == [("a", "1.0.0")]

def test_parse_raw_version():
    assert _pairs(parse("a@next:\n  version v1-beta\n")) == [("a", "v1-beta")]


# ---------------------------------------------------------------------------
# diagnostics
# ---------------------------------------------------------------------------

def test_missing_version():
    text = 'a@1:\n  version "1"\n\nb@^2.0.0:\n  resolved "x"\n'
    with pytest.raises(LockfileStructureError) as excinfo:
        parse(text)
    assert str(excinfo.value) == 'Package "b@^2.0.0" at line 4 column 1 has no version'

def test_missing_version_quoted_specifier():
    text = '"@s/p@^1":\n  resolved "x"\n'
    with pytest.raises(LockfileStructureError) as excinfo:
        parse(text)
    assert str(excinfo.value) == 'Package "@s/p@^1" at line 1 column 1 has no version'

def test_unexpected_string():
    with pytest.raises(LockfileStructureError) as excinfo:
        parse('a@^1.0.0 "1.0.0"\n')
    assert str(excinfo.value) == 'Unexpected string at line 1 column 10: "1.0.0"'

def test_unexpected_map_for_version():
    text = 'a@1:\n  version:\n    major "1"\n'
    with pytest.raises(LockfileStructureError) as excinfo:
        parse(text)
    assert str(excinfo.value) == 'Unexpected map for property "version" at line 2 column 3'

def test_empty_version_block_is_a_map():
    text = 'a@1:\n  version:\n  resolved "x"\n'
    with pytest.raises(LockfileStructureError) as excinfo:
        parse(text)
    assert str(excinfo.value) == 'Unexpected map for property "version" at line 2 column 3'

def test_malformed_specifier():
    with pytest.raises(LockfileSpecifierError) as excinfo:
        parse('react:\n  version "1"\n')
    assert str(excinfo.value).startswith('Unable to parse package specifier "react": ')

def test_syntax_error_is_lockfile_error():
    with pytest.raises(LockfileError) as excinfo:
        parse('a@1:\n  version "1\n')
    assert isinstance(excinfo.value, LockfileSyntaxError)

def test_no_partial_result_on_late_error():
    text = LOCKFILE + '\nbroken@1:\n  resolved "x"\n'
    with pytest.raises(LockfileStructureError, match='"broken@1"'):
        parse(text)


# ---------------------------------------------------------------------------
# parse_file
# ---------------------------------------------------------------------------

def test_parse_file(tmp_path):
    path = tmp_path / "yarn.lock"
    path.write_text(LOCKFILE, encoding="utf-8")
    assert parse_file(path) == parse(LOCKFILE)
