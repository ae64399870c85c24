from __future__ import annotations

import logging

import pytest

import samples
from unusedcode.extractor import extract_declarations
from unusedcode.ignore_rules import IgnoreRuleSet
from unusedcode.models import Declaration, DeclarationKind, Modifiers, SourceFile
from unusedcode.usage import count_occurrences, find_unused, tokenize


def _unused(files: dict[str, str], interface: dict[str, str] | None = None) -> set[str]:
    source_files = [SourceFile(path, content) for path, content in files.items()]
    interface_files = [SourceFile(path, content) for path, content in (interface or {}).items()]
    declarations = extract_declarations(source_files, IgnoreRuleSet()).declarations
    return {d.name for d in find_unused(declarations, source_files, interface_files)}


def test_no_unused_items() -> None:
    assert _unused({"foo.swift": samples.NO_UNUSED}) == set()


def test_one_unused_item() -> None:
    assert _unused({"foo.swift": samples.ONE_UNUSED}) == {"Foo"}


def test_removing_initializer_body_exposes_members() -> None:
    unused = _unused({"foo.swift": samples.NO_INITIALIZER_BODY})
    assert {"baz", "bar"} <= unused
    assert "Foo" not in unused
    assert "Bat" not in unused


@pytest.mark.parametrize(
    "content",
    [
        samples.WITH_COMMENTS,
        samples.WITH_OVERRIDE,
        samples.WITH_REGEX,
        samples.WITH_STRING,
    ],
)
def test_non_code_mentions_do_not_count(content: str) -> None:
    assert _unused({"foo.swift": content}) == {"Foo"}


def test_string_interpolation_counts() -> None:
    assert _unused({"foo.swift": samples.WITH_INTERPOLATION}) == set()


def test_nested_interpolation_counts() -> None:
    content = (
        "func format(_ amount: Int) -> String { String(amount) }\n"
        "func value(_ raw: Int) -> Int { raw }\n"
        'print("total: \\(format(value(1)))")\n'
    )
    assert _unused({"totals.swift": content}) == set()


def test_usage_in_other_file_counts() -> None:
    files = {"foo.swift": samples.ONE_UNUSED, "bar.swift": "let made = Foo()\nprint(made)\n"}
    assert _unused(files) == set()


def test_private_declaration_is_scoped_to_its_file() -> None:
    files = {"foo.swift": samples.ONE_UNUSED_PRIVATE, "bar.swift": samples.PRIVATE_USAGE}
    assert _unused(files) == {"Foo"}


def test_self_count_floor() -> None:
    source = SourceFile("a.swift", "func lonely() {}\n")
    declarations = extract_declarations([source]).declarations
    counts = count_occurrences(declarations, [source])
    assert counts[declarations[0]] == 1


def test_visibility_scoping_counts() -> None:
    own = SourceFile("a.swift", "private func helper() {}\n")
    other = SourceFile("b.swift", "helper()\nhelper()\n")
    declarations = extract_declarations([own, other]).declarations
    counts = count_occurrences(declarations, [own, other])
    assert counts[declarations[0]] == 1


def test_override_is_never_unused() -> None:
    declaration = Declaration(
        file="a.swift",
        raw_line="override func bat() {}",
        line_number=1,
        kind=DeclarationKind.FUNCTION,
        name="bat",
        modifiers=Modifiers.from_tokens(["override"]),
    )
    source = SourceFile("a.swift", "override func bat() {}\n")
    assert find_unused([declaration], [source]) == []


def test_unreadable_files_are_skipped(caplog: pytest.LogCaptureFixture) -> None:
    source = SourceFile("foo.swift", samples.ONE_UNUSED)
    declarations = extract_declarations([source]).declarations
    with caplog.at_level(logging.WARNING):
        unused = find_unused(
            declarations,
            [source, SourceFile("missing.swift", None)],
            [SourceFile("missing.xib", None)],
        )
    assert {d.name for d in unused} == {"Foo"}
    assert "missing.swift" in caplog.text
    assert "missing.xib" in caplog.text


@pytest.mark.parametrize("xib", [samples.XIB_CLASS, samples.XIB_CUSTOM_CLASS])
def test_interface_class_reference(xib: str) -> None:
    assert _unused({"foo.swift": samples.ONE_UNUSED}, {"foo.xib": xib}) == set()


def test_interface_class_reference_skips_private() -> None:
    unused = _unused({"foo.swift": samples.ONE_UNUSED_PRIVATE}, {"foo.xib": samples.XIB_CLASS})
    assert unused == {"Foo"}


def test_interface_selector_reaches_private_action() -> None:
    assert _unused({"foo.swift": samples.UNCALLED_ACTION}) == {"didTap"}
    assert _unused({"foo.swift": samples.UNCALLED_ACTION}, {"foo.xib": samples.XIB_SELECTOR}) == set()


def test_interface_property_reaches_private_outlet() -> None:
    assert _unused({"foo.swift": samples.PRIVATE_OUTLET}) == {"bar"}
    assert _unused({"foo.swift": samples.PRIVATE_OUTLET}, {"foo.xib": samples.XIB_PROPERTY}) == set()


def test_interface_property_does_not_reach_unlinked_private() -> None:
    unused = _unused(
        {"foo.swift": samples.PRIVATE_PLAIN_PROPERTY},
        {"foo.xib": samples.XIB_PROPERTY},
    )
    assert unused == {"bar"}


def test_interface_file_spanning_lines() -> None:
    xib = '<connections>\n    <outlet property="bar"\n        destination="y"/>\n</connections>\n'
    assert _unused({"foo.swift": samples.PRIVATE_OUTLET}, {"Main.storyboard": xib}) == set()


def test_interface_text_outside_attributes_is_ignored() -> None:
    xib = "<string>Foo</string>\n<!-- Foo -->\n"
    assert _unused({"foo.swift": samples.ONE_UNUSED}, {"foo.xib": xib}) == {"Foo"}


def test_tokenize() -> None:
    tokens = tokenize("foo.bar(baz, foo_1) + élan")
    assert tokens == {"foo": 1, "bar": 1, "baz": 1, "foo_1": 1, "élan": 1}


def test_counts_are_logged_at_debug(caplog: pytest.LogCaptureFixture) -> None:
    source = SourceFile("a.swift", "func lonely() {}\n")
    declarations = extract_declarations([source]).declarations

    with caplog.at_level(logging.INFO, logger="unusedcode.usage"):
        find_unused(declarations, [source])
    assert "used 1 time(s)" not in caplog.text

    with caplog.at_level(logging.DEBUG, logger="unusedcode.usage"):
        find_unused(declarations, [source])
    assert "a.swift:1: func lonely used 1 time(s)" in caplog.text
