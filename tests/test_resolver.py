"""Tests for flag classification in kcc.resolver."""

from pathlib import Path

import pytest

from kcc.resolver import (
    FlagCheckResult,
    FlagStatus,
    PermissiveVocabulary,
    ReferenceVocabulary,
    resolve_flag,
    resolve_flags,
)

CONFIG_LINES = ["CONFIG_NET=y", "CONFIG_USB=m", "# CONFIG_FOO is not set"]

REFERENCE = ReferenceVocabulary.from_lines(
    ["CONFIG_NET=y", "CONFIG_USB=m", "CONFIG_FOO=y", "CONFIG_NR_CPUS=64", "CONFIG_DUP=y"]
)


class TestResolveFlag:
    def test_builtin(self) -> None:
        r = resolve_flag(CONFIG_LINES, "NET", REFERENCE)
        assert r == FlagCheckResult(name="CONFIG_NET", status=FlagStatus.ENABLED_BUILTIN)

    def test_module(self) -> None:
        r = resolve_flag(CONFIG_LINES, "USB", REFERENCE)
        assert r.status is FlagStatus.ENABLED_AS_MODULE

    def test_missing_when_recognized(self) -> None:
        r = resolve_flag(CONFIG_LINES, "FOO", REFERENCE)
        assert r == FlagCheckResult(name="CONFIG_FOO", status=FlagStatus.MISSING)

    def test_invalid_when_unknown(self) -> None:
        r = resolve_flag(CONFIG_LINES, "BOGUS", REFERENCE)
        assert r == FlagCheckResult(name="CONFIG_BOGUS", status=FlagStatus.INVALID_OPTION)

    def test_invalid_even_if_enabled_in_checked_config(self) -> None:
        vocab = ReferenceVocabulary.from_lines(["CONFIG_OTHER=y"])
        r = resolve_flag(CONFIG_LINES, "NET", vocab)
        assert r.status is FlagStatus.INVALID_OPTION

    @pytest.mark.parametrize("flag", ["NET", "CONFIG_NET"])
    def test_prefix_optional(self, flag: str) -> None:
        r = resolve_flag(CONFIG_LINES, flag, REFERENCE)
        assert r.name == "CONFIG_NET"
        assert r.status is FlagStatus.ENABLED_BUILTIN

    def test_non_boolean_value_is_missing(self) -> None:
        r = resolve_flag(["CONFIG_NR_CPUS=64"], "NR_CPUS", REFERENCE)
        assert r.status is FlagStatus.MISSING

    def test_value_must_match_exactly(self) -> None:
        lines = ["CONFIG_NET=yes", "CONFIG_USB=m "]
        assert resolve_flag(lines, "NET", REFERENCE).status is FlagStatus.MISSING
        assert resolve_flag(lines, "USB", REFERENCE).status is FlagStatus.MISSING

    def test_prefix_does_not_match_longer_name(self) -> None:
        r = resolve_flag(["CONFIG_NET_NS=y"], "NET", REFERENCE)
        assert r.status is FlagStatus.MISSING

    def test_first_decisive_line_wins(self) -> None:
        r = resolve_flag(["CONFIG_DUP=m", "CONFIG_DUP=y"], "DUP", REFERENCE)
        assert r.status is FlagStatus.ENABLED_AS_MODULE

    def test_non_boolean_line_skipped_for_later_match(self) -> None:
        r = resolve_flag(['CONFIG_DUP="x"', "CONFIG_DUP=y"], "DUP", REFERENCE)
        assert r.status is FlagStatus.ENABLED_BUILTIN

    def test_not_set_comment_does_not_make_option_valid(self) -> None:
        vocab = ReferenceVocabulary.from_lines(["# CONFIG_FOO is not set"])
        assert resolve_flag([], "FOO", vocab).status is FlagStatus.INVALID_OPTION

    def test_case_sensitive(self) -> None:
        r = resolve_flag(["CONFIG_net=y"], "net", PermissiveVocabulary())
        assert r.status is FlagStatus.ENABLED_BUILTIN
        assert resolve_flag(CONFIG_LINES, "net", PermissiveVocabulary()).status is FlagStatus.MISSING

    def test_empty_name(self) -> None:
        r = resolve_flag(CONFIG_LINES, "", REFERENCE)
        assert r == FlagCheckResult(name="CONFIG_", status=FlagStatus.INVALID_OPTION)

    def test_permissive_vocabulary(self) -> None:
        r = resolve_flag(CONFIG_LINES, "BOGUS", PermissiveVocabulary())
        assert r.status is FlagStatus.MISSING


class TestResolveFlags:
    def test_scenario_order_and_statuses(self) -> None:
        results = resolve_flags(CONFIG_LINES, ["NET", "USB", "FOO"], REFERENCE)
        assert [(r.name, r.status) for r in results] == [
            ("CONFIG_NET", FlagStatus.ENABLED_BUILTIN),
            ("CONFIG_USB", FlagStatus.ENABLED_AS_MODULE),
            ("CONFIG_FOO", FlagStatus.MISSING),
        ]

    def test_duplicates_reported_each_time(self) -> None:
        results = resolve_flags(CONFIG_LINES, ["NET", "CONFIG_NET", "NET"], REFERENCE)
        assert len(results) == 3
        assert all(r.name == "CONFIG_NET" for r in results)


class TestReferenceVocabulary:
    def test_from_path(self, tmp_path: Path) -> None:
        ref = tmp_path / "reference-config"
        ref.write_text("CONFIG_NET=y\n# CONFIG_USB is not set\n", encoding="utf-8")
        vocab = ReferenceVocabulary.from_path(ref)
        assert vocab.recognizes("CONFIG_NET=")
        assert not vocab.recognizes("CONFIG_USB=")


class TestFlagStatus:
    def test_ok(self) -> None:
        assert FlagStatus.ENABLED_BUILTIN.ok
        assert FlagStatus.ENABLED_AS_MODULE.ok
        assert not FlagStatus.MISSING.ok
        assert not FlagStatus.INVALID_OPTION.ok

    def test_result_to_dict(self) -> None:
        r = FlagCheckResult(name="CONFIG_USB", status=FlagStatus.ENABLED_AS_MODULE)
        assert r.to_dict() == {"name": "CONFIG_USB", "status": "module"}
