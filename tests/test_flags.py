"""Tests for flag-file parsing and flag-name normalization in kcc.flags."""

from pathlib import Path

import pytest

from kcc.errors import NotFoundError
from kcc.flags import (
    canonical_flag_name,
    clean_flag_name,
    collect_flags,
    match_prefix,
    parse_flag_line,
    parse_flag_lines,
    parse_inline_flags,
    read_flags_file,
)

# ---------------------------------------------------------------------------
# Normalization
# ---------------------------------------------------------------------------


class TestNormalization:
    def test_bare_name_gets_prefix(self) -> None:
        assert canonical_flag_name("NET") == "CONFIG_NET"

    def test_prefixed_name_unchanged(self) -> None:
        assert canonical_flag_name("CONFIG_NET") == "CONFIG_NET"

    def test_idempotent(self) -> None:
        once = canonical_flag_name("USB")
        assert canonical_flag_name(once) == once

    def test_only_one_prefix_stripped(self) -> None:
        assert clean_flag_name("CONFIG_CONFIG_X") == "CONFIG_X"
        assert canonical_flag_name("CONFIG_CONFIG_X") == "CONFIG_CONFIG_X"

    def test_case_sensitive(self) -> None:
        assert clean_flag_name("config_NET") == "config_NET"
        assert canonical_flag_name("config_NET") == "CONFIG_config_NET"

    def test_empty_name(self) -> None:
        assert canonical_flag_name("") == "CONFIG_"
        assert canonical_flag_name("CONFIG_") == "CONFIG_"

    def test_match_prefix(self) -> None:
        assert match_prefix("NET") == "CONFIG_NET="
        assert match_prefix("CONFIG_NET") == "CONFIG_NET="


# ---------------------------------------------------------------------------
# Flag file parsing
# ---------------------------------------------------------------------------


class TestParseFlagLine:
    @pytest.mark.parametrize("line", ["", "   ", "# comment", "   # indented comment"])
    def test_ignored(self, line: str) -> None:
        assert parse_flag_line(line) is None

    def test_plain_name_trimmed(self) -> None:
        assert parse_flag_line("  BPF_SYSCALL \t") == "BPF_SYSCALL"

    def test_value_discarded(self) -> None:
        assert parse_flag_line("NR_CPUS=64") == "NR_CPUS"

    def test_split_on_first_equals(self) -> None:
        assert parse_flag_line('CMDLINE="a=b"') == "CMDLINE"

    def test_malformed_passes_through(self) -> None:
        assert parse_flag_line("not a flag!") == "not a flag!"


class TestParseFlagLines:
    def test_scenario_file(self) -> None:
        text = "NET\n#comment\nUSB\nFOO=ignored\n"
        assert parse_flag_lines(text) == ["NET", "USB", "FOO"]

    def test_duplicates_kept(self) -> None:
        assert parse_flag_lines("A\nCONFIG_A\nA\n") == ["A", "CONFIG_A", "A"]


class TestReadFlagsFile:
    def test_reads_file(self, tmp_path: Path) -> None:
        f = tmp_path / "required.flags"
        f.write_text("# header\n\nCONFIG_CGROUPS\nNAMESPACES=y\n", encoding="utf-8")
        assert read_flags_file(f) == ["CONFIG_CGROUPS", "NAMESPACES"]

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(NotFoundError, match="Flags file not found"):
            read_flags_file(tmp_path / "nope.flags")


class TestInlineFlags:
    def test_comma_separated(self) -> None:
        assert parse_inline_flags("A,CONFIG_B, C ") == ["A", "CONFIG_B", "C"]

    def test_empty_tokens_skipped(self) -> None:
        assert parse_inline_flags("A,,B,") == ["A", "B"]

    def test_value_suffix_dropped(self) -> None:
        assert parse_inline_flags("A=m,B") == ["A", "B"]


class TestCollectFlags:
    def test_files_then_inline_in_order(self, tmp_path: Path) -> None:
        f1 = tmp_path / "one.flags"
        f2 = tmp_path / "two.flags"
        f1.write_text("A\nB\n", encoding="utf-8")
        f2.write_text("B\nC\n", encoding="utf-8")
        assert collect_flags([f1, f2], ["D,A"]) == ["A", "B", "B", "C", "D", "A"]

    def test_nothing(self) -> None:
        assert collect_flags([], []) == []

    def test_inline_first(self, tmp_path: Path) -> None:
        f = tmp_path / "one.flags"
        f.write_text("A\nB\n", encoding="utf-8")
        assert collect_flags([f], ["C", "A"], inline_first=True) == ["C", "A", "A", "B"]
