"""Tests for picking and sanitizing the raw download filename."""

import re

import pytest

from dlpath.naming.filenames import (
    DEFAULT_FILENAME,
    MAX_FILENAME_BYTES,
    build_valid_fat_filename,
    choose_filename,
    parse_content_disposition,
)

_UNSAFE = re.compile(r'[\x00-\x1f\x7f"*/:<>?\\|]')


class TestParseContentDisposition:
    """Tests for parse_content_disposition()."""

    def test_attachment_with_quoted_filename(self):
        assert parse_content_disposition('attachment; filename="report.pdf"') == "report.pdf"

    def test_keyword_is_case_insensitive(self):
        assert parse_content_disposition('Attachment; FILENAME="Report.PDF"') == "Report.PDF"

    def test_whitespace_around_equals(self):
        assert parse_content_disposition('attachment;filename =  "a b.txt"') == "a b.txt"

    def test_missing_closing_quote_is_no_match(self):
        assert parse_content_disposition('attachment; filename="report.pdf') is None

    def test_inline_disposition_is_no_match(self):
        assert parse_content_disposition('inline; filename="report.pdf"') is None

    def test_unquoted_filename_is_no_match(self):
        assert parse_content_disposition("attachment; filename=report.pdf") is None

    def test_empty_quoted_value_is_no_match(self):
        assert parse_content_disposition('attachment; filename=""') is None

    def test_none_is_no_match(self):
        assert parse_content_disposition(None) is None

    def test_first_match_wins(self):
        header = 'attachment; filename="one.txt", attachment; filename="two.txt"'
        assert parse_content_disposition(header) == "one.txt"


class TestChooseFilename:
    """Tests for the hint -> headers -> URL priority chain."""

    def test_hint_wins(self):
        name = choose_filename(
            "http://example.com/from-url.bin",
            hint="/sdcard/foo/from-hint.txt",
            content_disposition='attachment; filename="from-cd.pdf"',
        )
        assert name == "from-hint.txt"

    def test_hint_without_separator_used_whole(self):
        assert choose_filename("http://example.com/x.bin", hint="plain") == "plain"

    def test_directory_hint_is_skipped(self):
        name = choose_filename(
            "http://example.com/x.bin",
            hint="/sdcard/foo/",
            content_disposition='attachment; filename="report.pdf"',
        )
        assert name == "report.pdf"

    def test_content_disposition_takes_last_segment(self):
        name = choose_filename(
            "http://example.com/x.bin",
            content_disposition='attachment; filename="../../etc/passwd"',
        )
        assert name == "passwd"

    def test_malformed_content_disposition_falls_through(self):
        name = choose_filename(
            "http://example.com/x.bin",
            content_disposition='attachment; filename="report.pdf',
            content_location="http://example.com/files/located.zip",
        )
        assert name == "located.zip"

    def test_content_location_is_decoded(self):
        name = choose_filename(
            "http://example.com/x.bin",
            content_location="/files/my%20file.zip",
        )
        assert name == "my file.zip"

    def test_content_location_with_query_is_skipped(self):
        name = choose_filename(
            "http://example.com/files/from-url.zip",
            content_location="/download?id=3",
        )
        assert name == "from-url.zip"

    def test_content_location_directory_is_skipped(self):
        name = choose_filename(
            "http://example.com/files/from-url.zip",
            content_location="/files/",
        )
        assert name == "from-url.zip"

    def test_content_location_without_separator(self):
        assert choose_filename("http://example.com/a.bin", content_location="bare.txt") == "bare.txt"

    def test_undecodable_content_location_is_skipped(self):
        name = choose_filename(
            "http://example.com/files/from-url.zip",
            content_location="/files/bad%ff.zip",
        )
        assert name == "from-url.zip"

    def test_url_last_segment(self):
        assert choose_filename("http://example.com/path/song%20one.mp3") == "song one.mp3"

    def test_url_with_query_uses_default(self):
        assert choose_filename("http://example.com/download?id=1") == DEFAULT_FILENAME

    def test_url_directory_uses_default(self):
        assert choose_filename("http://example.com/dir/") == DEFAULT_FILENAME

    def test_empty_url_uses_default(self):
        assert choose_filename("") == DEFAULT_FILENAME

    def test_result_is_sanitized(self):
        name = choose_filename("http://example.com/x", hint='bad:name*with"chars?.txt')
        assert name == "bad_name_with_chars_.txt"

    @pytest.mark.parametrize("hint", [
        "a\x00b", "tab\there", "pipe|d", "<angle>", "back\\slash", "..", "", "\x7f",
    ])
    def test_result_is_never_empty_or_unsafe(self, hint):
        name = choose_filename("http://example.com/file.bin", hint=hint)
        assert name
        assert not _UNSAFE.search(name)
        assert name not in (".", "..")


class TestBuildValidFatFilename:
    """Tests for build_valid_fat_filename()."""

    def test_plain_name_unchanged(self):
        assert build_valid_fat_filename("report-2024.pdf") == "report-2024.pdf"

    def test_control_characters_replaced(self):
        assert build_valid_fat_filename("a\x01b\x1fc") == "a_b_c"

    @pytest.mark.parametrize("name", ["", ".", "..", "..."])
    def test_dot_only_names_become_default(self, name):
        assert build_valid_fat_filename(name) == DEFAULT_FILENAME

    @pytest.mark.parametrize("name", ["CON", "nul.txt", "Com1.tar.gz", "LPT9"])
    def test_device_names_are_prefixed(self, name):
        assert build_valid_fat_filename(name) == f"_{name}"

    def test_console_like_names_are_kept(self):
        assert build_valid_fat_filename("console.txt") == "console.txt"

    def test_long_name_trimmed_in_the_middle(self):
        name = "a" * 300 + ".pdf"

        result = build_valid_fat_filename(name)

        assert len(result.encode("utf-8")) <= MAX_FILENAME_BYTES
        assert result == "a" * 125 + "_" + "a" * 125 + ".pdf"
        assert result.count(".") == 1

    def test_multibyte_name_trimmed_by_bytes(self):
        name = "é" * 200 + ".txt"

        result = build_valid_fat_filename(name)

        assert len(result.encode("utf-8")) <= MAX_FILENAME_BYTES
        assert result.endswith(".txt")

    def test_long_name_without_extension_gains_no_dot(self):
        result = build_valid_fat_filename("c" * 300)

        assert len(result.encode("utf-8")) == MAX_FILENAME_BYTES
        assert "." not in result

    def test_overlong_extension_trims_whole_name(self):
        result = build_valid_fat_filename("a." + "x" * 300)

        assert len(result.encode("utf-8")) <= MAX_FILENAME_BYTES
        assert result.startswith("a.")
