"""Tests for LineMatcher and scan.

Covers substring vs regex matching, case handling, OR semantics across
patterns, line splitting across chunk boundaries, and read faults.
"""

from __future__ import annotations

import asyncio

import pytest
from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st

from kubegather.collector.line_filter import LineMatcher, scan
from kubegather.errors import PatternCompileError, ScanError
from kubegather.models.logs import MessageFilter

_THROTTLED = "2024-01-01 the server has received too many requests and has asked us to retry"


def _substring(*patterns: str) -> LineMatcher:
    return LineMatcher(MessageFilter(patterns=patterns))


def _regex(*patterns: str) -> LineMatcher:
    return LineMatcher(MessageFilter(patterns=patterns, is_regex=True))


# ---------------------------------------------------------------------------
# LineMatcher
# ---------------------------------------------------------------------------


class TestSubstringMatching:
    def test_case_insensitive(self) -> None:
        assert _substring("ERROR").matches("an error occurred")

    def test_pattern_lowercase_line_uppercase(self) -> None:
        assert _substring("timed out").matches("request TIMED OUT after 30s")

    def test_no_match(self) -> None:
        assert not _substring("panic").matches("all good here")

    def test_any_pattern_matches(self) -> None:
        matcher = _substring("oom", "evicted")
        assert matcher.matches("pod was Evicted")
        assert matcher.matches("OOMKilled")
        assert not matcher.matches("Running")

    def test_regex_metacharacters_are_literal(self) -> None:
        matcher = _substring("a.b")
        assert matcher.matches("x a.b y")
        assert not matcher.matches("x axb y")


class TestRegexMatching:
    def test_search_semantics(self) -> None:
        assert _regex(r"took \d+ms").matches("request took 250ms to finish")

    def test_case_sensitive_by_default(self) -> None:
        matcher = _regex("error")
        assert matcher.matches("an error occurred")
        assert not matcher.matches("an ERROR occurred")

    def test_inline_flag_controls_case(self) -> None:
        assert _regex("(?i)error").matches("an ERROR occurred")

    def test_invalid_pattern_fails_at_construction(self) -> None:
        with pytest.raises(PatternCompileError) as exc_info:
            _regex("ok", "timeout(")
        assert exc_info.value.pattern == "timeout("
        assert exc_info.value.cause is not None


# ---------------------------------------------------------------------------
# scan
# ---------------------------------------------------------------------------


class TestScan:
    async def test_keeps_original_line_text(self, stream_factory) -> None:
        stream = stream_factory(b"INFO start\nERROR Disk Full\nINFO end\n")
        outcome = await scan(stream, _substring("error"))
        assert outcome.lines == ("ERROR Disk Full",)

    async def test_line_matching_two_patterns_appears_once(self, stream_factory) -> None:
        stream = stream_factory(b"timeout and error together\n")
        outcome = await scan(stream, _substring("timeout", "error"))
        assert outcome.lines == ("timeout and error together",)

    async def test_preserves_stream_order_and_duplicates(self, stream_factory) -> None:
        data = b"error b\nok\nerror a\nerror b\n"
        outcome = await scan(stream_factory(data), _substring("error"))
        assert outcome.lines == ("error b", "error a", "error b")

    async def test_lines_split_across_chunks(self, stream_factory) -> None:
        data = f"noise\n{_THROTTLED}\nmore noise\n".encode()
        outcome = await scan(stream_factory(data, chunk_size=3), _substring("too many requests"))
        assert outcome.lines == (_THROTTLED,)
        assert outcome.bytes_read == len(data)

    async def test_unterminated_last_line_is_scanned(self, stream_factory) -> None:
        outcome = await scan(stream_factory(b"ok\nfinal error"), _substring("error"))
        assert outcome.lines == ("final error",)

    async def test_crlf_stripped(self, stream_factory) -> None:
        outcome = await scan(stream_factory(b"error one\r\nerror two\r\n"), _substring("error"))
        assert outcome.lines == ("error one", "error two")

    async def test_invalid_utf8_is_replaced(self, stream_factory) -> None:
        outcome = await scan(stream_factory(b"error \xff byte\n"), _substring("error"))
        assert outcome.lines == ("error \ufffd byte",)

    async def test_empty_stream(self, stream_factory) -> None:
        outcome = await scan(stream_factory(b""), _substring("error"))
        assert outcome.lines == ()
        assert outcome.bytes_read == 0

    async def test_accepts_message_filter(self, stream_factory) -> None:
        outcome = await scan(stream_factory(b"Error\n"), MessageFilter(patterns=["error"]))
        assert outcome.lines == ("Error",)

    async def test_read_fault_raises_scan_error(self, stream_factory) -> None:
        stream = stream_factory(b"error 1\nerror 2\nerror 3\n", chunk_size=8, fail_after=1)
        with pytest.raises(ScanError) as exc_info:
            await scan(stream, _substring("error"))
        assert isinstance(exc_info.value.cause, ConnectionResetError)


_lines = st.lists(st.text(alphabet="abcXYZ error\t", max_size=20), max_size=15)


class TestScanDeterminism:
    @given(lines=_lines, chunk_size=st.integers(min_value=1, max_value=16))
    @settings(max_examples=60, deadline=None, suppress_health_check=[HealthCheck.function_scoped_fixture])
    def test_same_input_same_output(self, stream_factory, lines: list[str], chunk_size: int) -> None:
        data = "\n".join(lines).encode()
        matcher = _substring("error", "XY")
        first = asyncio.run(scan(stream_factory(data, chunk_size=chunk_size), matcher))
        second = asyncio.run(scan(stream_factory(data, chunk_size=chunk_size), matcher))
        assert first == second
        # Chunking never changes what is matched.
        whole = asyncio.run(scan(stream_factory(data), matcher))
        assert first.lines == whole.lines
