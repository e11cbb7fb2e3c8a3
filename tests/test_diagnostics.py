"""Tests for safecall.diagnostics module.

Covers:
- Header with and without a logical name
- Silent vs full detail, including cause chains
- Call-site line, explicit and captured
- format_note without an underlying failure
- Stack walk collection and rendering
"""

import pytest

from safecall.callsite import CallSite
from safecall.diagnostics import collect_frames, format_error, format_note, format_stack

SITE = CallSite("main", "app.py", 7)


def _raised(exc):
    try:
        raise exc
    except Exception as e:
        return e


def _chained():
    try:
        try:
            raise KeyError("inner")
        except KeyError as e:
            raise RuntimeError("outer") from e
    except RuntimeError as e:
        return e


class TestFormatError:
    def test_header_without_name(self):
        msg = format_error(ValueError("boom"), "Loading", call_site=SITE)
        assert msg.startswith("Problem: Loading\n")

    def test_header_with_name(self):
        msg = format_error(ValueError("boom"), "Loading", name="Loader", call_site=SITE)
        assert msg.startswith("[Loader] had a problem: Loading\n")

    def test_ends_with_call_site_line(self):
        msg = format_error(ValueError("boom"), "Loading", call_site=SITE)
        assert msg.endswith("at main in app.py at line 7\n")

    def test_silent_has_short_message_only(self):
        msg = format_error(_raised(ValueError("boom")), "Loading", silent=True, call_site=SITE)
        assert msg == "Problem: Loading\nDetail: boom\nat main in app.py at line 7\n"
        assert "Traceback" not in msg

    def test_silent_empty_message_uses_type_name(self):
        msg = format_error(ValueError(), silent=True, call_site=SITE)
        assert "Detail: ValueError\n" in msg

    def test_verbose_has_traceback(self):
        msg = format_error(_raised(ValueError("boom")), "Loading", call_site=SITE)
        assert "Traceback (most recent call last)" in msg
        assert "ValueError: boom" in msg

    def test_verbose_includes_cause_chain(self):
        msg = format_error(_chained(), call_site=SITE)
        assert "KeyError: 'inner'" in msg
        assert "direct cause" in msg
        assert "RuntimeError: outer" in msg

    def test_silent_omits_cause_chain(self):
        msg = format_error(_chained(), silent=True, call_site=SITE)
        assert "KeyError" not in msg
        assert "Detail: outer" in msg

    def test_captures_call_site_when_omitted(self):
        msg = format_error(ValueError("boom"))
        assert f"at test_captures_call_site_when_omitted in {__file__} at line " in msg

    def test_is_deterministic(self):
        error = _raised(ValueError("boom"))
        assert format_error(error, "p", "n", call_site=SITE) == format_error(error, "p", "n", call_site=SITE)


class TestFormatNote:
    def test_without_error_omits_detail(self):
        msg = format_note("Cache cold", name="Cache", call_site=SITE)
        assert msg == "[Cache] had a problem: Cache cold\nat main in app.py at line 7\n"

    def test_with_error_includes_full_detail(self):
        msg = format_note("Cache cold", error=_raised(ValueError("miss")), call_site=SITE)
        assert msg.startswith("Problem: Cache cold\nDetail: ")
        assert "ValueError: miss" in msg

    def test_captures_call_site_when_omitted(self):
        msg = format_note("note")
        assert "at test_captures_call_site_when_omitted in " in msg


class TestStackWalk:
    def _fail(self):
        raise ValueError("deep")

    def test_collect_frames_innermost_first(self):
        try:
            self._fail()
        except ValueError as e:
            frames = collect_frames(e)

        assert frames[0].routine == "_fail"
        assert frames[1].routine == "test_collect_frames_innermost_first"
        # the live stack above the test continues outward into pytest
        assert len(frames) > 2

    def test_collect_frames_limit(self):
        try:
            self._fail()
        except ValueError as e:
            frames = collect_frames(e, limit=1)

        assert [f.routine for f in frames] == ["_fail"]

    def test_collect_frames_unraised_error_is_empty(self):
        assert collect_frames(ValueError("never raised")) == []

    def test_format_stack_indents_outward(self):
        blocks = format_stack([CallSite("inner", "a.py", 1), CallSite("outer", "b.py", 2)])

        assert blocks[0] == "Routine: inner\nFile: a.py\nLine number: 1"
        assert blocks[1] == "   Routine: outer\n   File: b.py\n   Line number: 2"

    @pytest.mark.parametrize("indent", ["  ", "\t"])
    def test_format_stack_custom_indent(self, indent):
        blocks = format_stack([CallSite("a", "a.py", 1)] * 3, indent=indent)
        assert blocks[2].startswith(indent * 2 + "Routine: a")
