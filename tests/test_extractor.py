import pytest

from conftest import FRAME_PATHS, KEY_BYTES, MIDWAY_ROW, VERIFICATION_KEY, build_home_page
from xtxid.errors import MissingKeyError, ParseError
from xtxid.extractor import (
    animation_frames,
    extract_ondemand_url,
    frame_data,
    parse_indices,
    parse_path_to_coordinates,
    verification_key,
)

BASE = "https://abs.twimg.com/responsive-web/client-web"


class TestOndemandUrl:
    def test_double_quotes(self):
        html = 'something "ondemand.s": "abc123def" something'
        assert extract_ondemand_url(html) == f"{BASE}/ondemand.s.abc123defa.js"

    def test_single_quotes(self):
        html = "something 'ondemand.s': 'xyz789' something"
        assert extract_ondemand_url(html) == f"{BASE}/ondemand.s.xyz789a.js"

    def test_no_whitespace(self, home_page):
        assert extract_ondemand_url(home_page) == f"{BASE}/ondemand.s.abc123defa.js"

    def test_custom_base_url(self):
        html = '"ondemand.s":"f00d"'
        assert extract_ondemand_url(html, "https://cdn.test") == "https://cdn.test/ondemand.s.f00da.js"

    def test_falls_back_to_single_quoted_marker(self):
        html = '"ondemand.s": not-a-string, \'ondemand.s\': \'beef42\''
        assert extract_ondemand_url(html).endswith("ondemand.s.beef42a.js")

    @pytest.mark.parametrize("html", [
        '"ondemand.s": "abc-123"',
        '"ondemand.s": ""',
        '"ondemand.s" "abc123"',
        '"ondemand.s": "abc123',
    ])
    def test_rejects_malformed_hash(self, html):
        with pytest.raises(MissingKeyError):
            extract_ondemand_url(html)

    def test_missing_small_response(self):
        with pytest.raises(MissingKeyError, match="too small"):
            extract_ondemand_url("no ondemand here")

    def test_missing_login_page(self):
        with pytest.raises(MissingKeyError, match="login page"):
            extract_ondemand_url('<form class="LoginForm"></form>')

    def test_missing_structure_changed(self):
        with pytest.raises(MissingKeyError, match="page structure"):
            extract_ondemand_url("x" * 20000)


class TestVerificationKey:
    def test_extracts_content(self):
        html = '<html><head><meta name="twitter-site-verification" content="abc123xyz"/></head></html>'
        assert verification_key(html) == "abc123xyz"

    def test_content_before_name(self):
        html = '<meta content="k3y" name="twitter-site-verification">'
        assert verification_key(html) == "k3y"

    def test_fixture_page(self, home_page):
        assert verification_key(home_page) == VERIFICATION_KEY

    def test_missing_tag(self):
        with pytest.raises(MissingKeyError, match="meta tag"):
            verification_key("<html><head></head></html>")

    def test_missing_content(self):
        with pytest.raises(MissingKeyError, match="content attribute"):
            verification_key('<meta name="twitter-site-verification" value="x"/>')

    def test_unterminated_content(self):
        with pytest.raises(ParseError):
            verification_key('<meta name="twitter-site-verification" content="abc')


class TestParseIndices:
    def test_row_and_key_byte_indices(self):
        assert parse_indices("foo(e[5], 16)bar(e[10], 16)padding") == (5, [10])

    def test_without_space(self):
        assert parse_indices("a(x[1],16)b(x[22], 16)c(x[3],16)") == (1, [22, 3])

    def test_single_match(self):
        assert parse_indices("(e[7], 16)") == (7, [])

    def test_ignores_other_radixes(self):
        assert parse_indices("(e[1], 10)(e[2], 16)") == (2, [])

    def test_missing(self):
        with pytest.raises(MissingKeyError, match="key byte indices"):
            parse_indices("no indices here")


class TestAnimationFrames:
    def test_picks_first_curve_path_per_svg(self, home_page):
        assert animation_frames(home_page) == FRAME_PATHS

    def test_no_anchor(self):
        assert animation_frames('<svg><path d="M0 0C1 2"/></svg>') == []

    def test_unclosed_svg_stops(self):
        html = '<svg id="loading-x-anim-0"><path d="M0 0 0 0C1 2 3"/>'
        assert animation_frames(html) == []

    def test_svg_without_curve_is_skipped(self):
        html = (
            '<svg id="loading-x-anim-0"><path d="M0 0h1"/></svg>'
            '<svg id="loading-x-anim-1"><path d="M0 0 0 0C5 6"></path></svg>'
        )
        assert animation_frames(html) == ["M0 0 0 0C5 6"]


class TestParsePath:
    def test_segments(self):
        result = parse_path_to_coordinates("M0 0 0 0C10 20 30 40 50 60C70 80 90 100 110 120")
        assert result == [[10, 20, 30, 40, 50, 60], [70, 80, 90, 100, 110, 120]]

    def test_signed_and_separators(self):
        result = parse_path_to_coordinates("M0 0 0 0C1,-2 3.5 -4")
        assert result == [[1, -2, 3, 5, -4]]

    def test_drops_invalid_tokens(self):
        result = parse_path_to_coordinates("M0 0 0 0C1-2 - 3 99999999999")
        assert result == [[3]]

    def test_short_path(self):
        assert parse_path_to_coordinates("C1 2") == [[], [1, 2]]


class TestFrameData:
    def test_selects_frame_by_key_byte(self, home_page):
        rows = frame_data(KEY_BYTES, home_page)
        assert rows[2] == MIDWAY_ROW

    def test_no_frames(self):
        with pytest.raises(MissingKeyError, match="animation frames"):
            frame_data(KEY_BYTES, "<html></html>")

    def test_key_too_short(self, home_page):
        with pytest.raises(ParseError, match="frame selection"):
            frame_data(b"\x00\x01", home_page)

    def test_frame_index_out_of_bounds(self):
        html = build_home_page(frames=FRAME_PATHS[:1])
        with pytest.raises(ParseError, match="out of bounds"):
            frame_data(KEY_BYTES, html)
