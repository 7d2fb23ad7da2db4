"""
Marker scanning over the X home page and the ondemand script.

Nothing here parses HTML or JavaScript. Each routine looks for a fixed marker
and walks a cursor forward or backward from it, because the surrounding
markup changes between deployments while the markers do not.
"""

import logging
import re
from typing import List, Optional, Sequence, Tuple

from .errors import MissingKeyError, ParseError

logger = logging.getLogger(__name__)

ONDEMAND_BASE_URL = "https://abs.twimg.com/responsive-web/client-web"
ONDEMAND_MARKERS = ('"ondemand.s"', "'ondemand.s'")
VERIFICATION_MARKER = 'name="twitter-site-verification"'
CONTENT_MARKER = 'content="'
ANIMATION_ANCHOR = 'id="loading-x-anim'
PATH_D_MARKER = ' d="'
MOVE_COMMAND_LENGTH = 9
FRAME_COUNT = 4
FRAME_SELECTOR_INDEX = 5
SMALL_RESPONSE_LENGTH = 10000

# "(e[12], 16)" and "(e[12],16)"; the variable name is a single minified char
INDEX_PATTERN = re.compile(r"\(.\[([0-9]+)\], ?16\)", re.DOTALL)

INT32_MIN = -(2 ** 31)
INT32_MAX = 2 ** 31 - 1


def _missing_url_hint(html: str) -> str:
    if "login" in html or "LoginForm" in html:
        return " (received login page - may need cookies)"
    if len(html) < SMALL_RESPONSE_LENGTH:
        return " (response too small - may be rate limited or blocked)"
    return " (X may have changed their page structure)"


def _ondemand_hash(html: str, marker: str) -> Optional[str]:
    pos = html.find(marker)
    if pos == -1:
        return None

    rest = html[pos + len(marker):].lstrip()
    if not rest.startswith(":"):
        return None
    rest = rest[1:].lstrip()

    if not rest or rest[0] not in "\"'":
        return None
    quote, rest = rest[0], rest[1:]

    end = rest.find(quote)
    if end == -1:
        return None

    file_hash = rest[:end]
    if file_hash and file_hash.isalnum():
        return file_hash
    return None


def extract_ondemand_url(html: str, base_url: str = ONDEMAND_BASE_URL) -> str:
    """Build the ``ondemand.s.<hash>a.js`` URL named by the home page."""
    for marker in ONDEMAND_MARKERS:
        file_hash = _ondemand_hash(html, marker)
        if file_hash:
            url = f"{base_url}/ondemand.s.{file_hash}a.js"
            logger.debug("Found ondemand script", extra={"extra": {"url": url}})
            return url

    raise MissingKeyError(f"ondemand file hash{_missing_url_hint(html)}")


def verification_key(html: str) -> str:
    """Return the ``content`` of the twitter-site-verification meta tag."""
    pos = html.find(VERIFICATION_MARKER)
    if pos == -1:
        raise MissingKeyError("twitter-site-verification meta tag")

    tag_start = html.rfind("<", 0, pos)
    if tag_start == -1:
        tag_start = 0

    tag_end = html.find(">", pos)
    if tag_end == -1:
        tag_end = len(html)

    tag = html[tag_start:tag_end]

    content_pos = tag.find(CONTENT_MARKER)
    if content_pos == -1:
        raise MissingKeyError("content attribute")

    value_start = content_pos + len(CONTENT_MARKER)
    value_end = tag.find('"', value_start)
    if value_end == -1:
        raise ParseError("malformed content attribute")

    return tag[value_start:value_end]


def parse_indices(js: str) -> Tuple[int, List[int]]:
    """Collect the ``(e[N], 16)`` indices from the ondemand script.

    Returns ``(row_index, key_byte_indices)``.
    """
    indices = [int(match) for match in INDEX_PATTERN.findall(js)]
    if not indices:
        raise MissingKeyError("key byte indices")
    return indices[0], indices[1:]


def _path_d(path_tag: str) -> Optional[str]:
    d_pos = path_tag.find(PATH_D_MARKER)
    if d_pos == -1:
        return None
    d_start = d_pos + len(PATH_D_MARKER)
    d_end = path_tag.find('"', d_start)
    if d_end == -1:
        return None
    return path_tag[d_start:d_end]


def _first_curve_path(svg: str) -> Optional[str]:
    search = 0
    while True:
        path_pos = svg.find("<path", search)
        if path_pos == -1:
            return None

        path_end = svg.find("/>", path_pos)
        if path_end == -1:
            path_end = svg.find("></path>", path_pos)

        if path_end != -1:
            d_value = _path_d(svg[path_pos:path_end])
            if d_value is not None and "C" in d_value:
                return d_value

        search = path_pos + len("<path")


def animation_frames(html: str) -> List[str]:
    """Return the curve path data of every ``loading-x-anim`` SVG, in page order."""
    frames = []
    search = 0

    while True:
        anchor = html.find(ANIMATION_ANCHOR, search)
        if anchor == -1:
            break

        svg_end = html.find("</svg>", anchor)
        if svg_end == -1:
            break

        d_value = _first_curve_path(html[anchor:svg_end])
        if d_value is not None:
            frames.append(d_value)

        search = svg_end

    return frames


def _parse_int32(token: str) -> Optional[int]:
    try:
        number = int(token)
    except ValueError:
        return None
    if INT32_MIN <= number <= INT32_MAX:
        return number
    return None


def parse_path_to_coordinates(path_d: str) -> List[List[int]]:
    """Split path data on ``C`` commands into lists of signed integers.

    The leading move command is dropped first.
    """
    content = path_d[MOVE_COMMAND_LENGTH:] if len(path_d) >= MOVE_COMMAND_LENGTH else path_d

    segments = []
    for part in content.split("C"):
        cleaned = re.sub(r"[^0-9-]", " ", part)
        numbers = [_parse_int32(token) for token in cleaned.split()]
        segments.append([n for n in numbers if n is not None])
    return segments


def frame_data(key_bytes: Sequence[int], html: str) -> List[List[int]]:
    """Pick the animation frame selected by ``key_bytes[5]`` and parse it."""
    frames = animation_frames(html)
    if not frames:
        raise MissingKeyError("animation frames")

    if len(key_bytes) <= FRAME_SELECTOR_INDEX:
        raise ParseError("key too short for frame selection")

    frame_index = key_bytes[FRAME_SELECTOR_INDEX] % FRAME_COUNT
    if frame_index >= len(frames):
        raise ParseError("frame index out of bounds")

    logger.debug(f"Selected animation frame {frame_index} of {len(frames)}")
    return parse_path_to_coordinates(frames[frame_index])
