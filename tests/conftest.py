import base64
import logging

import pytest

# 32 bytes 0x00..0x1f: key_bytes[5] = 5 picks frame 1, key_bytes[2] = 2 picks row 2.
KEY_BYTES = bytes(range(32))
VERIFICATION_KEY = base64.b64encode(KEY_BYTES).decode()

# key_bytes[15], [12] and [6] give 15 * 12 * 6 = 1080, so t = 1080 / 4096
MIDWAY_ROW = [1, 228, 136, 117, 52, 162, 15, 11, 13, 4, 195]
MIDWAY_TIME = 1080.0 / 4096.0
EXPECTED_ANIMATION_KEY = "1dba8e0f333333333333051eb851eb851ec051eb851eb851ec0f33333333333300"

FIXED_NOW = 1682924400 + 100000000
GOLDEN_PATH = "/i/api/1.1/jot/client_event.json"
GOLDEN_TOKEN = "29va2djf3t3c09LR0NfW1dTLysnIz87NzMPCwcDHxsXE2zou3qMN/5d2SpChfBZc9duI0EbY"

FRAME_PATHS = [
    "M0 0 0 0C1 2 3 4 5 6 7 8 9 10 11C12 13 14 15 16 17 18 19 20 21 22",
    "M0 0 0 0C10 20 30 40 50 60 70 80 90 100 110"
    "C9 8 7 6 5 4 3 2 1 0 1"
    "C1,228,136 117,52,162 15 11 13 4 195"
    "C255 255 255 0 0 0 0 0 0 0 0",
    "M0 0 0 0C200 200 200 10 10 10 100 100 100 100 100",
    "M0 0 0 0C50 50 50 60 60 60 70 70 70 70 70",
]


def build_home_page(key=VERIFICATION_KEY, frames=FRAME_PATHS, ondemand_hash="abc123def"):
    svgs = "".join(
        f'<svg id="loading-x-anim-{i}" viewBox="0 0 10 10">'
        f'<path d="M0 0h10v10" fill="none"/>'
        f'<path class="curve" d="{d}"/></svg>'
        for i, d in enumerate(frames)
    )
    return (
        "<!DOCTYPE html><html><head>"
        f'<meta name="twitter-site-verification" content="{key}"/>'
        f'<script>window.__SCRIPTS__={{"ondemand.s":"{ondemand_hash}","main":"xyz"}}</script>'
        f"</head><body><div hidden>{svgs}</div></body></html>"
    )


ONDEMAND_JS = (
    '"use strict";(self.webpackChunk=self.webpackChunk||[]).push([[1],{1:(e,t,n)=>{'
    "let r=parseInt(e[2], 16),o=parseInt(e[15], 16)"
    "*parseInt(e[12],16)*parseInt(e[6], 16);return r+o}}]);"
)


@pytest.fixture
def home_page():
    return build_home_page()


@pytest.fixture
def ondemand_js():
    return ONDEMAND_JS


@pytest.fixture
def fixed_clock():
    return lambda: float(FIXED_NOW)


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
