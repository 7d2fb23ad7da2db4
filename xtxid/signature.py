"""
Key material derivation and x-client-transaction-id generation.
"""

import logging
from base64 import b64decode, b64encode
from hashlib import sha256
from struct import pack
from time import time
from typing import Callable, Optional, Sequence

from pydantic import BaseModel, ConfigDict, field_validator

from .cubic import CubicCurve
from .errors import Base64Error, ParseError
from .extractor import (
    extract_ondemand_url,
    frame_data,
    parse_indices,
    verification_key,
)
from .numeric import (
    float_to_hex,
    interpolate,
    js_round,
    odd_coefficient,
    rotation_matrix,
    round_half_away,
    solve,
)

logger = logging.getLogger(__name__)

HASH_SALT = "obfiowerehiring"
# 2023-05-01 00:00:00 UTC
X_EPOCH = 1682924400
PROTOCOL_VERSION = 3
TOTAL_ANIMATION_TIME = 4096.0
ROW_INDEX_MODULUS = 16
MIN_FRAME_VALUES = 11
UINT32_MASK = 0xFFFFFFFF

Clock = Callable[[], float]


class KeyMaterial(BaseModel):
    """Secret derived once from a home page / ondemand script pair."""

    model_config = ConfigDict(frozen=True)

    key_bytes: bytes
    animation_key: str

    @field_validator("animation_key")
    @classmethod
    def validate_animation_key(cls, v):
        if not v:
            raise ValueError("animation_key cannot be empty")
        return v


def decode_key(key: str) -> bytes:
    try:
        decoded = b64decode(key, validate=True)
    except ValueError as e:
        raise Base64Error(str(e)) from e
    # unused trailing bits must be zero
    if b64encode(decoded).decode("ascii") != key:
        raise Base64Error("non-canonical trailing bits")
    return decoded


def matrix_cell_hex(value: float) -> str:
    """Round a matrix cell to two decimals, ties away from zero, and hex it."""
    rounded = round_half_away(value * 100.0) / 100.0
    return float_to_hex(abs(rounded)).lower()


def animate(frame: Sequence[int], target_time: float) -> str:
    """Replay the loading animation at ``target_time`` and serialise its style.

    The frame holds two RGB colors, a rotation byte and the bezier control
    bytes. The result is the hex of the interpolated color, the hex of the
    rotation matrix cells and two zero translation fields, with every ``.``
    and ``-`` removed.
    """
    if len(frame) < MIN_FRAME_VALUES:
        raise ParseError(f"frame has {len(frame)} values, need at least {MIN_FRAME_VALUES}")

    from_color = [float(v) for v in frame[:3]] + [1.0]
    to_color = [float(v) for v in frame[3:6]] + [1.0]
    from_rotation = [0.0]
    to_rotation = [solve(float(frame[6]), 60.0, 360.0, True)]

    curves = [solve(float(v), odd_coefficient(i), 1.0, False) for i, v in enumerate(frame[7:])]
    factor = CubicCurve(curves).value(target_time)

    color = [min(max(v, 0.0), 255.0) for v in interpolate(from_color, to_color, factor)]
    rotation = interpolate(from_rotation, to_rotation, factor)[0]
    matrix = rotation_matrix(rotation)

    parts = [format(int(round_half_away(v)), "x") for v in color[:-1]]
    parts.extend(matrix_cell_hex(value) for value in matrix)
    parts.extend(["0", "0"])
    return "".join(parts).replace(".", "").replace("-", "")


def compute_animation_key(
    key_bytes: bytes,
    html: str,
    row_index: int,
    key_byte_indices: Sequence[int],
) -> str:
    if row_index >= len(key_bytes):
        raise ParseError("key too short for row selection")
    row_value = key_bytes[row_index] % ROW_INDEX_MODULUS

    frame_time = 1.0
    for index in key_byte_indices:
        if index < len(key_bytes):
            frame_time *= float(key_bytes[index] % ROW_INDEX_MODULUS)
    frame_time = js_round(frame_time / 10.0) * 10.0

    rows = frame_data(key_bytes, html)
    if row_value >= len(rows):
        raise ParseError("row index out of bounds")

    target_time = frame_time / TOTAL_ANIMATION_TIME
    logger.debug(f"Animating row {row_value} at t={target_time}")
    return animate(rows[row_value], target_time)


def derive_key_material(home_page_html: str, ondemand_js: str) -> KeyMaterial:
    """Build :class:`KeyMaterial` from pre-fetched page and script text.

    Raises the first :class:`~xtxid.errors.XTxidError` encountered; nothing
    is returned partially built.
    """
    row_index, key_byte_indices = parse_indices(ondemand_js)
    key_bytes = decode_key(verification_key(home_page_html))
    animation_key = compute_animation_key(key_bytes, home_page_html, row_index, key_byte_indices)

    logger.info(
        "Derived key material",
        extra={"extra": {"key_length": len(key_bytes), "index_count": len(key_byte_indices) + 1}},
    )
    return KeyMaterial(key_bytes=key_bytes, animation_key=animation_key)


def current_time(clock: Clock = time) -> int:
    """Seconds since :data:`X_EPOCH` as an unsigned 32-bit value.

    Times before the epoch saturate to 0. The value wraps in 2159.
    """
    try:
        now = int(clock())
    except (OSError, OverflowError, ValueError) as e:
        logger.warning(f"Clock read failed, using 0: {e}")
        return 0
    return max(now - X_EPOCH, 0) & UINT32_MASK


def generate_sign(
    method: str,
    path: str,
    key_material: KeyMaterial,
    timestamp: int,
) -> str:
    """Hash, mask and encode one transaction ID."""
    timestamp &= UINT32_MASK
    message = f"{method}!{path}!{timestamp}{HASH_SALT}{key_material.animation_key}"
    digest = sha256(message.encode("utf-8")).digest()
    random_byte = digest[16]

    payload = (
        key_material.key_bytes
        + pack("<I", timestamp)
        + digest[:16]
        + bytes([PROTOCOL_VERSION])
    )
    encoded = bytes([random_byte]) + bytes(b ^ random_byte for b in payload)
    return b64encode(encoded).decode("ascii").rstrip("=")


class ClientTransaction:
    """Generates transaction IDs from cached key material.

    Build one per home page / ondemand script pair and call :meth:`generate`
    for each API request. Instances hold no mutable state and can be shared
    between threads.
    """

    extract_ondemand_url = staticmethod(extract_ondemand_url)

    def __init__(self, key_material: KeyMaterial, clock: Optional[Clock] = None):
        """
        Args:
            key_material: Derived secret for the current page version
            clock: Callable returning Unix seconds; defaults to ``time.time``
        """
        self.key_material = key_material
        self.clock = clock or time

    @classmethod
    def from_pages(
        cls,
        home_page_html: str,
        ondemand_js: str,
        clock: Optional[Clock] = None,
    ) -> "ClientTransaction":
        return cls(derive_key_material(home_page_html, ondemand_js), clock=clock)

    @property
    def key_bytes(self) -> bytes:
        return self.key_material.key_bytes

    @property
    def animation_key(self) -> str:
        return self.key_material.animation_key

    def generate(self, method: str, path: str, timestamp: Optional[int] = None) -> str:
        """
        Generate the ``x-client-transaction-id`` header for one request.

        Args:
            method: HTTP method, e.g. ``GET``
            path: Request path without host, e.g. ``/i/api/1.1/jot/client_event.json``
            timestamp: Seconds since :data:`X_EPOCH`; read from the clock when omitted

        Returns:
            Unpadded base64 token
        """
        if timestamp is None:
            timestamp = current_time(self.clock)
        return generate_sign(method, path, self.key_material, timestamp)

    generate_transaction_id = generate
