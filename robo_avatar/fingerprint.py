"""Input string -> digest -> selector buckets.

The digest is MD5 of the UTF-8 bytes of the input. MD5 is used purely as a
stable spreading function; nothing here is security sensitive.

Bucketing reads the 16 digest bytes as eight big-endian unsigned 16-bit pairs
and reduces each modulo 10. Changing either the pairing or the reduction
changes which robot an existing string maps to, so both are fixed.
"""

import hashlib
from dataclasses import astuple, dataclass, fields
from typing import Tuple, Union

from robo_avatar.types import Digest

DIGEST_SIZE = 16
NUM_BUCKETS = 10


@dataclass(frozen=True)
class Selectors:
    """The eight discrete choices that define one robot.

    Field order is the bucket order in the digest.
    """

    body: int
    head: int
    eyes: int
    mouth: int
    accessory: int
    body_head_color: int
    eye_mouth_color: int
    accessory_color: int

    def __post_init__(self) -> None:
        for field in fields(self):
            value = getattr(self, field.name)
            if not 0 <= value < NUM_BUCKETS:
                raise ValueError(f"Selector {field.name}={value} is outside [0, 9]")

    def as_tuple(self) -> Tuple[int, ...]:
        return astuple(self)


def digest(text: Union[str, bytes]) -> Digest:
    """Return the 16-byte MD5 digest of ``text``.

    ``str`` input is encoded as UTF-8; lone surrogates are passed through so
    that every Python string hashes. ``bytes`` are hashed as given.
    """
    data = text if isinstance(text, bytes) else text.encode("utf-8", "surrogatepass")
    return hashlib.md5(data, usedforsecurity=False).digest()


def buckets(value: Digest) -> Tuple[int, ...]:
    """Split a digest into 8 big-endian 16-bit pairs reduced modulo 10."""
    if len(value) != DIGEST_SIZE:
        raise ValueError(f"Digest must be {DIGEST_SIZE} bytes, got {len(value)}")
    return tuple(
        int.from_bytes(value[i : i + 2], "big") % NUM_BUCKETS
        for i in range(0, DIGEST_SIZE, 2)
    )


def selectors(value: Digest) -> Selectors:
    return Selectors(*buckets(value))


def fingerprint(text: Union[str, bytes]) -> Selectors:
    """Selectors for an input string (``selectors(digest(text))``)."""
    return selectors(digest(text))
