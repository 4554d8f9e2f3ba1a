# emblem_hash.py
# Digest layer: any input string -> fixed 64-char lowercase hex digest.
# SHA-256 when hashlib offers it, otherwise a 32-bit rolling string hash.

import asyncio
import hashlib
import logging
from typing import Optional

log = logging.getLogger(__name__)

DIGEST_LEN = 64
SENTINEL = "bionic-emblem"   # stands in for empty / missing input

_BLOCK_LEN = 8
_MASK32 = 0xFFFFFFFF


def _coerce(text: Optional[str]) -> str:
    if text is None:
        return SENTINEL
    text = str(text)
    return text if text else SENTINEL


# =========================
# Implementations
# =========================
class Hasher:
    name = "base"

    def _digest(self, text: str) -> str:
        raise NotImplementedError

    def digest(self, text: Optional[str]) -> str:
        return self._digest(_coerce(text))

    async def adigest(self, text: Optional[str]) -> str:
        """Awaitable digest; runs in the loop's default executor."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.digest, text)

    def __repr__(self):
        return f"<{type(self).__name__} {self.name}>"


class Sha256Hasher(Hasher):
    name = "sha256"

    def _digest(self, text: str) -> str:
        return hashlib.sha256(text.encode("utf-8")).hexdigest()


def _utf16_units(text: str):
    for ch in text:
        cp = ord(ch)
        if cp > 0xFFFF:
            cp -= 0x10000
            yield 0xD800 + (cp >> 10)
            yield 0xDC00 + (cp & 0x3FF)
        else:
            yield cp


def rolling_hash(text: str, seed: int = 0) -> int:
    """
    Classic h = h*31 + ch string hash, wrapped to a signed 32-bit
    accumulator after every step. Returns the absolute value.
    Characters outside the BMP count as their two UTF-16 surrogates.
    """
    h = seed & _MASK32
    for unit in _utf16_units(text):
        h = (h * 31 + unit) & _MASK32
    if h >= 0x80000000:
        h -= 0x100000000
    return abs(h)


class RollingHasher(Hasher):
    """
    Non-cryptographic fallback. Eight 8-hex-char blocks, block k seeded with k,
    each left-padded with zeros. Block 0 is the plain string hash.
    """
    name = "rolling"

    def _digest(self, text: str) -> str:
        blocks = []
        for k in range(DIGEST_LEN // _BLOCK_LEN):
            blocks.append(format(rolling_hash(text, seed=k), "x").zfill(_BLOCK_LEN))
        return "".join(blocks)


HASHERS = {
    Sha256Hasher.name: Sha256Hasher,
    RollingHasher.name: RollingHasher,
}


# =========================
# Capability detection
# =========================
def select_hasher() -> Hasher:
    if "sha256" in hashlib.algorithms_available:
        return Sha256Hasher()
    log.debug("sha256 not offered by hashlib; using rolling hash")
    return RollingHasher()


_DEFAULT: Optional[Hasher] = None


def default_hasher() -> Hasher:
    global _DEFAULT
    if _DEFAULT is None:
        _DEFAULT = select_hasher()
    return _DEFAULT


def get_hasher(name: Optional[str]) -> Hasher:
    """Hasher by name ("sha256" / "rolling"); None or unknown -> detected default."""
    if name is None:
        return default_hasher()
    cls = HASHERS.get(name.lower())
    if cls is None:
        log.warning("unknown hasher %r; using %s", name, default_hasher().name)
        return default_hasher()
    return cls()


def hash_text(text: Optional[str], hasher: Optional[Hasher] = None) -> str:
    return (hasher or default_hasher()).digest(text)
