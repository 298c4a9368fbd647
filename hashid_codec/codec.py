import dataclasses
import enum
import json
import logging
import math
import re
from typing import Iterable, List, Sequence, Tuple

from .errors import (
    EmptyInputError,
    InvalidAlphabetError,
    InvalidHexError,
    NegativeOrNonIntegerError,
    UnknownCharacterError,
)

logger = logging.getLogger("hashid_codec")

DEFAULT_ALPHABET = "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ1234567890"
SEPARATOR_SOURCE = "cfhistuCFHISTU"
SEPARATOR_RATIO = 3.5
GUARD_RATIO = 12
MIN_ALPHABET_LENGTH = 16

HEX_PATTERN = re.compile(r"^[0-9a-fA-F]+$")
HEX_CHUNK_SIZE = 12


@dataclasses.dataclass(frozen=True)
class CodecConfig:
    salt: str = ""
    min_length: int = 0
    alphabet: str = DEFAULT_ALPHABET
    version: str = "v1"

    def to_dict(self) -> dict:
        return {
            "version": self.version,
            "salt": self.salt,
            "min_length": self.min_length,
            "alphabet": self.alphabet,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CodecConfig":
        version = data.get("version", "v1")
        if version != "v1":
            raise ValueError(f"Unsupported codec config version: {version}")
        min_length = int(data.get("min_length", 0))
        if min_length < 0:
            raise ValueError("min_length must be >= 0")
        salt = data.get("salt") or ""
        alphabet = data.get("alphabet") or DEFAULT_ALPHABET
        return cls(salt=salt, min_length=min_length, alphabet=alphabet, version=version)


@dataclasses.dataclass(frozen=True)
class PartitionedAlphabet:
    alphabet: str
    separators: str
    guards: str


@dataclasses.dataclass(frozen=True)
class Codec:
    """A validated configuration together with its partitioned alphabet.

    Instances are immutable and may be shared between threads; every encode or
    decode call works on its own copy of the alphabet.
    """

    config: CodecConfig
    partition: PartitionedAlphabet

    @property
    def salt(self) -> str:
        return self.config.salt

    @property
    def min_length(self) -> int:
        return self.config.min_length


class DecodeStatus(enum.Enum):
    OK = "ok"
    EMPTY = "empty"
    MALFORMED = "malformed"
    UNKNOWN_CHARACTER = "unknown_character"
    CHECKSUM_MISMATCH = "checksum_mismatch"


@dataclasses.dataclass(frozen=True)
class DecodeResult:
    numbers: Tuple[int, ...]
    status: DecodeStatus

    @property
    def ok(self) -> bool:
        return self.status is DecodeStatus.OK


def save_codec_config(cfg: CodecConfig, path: str) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(cfg.to_dict(), f, indent=2)
        f.write("\n")


def load_codec_config(path: str) -> CodecConfig:
    with open(path, "r", encoding="utf-8") as f:
        raw = json.load(f)
    return CodecConfig.from_dict(raw)


def consistent_shuffle(sequence: str, seed: str) -> str:
    """Permute ``sequence`` deterministically using ``seed``.

    Every port of the scheme runs this exact walk, so the index arithmetic
    must not change.
    """
    if not seed:
        return sequence
    chars = list(sequence)
    v = 0
    p = 0
    for i in range(len(chars) - 1, 0, -1):
        v %= len(seed)
        code = ord(seed[v])
        p += code
        j = (code + v + p) % i
        chars[i], chars[j] = chars[j], chars[i]
        v += 1
    return "".join(chars)


def encode_number(number: int, alphabet: str) -> str:
    if len(alphabet) < 2:
        raise ValueError("alphabet must contain at least 2 characters")
    if number < 0:
        raise NegativeOrNonIntegerError(number)
    base = len(alphabet)
    digits: List[str] = []
    while True:
        number, rem = divmod(number, base)
        digits.append(alphabet[rem])
        if number == 0:
            break
    digits.reverse()
    return "".join(digits)


def decode_number(digits: str, alphabet: str) -> int:
    if len(alphabet) < 2:
        raise ValueError("alphabet must contain at least 2 characters")
    base = len(alphabet)
    n = 0
    for char in digits:
        position = alphabet.find(char)
        if position == -1:
            raise UnknownCharacterError(char)
        n = n * base + position
    return n


def _unique_characters(alphabet: str) -> str:
    return "".join(dict.fromkeys(alphabet))


def partition_alphabet(alphabet: str, salt: str = "") -> PartitionedAlphabet:
    unique = _unique_characters(alphabet)
    if any(char.isspace() for char in unique):
        raise InvalidAlphabetError("alphabet cannot contain whitespace")
    if len(unique) < MIN_ALPHABET_LENGTH:
        raise InvalidAlphabetError(
            f"alphabet must contain at least {MIN_ALPHABET_LENGTH} unique characters "
            f"(got {len(unique)})"
        )

    separators = "".join(char for char in SEPARATOR_SOURCE if char in unique)
    working = "".join(char for char in unique if char not in separators)
    separators = consistent_shuffle(separators, salt)

    # Keep roughly one separator per SEPARATOR_RATIO working characters
    required = math.ceil(len(working) / SEPARATOR_RATIO)
    if not separators or len(separators) < required:
        if required == 1:
            required = 2
        if required > len(separators):
            split_at = required - len(separators)
            separators += working[:split_at]
            working = working[split_at:]

    working = consistent_shuffle(working, salt)
    guard_count = math.ceil(len(working) / GUARD_RATIO)
    if len(working) < 3:
        guards = separators[:guard_count]
        separators = separators[guard_count:]
    else:
        guards = working[:guard_count]
        working = working[guard_count:]

    logger.debug(
        "Partitioned alphabet: %d working, %d separators, %d guards",
        len(working),
        len(separators),
        len(guards),
    )
    return PartitionedAlphabet(alphabet=working, separators=separators, guards=guards)


def construct(
    alphabet: str = DEFAULT_ALPHABET, salt: str = "", min_length: int = 0
) -> Codec:
    if isinstance(min_length, bool) or not isinstance(min_length, int):
        raise ValueError(f"min_length must be an integer, got {min_length!r}")
    if min_length < 0:
        raise ValueError("min_length must be >= 0")
    cfg = CodecConfig(salt=salt, min_length=min_length, alphabet=alphabet)
    return Codec(config=cfg, partition=partition_alphabet(alphabet, salt))


def codec_from_config(cfg: CodecConfig) -> Codec:
    return construct(cfg.alphabet, cfg.salt, cfg.min_length)


def _reshuffle(alphabet: str, lottery: str, salt: str) -> str:
    # Each number gets its own ordering, seeded from lottery, salt and the previous order
    return consistent_shuffle(alphabet, (lottery + salt + alphabet)[: len(alphabet)])


def _pad_to_length(
    encoded: str, min_length: int, alphabet: str, guards: str, values_hash: int
) -> str:
    guard_index = (values_hash + ord(encoded[0])) % len(guards)
    encoded = guards[guard_index] + encoded

    if len(encoded) < min_length:
        guard_index = (values_hash + ord(encoded[2])) % len(guards)
        encoded += guards[guard_index]

    half = len(alphabet) // 2
    while len(encoded) < min_length:
        alphabet = consistent_shuffle(alphabet, alphabet)
        encoded = alphabet[half:] + encoded + alphabet[:half]
        excess = len(encoded) - min_length
        if excess > 0:
            start = excess // 2
            encoded = encoded[start : start + min_length]
    return encoded


def _encode(values: Sequence[int], codec: Codec) -> str:
    partition = codec.partition
    alphabet = partition.alphabet
    separators = partition.separators

    values_hash = sum(value % (index + 100) for index, value in enumerate(values))
    lottery = alphabet[values_hash % len(alphabet)]
    parts = [lottery]

    for index, value in enumerate(values):
        alphabet = _reshuffle(alphabet, lottery, codec.salt)
        last = encode_number(value, alphabet)
        parts.append(last)
        if index + 1 < len(values):
            separator_index = value % (ord(last[0]) + index) % len(separators)
            parts.append(separators[separator_index])

    encoded = "".join(parts)
    if len(encoded) < codec.min_length:
        encoded = _pad_to_length(
            encoded, codec.min_length, alphabet, partition.guards, values_hash
        )
    return encoded


def _check_values(numbers: Iterable[int]) -> Tuple[int, ...]:
    values = tuple(numbers)
    if not values:
        raise EmptyInputError()
    for value in values:
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise NegativeOrNonIntegerError(value)
    return values


def encode_numbers(numbers: Iterable[int], codec: Codec) -> str:
    return _encode(_check_values(numbers), codec)


def _split(text: str, splitters: str) -> List[str]:
    if not splitters:
        return [text]
    return re.split("[" + re.escape(splitters) + "]", text)


def decode_hash_with_status(hashid: str, codec: Codec) -> DecodeResult:
    """Decode ``hashid`` and report why an empty result was produced.

    Malformed or foreign input never raises; it yields an empty tuple with a
    status other than ``DecodeStatus.OK``.
    """
    if not hashid:
        return DecodeResult((), DecodeStatus.EMPTY)

    partition = codec.partition
    parts = _split(hashid, partition.guards)
    body = parts[1] if len(parts) in (2, 3) else parts[0]
    if not body:
        logger.debug("Rejected hashid %r: no payload between guards", hashid)
        return DecodeResult((), DecodeStatus.MALFORMED)

    lottery, body = body[0], body[1:]
    alphabet = partition.alphabet
    numbers: List[int] = []
    try:
        for segment in _split(body, partition.separators):
            alphabet = _reshuffle(alphabet, lottery, codec.salt)
            numbers.append(decode_number(segment, alphabet))
    except UnknownCharacterError as exc:
        logger.debug("Rejected hashid %r: %s", hashid, exc)
        return DecodeResult((), DecodeStatus.UNKNOWN_CHARACTER)

    # Only accept the numbers if they encode back to the exact input
    if _encode(numbers, codec) != hashid:
        logger.debug("Rejected hashid %r: checksum mismatch", hashid)
        return DecodeResult((), DecodeStatus.CHECKSUM_MISMATCH)
    return DecodeResult(tuple(numbers), DecodeStatus.OK)


def decode_hash(hashid: str, codec: Codec) -> Tuple[int, ...]:
    return decode_hash_with_status(hashid, codec).numbers


def encode_hex(hex_str: str, codec: Codec) -> str:
    if not HEX_PATTERN.match(hex_str):
        raise InvalidHexError(hex_str)
    numbers = [
        int("1" + hex_str[i : i + HEX_CHUNK_SIZE], 16)
        for i in range(0, len(hex_str), HEX_CHUNK_SIZE)
    ]
    return encode_numbers(numbers, codec)


def numbers_to_hex(numbers: Iterable[int]) -> str:
    # Strip the "1" prefix encode_hex adds to keep leading zeros
    return "".join(format(number, "x")[1:] for number in numbers)


def decode_hex(hashid: str, codec: Codec) -> str:
    return numbers_to_hex(decode_hash(hashid, codec))


__all__ = [
    "DEFAULT_ALPHABET",
    "SEPARATOR_SOURCE",
    "Codec",
    "CodecConfig",
    "DecodeResult",
    "DecodeStatus",
    "PartitionedAlphabet",
    "codec_from_config",
    "consistent_shuffle",
    "construct",
    "decode_hash",
    "decode_hash_with_status",
    "decode_hex",
    "decode_number",
    "encode_hex",
    "encode_number",
    "encode_numbers",
    "load_codec_config",
    "numbers_to_hex",
    "partition_alphabet",
    "save_codec_config",
]
