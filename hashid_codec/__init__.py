"""Reversible short-ID encoding compatible with the Hashids scheme."""

from .codec import (
    DEFAULT_ALPHABET,
    Codec,
    CodecConfig,
    DecodeResult,
    DecodeStatus,
    PartitionedAlphabet,
    codec_from_config,
    consistent_shuffle,
    construct,
    decode_hash,
    decode_hash_with_status,
    decode_hex,
    decode_number,
    encode_hex,
    encode_number,
    encode_numbers,
    load_codec_config,
    numbers_to_hex,
    partition_alphabet,
    save_codec_config,
)
from .errors import (
    EmptyInputError,
    HashidError,
    InvalidAlphabetError,
    InvalidHexError,
    NegativeOrNonIntegerError,
    UnknownCharacterError,
)

__all__ = [
    "DEFAULT_ALPHABET",
    "Codec",
    "CodecConfig",
    "DecodeResult",
    "DecodeStatus",
    "EmptyInputError",
    "HashidError",
    "InvalidAlphabetError",
    "InvalidHexError",
    "NegativeOrNonIntegerError",
    "PartitionedAlphabet",
    "UnknownCharacterError",
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

__version__ = "0.1.0"
