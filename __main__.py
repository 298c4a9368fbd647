"""CLI shim for running the codec directly from the repository checkout."""

from hashid_codec.cli import main
from hashid_codec.codec import (
    DEFAULT_ALPHABET,
    CodecConfig,
    construct,
    decode_hash,
    decode_hex,
    encode_hex,
    encode_numbers,
)

__all__ = [
    "DEFAULT_ALPHABET",
    "CodecConfig",
    "construct",
    "decode_hash",
    "decode_hex",
    "encode_hex",
    "encode_numbers",
    "main",
]


if __name__ == "__main__":
    main()
