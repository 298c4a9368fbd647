import argparse
import logging
import os
import sys
from typing import List, Optional

from .codec import (
    DEFAULT_ALPHABET,
    CodecConfig,
    codec_from_config,
    decode_hash_with_status,
    encode_hex,
    encode_numbers,
    load_codec_config,
    numbers_to_hex,
    save_codec_config,
)

logger = logging.getLogger("hashid_codec")

HANDLER_NAME = "hashid_codec.cli"


def setup_logging(verbose: bool = False) -> logging.Logger:
    """Attach a stderr handler to the package logger.

    stdout carries the codec output, so log records go to stderr.
    """
    level = logging.DEBUG if verbose else logging.WARNING
    logger.setLevel(level)

    # Replace a handler left by an earlier call so records follow the current stderr
    for existing in list(logger.handlers):
        if existing.get_name() == HANDLER_NAME:
            logger.removeHandler(existing)

    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(HANDLER_NAME)
    handler.setLevel(level)
    handler.setFormatter(
        logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    )
    logger.addHandler(handler)

    return logger


def _write_text(path: str, text: str) -> None:
    if path == "-":
        sys.stdout.write(text)
        sys.stdout.flush()
    else:
        with open(path, "w", encoding="utf-8") as f:
            f.write(text)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Reversible short-ID (hashid) codec")
    subparsers = parser.add_subparsers(dest="command", required=True)

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("-s", "--salt")
    common.add_argument("-m", "--min-length", type=int)
    common.add_argument("-a", "--alphabet")
    common.add_argument(
        "--config",
        help="Path to a codec config file (loads existing values and writes updates)",
    )
    common.add_argument("-v", "--verbose", action="store_true")
    common.add_argument("--output-text", default="-")

    enc = subparsers.add_parser("encode", parents=[common])
    enc.add_argument("numbers", nargs="*", type=int)
    enc.add_argument(
        "--hex",
        help="Encode a hexadecimal string instead of a list of numbers",
    )

    dec = subparsers.add_parser("decode", parents=[common])
    dec.add_argument("hashid")
    dec.add_argument(
        "--hex",
        action="store_true",
        help="Print the decoded value as a hexadecimal string",
    )

    return parser


def resolve_config(args) -> CodecConfig:
    from_file = (
        load_codec_config(args.config)
        if args.config is not None and os.path.exists(args.config)
        else None
    )

    salt = (
        args.salt
        if args.salt is not None
        else from_file.salt if from_file else ""
    )
    min_length = (
        args.min_length
        if args.min_length is not None
        else from_file.min_length if from_file else 0
    )
    alphabet = (
        args.alphabet
        if args.alphabet is not None
        else from_file.alphabet if from_file else DEFAULT_ALPHABET
    )
    if min_length < 0:
        raise ValueError("min-length must be >= 0")

    cfg = CodecConfig(salt=salt, min_length=min_length, alphabet=alphabet)
    logger.debug(
        "Resolved config: salt length %d, min_length %d, alphabet length %d",
        len(cfg.salt),
        cfg.min_length,
        len(cfg.alphabet),
    )
    return cfg


def run_encode(args) -> None:
    cfg = resolve_config(args)
    codec = codec_from_config(cfg)
    if args.hex is not None:
        if args.numbers:
            raise ValueError("pass either numbers or --hex, not both")
        hashid = encode_hex(args.hex, codec)
    else:
        hashid = encode_numbers(args.numbers, codec)
    if args.config is not None:
        save_codec_config(cfg, args.config)
    _write_text(args.output_text, hashid + "\n")


def run_decode(args) -> None:
    cfg = resolve_config(args)
    codec = codec_from_config(cfg)
    result = decode_hash_with_status(args.hashid, codec)
    if not result.ok:
        raise ValueError(
            f"could not decode {args.hashid!r} ({result.status.value})"
        )
    if args.hex:
        text = numbers_to_hex(result.numbers)
    else:
        text = " ".join(str(number) for number in result.numbers)
    if args.config is not None:
        save_codec_config(cfg, args.config)
    _write_text(args.output_text, text + "\n")


def main(argv: Optional[List[str]] = None) -> None:
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    try:
        if args.command == "encode":
            run_encode(args)
        elif args.command == "decode":
            run_decode(args)
        else:
            parser.error("Unknown command")
    except ValueError as exc:
        parser.error(str(exc))


__all__ = ["build_arg_parser", "resolve_config", "run_encode", "run_decode", "main", "setup_logging"]
