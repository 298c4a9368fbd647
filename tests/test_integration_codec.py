import json
from typing import List, Sequence

import pytest

import hashid_codec
from hashid_codec import DEFAULT_ALPHABET, construct, decode_hash, encode_numbers
from hashid_codec import cli

CONFIGS = [
    ("", 0, DEFAULT_ALPHABET),
    ("this is my salt", 0, DEFAULT_ALPHABET),
    ("this is my salt", 18, DEFAULT_ALPHABET),
    ("arbitrary salt", 16, "abcdefghijklmnopqrstuvwxyz"),
    ("", 25, "0123456789abcdef"),
    ("short", 9, "ABcfhistuCFHISTU"),
    ("symbols", 0, "!\"#%&',-/0123456789:;<=>ABCDEFGHIJKLMNOPQRSTUVWXYZ_`abcdefghijklmnopqrstuvwxyz~"),
    ("no seps", 40, "abdegjklmnopqrvwxyzABDEGJKLMNOPQRVWXYZ1234567890"),
]

NUMBER_SETS: List[Sequence[int]] = [
    [0],
    [1],
    [1, 2, 3],
    [683, 94108, 123, 5],
    [0, 0, 0, 0, 0],
    [7452, 2967, 21401],
    [9007199254740991],
    list(range(20)),
]


@pytest.mark.parametrize("salt,min_length,alphabet", CONFIGS)
@pytest.mark.parametrize("numbers", NUMBER_SETS)
def test_round_trip_properties(salt, min_length, alphabet, numbers) -> None:
    codec = construct(alphabet, salt, min_length)
    hashid = encode_numbers(numbers, codec)

    assert decode_hash(hashid, codec) == tuple(numbers)
    assert len(hashid) >= min_length
    assert set(hashid) <= set(alphabet)
    assert encode_numbers(numbers, codec) == hashid


def test_cli_encode_and_decode(capsys) -> None:
    cli.main(["encode", "1", "2", "3"])
    assert capsys.readouterr().out == "o2fXhV\n"

    cli.main(["decode", "o2fXhV"])
    assert capsys.readouterr().out == "1 2 3\n"


def test_cli_round_trip_with_config_file(capsys, tmp_path) -> None:
    config_path = tmp_path / "codec.json"

    cli.main(
        [
            "encode",
            "--salt",
            "this is my salt",
            "--min-length",
            "8",
            "--config",
            str(config_path),
            "1",
        ]
    )
    assert capsys.readouterr().out == "gB0NV05e\n"

    saved = json.loads(config_path.read_text(encoding="utf-8"))
    assert saved["salt"] == "this is my salt"
    assert saved["min_length"] == 8
    assert saved["alphabet"] == DEFAULT_ALPHABET

    # Values come back from the config file when flags are omitted
    cli.main(["decode", "gB0NV05e", "--config", str(config_path)])
    assert capsys.readouterr().out == "1\n"

    # Flags override the file and the merged values are written back
    cli.main(["encode", "-m", "0", "--config", str(config_path), "12345"])
    assert capsys.readouterr().out == "NkK9\n"
    assert hashid_codec.load_codec_config(config_path).min_length == 0


def test_cli_hex_round_trip(capsys, tmp_path) -> None:
    output_path = tmp_path / "hash.txt"
    cli.main(
        [
            "encode",
            "-s",
            "hex",
            "--hex",
            "507f1f77bcf86cd799439011",
            "--output-text",
            str(output_path),
        ]
    )
    hashid = output_path.read_text(encoding="utf-8").strip()
    assert capsys.readouterr().out == ""

    cli.main(["decode", "-s", "hex", "--hex", hashid])
    assert capsys.readouterr().out == "507f1f77bcf86cd799439011\n"


@pytest.mark.parametrize(
    "argv",
    [
        ["encode"],
        ["encode", "-1"],
        ["encode", "--hex", "xyz"],
        ["encode", "--hex", "ff", "1"],
        ["encode", "-a", "short", "1"],
        ["encode", "-m", "-2", "1"],
        ["decode", "o2fXh"],
        ["decode", "!!!"],
    ],
)
def test_cli_reports_errors(argv, capsys) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(argv)
    assert excinfo.value.code == 2
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "error" in captured.err


def test_cli_verbose_logs_to_stderr(capsys) -> None:
    with pytest.raises(SystemExit):
        cli.main(["decode", "-v", "o2fXh"])
    captured = capsys.readouterr()
    assert "hashid_codec - DEBUG - Rejected hashid 'o2fXh': checksum mismatch" in captured.err


def _mutations(hashid: str, alphabet: str) -> List[str]:
    candidates = sorted(set(alphabet))[:8]
    mutated = []
    for index in range(len(hashid)):
        for char in candidates:
            if char != hashid[index]:
                mutated.append(hashid[:index] + char + hashid[index + 1 :])
    mutated.append(hashid[:-1])
    mutated.append(hashid + candidates[0])
    mutated.append(hashid[1:])
    return mutated


@pytest.mark.parametrize("salt,min_length,alphabet", CONFIGS)
def test_matches_reference_implementation(salt, min_length, alphabet) -> None:
    hashids = pytest.importorskip("hashids")
    reference = hashids.Hashids(salt=salt, min_length=min_length, alphabet=alphabet)
    codec = construct(alphabet, salt, min_length)

    for numbers in NUMBER_SETS:
        hashid = encode_numbers(numbers, codec)
        assert hashid == reference.encode(*numbers)

        # Tampered input must be accepted or rejected exactly as the reference does
        for candidate in _mutations(hashid, alphabet):
            assert decode_hash(candidate, codec) == reference.decode(candidate)


def test_hex_matches_reference_implementation() -> None:
    hashids = pytest.importorskip("hashids")
    reference = hashids.Hashids(salt="this is my salt")
    codec = construct(salt="this is my salt")

    for hex_str in ["507f1f77bcf86cd799439011", "deadbeef", "00ff00ff00ff00ff"]:
        hashid = hashid_codec.encode_hex(hex_str, codec)
        assert hashid == reference.encode_hex(hex_str)
        assert hashid_codec.decode_hex(hashid, codec) == reference.decode_hex(hashid)
