import hashlib

import pytest

from main import main
from pbkdf2_demo import kdf


def test_too_few_arguments(capsys):
    assert main(["2", "0010", "1"]) == 1
    err = capsys.readouterr().err
    assert "Not enough arguments" in err
    assert "usage:" in err
    assert "hashType" in err


def test_no_arguments(capsys):
    assert main([]) == 1
    assert "Not enough arguments" in capsys.readouterr().err


def test_correct_mode_output(capsys):
    assert main(["2", "0010", "1", "test", "x"]) == 0

    out, err = capsys.readouterr()
    lines = out.splitlines()
    key = hashlib.pbkdf2_hmac("sha256", b"test", b"\x00\x10", 1)
    assert len(key) == 32
    assert lines[0] == (
        "HashType: SHA256, Salt: 00 10, IterationCount: 1, Password: 'test', "
        f"PBKDF2: {key.hex(' ').upper()}"
    )
    assert lines[1].startswith("Duration: ") and lines[1].endswith(" ms")
    assert len(lines) == 2
    assert err == ""


def test_naive_mode_output(capsys):
    assert main(["1", "4711", "1", "test"]) == 0

    line = capsys.readouterr().out.splitlines()[0]
    key = hashlib.pbkdf2_hmac("sha1", "test".encode("utf-16-le"), (4711).to_bytes(4, "little"), 1)
    assert line == (
        "HashType: SHA1, Salt: 4711, IterationCount: 1, Password: 'test', "
        f"PBKDF2: {key.hex(' ').upper()}"
    )


def test_ansi_native_encoding(capsys):
    assert main(["--native-encoding", "cp1252", "2", "1", "1", "päss"]) == 0

    line = capsys.readouterr().out.splitlines()[0]
    key = hashlib.pbkdf2_hmac("sha256", b"p\xe4ss", b"\x01\x00\x00\x00", 1)
    assert line.endswith(key.hex(" ").upper())


def test_modes_give_different_keys_for_non_ascii(capsys):
    main(["2", "10", "1", "Grüße", "x"])
    correct = capsys.readouterr().out.splitlines()[0].split("PBKDF2: ")[1]
    main(["2", "16", "1", "Grüße"])
    naive = capsys.readouterr().out.splitlines()[0].split("PBKDF2: ")[1]
    assert correct != naive


def test_hash_type_five_is_sha512(capsys):
    assert main(["5", "00", "1", "pw", "x"]) == 0
    out = capsys.readouterr().out
    assert out.startswith("HashType: SHA512,")
    assert len(out.splitlines()[0].split("PBKDF2: ")[1].split()) == 64


@pytest.mark.parametrize(
    "argv,fragment",
    [
        (["2", "0010", "0", "test", "x"], '"iterationCount" is smaller'),
        (["2", "0010", "6000000", "test", "x"], '"iterationCount" is larger'),
        (["abc", "0010", "1", "test"], '"hashType" is not an integer'),
        (["2", "00G0", "1", "test", "x"], "Invalid hex character 'G' at position 3"),
        (["2", "salt", "1", "test"], '"salt" is not an integer'),
    ],
)
def test_validation_failures_exit_with_2(capsys, argv, fragment):
    assert main(argv) == 2
    out, err = capsys.readouterr()
    assert out == ""
    assert fragment in err


def test_password_conversion_failure_exits_with_3(capsys):
    assert main(["2", "00", "1", "pw\udc80", "x"]) == 3
    assert "UTF-8" in capsys.readouterr().err


def test_derivation_failure_exits_with_3(capsys, monkeypatch):
    def fail(**kwargs):
        raise ValueError("boom")

    monkeypatch.setattr(kdf, "PBKDF2HMAC", fail)
    assert main(["2", "00", "1", "pw", "x"]) == 3
    out, err = capsys.readouterr()
    assert out == ""
    assert "PBKDF2 derive" in err


def test_unknown_native_encoding_is_a_usage_error(capsys):
    assert main(["--native-encoding", "nope", "2", "1", "1", "pw"]) == 1
    assert "Unknown native encoding" in capsys.readouterr().err


def test_naive_mode_prints_undecodable_password(capsys):
    assert main(["1", "0", "1", "pw\udc80"]) == 0
    assert capsys.readouterr().out.startswith("HashType: SHA1, Salt: 0,")


def _key_field(out):
    return out.splitlines()[0].split("PBKDF2: ")[1]


def test_fifth_argument_looking_like_an_option_selects_correct_mode(capsys):
    assert main(["2", "0010", "1", "test", "-v"]) == 0
    out, err = capsys.readouterr()
    key = hashlib.pbkdf2_hmac("sha256", b"test", b"\x00\x10", 1)
    assert out.startswith("HashType: SHA256, Salt: 00 10,")
    assert _key_field(out) == key.hex(" ").upper()
    assert err == ""


@pytest.mark.parametrize("fifth", ["-x", "--help", "-h", "--"])
def test_any_fifth_argument_selects_correct_mode(capsys, fifth):
    assert main(["2", "0010", "1", "test", fifth]) == 0
    assert "Salt: 00 10," in capsys.readouterr().out


@pytest.mark.parametrize("password", ["-secret", "-h", "--verbose", "--native-encoding"])
def test_password_starting_with_dash(capsys, password):
    assert main(["2", "0010", "1", password, "x"]) == 0
    out = capsys.readouterr().out
    key = hashlib.pbkdf2_hmac("sha256", password.encode(), b"\x00\x10", 1)
    assert f"Password: '{password}'" in out
    assert _key_field(out) == key.hex(" ").upper()


def test_negative_hash_type_is_a_value_not_an_option(capsys):
    assert main(["-1", "0010", "1", "test"]) == 2
    assert '"hashType" is smaller' in capsys.readouterr().err


def test_options_before_positionals(capsys):
    assert main(["-v", "--native-encoding=cp1252", "2", "1", "1", "päss"]) == 0
    key = hashlib.pbkdf2_hmac("sha256", b"p\xe4ss", b"\x01\x00\x00\x00", 1)
    assert _key_field(capsys.readouterr().out) == key.hex(" ").upper()


def test_double_dash_ends_options(capsys):
    assert main(["--", "-v", "0010", "1", "test"]) == 2
    assert '"hashType" is not an integer' in capsys.readouterr().err


def test_help_returns_zero(capsys):
    assert main(["-h"]) == 0
    assert "usage:" in capsys.readouterr().out


def test_option_missing_its_value_is_a_usage_error(capsys):
    assert main(["--native-encoding"]) == 1
    assert "usage:" in capsys.readouterr().err
