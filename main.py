from __future__ import annotations
import argparse
import codecs
import logging
import sys

from pbkdf2_demo.errors import PBKDF2DemoError, UsageError
from pbkdf2_demo.modes import Mode
from pbkdf2_demo.pipeline import RunSettings, run
from pbkdf2_demo.text_encoding import NATIVE_ENCODING


USAGE_DETAILS = """\
       hashType: 1=SHA-1, 2=SHA-256, 3=SHA-384, 4=SHA-512, 5=SHA-512
       doItRight: If present the salt is interpreted as a byte array and
                  the password is converted to UTF-8 before hashing.
                  Otherwise the salt is interpreted as an integer and
                  the password is used in its native encoding.
       Options are only read before hashType; from there on every
       argument is taken as it is, even if it starts with '-'."""

POSITIONAL_NAMES = ("hashType", "salt", "iterationCount", "password")

_FLAGS = ("-h", "--help", "-v", "--verbose")
_VALUE_OPTIONS = ("--native-encoding",)


class _Parser(argparse.ArgumentParser):
    def error(self, message: str):
        raise UsageError(message)


def build_parser() -> argparse.ArgumentParser:
    parser = _Parser(
        prog="pbkdf2",
        usage="%(prog)s [-v] [--native-encoding ENC] hashType salt iterationCount password [doItRight]",
        description="Show correct and incorrect password storage with PBKDF2.",
        epilog=USAGE_DETAILS,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        add_help=False,
    )
    parser.add_argument("-h", "--help", action="store_true", help="Show this help and exit")
    parser.add_argument(
        "--native-encoding",
        default=NATIVE_ENCODING,
        help=f"In-memory character encoding the wrong way uses (default: {NATIVE_ENCODING}; cp1252 imitates an ANSI build)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging on stderr")
    return parser


def split_argv(argv: list[str]) -> tuple[list[str], list[str]]:
    """Split ``argv`` into leading options and the positional arguments.

    Options end at the first token that is not one of ours (or at "--").
    """
    index = 0
    while index < len(argv):
        token = argv[index]
        if token == "--":
            return argv[:index], argv[index + 1:]
        if token in _FLAGS or any(token.startswith(option + "=") for option in _VALUE_OPTIONS):
            index += 1
        elif token in _VALUE_OPTIONS:
            index += 2
        else:
            break
    return argv[:index], argv[index:]


def _print(text: str, stream) -> None:
    try:
        print(text, file=stream)
    except UnicodeEncodeError:
        encoding = getattr(stream, "encoding", None) or "utf-8"
        print(text.encode(encoding, "backslashreplace").decode(encoding), file=stream)


def _usage_failure(parser: argparse.ArgumentParser, error: UsageError) -> int:
    _print(f"Error: {error}", sys.stderr)
    _print(parser.format_usage().rstrip(), sys.stderr)
    _print(USAGE_DETAILS, sys.stderr)
    return error.exit_code


def main(argv: list[str] | None = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    parser = build_parser()
    options, positionals = split_argv(argv)
    try:
        args = parser.parse_args(options)
        if args.help:
            parser.print_help(sys.stdout)
            return 0
        if len(positionals) < len(POSITIONAL_NAMES):
            raise UsageError("Not enough arguments")
        try:
            codecs.lookup(args.native_encoding)
        except LookupError as e:
            raise UsageError(f"Unknown native encoding: {args.native_encoding}") from e
    except UsageError as e:
        return _usage_failure(parser, e)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    hash_type, salt, iteration_count, password = positionals[:4]

    # Should I do it right or not? Any fifth argument, whatever it looks like.
    settings = RunSettings(
        mode=Mode.CORRECT if len(positionals) > 4 else Mode.NAIVE,
        native_encoding=args.native_encoding,
    )

    try:
        outcome = run(settings, hash_type, salt, iteration_count, password)
    except PBKDF2DemoError as e:
        _print(f"Error: {e}", sys.stderr)
        return e.exit_code

    for line in outcome.lines:
        _print(line, sys.stdout)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
