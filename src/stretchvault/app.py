"""
app.py - CLI entrypoint

Commands list:
- crypt: stretch a password (prompted) with a salt and print the hash
- verify: check a password against a stored hash
- bench: time stretching for several stretch counts (+ optional Argon2 reference)
- algorithms: list supported digest algorithms
"""

from __future__ import annotations

import argparse
import getpass
import logging
import sys
from typing import List, Optional

from . import bench
from .digests import available_algorithms
from .errors import InvalidArgument
from .hashinfo import HashInfo, new_salt
from .stretch import DEFAULT_ALGORITHM, DEFAULT_STRETCH_COUNT, OutputFormat, stretch, verify


log = logging.getLogger(__name__)

DEFAULT_FORMAT = OutputFormat.BASE64.value


def _prompt_secret(prompt: str = "Password: ") -> str:
    return getpass.getpass(prompt)


def _password(args: argparse.Namespace) -> str:
    return args.password if args.password is not None else _prompt_secret()


def _salt(args: argparse.Namespace) -> Optional[bytes]:
    if args.salt_hex is not None:
        try:
            return bytes.fromhex(args.salt_hex)
        except ValueError as e:
            raise InvalidArgument(f"--salt-hex is not valid hex: {e}") from e
    if args.salt is not None:
        return args.salt.encode("utf-8")
    return None


def _show(pwhash) -> str:
    # binary output is not printable
    return pwhash.hex() if isinstance(pwhash, bytes) else pwhash


def cmd_crypt(args: argparse.Namespace) -> int:
    salt = _salt(args)
    password = _password(args)

    if args.identifier:
        info = HashInfo(args.identifier, args.algorithm, args.stretch_count, args.format, args.delimiter)
        print(info.crypt(password, salt))
        return 0

    if salt is None:
        salt = new_salt()
        print(f"salt_hex={salt.hex()}")
    pwhash = stretch(password, salt, args.algorithm, args.stretch_count, args.format)
    print(_show(pwhash))
    return 0


def cmd_verify(args: argparse.Namespace) -> int:
    password = _password(args)

    if args.identifier:
        if args.salt is not None or args.salt_hex is not None:
            raise InvalidArgument("--salt/--salt-hex cannot be combined with --identifier (the salt is in --hash)")
        info = HashInfo(args.identifier, args.algorithm, args.stretch_count, args.format, args.delimiter)
        ok = info.verify(password, args.hash)
    else:
        salt = _salt(args)
        if salt is None:
            raise InvalidArgument("--salt or --salt-hex is required unless --identifier is given")
        reference = args.hash
        if OutputFormat.parse(args.format) is OutputFormat.BINARY:
            try:
                reference = bytes.fromhex(args.hash)
            except ValueError as e:
                raise InvalidArgument(f"--hash must be hex for binary format: {e}") from e
        ok = verify(password, reference, salt, args.algorithm, args.stretch_count, args.format)

    print("OK: password matches" if ok else "FAIL: password mismatch")
    return 0 if ok else 1


def cmd_bench(args: argparse.Namespace) -> int:
    try:
        counts = [int(x) for x in args.counts.split(",") if x.strip()]
    except ValueError as e:
        raise InvalidArgument(f"--counts must be comma-separated integers: {e}") from e

    print("== STRETCH BENCH ==")
    for r in bench.bench_stretch(args.algorithm, counts, rounds=args.rounds):
        print(r)

    if args.target_ms:
        n = bench.suggest_stretch_count(args.algorithm, args.target_ms)
        print(f"\nsuggested stretch_count for ~{args.target_ms}ms: {n}")

    if args.argon2:
        print("\n== ARGON2 REFERENCE ==")
        print(bench.bench_argon2_verify(rounds=args.rounds))
    return 0


def cmd_algorithms(args: argparse.Namespace) -> int:
    for name in available_algorithms():
        print(name)
    return 0


def _add_hash_options(s: argparse.ArgumentParser) -> None:
    s.add_argument("--algorithm", default=DEFAULT_ALGORITHM, help="Digest algorithm (see 'algorithms')")
    s.add_argument("--stretch-count", type=int, default=DEFAULT_STRETCH_COUNT)
    s.add_argument("--format", choices=[f.value for f in OutputFormat], default=DEFAULT_FORMAT)
    s.add_argument("--password", default=None, help="Password (prompted if omitted)")
    salt = s.add_mutually_exclusive_group()
    salt.add_argument("--salt", default=None, help="Salt as UTF-8 text")
    salt.add_argument("--salt-hex", default=None, help="Salt as hex bytes")
    s.add_argument("--identifier", default="", help="Use the <d><id><d><salt><d><hash> stored form")
    s.add_argument("--delimiter", default="$")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="stretchvault")
    p.add_argument("--log-level", default="WARNING", help="Python logging level")

    sub = p.add_subparsers(dest="cmd", required=True)

    s = sub.add_parser("crypt", help="Generate a stretched password hash")
    _add_hash_options(s)
    s.set_defaults(func=cmd_crypt)

    s = sub.add_parser("verify", help="Verify a password against a stretched hash")
    _add_hash_options(s)
    s.add_argument("--hash", required=True, help="Stored hash (or composite string with --identifier)")
    s.set_defaults(func=cmd_verify)

    s = sub.add_parser("bench", help="Run stretching benchmarks")
    s.add_argument("--algorithm", default=DEFAULT_ALGORITHM)
    s.add_argument("--counts", default="1000,5000,10000,50000", help="Comma-separated stretch counts")
    s.add_argument("--rounds", type=int, default=5)
    s.add_argument("--target-ms", type=float, default=0.0, help="Also suggest a stretch_count for this latency")
    s.add_argument("--argon2", action="store_true", help="Also time an Argon2id verify for reference")
    s.set_defaults(func=cmd_bench)

    s = sub.add_parser("algorithms", help="List supported digest algorithms")
    s.set_defaults(func=cmd_algorithms)

    return p


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    log.debug("command %s", args.cmd)

    try:
        return args.func(args)
    except InvalidArgument as e:
        print(f"FAIL: {e}")
        return 2


if __name__ == "__main__":
    sys.exit(main())
