import argparse
import getpass
import os as _os_module
import pathlib
import sys

import colorama

from .engine import lcenc
from .result import describe_failure, run_operation

PLAIN_CONFIG_KEYS = ("plain=1", "plain=true", "style=plain")


def _config_path() -> pathlib.Path:
    cfg = _os_module.getenv("LCENC_CLI_CONFIG")
    if cfg:
        return pathlib.Path(cfg).expanduser()
    base = _os_module.getenv("XDG_CONFIG_HOME") or _os_module.getenv("APPDATA")
    if base:
        return pathlib.Path(base) / "lcenc" / "cli.conf"
    return pathlib.Path("~/.config/lcenc/cli.conf").expanduser()


def _plain_output() -> bool:
    if _os_module.getenv("LCENC_CLI_PLAIN") or _os_module.getenv("NO_COLOR"):
        return True
    if (_os_module.getenv("LCENC_CLI_STYLE") or "").strip().lower() == "plain":
        return True
    try:
        data = _config_path().read_text(encoding="utf-8").lower()
    except OSError:
        return False
    return any(key in data for key in PLAIN_CONFIG_KEYS)


class _Theme:
    STYLES = {
        "ok": (colorama.Fore.GREEN, "✅"),
        "warn": (colorama.Fore.YELLOW, "⚠️"),
        "err": (colorama.Fore.RED, "❌"),
        "info": (colorama.Fore.CYAN, "✨"),
    }

    def __init__(self, plain: bool):
        self.plain = plain

    def paint(self, kind: str, msg: str) -> str:
        if self.plain:
            return msg
        color, emoji = self.STYLES[kind]
        return f"{colorama.Style.BRIGHT}{color}{emoji} {msg}{colorama.Style.RESET_ALL}"

    def ok(self, msg: str) -> str:
        return self.paint("ok", msg)

    def warn(self, msg: str) -> str:
        return self.paint("warn", msg)

    def err(self, msg: str) -> str:
        return self.paint("err", msg)

    def info(self, msg: str) -> str:
        return self.paint("info", msg)


def cli(argv=None) -> int:
    colorama.just_fix_windows_console()
    theme = _Theme(_plain_output())

    def _resolve_password(value: str | None) -> str:
        if value:
            return value
        env_value = _os_module.getenv("LCENC_PASSWORD")
        if env_value:
            return env_value
        try:
            return getpass.getpass("Password: ")
        except EOFError:
            return ""

    parser = argparse.ArgumentParser(prog="lcenc", description="LCEN password-based file encryption")
    subparsers = parser.add_subparsers(dest="command", required=True)

    def _add_file_command(name: str, help_text: str, with_output: bool = True) -> argparse.ArgumentParser:
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("paths", nargs="+", help="One or more file paths")
        sub.add_argument(
            "-p", "--password",
            default=None,
            help="Password text (falls back to $LCENC_PASSWORD, then an interactive prompt)"
        )
        sub.add_argument(
            "--chunk-size",
            type=int,
            default=None,
            help="Streaming chunk size in bytes (default: $LCENC_CHUNK_SIZE or 1 MiB)"
        )
        if with_output:
            sub.add_argument(
                "-o", "--output",
                default=None,
                help="Output file path (single input only)"
            )
        return sub

    _add_file_command("encrypt", "Encrypt files into .lcenc containers")
    _add_file_command("decrypt", "Decrypt .lcenc containers, restoring the stored extension")
    _add_file_command(
        "cryptin",
        "Decrypt paths ending in .lcenc and encrypt everything else",
        with_output=False
    )

    peek = subparsers.add_parser("peek", help="Show the stored extension and IV of .lcenc files")
    peek.add_argument("paths", nargs="+", help="One or more .lcenc file paths")

    args = parser.parse_args(argv)

    if args.command == "peek":
        failures = 0
        for raw_path in args.paths:
            outcome = run_operation(lcenc.peek_file, raw_path)
            if not outcome.ok:
                print(theme.err(f"{raw_path}: {describe_failure(outcome.error)}"), file=sys.stderr)
                failures += 1
                continue
            info = outcome.payload
            print(theme.info(f"{raw_path}: extension={info.extension or '(none)'} iv={info.iv.hex()}"))
        return 0 if failures == 0 else 1

    output = getattr(args, "output", None)
    if output and len(args.paths) > 1:
        parser.error("--output can only be used with a single input path")

    operation = {
        "encrypt": lcenc.encrypt_file,
        "decrypt": lcenc.decrypt_file,
        "cryptin": lcenc.process_file,
    }[args.command]

    password = _resolve_password(args.password)
    if not password:
        print(theme.err("Password required"), file=sys.stderr)
        return 1

    failures = 0
    for raw_path in args.paths:
        outcome = run_operation(operation, raw_path, password, output, chunk_size=args.chunk_size)
        if outcome.ok:
            print(theme.ok(f"{raw_path} -> {outcome.payload}"))
        else:
            print(theme.err(f"{raw_path}: {describe_failure(outcome.error)}"), file=sys.stderr)
            failures += 1
    if failures and len(args.paths) > 1:
        print(theme.warn(f"{failures} of {len(args.paths)} files failed"), file=sys.stderr)
    return 0 if failures == 0 else 1


def main(argv=None) -> int:
    try:
        return cli(argv)
    except KeyboardInterrupt:
        print("Exiting...")
        return 130


if __name__ == "__main__":
    raise SystemExit(main())
