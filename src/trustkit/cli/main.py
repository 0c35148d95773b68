"""Command-line interface for trustkit."""

from __future__ import annotations

import argparse
import json
import re
import sys
from dataclasses import replace
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as pkg_version
from typing import Sequence

from trustkit.actions import ActionContext, run_action
from trustkit.claims import CLAIM_VERSION
from trustkit.cli.config import CLIConfig, ConfigError, load_cli_config, optional_name
from trustkit.commands import AddAccountParams, AddOperatorParams, AddUserParams
from trustkit.context import StoreContext
from trustkit.entity import EntityParams
from trustkit.errors import (
    AmbiguousScopeError,
    ClaimDecodeError,
    ClaimTypeMismatchError,
    KeyResolutionError,
    PromptAbortedError,
    StoreError,
    TimeRangeError,
    ValidationError,
)
from trustkit.permissions import PermissionInputs
from trustkit.prompts import Prompter
from trustkit.timewindow import TimeParams

EXIT_SUCCESS = 0
EXIT_VALIDATION_ERROR = 1
EXIT_KEY_ERROR = 2
EXIT_STORE_ERROR = 3
EXIT_INTERNAL_ERROR = 4
EXIT_ABORTED = 5

_SEED_RE = re.compile(r"\bS[OAU][A-Z2-7]{50,}\b")

_LIST_HELP = "comma separated list or option can be specified multiple times"


def _sdk_version() -> str:
    try:
        return pkg_version("trustkit")
    except PackageNotFoundError:
        return "0.0.0+local"


def _add_entity_arguments(parser: argparse.ArgumentParser, kind: str) -> None:
    parser.add_argument("-n", "--name", default=None, help=f"name to assign the {kind}")
    parser.add_argument(
        "-k",
        "--public-key",
        default=None,
        help=f"public key, seed or key file identifying the {kind} (default: generate one)",
    )
    parser.add_argument(
        "--tag", dest="tags", action="append", default=[], help=f"tags for {kind} - {_LIST_HELP}"
    )
    parser.add_argument(
        "-S",
        "--start",
        default=None,
        help="valid from ('0' is always, '3d' is three days) - yyyy-mm-dd, #m, #h, #d, #w, #M, #y",
    )
    parser.add_argument(
        "-E",
        "--expiry",
        default=None,
        help="valid until ('0' is always, '2M' is two months) - yyyy-mm-dd, #m, #h, #d, #w, #M, #y",
    )
    parser.add_argument(
        "-i", "--interactive", action="store_true", help="prompt for values interactively"
    )
    parser.add_argument("--json", action="store_true", help="Print result as JSON")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="trustkit")
    parser.add_argument(
        "--version",
        action="version",
        version=f"trustkit {_sdk_version()}",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to CLI config TOML (default: ~/.trustkit/config.toml)",
    )
    parser.add_argument("--store-dir", default=None, help="Entity store directory override")
    parser.add_argument("--keys-dir", default=None, help="Key store directory override")
    parser.add_argument(
        "--operator", default=None, help="Operator for add account/user (default from config)"
    )

    sub = parser.add_subparsers(dest="command", required=True)

    version = sub.add_parser("version", help="Show CLI and claim format version")
    version.add_argument("--json", action="store_true", help="Print version details as JSON")

    add = sub.add_parser("add", help="Add an operator, account or user")
    add_sub = add.add_subparsers(dest="add_command", required=True)

    add_operator = add_sub.add_parser("operator", help="Add an operator and create its store")
    _add_entity_arguments(add_operator, "operator")
    add_operator.set_defaults(usage=add_operator.format_usage)

    add_account = add_sub.add_parser("account", help="Add an account to the operator")
    _add_entity_arguments(add_account, "account")
    add_account.add_argument(
        "-K", "--private-key", default=None, help="operator seed or key file used to sign"
    )
    add_account.set_defaults(usage=add_account.format_usage)

    add_user = add_sub.add_parser("user", help="Add a user to an account")
    _add_entity_arguments(add_user, "user")
    add_user.add_argument("-a", "--account", default=None, help="account name")
    add_user.add_argument(
        "-K", "--private-key", default=None, help="account seed or key file used to sign"
    )
    for flag, help_text in (
        ("allow-pub", "publish permissions"),
        ("allow-sub", "subscribe permissions"),
        ("allow-pubsub", "publish and subscribe permissions"),
        ("deny-pub", "deny publish permissions"),
        ("deny-sub", "deny subscribe permissions"),
        ("deny-pubsub", "deny publish and subscribe permissions"),
    ):
        add_user.add_argument(
            f"--{flag}", action="append", default=[], help=f"{help_text} - {_LIST_HELP}"
        )
    add_user.add_argument(
        "--source-network",
        action="append",
        default=[],
        help=f"source network for connection - {_LIST_HELP}",
    )
    add_user.set_defaults(usage=add_user.format_usage)

    return parser


def _sanitize_error_text(value: str) -> str:
    return _SEED_RE.sub("[REDACTED]", value)


def _print_error(stderr, prefix: str, message: str, *, code: int) -> int:
    print(f"{prefix}: {_sanitize_error_text(message)}", file=stderr)
    return code


def _split_list(values: Sequence[str] | None) -> list[str]:
    items: list[str] = []
    for value in values or ():
        items.extend(part.strip() for part in value.split(",") if part.strip())
    return items


def _build_add_params(args) -> EntityParams:
    tags = _split_list(args.tags)
    time_params = TimeParams(start=args.start, expiry=args.expiry)

    if args.add_command == "operator":
        params: EntityParams = AddOperatorParams(tags=tags, time=time_params)
    elif args.add_command == "account":
        params = AddAccountParams(
            tags=tags,
            time=time_params,
            signer_key=args.private_key or "",
        )
    else:
        params = AddUserParams(
            tags=tags,
            time=time_params,
            account_name=args.account or "",
            signer_key=args.private_key or "",
            permissions=PermissionInputs(
                allow_pub=_split_list(args.allow_pub),
                allow_sub=_split_list(args.allow_sub),
                allow_pubsub=_split_list(args.allow_pubsub),
                deny_pub=_split_list(args.deny_pub),
                deny_sub=_split_list(args.deny_sub),
                deny_pubsub=_split_list(args.deny_pubsub),
            ),
            src=_split_list(args.source_network),
        )

    params.entity.name = (args.name or "").strip()
    params.entity.key_ref = (args.public_key or "").strip()
    return params


def _wants_interactive(args, stdin) -> bool:
    if args.interactive:
        return True
    if args.name:
        return False
    isatty = getattr(stdin, "isatty", None)
    return bool(isatty and isatty())


def _run_version(*, as_json: bool, stdout) -> int:
    payload = {
        "cli": "trustkit",
        "sdk_version": _sdk_version(),
        "claim_version": CLAIM_VERSION,
    }
    if as_json:
        print(json.dumps(payload, sort_keys=True), file=stdout)
    else:
        print(f"trustkit {payload['sdk_version']}", file=stdout)
        print(f"claims: {payload['claim_version']}", file=stdout)
    return EXIT_SUCCESS


def _run_add(*, args, config: CLIConfig, stdin, stdout, stderr) -> int:
    kind = args.add_command
    params = _build_add_params(args)
    store = StoreContext(
        store_dir=args.store_dir or config.store_dir,
        keys_dir=args.keys_dir or config.keys_dir,
        operator=config.operator,
        account=config.account,
    )
    interactive = _wants_interactive(args, stdin)
    prompter = Prompter(stdin=stdin, stdout=stdout) if interactive else None
    ctx = ActionContext.create(store, prompter=prompter, interactive=interactive)

    try:
        run_action(params, ctx)
    except ValidationError as exc:
        if exc.show_usage:
            print(args.usage(), end="", file=stderr)
        return _print_error(stderr, f"{kind} error", str(exc), code=EXIT_VALIDATION_ERROR)
    except (AmbiguousScopeError, TimeRangeError) as exc:
        return _print_error(stderr, f"{kind} error", str(exc), code=EXIT_VALIDATION_ERROR)
    except KeyResolutionError as exc:
        return _print_error(stderr, "key error", str(exc), code=EXIT_KEY_ERROR)
    except (StoreError, ClaimDecodeError) as exc:
        return _print_error(stderr, "store error", str(exc), code=EXIT_STORE_ERROR)
    except PromptAbortedError as exc:
        return _print_error(stderr, "aborted", str(exc), code=EXIT_ABORTED)
    except ClaimTypeMismatchError as exc:
        return _print_error(stderr, "internal error", str(exc), code=EXIT_INTERNAL_ERROR)

    entity = params.entity
    payload = {
        "kind": kind,
        "name": entity.name,
        "scope": params.scope_name,
        "public_key": entity.public_key,
        "generated": entity.generated,
        "key_path": entity.key_path or None,
        "claim_file": params.claim_path,
        "jti": params.claim.jti if params.claim is not None else None,
    }
    if args.json:
        print(json.dumps(payload, sort_keys=True), file=stdout)
        return EXIT_SUCCESS

    if entity.generated:
        print(f'Generated {kind} key - private key stored "{entity.key_path}"', file=stdout)
    print(f'Success! - added {kind} "{entity.name}" to "{params.scope_name}"', file=stdout)
    return EXIT_SUCCESS


def main(
    argv: Sequence[str] | None = None,
    *,
    stdin=sys.stdin,
    stdout=sys.stdout,
    stderr=sys.stderr,
) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_cli_config(args.config)
        operator = optional_name(args.operator, "--operator")
    except ConfigError as exc:
        return _print_error(stderr, "config error", str(exc), code=EXIT_VALIDATION_ERROR)
    if operator:
        config = replace(config, operator=operator)

    if args.command == "version":
        return _run_version(as_json=args.json, stdout=stdout)

    if args.command == "add":
        return _run_add(args=args, config=config, stdin=stdin, stdout=stdout, stderr=stderr)

    print("unknown command", file=stderr)
    return EXIT_VALIDATION_ERROR


if __name__ == "__main__":
    raise SystemExit(main())
