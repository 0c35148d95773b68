from __future__ import annotations

import io
import json

from trustkit.cli.main import main
from trustkit.crypto.keys import KeyPair, Role


def test_version_json_has_expected_fields() -> None:
    out = io.StringIO()
    err = io.StringIO()

    rc = main(["version", "--json"], stdout=out, stderr=err)
    assert rc == 0
    assert err.getvalue() == ""

    payload = json.loads(out.getvalue())
    assert payload["cli"] == "trustkit"
    assert payload["claim_version"] == "TK-1"
    assert isinstance(payload["sdk_version"], str)


def test_add_operator_creates_self_signed_claim(cli) -> None:
    rc, out, err = cli("add", "operator", "--name", "O", "--tag", "Prod")
    assert rc == 0, err
    assert "Generated operator key - private key stored" in out
    assert f'Success! - added operator "O" to "{cli.store_dir}"' in out

    claim = cli.context().operator_store().read_claim(Role.OPERATOR, "O")
    assert claim.iss == claim.sub
    assert claim.tags == ["prod"]


def test_add_user_builds_sorted_permissions(cli) -> None:
    cli.setup("A")

    rc, out, err = cli(
        "add",
        "user",
        "--name",
        "u",
        "--allow-pub",
        "foo.>",
        "--allow-pubsub",
        "bar.>",
        "--deny-sub",
        "baz.>",
        "--tag",
        "test,service_a",
    )

    assert rc == 0, err
    assert 'Generated user key - private key stored "' in out
    assert 'Success! - added user "u" to "A"' in out

    store = cli.context().operator_store()
    claim = store.read_claim(Role.USER, "u", account="A")
    account = store.read_claim(Role.ACCOUNT, "A")
    assert claim.iss == account.sub
    assert claim.permissions.pub.allow == ["bar.>", "foo.>"]
    assert claim.permissions.sub.allow == ["bar.>"]
    assert claim.permissions.sub.deny == ["baz.>"]
    assert claim.tags == ["service_a", "test"]


def test_add_user_json_output(cli) -> None:
    cli.setup("A")

    rc, out, err = cli("add", "user", "--name", "u", "--source-network", "10.0.0.0/8", "--json")

    assert rc == 0, err
    payload = json.loads(out)
    assert payload["kind"] == "user"
    assert payload["scope"] == "A"
    assert payload["generated"] is True
    assert payload["public_key"].startswith("U")
    assert payload["key_path"].endswith(f"{payload['public_key']}.nk")
    claim = cli.context().operator_store().read_claim(Role.USER, "u", account="A")
    assert claim.src == ["10.0.0.0/8"]
    assert claim.jti == payload["jti"]


def test_add_user_with_public_key_does_not_generate(cli) -> None:
    cli.setup("A")
    user = KeyPair.generate(Role.USER)

    rc, out, err = cli("add", "user", "--name", "u", "--public-key", user.public_key)

    assert rc == 0, err
    assert "Generated" not in out
    claim = cli.context().operator_store().read_claim(Role.USER, "u", account="A")
    assert claim.sub == user.public_key
    assert not (cli.keys_dir / "users").exists()


def test_add_user_without_name_shows_usage(cli) -> None:
    cli.setup("A")

    rc, _, err = cli("add", "user")

    assert rc == 1
    assert "usage:" in err
    assert "user error: user name is required" in err


def test_add_user_two_accounts_is_ambiguous(cli) -> None:
    cli.setup("A", "B")

    rc, _, err = cli("add", "user", "--name", "u")

    assert rc == 1
    assert "multiple accounts found" in err

    rc, out, err = cli("add", "user", "--name", "u", "--account", "B")
    assert rc == 0, err
    assert 'added user "u" to "B"' in out


def test_add_user_without_accounts(cli) -> None:
    cli.setup()

    rc, _, err = cli("add", "user", "--name", "u")

    assert rc == 1
    assert "no accounts defined - add account first" in err


def test_add_user_inverted_window_writes_nothing(cli) -> None:
    cli.setup("A")

    rc, _, err = cli("add", "user", "--name", "u", "--start", "1767225610", "--expiry", "1767225600")

    assert rc == 1
    assert "start (1767225610) is after expiry (1767225600)" in err
    assert not (cli.keys_dir / "users").exists()
    assert not cli.context().operator_store().has_claim(Role.USER, "u", account="A")


def test_add_user_out_of_range_expiry_exits_with_validation_code(cli) -> None:
    cli.setup("A")

    rc, _, err = cli("add", "user", "--name", "u", "--expiry", "99999y")

    assert rc == 1
    assert "user error: time '99999y' is out of range" in err
    assert not cli.context().operator_store().has_claim(Role.USER, "u", account="A")


def test_add_user_twice_is_rejected(cli) -> None:
    cli.setup("A")
    assert cli("add", "user", "--name", "u")[0] == 0

    rc, _, err = cli("add", "user", "--name", "u")

    assert rc == 1
    assert "already exists" in err


def test_add_user_with_foreign_signing_key_fails(cli) -> None:
    cli.setup("A")
    stranger = KeyPair.generate(Role.ACCOUNT)

    rc, _, err = cli("add", "user", "--name", "u", "--private-key", stranger.seed)

    assert rc == 2
    assert "is not the key of account 'A'" in err


def test_missing_account_key_is_a_key_error(cli) -> None:
    cli.setup("A")
    for seed_file in (cli.keys_dir / "accounts").glob("*.nk"):
        seed_file.unlink()

    rc, _, err = cli("add", "user", "--name", "u")

    assert rc == 2
    assert "key error: unable to resolve the account 'A' signing key" in err


def test_key_errors_redact_seeds(cli) -> None:
    cli.setup("A")
    user_seed = KeyPair.generate(Role.USER).seed

    rc, _, err = cli("add", "user", "--name", "u", "--private-key", user_seed)

    assert rc == 2
    assert "[REDACTED]" in err
    assert user_seed not in err


def test_add_account_without_operator(cli) -> None:
    rc, _, err = cli("add", "account", "--name", "A")

    assert rc == 1
    assert "no operators defined - add operator first" in err


def test_add_operator_rejects_public_key_only(cli) -> None:
    operator = KeyPair.generate(Role.OPERATOR)

    rc, _, err = cli("add", "operator", "--name", "O", "--public-key", operator.public_key)

    assert rc == 2
    assert "seed is required" in err
    assert not cli.store_dir.exists()


def test_interactive_add_user(cli) -> None:
    cli.setup("A", "B")
    answers = "\n".join(
        [
            "u",  # user name
            "",  # generate a new user key (default yes)
            "2",  # select account B
            "2026-01-01",  # valid from
            "0",  # valid until
            "Ops, edge",  # tags
        ]
    )

    rc, out, err = cli("add", "user", "-i", stdin=answers + "\n")

    assert rc == 0, err
    assert "select account" in out
    assert 'Success! - added user "u" to "B"' in out
    claim = cli.context().operator_store().read_claim(Role.USER, "u", account="B")
    assert claim.nbf == 1767225600
    assert claim.exp is None
    assert claim.tags == ["edge", "ops"]


def test_interactive_add_user_single_account_is_not_prompted(cli) -> None:
    cli.setup("A")
    answers = "\n".join(["u", "", "0", "0", ""])

    rc, out, err = cli("add", "user", "-i", "--tag", "keep", stdin=answers + "\n")

    assert rc == 0, err
    assert "select account" not in out
    assert 'Success! - added user "u" to "A"' in out
    claim = cli.context().operator_store().read_claim(Role.USER, "u", account="A")
    assert claim.tags == ["keep"]


def test_interactive_add_account_picks_among_operators(cli) -> None:
    cli.setup(operator="O1")
    cli.setup(operator="O2")
    answers = "\n".join(
        [
            "A",  # account name
            "",  # generate a new account key (default yes)
            "2",  # select operator O2
            "0",  # valid from
            "0",  # valid until
        ]
    )

    rc, out, err = cli("add", "account", "-i", stdin=answers + "\n")

    assert rc == 0, err
    assert "select operator" in out
    assert 'Success! - added account "A" to "O2"' in out
    store = cli.context(operator="O2").operator_store()
    account = store.read_claim(Role.ACCOUNT, "A")
    assert account.iss == store.read_claim(Role.OPERATOR, "O2").sub
    assert not cli.context(operator="O1").operator_store().has_claim(Role.ACCOUNT, "A")


def test_add_account_two_operators_is_ambiguous(cli) -> None:
    cli.setup(operator="O1")
    cli.setup(operator="O2")

    rc, _, err = cli("add", "account", "--name", "A")

    assert rc == 1
    assert "multiple operators found - specify --operator" in err

    rc, out, err = cli("--operator", "O1", "add", "account", "--name", "A")
    assert rc == 0, err
    assert 'added account "A" to "O1"' in out


def test_operator_flag_must_be_a_name(cli) -> None:
    cli.setup("A")

    rc, _, err = cli("--operator", "..", "add", "account", "--name", "B")

    assert rc == 1
    assert "config error: --operator must be a name, not a path" in err
    assert not (cli.store_dir.parent / "accounts").exists()


def test_add_user_with_seed_copies_it_to_the_key_store(cli) -> None:
    cli.setup("A")
    user = KeyPair.generate(Role.USER)

    rc, out, err = cli("add", "user", "--name", "u", "--public-key", user.seed, "--json")

    assert rc == 0, err
    payload = json.loads(out)
    assert payload["generated"] is False
    assert payload["public_key"] == user.public_key
    seed_file = cli.keys_dir / "users" / f"{user.public_key}.nk"
    assert payload["key_path"] == str(seed_file)
    assert seed_file.read_text(encoding="utf-8").strip() == user.seed


def test_interactive_abort_on_end_of_input(cli) -> None:
    cli.setup("A")

    rc, _, err = cli("add", "user", "-i", stdin="u\n")

    assert rc == 5
    assert "aborted" in err
    assert not cli.context().operator_store().has_claim(Role.USER, "u", account="A")


def test_config_file_selects_account(cli) -> None:
    cli.setup("A", "B")
    cli.config_path.write_text('account = "A"\n', encoding="utf-8")

    rc, out, err = cli("add", "user", "--name", "u")

    assert rc == 0, err
    assert 'added user "u" to "A"' in out
