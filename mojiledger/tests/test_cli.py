"""
Tests for the moji CLI.
"""

import json
import logging

import pytest
from typer.testing import CliRunner

from cli.main import app
from mojiledger.core.addressing import collection_address, moji_prefix
from mojiledger.core.errors import StoreUnavailable
from mojiledger.journal import TransactionJournal
from mojiledger.keys import SigningKey
from mojiledger.state import FileStateStore

runner = CliRunner()


@pytest.fixture
def paths(tmp_path, monkeypatch):
    for var in ("MOJI_KEY_PATH", "MOJI_STATE_URL", "MOJI_JOURNAL_PATH", "MOJI_LOG_FORMAT"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("MOJI_LOG_LEVEL", "CRITICAL")
    root = logging.getLogger()
    saved = (root.level, root.handlers[:])
    yield {
        "key": str(tmp_path / "moji_ed25519"),
        "state": str(tmp_path / "state.json"),
        "journal": str(tmp_path / "journal.log"),
    }
    root.setLevel(saved[0])
    root.handlers[:] = saved[1]


def _create(paths, *extra):
    return runner.invoke(
        app,
        ["create-collection", "--key", paths["key"], "--state", paths["state"], "--journal", paths["journal"], "--json", *extra],
    )


def test_keygen_then_create_collection(paths):
    result = runner.invoke(app, ["keygen", "--key", paths["key"], "--json"])
    assert result.exit_code == 0, result.output
    keygen = json.loads(result.output)
    assert keygen["created"] is True

    result = _create(paths)
    assert result.exit_code == 0, result.output
    created = json.loads(result.output)
    identity = bytes.fromhex(keygen["public_key"])

    assert created["collection"] == collection_address(identity)
    assert len(created["moji"]) == 3
    assert all(m["address"].startswith(moji_prefix(identity)) for m in created["moji"])
    assert len(FileStateStore(paths["state"]).items()) == 4


def test_second_create_is_rejected(paths):
    SigningKey.generate().save_to_file(paths["key"])
    assert _create(paths).exit_code == 0

    result = _create(paths, "--nonce", "again")

    assert result.exit_code == 1
    out = json.loads(result.output)
    assert out["committed"] is False
    assert out["error"] == "DuplicateIdentity"


def test_missing_key_fails(paths):
    result = _create(paths)

    assert result.exit_code == 2


def test_journal_replay_matches_state(paths):
    for i in range(3):
        SigningKey.generate().save_to_file(paths["key"])
        assert _create(paths).exit_code == 0

    result = runner.invoke(app, ["journal", "replay", "--journal", paths["journal"], "--json"])
    assert result.exit_code == 0, result.output
    replayed = json.loads(result.output)

    shown = runner.invoke(app, ["state", "show", "--state", paths["state"], "--json"])
    assert shown.exit_code == 0, shown.output
    state = json.loads(shown.output)

    assert replayed["transactions_replayed"] == 3
    assert replayed["entries"] == state["count"] == 12
    assert replayed["state_hash"] == state["state_hash"]

    verified = runner.invoke(app, ["journal", "verify", "--journal", paths["journal"], "--json"])
    assert verified.exit_code == 0
    assert json.loads(verified.output)["checked"] == 3


def test_verify_command(paths):
    signer = SigningKey.generate()
    signer.save_to_file(paths["key"])
    _create(paths)

    ok = runner.invoke(app, ["verify", signer.public_key_hex(), "--state", paths["state"], "--json"])
    missing = runner.invoke(app, ["verify", "ab" * 32, "--state", paths["state"], "--json"])

    assert ok.exit_code == 0
    assert json.loads(ok.output)["valid"] is True
    assert missing.exit_code == 2


def test_address_commands(paths):
    key = "ab" * 32

    result = runner.invoke(app, ["address", "collection", key, "--json"])
    assert json.loads(result.output)["collection"] == collection_address(bytes.fromhex(key))

    result = runner.invoke(app, ["address", "moji", key, "--json"])
    assert json.loads(result.output)["prefix"] == moji_prefix(bytes.fromhex(key))

    result = runner.invoke(app, ["address", "moji", key, "not-dna"])
    assert result.exit_code == 2


def _unusable_journal(tmp_path, kind):
    if kind == "under-a-file":
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        return str(blocker / "journal.log")
    if kind == "directory":
        target = tmp_path / "journal.d"
        target.mkdir()
        return str(target)
    target = tmp_path / "corrupt.log"
    target.write_text('{"prev_hash": "00", "entry_ha\n')
    return str(target)


@pytest.mark.parametrize("kind", ["under-a-file", "directory", "corrupt"])
def test_unusable_journal_fails_before_commit(paths, tmp_path, kind):
    SigningKey.generate().save_to_file(paths["key"])
    paths["journal"] = _unusable_journal(tmp_path, kind)

    result = _create(paths)

    assert result.exit_code == 2, result.output
    assert json.loads(result.output)["committed"] is False
    assert FileStateStore(paths["state"]).items() == {}


def test_journal_append_failure_after_commit_is_reported(paths, monkeypatch):
    signer = SigningKey.generate()
    signer.save_to_file(paths["key"])

    def disk_full(self, txn):
        raise StoreUnavailable("No space left on device")

    monkeypatch.setattr(TransactionJournal, "append", disk_full)

    result = _create(paths)

    assert result.exit_code == 2
    out = json.loads(result.output)
    assert out["error"] == "StoreUnavailable"
    assert out["message"].startswith("Collection committed to state but not journaled")
    assert collection_address(signer.public_key_bytes()) in FileStateStore(paths["state"]).items()
