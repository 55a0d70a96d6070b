"""
Tests for the transaction journal hash chain and replay.

Critical: replaying the same journal must rebuild byte-identical state.
"""

import json

import pytest

from mojiledger.core.errors import IntegrityError
from mojiledger.core.transaction import CREATE_COLLECTION
from mojiledger.journal import ZERO_HASH, TransactionJournal, hash_entry, replay, verify_chain
from mojiledger.keys import SigningKey
from mojiledger.state import MemoryStateStore


def _signers(n):
    return [SigningKey.from_seed(bytes([i + 7]) * 32) for i in range(n)]


def _journal_with(tmp_path, handler, n=5):
    journal = TransactionJournal(str(tmp_path / "journal.log"))
    live = MemoryStateStore()
    for signer in _signers(n):
        txn = signer.sign_transaction(CREATE_COLLECTION)
        handler.apply(txn, live)
        journal.append(txn)
    return journal, live


def test_append_assigns_seq_and_chains(tmp_path, txn):
    journal = TransactionJournal(str(tmp_path / "journal.log"))

    first = journal.append(txn)
    second = journal.append(txn)

    assert (first.seq, second.seq) == (0, 1)
    assert journal.get_last_hash() == hash_entry(hash_entry(ZERO_HASH, first), second)
    assert [e.transaction for e in journal.read()] == [txn, txn]
    assert [e.seq for e in journal.read(from_seq=1)] == [1]


def test_replay_rebuilds_identical_state(tmp_path, handler):
    journal, live = _journal_with(tmp_path, handler)

    results = [replay(journal, handler) for _ in range(5)]

    assert {r.state_hash for r in results} == {live.state_hash()}
    assert results[0].applied == 5
    assert results[0].store.state == live.state


def test_replay_partial(tmp_path, handler):
    journal, _ = _journal_with(tmp_path, handler)

    result = replay(journal, handler, to_seq=1)

    assert result.applied == 2
    assert len(result.store.state) == 8


def test_replay_empty_journal(tmp_path, handler):
    result = replay(TransactionJournal(str(tmp_path / "empty.log")), handler)

    assert result.applied == 0
    assert result.store.state == {}


def test_verify_chain_valid(tmp_path, handler):
    journal, _ = _journal_with(tmp_path, handler, n=3)

    result = verify_chain(journal.path)

    assert result.valid
    assert result.checked == 3


def test_tampered_signature_detected(tmp_path, handler):
    journal, _ = _journal_with(tmp_path, handler, n=3)
    with open(journal.path) as f:
        lines = f.readlines()
    rec = json.loads(lines[1])
    sig = rec["entry"]["transaction"]["signature"]
    rec["entry"]["transaction"]["signature"] = ("0" if sig[0] != "0" else "1") + sig[1:]
    lines[1] = json.dumps(rec) + "\n"
    with open(journal.path, "w") as f:
        f.writelines(lines)

    result = verify_chain(journal.path)
    assert not result.valid
    assert result.error == "entry_hash mismatch"
    assert result.mismatch_seq == 1

    with pytest.raises(IntegrityError):
        replay(journal, handler)


def test_removed_entry_detected(tmp_path, handler):
    journal, _ = _journal_with(tmp_path, handler, n=3)
    with open(journal.path) as f:
        lines = f.readlines()
    with open(journal.path, "w") as f:
        f.writelines([lines[0], lines[2]])

    result = verify_chain(journal.path)

    assert not result.valid
    assert result.error == "seq gap"


@pytest.mark.parametrize(
    "damage",
    [
        lambda line: line[: len(line) // 2] + "\n",
        lambda line: "[]\n",
        lambda line: json.dumps({"prev_hash": ZERO_HASH}) + "\n",
    ],
    ids=["truncated", "not-an-object", "missing-entry"],
)
def test_malformed_record_detected(tmp_path, handler, txn, damage):
    journal, _ = _journal_with(tmp_path, handler, n=3)
    with open(journal.path) as f:
        lines = f.readlines()
    lines[2] = damage(lines[2])
    with open(journal.path, "w") as f:
        f.writelines(lines)

    result = verify_chain(journal.path)
    assert not result.valid
    assert result.error == "malformed record"
    assert result.checked == 2
    assert "line 3" in result.actual

    with pytest.raises(IntegrityError, match="malformed record at line 3"):
        replay(journal, handler)
    with pytest.raises(IntegrityError, match="malformed record at line 3"):
        journal.append(txn)
    with pytest.raises(IntegrityError):
        journal.get_last_hash()
