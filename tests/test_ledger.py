import pytest

from conftest import MINTER, OWNER


def test_seed_initializes_metadata(ledger):
    metadata = ledger.get_metadata()
    assert metadata["operator"] == OWNER
    assert metadata["minter"] is None
    assert ledger.get_total_minted() == 0


def test_only_operator_sets_minter(ledger):
    with pytest.raises(AssertionError):
        ledger.set_minter(minter="mallory", signer="mallory")

    ledger.set_minter(minter=MINTER)
    assert ledger.get_metadata()["minter"] == MINTER


def test_direct_mint_is_rejected(minter, ledger):
    with pytest.raises(AssertionError):
        ledger.mint(to="mallory", amount=5, signer="mallory")

    with pytest.raises(AssertionError):
        ledger.mint(to=OWNER, amount=1)

    assert ledger.balance_of(address="mallory") == 0
    assert ledger.get_total_minted() == 0


def test_mint_assigns_sequential_ids(ledger):
    ledger.set_minter(minter="issuer")

    assert ledger.mint(to="alice", amount=2, signer="issuer") == 1
    assert ledger.mint(to="bob", amount=1, signer="issuer") == 3

    assert ledger.owner_of(token_id=1) == "alice"
    assert ledger.owner_of(token_id=2) == "alice"
    assert ledger.owner_of(token_id=3) == "bob"
    assert ledger.balance_of(address="alice") == 2
    assert ledger.get_total_minted() == 3


def test_owner_of_unknown_token(ledger):
    with pytest.raises(AssertionError):
        ledger.owner_of(token_id=1)
