import hashlib
import importlib.util
from pathlib import Path

import contracting
import pytest
from contracting.client import ContractingClient
from contracting.compilation import whitelists

PROJECT_ROOT = Path(__file__).resolve().parents[1]
MINTER_PATH = PROJECT_ROOT / "con_nft_minter.py"
LEDGER_PATH = PROJECT_ROOT / "con_nft_ledger.py"
HELPER_PATH = PROJECT_ROOT / "client_helper.py"
TEST_CONTRACTS = Path(__file__).resolve().parent / "contracts"
SUBMISSION_PATH = (
    Path(contracting.__file__).resolve().parent / "contracts" / "submission.s.py"
)

OWNER = "operator"
MINTER = "con_nft_minter"
LEDGER = "con_nft_ledger"
CURRENCY = "con_mock_currency"

ONE = 10**18
PUBLIC_PRICE = ONE // 10
WHITELIST_PRICE = ONE // 20

ALLOWLIST = ["alice", "bob", "carol", "dave", "erin"]


@pytest.fixture(scope="session", autouse=True)
def enable_sha3_and_whitelist():
    whitelists.ALLOWED_BUILTINS.update({"hashlib"})

    if not hasattr(hashlib, "sha3"):
        def _sha3(data):
            if isinstance(data, str):
                data = data.encode("utf-8")
            return hashlib.sha3_256(data).hexdigest()

        setattr(hashlib, "sha3", _sha3)


@pytest.fixture(scope="session")
def helper_module():
    spec = importlib.util.spec_from_file_location("client_helper_tests", HELPER_PATH)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def client():
    client = ContractingClient(signer=OWNER, metering=False)
    client.flush()
    client.set_submission_contract(str(SUBMISSION_PATH))
    return client


@pytest.fixture
def currency(client):
    code = (TEST_CONTRACTS / "con_mock_currency.py").read_text()
    client.submit(code, name=CURRENCY, owner=None)
    return client.get_contract(CURRENCY)


@pytest.fixture
def ledger(client):
    code = LEDGER_PATH.read_text()
    client.submit(code, name=LEDGER, owner=None)
    return client.get_contract(LEDGER)


@pytest.fixture
def minter(client, currency, ledger):
    code = MINTER_PATH.read_text()
    client.submit(
        code,
        name=MINTER,
        owner=None,
        constructor_args={"ledger_contract": LEDGER, "currency_contract": CURRENCY},
    )
    ledger.set_minter(minter=MINTER)
    return client.get_contract(MINTER)


@pytest.fixture
def fund(currency):
    def _fund(account, amount=5 * ONE):
        currency.faucet(to=account, amount=amount)
        currency.approve(amount=amount, to=MINTER, signer=account)

    return _fund


@pytest.fixture
def allowlist(helper_module):
    return helper_module.AllowlistTree(ALLOWLIST)


def emitted(output, event):
    """Indexed and plain fields of every `event` in a full call output."""
    found = []
    for entry in output["events"]:
        if entry["event"] != event:
            continue
        fields = dict(entry.get("data_indexed") or {})
        fields.update(entry.get("data") or {})
        found.append(fields)
    return found
