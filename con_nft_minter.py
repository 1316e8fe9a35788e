"""
FIXED-SUPPLY NFT MINTER

Sale-phase gated minting with per-address quotas, a merkle allowlist and
an owner-controlled treasury.
  - Phases: closed -> allowlist -> public (owner moves freely between them)
  - Allowlist membership: sorted-pair SHA3 merkle proof against a stored root
  - Unit ownership lives in a separate ledger contract (minter-gated mint)

All counters and the treasury are written before any call leaves this
contract (currency pull, ledger mint, withdrawal transfer).
"""

# -----------------------------------------------------------------------------
# Parameters & Helpers
# -----------------------------------------------------------------------------

SALE_PHASES = ['closed', 'allowlist', 'public']

HEX_DIGITS = '0123456789abcdef'
ZERO_ROOT = '0' * 64

def leaf_hash(address: str):
    return hashlib.sha3("NFTWL:leaf|" + address)

def node_hash(a: str, b: str):
    # Sort-normalised pairing, proofs carry no left/right flags
    if a <= b:
        return hashlib.sha3("NFTWL:node|" + a + b)
    return hashlib.sha3("NFTWL:node|" + b + a)

def normalize_hash(value: Any):
    if not isinstance(value, str):
        return None
    digest = value.lower()
    if digest.startswith('0x'):
        digest = digest[2:]
    if len(digest) != 64:
        return None
    for c in digest:
        if c not in HEX_DIGITS:
            return None
    return digest

def verify_proof(address: str, proof: Any, root: str):
    if not isinstance(proof, list):
        return False
    computed = leaf_hash(address)
    for sibling in proof:
        sibling = normalize_hash(sibling)
        if sibling is None:
            return False
        computed = node_hash(computed, sibling)
    return computed == root

# -----------------------------------------------------------------------------
# State
# -----------------------------------------------------------------------------

# name, symbol, owner, ledger_contract, currency_contract
metadata = Hash()

# sale parameters and the current phase
config = Hash()

# (address, 'public' | 'whitelist') -> int (monotonic)
mint_records = Hash(default_value=0)

# 'total' | 'whitelist' -> int (monotonic)
supply = Hash(default_value=0)

# currency units collected and not yet withdrawn
treasury = Variable()

# Events
MintEvent = LogEvent('Mint', {
    'to': {'type': str, 'idx': True},
    'phase': {'type': str, 'idx': True},
    'amount': {'type': int},
    'first_token_id': {'type': int},
    'payment': {'type': int}
})

SaleStateChangedEvent = LogEvent('SaleStateChanged', {
    'phase': {'type': str, 'idx': True},
    'state': {'type': int}
})

ConfigChangedEvent = LogEvent('ConfigChanged', {
    'key': {'type': str, 'idx': True},
    'value': {'type': str}
})

WithdrawEvent = LogEvent('Withdraw', {
    'to': {'type': str, 'idx': True},
    'amount': {'type': int}
})

OwnershipTransferredEvent = LogEvent('OwnershipTransferred', {
    'previous_owner': {'type': str, 'idx': True},
    'new_owner': {'type': str, 'idx': True}
})

# -----------------------------------------------------------------------------
# Construction
# -----------------------------------------------------------------------------

@construct
def seed(ledger_contract: str = 'con_nft_ledger',
         currency_contract: str = 'currency',
         name: str = 'NFT',
         symbol: str = 'NFT'):
    metadata['name'] = name
    metadata['symbol'] = symbol
    metadata['owner'] = ctx.caller
    metadata['ledger_contract'] = ledger_contract
    metadata['currency_contract'] = currency_contract

    config['collection_size'] = 1000
    config['public_mint_price'] = 100000000000000000
    config['public_max_mint_amount'] = 3
    config['whitelist_allocation'] = 500
    config['whitelist_mint_price'] = 50000000000000000
    config['whitelist_max_mint_amount'] = 1
    config['whitelist_merkle_root'] = ZERO_ROOT
    config['base_uri'] = 'https://exampleUri.com/'
    config['unrevealed_uri'] = 'https://exampleUnrevealedUri.com'
    config['is_revealed'] = False
    config['sale_phase'] = 'closed'

    supply['total'] = 0
    supply['whitelist'] = 0
    treasury.set(0)

# -----------------------------------------------------------------------------
# Access control
# -----------------------------------------------------------------------------

def assert_owner():
    assert ctx.caller == metadata['owner'], 'Unauthorized'

def set_config(key: str, value: Any):
    config[key] = value
    ConfigChangedEvent({'key': key, 'value': str(value)})

@export
def transfer_ownership(new_owner: str):
    assert_owner()
    assert new_owner != '', 'InvalidOwner'

    previous = metadata['owner']
    metadata['owner'] = new_owner

    OwnershipTransferredEvent({'previous_owner': previous, 'new_owner': new_owner})

# -----------------------------------------------------------------------------
# Views
# -----------------------------------------------------------------------------

@export
def get_metadata():
    return {
        'name': metadata['name'],
        'symbol': metadata['symbol'],
        'owner': metadata['owner'],
        'ledger_contract': metadata['ledger_contract'],
        'currency_contract': metadata['currency_contract']
    }

@export
def get_owner():
    return metadata['owner']

@export
def get_config():
    return {
        'collection_size': config['collection_size'],
        'public_mint_price': config['public_mint_price'],
        'public_max_mint_amount': config['public_max_mint_amount'],
        'whitelist_allocation': config['whitelist_allocation'],
        'whitelist_mint_price': config['whitelist_mint_price'],
        'whitelist_max_mint_amount': config['whitelist_max_mint_amount'],
        'whitelist_merkle_root': config['whitelist_merkle_root'],
        'base_uri': config['base_uri'],
        'unrevealed_uri': config['unrevealed_uri'],
        'is_revealed': config['is_revealed'],
        'sale_state': SALE_PHASES.index(config['sale_phase'])
    }

@export
def get_sale_state():
    return SALE_PHASES.index(config['sale_phase'])

@export
def get_sale_phase():
    return config['sale_phase']

@export
def get_mint_record(address: str):
    return {
        'public_minted': mint_records[address, 'public'],
        'whitelist_minted': mint_records[address, 'whitelist']
    }

@export
def get_total_supply():
    return supply['total']

@export
def get_whitelist_minted():
    return supply['whitelist']

@export
def get_remaining_supply():
    remaining = config['collection_size'] - supply['total']
    if remaining < 0:
        return 0
    return remaining

@export
def get_treasury():
    return treasury.get()

@export
def balance_of(address: str):
    ledger = importlib.import_module(metadata['ledger_contract'])
    return ledger.balance_of(address=address)

@export
def verify_allowlist(address: str, proof: Any):
    return verify_proof(address, proof, config['whitelist_merkle_root'])

@export
def token_uri(token_id: int):
    assert token_id >= 0, 'InvalidTokenId'
    if not config['is_revealed']:
        return config['unrevealed_uri']
    return config['base_uri'] + str(token_id) + '.json'

# -----------------------------------------------------------------------------
# Configuration (owner only)
# -----------------------------------------------------------------------------

@export
def change_metadata(key: str, value: str):
    assert_owner()
    assert key in ('name', 'symbol'), 'InvalidMetadataKey'
    metadata[key] = value

@export
def set_collection_size(collection_size: int):
    assert_owner()
    assert collection_size > 0, 'InvalidCollectionSize'
    assert collection_size >= config['whitelist_allocation'], 'InvalidCollectionSize'
    set_config('collection_size', collection_size)

@export
def set_public_mint_price(price: int):
    assert_owner()
    assert price >= 0, 'InvalidMintPrice'
    set_config('public_mint_price', price)

@export
def set_public_max_mint_amount(max_mint_amount: int):
    assert_owner()
    assert max_mint_amount >= 0, 'InvalidMaxMintAmount'
    set_config('public_max_mint_amount', max_mint_amount)

@export
def set_whitelist_allocation(allocation: int):
    assert_owner()
    assert 0 <= allocation <= config['collection_size'], 'InvalidWhitelistAllocation'
    set_config('whitelist_allocation', allocation)

@export
def set_whitelist_mint_price(price: int):
    assert_owner()
    assert price >= 0, 'InvalidMintPrice'
    set_config('whitelist_mint_price', price)

@export
def set_whitelist_max_mint_amount(max_mint_amount: int):
    assert_owner()
    assert max_mint_amount >= 0, 'InvalidMaxMintAmount'
    set_config('whitelist_max_mint_amount', max_mint_amount)

@export
def set_whitelist_merkle_root(root: str):
    assert_owner()
    normalized = normalize_hash(root)
    assert normalized is not None, 'InvalidMerkleRoot'
    set_config('whitelist_merkle_root', normalized)

@export
def set_unrevealed_uri(uri: str):
    assert_owner()
    set_config('unrevealed_uri', uri)

@export
def set_base_uri(uri: str):
    assert_owner()
    set_config('base_uri', uri)

@export
def toggle_revealed():
    assert_owner()
    set_config('is_revealed', not config['is_revealed'])

@export
def set_sale_state(state: int):
    assert_owner()
    assert 0 <= state < len(SALE_PHASES), 'InvalidSaleState'

    phase = SALE_PHASES[state]
    config['sale_phase'] = phase

    SaleStateChangedEvent({'phase': phase, 'state': state})

# -----------------------------------------------------------------------------
# Minting
# -----------------------------------------------------------------------------

def assert_mint_args(amount: int, payment: int):
    assert amount > 0, 'InvalidMintAmount'
    assert payment >= 0, 'InvalidPayment'

def assert_collection_capacity(amount: int):
    assert supply['total'] + amount <= config['collection_size'], 'ExceedsCollectionSize'

def collect_and_mint(phase: str, amount: int, payment: int):
    # Counters are already committed; only external calls from here on
    if payment > 0:
        currency = importlib.import_module(metadata['currency_contract'])
        currency.transfer_from(amount=payment, to=ctx.this, main_account=ctx.caller)

    ledger = importlib.import_module(metadata['ledger_contract'])
    first_token_id = ledger.mint(to=ctx.caller, amount=amount)

    MintEvent({
        'to': ctx.caller,
        'phase': phase,
        'amount': amount,
        'first_token_id': first_token_id,
        'payment': payment
    })
    return first_token_id

@export
def public_mint(amount: int, payment: int):
    assert config['sale_phase'] == 'public', 'SaleIsClosed'
    assert_mint_args(amount, payment)

    minted = mint_records[ctx.caller, 'public']
    assert minted + amount <= config['public_max_mint_amount'], 'MintingTooMany'
    assert payment >= config['public_mint_price'] * amount, 'InsufficientFunds'
    assert_collection_capacity(amount)

    mint_records[ctx.caller, 'public'] = minted + amount
    supply['total'] += amount
    treasury.set(treasury.get() + payment)

    return collect_and_mint('public', amount, payment)

@export
def whitelist_mint(proof: Any, amount: int, payment: int):
    assert config['sale_phase'] == 'allowlist', 'SaleIsClosed'
    assert_mint_args(amount, payment)

    minted = mint_records[ctx.caller, 'whitelist']
    assert minted + amount <= config['whitelist_max_mint_amount'], 'MintingTooMany'
    assert verify_proof(ctx.caller, proof, config['whitelist_merkle_root']), 'InvalidProof'
    assert payment >= config['whitelist_mint_price'] * amount, 'InsufficientFunds'
    assert supply['whitelist'] + amount <= config['whitelist_allocation'], 'ExceedsWhitelistAllocation'
    assert_collection_capacity(amount)

    mint_records[ctx.caller, 'whitelist'] = minted + amount
    supply['whitelist'] += amount
    supply['total'] += amount
    treasury.set(treasury.get() + payment)

    return collect_and_mint('allowlist', amount, payment)

# -----------------------------------------------------------------------------
# Treasury
# -----------------------------------------------------------------------------

@export
def withdraw():
    assert_owner()

    amount = treasury.get()
    if amount == 0:
        return 0

    owner = metadata['owner']
    treasury.set(0)

    currency = importlib.import_module(metadata['currency_contract'])
    currency.transfer(amount=amount, to=owner)

    WithdrawEvent({'to': owner, 'amount': amount})
    return amount
