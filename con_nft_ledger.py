"""
NFT OWNERSHIP LEDGER

Holds token id -> owner and per-address balances for units created by the
configured minter contract. Sequential ids, starting at 1.
"""

# -----------------------------------------------------------------------------
# State
# -----------------------------------------------------------------------------

# token_id -> address
owners = Hash()

# address -> int
balances = Hash(default_value=0)

# name, symbol, operator, minter
metadata = Hash()

next_token_id = Variable()

# Events
TransferEvent = LogEvent('Transfer', {
    'from': {'type': str, 'idx': True},
    'to': {'type': str, 'idx': True},
    'token_id': {'type': int, 'idx': True}
})

# -----------------------------------------------------------------------------
# Construction
# -----------------------------------------------------------------------------

@construct
def seed(name: str = 'NFT', symbol: str = 'NFT'):
    metadata['name'] = name
    metadata['symbol'] = symbol
    metadata['operator'] = ctx.caller
    metadata['minter'] = None

    next_token_id.set(1)

# -----------------------------------------------------------------------------
# Views
# -----------------------------------------------------------------------------

@export
def get_metadata():
    return {
        'name': metadata['name'],
        'symbol': metadata['symbol'],
        'operator': metadata['operator'],
        'minter': metadata['minter']
    }

@export
def balance_of(address: str):
    return balances[address]

@export
def owner_of(token_id: int):
    owner = owners[token_id]
    assert owner is not None, 'Nonexistent token'
    return owner

@export
def get_total_minted():
    return next_token_id.get() - 1

# -----------------------------------------------------------------------------
# Minting
# -----------------------------------------------------------------------------

@export
def set_minter(minter: str):
    assert ctx.caller == metadata['operator'], 'Only operator can set minter'
    metadata['minter'] = minter

@export
def mint(to: str, amount: int):
    assert ctx.caller == metadata['minter'], 'Only minter can mint'
    assert amount > 0, 'Amount must be positive'

    first = next_token_id.get()
    next_token_id.set(first + amount)
    balances[to] += amount

    for token_id in range(first, first + amount):
        owners[token_id] = to
        TransferEvent({'from': ctx.caller, 'to': to, 'token_id': token_id})

    return first
