
import hashlib

# ---- Chain-constant parameters & helpers (mirror contract) ----

LEAF_TAG = "NFTWL:leaf|"
NODE_TAG = "NFTWL:node|"

HEX_DIGITS = "0123456789abcdef"

SALE_CLOSED = 0
SALE_ALLOWLIST = 1
SALE_PUBLIC = 2

def sha3_hex(s: str) -> str:
    # Tagged inputs are never valid hex, so the sandbox hashes their utf-8 bytes
    return hashlib.sha3_256(s.encode("utf-8")).hexdigest()

def normalize_hash(value: str) -> str:
    if not isinstance(value, str):
        raise ValueError("Hash must be a hex string")
    digest = value.lower()
    if digest.startswith("0x"):
        digest = digest[2:]
    if len(digest) != 64 or any(c not in HEX_DIGITS for c in digest):
        raise ValueError(f"Not a 32-byte hex hash: {value!r}")
    return digest

def leaf_hash(address: str) -> str:
    return sha3_hex(LEAF_TAG + address)

def node_hash(a: str, b: str) -> str:
    # Mirrors on-chain pairing: children hashed in ascending order
    if b < a:
        a, b = b, a
    return sha3_hex(NODE_TAG + a + b)

# ---- Tree construction -------------------------------------------------------

def unique_addresses(addresses) -> list:
    seen = set()
    out = []
    for address in addresses:
        if not isinstance(address, str) or not address:
            raise ValueError("Addresses must be non-empty strings")
        if address in seen:
            continue
        seen.add(address)
        out.append(address)
    return out

def build_levels(leaves: list) -> list:
    """
    Returns every level of the tree, leaves first, root level last.
    An unpaired node at the end of a level is promoted unchanged.
    """
    if not leaves:
        raise ValueError("No leaves to build tree")
    levels = [list(leaves)]
    cur = levels[0]
    while len(cur) > 1:
        nxt = []
        for i in range(0, len(cur) - 1, 2):
            nxt.append(node_hash(cur[i], cur[i + 1]))
        if len(cur) % 2 == 1:
            nxt.append(cur[-1])
        levels.append(nxt)
        cur = nxt
    return levels

def merkle_root(addresses) -> str:
    leaves = [leaf_hash(a) for a in unique_addresses(addresses)]
    return build_levels(leaves)[-1][0]

def merkle_proof(addresses, address: str) -> list:
    """
    Returns the sibling hashes for `address`, leaf level first.
    Pass the result straight to contract.whitelist_mint(proof=...).
    """
    members = unique_addresses(addresses)
    if address not in members:
        raise KeyError(address)
    levels = build_levels([leaf_hash(a) for a in members])

    proof = []
    pos = members.index(address)
    for level in levels[:-1]:
        sib = pos ^ 1
        if sib < len(level):
            proof.append(level[sib])
        pos //= 2
    return proof

def verify_proof(address: str, proof: list, root: str) -> bool:
    # Same fold as the contract's verify_proof
    computed = leaf_hash(address)
    for sibling in proof:
        computed = node_hash(computed, normalize_hash(sibling))
    return computed == normalize_hash(root)

# ---- High-level builders -----------------------------------------------------

def mint_cost(price: int, amount: int) -> int:
    if amount <= 0:
        raise ValueError("Amount must be positive")
    if price < 0:
        raise ValueError("Price must not be negative")
    return price * amount

def build_whitelist_mint(tree, address: str, amount: int, price: int):
    """
    Returns args for contract.whitelist_mint():
        (proof, amount, payment)
    The caller must have approved the minter for `payment` on the currency contract.
    """
    return {
        'proof': tree.proof(address),
        'amount': amount,
        'payment': mint_cost(price, amount)
    }

def build_public_mint(amount: int, price: int):
    """
    Returns args for contract.public_mint():
        (amount, payment)
    """
    return {
        'amount': amount,
        'payment': mint_cost(price, amount)
    }

# ---- Convenience: allowlist tree kept off-chain ------------------------------

class AllowlistTree:
    """
    Off-chain allowlist. Only `root` goes on-chain (set_whitelist_merkle_root);
    members fetch their proof from here.
    """
    def __init__(self, addresses):
        self.addresses = unique_addresses(addresses)
        self.levels = build_levels([leaf_hash(a) for a in self.addresses])

    @property
    def root(self) -> str:
        return self.levels[-1][0]

    def __contains__(self, address) -> bool:
        return address in self.addresses

    def __len__(self) -> int:
        return len(self.addresses)

    def proof(self, address: str) -> list:
        return merkle_proof(self.addresses, address)

    def verify(self, address: str, proof: list) -> bool:
        return verify_proof(address, proof, self.root)
