"""
Address registry - address validation and the well-known wallets.

The seed list is registered on startup so the leaderboard is never empty.
The bucket sets are used by the synthetic generator to pick a profile.
"""

import re
from typing import NamedTuple


ADDRESS_PATTERN = re.compile(r"^0x[0-9a-f]{40}$")


class InvalidAddressError(ValueError):
    """Raised when a string is not a 0x-prefixed 20-byte hex address."""
    pass


class KnownWallet(NamedTuple):
    address: str
    name: str
    description: str


def is_valid_address(address: object) -> bool:
    """Case-insensitive check against ``^0x[0-9a-f]{40}$``."""
    if not isinstance(address, str):
        return False
    return ADDRESS_PATTERN.match(address.lower()) is not None


def normalize_address(address: object) -> str:
    """
    Return the canonical (lower-case) form of an address.

    Raises InvalidAddressError if the input is not a valid address.
    """
    if not is_valid_address(address):
        raise InvalidAddressError(f"Invalid Ethereum address format: {address!r}")
    return address.lower()


def short_address(address: str) -> str:
    """0x1234...abcd, used for default display names."""
    return f"{address[:6]}...{address[-4:]}"


KNOWN_WALLETS: list[KnownWallet] = [
    KnownWallet("0x9f8f72aa9304c8b593d555f12ef6589cc3a579a2", "MakerDAO", "DeFi Protocol - MakerDAO"),
    KnownWallet("0x3cd751e6b0078be393132286c442345e5dc49699", "Compound Finance", "DeFi Protocol - Compound"),
    KnownWallet("0x1f9840a85d5af5bf1d1762f925bdaddc4201f984", "Uniswap", "DEX Protocol - Uniswap"),
    KnownWallet("0x514910771af9ca656af840dff83e8264ecf986ca", "Chainlink", "Oracle Network - Chainlink"),
    KnownWallet("0x7d1afa7b718fb893db30a3abc0cfc608aacfebb0", "Polygon", "Layer 2 - Polygon"),
    KnownWallet("0x6b175474e89094c44da98b954eedeac495271d0f", "Dai Stablecoin", "Stablecoin - Dai"),
    KnownWallet("0xd8da6bf26964af9d7eed9e03e53415d37aa96045", "Vitalik Buterin", "Ethereum Founder"),
    KnownWallet("0x28c6c06298d514db089934071355e5743bf21d60", "Binance Hot Wallet", "Binance Exchange"),
    KnownWallet("0x47ac0fb4f2d84898e4d9e7b4dab3c24507a6d503", "Binance Cold Wallet", "Binance Cold Storage"),
    KnownWallet("0x503828976d22510aad0201ac7ec88293211d23da", "Coinbase Pro", "Coinbase Exchange"),
]

# Buckets for the synthetic generator (lower-case)
EXCHANGE_ADDRESSES = frozenset({
    "0x28c6c06298d514db089934071355e5743bf21d60",
    "0x47ac0fb4f2d84898e4d9e7b4dab3c24507a6d503",
    "0x503828976d22510aad0201ac7ec88293211d23da",
})

PROTOCOL_ADDRESSES = frozenset({
    "0x9f8f72aa9304c8b593d555f12ef6589cc3a579a2",
    "0x3cd751e6b0078be393132286c442345e5dc49699",
    "0x1f9840a85d5af5bf1d1762f925bdaddc4201f984",
})

INDIVIDUAL_ADDRESSES = frozenset({
    "0xd8da6bf26964af9d7eed9e03e53415d37aa96045",
})
