"""
Result types produced by the payment string classifier.

Every classification is one of a closed set of frozen dataclasses. The
``KIND`` class attribute is the tag written to the ``kind`` field of the JSON
output. Amounts are always carried in millisatoshis.
"""

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Optional, Union


class Network(str, Enum):
    """Bitcoin network a string belongs to."""

    BITCOIN = "bitcoin"
    TESTNET = "testnet"
    SIGNET = "signet"
    REGTEST = "regtest"


@dataclass(frozen=True)
class OnChain:
    """Bitcoin address on a known network."""

    KIND: ClassVar[str] = "OnChain"

    address: str
    network: Network


@dataclass(frozen=True)
class UnifiedUri:
    """BIP21 ``bitcoin:`` payment URI, optionally carrying a Lightning invoice."""

    KIND: ClassVar[str] = "UnifiedUri"

    address: str
    network: Network
    amount_msat: Optional[int] = None
    memo: Optional[str] = None
    invoice: Optional[str] = None


@dataclass(frozen=True)
class Invoice:
    """BOLT11 Lightning invoice."""

    KIND: ClassVar[str] = "Invoice"

    invoice: str
    network: Network
    amount_msat: Optional[int] = None
    memo: Optional[str] = None
    payment_hash: Optional[str] = None
    pubkey: Optional[str] = None


@dataclass(frozen=True)
class Offer:
    """BOLT12 Lightning offer."""

    KIND: ClassVar[str] = "Offer"

    offer: str


@dataclass(frozen=True)
class PublicKey:
    """Compressed secp256k1 node public key."""

    KIND: ClassVar[str] = "PublicKey"

    pubkey: str


@dataclass(frozen=True)
class NodeUri:
    """Lightning node connection string ``pubkey@host:port``."""

    KIND: ClassVar[str] = "NodeUri"

    pubkey: str
    host: str
    port: int


@dataclass(frozen=True)
class LnUrl:
    """LNURL, bech32 encoded or in LUD-17 scheme form, with the URL it points to."""

    KIND: ClassVar[str] = "LnUrl"

    lnurl: str
    url: Optional[str] = None


@dataclass(frozen=True)
class LnAddress:
    """Lightning address in ``user@domain`` form."""

    KIND: ClassVar[str] = "LnAddress"

    lnaddr: str


@dataclass(frozen=True)
class NostrValue:
    """Nostr public key in both hex and ``npub`` form."""

    KIND: ClassVar[str] = "NostrValue"

    pubkey: str
    npub: str


@dataclass(frozen=True)
class Unrecognized:
    """Nothing known was recognized."""

    KIND: ClassVar[str] = "None"


ClassificationResult = Union[
    OnChain,
    UnifiedUri,
    Invoice,
    Offer,
    PublicKey,
    NodeUri,
    LnUrl,
    LnAddress,
    NostrValue,
    Unrecognized,
]

UNRECOGNIZED = Unrecognized()
