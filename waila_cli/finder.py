"""
Core payment string classification for Bitcoin and Lightning
"""

import logging
import re
from typing import Optional
from urllib.parse import parse_qsl, urlsplit

import base58
import bolt11
from bip_utils import Bech32ChecksumError, Bech32Decoder, Bech32Encoder, SegwitBech32Decoder
from ecdsa import SECP256k1, MalformedPointError, VerifyingKey

from .params import (
    UNRECOGNIZED,
    ClassificationResult,
    Invoice,
    LnAddress,
    LnUrl,
    Network,
    NodeUri,
    NostrValue,
    Offer,
    OnChain,
    PublicKey,
    UnifiedUri,
)
from .units import btc_to_msat

logger = logging.getLogger(__name__)

BECH32_CHARSET = "qpzry9x8gf2tvdw0s3jn54khce6mua7l"
DEFAULT_LIGHTNING_PORT = 9735

# Base58Check version byte -> network
_BASE58_VERSIONS = {
    0x00: Network.BITCOIN,  # P2PKH
    0x05: Network.BITCOIN,  # P2SH
    0x6F: Network.TESTNET,  # P2PKH
    0xC4: Network.TESTNET,  # P2SH
}

_SEGWIT_HRPS = {
    "bc": Network.BITCOIN,
    "tb": Network.TESTNET,
    "bcrt": Network.REGTEST,
}

# BOLT11 currency prefix -> network
_INVOICE_CURRENCIES = {
    "bc": Network.BITCOIN,
    "tb": Network.TESTNET,
    "tbs": Network.SIGNET,
    "bcrt": Network.REGTEST,
}

# LUD-17 schemes and the scheme they stand in for
_LNURL_SCHEMES = {
    "lnurlp": "https",
    "lnurlw": "https",
    "lnurlc": "https",
    "keyauth": "https",
}

_BECH32_BODY = f"[{BECH32_CHARSET}]+"
_OFFER_RE = re.compile(rf"^lno1{_BECH32_BODY}$")
_LNURL_RE = re.compile(rf"^lnurl1{_BECH32_BODY}$")
_NODE_PUBKEY_RE = re.compile(r"^0[23][0-9a-fA-F]{64}$")
_XONLY_PUBKEY_RE = re.compile(r"^[0-9a-fA-F]{64}$")
_NODE_URI_RE = re.compile(
    r"^(?P<pubkey>[0-9a-fA-F]{66})@(?P<host>\[[0-9a-fA-F:.]+\]|[^\s:@\[\]]+)(?::(?P<port>\d{1,5}))?$"
)
_LN_ADDRESS_RE = re.compile(
    r"^[a-z0-9\-_.+]+@[a-z0-9\-]+(\.[a-z0-9\-]+)+$", re.IGNORECASE
)


def _is_secp256k1_point(raw: bytes) -> bool:
    """Check that ``raw`` is a 33-byte compressed point on secp256k1."""
    try:
        VerifyingKey.from_string(raw, curve=SECP256k1)
    except (MalformedPointError, ValueError):
        return False
    return True


def _normalize_case(text: str) -> str:
    """Bech32 strings may be all upper case (QR codes); everything below expects lower."""
    return text.lower() if text.isupper() else text


class PaymentFinder:
    """
    Classifies strings as Bitcoin and Lightning payment payloads.

    Decoding is delegated to ``base58``, ``bip_utils``, ``bolt11`` and
    ``ecdsa``. No method raises for malformed input; strings that match
    nothing classify as ``Unrecognized``.
    """

    @staticmethod
    def classify(query: str) -> ClassificationResult:
        """
        Work out what kind of payment string ``query`` is.

        Args:
            query (str): Any user-supplied string

        Returns:
            ClassificationResult: The matching variant, or ``UNRECOGNIZED``
        """
        text = query.strip()
        if not text:
            return UNRECOGNIZED

        if text.lower().startswith("lightning:"):
            text = text[len("lightning:"):]

        for step in (
            PaymentFinder.parse_bip21,
            PaymentFinder.parse_invoice,
            PaymentFinder.parse_offer,
            PaymentFinder.parse_lnurl,
            PaymentFinder.parse_address,
            PaymentFinder.parse_node_uri,
            PaymentFinder.parse_node_pubkey,
            PaymentFinder.parse_lightning_address,
        ):
            result = step(text)
            if result is not None:
                logger.debug("Classified query as %s via %s", result.KIND, step.__name__)
                return result

        logger.debug("Query did not match any known payment format")
        return UNRECOGNIZED

    @staticmethod
    def parse_address(address: str) -> Optional[OnChain]:
        """
        Validate an on-chain address and determine its network.

        Legacy addresses are checked with Base58Check, segwit addresses with
        Bech32/Bech32m including witness version rules.

        Args:
            address (str): The Bitcoin address to validate

        Returns:
            Optional[OnChain]: The address (segwit forms lower-cased) and its
            network, or None if the address is invalid
        """
        if not address or not isinstance(address, str):
            return None

        lowered = address.lower()
        separator = lowered.rfind("1")
        if separator > 0 and lowered[:separator] in _SEGWIT_HRPS:
            hrp = lowered[:separator]
            try:
                SegwitBech32Decoder.Decode(hrp, _normalize_case(address))
            except (ValueError, Bech32ChecksumError) as exc:
                logger.debug("Rejected segwit address: %s", exc)
                return None
            return OnChain(address=lowered, network=_SEGWIT_HRPS[hrp])

        # Base58Check addresses are between 26 and 35 characters
        if len(address) < 26 or len(address) > 35:
            return None
        try:
            payload = base58.b58decode_check(address)
        except ValueError as exc:
            logger.debug("Rejected base58 address: %s", exc)
            return None
        if len(payload) != 21 or payload[0] not in _BASE58_VERSIONS:
            return None
        return OnChain(address=address, network=_BASE58_VERSIONS[payload[0]])

    @staticmethod
    def parse_bip21(text: str) -> Optional[UnifiedUri]:
        """
        Parse a BIP21 ``bitcoin:`` URI.

        The address must be valid. ``amount`` is decimal BTC, ``message``
        (falling back to ``label``) becomes the memo, and a ``lightning``
        parameter holding a valid invoice is attached. Unknown ``req-``
        parameters make the whole URI invalid, as BIP21 requires.

        Args:
            text (str): Candidate URI

        Returns:
            Optional[UnifiedUri]: The parsed URI, or None
        """
        if not text.lower().startswith("bitcoin:"):
            return None

        try:
            parts = urlsplit(text)
        except ValueError as exc:
            logger.debug("Rejected BIP21 URI: %s", exc)
            return None
        onchain = PaymentFinder.parse_address(parts.path or parts.netloc)
        if onchain is None:
            return None

        params = {}
        for key, value in parse_qsl(parts.query, keep_blank_values=True):
            key = key.lower()
            if key in params:
                logger.debug("Duplicate BIP21 parameter %r", key)
                return None
            params[key] = value

        unknown_required = [key for key in params if key.startswith("req-")]
        if unknown_required:
            logger.debug("Unsupported required BIP21 parameters: %s", unknown_required)
            return None

        amount_msat = None
        if "amount" in params:
            try:
                amount_msat = btc_to_msat(params["amount"])
            except ValueError as exc:
                logger.debug("Rejected BIP21 amount: %s", exc)
                return None

        invoice = None
        if params.get("lightning"):
            invoice = PaymentFinder.parse_invoice(params["lightning"])
        if amount_msat is None and invoice is not None:
            amount_msat = invoice.amount_msat

        return UnifiedUri(
            address=onchain.address,
            network=onchain.network,
            amount_msat=amount_msat,
            memo=params.get("message") or params.get("label") or None,
            invoice=invoice.invoice if invoice is not None else None,
        )

    @staticmethod
    def parse_invoice(text: str) -> Optional[Invoice]:
        """
        Decode a BOLT11 invoice.

        Args:
            text (str): Candidate invoice, any case

        Returns:
            Optional[Invoice]: The decoded invoice, or None
        """
        lowered = text.lower()
        if not lowered.startswith("ln") or lowered.startswith(("lno1", "lnurl")):
            return None

        try:
            decoded = bolt11.decode(lowered)
        except Exception as exc:
            logger.debug("Rejected BOLT11 invoice: %s", exc)
            return None

        network = _INVOICE_CURRENCIES.get(decoded.currency)
        if network is None:
            logger.debug("Unknown invoice currency %r", decoded.currency)
            return None

        amount_msat = decoded.amount_msat
        return Invoice(
            invoice=lowered,
            network=network,
            amount_msat=int(amount_msat) if amount_msat is not None else None,
            memo=decoded.description or None,
            payment_hash=decoded.payment_hash,
            pubkey=decoded.payee,
        )

    @staticmethod
    def parse_offer(text: str) -> Optional[Offer]:
        # BOLT12 strings may be split with "+" and whitespace
        offer = re.sub(r"\+\s*", "", text.lower())
        if not _OFFER_RE.match(offer):
            return None
        return Offer(offer=offer)

    @staticmethod
    def parse_lnurl(text: str) -> Optional[LnUrl]:
        """
        Recognize an LNURL, either bech32 encoded or in LUD-17 scheme form.

        Args:
            text (str): Candidate LNURL

        Returns:
            Optional[LnUrl]: The LNURL with the URL it stands for, or None
        """
        lowered = text.lower()
        if _LNURL_RE.match(lowered):
            try:
                raw = Bech32Decoder.Decode("lnurl", lowered)
                url = raw.decode("utf-8")
            except (ValueError, Bech32ChecksumError) as exc:
                logger.debug("Rejected bech32 LNURL: %s", exc)
                return None
            return LnUrl(lnurl=lowered, url=url)

        scheme, sep, rest = text.partition("://")
        replacement = _LNURL_SCHEMES.get(scheme.lower())
        if sep and replacement and rest:
            host = rest.split("/", 1)[0]
            # Plain http is only allowed for onion services
            if host.endswith(".onion"):
                replacement = "http"
            return LnUrl(lnurl=text, url=f"{replacement}://{rest}")
        return None

    @staticmethod
    def parse_node_uri(text: str) -> Optional[NodeUri]:
        match = _NODE_URI_RE.match(text)
        if not match:
            return None

        pubkey = match.group("pubkey").lower()
        if not pubkey.startswith(("02", "03")) or not _is_secp256k1_point(bytes.fromhex(pubkey)):
            return None

        port = int(match.group("port")) if match.group("port") else DEFAULT_LIGHTNING_PORT
        if not 0 < port < 65536:
            return None
        return NodeUri(pubkey=pubkey, host=match.group("host"), port=port)

    @staticmethod
    def parse_node_pubkey(text: str) -> Optional[PublicKey]:
        if not _NODE_PUBKEY_RE.match(text):
            return None
        raw = bytes.fromhex(text)
        if not _is_secp256k1_point(raw):
            return None
        return PublicKey(pubkey=raw.hex())

    @staticmethod
    def parse_lightning_address(text: str) -> Optional[LnAddress]:
        if not _LN_ADDRESS_RE.match(text):
            return None
        return LnAddress(lnaddr=text.lower())

    @staticmethod
    def decode_nostr(query: str) -> Optional[NostrValue]:
        """
        Decode a Nostr public key given as 64 hex characters or ``npub1...``.

        Args:
            query (str): Candidate key

        Returns:
            Optional[NostrValue]: Both encodings of the key, or None
        """
        text = _normalize_case(query.strip())
        if _XONLY_PUBKEY_RE.match(text):
            raw = bytes.fromhex(text)
        elif text.startswith("npub1"):
            try:
                raw = Bech32Decoder.Decode("npub", text)
            except (ValueError, Bech32ChecksumError) as exc:
                logger.debug("Rejected npub: %s", exc)
                return None
        else:
            return None

        # x-only keys are the even-y compressed point
        if len(raw) != 32 or not _is_secp256k1_point(b"\x02" + raw):
            return None
        return NostrValue(pubkey=raw.hex(), npub=Bech32Encoder.Encode("npub", raw))
