"""
Bitcoin denominations and fixed-point amount conversion.

All amounts travel through the program as integer millisatoshis and are only
rescaled for display. Conversions use ``decimal.Decimal`` so no satoshi or
millisatoshi precision is lost.

    1 BTC  = 100,000,000 sat = 100,000,000,000 msat
    1 mBTC = 100,000 sat
    1 sat  = 1,000 msat
"""

import re
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Union

MSAT_PER_SAT = 1_000
SAT_PER_BTC = 100_000_000

_BTC_AMOUNT_RE = re.compile(r"[0-9]+(\.[0-9]+)?")


class DisplayUnit(str, Enum):
    """Unit an amount is shown in."""

    BTC = "btc"
    MBTC = "mbtc"
    SAT = "sat"
    MSAT = "msat"

    @property
    def msat_per_unit(self) -> int:
        return _MSAT_PER_UNIT[self]

    @classmethod
    def parse(cls, text: str) -> "DisplayUnit":
        """
        Look up a unit by name, ignoring case.

        Args:
            text: Unit name such as ``"BTC"`` or ``"sat"``

        Returns:
            DisplayUnit: The matching unit

        Raises:
            ValueError: If the name is not a known unit
        """
        try:
            return cls(text.strip().lower())
        except ValueError:
            choices = ", ".join(unit.value for unit in cls)
            raise ValueError(f"invalid unit {text!r} (choose from {choices})") from None


_MSAT_PER_UNIT = {
    DisplayUnit.BTC: SAT_PER_BTC * MSAT_PER_SAT,
    DisplayUnit.MBTC: SAT_PER_BTC * MSAT_PER_SAT // 1_000,
    DisplayUnit.SAT: MSAT_PER_SAT,
    DisplayUnit.MSAT: 1,
}


def msat_to_unit(msat: int, unit: DisplayUnit) -> Decimal:
    """Rescale a millisatoshi amount into ``unit``."""
    return Decimal(msat) / Decimal(unit.msat_per_unit)


def unit_to_msat(value: Union[Decimal, int], unit: DisplayUnit) -> Decimal:
    """Rescale an amount expressed in ``unit`` back to millisatoshis."""
    return Decimal(value) * Decimal(unit.msat_per_unit)


def btc_to_msat(text: str) -> int:
    """
    Parse a BIP21 ``amount`` value (decimal BTC) into millisatoshis.

    Args:
        text: Amount as written in the URI, e.g. ``"0.0015"``

    Returns:
        int: Amount in millisatoshis, always a whole number of satoshis

    Raises:
        ValueError: If the value is not a plain non-negative decimal or has
            more than 8 decimal places
    """
    if not _BTC_AMOUNT_RE.fullmatch(text):
        raise ValueError(f"invalid BTC amount: {text!r}")
    try:
        btc = Decimal(text)
    except InvalidOperation:
        raise ValueError(f"invalid BTC amount: {text!r}") from None

    msat = unit_to_msat(btc, DisplayUnit.BTC)
    if msat % MSAT_PER_SAT:
        raise ValueError(f"BTC amount finer than a satoshi: {text!r}")
    return int(msat)


def format_amount(value: Decimal) -> str:
    """Render a Decimal in plain notation without trailing zeros."""
    if value == 0:
        return "0"
    return format(value.normalize(), "f")
