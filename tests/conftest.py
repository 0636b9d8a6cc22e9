"""Shared fixtures for waila-cli tests."""

from types import SimpleNamespace

import pytest

from waila_cli import finder

from .samples import FAKE_INVOICE, GENERATOR_PUBKEY, PAYMENT_HASH


@pytest.fixture
def fake_bolt11(monkeypatch):
    """
    Replace ``bolt11.decode`` with a lookup table.

    Returns the table; tests add ``invoice -> decoded`` entries. Unknown
    invoices raise ValueError like a failed decode.
    """
    invoices = {
        FAKE_INVOICE: SimpleNamespace(
            currency="bc",
            amount_msat=250_000_000,
            description="1 cup coffee",
            payment_hash=PAYMENT_HASH,
            payee=GENERATOR_PUBKEY,
        ),
    }

    def decode(text):
        try:
            return invoices[text]
        except KeyError:
            raise ValueError(f"not a test invoice: {text}") from None

    monkeypatch.setattr(finder.bolt11, "decode", decode)
    return invoices
