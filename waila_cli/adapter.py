"""
Bridge between the command line and the payment classifier.
"""

import logging

from .errors import InternalError
from .finder import PaymentFinder
from .options import OutputOptions
from .params import ClassificationResult, Unrecognized

logger = logging.getLogger(__name__)


def classify_query(query: str, options: OutputOptions) -> ClassificationResult:
    """
    Classify ``query``, trying Nostr keys as well when enabled.

    The result is never filtered here; hiding unrecognized results is a
    display decision made by the caller.

    Args:
        query: Raw string from the command line
        options: Run options; only ``nostr`` is consulted

    Returns:
        ClassificationResult: What the query was recognized as

    Raises:
        InternalError: If the classifier fails unexpectedly
    """
    try:
        result = PaymentFinder.classify(query)
        if isinstance(result, Unrecognized) and options.nostr:
            logger.debug("Trying Nostr key decoding")
            nostr = PaymentFinder.decode_nostr(query)
            if nostr is not None:
                result = nostr
    except Exception as exc:
        logger.debug("Classifier failed", exc_info=True)
        raise InternalError(f"failed to classify query: {exc}") from exc

    return result
