"""
waila-cli: identify Bitcoin and Lightning payment strings
"""

__version__ = "0.2.0"

from .finder import PaymentFinder  # noqa: E402
from .options import OutputOptions  # noqa: E402
from .units import DisplayUnit  # noqa: E402

__all__ = ["PaymentFinder", "OutputOptions", "DisplayUnit", "__version__"]
