"""
Domain models — Pydantic types for dip.

    from dip.core.models import BundleConfig, Receipt
"""

from dip.core.models.config import BundleConfig, VersionSet, VMConfig, VMRuntime
from dip.core.models.receipt import Receipt

__all__ = [
    "BundleConfig",
    "Receipt",
    "VMConfig",
    "VMRuntime",
    "VersionSet",
]
