"""Fixture composition: per-test context, page decoration and lifecycle hooks.

The pytest plugin lives in ``storefront_e2e.fixtures.plugin`` and is not
imported here, so the building blocks can be used without pytest.
"""

from .context import COMPONENTS, TestContext
from .hooks import LifecycleHooks
from .page import EnhancedPage

__all__ = [
    "TestContext",
    "COMPONENTS",
    "EnhancedPage",
    "LifecycleHooks",
]
