"""
Base class for Huissier tests.

Provides the standard test structure:
- component_name / test_category labels
- Per-test lifecycle hooks, sync and async
- A logger per test class
- Direct execution (``python path/to/test_file.py``)

Test classes inherit from ServiceTest and define test_* methods (sync or
async); pytest collects them as usual.
"""

import logging
import sys

import pytest


class ReporterAdapter(logging.LoggerAdapter):
    """Logger accepting a ``context`` label: reporter.info("msg", context="Setup")."""

    def process(self, msg, kwargs):
        context = kwargs.pop("context", None)
        if context:
            msg = f"[{context}] {msg}"
        return msg, kwargs


class ServiceTest:
    """
    Base class for component tests.

    Required class attributes:
        component_name: str - Name of component being tested
        test_category: str - Category: "unit", "integration", or "e2e"

    Lifecycle hooks (all optional):
        setup_test() / async_setup_test() - Before each test
        teardown_test() / async_teardown_test() - After each test

    Example:
        class TestLedger(ServiceTest):
            component_name = "huissier"
            test_category = "integration"

            async def async_setup_test(self):
                self.ledger = InMemoryVerificationLedger()

            async def test_empty(self):
                assert await self.ledger.get("x") is None

        if __name__ == "__main__":
            TestLedger.run_as_main()
    """

    component_name: str = "huissier"
    test_category: str = "unit"

    @property
    def reporter(self) -> "ReporterAdapter":
        return ReporterAdapter(
            logging.getLogger(f"tests.{self.test_category}.{self.__class__.__name__}"),
            {},
        )

    def setup_test(self) -> None:
        """Optional: sync setup before each test."""

    def teardown_test(self) -> None:
        """Optional: sync cleanup after each test."""

    async def async_setup_test(self) -> None:
        """Optional: async setup before each test."""

    async def async_teardown_test(self) -> None:
        """Optional: async cleanup after each test."""

    @pytest.fixture(autouse=True)
    async def _service_test_lifecycle(self):
        self.setup_test()
        await self.async_setup_test()
        try:
            yield
        finally:
            await self.async_teardown_test()
            self.teardown_test()

    @classmethod
    def run_as_main(cls) -> None:
        """Run the module defining this class under pytest."""
        module = sys.modules[cls.__module__]
        sys.exit(pytest.main([module.__file__, "-v"]))
