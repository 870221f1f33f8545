"""Shared pytest fixtures and utilities for farm sales tests."""

from __future__ import annotations

import sys
import uuid
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import Callable, Dict, Iterator, Optional

import pytest

# Ensure source packages are importable without installation.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "src"

for candidate in (SRC_DIR, PROJECT_ROOT):
    candidate_str = str(candidate)
    if candidate_str not in sys.path:
        sys.path.insert(0, candidate_str)

from farm_sales import transactions  # noqa: E402
from farm_sales.customers import AddressBook, Customer  # noqa: E402
from farm_sales.inventory import BasicInventory, FancyInventory  # noqa: E402
from farm_sales.store import Farm  # noqa: E402

_CONFIG_TEMPLATE = (
    "[Farm]\n"
    "FarmName = {farm_name}\n"
    "InventoryType = {inventory_type}\n"
    "ReportFile = {report_file}\n"
)


@dataclass(frozen=True)
class ConfigBundle:
    """Container bundling together config metadata for tests."""

    directory: Path
    config_path: Path
    report_path: Path
    farm_name: str
    inventory_type: str


@pytest.fixture(scope="session", autouse=True)
def _restore_sys_path() -> Iterator[None]:
    """Ensure sys.path modifications are undone after the test session."""

    original = sys.path.copy()
    try:
        yield
    finally:
        sys.path[:] = original


@pytest.fixture
def config_factory(tmp_path: Path) -> Callable[..., ConfigBundle]:
    """Provide a callable that writes ``config.ini`` bundles on demand."""

    def _create_config(
        *,
        make_relative: bool = False,
        farm_name: str = "Test Farm",
        inventory_type: str = "fancy",
        discounts: Optional[Dict[str, str]] = None,
    ) -> ConfigBundle:
        bundle_dir = tmp_path / f"bundle_{uuid.uuid4().hex}"
        bundle_dir.mkdir(parents=True, exist_ok=True)
        report_path = bundle_dir / "reports" / "sales.xlsx"
        report_entry = "reports/sales.xlsx" if make_relative else str(report_path)
        text = _CONFIG_TEMPLATE.format(
            farm_name=farm_name,
            inventory_type=inventory_type,
            report_file=report_entry,
        )
        if discounts:
            text += "\n[Discounts]\n"
            text += "".join(f"{name} = {percent}\n" for name, percent in discounts.items())
        config_path = bundle_dir / "config.ini"
        config_path.write_text(text)
        return ConfigBundle(
            directory=bundle_dir,
            config_path=config_path,
            report_path=report_path,
            farm_name=farm_name,
            inventory_type=inventory_type,
        )

    return _create_config


@pytest.fixture
def config_file(config_factory: Callable[..., ConfigBundle]) -> Path:
    """Convenience fixture returning only the config path."""

    return config_factory().config_path


# ---------------------------------------------------------------------------
# Domain fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def customer() -> Customer:
    """Return a registered-looking customer with an empty cart."""

    return Customer("Alice", 5550101, "1 Farm Lane")


@pytest.fixture
def other_customer() -> Customer:
    """Return a second customer distinct from ``customer``."""

    return Customer("Bob", 5550202, "2 Orchard Road")


@pytest.fixture
def basic_inventory() -> BasicInventory:
    return BasicInventory()


@pytest.fixture
def fancy_inventory() -> FancyInventory:
    return FancyInventory()


@pytest.fixture
def farm(fancy_inventory: FancyInventory) -> Farm:
    """Return a farm backed by a fancy inventory and no settings."""

    return Farm(fancy_inventory, AddressBook())


@pytest.fixture
def basic_farm(basic_inventory: BasicInventory) -> Farm:
    """Return a farm backed by a basic inventory and no settings."""

    return Farm(basic_inventory, AddressBook())


@pytest.fixture
def set_fixed_datetime(monkeypatch: pytest.MonkeyPatch) -> Callable[[datetime], datetime]:
    """Patch ``transactions.datetime`` to return a predetermined moment."""

    def _apply(moment: datetime) -> datetime:
        class _FixedDateTime:
            @staticmethod
            def now(tz=None):
                assert tz is UTC
                return moment

        monkeypatch.setattr(transactions, "datetime", _FixedDateTime)
        return moment

    return _apply
