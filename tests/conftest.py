"""
Pytest configuration and fixtures.
"""

import pytest

from splitledger.audit import AuditLogger
from splitledger.config import get_settings
from splitledger.orchestrator import create_app_components
from splitledger.services.storage import InMemoryAuditStorage, InMemoryLedgerStorage


@pytest.fixture(autouse=True)
def fresh_settings():
    """Settings are cached; reload them around every test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def ledger_storage():
    return InMemoryLedgerStorage()


@pytest.fixture
def audit_storage():
    return InMemoryAuditStorage()


@pytest.fixture
def audit_logger(audit_storage):
    return AuditLogger(audit_storage)


@pytest.fixture
def components(ledger_storage, audit_logger):
    return create_app_components(storage=ledger_storage, audit_logger=audit_logger)
