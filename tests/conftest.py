"""
Pytest configuration and shared fixtures for hpln tests.
"""

import pytest

from hpln.capabilities import StaticCapabilityProvider
from hpln.__globals import NODE_COUNT_ENV_VARS

GIB_IN_KIB = 1024 * 1024


@pytest.fixture(autouse=True)
def clean_node_env(monkeypatch):
    """Keep the caller's scheduler environment out of node-count defaults."""
    for var in NODE_COUNT_ENV_VARS:
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def host_128g():
    """A 128 GiB host without wide-vector support."""
    return StaticCapabilityProvider(memory_kib=128 * GIB_IN_KIB)


@pytest.fixture
def host_128g_avx512():
    """A 128 GiB host advertising AVX-512F."""
    return StaticCapabilityProvider(memory_kib=128 * GIB_IN_KIB, flags=["sse4_2", "avx2", "AVX512F"])


@pytest.fixture
def host_unknown_memory():
    """A host whose memory size cannot be detected."""
    return StaticCapabilityProvider(memory_kib=None)


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "formula: pure N-Calculator arithmetic")
    config.addinivalue_line("markers", "config: default resolution and validation")
    config.addinivalue_line("markers", "capabilities: host memory and CPU flag detection")
    config.addinivalue_line("markers", "cli: command-line front end")
