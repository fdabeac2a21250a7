import os
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault('APP_ENV', 'test')
os.environ.setdefault('LOG_LEVEL', 'DEBUG')

from peerdraft.config import Settings  # noqa: E402
from peerdraft.services.settings_store import SettingsStore  # noqa: E402
from peerdraft.storage import MemoryDataStore  # noqa: E402


@pytest.fixture
def config() -> Settings:
    return Settings(
        APP_ENV='test',
        PEERDRAFT_BASE_PATH='https://subs.test/cm/',
        PEERDRAFT_SUBSCRIPTION_API='https://subs.test/subscription',
        PEERDRAFT_CONNECT_API='https://subs.test/subscription/connect',
        PEERDRAFT_SIGNALING='wss://subs.test/signal',
    )

@pytest.fixture
def ids():
    counter = iter(range(1, 1000))
    return lambda: f'oid-{next(counter)}'

@pytest.fixture
def data_store() -> MemoryDataStore:
    return MemoryDataStore()

@pytest.fixture
def store(data_store, config, ids) -> SettingsStore:
    return SettingsStore(data_store, config, id_factory=ids)
