import os, sys, pytest
from datetime import datetime, timezone
# Ensure project root is on path so 'canteen' and 'tests' can be imported
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)
from canteen import create_app
from canteen.services.store import MemoryStore
from tests.test_utils_seed import FakeClock

START = datetime(2026, 1, 10, 9, 0, tzinfo=timezone.utc)


@pytest.fixture()
def clock():
    return FakeClock(START)


@pytest.fixture()
def store():
    return MemoryStore()


@pytest.fixture()
def app_instance(clock):
    app = create_app({
        'TESTING': True,
        'CANTEEN_STORE_URL': 'memory://',
        'JWT_SECRET_KEY': 'test-secret-key-that-is-long-enough-for-hs256',
        'CANTEEN_TIMEZONE': 'UTC',
        'TAX_RATE': '0',
        'STRICT_ORDER_TRANSITIONS': True,
        'SEED_SAMPLE_DATA': False,
        'CLOCK': clock,
    })
    yield app


@pytest.fixture()
def client(app_instance):
    return app_instance.test_client()
