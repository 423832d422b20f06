import os

from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect

from canteen.services.store import SqlStore

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))


def _alembic_config():
    # no ini file, so alembic leaves logging alone
    cfg = Config()
    cfg.set_main_option('script_location', os.path.join(ROOT, 'migrations'))
    return cfg


def test_upgrade_creates_kv_table_and_downgrade_drops_it(tmp_path, monkeypatch):
    url = f"sqlite:///{tmp_path / 'canteen.db'}"
    monkeypatch.setenv('CANTEEN_STORE_URL', url)
    cfg = _alembic_config()

    command.upgrade(cfg, 'head')
    engine = create_engine(url)
    assert 'kv_entries' in inspect(engine).get_table_names()
    store = SqlStore(url, create_tables=False)
    store.set('canteen_orders', [{'id': 'o1'}])
    assert store.get('canteen_orders') == [{'id': 'o1'}]

    command.downgrade(cfg, 'base')
    assert 'kv_entries' not in inspect(engine).get_table_names()
    engine.dispose()


def test_upgrade_tolerates_table_created_by_store(tmp_path, monkeypatch):
    url = f"sqlite:///{tmp_path / 'canteen.db'}"
    monkeypatch.setenv('CANTEEN_STORE_URL', url)
    SqlStore(url).set('canteen_users', [])
    command.upgrade(_alembic_config(), 'head')
    assert SqlStore(url, create_tables=False).get('canteen_users') == []
