import copy

import pytest

from core.editor.node import MenuNode, nodes_from_dicts
from network.menu_api import MenuAPIServer
from storage.database import Database
from storage.menu_store import MenuStore


SAMPLE_ITEMS = [
    {
        "id": "board",
        "title": "Free Board",
        "order": 0,
        "type": "free",
        "url": "#",
        "children": [
            {"id": "board-a", "title": "Daily", "order": 0, "parent_id": "board", "url": "/free/board-a"},
            {"id": "board-b", "title": "Humor", "order": 1, "parent_id": "board", "url": "/free/board-b"},
        ],
    },
    {"id": "home", "title": "Home", "order": 1, "type": "home", "url": "/"},
    {
        "id": "notice",
        "title": "Notices",
        "order": 2,
        "type": "notice",
        "url": "#",
        "children": [
            {"id": "notice-a", "title": "Updates", "order": 0, "parent_id": "notice", "url": "/notice/notice-a"},
        ],
    },
]


@pytest.fixture
def sample_items():
    """Stored JSON shape of a small two-level menu"""
    return copy.deepcopy(SAMPLE_ITEMS)


@pytest.fixture
def sample_tree(sample_items):
    return nodes_from_dicts(sample_items)


@pytest.fixture
def leaf_tree():
    return [MenuNode(id="a", title="A", order=0)]


@pytest.fixture
def db(tmp_path):
    database = Database(tmp_path, "test.db")
    yield database
    database.close()


@pytest.fixture
def store(db):
    return MenuStore(db)


@pytest.fixture
def api_server(store):
    server = MenuAPIServer(store, host="127.0.0.1", port=0)
    assert server.start()
    yield server
    server.stop()
