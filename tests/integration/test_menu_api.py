import http.client
from urllib.parse import urlparse

import pytest
import requests

from core.editor.menu_model import MenuModel
from core.editor.save_handler import SAVE_OK, SaveHandler
from network.menu_client import MenuClient, MenuClientError

pytestmark = [pytest.mark.integration]


def test_get_menu_when_empty(api_server) -> None:
    response = requests.get(f"{api_server.url}/menu", timeout=5)
    assert response.status_code == 200
    assert response.json() is None


def test_post_then_get(api_server, sample_items) -> None:
    response = requests.post(f"{api_server.url}/menu", json={"items": sample_items}, timeout=5)
    assert response.status_code == 200
    created = response.json()
    assert len(created) == 1
    assert created[0]["id"]

    document = requests.get(f"{api_server.url}/menu", timeout=5).json()
    assert document["id"] == created[0]["id"]
    assert document["items"] == sample_items


def test_put_overwrites(api_server, store, sample_items) -> None:
    document = store.create_menu(sample_items)[0]
    response = requests.put(
        f"{api_server.url}/menu",
        json={"id": document["id"], "items": sample_items[1:]},
        timeout=5,
    )
    assert response.status_code == 200
    assert response.json()["items"] == sample_items[1:]
    assert store.get_menu()["items"] == sample_items[1:]


def test_validation_error_envelope(api_server) -> None:
    response = requests.post(f"{api_server.url}/menu", json={"items": [{"id": "a"}]}, timeout=5)
    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["error"]["code"] == "BAD_REQUEST"
    assert body["error"]["message"] == "items.0.title: Field required"


def test_malformed_json(api_server) -> None:
    response = requests.post(
        f"{api_server.url}/menu",
        data=b"{nope",
        headers={"Content-Type": "application/json"},
        timeout=5,
    )
    assert response.status_code == 400
    assert response.json()["error"]["message"] == "Request body is not valid JSON"


def test_put_unknown_document(api_server) -> None:
    response = requests.put(f"{api_server.url}/menu", json={"id": "missing", "items": []}, timeout=5)
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "NOT_FOUND"


def test_unknown_route(api_server) -> None:
    assert requests.get(f"{api_server.url}/nope", timeout=5).status_code == 404


def test_navigation_skips_hidden(api_server, store, sample_items) -> None:
    sample_items[0]["hidden"] = True
    store.create_menu(sample_items)
    nav = requests.get(f"{api_server.url}/menu/nav", timeout=5).json()
    assert [entry["id"] for entry in nav] == ["home", "notice"]


def test_client_surfaces_server_message(api_server) -> None:
    client = MenuClient(api_server.url)
    with pytest.raises(MenuClientError) as excinfo:
        client.update_menu("missing", [])
    assert excinfo.value.status == 404
    assert "missing" in excinfo.value.message


def test_client_unreachable_server() -> None:
    client = MenuClient("http://127.0.0.1:9", timeout=1)
    with pytest.raises(MenuClientError) as excinfo:
        client.fetch_menu()
    assert excinfo.value.status is None


def test_editor_round_trip(api_server, sample_items) -> None:
    client = MenuClient(api_server.url)
    model = MenuModel.from_document(client.fetch_menu())
    model.load_document({"items": sample_items})
    handler = SaveHandler(client)

    result = handler.save(model)
    assert result[:2] == (True, SAVE_OK)
    handler.apply(model, result)
    fetched = MenuModel.from_document(client.fetch_menu())
    assert fetched.document_id == model.document_id
    assert fetched.items == model.items

    model.select("home")
    model.change_field("title", "Start")
    model.add_child("board")
    result = handler.save(model)
    assert result.ok
    handler.apply(model, result)
    assert not model.has_changes()

    fetched = MenuModel.from_document(client.fetch_menu())
    assert fetched.items == model.items
    assert fetched.get_item("home").title == "Start"
    assert len(client.fetch_navigation()) == 3


@pytest.mark.parametrize("length", ["-1", "abc"])
def test_bad_content_length_is_rejected(api_server, length) -> None:
    address = urlparse(api_server.url)
    conn = http.client.HTTPConnection(address.hostname, address.port, timeout=5)
    try:
        conn.putrequest("POST", "/menu")
        conn.putheader("Content-Type", "application/json")
        conn.putheader("Content-Length", length)
        conn.endheaders()
        response = conn.getresponse()
        assert response.status == 400
    finally:
        conn.close()

    # Server still answers afterwards
    assert requests.get(f"{api_server.url}/menu", timeout=5).status_code == 200
