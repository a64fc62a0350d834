import pytest


@pytest.fixture
def page(client, user_headers):
    """Page avec une intro et un block colonnes"""
    response = client.post("/pages", headers=user_headers, json={"title": "Notes", "content": [
        {"id": "intro", "type": "text", "content": "Intro"},
        {"id": "cols", "type": "columns", "columns": [
            {"id": "left", "blocks": [{"id": "l1", "type": "bullet", "content": "gauche"}]},
            {"id": "right", "blocks": [{"id": "r1", "type": "text", "content": "droite"}]},
        ]},
    ]})
    return response.json()


# ========== TEST LECTURE ==========

def test_list_blocks(client, page, user_headers):
    response = client.get(f"/pages/{page['id']}/blocks", headers=user_headers)
    assert response.status_code == 200
    assert [b["id"] for b in response.json()] == ["intro", "cols"]

def test_list_blocks_of_empty_page(client, user_headers):
    """Test : une page sans contenu démarre avec un block texte vide"""
    empty = client.post("/pages", headers=user_headers, json={"title": "Vide"}).json()
    response = client.get(f"/pages/{empty['id']}/blocks", headers=user_headers)
    assert len(response.json()) == 1
    assert response.json()[0]["type"] == "text"

def test_blocks_page_not_found(client, user_headers):
    assert client.get("/pages/999/blocks", headers=user_headers).status_code == 404


# ========== TEST INSERTION / SUPPRESSION ==========

def test_insert_block_after_index(client, page, user_headers):
    response = client.post(f"/pages/{page['id']}/blocks", headers=user_headers, json={"type": "todo", "after_index": 0})
    assert response.status_code == 201
    data = response.json()
    assert data["content"][1]["id"] == data["block_id"]
    assert data["content"][1]["checked"] is False
    assert data["focused_id"] == data["block_id"]

def test_insert_block_inside_column(client, page, user_headers):
    response = client.post(f"/pages/{page['id']}/blocks", headers=user_headers, json={"type": "number", "path": [1, 1]})
    assert response.status_code == 201
    right = response.json()["content"][1]["columns"][1]["blocks"]
    assert [b["type"] for b in right] == ["text", "number"]

def test_insert_nested_columns_refused(client, page, user_headers):
    response = client.post(f"/pages/{page['id']}/blocks", headers=user_headers, json={"type": "columns", "path": [1, 0]})
    assert response.status_code == 422

def test_insert_unknown_type(client, page, user_headers):
    response = client.post(f"/pages/{page['id']}/blocks", headers=user_headers, json={"type": "widget"})
    assert response.status_code == 422

def test_delete_block(client, page, user_headers):
    response = client.delete(f"/pages/{page['id']}/blocks/intro", headers=user_headers)
    assert response.status_code == 200
    assert [b["id"] for b in response.json()["content"]] == ["cols"]

def test_delete_block_inside_column(client, page, user_headers):
    response = client.delete(f"/pages/{page['id']}/blocks/l1?path=1&path=0", headers=user_headers)
    assert response.status_code == 200
    assert response.json()["content"][1]["columns"][0]["blocks"] == []

def test_delete_last_block_refused(client, user_headers):
    """Test : le dernier block de la page ne peut pas être supprimé"""
    single = client.post("/pages", headers=user_headers, json={"title": "Seul", "content": [
        {"id": "only", "type": "text", "content": ""}
    ]}).json()
    response = client.delete(f"/pages/{single['id']}/blocks/only", headers=user_headers)
    assert response.status_code == 422

def test_reorder_blocks(client, page, user_headers):
    response = client.post(f"/pages/{page['id']}/blocks/reorder", headers=user_headers, json={"from_index": 1, "to_index": 0})
    assert response.status_code == 200
    assert [b["id"] for b in response.json()["content"]] == ["cols", "intro"]


# ========== TEST MODIFICATION ==========

def test_update_block_content_and_size(client, page, user_headers):
    response = client.patch(f"/pages/{page['id']}/blocks/intro", headers=user_headers, json={"content": "Bonjour", "fontSize": "lg"})
    assert response.status_code == 200
    block = response.json()["content"][0]
    assert block["content"] == "Bonjour"
    assert block["fontSize"] == "lg"

def test_update_block_saved_on_page(client, page, user_headers):
    client.patch(f"/pages/{page['id']}/blocks/r1", headers=user_headers, json={"content": "modifié", "path": [1, 1]})
    stored = client.get(f"/pages/{page['id']}", headers=user_headers).json()
    assert stored["content"][1]["columns"][1]["blocks"][0]["content"] == "modifié"

def test_update_checked_on_text_refused(client, page, user_headers):
    response = client.patch(f"/pages/{page['id']}/blocks/intro", headers=user_headers, json={"checked": True})
    assert response.status_code == 422

def test_blocks_edit_by_other_user_refused(client, page, other_headers):
    """Test : seuls le créateur et les rôles élevés éditent les blocks"""
    response = client.patch(f"/pages/{page['id']}/blocks/intro", headers=other_headers, json={"content": "x"})
    assert response.status_code == 403


# ========== TEST CLAVIER ==========

def test_enter_on_bullet_in_column(client, page, user_headers):
    response = client.post(f"/pages/{page['id']}/blocks/l1/keys/enter?path=1&path=0", headers=user_headers)
    assert response.status_code == 200
    left = response.json()["content"][1]["columns"][0]["blocks"]
    assert [b["type"] for b in left] == ["bullet", "bullet"]
    assert response.json()["block_id"] == left[1]["id"]

def test_backspace_on_empty_bullet(client, user_headers):
    created = client.post("/pages", headers=user_headers, json={"title": "Liste", "content": [
        {"id": "a", "type": "text", "content": "x"},
        {"id": "b", "type": "bullet", "content": ""},
    ]}).json()
    response = client.post(f"/pages/{created['id']}/blocks/b/keys/backspace", headers=user_headers)
    assert response.status_code == 200
    assert response.json()["content"][1]["type"] == "text"

def test_unknown_key(client, page, user_headers):
    response = client.post(f"/pages/{page['id']}/blocks/intro/keys/tab", headers=user_headers)
    assert response.status_code == 422


# ========== TEST COLONNES / TABLEAUX ==========

def test_add_columns_until_max(client, page, user_headers):
    """Test : 2 -> 5 colonnes, la 6e est refusée"""
    for _ in range(3):
        response = client.post(f"/pages/{page['id']}/blocks/cols/columns", headers=user_headers)
        assert response.status_code == 201
    assert len(response.json()["content"][1]["columns"]) == 5

    response = client.post(f"/pages/{page['id']}/blocks/cols/columns", headers=user_headers)
    assert response.status_code == 422

def test_remove_column(client, page, user_headers):
    response = client.delete(f"/pages/{page['id']}/blocks/cols/columns/left", headers=user_headers)
    assert response.status_code == 200
    assert [c["id"] for c in response.json()["content"][1]["columns"]] == ["right"]

    response = client.delete(f"/pages/{page['id']}/blocks/cols/columns/right", headers=user_headers)
    assert response.status_code == 422

def test_grow_table(client, user_headers):
    created = client.post("/pages", headers=user_headers, json={"title": "Tableau", "content": [
        {"id": "t", "type": "table", "tableData": [["a", "b"], ["c", "d"]]}
    ]}).json()
    client.post(f"/pages/{created['id']}/blocks/t/table/rows", headers=user_headers)
    response = client.post(f"/pages/{created['id']}/blocks/t/table/columns", headers=user_headers)
    assert response.status_code == 200
    assert response.json()["content"][0]["tableData"] == [["a", "b", ""], ["c", "d", ""], ["", "", ""]]
