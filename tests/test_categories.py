from app.models.category import Category
from app.models.page import Page


def _create(client, headers, **payload):
    return client.post("/categories", headers=headers, json=payload)


# ========== TEST CRÉATION ==========

def test_create_category_first_sibling(client, admin_headers):
    """Test : première catégorie racine -> order 1, slug dérivé du nom"""
    response = _create(client, admin_headers, name="Docs")
    assert response.status_code == 201
    data = response.json()
    assert data["slug"] == "docs"
    assert data["order"] == 1
    assert data["parent_id"] is None

def test_create_category_duplicate_name_gets_suffix(client, admin_headers):
    """Test : même nom -> slug suffixé, order suivant"""
    _create(client, admin_headers, name="Docs")
    response = _create(client, admin_headers, name="Docs")
    assert response.status_code == 201
    assert response.json()["slug"] == "docs-1"
    assert response.json()["order"] == 2

def test_create_category_slug_strips_accents(client, doc_headers):
    response = _create(client, doc_headers, name="Procédures Été")
    assert response.status_code == 201
    assert response.json()["slug"] == "procedures-ete"

def test_create_category_explicit_order(client, admin_headers):
    response = _create(client, admin_headers, name="Docs", order=7)
    assert response.json()["order"] == 7

def test_create_sub_category_order_is_per_parent(client, admin_headers):
    parent = _create(client, admin_headers, name="Docs").json()
    _create(client, admin_headers, name="Autre")
    child = _create(client, admin_headers, name="Guides", parent_id=parent["id"]).json()
    assert child["parent_id"] == parent["id"]
    assert child["order"] == 1

def test_create_category_unknown_parent(client, admin_headers):
    response = _create(client, admin_headers, name="Orphelin", parent_id=999)
    assert response.status_code == 422
    assert "parent_id" in response.json()["detail"]["errors"]

def test_create_category_by_user_refused(client, user_headers):
    """Test : un simple utilisateur ne crée pas de catégorie"""
    response = _create(client, user_headers, name="Docs")
    assert response.status_code == 403

def test_create_category_without_token(client):
    response = client.post("/categories", json={"name": "Docs"})
    assert response.status_code == 401


# ========== TEST LECTURE ==========

def test_list_categories_tree(client, db, admin_headers, admin_user):
    """Test : racines avec tout le sous-arbre et les pages"""
    root = _create(client, admin_headers, name="Docs").json()
    child = _create(client, admin_headers, name="Guides", parent_id=root["id"]).json()
    _create(client, admin_headers, name="Avancé", parent_id=child["id"])
    db.add(Page(user_id=admin_user.id, title="Intro", slug="intro", category_id=root["id"]))
    db.commit()

    response = client.get("/categories", headers=admin_headers)
    assert response.status_code == 200
    data = response.json()
    assert len(data) == 1
    assert data[0]["pages"][0]["slug"] == "intro"
    assert data[0]["all_children"][0]["name"] == "Guides"
    assert data[0]["all_children"][0]["all_children"][0]["name"] == "Avancé"

def test_get_category_with_children(client, admin_headers):
    root = _create(client, admin_headers, name="Docs").json()
    _create(client, admin_headers, name="Guides", parent_id=root["id"])
    response = client.get(f"/categories/{root['id']}", headers=admin_headers)
    assert response.status_code == 200
    assert [c["name"] for c in response.json()["children"]] == ["Guides"]

def test_get_category_not_found(client, admin_headers):
    assert client.get("/categories/999", headers=admin_headers).status_code == 404


# ========== TEST MODIFICATION ==========

def test_rename_category_recomputes_slug(client, admin_headers):
    category = _create(client, admin_headers, name="Docs").json()
    response = client.put(f"/categories/{category['id']}", headers=admin_headers, json={"name": "Manuels"})
    assert response.status_code == 200
    assert response.json()["slug"] == "manuels"

def test_update_category_cycle_refused(client, admin_headers):
    """Test : une catégorie ne peut pas passer sous un de ses descendants"""
    root = _create(client, admin_headers, name="Docs").json()
    child = _create(client, admin_headers, name="Guides", parent_id=root["id"]).json()
    grandchild = _create(client, admin_headers, name="Avancé", parent_id=child["id"]).json()

    response = client.put(f"/categories/{root['id']}", headers=admin_headers, json={"parent_id": grandchild["id"]})
    assert response.status_code == 422
    assert "parent_id" in response.json()["detail"]["errors"]

    response = client.put(f"/categories/{root['id']}", headers=admin_headers, json={"parent_id": root["id"]})
    assert response.status_code == 422

def test_update_category_by_user_refused(client, admin_headers, user_headers):
    category = _create(client, admin_headers, name="Docs").json()
    response = client.put(f"/categories/{category['id']}", headers=user_headers, json={"name": "X"})
    assert response.status_code == 403


# ========== TEST SUPPRESSION ==========

def test_delete_category_reparents_children_and_pages(client, db, admin_headers, admin_user):
    """Test : les sous-catégories remontent, les pages perdent leur catégorie"""
    root = _create(client, admin_headers, name="Docs").json()
    middle = _create(client, admin_headers, name="Guides", parent_id=root["id"]).json()
    leaf = _create(client, admin_headers, name="Avancé", parent_id=middle["id"]).json()
    page = Page(user_id=admin_user.id, title="Intro", slug="intro", category_id=middle["id"])
    db.add(page)
    db.commit()
    page_id = page.id

    response = client.delete(f"/categories/{middle['id']}", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["message"] == "Catégorie supprimée"

    db.expire_all()
    assert db.get(Category, middle["id"]) is None
    assert db.get(Category, leaf["id"]).parent_id == root["id"]
    assert db.get(Page, page_id).category_id is None


# ========== TEST RÉORDONNANCEMENT ==========

def test_reorder_categories(client, db, admin_headers):
    first = _create(client, admin_headers, name="A").json()
    second = _create(client, admin_headers, name="B").json()
    response = client.post("/categories/reorder", headers=admin_headers, json={"categories": [
        {"id": first["id"], "order": 2},
        {"id": second["id"], "order": 1},
    ]})
    assert response.status_code == 200

    names = [c["name"] for c in client.get("/categories", headers=admin_headers).json()]
    assert names == ["B", "A"]

def test_reorder_categories_unknown_id(client, admin_headers):
    response = client.post("/categories/reorder", headers=admin_headers, json={"categories": [{"id": 404, "order": 1}]})
    assert response.status_code == 422
