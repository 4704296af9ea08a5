"""
ZAP Confeitaria - Testes das rotas de cadastro, catálogo e finanças
"""
import os
from datetime import date, timedelta
from urllib.parse import parse_qs, urlparse

from app.core import settings
from app.core.email import email_service
from app.utils.uploads import local_path, owned_path, remove_upload
from tests.conftest import create_order, register


# ==========================================
# Auth
# ==========================================

async def test_register_and_login(client):
    headers = await register(client, email="Ana@Confeitaria.com")

    response = await client.get("/api/auth/me", headers=headers)
    assert response.status_code == 200
    assert response.json()["email"] == "ana@confeitaria.com"

    response = await client.post("/api/auth/login", json={"email": "ana@confeitaria.com", "password": "segredo123"})
    assert response.status_code == 200
    assert response.json()["user"]["last_login_at"] is not None

    response = await client.post("/api/auth/login", json={"email": "ana@confeitaria.com", "password": "errada123"})
    assert response.status_code == 401


async def test_register_duplicate_email(client):
    await register(client)
    response = await client.post("/api/auth/register", json={"email": "dona@confeitaria.com", "password": "segredo123"})
    assert response.status_code == 400


async def test_register_creates_profile(client, auth_headers):
    response = await client.get("/api/profile", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["company_name"] == "Doces da Ana"
    assert response.json()["include_terms_in_pdf"] is True


async def test_requires_token(client):
    response = await client.get("/api/orders")
    assert response.status_code in (401, 403)

    response = await client.get("/api/orders", headers={"Authorization": "Bearer invalido"})
    assert response.status_code == 401


async def test_password_reset_unknown_email_is_ok(client):
    response = await client.post("/api/auth/password-reset/request", json={"email": "ninguem@x.com"})
    assert response.status_code == 200

    response = await client.post("/api/auth/password-reset/confirm", json={"token": "token-que-nao-existe", "new_password": "nova123"})
    assert response.status_code == 400


async def test_password_reset_round_trip(client, monkeypatch):
    await register(client)
    sent = {}

    def fake_send(to_email, name, reset_link):
        sent["to"] = to_email
        sent["link"] = reset_link
        return True

    monkeypatch.setattr(email_service, "send_password_reset_email", fake_send)

    response = await client.post("/api/auth/password-reset/request", json={"email": "DONA@confeitaria.com"})
    assert response.status_code == 200
    assert sent["to"] == "dona@confeitaria.com"
    token = parse_qs(urlparse(sent["link"]).query)["token"][0]

    response = await client.post("/api/auth/password-reset/confirm", json={"token": token, "new_password": "novasenha1"})
    assert response.status_code == 200

    response = await client.post("/api/auth/login", json={"email": "dona@confeitaria.com", "password": "segredo123"})
    assert response.status_code == 401
    response = await client.post("/api/auth/login", json={"email": "dona@confeitaria.com", "password": "novasenha1"})
    assert response.status_code == 200

    # Token é de uso único
    response = await client.post("/api/auth/password-reset/confirm", json={"token": token, "new_password": "outra123"})
    assert response.status_code == 400


async def test_subscription_gate(client, auth_headers, monkeypatch):
    monkeypatch.setattr(settings, "SUBSCRIPTION_REQUIRED", True)

    response = await client.get("/api/clients", headers=auth_headers)
    assert response.status_code == 402
    assert response.json()["detail"]["pricing_url"] == settings.PRICING_URL

    # Perfil continua acessível sem assinatura
    response = await client.get("/api/profile", headers=auth_headers)
    assert response.status_code == 200


# ==========================================
# Clientes
# ==========================================

async def test_client_crud_and_search(client, auth_headers, maria):
    await client.post("/api/clients", json={"name": "João", "email": "joao@x.com"}, headers=auth_headers)

    response = await client.get("/api/clients", params={"search": "987"}, headers=auth_headers)
    assert [c["name"] for c in response.json()] == ["Maria"]

    response = await client.put(f"/api/clients/{maria['id']}", json={"birthday": "1990-03-05"}, headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["birthday"] == "1990-03-05"

    response = await client.post("/api/clients", json={"name": "   "}, headers=auth_headers)
    assert response.status_code == 422


async def test_delete_client_keeps_orders(client, auth_headers, maria):
    order = await create_order(client, auth_headers, client_id=maria["id"])

    response = await client.delete(f"/api/clients/{maria['id']}", headers=auth_headers)
    assert response.status_code == 200

    response = await client.get(f"/api/orders/{order['id']}", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["client_id"] is None


# ==========================================
# Catálogo
# ==========================================

async def test_seed_and_reorder_categories(client, auth_headers):
    await client.post("/api/categories", json={"name": "Bolos"}, headers=auth_headers)

    response = await client.post("/api/categories/seed-suggested", headers=auth_headers)
    assert response.status_code == 200
    names = [c["name"] for c in response.json()]
    assert sorted(names) == sorted(["Bolos", "Doces", "Salgados", "Bebidas", "Kits/Combos"])

    ids = [c["id"] for c in response.json()]
    response = await client.put("/api/categories/reorder", json={"category_ids": ids[::-1]}, headers=auth_headers)
    assert response.status_code == 200
    assert [c["id"] for c in response.json()] == ids[::-1]

    response = await client.put("/api/categories/reorder", json={"category_ids": ["nao-existe"]}, headers=auth_headers)
    assert response.status_code == 400


async def test_products_with_category(client, auth_headers):
    category = (await client.post("/api/categories", json={"name": "Doces"}, headers=auth_headers)).json()

    response = await client.post("/api/products", json={
        "name": "Brigadeiro",
        "category_id": category["id"],
        "cost_price": 0.8,
        "sale_price": 2.5,
        "unit_type": "cento"
    }, headers=auth_headers)
    assert response.status_code == 201
    product = response.json()
    assert product["unit_type"] == "cento"
    assert product["category"]["name"] == "Doces"

    response = await client.post("/api/products", json={"name": "Bolo", "category_id": "outra"}, headers=auth_headers)
    assert response.status_code == 400

    await client.delete(f"/api/categories/{category['id']}", headers=auth_headers)
    response = await client.get(f"/api/products/{product['id']}", headers=auth_headers)
    assert response.json()["category_id"] is None


async def test_deleting_product_turns_items_into_additional(client, auth_headers):
    product = (await client.post("/api/products", json={"name": "Bolo", "sale_price": 120}, headers=auth_headers)).json()
    order = await create_order(client, auth_headers, items=[
        {"product_id": product["id"], "product_name": "Bolo", "quantity": 1, "unit_price": 120}
    ])
    assert order["items"][0]["is_additional"] is False

    await client.delete(f"/api/products/{product['id']}", headers=auth_headers)

    response = await client.get(f"/api/orders/{order['id']}", headers=auth_headers)
    item = response.json()["items"][0]
    assert item["product_name"] == "Bolo"
    assert item["is_additional"] is True


# ==========================================
# Lançamentos e finanças
# ==========================================

async def test_transaction_category_from_description(client, auth_headers):
    response = await client.post("/api/transactions", json={
        "type": "expense",
        "description": "Insumos - Farinha e açúcar",
        "amount": 45.9
    }, headers=auth_headers)
    assert response.status_code == 201
    transaction = response.json()
    assert transaction["category"] == "Insumos"

    response = await client.put(f"/api/transactions/{transaction['id']}", json={"description": "Compra no mercado"}, headers=auth_headers)
    assert response.json()["category"] == "Insumos"

    response = await client.put(f"/api/transactions/{transaction['id']}", json={"category": "Embalagens"}, headers=auth_headers)
    assert response.json()["category"] == "Embalagens"

    response = await client.post("/api/transactions", json={
        "type": "expense", "description": "Gás", "amount": 10, "category": "Inventada"
    }, headers=auth_headers)
    assert response.status_code == 400


async def test_update_rejects_null_required_fields(client, auth_headers):
    transaction = (await client.post("/api/transactions", json={
        "type": "expense", "description": "Insumos - Farinha", "amount": 20
    }, headers=auth_headers)).json()
    for field in ("description", "type", "amount", "date"):
        response = await client.put(f"/api/transactions/{transaction['id']}", json={field: None}, headers=auth_headers)
        assert response.status_code == 422, field

    product = (await client.post("/api/products", json={"name": "Bolo"}, headers=auth_headers)).json()
    for field in ("name", "cost_price", "unit_type"):
        response = await client.put(f"/api/products/{product['id']}", json={field: None}, headers=auth_headers)
        assert response.status_code == 422, field

    category = (await client.post("/api/categories", json={"name": "Doces"}, headers=auth_headers)).json()
    response = await client.put(f"/api/categories/{category['id']}", json={"name": None}, headers=auth_headers)
    assert response.status_code == 422

    response = await client.put("/api/profile", json={"order_number_start": None}, headers=auth_headers)
    assert response.status_code == 422

    # Campos opcionais continuam aceitando null
    response = await client.put(f"/api/products/{product['id']}", json={"description": None}, headers=auth_headers)
    assert response.status_code == 200


async def test_transaction_filters(client, auth_headers):
    today = date.today()
    for payload in (
        {"type": "income", "description": "Venda Avulsa - Brigadeiros", "amount": 50, "date": today.isoformat()},
        {"type": "expense", "description": "Aluguel - Cozinha", "amount": 800, "date": today.isoformat()},
        {"type": "expense", "description": "Embalagens - Caixas", "amount": 30, "date": (today - timedelta(days=400)).isoformat()},
    ):
        await client.post("/api/transactions", json=payload, headers=auth_headers)

    response = await client.get("/api/transactions", params={"type": "expense"}, headers=auth_headers)
    assert len(response.json()) == 2

    response = await client.get("/api/transactions", params={"period": "month"}, headers=auth_headers)
    assert len(response.json()) == 2

    response = await client.get("/api/transactions", params={"category": "Aluguel"}, headers=auth_headers)
    assert [t["amount"] for t in response.json()] == [800]


async def test_finance_summary(client, auth_headers, maria):
    product = (await client.post("/api/products", json={"name": "Bolo", "cost_price": 50, "sale_price": 200}, headers=auth_headers)).json()
    order = await create_order(client, auth_headers, client_id=maria["id"], delivery_date=date.today().isoformat(), items=[
        {"product_id": product["id"], "product_name": "Bolo", "quantity": 1, "unit_price": 200}
    ])
    await client.post(f"/api/orders/{order['id']}/deposit", json={"paid": True}, headers=auth_headers)
    await client.patch(f"/api/orders/{order['id']}/status", json={"status": "delivered"}, headers=auth_headers)
    await client.post("/api/transactions", json={"type": "expense", "description": "Insumos - Leite", "amount": 40}, headers=auth_headers)

    response = await client.get("/api/finances/summary", params={"period": "month"}, headers=auth_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["totals"] == {"total_income": 200, "total_expenses": 40, "balance": 160}
    assert data["gross_profit"]["revenue"] == 200
    assert data["gross_profit"]["costs"] == 50
    assert data["gross_profit"]["margin"] == 75
    assert data["expenses_by_category"] == [{"category": "Insumos", "amount": 40, "percentage": 100}]

    response = await client.get("/api/finances/top-products", headers=auth_headers)
    assert response.json()[0]["product_name"] == "Bolo"

    response = await client.get("/api/finances/month-comparison", headers=auth_headers)
    assert response.json()["current"]["profit"] == 160


async def test_finance_summary_bad_period(client, auth_headers):
    response = await client.get("/api/finances/summary", params={"period": "decade"}, headers=auth_headers)
    assert response.status_code == 400

    response = await client.get("/api/finances/summary", params={"year": 2025}, headers=auth_headers)
    assert response.status_code == 400


async def test_notifications_and_dashboard(client, auth_headers, maria):
    await client.put(f"/api/clients/{maria['id']}", json={"birthday": date.today().replace(year=2000).isoformat()}, headers=auth_headers)
    await create_order(client, auth_headers, client_id=maria["id"], delivery_date=date.today().isoformat())

    response = await client.get("/api/notifications", headers=auth_headers)
    assert response.status_code == 200
    data = response.json()
    assert {n["type"] for n in data["notifications"]} == {"birthday", "delivery"}
    assert data["high_priority_count"] == 2

    response = await client.get("/api/stats/dashboard", headers=auth_headers)
    stats = response.json()
    assert stats["orders"]["deliveries_today"] == 1
    assert stats["pending_deposits"] == {"count": 1, "amount": 100}
    assert stats["clients"]["total"] == 1


# ==========================================
# Perfil
# ==========================================

async def test_profile_update_and_logo(client, auth_headers):
    response = await client.put("/api/profile", json={
        "pix_key": "ana@doces.com",
        "hidden_kanban_columns": ["cancelled"]
    }, headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["hidden_kanban_columns"] == ["cancelled"]

    response = await client.post(
        "/api/profile/logo",
        files={"file": ("logo.png", b"\x89PNG\r\n\x1a\nfake", "image/png")},
        headers=auth_headers
    )
    assert response.status_code == 200
    logo_url = response.json()["logo_url"]
    assert logo_url.startswith("/uploads/logos/logo_")

    response = await client.get(logo_url)
    assert response.status_code == 200

    response = await client.post(
        "/api/profile/logo",
        files={"file": ("notas.txt", b"texto", "text/plain")},
        headers=auth_headers
    )
    assert response.status_code == 400

    response = await client.delete("/api/profile/logo", headers=auth_headers)
    assert response.json()["logo_url"] is None


async def test_profile_logo_belongs_to_account(client, auth_headers):
    other_headers = await register(client, email="outra@confeitaria.com")
    response = await client.post(
        "/api/profile/logo",
        files={"file": ("logo.png", b"\x89PNG\r\n\x1a\noutra", "image/png")},
        headers=other_headers
    )
    other_logo = response.json()["logo_url"]
    other_path = local_path(other_logo)
    assert os.path.exists(other_path)

    # logo_url só muda pelos endpoints de logo
    response = await client.put("/api/profile", json={"logo_url": other_logo}, headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["logo_url"] is None

    response = await client.delete("/api/profile/logo", headers=auth_headers)
    assert response.status_code == 200
    assert os.path.exists(other_path)

    me = (await client.get("/api/auth/me", headers=auth_headers)).json()
    assert remove_upload(other_logo, me["id"]) is False
    assert owned_path(other_logo, me["id"]) is None
    assert os.path.exists(other_path)
