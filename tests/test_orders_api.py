"""
ZAP Confeitaria - Testes do ciclo de vida do pedido
"""
from tests.conftest import create_order, register


async def order_transactions(client, headers, order_id):
    response = await client.get(f"/api/orders/{order_id}/transactions", headers=headers)
    assert response.status_code == 200
    return response.json()


async def test_deposit_delivery_and_cancel(client, auth_headers, maria):
    order = await create_order(client, auth_headers, client_id=maria["id"])
    assert order["status"] == "quote"
    assert order["total_amount"] == 200
    assert order["display_number"] == "#0001"

    response = await client.post(f"/api/orders/{order['id']}/deposit", json={"paid": True}, headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["status"] == "in_production"
    assert response.json()["deposit_amount"] == 100

    postings = await order_transactions(client, auth_headers, order["id"])
    assert len(postings) == 1
    assert postings[0]["amount"] == 100
    assert postings[0]["category"] == "Sinal"
    assert postings[0]["description"] == "Sinal 50% - Maria"

    response = await client.patch(f"/api/orders/{order['id']}/status", json={"status": "delivered"}, headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["status"] == "delivered"

    postings = await order_transactions(client, auth_headers, order["id"])
    assert len(postings) == 2
    final = [p for p in postings if p["category"] == "Pagamento Final"][0]
    assert final["amount"] == 100
    assert final["description"] == "Pagamento Final - Maria"

    response = await client.patch(f"/api/orders/{order['id']}/status", json={"status": "cancelled"}, headers=auth_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "cancelled"
    assert data["deposit_paid"] is False
    assert data["deposit_amount"] is None

    assert await order_transactions(client, auth_headers, order["id"]) == []


async def test_leaving_delivered_removes_final_payment(client, auth_headers, maria):
    order = await create_order(client, auth_headers, client_id=maria["id"])
    await client.post(f"/api/orders/{order['id']}/deposit", json={"paid": True}, headers=auth_headers)
    await client.patch(f"/api/orders/{order['id']}/status", json={"status": "delivered"}, headers=auth_headers)

    response = await client.patch(f"/api/orders/{order['id']}/status", json={"status": "ready"}, headers=auth_headers)
    assert response.status_code == 200

    postings = await order_transactions(client, auth_headers, order["id"])
    assert [p["category"] for p in postings] == ["Sinal"]


async def test_delivery_payment_fee_is_discounted(client, auth_headers, maria):
    order = await create_order(client, auth_headers, client_id=maria["id"])
    await client.post(f"/api/orders/{order['id']}/deposit", json={"paid": True}, headers=auth_headers)

    response = await client.patch(f"/api/orders/{order['id']}/status", json={
        "status": "delivered",
        "payment": {"method": "credit_card", "fee_type": "percentage", "fee": 5}
    }, headers=auth_headers)
    assert response.status_code == 200

    postings = await order_transactions(client, auth_headers, order["id"])
    final = [p for p in postings if p["category"] == "Pagamento Final"][0]
    assert final["amount"] == 95
    assert final["description"] == "Pagamento Final (Cartão) - Maria"


async def test_delivery_without_deposit_posts_half(client, auth_headers, maria):
    order = await create_order(client, auth_headers, client_id=maria["id"])

    await client.patch(f"/api/orders/{order['id']}/status", json={"status": "delivered"}, headers=auth_headers)

    postings = await order_transactions(client, auth_headers, order["id"])
    assert len(postings) == 1
    assert postings[0]["amount"] == 100


async def test_deposit_toggle_keeps_single_posting(client, auth_headers, maria):
    order = await create_order(client, auth_headers, client_id=maria["id"])
    url = f"/api/orders/{order['id']}/deposit"

    await client.post(url, json={"paid": True}, headers=auth_headers)
    await client.post(url, json={"paid": True, "amount": 80}, headers=auth_headers)
    postings = await order_transactions(client, auth_headers, order["id"])
    assert len(postings) == 1
    assert postings[0]["amount"] == 80
    assert postings[0]["description"] == "Sinal 40% - Maria"

    response = await client.post(url, json={"paid": False}, headers=auth_headers)
    assert response.json()["deposit_paid"] is False
    assert await order_transactions(client, auth_headers, order["id"]) == []


async def test_deposit_toggle_keeps_manual_postings(client, auth_headers, maria):
    order = await create_order(client, auth_headers, client_id=maria["id"])
    manual = (await client.post("/api/transactions", json={
        "type": "income",
        "description": "Sinal 50% - gorjeta",
        "amount": 15,
        "order_id": order["id"]
    }, headers=auth_headers)).json()
    assert manual["category"] == "Sinal"
    assert manual["is_automatic"] is False

    url = f"/api/orders/{order['id']}/deposit"
    await client.post(url, json={"paid": True}, headers=auth_headers)
    await client.post(url, json={"paid": False}, headers=auth_headers)
    await client.post(f"/api/orders/{order['id']}/full-payment", json={"method": "pix"}, headers=auth_headers)
    await client.delete(f"/api/orders/{order['id']}/full-payment", headers=auth_headers)

    postings = await order_transactions(client, auth_headers, order["id"])
    assert [p["id"] for p in postings] == [manual["id"]]


async def test_deposit_larger_than_total_is_rejected(client, auth_headers, maria):
    order = await create_order(client, auth_headers, client_id=maria["id"])

    response = await client.post(f"/api/orders/{order['id']}/deposit", json={"paid": True, "amount": 250}, headers=auth_headers)
    assert response.status_code == 400


async def test_total_ignores_gifts_and_adds_delivery_fee(client, auth_headers, maria):
    order = await create_order(client, auth_headers, client_id=maria["id"], delivery_fee=20, items=[
        {"product_name": "Bolo", "quantity": 1, "unit_price": 150},
        {"product_name": "Brigadeiro", "quantity": 0.5, "unit_price": 100, "unit_type": "cento"},
        {"product_name": "Bombom", "quantity": 1, "unit_price": 50, "is_gift": True},
    ])
    assert order["total_amount"] == 220
    assert [i["is_additional"] for i in order["items"]] == [True, True, True]

    response = await client.put(f"/api/orders/{order['id']}", json={"delivery_fee": 0}, headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["total_amount"] == 200


async def test_full_payment_and_undo(client, auth_headers, maria):
    order = await create_order(client, auth_headers, client_id=maria["id"])
    await client.post(f"/api/orders/{order['id']}/deposit", json={"paid": True}, headers=auth_headers)

    response = await client.post(f"/api/orders/{order['id']}/full-payment", json={
        "method": "pix", "fee_type": "value", "fee": 2
    }, headers=auth_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["full_payment_received"] is True
    assert data["payment_method"] == "pix"
    assert data["payment_fee"] == 2

    postings = await order_transactions(client, auth_headers, order["id"])
    total = [p for p in postings if p["category"] == "Pagamento Total"][0]
    assert total["amount"] == 98
    assert total["description"] == "Pagamento Total (Pix) - Maria #0001"

    # Já pago integralmente: entrega não gera pagamento final
    await client.patch(f"/api/orders/{order['id']}/status", json={"status": "delivered"}, headers=auth_headers)
    postings = await order_transactions(client, auth_headers, order["id"])
    assert sorted(p["category"] for p in postings) == ["Pagamento Total", "Sinal"]

    response = await client.post(f"/api/orders/{order['id']}/full-payment", json={"method": "pix"}, headers=auth_headers)
    assert response.status_code == 400

    response = await client.delete(f"/api/orders/{order['id']}/full-payment", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["full_payment_received"] is False
    postings = await order_transactions(client, auth_headers, order["id"])
    assert [p["category"] for p in postings] == ["Sinal"]


async def test_full_payment_moves_quote_to_production(client, auth_headers, maria):
    order = await create_order(client, auth_headers, client_id=maria["id"])

    response = await client.post(f"/api/orders/{order['id']}/full-payment", json={"method": "link"}, headers=auth_headers)
    assert response.json()["status"] == "in_production"

    postings = await order_transactions(client, auth_headers, order["id"])
    assert postings[0]["amount"] == 200


async def test_order_numbers_respect_profile_start(client, auth_headers):
    first = await create_order(client, auth_headers)
    assert first["order_number"] == 1

    await client.put("/api/profile", json={"order_number_start": 100}, headers=auth_headers)
    second = await create_order(client, auth_headers)
    third = await create_order(client, auth_headers)
    assert (second["order_number"], third["order_number"]) == (100, 101)


async def test_list_filters(client, auth_headers, maria):
    quote = await create_order(client, auth_headers, client_id=maria["id"])
    other = await create_order(client, auth_headers)
    await client.post(f"/api/orders/{other['id']}/deposit", json={"paid": True}, headers=auth_headers)

    response = await client.get("/api/orders", params={"status": "quote"}, headers=auth_headers)
    assert [o["id"] for o in response.json()] == [quote["id"]]

    response = await client.get("/api/orders", params={"search": "mar"}, headers=auth_headers)
    assert [o["id"] for o in response.json()] == [quote["id"]]


async def test_delete_order_removes_postings(client, auth_headers, maria):
    order = await create_order(client, auth_headers, client_id=maria["id"])
    await client.post(f"/api/orders/{order['id']}/deposit", json={"paid": True}, headers=auth_headers)

    response = await client.delete(f"/api/orders/{order['id']}", headers=auth_headers)
    assert response.status_code == 200

    response = await client.get(f"/api/orders/{order['id']}", headers=auth_headers)
    assert response.status_code == 404

    response = await client.get("/api/transactions", headers=auth_headers)
    assert response.json() == []


async def test_orders_are_isolated_between_accounts(client, auth_headers, maria):
    order = await create_order(client, auth_headers, client_id=maria["id"])
    other_headers = await register(client, email="outra@confeitaria.com")

    response = await client.get(f"/api/orders/{order['id']}", headers=other_headers)
    assert response.status_code == 404

    response = await client.post("/api/orders", json={"client_id": maria["id"], "items": []}, headers=other_headers)
    assert response.status_code == 400


async def test_whatsapp_templates(client, auth_headers, maria):
    order = await create_order(client, auth_headers, client_id=maria["id"])

    response = await client.get(f"/api/orders/{order['id']}/whatsapp", headers=auth_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["phone"] == "5511987654321"
    assert [t["type"] for t in data["templates"]] == ["quote", "deposit_collection"]
    assert data["templates"][0]["url"].startswith("https://wa.me/5511987654321?text=")
