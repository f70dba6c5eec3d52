"""
HTTP tests for the PowerCell API.
"""
from powercell.models import ExchangeStatus, ServiceStatus

API = "/api/v1"


def _sale_body(product_id, quantity=1, price=1000, **extra):
    body = {
        "customer_name": "Ravi Kumar",
        "items": [{"product_id": product_id, "quantity": quantity, "price": price}],
        "total_amount": quantity * price,
    }
    body.update(extra)
    return body


class TestHealth:

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["status"] == "running"

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["database"] == "connected"
        assert data["cache"] == "disabled"


class TestSalesApi:

    def test_create_sale(self, client, db, make_product):
        product = make_product(stock=5, price=1000)

        response = client.post(f"{API}/sales", json=_sale_body(product.id, quantity=3))

        assert response.status_code == 201
        data = response.json()
        assert data["total_amount"] == 3000
        assert data["payment_method"] == "Cash"
        assert data["items"][0]["product"]["brand"] == "Exide"
        db.refresh(product)
        assert product.stock == 2

        fetched = client.get(f"{API}/sales/{data['id']}")
        assert fetched.status_code == 200
        assert fetched.json()["id"] == data["id"]

    def test_insufficient_stock(self, client, db, make_product):
        product = make_product(stock=2)

        response = client.post(f"{API}/sales", json=_sale_body(product.id, quantity=10))

        assert response.status_code == 409
        data = response.json()
        assert "Exide EPIQ65" in data["detail"]
        assert data["available"] == 2
        db.refresh(product)
        assert product.stock == 2

    def test_invalid_cart(self, client, make_product):
        product = make_product()
        body = _sale_body(product.id)
        body["items"][0]["service_id"] = 9

        assert client.post(f"{API}/sales", json=body).status_code == 422
        assert client.post(f"{API}/sales", json=_sale_body(product.id, quantity=0)).status_code == 422

    def test_checkout_line_shape(self, client, db, make_product, make_exchange, make_service):
        product = make_product(stock=5, price=1000)
        record = make_exchange()
        job = make_service()
        body = {
            "customer_name": "Ravi Kumar",
            "type": "Exchange",
            "items": [
                {"product_id": product.id, "service_id": None, "quantity": 1, "price": 1000},
                {"product_id": None, "service_id": job.id, "quantity": 1, "price": 350},
            ],
            "total_amount": 850,
            "discount_amount": 500,
            "exchange_record_id": record.id,
        }

        response = client.post(f"{API}/sales", json=body)

        assert response.status_code == 201
        data = response.json()
        assert data["sale_type"] == "Exchange"
        assert [item["service_id"] for item in data["items"]] == [None, job.id]
        db.refresh(product)
        assert product.stock == 4

    def test_pending_service_rejected(self, client, make_service):
        job = make_service(status=ServiceStatus.PENDING)
        body = {
            "customer_name": "Ravi Kumar",
            "items": [{"product_id": None, "service_id": job.id, "quantity": 1, "price": 350}],
            "total_amount": 350,
        }

        response = client.post(f"{API}/sales", json=body)

        assert response.status_code == 409
        assert response.json()["service_status"] == "pending"

    def test_idempotency_header(self, client, db, make_product):
        product = make_product(stock=5)
        headers = {"Idempotency-Key": "till-2-0042"}

        first = client.post(f"{API}/sales", json=_sale_body(product.id), headers=headers)
        second = client.post(f"{API}/sales", json=_sale_body(product.id), headers=headers)

        assert first.json()["id"] == second.json()["id"]
        db.refresh(product)
        assert product.stock == 4

    def test_exchange_consumed_twice(self, client, make_product, make_exchange):
        product = make_product(stock=5)
        record = make_exchange()
        body = _sale_body(product.id, exchange_record_id=record.id, sale_type="Exchange", discount_amount=500)

        assert client.post(f"{API}/sales", json=body).status_code == 201
        response = client.post(f"{API}/sales", json=body)

        assert response.status_code == 409
        assert response.json()["exchange_record_id"] == record.id

    def test_missing_sale(self, client):
        assert client.get(f"{API}/sales/5").status_code == 404


class TestUpiPaymentsApi:

    def _create(self, client, product_id):
        response = client.post(f"{API}/upi-payments", json={
            "amount": 1180,
            "sale_data": _sale_body(product_id, extra_charges=180, total_amount=1180),
        })
        assert response.status_code == 201
        return response.json()["id"]

    def test_full_flow(self, client, db, make_product):
        product = make_product(stock=5, price=1000)
        payment_id = self._create(client, product.id)

        status = client.get(f"{API}/upi-payments/{payment_id}/status").json()
        assert status["status"] == "pending"
        assert status["poll_interval"] == 3
        assert status["auto_confirm_delay"] == 5

        confirm = client.post(f"{API}/upi-payments/{payment_id}/confirm", json={"upi_ref": "412345678901"})
        assert confirm.status_code == 200
        assert confirm.json()["status"] == "received"

        finalise = client.post(f"{API}/upi-payments/{payment_id}/finalise")
        assert finalise.status_code == 201
        sale_id = finalise.json()["sale_id"]

        sale = client.get(f"{API}/sales/{sale_id}").json()
        assert sale["payment_method"] == "UPI"
        assert sale["total_amount"] == 1180
        db.refresh(product)
        assert product.stock == 4

        again = client.post(f"{API}/upi-payments/{payment_id}/finalise")
        assert again.status_code == 409
        assert again.json()["sale_id"] == sale_id

        assert client.post(f"{API}/upi-payments/{payment_id}/confirm").status_code == 409

    def test_checkout_line_shape(self, client, make_product):
        product = make_product(stock=5, price=1000)
        response = client.post(f"{API}/upi-payments", json={
            "amount": 1000,
            "sale_data": {
                "type": "Exchange",
                "items": [{"product_id": product.id, "service_id": None, "quantity": 1, "price": 1000}],
                "total_amount": 1000,
            },
        })
        assert response.status_code == 201
        payment_id = response.json()["id"]

        client.post(f"{API}/upi-payments/{payment_id}/confirm")
        sale_id = client.post(f"{API}/upi-payments/{payment_id}/finalise").json()["sale_id"]

        sale = client.get(f"{API}/sales/{sale_id}").json()
        assert sale["sale_type"] == "Exchange"
        assert sale["customer_name"] == "Walk-in Customer"

    def test_finalise_pending(self, client, make_product):
        product = make_product()
        payment_id = self._create(client, product.id)

        response = client.post(f"{API}/upi-payments/{payment_id}/finalise")

        assert response.status_code == 422
        assert response.json()["detail"] == "Payment not yet confirmed."

    def test_confirm_without_body(self, client, make_product):
        product = make_product()
        payment_id = self._create(client, product.id)

        response = client.post(f"{API}/upi-payments/{payment_id}/confirm")

        assert response.status_code == 200

    def test_invalid_cart_rejected_at_creation(self, client):
        response = client.post(f"{API}/upi-payments", json={
            "amount": 100,
            "sale_data": {"items": [], "total_amount": 100},
        })
        assert response.status_code == 422

    def test_unknown_payment(self, client):
        assert client.get(f"{API}/upi-payments/99/status").status_code == 404
        assert client.post(f"{API}/upi-payments/99/confirm").status_code == 404
        assert client.post(f"{API}/upi-payments/99/finalise").status_code == 404


class TestExchangesApi:

    def test_pending_filter(self, client, make_exchange):
        make_exchange(customer_name="Ravi Kumar")
        make_exchange(customer_name="Ravi Kumar", status=ExchangeStatus.CONSUMED)
        make_exchange(customer_name="Anita")

        response = client.get(f"{API}/exchanges/pending", params={"customer_name": "ravi"})

        assert response.status_code == 200
        data = response.json()
        assert len(data) == 1
        assert data[0]["status"] == "pending"

    def test_create_and_get(self, client):
        response = client.post(f"{API}/exchanges", json={
            "customer_name": "Anita",
            "battery_brand": "Luminous",
            "valuation_amount": 750,
        })
        assert response.status_code == 201
        record_id = response.json()["id"]

        assert client.get(f"{API}/exchanges/{record_id}").json()["battery_brand"] == "Luminous"
        assert len(client.get(f"{API}/exchanges").json()) == 1

    def test_valuation(self, client):
        response = client.post(f"{API}/exchanges/valuation", json={
            "weight_kg": 10, "condition": "Good", "age_years": 2
        })
        assert response.json() == {"valuation_amount": 1200}

        bad = client.post(f"{API}/exchanges/valuation", json={"weight_kg": 10, "condition": "Dead"})
        assert bad.status_code == 422


class TestInventoryApi:

    def test_products(self, client):
        response = client.post(f"{API}/products", json={
            "brand": "Amaron", "model": "FL-700", "category": "Inverter",
            "capacity_ah": "150", "price": 14500, "stock": 1, "min_stock": 2
        })
        assert response.status_code == 201
        product_id = response.json()["id"]

        assert client.get(f"{API}/products/{product_id}").json()["is_low_stock"] is True
        assert len(client.get(f"{API}/products", params={"category": "Inverter"}).json()) == 1
        assert client.get(f"{API}/products/999").status_code == 404

    def test_stock_update_and_movements(self, client, make_product):
        product = make_product(stock=1, min_stock=2)

        low = client.get(f"{API}/inventory/low-stock").json()
        assert low["count"] == 1

        response = client.put(f"{API}/inventory/update", json={
            "product_id": product.id, "quantity": 6, "movement_type": "purchase"
        })
        assert response.status_code == 200
        assert response.json()["new_quantity"] == 7

        movements = client.get(f"{API}/inventory/movements", params={"product_id": product.id}).json()
        assert movements["count"] == 1
        assert client.get(f"{API}/inventory/low-stock").json()["count"] == 0

    def test_stock_update_rejections(self, client, make_product):
        product = make_product(stock=1)

        bad_type = client.put(f"{API}/inventory/update", json={
            "product_id": product.id, "quantity": 1, "movement_type": "gift"
        })
        assert bad_type.status_code == 400

        negative = client.put(f"{API}/inventory/update", json={"product_id": product.id, "quantity": -3})
        assert negative.status_code == 409


class TestServicesApi:

    def test_workflow(self, client):
        response = client.post(f"{API}/services", json={
            "customer_name": "Meena", "contact_number": "9000000001", "vehicle_details": "Hyundai i20"
        })
        assert response.status_code == 201
        job_id = response.json()["id"]

        skip = client.put(f"{API}/services/{job_id}/status", json={"status": "completed"})
        assert skip.status_code == 409

        step = client.put(f"{API}/services/{job_id}/status", json={"status": "in_progress"})
        assert step.json()["status"] == "in_progress"

        assigned = client.put(f"{API}/services/{job_id}/assign", json={"staff_name": "Karthik"})
        assert assigned.json()["assigned_to"] == "Karthik"

    def test_list_by_status(self, client, make_service):
        make_service(status=ServiceStatus.PENDING)
        make_service()

        response = client.get(f"{API}/services", params={"status": "pending"})

        assert [job["status"] for job in response.json()] == ["pending"]
