"""HTTP tests for locations, machines and sales."""
import uuid


async def create_location(client, **overrides):
    payload = {"name": "Main Street Laundromat", "commission_model": "percent_gross", "commission_pct_bps": 1500}
    payload.update(overrides)
    response = await client.post("/api/v1/locations", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


async def create_machine(client, **overrides):
    payload = {"name": "Snack Tower", "serial_number": f"SN-{uuid.uuid4().hex[:8]}"}
    payload.update(overrides)
    response = await client.post("/api/v1/machines", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


class TestLocations:
    async def test_create_and_get(self, client):
        created = await create_location(client, commission_min_cents=2500)
        assert created["commission_model"] == "percent_gross"
        assert created["commission_min_cents"] == 2500

        response = await client.get(f"/api/v1/locations/{created['id']}")
        assert response.status_code == 200
        assert response.json()["name"] == "Main Street Laundromat"

    async def test_defaults_to_no_commission(self, client):
        response = await client.post("/api/v1/locations", json={"name": "Bare"})
        assert response.status_code == 201
        data = response.json()
        assert data["commission_model"] == "none"
        assert data["commission_pct_bps"] is None

    async def test_validation(self, client):
        response = await client.post("/api/v1/locations", json={
            "name": "Bad",
            "commission_model": "per_vend",
        })
        assert response.status_code == 422

        response = await client.post("/api/v1/locations", json={
            "name": "Bad",
            "commission_pct_bps": 10001,
        })
        assert response.status_code == 422

    async def test_list_filters(self, client):
        await create_location(client, name="Alpha Mall")
        await create_location(client, name="Beta Office", commission_model="flat_month", commission_flat_cents=5000)

        response = await client.get("/api/v1/locations", params={"commission_model": "flat_month"})
        assert [loc["name"] for loc in response.json()["items"]] == ["Beta Office"]

        response = await client.get("/api/v1/locations", params={"search": "mall"})
        data = response.json()
        assert data["total"] == 1
        assert data["items"][0]["name"] == "Alpha Mall"

    async def test_update_commission_terms(self, client):
        created = await create_location(client)
        response = await client.put(f"/api/v1/locations/{created['id']}", json={
            "commission_model": "hybrid",
            "commission_flat_cents": 1000,
        })
        assert response.status_code == 200
        data = response.json()
        assert data["commission_model"] == "hybrid"
        assert data["commission_flat_cents"] == 1000
        assert data["commission_pct_bps"] == 1500

    async def test_update_rejects_null_name(self, client):
        created = await create_location(client)
        response = await client.put(f"/api/v1/locations/{created['id']}", json={"name": None})
        assert response.status_code == 422

        response = await client.get(f"/api/v1/locations/{created['id']}")
        assert response.json()["name"] == "Main Street Laundromat"

    async def test_missing_location(self, client):
        response = await client.get(f"/api/v1/locations/{uuid.uuid4()}")
        assert response.status_code == 404

    async def test_delete_blocked_by_machines(self, client):
        created = await create_location(client)
        await create_machine(client, location_id=created["id"])

        response = await client.delete(f"/api/v1/locations/{created['id']}")
        assert response.status_code == 409

    async def test_delete(self, client):
        created = await create_location(client)
        response = await client.delete(f"/api/v1/locations/{created['id']}")
        assert response.status_code == 204

        response = await client.get(f"/api/v1/locations/{created['id']}")
        assert response.status_code == 404


class TestMachines:
    async def test_create_at_location_and_list(self, client):
        location = await create_location(client)
        machine = await create_machine(client, location_id=location["id"])
        await create_machine(client)

        assert machine["status"] == "ACTIVE"

        response = await client.get("/api/v1/machines", params={"location_id": location["id"]})
        data = response.json()
        assert data["total"] == 1
        assert data["items"][0]["id"] == machine["id"]

    async def test_unknown_location(self, client):
        response = await client.post("/api/v1/machines", json={
            "name": "Lost",
            "location_id": str(uuid.uuid4()),
        })
        assert response.status_code == 404

    async def test_duplicate_serial(self, client):
        await create_machine(client, serial_number="DUP-1")
        response = await client.post("/api/v1/machines", json={"name": "Twin", "serial_number": "DUP-1"})
        assert response.status_code == 409

    async def test_move_machine(self, client):
        first = await create_location(client, name="First")
        second = await create_location(client, name="Second")
        machine = await create_machine(client, location_id=first["id"])

        response = await client.put(f"/api/v1/machines/{machine['id']}", json={"location_id": second["id"]})
        assert response.status_code == 200
        assert response.json()["location_id"] == second["id"]

    async def test_delete_blocked_by_sales(self, client):
        machine = await create_machine(client)
        await client.post("/api/v1/sales", json={"machine_id": machine["id"], "qty": 1, "unit_price_cents": 150})

        response = await client.delete(f"/api/v1/machines/{machine['id']}")
        assert response.status_code == 409

        response = await client.get("/api/v1/sales", params={"machine_id": machine["id"]})
        assert response.json()["total"] == 1

    async def test_delete_machine_without_sales(self, client):
        machine = await create_machine(client)

        response = await client.delete(f"/api/v1/machines/{machine['id']}")
        assert response.status_code == 204

        response = await client.get(f"/api/v1/machines/{machine['id']}")
        assert response.status_code == 404

    async def test_update_rejects_null_name_and_status(self, client):
        machine = await create_machine(client)

        response = await client.put(f"/api/v1/machines/{machine['id']}", json={"name": None})
        assert response.status_code == 422

        response = await client.put(f"/api/v1/machines/{machine['id']}", json={"status": None})
        assert response.status_code == 422

        response = await client.put(f"/api/v1/machines/{machine['id']}", json={"manufacturer": None})
        assert response.status_code == 200


class TestSales:
    async def test_record_sale(self, client):
        machine = await create_machine(client)
        response = await client.post("/api/v1/sales", json={
            "machine_id": machine["id"],
            "product_name": "Cola",
            "qty": 3,
            "unit_price_cents": 175,
            "occurred_at": "2026-09-10T08:30:00-04:00",
        })
        assert response.status_code == 201
        data = response.json()
        assert data["line_total_cents"] == 525
        assert data["occurred_at"].startswith("2026-09-10T12:30:00")

    async def test_unknown_machine(self, client):
        response = await client.post("/api/v1/sales", json={
            "machine_id": str(uuid.uuid4()),
            "qty": 1,
            "unit_price_cents": 100,
        })
        assert response.status_code == 404

    async def test_rejects_zero_quantity(self, client):
        machine = await create_machine(client)
        response = await client.post("/api/v1/sales", json={
            "machine_id": machine["id"],
            "qty": 0,
            "unit_price_cents": 100,
        })
        assert response.status_code == 422

    async def test_list_by_date(self, client):
        machine = await create_machine(client)
        for day in ("2026-09-01", "2026-09-15", "2026-10-01"):
            await client.post("/api/v1/sales", json={
                "machine_id": machine["id"],
                "qty": 1,
                "unit_price_cents": 100,
                "occurred_at": f"{day}T10:00:00Z",
            })

        response = await client.get("/api/v1/sales", params={
            "start_date": "2026-09-01",
            "end_date": "2026-09-30",
        })
        data = response.json()
        assert data["total"] == 2
        assert data["items"][0]["occurred_at"].startswith("2026-09-15")

    async def test_sales_feed_commission_report(self, client):
        location = await create_location(client, commission_pct_bps=1000)
        machine = await create_machine(client, location_id=location["id"])
        await client.post("/api/v1/sales", json={
            "machine_id": machine["id"],
            "qty": 10,
            "unit_price_cents": 250,
            "occurred_at": "2026-09-20T10:00:00Z",
        })

        response = await client.get("/api/v1/commissions/report", params={
            "start_date": "2026-09-01",
            "end_date": "2026-09-30",
        })
        item = response.json()["items"][0]
        assert item["gross_revenue"] == 25.0
        assert item["commission_amount"] == 2.5

    async def test_delete_sale(self, client):
        machine = await create_machine(client)
        sale = (await client.post("/api/v1/sales", json={
            "machine_id": machine["id"], "qty": 1, "unit_price_cents": 100,
        })).json()

        response = await client.delete(f"/api/v1/sales/{sale['id']}")
        assert response.status_code == 204
        response = await client.delete(f"/api/v1/sales/{sale['id']}")
        assert response.status_code == 404


class TestHealth:
    async def test_root(self, client):
        response = await client.get("/")
        assert response.status_code == 200
        assert "docs" in response.json()

    async def test_health_reports_jobs(self, client):
        response = await client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["checks"]["database"] == "connected"
        assert data["jobs"] == []
