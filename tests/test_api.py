from conftest import at


def add_vehicle(client, name="Tata Ace", capacity_kg=1000, tyres=4):
    response = client.post(
        "/api/vehicles", json={"name": name, "capacityKg": capacity_kg, "tyres": tyres}
    )
    assert response.status_code == 201, response.text
    return response.json()["vehicle"]


def booking_payload(vehicle_id, start=1, customer="CUSTOMER-1"):
    return {
        "vehicleId": vehicle_id,
        "customerId": customer,
        "fromPincode": "110001",
        "toPincode": "110003",
        "startTime": at(start).isoformat(),
    }


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_add_and_list_vehicles(client):
    vehicle = add_vehicle(client, name="  Tata Ace  ")
    assert vehicle["name"] == "Tata Ace"
    assert vehicle["capacityKg"] == 1000
    assert vehicle["tyres"] == 4

    response = client.get("/api/vehicles")
    assert response.status_code == 200
    assert [v["id"] for v in response.json()] == [vehicle["id"]]

    response = client.get(f"/api/vehicles/{vehicle['id']}")
    assert response.status_code == 200
    assert response.json()["name"] == "Tata Ace"


def test_add_vehicle_with_empty_name_is_bad_request(client):
    response = client.post(
        "/api/vehicles", json={"name": "   ", "capacityKg": 100, "tyres": 4}
    )
    assert response.status_code == 400
    body = response.json()
    assert "name" in body["fields"]
    assert any(d.startswith("name:") for d in body["details"])


def test_add_vehicle_out_of_range_fields(client):
    response = client.post(
        "/api/vehicles", json={"name": "Volvo", "capacityKg": 60000, "tyres": 20}
    )
    assert response.status_code == 400
    assert set(response.json()["fields"]) == {"capacityKg", "tyres"}


def test_search_endpoint(client):
    vehicle = add_vehicle(client)

    response = client.get(
        "/api/vehicles/available",
        params={
            "capacityRequired": 500,
            "fromPincode": "110001",
            "toPincode": "110002",
            "startTime": at(1).isoformat(),
        },
    )
    assert response.status_code == 200, response.text
    body = response.json()
    assert [v["id"] for v in body["availableVehicles"]] == [vehicle["id"]]
    assert body["availableVehicles"][0]["estimatedRideDurationHours"] == 1.0
    assert body["availableVehicles"][0]["durationFormatted"] == "1h"
    assert body["searchCriteria"]["fromPincode"] == "110001"


def test_search_with_invalid_criteria(client):
    response = client.get(
        "/api/vehicles/available",
        params={"capacityRequired": 500, "fromPincode": "1100", "toPincode": "110002"},
    )
    assert response.status_code == 400
    assert set(response.json()["fields"]) == {"fromPincode", "startTime"}


def test_search_at_the_end_of_the_calendar_is_bad_request(client):
    add_vehicle(client)

    response = client.get(
        "/api/vehicles/available",
        params={
            "capacityRequired": 500,
            "fromPincode": "110001",
            "toPincode": "110005",
            "startTime": "9999-12-31T22:00:00Z",
        },
    )
    assert response.status_code == 400
    assert list(response.json()["fields"]) == ["startTime"]


def test_booking_flow(client):
    vehicle = add_vehicle(client)

    response = client.post("/api/bookings", json=booking_payload(vehicle["id"]))
    assert response.status_code == 201, response.text
    booking = response.json()["booking"]
    assert booking["status"] == "confirmed"
    assert booking["vehicleId"] == vehicle["id"]
    assert booking["estimatedRideDurationHours"] == 2.0

    response = client.post("/api/bookings", json=booking_payload(vehicle["id"], start=2))
    assert response.status_code == 409
    conflict = response.json()["conflict"]
    assert conflict["vehicleId"] == vehicle["id"]
    assert len(conflict["conflictingWindows"]) == 1

    response = client.get(f"/api/bookings/{booking['id']}")
    assert response.status_code == 200
    assert response.json()["id"] == booking["id"]

    response = client.get("/api/bookings", params={"vehicleId": vehicle["id"]})
    assert [b["id"] for b in response.json()] == [booking["id"]]


def test_booking_unknown_vehicle_is_not_found(client):
    response = client.post("/api/bookings", json=booking_payload("missing"))
    assert response.status_code == 404


def test_booking_with_missing_field_is_bad_request(client):
    payload = booking_payload("missing")
    del payload["customerId"]

    response = client.post("/api/bookings", json=payload)
    assert response.status_code == 400
    assert "customerId" in response.json()["fields"]


def test_status_update(client):
    vehicle = add_vehicle(client)
    booking = client.post("/api/bookings", json=booking_payload(vehicle["id"])).json()[
        "booking"
    ]
    url = f"/api/bookings/{booking['id']}/status"

    response = client.patch(url, json={"status": "in-progress"})
    assert response.status_code == 200
    assert response.json()["booking"]["status"] == "in-progress"

    response = client.patch(url, json={"status": "confirmed"})
    assert response.status_code == 409

    response = client.patch(url, json={"status": "delayed"})
    assert response.status_code == 400

    response = client.patch("/api/bookings/missing/status", json={"status": "cancelled"})
    assert response.status_code == 404

    response = client.get("/api/bookings", params={"status": "in-progress"})
    assert [b["id"] for b in response.json()] == [booking["id"]]


def test_dashboard_stats(client, clock):
    vehicle = add_vehicle(client)
    add_vehicle(client, name="Eicher Pro", capacity_kg=9000, tyres=6)
    client.post("/api/bookings", json=booking_payload(vehicle["id"]))

    clock.advance(hours=2)
    response = client.get("/api/dashboard/stats")
    assert response.status_code == 200
    stats = response.json()
    assert stats["totalVehicles"] == 2
    assert stats["availableVehicles"] == 1
    assert stats["activeBookings"] == 1
    assert stats["completedBookings"] == 0
    assert len(stats["recentBookings"]) == 1
