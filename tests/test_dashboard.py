from conftest import T, at
from fleet.models.booking import BookingStatus, Reservation
from fleet.models.vehicle import Vehicle
from fleet.services.dashboard import aggregate


def book(engine, vehicle, start=1, customer="CUSTOMER-1"):
    return engine.create_booking(vehicle.id, customer, "110001", "110003", at(start))


def busy_count(stats):
    return stats.total_vehicles - stats.available_vehicles


def test_empty_fleet(engine):
    stats = engine.get_dashboard_stats()

    assert stats.total_vehicles == 0
    assert stats.available_vehicles == 0
    assert stats.active_bookings == 0
    assert stats.completed_bookings == 0
    assert stats.recent_bookings == []


def test_counts_by_status(engine, truck):
    other = engine.add_vehicle("Eicher Pro", 9000, 6)
    book(engine, truck, start=1)
    in_progress = book(engine, other, start=1)
    done = book(engine, truck, start=5)
    cancelled = book(engine, other, start=5)

    engine.update_booking_status(in_progress.id, "in-progress")
    engine.update_booking_status(done.id, "in-progress")
    engine.update_booking_status(done.id, "completed")
    engine.update_booking_status(cancelled.id, "cancelled")

    stats = engine.get_dashboard_stats()
    assert stats.total_vehicles == 2
    assert stats.active_bookings == 2
    assert stats.completed_bookings == 1


def test_in_progress_inside_window_is_busy_then_available_once_done(
    engine, clock, truck
):
    booking = book(engine, truck, start=1)
    clock.advance(hours=2)
    engine.update_booking_status(booking.id, "in-progress")

    stats = engine.get_dashboard_stats()
    assert stats.total_vehicles == 1
    assert stats.available_vehicles == 0

    clock.advance(hours=2)
    engine.update_booking_status(booking.id, "completed")
    stats = engine.get_dashboard_stats()
    assert stats.available_vehicles == 1


def test_confirmed_booking_busy_only_inside_window(engine, clock, truck):
    book(engine, truck, start=1)

    assert engine.get_dashboard_stats().available_vehicles == 1

    clock.advance(hours=1)
    assert engine.get_dashboard_stats().available_vehicles == 0

    clock.advance(hours=2)
    assert engine.get_dashboard_stats().available_vehicles == 1


def test_in_progress_past_end_still_busy(engine, clock, truck):
    booking = book(engine, truck, start=1)
    engine.update_booking_status(booking.id, "in-progress")

    clock.advance(hours=10)
    assert engine.get_dashboard_stats().available_vehicles == 0


def test_available_plus_busy_is_total(engine, clock, truck):
    vehicles = [truck] + [engine.add_vehicle(f"Truck {i}", 1000, 6) for i in range(3)]
    book(engine, vehicles[0], start=1)
    book(engine, vehicles[0], start=3)
    book(engine, vehicles[1], start=2)
    engine.update_booking_status(book(engine, vehicles[2], start=1).id, "in-progress")

    for _ in range(8):
        stats = engine.get_dashboard_stats()
        busy = {
            r.vehicle_id
            for r in engine.list_bookings()
            if r.status == BookingStatus.IN_PROGRESS
            or (r.status == BookingStatus.CONFIRMED and r.start_time <= clock.now < r.end_time)
        }
        assert stats.available_vehicles + len(busy) == stats.total_vehicles
        clock.advance(minutes=45)


def test_recent_bookings_newest_first(engine, clock, truck):
    created = []
    for i in range(7):
        created.append(book(engine, truck, start=1 + 2 * i))
        clock.advance(seconds=1)

    recent = engine.get_dashboard_stats().recent_bookings
    assert [r.id for r in recent] == [r.id for r in reversed(created)][:5]


def test_recent_bookings_tie_broken_by_creation_order(engine, truck):
    created = [book(engine, truck, start=1 + 2 * i) for i in range(3)]

    recent = engine.get_dashboard_stats().recent_bookings
    assert [r.id for r in recent] == [r.id for r in reversed(created)]


def test_aggregate_ignores_bookings_of_unknown_vehicles():
    vehicle = Vehicle(id="v1", name="Tata Ace", capacity_kg=1000, tyres=4, created_at=T)
    orphan = Reservation(
        id="r1",
        vehicle_id="gone",
        customer_id="CUSTOMER-1",
        from_pincode="110001",
        to_pincode="110003",
        start_time=at(-1),
        end_time=at(1),
        estimated_ride_duration_hours=2.0,
        created_at=at(-2),
    )

    stats = aggregate([vehicle], [orphan], T, recent_limit=3)
    assert stats.available_vehicles == 1
    assert stats.active_bookings == 1
    assert [r.id for r in stats.recent_bookings] == ["r1"]
