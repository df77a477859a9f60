from training_scheduler.monitoring.prometheus_metrics import prometheus_metrics


def test_exposition_contains_booking_counter():
    prometheus_metrics.record_booking("explicit", "booked")

    payload = prometheus_metrics.get_metrics().decode()

    assert 'training_scheduler_bookings_total{entry_point="explicit",outcome="booked"}' in payload
    assert "training_scheduler_service_operation_duration_seconds" in payload
