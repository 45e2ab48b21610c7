"""
Oil-change due status.

The status is a pure function of the current odometer and the odometer at the
last oil change; thresholds come from settings.
"""
from django.conf import settings

NORMAL = 'normal'
DUE_SOON = 'due_soon'
NEEDS_CHANGE = 'needs_change'

STATUS_LABELS = {
    NORMAL: 'Normal',
    DUE_SOON: 'Oil change due soon',
    NEEDS_CHANGE: 'Oil change needed',
}


def _interval_km():
    return getattr(settings, 'OIL_CHANGE_INTERVAL_KM', 5000)


def _warning_km():
    return getattr(settings, 'OIL_CHANGE_WARNING_KM', 4000)


def km_since_oil_change(current_odometer, last_oil_change_odometer):
    if current_odometer is None or last_oil_change_odometer is None:
        return None
    return current_odometer - last_oil_change_odometer


def oil_change_status(current_odometer, last_oil_change_odometer) -> str:
    """
    Classify a vehicle by the distance driven since its last oil change.

    Returns 'needs_change' at or beyond the interval, 'due_soon' at or beyond
    the warning distance, otherwise 'normal' (also when a reading is missing).
    """
    diff = km_since_oil_change(current_odometer, last_oil_change_odometer)
    if diff is None:
        return NORMAL
    if diff >= _interval_km():
        return NEEDS_CHANGE
    if diff >= _warning_km():
        return DUE_SOON
    return NORMAL


def oil_change_summary(vehicle) -> dict:
    """Status plus the next change odometer and the km remaining until it."""
    last = vehicle.last_oil_change_odometer
    current = vehicle.current_odometer
    next_change = last + _interval_km() if last is not None else None
    remaining = next_change - current if next_change is not None and current is not None else None
    status = oil_change_status(current, last)
    return {
        'vehicle_id': vehicle.pk,
        'vehicle_no': vehicle.vehicle_no,
        'vehicle_name': vehicle.vehicle_name,
        'current_odometer': current,
        'last_oil_change_odometer': last,
        'km_since_oil_change': km_since_oil_change(current, last),
        'next_oil_change_odometer': next_change,
        'km_remaining': remaining,
        'status': status,
        'status_label': STATUS_LABELS[status],
    }
