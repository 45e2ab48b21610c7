def latest_end_odometer(vehicle):
    """
    End odometer of the vehicle's most recent non-cancelled record of either
    type, or None when it has none.
    """
    from trips.models import CANCELLED, RECORD_MODELS

    latest = None
    for model in RECORD_MODELS.values():
        row = (
            model.objects.filter(vehicle=vehicle, end_odometer__isnull=False)
            .exclude(status=CANCELLED)
            .order_by(f'-{model.DATE_FIELD}', '-updated_at')
            .values(model.DATE_FIELD, 'updated_at', 'end_odometer')
            .first()
        )
        if row is None:
            continue
        candidate = (row[model.DATE_FIELD], row['updated_at'], row['end_odometer'])
        if latest is None or candidate[:2] > latest[:2]:
            latest = candidate
    return latest[2] if latest else None


def vehicle_odometer(vehicle):
    """
    Odometer a new trip of this vehicle starts from: the last recorded end
    odometer, else the vehicle's stored reading, else 0.
    """
    last_end = latest_end_odometer(vehicle)
    if last_end is not None:
        return last_end
    if vehicle.current_odometer is not None:
        return vehicle.current_odometer
    return 0
