"""
CSV rendering of trip records.

Output is UTF-8 with a byte-order mark so spreadsheet applications detect the
encoding; every field is quoted and missing values are written as empty
strings.
"""
import csv
import io

from django.utils import timezone

BOM = '\ufeff'

COMMON_COLUMNS = [
    ('Date', lambda r: r.trip_date),
    ('Driver', lambda r: r.driver.name),
    ('Vehicle', lambda r: r.vehicle.vehicle_name or r.vehicle.vehicle_no),
    ('Route', lambda r: r.route.route_name if r.route_id else None),
    ('Start time', lambda r: _clock(r.start_time)),
    ('End time', lambda r: _clock(r.end_time)),
    ('Start odometer', lambda r: r.start_odometer),
    ('End odometer', lambda r: r.end_odometer),
    ('Distance (km)', lambda r: r.distance),
    ('Duration (min)', lambda r: r.duration_minutes),
]

COLUMNS = {
    'delivery': COMMON_COLUMNS + [
        ('Destinations', lambda r: r.details.count()),
        ('Gas card used', lambda r: 'yes' if r.gas_card_used else 'no'),
        ('Status', lambda r: r.get_status_display()),
    ],
    'transportation': COMMON_COLUMNS[:1] + [
        ('Transportation type', lambda r: r.get_transportation_type_display()),
    ] + COMMON_COLUMNS[1:] + [
        ('Passengers', lambda r: r.passenger_count),
        ('Weather', lambda r: r.weather),
        ('Status', lambda r: r.get_status_display()),
        ('Special notes', lambda r: r.special_notes),
    ],
}


def _clock(value):
    return value.strftime('%H:%M') if value else None


def _cell(value):
    if value is None:
        return ''
    if hasattr(value, 'isoformat'):
        return value.isoformat()
    return str(value)


def export_filename(record_type, on_date=None):
    on_date = on_date or timezone.localdate()
    return f'{record_type}_records_{on_date.isoformat()}.csv'


def render_records_csv(records, record_type) -> str:
    """Header row plus one row per record, prefixed with a BOM."""
    columns = COLUMNS[record_type]
    buffer = io.StringIO()
    buffer.write(BOM)
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator='\r\n')
    writer.writerow([header for header, _ in columns])
    for record in records:
        writer.writerow([_cell(getter(record)) for _, getter in columns])
    return buffer.getvalue()
