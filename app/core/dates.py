import calendar
from datetime import date, datetime, time


def day_start(value: date | datetime) -> datetime:
    if isinstance(value, datetime):
        value = value.date()
    return datetime.combine(value, time.min)


def day_end(value: date | datetime) -> datetime:
    if isinstance(value, datetime):
        value = value.date()
    return datetime.combine(value, time.max)


def month_bounds(today: date | None = None) -> tuple[str, datetime, datetime]:
    today = today or datetime.utcnow().date()
    last_day = calendar.monthrange(today.year, today.month)[1]
    name = f"{today.year}-{today.month:02d}"
    return (
        name,
        day_start(date(today.year, today.month, 1)),
        day_end(date(today.year, today.month, last_day)),
    )


def resolve_range(
    date_from: date | None,
    date_to: date | None,
    *,
    default_month: bool = False,
) -> tuple[datetime | None, datetime | None]:
    start = day_start(date_from) if date_from is not None else None
    end = day_end(date_to) if date_to is not None else None
    if default_month:
        _, month_start, month_end = month_bounds()
        start = start or month_start
        end = end or month_end
    return start, end
