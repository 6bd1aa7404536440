# barbershop/data.py

from datetime import datetime, timedelta


def build_time_slots(open_time: str, close_time: str, slot_minutes: int) -> list[str]:
    # both ends inclusive
    current = datetime.strptime(open_time, "%H:%M")
    last = datetime.strptime(close_time, "%H:%M")
    step = timedelta(minutes=slot_minutes)

    slots = []
    while current <= last:
        slots.append(current.strftime("%H:%M"))
        current += step
    return slots


SERVICES = (
    "Corte",
    "Afeitado",
    "Corte y Afeitado",
)

CLOSED_WEEKDAY = 2  # 0=Mon, 1=Tues, 2=Wed ...

shop_settings = {
    "open_time": "09:00",
    "close_time": "22:00",
    "slot_minutes": 30,
}

TIME_SLOTS = build_time_slots(
    shop_settings["open_time"],
    shop_settings["close_time"],
    shop_settings["slot_minutes"],
)
