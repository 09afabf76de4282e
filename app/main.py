import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.api.v1.bookings import router as bookings_router
from app.api.v1.stations import router as stations_router
from app.core.config import settings
from app.wiring.dependencies import get_booking_use_case


class ContextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        extras = []
        for key in ("station_id", "booking_id", "customer_id", "date", "time", "slot_count", "service_count", "reason"):
            value = getattr(record, key, None)
            if value not in (None, ""):
                extras.append(f"{key}={value}")
        base = super().format(record)
        if extras:
            return f"{base} | " + " ".join(extras)
        return base


handler = logging.StreamHandler()
handler.setFormatter(ContextFormatter("%(levelname)s:%(name)s:%(message)s"))

root = logging.getLogger()
root.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
root.handlers.clear()
root.addHandler(handler)


@asynccontextmanager
async def lifespan(_: FastAPI):
    # Slots left reserved by a crash before the last shutdown go back on sale.
    released = get_booking_use_case().sweep_orphaned_reservations()
    if released:
        logging.getLogger(__name__).warning(
            "Released orphaned reservations on startup",
            extra={"reason": f"released={released}"},
        )
    yield


app = FastAPI(title=settings.APP_NAME, version="1.0.0", lifespan=lifespan)

app.include_router(stations_router, prefix="/api/v1", tags=["stations"])
app.include_router(bookings_router, prefix="/api/v1", tags=["bookings"])


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
