from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI

from booker.api.booking import router as booking_router
from booker.core.config import settings
from booker.wiring.dependencies import get_scheduler, get_webhook_reporter

class ContextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        extras = []
        for key in ("phase", "event", "item", "sub_option", "deadline", "recovered", "reason"):
            value = getattr(record, key, None)
            if value not in (None, ""):
                extras.append(f"{key}={value}")
        base = super().format(record)
        if extras:
            return f"{base} | " + " ".join(extras)
        return base


handler = logging.StreamHandler()
handler.setFormatter(ContextFormatter("%(asctime)s %(levelname)s:%(name)s:%(message)s"))

root = logging.getLogger()
root.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
root.handlers.clear()
root.addHandler(handler)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    # Scheduled bookings do not survive a restart; drop timers cleanly.
    get_scheduler().reset()
    webhook = get_webhook_reporter()
    if webhook is not None:
        await webhook.aclose()


app = FastAPI(title="Timed Slot Booker", version="1.0.0", lifespan=lifespan)

app.include_router(booking_router, tags=["booking"])


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
