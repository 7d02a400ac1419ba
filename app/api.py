from contextlib import asynccontextmanager

from fastapi import FastAPI
from dotenv import load_dotenv

from app.routes import alerts
from core.database import init_db

# Ensure .env values are loaded even if uvicorn is launched without `dotenv run`.
# Use override=True so editing `.env` (and restarting uvicorn) reliably takes effect even if
# older values exist in the environment from a previous shell/session.
load_dotenv(override=True)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


app = FastAPI(lifespan=lifespan)


app.include_router(alerts.router)


@app.get("/healthz")
def healthz():
    return {"ok": True}
