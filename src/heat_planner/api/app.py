# src/heat_planner/api/app.py
import uuid

from fastapi import FastAPI, Request

from ..logs import configure_logging, reset_request_id, set_request_id
from .routers import heatplans, stock

configure_logging()

# ================== App ==================
app = FastAPI(title="Heat Planner API")

app.include_router(stock.router)
app.include_router(heatplans.router)


# Attach per-request id for log lines
@app.middleware("http")
async def add_request_id(request: Request, call_next):
    rid = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:8]
    token = set_request_id(rid)
    try:
        response = await call_next(request)
    finally:
        reset_request_id(token)
    response.headers["X-Request-ID"] = rid
    return response


@app.get("/health")
def health():
    return {"status": "ok"}
