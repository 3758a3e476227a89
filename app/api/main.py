from __future__ import annotations

from fastapi import FastAPI

from app.api.routes_proxy import router as proxy_router

app = FastAPI(
    title="Deal Submission Gateway",
    version="0.1.0",
    description="Validates deal submissions and forwards them to the n8n webhook",
)

app.include_router(proxy_router)


@app.get("/health")
async def health() -> dict:
    return {"status": "ok"}
