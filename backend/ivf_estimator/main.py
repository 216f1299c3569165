import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ivf_estimator.config import CORS_ORIGINS, LOG_LEVEL
from ivf_estimator.routers import calculator, form

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s - %(message)s")

app = FastAPI(title="IVF Success Estimator API", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)

app.include_router(form.router, prefix="/api/form", tags=["form"])
app.include_router(calculator.router, prefix="/api", tags=["calculator"])


@app.get("/api/health")
async def health():
    return {"status": "ok"}
