from __future__ import annotations

import asyncio
import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

# Add parent dir so we can import purchaseops
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

load_dotenv(Path(__file__).resolve().parent.parent / ".env")

from purchaseops.config import MissingConfigError, configure_logging, ga4_property_id, server_port
from purchaseops.ga4 import AnalyticsQueryError, init_ga4_client
from purchaseops.report import ReportInputs, build_purchase_report

logger = logging.getLogger("purchaseops.backend")

STATIC_DIR = Path(__file__).resolve().parent / "static"
UPSTREAM_ERROR = "Failed to fetch data from Google Analytics"


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    if not ga4_property_id():
        logger.warning("GA4_PROPERTY_ID is not set; /api/report will return 500")
    yield


app = FastAPI(title="Purchase Source Dashboard", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET"],
    allow_headers=["*"],
)


def _run_report(inputs: ReportInputs) -> dict:
    return build_purchase_report(init_ga4_client(), inputs)


@app.get("/api/health")
async def health():
    return {"status": "ok", "property_configured": bool(ga4_property_id())}


@app.get("/api/report")
async def get_report(
    startDate: str = Query(default=""),
    endDate: str = Query(default=""),
):
    if not startDate or not endDate:
        return JSONResponse(status_code=400, content={"error": "startDate and endDate are required"})

    property_id = ga4_property_id()
    if not property_id:
        return JSONResponse(status_code=500, content={"error": "GA4_PROPERTY_ID is not configured in .env"})

    inputs = ReportInputs(start_date=startDate, end_date=endDate, property_id=property_id)
    try:
        # Client construction and both queries are blocking; they run in one worker thread.
        return await asyncio.to_thread(_run_report, inputs)
    except MissingConfigError as exc:
        logger.error("Analytics configuration error: %s", exc)
        return JSONResponse(status_code=500, content={"error": str(exc)})
    except AnalyticsQueryError as exc:
        logger.error("GA4 API Error: %s", exc)
        return JSONResponse(status_code=500, content={"error": UPSTREAM_ERROR, "details": str(exc)})
    except Exception as exc:
        # Credential parsing and client construction errors surface here.
        logger.exception("Report request failed")
        return JSONResponse(status_code=500, content={"error": UPSTREAM_ERROR, "details": str(exc)})


if STATIC_DIR.is_dir():
    app.mount("/", StaticFiles(directory=STATIC_DIR, html=True), name="static")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=server_port(), reload=True)
