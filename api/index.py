from functools import lru_cache
import logging
import os
from pathlib import Path
import sys

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

# Ensure local src package is importable in serverless runtime.
ROOT = Path(__file__).resolve().parent.parent
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from resale_intake.core import normalize_intake_with_metadata  # noqa: E402
from resale_intake.exceptions import (  # noqa: E402
    AuthenticationError,
    InvalidRawInput,
    MalformedOracleOutput,
    OracleTimeout,
    OracleUnavailable,
    RateLimitError,
    RecordPersistenceError,
    SchemaViolation,
    VendorDirectoryError,
)
from resale_intake.listing import (  # noqa: E402
    ListingDraft,
    build_product_payload,
    build_record_row,
    compose_listing,
)
from resale_intake.normalization import NormalizationConfig, NormalizedIntakeRecord  # noqa: E402
from resale_intake.store import PostgresIntakeStore  # noqa: E402
from resale_intake.vendors import VendorDirectory  # noqa: E402

app = FastAPI(title="resale-intake API", version="1.0.0")
logger = logging.getLogger(__name__)

raw_origins = os.getenv("FRONTEND_ORIGINS", "*")
allow_origins = [origin.strip() for origin in raw_origins.split(",") if origin.strip()]
NORMALIZATION_CONFIG = NormalizationConfig.from_env()

app.add_middleware(
    CORSMiddleware,
    allow_origins=allow_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


@lru_cache(maxsize=1)
def _vendor_directory() -> VendorDirectory | None:
    return VendorDirectory.from_env()


def _record_store() -> PostgresIntakeStore:
    return PostgresIntakeStore()


@app.get("/health")
def health() -> dict[str, bool]:
    return {"ok": True}


class ParseRequest(BaseModel):
    rawInput: str = ""


class ParseMetadata(BaseModel):
    provider: str | None = None
    model: str | None = None


class ParseResponse(NormalizedIntakeRecord):
    metadata: ParseMetadata = Field(default_factory=ParseMetadata)


class ValidateResponse(ListingDraft):
    product: dict = Field(default_factory=dict)


class SaveResponse(BaseModel):
    ok: bool
    id: int | None = None


class VendorsResponse(BaseModel):
    match: str | None = None
    vendors: list[str] = Field(default_factory=list)


@app.post("/intake/parse", response_model=ParseResponse, response_model_exclude_none=True)
def parse_intake(body: ParseRequest) -> ParseResponse:
    try:
        record, metadata = normalize_intake_with_metadata(
            body.rawInput,
            config=NORMALIZATION_CONFIG,
            vendor_directory=_vendor_directory(),
        )
    except InvalidRawInput as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except MalformedOracleOutput as exc:
        raise HTTPException(status_code=400, detail="Extraction response was not valid JSON") from exc
    except SchemaViolation as exc:
        raise HTTPException(
            status_code=400,
            detail={"error": "Extraction output validation failed", "fields": exc.fields, "details": exc.issues},
        ) from exc
    except AuthenticationError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    except RateLimitError as exc:
        raise HTTPException(status_code=429, detail=str(exc)) from exc
    except OracleTimeout as exc:
        raise HTTPException(status_code=504, detail=str(exc)) from exc
    except OracleUnavailable as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    except Exception as exc:
        logger.exception("intake parse failed")
        raise HTTPException(status_code=500, detail="internal_error") from exc

    return ParseResponse(
        **record.model_dump(),
        metadata=ParseMetadata(provider=metadata.get("provider"), model=metadata.get("model")),
    )


@app.post("/intake/validate", response_model=ValidateResponse)
def validate_intake(record: NormalizedIntakeRecord) -> ValidateResponse:
    listing = compose_listing(record, NORMALIZATION_CONFIG.store_locations)
    if not listing.title:
        raise HTTPException(status_code=400, detail="brand or itemName is required")
    return ValidateResponse(
        **listing.model_dump(),
        product=build_product_payload(listing, record),
    )


@app.post("/intake", response_model=SaveResponse)
def save_intake(record: NormalizedIntakeRecord) -> SaveResponse:
    listing = compose_listing(record, NORMALIZATION_CONFIG.store_locations)
    if not (listing.title or record.item_name):
        raise HTTPException(status_code=400, detail="Title is required")
    row = build_record_row(record, listing)
    try:
        inserted_id = _record_store().insert(row)
    except RecordPersistenceError as exc:
        logger.error("intake save failed: %s", exc)
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    return SaveResponse(ok=True, id=inserted_id)


@app.get("/vendors", response_model=VendorsResponse)
def vendors(q: str = Query(default="")) -> VendorsResponse:
    directory = _vendor_directory()
    if directory is None:
        raise HTTPException(status_code=500, detail="Missing VENDOR_SHEETS_WEBAPP_URL or VENDOR_SHEETS_WEBAPP_KEY")
    try:
        match = directory.lookup(q) if q else None
        listed = [] if q else directory.list_vendors(50)
    except VendorDirectoryError as exc:
        logger.exception("vendor lookup failed")
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    return VendorsResponse(match=match, vendors=listed)
