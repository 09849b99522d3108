"""FastAPI application - story reader, ad unlocks, admin variant generation."""

import hmac
import json
import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Header, HTTPException, Request
from fastapi.responses import JSONResponse

from bedtime_stories.config import get_reading_rules, get_settings
from bedtime_stories.errors import (
    CondensationConfigError,
    InvalidGenerationRequest,
    InvalidIdentifierError,
    StoryNotFoundError,
)
from bedtime_stories.models import GENDERED, ReadLength, ViewerContext
from bedtime_stories.persistence import create_stores
from bedtime_stories.services import (
    ReaderService,
    StoryReading,
    VariantGenerationService,
    parse_generation_request,
)
from bedtime_stories.services.factory import create_generation_service

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Dependency injection - created at startup
_reader: ReaderService | None = None
_generation: VariantGenerationService | None = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize and cleanup."""
    global _reader, _generation
    settings = get_settings()
    rules = get_reading_rules()
    story_store, unlock_store = create_stores()
    _reader = ReaderService(story_store, unlock_store, rules)
    _generation = create_generation_service(story_store, settings, rules)
    yield
    _reader = None
    _generation = None


app = FastAPI(
    title="Bedtime Stories",
    description="Story reader with subscription, story-of-the-day and ad-unlock access",
    version="0.1.0",
    lifespan=lifespan,
)


def get_reader_service() -> ReaderService:
    if _reader is None:
        raise HTTPException(status_code=503, detail="Service not initialized")
    return _reader


def get_generation_service() -> VariantGenerationService:
    if _generation is None:
        raise HTTPException(status_code=503, detail="Service not initialized")
    return _generation


def viewer_context(
    x_subscription_active: bool = Header(default=False),
    x_authenticated: bool = Header(default=False),
    x_gender_preference: str | None = Header(default=None),
) -> ViewerContext:
    """Viewer state forwarded by the auth/billing gateway."""
    preference = None
    if x_gender_preference:
        value = x_gender_preference.strip().lower()
        preference = next((g for g in GENDERED if g.value == value), None)
    return ViewerContext(
        subscription_active=x_subscription_active,
        is_authenticated=x_authenticated,
        gender_preference=preference,
    )


def require_admin(x_admin_token: str | None = Header(default=None)) -> None:
    """Checks X-Admin-Token when ADMIN_TOKEN is configured."""
    expected = get_settings().admin_token
    if not expected:
        return
    if not x_admin_token or not hmac.compare_digest(expected, x_admin_token):
        logger.warning("Admin token check failed")
        raise HTTPException(status_code=403, detail="Forbidden")


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


@app.get("/health")
async def health() -> dict[str, str]:
    """Health check for load balancers."""
    return {"status": "ok"}


@app.get("/stories/{story_id}", response_model=StoryReading)
def read_story(
    story_id: str,
    length: ReadLength = ReadLength.FULL,
    viewer: ViewerContext = Depends(viewer_context),
    x_device_id: str | None = Header(default=None),
    reader: ReaderService = Depends(get_reader_service),
):
    """Selected text for the viewer; a sentence-bounded preview without full access."""
    try:
        return reader.read_story(story_id, viewer, x_device_id, length)
    except StoryNotFoundError as e:
        return _error(404, str(e))
    except InvalidIdentifierError as e:
        return _error(400, str(e))


@app.post("/stories/{story_id}/ad-impressions")
def record_ad_impression(
    story_id: str,
    x_device_id: str = Header(...),
    reader: ReaderService = Depends(get_reader_service),
) -> dict:
    """Count one completed ad for today. Extra impressions past the cap are no-ops."""
    ledger = reader.ledger(x_device_id)
    try:
        result = ledger.record_ad_impression(story_id)
    except InvalidIdentifierError as e:
        return _error(400, str(e))
    return {
        "ads_completed": result.ads_completed,
        "unlocked": result.unlocked,
        "ads_required": ledger.required_ads,
    }


@app.get("/stories/{story_id}/unlock")
def unlock_status(
    story_id: str,
    x_device_id: str = Header(...),
    reader: ReaderService = Depends(get_reader_service),
) -> dict:
    ledger = reader.ledger(x_device_id)
    try:
        record = ledger.record_for(story_id)
    except InvalidIdentifierError as e:
        return _error(400, str(e))
    return {
        "ads_completed": record.ads_completed if record else 0,
        "unlocked": ledger.is_unlocked(story_id),
        "ads_required": ledger.required_ads,
    }


@app.post("/admin/stories/{story_id}/generate-versions", dependencies=[Depends(require_admin)])
async def generate_versions(
    story_id: str,
    request: Request,
    generation: VariantGenerationService = Depends(get_generation_service),
) -> JSONResponse:
    """
    Generate 5min/10min variants. Body: {"targetLengths": [...], "genderVersions": [...]},
    both optional. Succeeds with per-pair errors listed as long as work was attempted.
    """
    raw_body = await request.body()
    try:
        body = json.loads(raw_body) if raw_body.strip() else {}
    except json.JSONDecodeError as e:
        logger.warning("Invalid generate-versions body: %s", e)
        return _error(400, "Request body must be JSON")
    if not isinstance(body, dict):
        return _error(400, "Request body must be a JSON object")

    try:
        lengths, genders = parse_generation_request(
            body.get("targetLengths"),
            body.get("genderVersions"),
        )
        result = await generation.generate_for_story_id(story_id, lengths, genders)
    except InvalidGenerationRequest as e:
        return _error(400, str(e))
    except StoryNotFoundError as e:
        return _error(404, str(e))
    except CondensationConfigError as e:
        logger.error("Variant generation unavailable: %s", e)
        return _error(503, str(e))
    return JSONResponse(result.to_response())
