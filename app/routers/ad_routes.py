import base64
from typing import List, Optional

import structlog
from fastapi import APIRouter, File, Form, UploadFile
from pydantic import BaseModel

from ad_composer.modules.image_composer import ComposerOptions
from ad_composer.modules.processor import (
    AdResult,
    InputMismatchError,
    build_jobs,
    combine_ad_text,
    process_jobs,
)
from app.config import settings
from app.exceptions import AdGenerationException, InvalidAdRequestException

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api", tags=["Ads"])

PNG_MIME = "image/png"


# ------------------------------
# Response models
# ------------------------------

class GeneratedImage(BaseModel):
    index: int
    imageBase64: Optional[str] = None
    dataUri: Optional[str] = None
    error: Optional[str] = None


class GenerateAdResponse(BaseModel):
    adText: str
    images: List[GeneratedImage]


def to_generated_image(result: AdResult) -> GeneratedImage:
    if result.image_bytes is None:
        return GeneratedImage(index=result.index, error=result.error)

    encoded = base64.b64encode(result.image_bytes).decode("ascii")
    return GeneratedImage(
        index=result.index,
        imageBase64=encoded,
        dataUri=f"data:{PNG_MIME};base64,{encoded}",
    )


# ------------------------------
# Generate Ads
# ------------------------------

@router.post("/generate-ad", response_model=GenerateAdResponse)
async def generate_ad(
    images: Optional[List[UploadFile]] = File(None),
    texts: Optional[List[str]] = Form(None),
):
    """
    Overlay each uploaded image with its text. Every image/text pair is
    rendered independently: a pair that fails comes back with an error
    instead of an image, the others are unaffected.
    """
    images = images or []
    texts = texts or []

    try:
        jobs = build_jobs(
            [(await image.read(), image.content_type or "") for image in images],
            texts,
            max_ads=settings.MAX_ADS,
        )
    except InputMismatchError as e:
        raise InvalidAdRequestException(str(e))

    try:
        results = await process_jobs(jobs, ComposerOptions.from_settings(settings))
    except Exception as e:
        logger.exception("generate_ad_failed")
        raise AdGenerationException(str(e))

    return GenerateAdResponse(
        adText=combine_ad_text(results),
        images=[to_generated_image(r) for r in results],
    )
