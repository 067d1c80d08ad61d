import asyncio
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import structlog

from .image_composer import ComposerOptions, compose_image

logger = structlog.get_logger(__name__)

NO_TEXT_PLACEHOLDER = "No discount text provided."
DEFAULT_MAX_ADS = 10


class InputMismatchError(ValueError):
    """Image/text pairs are missing or do not line up; nothing is rendered."""


@dataclass(frozen=True)
class AdJob:
    index: int
    image_bytes: bytes
    mime_type: str
    raw_text: str


@dataclass(frozen=True)
class AdResult:
    index: int
    image_bytes: Optional[bytes]
    error: Optional[str]
    ad_text: str

    @property
    def ok(self) -> bool:
        return self.image_bytes is not None


def ad_header(index: int) -> str:
    return f"--- Ad {index} ---"


def build_jobs(
    images: Sequence[Tuple[bytes, str]],
    texts: Sequence[str],
    max_ads: int = DEFAULT_MAX_ADS,
) -> List[AdJob]:
    """Pair each (bytes, mime type) image with its text, numbering from 1."""
    if not images:
        raise InputMismatchError("At least one image is required")
    if len(images) != len(texts):
        raise InputMismatchError("Number of images and texts must match")
    if max_ads and len(images) > max_ads:
        raise InputMismatchError(f"Maximum {max_ads} ads allowed")

    return [
        AdJob(index=i, image_bytes=data, mime_type=mime, raw_text=text or "")
        for i, ((data, mime), text) in enumerate(zip(images, texts), start=1)
    ]


def run_job(job: AdJob, options: ComposerOptions = None) -> AdResult:
    """Render one ad. Never raises: failures are reported on the result."""
    text = job.raw_text.strip()
    header = ad_header(job.index)

    if not text:
        return AdResult(job.index, None, None, f"{header}\n{NO_TEXT_PLACEHOLDER}\n")

    try:
        image_bytes = compose_image(job.image_bytes, text, options)
    except Exception as e:
        message = str(e) or e.__class__.__name__
        logger.error("ad_render_failed", index=job.index, mime_type=job.mime_type, error=message)
        return AdResult(job.index, None, message, f"{header}\nError generating ad: {message}\n")

    logger.info("ad_rendered", index=job.index, size=len(image_bytes))
    return AdResult(job.index, image_bytes, None, f"{header}\n{text}\n")


async def process_jobs(jobs: Sequence[AdJob], options: ComposerOptions = None) -> List[AdResult]:
    """Render every job concurrently; results come back in input order."""
    logger.info("processing_started", jobs=len(jobs))
    results = await asyncio.gather(*(asyncio.to_thread(run_job, job, options) for job in jobs))
    failed = sum(1 for r in results if r.error)
    logger.info("processing_completed", jobs=len(results), failed=failed)
    return list(results)


def combine_ad_text(results: Sequence[AdResult]) -> str:
    return "\n\n".join(r.ad_text for r in results)
