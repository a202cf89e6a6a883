"""AI routes — generate page content from a prompt."""

from __future__ import annotations

import logging

import anthropic
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from backend.models.page import GenerateRequest, GenerateResponse
from backend.services.ai_generator import AIGenerator, get_ai_generator
from builder.kernel.validation import GeneratedContentError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/ai", tags=["ai"])


@router.post("/generate", status_code=200, response_model=GenerateResponse)
async def generate(
    req: GenerateRequest,
    generator: AIGenerator = Depends(get_ai_generator),
):
    """
    Generate nodes for the editor.

    422 when the model's reply is not a usable node array, 502 when the model
    could not be reached. Nothing is written here; the client inserts the
    returned nodes through its editor store.
    """
    try:
        nodes = await generator.generate(req.prompt, req.context)
    except GeneratedContentError as e:
        logger.warning("AI output rejected: %s", e)
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"error": "AI returned invalid JSON", "detail": str(e), "raw": e.raw},
        )
    except anthropic.APIError as e:
        logger.error("AI request failed: %s", e)
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content={"error": "AI service unavailable"},
        )

    return GenerateResponse(nodes=nodes, usage=generator.last_usage)
