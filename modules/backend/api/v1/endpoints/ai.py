"""
AI Assistant API Endpoints.

Chat goes through the local language model when it is available; the
writing tools are deterministic. Responses carry a `notice` when a
fallback produced the text.
"""

from fastapi import APIRouter, Depends

from modules.backend.core.dependencies import CurrentUserId, get_text_generation_service
from modules.backend.schemas.ai import (
    AIResponse,
    AIStatusResponse,
    ChatRequest,
    ImproveRequest,
    SummarizeRequest,
    TextRequest,
)
from modules.backend.schemas.base import ApiResponse
from modules.backend.services.ai import TextGenerationService

router = APIRouter()

AIService = Depends(get_text_generation_service)


@router.get("/status", response_model=ApiResponse[AIStatusResponse], summary="Model status")
async def status(
    user_id: CurrentUserId,
    service: TextGenerationService = AIService,
) -> ApiResponse[AIStatusResponse]:
    return ApiResponse(data=AIStatusResponse(state=service.state, model=service.model_name))


@router.post("/chat", response_model=ApiResponse[AIResponse], summary="Chat with the assistant")
async def chat(
    data: ChatRequest,
    user_id: CurrentUserId,
    service: TextGenerationService = AIService,
) -> ApiResponse[AIResponse]:
    return ApiResponse(data=await service.chat(data.message))


@router.post("/improve", response_model=ApiResponse[AIResponse], summary="Improve writing")
async def improve(
    data: ImproveRequest,
    user_id: CurrentUserId,
    service: TextGenerationService = AIService,
) -> ApiResponse[AIResponse]:
    return ApiResponse(data=service.improve_writing(data.text, data.instruction))


@router.post("/grammar", response_model=ApiResponse[AIResponse], summary="Fix common grammar mistakes")
async def grammar(
    data: TextRequest,
    user_id: CurrentUserId,
    service: TextGenerationService = AIService,
) -> ApiResponse[AIResponse]:
    return ApiResponse(data=service.fix_grammar(data.text))


@router.post("/expand", response_model=ApiResponse[AIResponse], summary="Expand text")
async def expand(
    data: TextRequest,
    user_id: CurrentUserId,
    service: TextGenerationService = AIService,
) -> ApiResponse[AIResponse]:
    return ApiResponse(data=service.expand_text(data.text))


@router.post("/shorten", response_model=ApiResponse[AIResponse], summary="Shorten text")
async def shorten(
    data: TextRequest,
    user_id: CurrentUserId,
    service: TextGenerationService = AIService,
) -> ApiResponse[AIResponse]:
    return ApiResponse(data=service.shorten_text(data.text))


@router.post("/summarize", response_model=ApiResponse[AIResponse], summary="Summarize a note")
async def summarize(
    data: SummarizeRequest,
    user_id: CurrentUserId,
    service: TextGenerationService = AIService,
) -> ApiResponse[AIResponse]:
    return ApiResponse(data=service.summarize_text(data.text, data.length))
