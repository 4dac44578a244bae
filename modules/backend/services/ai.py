"""
AI Writing Assistant.

Wraps an optional local text-generation pipeline (Hugging Face
`transformers`). The model is loaded lazily on the first chat request,
or at startup when `features.ai_preload_on_startup` is set. Loading and
generation are blocking and run in the shared thread pool; generation is
serialized by the `llm` semaphore.

Model lifecycle:
    uninitialized -> loading -> ready
    uninitialized -> loading -> unavailable   (terminal for the process)

Concurrent callers during loading await the same load task. When the
model is unavailable, or generation fails, chat answers with a canned
reply picked by keyword and flags it with a notice. The writing tools
(grammar, expand, shorten, summarize, improve) never touch the model.

Usage:
    from modules.backend.services.ai import get_ai_service

    service = get_ai_service()
    response = await service.chat("Help me brainstorm blog topics")
"""

import asyncio
import math
import re
import zlib
from functools import lru_cache
from typing import Any, Callable

from modules.backend.core.concurrency import get_semaphore, run_blocking
from modules.backend.core.logging import get_logger
from modules.backend.core.utils import strip_html
from modules.backend.schemas.ai import AIResponse, ModelState

logger = get_logger(__name__)

EMPTY_GENERATION_REPLY = "I understand your request. How can I help you further?"

CHAT_FALLBACK_NOTICE = "Using a canned response (language model not loaded)"
TEMPLATE_NOTICE = "Using a templated response"
GRAMMAR_NOTICE = "Using basic grammar correction"
SHORTEN_NOTICE = "Using basic text shortening"

SUMMARY_TOO_SHORT = "Note is too short to summarize. Please add more content."

# Checked in order; the first group with a whole-word match wins.
CHAT_FALLBACKS: list[tuple[tuple[str, ...], str]] = [
    (
        ("hello", "hi", "introduce"),
        "Hello! I'm your notes assistant. I'm here to help you with questions, "
        "writing, analysis, and creative tasks. How can I assist you today?",
    ),
    (
        ("who are you", "what are you"),
        "I'm an AI assistant built into your notes. I can help with answering "
        "questions, writing, analysis, coding, and creative projects.",
    ),
    (
        ("brainstorm", "ideas"),
        "I'd love to help you brainstorm! Here's my approach:\n\n"
        "• Start by clearly defining the problem or goal\n"
        "• Generate multiple diverse ideas without judgment\n"
        "• Build on existing concepts and combine them creatively\n"
        "• Consider different perspectives and use cases\n"
        "• Evaluate and refine the most promising options\n\n"
        "What specific topic would you like to explore together?",
    ),
    (
        ("write", "email", "letter"),
        "I can definitely help you with writing! Whether it's emails, letters, "
        "essays, or creative content, I can assist with:\n\n"
        "• Structure and organization\n"
        "• Tone and style adjustment\n"
        "• Grammar and clarity\n"
        "• Content development\n"
        "• Editing and refinement\n\n"
        "What type of writing project are you working on?",
    ),
    (
        ("explain", "how", "what"),
        "I'm great at explaining complex topics! I can break down concepts into "
        "understandable parts, provide examples, and adapt my explanations to "
        "your level of knowledge. What would you like me to explain?",
    ),
    (
        ("help", "assist"),
        "I'm here to help! I can assist with:\n\n"
        "• Answering questions and providing information\n"
        "• Writing and editing tasks\n"
        "• Problem-solving and analysis\n"
        "• Creative projects and brainstorming\n"
        "• Learning and explanations\n\n"
        "What can I help you with today?",
    ),
]

CHAT_DEFAULT_REPLIES = [
    "That's an interesting question! I'm designed to be helpful with a wide "
    "range of tasks. What specific aspect would you like to explore?",
    "I appreciate you sharing that with me. As an AI assistant, I can help with "
    "analysis, writing, problem-solving, and creative tasks. How can I assist you?",
    "Thanks for your message! I'm here to help with various tasks and provide "
    "thoughtful responses. What would you like to work on together?",
    "That's a great topic to discuss! I'm equipped to help with research, "
    "writing, analysis, and creative thinking. What specific help do you need?",
]

IMPROVE_TEMPLATES: list[tuple[tuple[str, ...], str]] = [
    (
        ("summarize", "summary"),
        "Based on the content provided, here's a comprehensive summary: The "
        "material covers several key topics with important insights and practical "
        "applications. The main themes include foundational concepts, real-world "
        "examples, and actionable takeaways that provide valuable context for "
        "understanding the subject matter.",
    ),
    (
        ("grammar", "fix"),
        "I've reviewed the text for grammar, spelling, and punctuation errors. The "
        "corrected version maintains the original meaning while improving clarity, "
        "readability, and professional tone. All grammatical issues have been addressed.",
    ),
    (
        ("expand", "elaborate"),
        "Here's an expanded version with additional context and detail: The content "
        "has been enhanced with comprehensive explanations, relevant examples, "
        "supporting evidence, and practical applications. This expanded format "
        "provides deeper insights while maintaining clarity and engagement for the reader.",
    ),
    (
        ("shorten", "condense"),
        "Here's a concise version: The key points have been distilled into essential "
        "information while preserving the core message and important details.",
    ),
]

IMPROVE_DEFAULT = (
    "I understand your request and I'm here to help with various tasks including "
    "writing, analysis, and problem-solving. What specific aspect would you like "
    "me to focus on?"
)

EXPANSION_PARAGRAPH = (
    "This expanded version provides additional context and comprehensive details "
    "to enhance understanding. The content has been enriched with supporting "
    "information, relevant examples, and practical insights that add depth while "
    "maintaining clarity and engagement."
)

SUMMARY_TEMPLATES = {
    "short": "This content focuses on {keywords} with key insights and practical applications.",
    "medium": (
        "This comprehensive content explores {keywords} and related concepts. The "
        "material provides valuable insights, practical examples, and actionable "
        "information that enhances understanding of the subject matter. Key themes "
        "include foundational principles and real-world applications."
    ),
    "detailed": (
        "This detailed content provides an in-depth exploration of {keywords} and "
        "associated topics. The material offers comprehensive coverage including "
        "theoretical foundations, practical applications, real-world examples, and "
        "actionable insights. The content is structured to provide both broad "
        "understanding and specific knowledge, making it valuable for both overview "
        "and detailed reference purposes. Key elements include analytical frameworks, "
        "implementation strategies, and evidence-based recommendations."
    ),
}

MISSPELLINGS = [
    (re.compile(r"\b(teh|hte)\b"), "the"),
    (re.compile(r"\brecieve\b"), "receive"),
    (re.compile(r"\bseperate\b"), "separate"),
    (re.compile(r"\bdefinately\b"), "definitely"),
    (re.compile(r"\boccured\b"), "occurred"),
]
_WHITESPACE = re.compile(r"\s+")
_SENTENCE_START = re.compile(r"(^|[.!?]\s+)([a-z])")


def _contains_any(text: str, keywords: tuple[str, ...]) -> bool:
    """Whole-word (or whole-phrase) match against lowercased text."""
    return any(re.search(rf"\b{re.escape(k)}\b", text) for k in keywords)


def load_text_generation_pipeline(model_name: str, task: str = "text-generation") -> Any:
    """Build a transformers pipeline. Blocking; downloads weights on first use."""
    from transformers import pipeline

    return pipeline(task, model=model_name)


class TextGenerationService:
    """
    Assistant backed by a lazily loaded text-generation pipeline.

    Args:
        model_name: Hugging Face model id
        system_prompt: System turn of the chat template
        generation: Sampling parameters passed to the pipeline
        enabled: When False the model is never loaded
        summary_min_chars: Minimum plain-text length for summarize_text
        loader: Callable(model_name) returning a pipeline; runs in the thread pool
    """

    def __init__(
        self,
        model_name: str,
        system_prompt: str,
        generation: dict[str, Any],
        enabled: bool = True,
        summary_min_chars: int = 50,
        loader: Callable[[str], Any] | None = None,
    ) -> None:
        self.model_name = model_name
        self.system_prompt = system_prompt
        self.generation = generation
        self.enabled = enabled
        self.summary_min_chars = summary_min_chars
        self._loader = loader or load_text_generation_pipeline
        self._pipeline: Any = None
        self._state = ModelState.UNINITIALIZED
        self._load_task: asyncio.Task | None = None

    @property
    def state(self) -> ModelState:
        return self._state

    async def _load(self) -> Any:
        if not self.enabled:
            logger.info("AI model disabled by configuration", extra={"model": self.model_name})
            self._state = ModelState.UNAVAILABLE
            return None

        self._state = ModelState.LOADING
        logger.info("Loading text generation model", extra={"model": self.model_name})
        try:
            self._pipeline = await run_blocking(self._loader, self.model_name)
        except asyncio.CancelledError:
            logger.warning("Text generation model load cancelled", extra={"model": self.model_name})
            self._state = ModelState.UNAVAILABLE
            raise
        except Exception as e:
            logger.warning(
                "Failed to load text generation model, using canned responses",
                extra={"model": self.model_name, "error": str(e), "error_type": type(e).__name__},
            )
            self._pipeline = None
            self._state = ModelState.UNAVAILABLE
            return None

        self._state = ModelState.READY
        logger.info("Text generation model loaded", extra={"model": self.model_name})
        return self._pipeline

    async def ensure_loaded(self) -> Any:
        """
        Return the pipeline, loading it on first use.

        Returns None when the model is unavailable. Only one load runs at
        a time; callers arriving mid-load await the same task. A load that
        was itself cancelled leaves the model unavailable.
        """
        if self._state is ModelState.READY:
            return self._pipeline
        if self._state is ModelState.UNAVAILABLE:
            return None
        if self._load_task is None:
            self._load_task = asyncio.ensure_future(self._load())
        elif self._load_task.cancelled():
            self._state = ModelState.UNAVAILABLE
            return None

        # A cancelled caller must not cancel the load other callers share.
        try:
            return await asyncio.shield(self._load_task)
        except asyncio.CancelledError:
            if not self._load_task.cancelled():
                raise
            self._state = ModelState.UNAVAILABLE
            return None

    def build_chat_prompt(self, message: str) -> str:
        return (
            f"<|im_start|>system\n{self.system_prompt}<|im_end|>\n"
            f"<|im_start|>user\n{message}<|im_end|>\n"
            f"<|im_start|>assistant\n"
        )

    def _generate(self, pipe: Any, prompt: str) -> str:
        params = {
            "max_new_tokens": self.generation["max_new_tokens"],
            "do_sample": True,
            "temperature": self.generation["temperature"],
            "top_p": self.generation["top_p"],
            "repetition_penalty": self.generation["repetition_penalty"],
        }
        eos_token_id = getattr(getattr(pipe, "tokenizer", None), "eos_token_id", None)
        if eos_token_id is not None:
            params["pad_token_id"] = eos_token_id

        result = pipe(prompt, **params)
        generated = result[0]["generated_text"]
        if generated.startswith(prompt):
            generated = generated[len(prompt):]
        return generated.strip()

    async def chat(self, message: str) -> AIResponse:
        """
        Answer a chat message. Never raises; falls back to a canned reply.
        """
        pipe = await self.ensure_loaded()
        if pipe is None:
            return self.fallback_reply(message)

        prompt = self.build_chat_prompt(message)
        try:
            async with get_semaphore("llm"):
                text = await run_blocking(self._generate, pipe, prompt)
        except Exception as e:
            logger.error(
                "Text generation failed",
                extra={"model": self.model_name, "error": str(e), "error_type": type(e).__name__},
            )
            return self.fallback_reply(message)

        return AIResponse(text=text or EMPTY_GENERATION_REPLY)

    def fallback_reply(self, message: str) -> AIResponse:
        """Canned reply chosen by keyword, or deterministically by message hash."""
        lowered = message.lower()
        for keywords, reply in CHAT_FALLBACKS:
            if _contains_any(lowered, keywords):
                return AIResponse(text=reply, notice=CHAT_FALLBACK_NOTICE)

        index = zlib.crc32(message.encode("utf-8")) % len(CHAT_DEFAULT_REPLIES)
        return AIResponse(text=CHAT_DEFAULT_REPLIES[index], notice=CHAT_FALLBACK_NOTICE)

    def improve_writing(self, text: str, instruction: str | None = None) -> AIResponse:
        focus = f"with focus on: {instruction}" if instruction else "for clarity and style"
        prompt = f'Improve this text {focus}: "{text}"'.lower()
        for keywords, reply in IMPROVE_TEMPLATES:
            if any(k in prompt for k in keywords):
                return AIResponse(text=reply, notice=TEMPLATE_NOTICE)
        return AIResponse(text=IMPROVE_DEFAULT, notice=TEMPLATE_NOTICE)

    def fix_grammar(self, text: str) -> AIResponse:
        corrected = text
        for pattern, replacement in MISSPELLINGS:
            corrected = pattern.sub(replacement, corrected)
        corrected = _WHITESPACE.sub(" ", corrected).strip()
        corrected = _SENTENCE_START.sub(lambda m: m.group(1) + m.group(2).upper(), corrected)
        return AIResponse(text=corrected, notice=GRAMMAR_NOTICE)

    def expand_text(self, text: str) -> AIResponse:
        return AIResponse(text=f"{text}\n\n{EXPANSION_PARAGRAPH}", notice=TEMPLATE_NOTICE)

    def shorten_text(self, text: str) -> AIResponse:
        words = text.split(" ")
        keep = max(10, math.floor(len(words) * 0.6))
        shortened = " ".join(words[:keep])
        if len(words) > 10:
            shortened += "..."
        return AIResponse(text=shortened, notice=SHORTEN_NOTICE)

    def summarize_text(self, text: str, length: str = "medium") -> AIResponse:
        """Templated summary of note HTML built from its first longer words."""
        plain = strip_html(text).strip()
        if len(plain) < self.summary_min_chars:
            return AIResponse(text=SUMMARY_TOO_SHORT)

        keywords = ", ".join([w for w in plain.split() if len(w) > 3][:8])
        template = SUMMARY_TEMPLATES.get(length, SUMMARY_TEMPLATES["medium"])
        return AIResponse(text=template.format(keywords=keywords), notice=TEMPLATE_NOTICE)


@lru_cache
def get_ai_service() -> TextGenerationService:
    """Process-wide assistant configured from ai.yaml and features.yaml."""
    from modules.backend.core.config import get_app_config

    config = get_app_config()
    return TextGenerationService(
        model_name=config.ai.model,
        system_prompt=config.ai.system_prompt,
        generation=config.ai.generation.model_dump(),
        enabled=config.features.ai_model_enabled,
        summary_min_chars=config.ai.summary_min_chars,
        loader=lambda name: load_text_generation_pipeline(name, config.ai.task),
    )
