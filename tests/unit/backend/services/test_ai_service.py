"""
Unit Tests for the AI Writing Assistant.

Loaders are injected so no model is ever downloaded.
"""

import asyncio
import threading

import pytest
from unittest.mock import MagicMock

from modules.backend.schemas.ai import ModelState
from modules.backend.services.ai import (
    CHAT_DEFAULT_REPLIES,
    CHAT_FALLBACK_NOTICE,
    EMPTY_GENERATION_REPLY,
    EXPANSION_PARAGRAPH,
    GRAMMAR_NOTICE,
    IMPROVE_DEFAULT,
    SHORTEN_NOTICE,
    SUMMARY_TOO_SHORT,
    TEMPLATE_NOTICE,
    TextGenerationService,
)

GENERATION = {
    "max_new_tokens": 32,
    "temperature": 0.7,
    "top_p": 0.9,
    "repetition_penalty": 1.1,
}


def make_service(loader=None, **kwargs) -> TextGenerationService:
    return TextGenerationService(
        model_name="test/model",
        system_prompt="You are a helpful assistant.",
        generation=GENERATION,
        loader=loader or MagicMock(side_effect=OSError("offline")),
        **kwargs,
    )


class FakePipeline:
    """Echoes the prompt followed by a fixed completion, like transformers does."""

    def __init__(self, completion: str = " Sure thing. ") -> None:
        self.completion = completion
        self.tokenizer = MagicMock(eos_token_id=7)
        self.calls: list[tuple[str, dict]] = []

    def __call__(self, prompt: str, **params):
        self.calls.append((prompt, params))
        return [{"generated_text": prompt + self.completion}]


class TestModelLifecycle:
    @pytest.mark.asyncio
    async def test_starts_uninitialized(self):
        assert make_service().state is ModelState.UNINITIALIZED

    @pytest.mark.asyncio
    async def test_successful_load_is_ready(self):
        pipe = FakePipeline()
        service = make_service(loader=lambda name: pipe)

        assert await service.ensure_loaded() is pipe
        assert service.state is ModelState.READY

    @pytest.mark.asyncio
    async def test_failed_load_is_unavailable_for_good(self):
        loader = MagicMock(side_effect=OSError("offline"))
        service = make_service(loader=loader)

        assert await service.ensure_loaded() is None
        assert await service.ensure_loaded() is None
        assert service.state is ModelState.UNAVAILABLE
        loader.assert_called_once_with("test/model")

    @pytest.mark.asyncio
    async def test_disabled_never_loads(self):
        loader = MagicMock()
        service = make_service(loader=loader, enabled=False)

        assert await service.ensure_loaded() is None
        assert service.state is ModelState.UNAVAILABLE
        loader.assert_not_called()

    @pytest.mark.asyncio
    async def test_concurrent_callers_share_one_load(self):
        release = threading.Event()
        calls = []

        def slow_loader(name):
            calls.append(name)
            release.wait(timeout=5)
            return FakePipeline()

        service = make_service(loader=slow_loader)
        first = asyncio.ensure_future(service.ensure_loaded())
        second = asyncio.ensure_future(service.ensure_loaded())
        await asyncio.sleep(0.05)
        assert service.state is ModelState.LOADING

        release.set()
        results = await asyncio.gather(first, second)

        assert results[0] is results[1]
        assert calls == ["test/model"]
        assert service.state is ModelState.READY

    @pytest.mark.asyncio
    async def test_cancelled_caller_leaves_load_running(self):
        release = threading.Event()
        pipe = FakePipeline()

        def slow_loader(name):
            release.wait(timeout=5)
            return pipe

        service = make_service(loader=slow_loader)
        first = asyncio.ensure_future(service.chat("hello"))
        await asyncio.sleep(0.05)
        first.cancel()
        with pytest.raises(asyncio.CancelledError):
            await first

        release.set()
        response = await service.chat("hello")

        assert service.state is ModelState.READY
        assert response.text == "Sure thing."
        assert response.notice is None

    @pytest.mark.asyncio
    async def test_cancelled_load_is_unavailable(self):
        release = threading.Event()

        def slow_loader(name):
            release.wait(timeout=5)
            return FakePipeline()

        service = make_service(loader=slow_loader)
        waiter = asyncio.ensure_future(service.ensure_loaded())
        await asyncio.sleep(0.05)
        service._load_task.cancel()

        assert await waiter is None
        release.set()
        assert service.state is ModelState.UNAVAILABLE

        response = await service.chat("hello")
        assert response.notice == CHAT_FALLBACK_NOTICE


class TestChat:
    @pytest.mark.asyncio
    async def test_generated_reply_strips_prompt(self):
        pipe = FakePipeline(" Sure thing. ")
        service = make_service(loader=lambda name: pipe)

        response = await service.chat("Write a haiku")

        assert response.text == "Sure thing."
        assert response.notice is None
        prompt, params = pipe.calls[0]
        assert prompt == service.build_chat_prompt("Write a haiku")
        assert params["max_new_tokens"] == 32
        assert params["pad_token_id"] == 7

    @pytest.mark.asyncio
    async def test_empty_generation_gets_placeholder(self):
        service = make_service(loader=lambda name: FakePipeline("   "))

        response = await service.chat("Anything")

        assert response.text == EMPTY_GENERATION_REPLY

    @pytest.mark.asyncio
    async def test_generation_error_falls_back(self):
        broken = MagicMock(side_effect=RuntimeError("CUDA out of memory"))
        broken.tokenizer = None
        service = make_service(loader=lambda name: broken)

        response = await service.chat("hello there")

        assert response.notice == CHAT_FALLBACK_NOTICE
        assert response.text.startswith("Hello! I'm your notes assistant.")

    @pytest.mark.asyncio
    async def test_unavailable_model_falls_back(self):
        response = await make_service().chat("Give me some ideas")

        assert response.text.startswith("I'd love to help you brainstorm!")
        assert response.notice == CHAT_FALLBACK_NOTICE

    def test_chat_prompt_uses_chat_template(self):
        prompt = make_service().build_chat_prompt("Hi")

        assert prompt == (
            "<|im_start|>system\nYou are a helpful assistant.<|im_end|>\n"
            "<|im_start|>user\nHi<|im_end|>\n"
            "<|im_start|>assistant\n"
        )


class TestFallbackReply:
    @pytest.mark.parametrize(
        ("message", "prefix"),
        [
            ("Hi!", "Hello! I'm your notes assistant."),
            ("Who are you?", "I'm an AI assistant built into your notes."),
            ("Let's brainstorm", "I'd love to help you brainstorm!"),
            ("Draft an email to Sam", "I can definitely help you with writing!"),
            ("Explain recursion", "I'm great at explaining complex topics!"),
            ("Can you assist me", "I'm here to help!"),
        ],
    )
    def test_keyword_groups(self, message, prefix):
        assert make_service().fallback_reply(message).text.startswith(prefix)

    def test_earlier_group_wins(self):
        """'hello' is checked before 'help'."""
        text = make_service().fallback_reply("hello, I need help").text

        assert text.startswith("Hello!")

    def test_keywords_match_whole_words_only(self):
        """'this' must not trigger the greeting through 'hi'."""
        text = make_service().fallback_reply("this thing").text

        assert text in CHAT_DEFAULT_REPLIES

    def test_default_reply_is_deterministic(self):
        service = make_service()

        first = service.fallback_reply("The weather is nice")
        second = service.fallback_reply("The weather is nice")

        assert first.text == second.text
        assert first.text in CHAT_DEFAULT_REPLIES


class TestWritingTools:
    def test_fix_grammar(self):
        response = make_service().fix_grammar("i will definately recieve it.  seperate   them")

        assert response.text == "I will definitely receive it. Separate them"
        assert response.notice == GRAMMAR_NOTICE

    def test_expand_appends_paragraph(self):
        response = make_service().expand_text("Idea")

        assert response.text == f"Idea\n\n{EXPANSION_PARAGRAPH}"
        assert response.notice == TEMPLATE_NOTICE

    def test_shorten_keeps_sixty_percent(self):
        words = [f"w{i}" for i in range(30)]

        response = make_service().shorten_text(" ".join(words))

        assert response.text == " ".join(words[:18]) + "..."
        assert response.notice == SHORTEN_NOTICE

    def test_shorten_short_text_unchanged(self):
        response = make_service().shorten_text("only a few words here")

        assert response.text == "only a few words here"

    def test_improve_default(self):
        response = make_service().improve_writing("Some text")

        assert response.text == IMPROVE_DEFAULT

    def test_improve_picks_template_from_instruction(self):
        response = make_service().improve_writing("Some text", "please elaborate")

        assert response.text.startswith("Here's an expanded version")

    def test_summarize_too_short(self):
        response = make_service().summarize_text("<p>Tiny</p>")

        assert response.text == SUMMARY_TOO_SHORT
        assert response.notice is None

    def test_summarize_uses_first_long_words(self):
        html = (
            "<h1>Quarterly planning</h1>\n<p>We reviewed budgets, hiring plans and the "
            "product roadmap for next year.</p>"
        )

        response = make_service().summarize_text(html, "short")

        assert response.text == (
            "This content focuses on Quarterly, planning, reviewed, budgets,, hiring, "
            "plans, product, roadmap with key insights and practical applications."
        )
        assert response.notice == TEMPLATE_NOTICE

    def test_summarize_unknown_length_uses_medium(self):
        html = "<p>" + "Meaningful words appear throughout this paragraph. " * 3 + "</p>"

        response = make_service().summarize_text(html, "epic")

        assert response.text.startswith("This comprehensive content explores Meaningful, words")
