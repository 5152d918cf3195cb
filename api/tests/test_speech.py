"""
Tests for speech collaborators and spoken texts.
"""

import asyncio

import pytest

from lingodrill.core.exceptions import RecognitionError
from lingodrill.models.enums import QuizDirection
from lingodrill.services.speech_service import (
    ScriptedRecognizer,
    SilentSynthesizer,
    SpeechRecognizer,
    SpeechSynthesizer,
    build_prompt,
)


class TestCollaboratorInterfaces:
    """Abstract speech interfaces and the bundled implementations."""

    def test_interfaces_cannot_be_instantiated(self):
        with pytest.raises(TypeError):
            SpeechSynthesizer()
        with pytest.raises(TypeError):
            SpeechRecognizer()

    def test_incomplete_subclass_is_rejected(self):
        class HalfRecognizer(SpeechRecognizer):
            pass

        with pytest.raises(TypeError):
            HalfRecognizer()

    def test_silent_synthesizer_resolves(self):
        assert asyncio.run(SilentSynthesizer().speak("你好", "zh-CN")) is None

    def test_scripted_recognizer_replays_then_runs_dry(self):
        recognizer = ScriptedRecognizer(["hello", RecognitionError("no speech")])

        async def scenario():
            first = await recognizer.recognize("en-US")
            with pytest.raises(RecognitionError):
                await recognizer.recognize("en-US")
            with pytest.raises(RecognitionError):
                await recognizer.recognize("en-US")
            return first

        assert asyncio.run(scenario()) == "hello"


class TestPrompts:

    def test_prompt_follows_direction(self):
        assert build_prompt("你好", "hello", QuizDirection.WORD_TO_TRANSLATION, "chinese") == 'What does "你好" mean?'
        assert build_prompt("你好", "hello", QuizDirection.TRANSLATION_TO_WORD, "chinese") == (
            'How do you say "hello" in Chinese?'
        )
