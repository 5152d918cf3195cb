"""
Speech collaborators and the texts a practice session speaks.

Synthesis and recognition run outside this package (browser APIs, cloud
services). A session only needs two awaitable operations: speak a text, and
listen for one transcript. Both may fail; the session decides how to recover.
"""
import logging
from abc import ABC, abstractmethod
from typing import Dict

from lingodrill.core.exceptions import RecognitionError
from lingodrill.models.enums import QuizDirection

logger = logging.getLogger(__name__)

ENGLISH_LOCALE = "en-US"

# Map deck languages to BCP 47 locales used by recognizers and voices
LANGUAGE_LOCALES = {
    "chinese": "zh-CN",
    "indonesian": "id-ID",
}

LANGUAGE_NAMES = {
    "chinese": "Chinese",
    "indonesian": "Indonesian",
}

# Spoken feedback; Chinese decks hear Chinese feedback, every other deck English
SESSION_MESSAGES: Dict[str, Dict[str, str]] = {
    "chinese": {
        "correct": "对！{word}",
        "incorrect": "答案是 {answer}",
        "judged_correct": "好！",
        "judged_incorrect": "继续加油",
        "retry": "请再说一次",
        "skip": "跳过这个",
        "complete": "练习完成！答对了{correct}个",
        "no_cards": "没有需要复习的卡片",
    },
    "english": {
        "correct": "Correct! {word}",
        "incorrect": "The answer is {answer}",
        "judged_correct": "Good!",
        "judged_incorrect": "Keep practicing",
        "retry": "Please try again",
        "skip": "Let's skip this one",
        "complete": "Practice complete! You got {correct} correct",
        "no_cards": "No cards due for review",
    },
}


def get_locale_for_language(language: str) -> str:
    """
    Map a deck language to its locale.

    Args:
        language: Deck language ('chinese', 'indonesian')

    Returns:
        Locale such as 'zh-CN'; unknown languages default to en-US
    """
    return LANGUAGE_LOCALES.get(language.lower(), ENGLISH_LOCALE)


def get_recognition_locale(language: str, direction: QuizDirection) -> str:
    """
    Locale the answer will be spoken in.

    Answers to translation->word prompts are in the target language; answers
    to word->translation prompts are in English.
    """
    if QuizDirection(direction) == QuizDirection.TRANSLATION_TO_WORD:
        return get_locale_for_language(language)
    return ENGLISH_LOCALE


def get_message(language: str, key: str, **values) -> str:
    """Format one of the session's spoken messages for a deck language."""
    messages = SESSION_MESSAGES.get(language.lower(), SESSION_MESSAGES["english"])
    return messages[key].format(**values)


def build_prompt(word: str, translation: str, direction: QuizDirection, language: str) -> str:
    """
    Question asked for a card.

    Args:
        word: Target-language side of the card
        translation: English side of the card
        direction: TRANSLATION_TO_WORD or WORD_TO_TRANSLATION
        language: Deck language

    Returns:
        Prompt text
    """
    if QuizDirection(direction) == QuizDirection.TRANSLATION_TO_WORD:
        language_name = LANGUAGE_NAMES.get(language.lower(), language.capitalize())
        return f'How do you say "{translation}" in {language_name}?'
    return f'What does "{word}" mean?'


class SpeechSynthesizer(ABC):
    """
    Abstract base class for text-to-speech playback.
    """

    @abstractmethod
    async def speak(self, text: str, locale: str) -> None:
        """
        Play a text aloud.

        Resolves when playback ends. Any exception counts as a synthesis
        failure; the session continues without audio.
        """
        pass


class SpeechRecognizer(ABC):
    """
    Abstract base class for speech capture.
    """

    @abstractmethod
    async def recognize(self, locale: str) -> str:
        """
        Capture one spoken answer.

        Raises:
            RecognitionError: When no transcript is produced
        """
        pass


class SilentSynthesizer(SpeechSynthesizer):
    """Synthesizer for sessions whose UI shows text instead of playing audio."""

    async def speak(self, text: str, locale: str) -> None:
        logger.debug(f"Silent synthesizer skipped ({locale}): {text}")


class ScriptedRecognizer(SpeechRecognizer):
    """
    Recognizer replaying a fixed list of results.

    Each entry is a transcript, or an exception instance to raise for that
    attempt. Useful for typed-answer front ends and for tests.
    """

    def __init__(self, results):
        self._results = list(results)

    async def recognize(self, locale: str) -> str:
        if not self._results:
            raise RecognitionError("No more scripted transcripts")
        result = self._results.pop(0)
        if isinstance(result, Exception):
            raise result
        return result
