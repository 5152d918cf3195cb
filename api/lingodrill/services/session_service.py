"""
Practice session engine.

A session reviews the cards due on one skill track. Cards are shuffled into a
queue; a correct answer removes the head card, an incorrect answer moves it to
the back for an immediate re-drill, and a skip drops it without touching its
spaced repetition state. The session finishes when the queue is empty.

State flow:
    idle -> loading -> prompting -> awaiting_answer -> grading -> feedback -> prompting | finished
Skips and recognition give-ups return to prompting; stop() ends the session from any state.
"""
import asyncio
import logging
import random
import time
from collections import deque
from datetime import date, datetime
from typing import Callable, Iterable, List, Optional, Set

from lingodrill.core.config import settings
from lingodrill.core.exceptions import (
    LingodrillException,
    NotFoundError,
    SessionStateError,
)
from lingodrill.models.enums import FailurePolicy, QuizDirection, SessionState, Skill
from lingodrill.models.flashcard import Flashcard
from lingodrill.schemas.flashcard import FlashcardResponse
from lingodrill.schemas.grading import MatchResult
from lingodrill.schemas.session import SessionStateResponse, SessionTotals, StartSessionRequest
from lingodrill.services.flashcard_service import FlashcardStore
from lingodrill.services.grading_service import grade_answer
from lingodrill.services.speech_service import (
    SpeechRecognizer,
    SpeechSynthesizer,
    build_prompt,
    get_locale_for_language,
    get_message,
    get_recognition_locale,
)
from lingodrill.services.srs_service import schedule_review
from lingodrill.utils.time_utils import as_utc, utc_now

logger = logging.getLogger(__name__)


class CollaboratorInterrupted(Exception):
    """Speech playback or capture was cancelled by the session itself."""


class CardQueue:
    """Ordered cards of one session. A card id appears at most once."""

    def __init__(self, cards: Iterable[Flashcard] = ()):
        self._cards = deque()
        for card in cards:
            if card.id not in self.ids():
                self._cards.append(card)

    def __len__(self) -> int:
        return len(self._cards)

    def __iter__(self):
        return iter(self._cards)

    @property
    def head(self) -> Optional[Flashcard]:
        return self._cards[0] if self._cards else None

    def ids(self) -> List[str]:
        return [card.id for card in self._cards]

    def dequeue(self) -> Flashcard:
        """Remove and return the head card."""
        if not self._cards:
            raise IndexError("dequeue from an empty card queue")
        return self._cards.popleft()

    def requeue(self) -> Flashcard:
        """Move the head card to the tail and return it."""
        card = self.dequeue()
        self._cards.append(card)
        return card

    def remove(self, card_id: str) -> Optional[Flashcard]:
        """Remove a card wherever it is; returns None if it was not queued."""
        for card in self._cards:
            if card.id == card_id:
                self._cards.remove(card)
                return card
        return None

    def clear(self) -> None:
        self._cards.clear()


class PracticeSession:
    """
    One live review run over the cards due on a skill track.

    Flip-card front ends answer with submit_manual_judgment(); speech front
    ends either submit_transcript() themselves or let listen() capture the
    answer through the recognizer. run() drives a whole hands-free session.
    Only one answer is graded at a time: answers are accepted only while the
    session is awaiting one, and the card's new level and date are written
    before the session moves on.
    """

    def __init__(
        self,
        store: FlashcardStore,
        skill: Skill,
        direction: QuizDirection = QuizDirection.WORD_TO_TRANSLATION,
        category_id: Optional[str] = None,
        *,
        threshold: Optional[float] = None,
        practice_mode: bool = False,
        failure_policy: Optional[FailurePolicy] = None,
        max_recognition_attempts: Optional[int] = None,
        synthesizer: Optional[SpeechSynthesizer] = None,
        recognizer: Optional[SpeechRecognizer] = None,
        rng: Optional[random.Random] = None,
        today: Optional[date] = None,
    ):
        self.store = store
        self.skill = Skill(skill)
        self.direction = QuizDirection(direction)
        self.language = store.language
        self.category_id = category_id
        self.threshold = settings.match_threshold if threshold is None else threshold
        self.practice_mode = practice_mode
        self.failure_policy = failure_policy
        self.max_recognition_attempts = (
            settings.max_recognition_attempts if max_recognition_attempts is None else max_recognition_attempts
        )
        self.synthesizer = synthesizer
        self.recognizer = recognizer
        self.today = today

        self.state = SessionState.IDLE
        self.queue = CardQueue()
        self.totals = SessionTotals()
        self.current_card: Optional[Flashcard] = None
        self.current_direction: Optional[QuizDirection] = None
        self.last_result: Optional[MatchResult] = None
        self.last_correct: Optional[bool] = None
        self.warnings: List[str] = []

        self._rng = rng or random.Random()
        # Flipped before every card in mixed mode; the first card is word -> translation
        self._direction_toggle = True
        self._cycle = 0
        self._recognition_failures = 0
        self._prompted_at: Optional[float] = None
        self._pending: Set[asyncio.Future] = set()
        self._interrupted: Set[asyncio.Future] = set()
        self._finished = asyncio.Event()
        self._advanced = asyncio.Event()
        self._finish_listeners: List[Callable[[SessionTotals], None]] = []

    # ------------------------------------------------------------------
    # Read-only view
    # ------------------------------------------------------------------

    @property
    def remaining(self) -> int:
        return len(self.queue)

    @property
    def is_active(self) -> bool:
        return self.state not in (SessionState.IDLE, SessionState.FINISHED, SessionState.STOPPED)

    @property
    def prompt(self) -> Optional[str]:
        if self.current_card is None or self.current_direction is None:
            return None
        return build_prompt(
            self.current_card.word, self.current_card.translation, self.current_direction, self.language
        )

    @property
    def expected_answer(self) -> Optional[str]:
        if self.current_card is None or self.current_direction is None:
            return None
        if self.current_direction == QuizDirection.TRANSLATION_TO_WORD:
            return self.current_card.word
        return self.current_card.translation

    def snapshot(self) -> SessionStateResponse:
        """Current state for the UI."""
        return SessionStateResponse(
            state=self.state,
            skill=self.skill,
            direction=self.direction,
            current_direction=self.current_direction,
            current_card=(
                FlashcardResponse.model_validate(self.current_card) if self.current_card is not None else None
            ),
            prompt=self.prompt,
            expected_answer=self.expected_answer,
            remaining=self.remaining,
            totals=self.totals.model_copy(),
            last_result=self.last_result,
            last_correct=self.last_correct,
            warnings=list(self.warnings),
        )

    def on_finished(self, callback: Callable[[SessionTotals], None]) -> None:
        """Register a callback receiving the totals when the queue runs empty."""
        self._finish_listeners.append(callback)

    async def wait_finished(self) -> SessionTotals:
        """Wait until the session finishes or is stopped and return the totals."""
        await self._finished.wait()
        return self.totals

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def start(self) -> SessionState:
        """
        Load the due cards, shuffle them into the queue and move to the first card.

        No due cards is not an error: the session finishes at once with zero totals.
        """
        self._require_state(SessionState.IDLE)
        self.state = SessionState.LOADING

        try:
            cards = list(self.store.get_due_cards(self.skill, today=self.today, category_id=self.category_id))
        except LingodrillException:
            self.state = SessionState.IDLE
            raise
        self._rng.shuffle(cards)
        self.queue = CardQueue(cards)
        self.totals = SessionTotals()

        logger.info(
            f"Started {self.skill.value} session on {self.language} deck: "
            f"{len(self.queue)} card(s) due, direction={self.direction.value}, "
            f"category={self.category_id}, practice_mode={self.practice_mode}"
        )

        if not self.queue:
            self._finish()
            await self._say(get_message(self.language, "no_cards"))
            return self.state

        await self._advance()
        return self.state

    def stop(self) -> None:
        """
        Stop the session.

        Pending speech is cancelled and the queue is discarded. Answers already
        graded keep their saved state.
        """
        if self.state in (SessionState.FINISHED, SessionState.STOPPED):
            return
        self.state = SessionState.STOPPED
        self._cancel_pending()
        self.queue.clear()
        self.current_card = None
        self.current_direction = None
        self._finished.set()
        self._advanced.set()
        logger.info(
            f"Stopped {self.skill.value} session: correct={self.totals.correct}, "
            f"incorrect={self.totals.incorrect}, skipped={self.totals.skipped}"
        )

    async def run(self) -> SessionTotals:
        """Drive a hands-free session: prompt, listen, grade and give feedback until done."""
        if self.recognizer is None:
            raise SessionStateError("A speech recognizer is required to run a session hands-free")
        if self.state == SessionState.IDLE:
            await self.start()

        while self.is_active:
            if self.state == SessionState.PROMPTING:
                await self.present()
            elif self.state == SessionState.AWAITING_ANSWER:
                await self.listen()
            else:
                # Another caller is handling the answer; wait for the next card
                self._advanced.clear()
                await self._advanced.wait()

        return self.totals

    # ------------------------------------------------------------------
    # Card cycle
    # ------------------------------------------------------------------

    async def present(self) -> Optional[str]:
        """Speak the current prompt, then wait for an answer."""
        self._require_state(SessionState.PROMPTING)
        cycle = self._cycle
        prompt = self.prompt

        await self._say(prompt)

        if cycle == self._cycle and self.state == SessionState.PROMPTING:
            self.state = SessionState.AWAITING_ANSWER
            self._prompted_at = time.monotonic()
        return prompt

    async def submit_manual_judgment(self, correct: bool) -> None:
        """Accept a flip-card verdict for the current card."""
        card = self._accept_answer()
        self.last_result = None
        feedback_key = "judged_correct" if correct else "judged_incorrect"
        await self._complete_cycle(card, bool(correct), get_message(self.language, feedback_key))

    async def submit_transcript(self, transcript: str) -> MatchResult:
        """Grade a spoken or typed answer for the current card."""
        card = self._accept_answer()
        expected = self.expected_answer
        result = grade_answer(transcript, expected, self.language, self.threshold)
        self.last_result = result

        if result.correct:
            feedback = get_message(self.language, "correct", word=card.word)
        else:
            feedback = get_message(self.language, "incorrect", answer=expected)
        await self._complete_cycle(card, result.correct, feedback)
        return result

    async def skip(self) -> None:
        """Drop the current card from the queue without changing its saved state."""
        self._require_state(SessionState.PROMPTING, SessionState.AWAITING_ANSWER)
        self._cancel_pending()

        card = self.current_card
        self.queue.remove(card.id)
        self.totals.skipped += 1
        logger.info(f"Skipped card {card.id} in {self.skill.value} session")

        await self._advance()

    async def listen(self) -> Optional[MatchResult]:
        """
        Capture the answer through the recognizer and grade it.

        A recognition error or an empty transcript is retried with a spoken
        re-prompt; after max_recognition_attempts failures the card is skipped.

        Returns:
            The MatchResult, or None if the card was skipped or the session moved on
        """
        self._require_state(SessionState.AWAITING_ANSWER)
        if self.recognizer is None:
            raise SessionStateError("No speech recognizer configured for this session")

        cycle = self._cycle
        locale = get_recognition_locale(self.language, self.current_direction)

        while True:
            try:
                transcript = await self._run_collaborator(self.recognizer.recognize(locale))
                error = None
            except CollaboratorInterrupted:
                return None
            except Exception as e:
                transcript = None
                error = e

            if not self._still_awaiting(cycle):
                return None

            if transcript is not None and transcript.strip():
                return await self.submit_transcript(transcript)

            self._recognition_failures += 1
            logger.warning(
                f"Speech recognition failed for card {self.current_card.id} "
                f"(attempt {self._recognition_failures}/{self.max_recognition_attempts}): "
                f"{error if error is not None else 'empty transcript'}"
            )

            if self._recognition_failures >= self.max_recognition_attempts:
                await self._say(get_message(self.language, "skip"))
                if self._still_awaiting(cycle):
                    await self.skip()
                return None

            await self._say(get_message(self.language, "retry"))
            if not self._still_awaiting(cycle):
                return None

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _require_state(self, *states: SessionState) -> None:
        if self.state not in states:
            allowed = ", ".join(state.value for state in states)
            raise SessionStateError(
                f"Session is {self.state.value}; this action needs it to be {allowed}"
            )

    def _still_awaiting(self, cycle: int) -> bool:
        return cycle == self._cycle and self.state == SessionState.AWAITING_ANSWER

    def _accept_answer(self) -> Flashcard:
        self._require_state(SessionState.AWAITING_ANSWER)
        # A verdict can arrive while the microphone is still open
        self._cancel_pending()
        self.state = SessionState.GRADING
        return self.current_card

    async def _complete_cycle(self, card: Flashcard, correct: bool, feedback: str) -> None:
        cycle = self._cycle
        self.last_correct = correct
        self._persist_outcome(card, correct)

        if correct:
            self.totals.correct += 1
            self.queue.dequeue()
        else:
            self.totals.incorrect += 1
            self.queue.requeue()

        self.state = SessionState.FEEDBACK
        await self._say(feedback)

        if cycle == self._cycle and self.state == SessionState.FEEDBACK:
            await self._advance()

    def _persist_outcome(self, card: Flashcard, correct: bool) -> None:
        """Write the new level/date and the review record. Failures become warnings."""
        if self.practice_mode:
            return

        time_taken = time.monotonic() - self._prompted_at if self._prompted_at is not None else 0
        reviewed_at = as_utc(datetime.combine(self.today, datetime.now().time())) if self.today else utc_now()
        try:
            review = schedule_review(
                self.store, card.id, self.skill, correct, today=self.today, policy=self.failure_policy
            )
            card.set_skill_track(self.skill, review.level, review.next_review_date)
        except LingodrillException as e:
            self._warn(f"Could not save the review of '{card.word}': {str(e)}")
            if isinstance(e, NotFoundError):
                return

        try:
            self.store.append_review_session(
                card.id, correct, timestamp=reviewed_at, skill=self.skill, time_taken=round(time_taken, 2)
            )
        except LingodrillException as e:
            self._warn(f"Could not record the review history of '{card.word}': {str(e)}")

    async def _advance(self) -> None:
        """Move to the head card, or finish when the queue is empty."""
        self._cycle += 1
        self._advanced.set()
        self._recognition_failures = 0
        self._prompted_at = None

        if not self.queue:
            self.current_card = None
            self.current_direction = None
            self._finish()
            await self._say(get_message(self.language, "complete", correct=self.totals.correct))
            return

        self.current_card = self.queue.head
        self.current_direction = self._next_direction()
        self.state = SessionState.PROMPTING

    def _next_direction(self) -> QuizDirection:
        if self.direction != QuizDirection.MIXED:
            return self.direction
        self._direction_toggle = not self._direction_toggle
        if self._direction_toggle:
            return QuizDirection.TRANSLATION_TO_WORD
        return QuizDirection.WORD_TO_TRANSLATION

    def _finish(self) -> None:
        self.state = SessionState.FINISHED
        self._finished.set()
        logger.info(
            f"Finished {self.skill.value} session: correct={self.totals.correct}, "
            f"incorrect={self.totals.incorrect}, skipped={self.totals.skipped}"
        )
        for listener in self._finish_listeners:
            try:
                listener(self.totals)
            except Exception:
                logger.exception("Session finish listener failed")

    def _warn(self, message: str) -> None:
        logger.warning(message)
        self.warnings.append(message)

    async def _say(self, text: Optional[str]) -> None:
        """Speak a text; synthesis failures only cost the audio."""
        if self.synthesizer is None or not text:
            return
        locale = get_locale_for_language(self.language)
        try:
            await self._run_collaborator(self.synthesizer.speak(text, locale))
        except CollaboratorInterrupted:
            return
        except Exception as e:
            logger.warning(f"Speech synthesis failed, continuing without audio: {str(e)}")

    async def _run_collaborator(self, awaitable):
        future = asyncio.ensure_future(awaitable)
        self._pending.add(future)
        try:
            return await future
        except asyncio.CancelledError:
            # Cancellation of the calling task itself propagates unchanged
            if future in self._interrupted:
                raise CollaboratorInterrupted() from None
            raise
        finally:
            self._pending.discard(future)
            self._interrupted.discard(future)

    def _cancel_pending(self) -> None:
        for future in self._pending:
            if not future.done():
                self._interrupted.add(future)
                future.cancel()


class SessionManager:
    """Holds the single active session driven over HTTP."""

    def __init__(self):
        self.active: Optional[PracticeSession] = None

    async def start(self, store: FlashcardStore, request: StartSessionRequest) -> PracticeSession:
        """Start a new session; a running one is stopped first."""
        if self.active is not None:
            self.active.stop()

        session = PracticeSession(
            store,
            request.skill,
            request.direction,
            request.category_id,
            threshold=request.threshold,
            practice_mode=request.practice_mode,
        )
        self.active = session
        await session.start()
        await self.present_if_ready(session)
        return session

    def get(self) -> PracticeSession:
        if self.active is None:
            raise NotFoundError("No practice session has been started")
        return self.active

    async def present_if_ready(self, session: PracticeSession) -> None:
        """Show the next prompt once the previous answer has been handled."""
        if session.state == SessionState.PROMPTING:
            await session.present()

    def stop(self) -> PracticeSession:
        session = self.get()
        session.stop()
        return session


session_manager = SessionManager()


def get_session_manager() -> SessionManager:
    """Dependency for getting the practice session manager."""
    return session_manager
