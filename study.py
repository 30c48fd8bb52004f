"""Study flows: flashcard review, quiz taking, and achievement summaries.

These mirror what the pages of the web client do with API results and the
learner's stored history.
"""
import math
from datetime import datetime, timezone
from typing import List, Optional

from client import EnglishLearningClient
from storage import LearningStore

UNKNOWN_READING_TITLE = "Untitled reading"


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class FlashcardDeck:
    """A deck reviewed one card at a time; each card shows its front first."""

    def __init__(self, cards: List[dict]):
        self.cards = list(cards)
        self.index = 0
        self.flipped = False

    @property
    def current(self) -> Optional[dict]:
        return self.cards[self.index] if self.cards else None

    def flip(self):
        self.flipped = not self.flipped

    def move(self, step: int) -> bool:
        """Move by ``step`` cards; stays put at either end. Returns True if moved."""
        target = self.index + step
        self.flipped = False
        if target < 0 or target >= len(self.cards):
            return False
        self.index = target
        return True

    def next(self) -> bool:
        return self.move(1)

    def previous(self) -> bool:
        return self.move(-1)


class QuizSession:
    """Single-question-at-a-time quiz with immediate feedback."""

    def __init__(self, questions: List[dict], test_type: str = "reading",
                 reading_title: Optional[str] = None):
        if not questions:
            raise ValueError("A quiz needs at least one question")
        self.questions = list(questions)
        self.test_type = test_type
        self.reading_title = reading_title or UNKNOWN_READING_TITLE
        self.answers: List[Optional[int]] = [None] * len(self.questions)
        self.index = 0
        self.finished = False

    @property
    def current(self) -> dict:
        return self.questions[self.index]

    @property
    def answered(self) -> bool:
        return self.answers[self.index] is not None

    def select(self, option: int) -> bool:
        """Record an answer for the current question; return whether it is right.

        Only the first answer to a question counts.
        """
        if self.finished:
            raise RuntimeError("Quiz already finished")
        if not 0 <= option < len(self.current["options"]):
            raise ValueError(f"Option {option} out of range")
        if not self.answered:
            self.answers[self.index] = option
        return self.answers[self.index] == self.current["correctIndex"]

    def next(self) -> bool:
        """Advance after answering. Returns True once the quiz is over."""
        if not self.answered:
            return False
        if self.index + 1 >= len(self.questions):
            self.finished = True
        else:
            self.index += 1
        return self.finished

    @property
    def correct_count(self) -> int:
        return sum(1 for q, a in zip(self.questions, self.answers) if a == q["correctIndex"])

    @property
    def score(self) -> int:
        return _round_half_up(self.correct_count / len(self.questions) * 100)

    def wrong_answers(self) -> List[dict]:
        """Questions answered incorrectly, with the learner's choice, for review."""
        return [
            dict(q, userAnswer=a)
            for q, a in zip(self.questions, self.answers)
            if a != q["correctIndex"]
        ]

    def result(self) -> dict:
        return {
            "type": self.test_type,
            "score": self.score,
            "date": datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "readingTitle": self.reading_title,
        }

    def save(self, store: LearningStore) -> dict:
        if not self.finished:
            raise RuntimeError("Quiz is not finished yet")
        result = self.result()
        store.add_test_result(result)
        return result


def quick_stats(store: LearningStore) -> dict:
    tests = store.test_history()
    scores = [
        t["score"] for t in tests
        if isinstance(t, dict) and isinstance(t.get("score"), (int, float))
        and not isinstance(t["score"], bool)
    ]
    return {
        "wordsLearned": len(store.flashcards()),
        "readings": len(store.reading_history()),
        "testsTaken": len(tests),
        "averageScore": _round_half_up(sum(scores) / len(scores)) if scores else 0,
    }


def report_share_text(report: dict) -> str:
    vocabulary = report.get("vocabulary") or {}
    reading = report.get("reading") or {}
    tests = report.get("tests") or {}
    return (
        f"📊 {report.get('title', '')}\n{report.get('summary', '')}\n"
        f"✅ Words: {vocabulary.get('learned', 0)} | "
        f"📖 Readings: {reading.get('articles', 0)} | "
        f"🎯 Tests: {tests.get('averageScore', 0)}"
    )


# --- Page flows ---

def build_flashcards(client: EnglishLearningClient, text: str, level: str = "all",
                     max_words: int = 10) -> FlashcardDeck:
    """Extract cards from ``text``; an empty result leaves the stored deck alone."""
    cards = client.extract_flashcards(text, max_words, level)
    if cards:
        client.store.save_flashcards(cards)
    return FlashcardDeck(cards)


def create_reading(client: EnglishLearningClient, text: str, language: str = "en") -> dict:
    reading = client.generate_reading(text, language)
    return client.store.add_reading(reading)


def start_quiz(client: EnglishLearningClient, reading: dict, test_type: str = "reading") -> QuizSession:
    if test_type == "vocabulary":
        questions = client.vocabulary_questions(reading.get("vocabulary") or [])
    else:
        questions = client.reading_questions(reading.get("english", ""))
    return QuizSession(questions, test_type, reading.get("title"))


def create_report(client: EnglishLearningClient, report_type: str = "weekly") -> dict:
    store = client.store
    if not store.has_learning_data():
        raise ValueError("No learning data yet; finish some study activities first")
    report = client.generate_report(report_type, store.learning_data())
    return store.add_report(report)
