"""Pydantic schemas, response-shape validators, and static data."""
from typing import Any, List, Optional

from pydantic import BaseModel, Field, TypeAdapter, model_validator
from pydantic import ValidationError as PydanticValidationError

from errors import ParseError
from json_extract import extract_json

# --- Constants ---

MAX_WORDS_LIMIT = 50
QUESTION_COUNT_LIMIT = 20

SHAPE_MISMATCH = "AI response has an unexpected shape"

AI_PROVIDERS = [
    {
        "id": "deepseek",
        "name": "DeepSeek",
        "baseUrl": "https://api.deepseek.com/v1",
        "models": ["deepseek-chat", "deepseek-reasoner"],
    },
    {
        "id": "openai",
        "name": "OpenAI",
        "baseUrl": "https://api.openai.com/v1",
        "models": ["gpt-4o", "gpt-4o-mini", "gpt-4-turbo", "gpt-3.5-turbo"],
    },
    {
        "id": "groq",
        "name": "Groq",
        "baseUrl": "https://api.groq.com/openai/v1",
        "models": ["llama-3.3-70b-versatile", "llama-3.1-8b-instant", "mixtral-8x7b-32768"],
    },
    {
        "id": "moonshot",
        "name": "Moonshot",
        "baseUrl": "https://api.moonshot.cn/v1",
        "models": ["moonshot-v1-8k", "moonshot-v1-32k", "moonshot-v1-128k"],
    },
    {
        "id": "custom",
        "name": "Custom",
        "baseUrl": "",
        "models": [],
    },
]


# --- Request Models ---

class AIConfig(BaseModel):
    apiKey: Optional[str] = None
    baseUrl: Optional[str] = None
    model: Optional[str] = None


class AITestRequest(BaseModel):
    aiConfig: Optional[AIConfig] = None


class FlashcardExtractRequest(BaseModel):
    text: Optional[str] = None
    maxWords: Optional[int] = 10
    level: Optional[str] = "all"
    aiConfig: Optional[AIConfig] = None


class SentenceAnalyzeRequest(BaseModel):
    sentence: Optional[str] = None
    aiConfig: Optional[AIConfig] = None


class ReadingGenerateRequest(BaseModel):
    text: Optional[str] = None
    language: Optional[str] = "en"
    aiConfig: Optional[AIConfig] = None


class ReadingQuestionsRequest(BaseModel):
    reading: Optional[str] = None
    questionCount: Optional[int] = 5
    aiConfig: Optional[AIConfig] = None


class VocabularyQuestionsRequest(BaseModel):
    vocabulary: Optional[Any] = None
    questionCount: Optional[int] = 5
    aiConfig: Optional[AIConfig] = None


class ReportGenerateRequest(BaseModel):
    reportType: Optional[str] = None
    learningData: Optional[Any] = None
    aiConfig: Optional[AIConfig] = None


# --- Response Shapes ---

class ShapeModel(BaseModel):
    """Model output shape; a null optional field counts as absent."""

    @model_validator(mode="before")
    @classmethod
    def _drop_null_optionals(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        fields = cls.model_fields
        return {
            k: v for k, v in data.items()
            if v is not None or k not in fields or fields[k].is_required()
        }


class WordCard(ShapeModel):
    word: str
    phonetic: str = ""
    definition: str = ""
    etymology: str = ""
    example: str = ""
    exampleTranslation: str = ""


class SentenceStructure(ShapeModel):
    type: str
    explanation: str = ""


class Clause(ShapeModel):
    text: str
    type: str = ""
    function: str = ""


class Tense(ShapeModel):
    name: str
    explanation: str = ""


class TaggedSpan(ShapeModel):
    """A component or phrase of the analysed sentence."""
    text: str
    type: str = ""
    explanation: str = ""


class GrammarPoint(ShapeModel):
    point: str
    explanation: str = ""


class SentenceAnalysis(ShapeModel):
    structure: SentenceStructure
    clauses: List[Clause] = []
    tense: List[Tense] = []
    components: List[TaggedSpan] = []
    phrases: List[TaggedSpan] = []
    grammarPoints: List[GrammarPoint] = []


class VocabItem(ShapeModel):
    word: str
    phonetic: Optional[str] = None
    meaning: str = ""
    example: Optional[str] = None


class ReadingContent(ShapeModel):
    english: str = Field(min_length=1)
    chinese: str = Field(min_length=1)
    vocabulary: List[VocabItem]


class QuizQuestion(ShapeModel):
    question: str
    options: List[str] = Field(min_length=4, max_length=4)
    correctIndex: int = Field(ge=0, le=3)
    explanation: str = ""


class TimeStats(ShapeModel):
    totalHours: float = 0
    averageDaily: float = 0
    trend: str = ""


class VocabularyStats(ShapeModel):
    learned: int = 0
    mastered: int = 0
    needReview: int = 0


class ReadingStats(ShapeModel):
    articles: int = 0
    topTopics: List[str] = []
    averageDifficulty: str = ""


class ScoreStats(ShapeModel):
    completed: int = 0
    averageScore: float = 0
    improvement: str = ""


class LearningReport(ShapeModel):
    title: str
    period: str = ""
    summary: str = ""
    timeStats: TimeStats = TimeStats()
    vocabulary: VocabularyStats = VocabularyStats()
    reading: ReadingStats = ReadingStats()
    tests: ScoreStats = ScoreStats()
    strengths: List[str] = []
    weaknesses: List[str] = []
    suggestions: List[str] = []


_word_cards = TypeAdapter(List[WordCard])
_quiz_questions = TypeAdapter(List[QuizQuestion])


# --- Shape Validation ---

def _validate(adapter_or_model, value: Any):
    try:
        if isinstance(adapter_or_model, TypeAdapter):
            parsed = adapter_or_model.validate_python(value)
            return adapter_or_model.dump_python(parsed)
        return adapter_or_model.model_validate(value).model_dump()
    except PydanticValidationError as e:
        raise ParseError(SHAPE_MISMATCH) from e


def validate_word_cards(value: Any) -> List[dict]:
    return _validate(_word_cards, value)


def validate_sentence_analysis(value: Any) -> dict:
    return _validate(SentenceAnalysis, value)


def validate_reading_content(value: Any) -> dict:
    return _validate(ReadingContent, value)


def validate_quiz_questions(value: Any) -> List[dict]:
    return _validate(_quiz_questions, value)


def validate_learning_report(value: Any) -> dict:
    return _validate(LearningReport, value)


def extract_word_cards(text: str) -> List[dict]:
    return validate_word_cards(extract_json(text))


def extract_sentence_analysis(text: str) -> dict:
    return validate_sentence_analysis(extract_json(text))


def extract_reading_content(text: str) -> dict:
    return validate_reading_content(extract_json(text))


def extract_quiz_questions(text: str) -> List[dict]:
    """Recover a QuizQuestion[] from raw model output."""
    return validate_quiz_questions(extract_json(text))


def extract_learning_report(text: str) -> dict:
    return validate_learning_report(extract_json(text))


def clamp_count(value: Optional[int], default: int, upper: int) -> int:
    """Clamp a caller-supplied count into 1..upper, falling back to default."""
    if value is None:
        return default
    return max(1, min(int(value), upper))
