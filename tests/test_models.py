"""Tests for response-shape validation."""
import json

import pytest

from errors import ParseError
from models import (
    clamp_count,
    extract_learning_report, extract_quiz_questions, extract_reading_content,
    extract_sentence_analysis, extract_word_cards,
    validate_learning_report, validate_quiz_questions, validate_reading_content,
    validate_sentence_analysis, validate_word_cards,
)

QUESTION = {
    "question": "Q?",
    "options": ["A", "B", "C", "D"],
    "correctIndex": 1,
    "explanation": "because B",
}


def test_extract_quiz_questions_single_question():
    raw = '[{"question":"Q?","options":["A","B","C","D"],"correctIndex":1,"explanation":"because B"}]'
    result = extract_quiz_questions(raw)
    assert len(result) == 1
    assert result[0]["correctIndex"] == 1
    assert result[0]["options"] == ["A", "B", "C", "D"]


def test_quiz_questions_must_be_an_array():
    with pytest.raises(ParseError):
        extract_quiz_questions(json.dumps(QUESTION))


@pytest.mark.parametrize("broken", [
    dict(QUESTION, correctIndex=4),
    dict(QUESTION, correctIndex=-1),
    dict(QUESTION, options=["A", "B", "C"]),
    {k: v for k, v in QUESTION.items() if k != "question"},
])
def test_invalid_quiz_questions_rejected(broken):
    with pytest.raises(ParseError):
        validate_quiz_questions([QUESTION, broken])


def test_word_cards_fill_missing_optional_fields():
    cards = validate_word_cards([{"word": "serendipity", "definition": "意外发现珍宝的运气"}])
    assert cards == [{
        "word": "serendipity",
        "phonetic": "",
        "definition": "意外发现珍宝的运气",
        "etymology": "",
        "example": "",
        "exampleTranslation": "",
    }]


def test_word_cards_reject_object():
    with pytest.raises(ParseError):
        extract_word_cards('{"word": "alone"}')


def test_word_cards_from_fenced_output():
    raw = '```json\n[{"word": "eloquent", "phonetic": "/ˈeləkwənt/"}]\n```'
    assert extract_word_cards(raw)[0]["word"] == "eloquent"


def test_reading_content_requires_three_keys():
    good = {"english": "Hi.", "chinese": "你好。", "vocabulary": [{"word": "hi", "meaning": "嗨"}]}
    result = validate_reading_content(good)
    assert result["vocabulary"][0]["phonetic"] is None

    for missing in ("english", "chinese", "vocabulary"):
        broken = {k: v for k, v in good.items() if k != missing}
        with pytest.raises(ParseError):
            validate_reading_content(broken)


@pytest.mark.parametrize("broken", [
    {"english": "", "chinese": "你好", "vocabulary": []},
    {"english": "Hi", "chinese": "你好", "vocabulary": "none"},
    {"english": ["Hi"], "chinese": "你好", "vocabulary": []},
])
def test_reading_content_wrong_kinds_rejected(broken):
    with pytest.raises(ParseError):
        extract_reading_content(json.dumps(broken, ensure_ascii=False))


def test_sentence_analysis_defaults_lists():
    result = extract_sentence_analysis('{"structure": {"type": "简单句", "explanation": "主谓宾"}}')
    assert result["structure"]["type"] == "简单句"
    assert result["clauses"] == []
    assert result["grammarPoints"] == []


def test_sentence_analysis_requires_structure():
    with pytest.raises(ParseError):
        extract_sentence_analysis('{"clauses": []}')


def test_learning_report_defaults_nested_sections():
    raw = 'Report:\n{"title": "第一周学习周报", "strengths": ["坚持每天阅读"], "tests": {"averageScore": 87.5}}'
    report = extract_learning_report(raw)
    assert report["title"] == "第一周学习周报"
    assert report["tests"]["averageScore"] == 87.5
    assert report["vocabulary"] == {"learned": 0, "mastered": 0, "needReview": 0}
    assert report["suggestions"] == []


def test_clamp_count():
    assert clamp_count(None, 5, 20) == 5
    assert clamp_count(0, 5, 20) == 1
    assert clamp_count(100, 5, 20) == 20
    assert clamp_count(7, 5, 20) == 7


def test_null_optional_fields_fall_back_to_defaults():
    cards = validate_word_cards([{"word": "x", "phonetic": None, "example": None}])
    assert cards[0]["phonetic"] == ""
    assert cards[0]["example"] == ""

    report = validate_learning_report({
        "title": "t",
        "timeStats": {"trend": None, "totalHours": None},
        "reading": None,
        "strengths": None,
    })
    assert report["timeStats"] == {"totalHours": 0, "averageDaily": 0, "trend": ""}
    assert report["reading"]["articles"] == 0
    assert report["strengths"] == []


def test_null_in_sentence_and_quiz_secondary_fields():
    analysis = validate_sentence_analysis({
        "structure": {"type": "简单句", "explanation": None},
        "clauses": None,
        "tense": [{"name": "一般现在时", "explanation": None}],
    })
    assert analysis["structure"]["explanation"] == ""
    assert analysis["clauses"] == []
    assert analysis["tense"][0]["explanation"] == ""

    questions = validate_quiz_questions([dict(QUESTION, explanation=None)])
    assert questions[0]["explanation"] == ""


def test_null_required_fields_still_rejected():
    with pytest.raises(ParseError):
        validate_word_cards([{"word": None}])
    with pytest.raises(ParseError):
        validate_learning_report({"title": None})
    with pytest.raises(ParseError):
        validate_quiz_questions([dict(QUESTION, correctIndex=None)])
