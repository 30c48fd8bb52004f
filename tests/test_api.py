"""Tests for the /api/v1 routes."""
import pytest

from config import Settings

QUIZ = [{
    "question": "What is the main idea?",
    "options": ["A", "B", "C", "D"],
    "correctIndex": 2,
    "explanation": "C sums it up",
}]


def test_health(client):
    resp = client.get("/api/v1/health")
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "ok"
    assert data["timestamp"].endswith("Z")


def test_ai_test_success(client, fake_llm, ai_config):
    resp = client.post("/api/v1/ai/test", json={"aiConfig": ai_config})
    assert resp.status_code == 200
    assert resp.json() == {"success": True, "model": "test-model"}
    assert len(fake_llm.requests) == 1


def test_ai_test_without_config_is_client_error(client, fake_llm):
    resp = client.post("/api/v1/ai/test", json={})
    assert resp.status_code == 400
    assert "configure the AI service" in resp.json()["error"]
    assert fake_llm.requests == []


def test_ai_test_upstream_failure_is_bad_gateway(client, fake_llm, ai_config):
    fake_llm.status_code = 401
    fake_llm.body = {"error": {"message": "invalid key"}}
    resp = client.post("/api/v1/ai/test", json={"aiConfig": ai_config})
    assert resp.status_code == 502
    assert resp.json()["error"].startswith("AI service error:")
    assert "invalid key" in resp.json()["error"]


@pytest.mark.parametrize("path,body", [
    ("/api/v1/flashcards/extract", {}),
    ("/api/v1/flashcards/extract", {"text": "   "}),
    ("/api/v1/sentence/analyze", {"sentence": ""}),
    ("/api/v1/reading/generate", {}),
    ("/api/v1/quiz/reading-questions", {"reading": ""}),
    ("/api/v1/quiz/vocabulary-questions", {}),
    ("/api/v1/quiz/vocabulary-questions", {"vocabulary": "not-a-list"}),
    ("/api/v1/report/generate", {"reportType": "weekly"}),
    ("/api/v1/report/generate", {"learningData": {"flashcards": [1]}}),
])
def test_missing_fields_rejected_before_ai_call(client, fake_llm, ai_config, path, body):
    resp = client.post(path, json=dict(body, aiConfig=ai_config))
    assert resp.status_code == 400
    assert resp.json()["error"]
    assert fake_llm.requests == []


def test_malformed_body_is_bad_request(client, fake_llm):
    resp = client.post("/api/v1/flashcards/extract", json={"text": "hi", "maxWords": "many"})
    assert resp.status_code == 400
    assert resp.json() == {"error": "Invalid request body"}


def test_flashcards_extract(client, fake_llm, ai_config):
    fake_llm.reply('Here you go:\n```json\n[{"word": "diligent", "definition": "勤奋的"}]\n```')
    resp = client.post("/api/v1/flashcards/extract", json={
        "text": "She is a diligent student.", "maxWords": 3, "level": "cet4", "aiConfig": ai_config,
    })
    assert resp.status_code == 200
    cards = resp.json()
    assert cards[0]["word"] == "diligent"
    assert cards[0]["etymology"] == ""
    assert "提取3个单词" in fake_llm.last_payload["messages"][0]["content"]


def test_flashcards_max_words_clamped(client, fake_llm, ai_config):
    fake_llm.reply([])
    client.post("/api/v1/flashcards/extract", json={"text": "x", "maxWords": 500, "aiConfig": ai_config})
    assert "提取50个单词" in fake_llm.last_payload["messages"][0]["content"]


def test_sentence_analyze(client, fake_llm, ai_config):
    fake_llm.reply({
        "structure": {"type": "复合句", "explanation": "含定语从句"},
        "clauses": [{"text": "who lives next door", "type": "定语从句", "function": "修饰 man"}],
        "tense": [{"name": "一般现在时", "explanation": "描述事实"}],
    })
    resp = client.post("/api/v1/sentence/analyze", json={
        "sentence": "The man who lives next door is a doctor.", "aiConfig": ai_config,
    })
    assert resp.status_code == 200
    data = resp.json()
    assert data["structure"]["type"] == "复合句"
    assert data["clauses"][0]["type"] == "定语从句"
    assert data["phrases"] == []
    assert fake_llm.last_payload["temperature"] == 0.6


def test_reading_generate_chinese_source(client, fake_llm, ai_config):
    fake_llm.reply({"english": "Spring is here.", "chinese": "春天来了。", "vocabulary": []})
    resp = client.post("/api/v1/reading/generate", json={
        "text": "春天来了。", "language": "zh", "aiConfig": ai_config,
    })
    assert resp.status_code == 200
    assert resp.json()["english"] == "Spring is here."
    assert "中文原文：春天来了。" in fake_llm.last_payload["messages"][0]["content"]


def test_reading_generate_bad_shape_is_generic_error(client, fake_llm, ai_config):
    fake_llm.reply({"english": "Only English"})
    resp = client.post("/api/v1/reading/generate", json={"text": "x", "aiConfig": ai_config})
    assert resp.status_code == 502
    assert resp.json() == {"error": "Cannot parse AI response"}


def test_unparseable_model_text_is_not_echoed(client, fake_llm, ai_config):
    fake_llm.reply("I refuse to answer in JSON, here is my secret reasoning")
    resp = client.post("/api/v1/sentence/analyze", json={"sentence": "Hi.", "aiConfig": ai_config})
    assert resp.status_code == 502
    assert "secret" not in resp.json()["error"]


def test_reading_questions(client, fake_llm, ai_config):
    fake_llm.reply(QUIZ)
    resp = client.post("/api/v1/quiz/reading-questions", json={
        "reading": "Once upon a time...", "questionCount": 1, "aiConfig": ai_config,
    })
    assert resp.status_code == 200
    assert resp.json()[0]["correctIndex"] == 2
    assert fake_llm.last_payload["max_tokens"] == 1500


def test_vocabulary_questions(client, fake_llm, ai_config):
    fake_llm.reply(QUIZ)
    resp = client.post("/api/v1/quiz/vocabulary-questions", json={
        "vocabulary": [{"word": "brave", "meaning": "勇敢的"}], "aiConfig": ai_config,
    })
    assert resp.status_code == 200
    assert len(resp.json()) == 1


def test_report_generate(client, fake_llm, ai_config):
    fake_llm.reply({"title": "学习周报", "summary": "本周表现稳定", "strengths": ["词汇积累"]})
    resp = client.post("/api/v1/report/generate", json={
        "reportType": "weekly",
        "learningData": {"flashcards": [{"word": "brave"}], "readingHistory": [], "testHistory": []},
        "aiConfig": ai_config,
    })
    assert resp.status_code == 200
    assert resp.json()["strengths"] == ["词汇积累"]
    assert "周报" in fake_llm.last_payload["messages"][0]["content"]


def test_report_accepts_empty_learning_data(client, fake_llm, ai_config):
    fake_llm.reply({"title": "学习周报"})
    for empty in ({}, []):
        resp = client.post("/api/v1/report/generate", json={
            "reportType": "weekly", "learningData": empty, "aiConfig": ai_config,
        })
        assert resp.status_code == 200
        assert resp.json()["title"] == "学习周报"
    assert len(fake_llm.requests) == 2


def test_ai_providers(client, fake_llm):
    resp = client.get("/api/v1/ai/providers")
    assert resp.status_code == 200
    providers = {p["id"]: p for p in resp.json()}
    assert providers["openai"]["baseUrl"] == "https://api.openai.com/v1"
    assert "deepseek-chat" in providers["deepseek"]["models"]
    assert providers["custom"]["baseUrl"] == ""
    assert fake_llm.requests == []


def test_production_rejects_private_base_url(make_client, fake_llm, ai_config):
    client = make_client(Settings(env="production", rate_limit_max=100))
    ai_config["baseUrl"] = "https://127.0.0.1:8000/v1"
    resp = client.post("/api/v1/sentence/analyze", json={"sentence": "Hi.", "aiConfig": ai_config})
    assert resp.status_code == 400
    assert fake_llm.requests == []


def test_allow_list_from_settings(make_client, fake_llm, ai_config):
    client = make_client(Settings(allowed_ai_hosts=["api.openai.com"], rate_limit_max=100))
    resp = client.post("/api/v1/ai/test", json={"aiConfig": ai_config})
    assert resp.status_code == 400
    assert "allowed list" in resp.json()["error"]


def test_rate_limit_applies_across_routes(make_client, limiter_factory, manual_clock, ai_config):
    client = make_client(limiter=limiter_factory(max_requests=2, window=60))
    assert client.get("/api/v1/health").status_code == 200
    assert client.post("/api/v1/ai/test", json={"aiConfig": ai_config}).status_code == 200

    blocked = client.get("/api/v1/health")
    assert blocked.status_code == 429
    assert blocked.json()["error"]
    assert blocked.headers["RateLimit-Remaining"] == "0"
    assert "Retry-After" in blocked.headers

    manual_clock.now = 61
    assert client.get("/api/v1/health").status_code == 200


def test_rate_limit_headers_on_success(client):
    resp = client.get("/api/v1/health")
    assert resp.headers["RateLimit-Limit"] == "1000"


def test_unexpected_errors_are_500(make_client, fake_llm, ai_config, monkeypatch):
    client = make_client(raise_server_exceptions=False)
    gw = client.app.state.gateway

    async def explode(*args, **kwargs):
        raise RuntimeError("disk on fire")

    monkeypatch.setattr(gw, "analyze_sentence", explode)
    resp = client.post("/api/v1/sentence/analyze", json={"sentence": "Hi.", "aiConfig": ai_config})
    assert resp.status_code == 500
    assert resp.json() == {"error": "disk on fire"}


def test_cors_development_origins(client):
    resp = client.get("/api/v1/health", headers={"Origin": "http://localhost:5173"})
    assert resp.headers["access-control-allow-origin"] == "http://localhost:5173"

    resp = client.get("/api/v1/health", headers={"Origin": "https://evil.example"})
    assert "access-control-allow-origin" not in resp.headers


def test_cors_production_origins(make_client):
    client = make_client(Settings(env="production", client_origins=["https://learn.example.com"]))
    resp = client.get("/api/v1/health", headers={"Origin": "https://learn.example.com"})
    assert resp.headers["access-control-allow-origin"] == "https://learn.example.com"

    resp = client.get("/api/v1/health", headers={"Origin": "http://localhost:5173"})
    assert "access-control-allow-origin" not in resp.headers
