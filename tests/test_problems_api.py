"""Tests for the problem bank, problem generation and reference translation."""
import json

import problems
from problems import load_problems, source_text, reference_translation


def test_list_problems(client):
    data = client.get("/api/problems").json()
    assert len(data["problems"]) == len(load_problems())
    assert data["domains"][0] == "전체"
    assert "경제" in data["domains"]
    assert data["difficulties"] == ["전체", "상", "중", "하"]
    assert set(data["language_pairs"]) == {"한-중", "중-한"}


def test_filter_problems(client):
    data = client.get("/api/problems", params={"difficulty": "하", "domain": "경제"}).json()
    assert [p["id"] for p in data["problems"]] == ["econ-002"]


def test_get_problem(client):
    problem = client.get("/api/problems/econ-001").json()
    assert problem["분야"] == "경제"
    assert problem["source_text"] == problem["한국어"]
    assert problem["reference_translation"] == problem["Gemini_번역"]
    assert [v["korean"] for v in problem["vocab"]] == ["경제 회복", "최우선 과제", "지원 정책"]
    assert client.get("/api/problems/nope").status_code == 404


def test_get_problem_for_reverse_pair(client):
    problem = client.get("/api/problems/econ-001", params={"language_pair": "중-한"}).json()
    assert problem["source_text"] == problem["중국어"]
    assert problem["reference_translation"] == problem["한국어"]
    assert client.get("/api/problems/econ-001", params={"language_pair": "한-일"}).status_code == 400


def test_source_text_and_reference():
    problem = {"한국어": "문장", "중국어": "句子", "ChatGPT_번역": "句子一"}
    assert source_text(problem, "한-중") == "문장"
    assert source_text(problem, "중-한") == "句子"
    assert reference_translation(problem) == "句子一"
    assert reference_translation(problem, "중-한") == "문장"
    assert reference_translation({"중국어": "句子"}) == "句子"


def test_load_problems_from_broken_file(tmp_path):
    broken = tmp_path / "problems.json"
    broken.write_text("{not json", encoding="utf-8")
    try:
        assert load_problems(broken) == []
    finally:
        load_problems(problems.PROBLEMS_FILE)


def test_generate_problem(client, fake_llm):
    fake_llm.replies.append("문제입니다:\n" + json.dumps({
        "한국어": "재생 에너지 투자가 늘고 있다.",
        "중국어": "可再生能源投资正在增加。",
        "난이도": "중급",
        "분야": "환경",
    }, ensure_ascii=False))
    resp = client.post("/api/problems/generate", json={"topic": "재생 에너지", "difficulty": "중급"})
    assert resp.status_code == 200
    problem = resp.json()
    assert problem["id"].startswith("generated-")
    assert problem["language_pair"] == "한-중"
    assert problem["한국어"] == "재생 에너지 투자가 늘고 있다."
    assert "재생 에너지" in fake_llm.prompts[0]


def test_generate_problem_without_json(client, fake_llm):
    fake_llm.replies.append("죄송합니다. 생성할 수 없습니다.")
    resp = client.post("/api/problems/generate", json={"topic": "경제"})
    assert resp.status_code == 502


def test_generate_problem_requires_topic(client, fake_llm):
    assert client.post("/api/problems/generate", json={"topic": " "}).status_code == 400


def test_translate_is_cached(client, fake_llm):
    fake_llm.replies.append(" 政府将经济复苏作为首要任务。\n")
    body = {"text": "정부는 경제 회복을 최우선 과제로 삼고 있다.", "language_pair": "한-중"}

    first = client.post("/api/translate", json=body).json()
    second = client.post("/api/translate", json=body).json()

    assert first == {"translation": "政府将经济复苏作为首要任务。", "cached": False}
    assert second == {"translation": "政府将经济复苏作为首要任务。", "cached": True}
    assert len(fake_llm.prompts) == 1


def test_translate_failure(client, fake_llm):
    fake_llm.fail = True
    resp = client.post("/api/translate", json={"text": "문장"})
    assert resp.status_code == 502
