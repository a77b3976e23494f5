"""Shared fixtures for the test suite."""
import time
from collections import defaultdict

import pytest
from fastapi.testclient import TestClient

import auth
import cache
import llm
from app import app


SAMPLE_FEEDBACK = """1. 종합 평가
- 학생 번역은 원문의 의미를 잘 전달함
- 전달력이 좋고 자연스러움 유지 (8.5/10)

2. 좋은 점
• 어휘를 문맥에 맞게 잘 선택했어요
• "경제 회복"을 "经济复苏"로 올바르게 번역했어요

3. 아쉬운 점
● "최우선 과제"가 "重要任务"로 번역되어 의미가 약화됨

4. 추천 표현/개선
* "경제 회복" → "经济复苏"가 더 자연스러움

5. 학습 제안
- 접속사 사용과 문장 분리 연습 권장

6. 주요 표현/예문
- 중요 표현: 경제 회복 → 经济复苏(jīng jì fù sū)
- 원문 예문 1: 정부는 경제 회복을 최우선 과제로 삼고 있다.
- 예문 번역 1: 政府将经济复苏作为首要任务。
- 원문 예문 2: 경제 회복 속도가 예상보다 빠르다.
- 예문 번역 2: 经济复苏的速度比预期要快。
"""


class FakeLLM:
    """Stands in for the provider chain: returns queued replies, records prompts."""

    def __init__(self):
        self.replies = []
        self.prompts = []
        self.fail = False

    async def __call__(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.fail:
            raise llm.AllProvidersFailedError()
        return self.replies.pop(0) if self.replies else ""


@pytest.fixture()
def sample_feedback():
    return SAMPLE_FEEDBACK


@pytest.fixture()
def fake_llm():
    fake = FakeLLM()
    app.dependency_overrides[llm.get_llm] = lambda: fake
    yield fake
    app.dependency_overrides.pop(llm.get_llm, None)


@pytest.fixture()
def client(tmp_path, monkeypatch):
    monkeypatch.setattr(auth, "DB_PATH", tmp_path / "beonyeok-test.db")
    monkeypatch.setattr(auth, "_rate_buckets", defaultdict(list))
    cache.clear_caches()
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def make_user(client):
    def _make(username: str = "alice") -> dict:
        conn = auth.get_db()
        cursor = conn.execute(
            "INSERT INTO users (username, password_hash, created_at) VALUES (?, ?, ?)",
            (username, "test-hash", time.time()),
        )
        user_id = cursor.lastrowid
        conn.commit()
        conn.close()
        token = auth.create_session(user_id)
        return {"Authorization": f"Bearer {token}"}
    return _make


@pytest.fixture()
def auth_headers(make_user):
    return make_user("alice")
