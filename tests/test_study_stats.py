"""Tests for dashboard statistics."""
import datetime

from study_stats import compute_stats, streak_days, week_start, record_score

# Wednesday 2025-01-22 12:00 UTC
NOW = datetime.datetime(2025, 1, 22, 12, 0, tzinfo=datetime.timezone.utc).timestamp()
HOUR = 3600
DAY = 86400


def _records():
    return [
        {"created_at": NOW - HOUR, "problem_type": "existing", "score": 90},
        {"created_at": NOW - DAY, "problem_type": "existing", "score": 80},
        {"created_at": NOW - 2 * DAY, "problem_type": "ai-generated", "score": 70},
        {"created_at": NOW - 10 * DAY, "problem_type": "ai-generated", "score": 60},
    ]


def test_empty_history_gets_demo_stats():
    stats = compute_stats([], now=NOW)
    assert stats["demo"] is True
    assert len(stats["daily_study_time"]) == 7


def test_compute_stats():
    stats = compute_stats(_records(), now=NOW)

    assert stats["demo"] is False
    assert stats["total_records"] == 4
    assert stats["average_accuracy"] == 75.0
    assert stats["total_study_time"] == 1200
    assert stats["streak_days"] == 3
    assert stats["weekly_goal"] == 60.0
    assert stats["daily_study_time"] == [0, 0, 0, 0, 5, 5, 5]
    assert [r["average_score"] for r in stats["recent_activities"]] == [90, 80, 70, 60]


def test_content_type_ranking():
    ranking = compute_stats(_records(), now=NOW)["content_type_ranking"]
    assert ranking == [
        {"content_type": "기존 문제", "average_score": 85.0, "record_count": 2, "rank": 1},
        {"content_type": "AI 생성 문제", "average_score": 65.0, "record_count": 2, "rank": 2},
    ]


def test_streak_breaks_on_missing_today():
    assert streak_days([{"created_at": NOW - DAY}], NOW) == 0


def test_week_starts_on_sunday():
    assert week_start(NOW).date() == datetime.date(2025, 1, 19)


def test_record_score_falls_back_to_feedback(sample_feedback):
    assert record_score({"score": None, "feedback": sample_feedback}) == 85
    assert record_score({"score": 42, "feedback": sample_feedback}) == 42


def test_stats_endpoint_for_anonymous_user(client):
    assert client.get("/api/stats/study").json()["demo"] is True


def test_stats_endpoint_uses_history(client, auth_headers):
    client.post("/api/records", headers=auth_headers, json={
        "problem_type": "existing",
        "original_text": "문장",
        "user_translation": "句子",
        "feedback": "1. 종합 평가\n‧ 좋음 (8/10)\n2. 좋은 점\n‧ 어휘\n3. 아쉬운 점\n‧ 어순",
    })
    stats = client.get("/api/stats/study", headers=auth_headers).json()
    assert stats["demo"] is False
    assert stats["total_records"] == 1
    assert stats["average_accuracy"] == 80.0
    assert stats["streak_days"] == 1


def test_insight(client, fake_llm):
    fake_llm.replies.append("매일 한 문제씩 풀어보세요.")
    resp = client.post("/api/stats/insight", json={"insight": "12일 연속 학습!"})
    assert resp.json() == {"insight": "12일 연속 학습!", "detail": "매일 한 문제씩 풀어보세요.", "ok": True}


def test_insight_failure_is_soft(client, fake_llm):
    fake_llm.fail = True
    data = client.post("/api/stats/insight", json={}).json()
    assert data["ok"] is False
    assert data["insight"]
