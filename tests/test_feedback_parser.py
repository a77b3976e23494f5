"""Tests for bullet normalization, section splitting, quotes and scores."""
import pytest

from models import BULLET, SECTION_KEYS
from feedback_parser import (
    normalize_bullets, split_sections, strip_section_heading, collect_quote_phrases, extract_quoted_phrases,
    extract_score, score_from_feedback, split_bullet_lines, split_quote_runs,
    format_section_text, parse_feedback, SectionSet,
)


@pytest.mark.parametrize("raw", [
    "- 하나\n• 둘\n● 셋\n* 넷",
    "   - 들여쓴 항목\n\t• 탭 항목",
    "‧ 이미 정규화됨\n‧ 두 번째",
    "목록 없는 문장",
    "",
])
def test_normalize_bullets_is_idempotent(raw):
    once = normalize_bullets(raw)
    assert normalize_bullets(once) == once


def test_normalize_bullets_replaces_leading_glyphs_only():
    text = "- 첫째\n  • 둘째\n가-나 사이의 하이픈\n점수 * 곱하기"
    assert normalize_bullets(text) == f"{BULLET} 첫째\n{BULLET} 둘째\n가-나 사이의 하이픈\n점수 * 곱하기"


def test_split_sections_assigns_six_slots(sample_feedback):
    sections = split_sections(normalize_bullets(sample_feedback))

    assert sections.summary.startswith(f"{BULLET} 학생 번역은")
    assert sections.good.startswith(f"{BULLET} 어휘를")
    assert "최우선 과제" in sections.bad
    assert sections.recommend.startswith(f'{BULLET} "경제 회복"')
    assert "접속사" in sections.learn
    assert sections.example.startswith(f"{BULLET} 중요 표현:")


def test_split_sections_strips_repeated_headings(sample_feedback):
    sections = split_sections(normalize_bullets(sample_feedback))
    assert not sections.summary.startswith("종합 평가")
    assert not sections.good.startswith("좋은 점")
    assert not sections.example.startswith("주요 표현/예문")


@pytest.mark.parametrize("text", [
    "",
    "아무 구조도 없는 피드백",
    "1. 하나뿐인 섹션",
    "1) 가\n2) 나\n3) 다\n4) 라\n5) 마\n6) 바\n7) 사",
    "3- 중간부터 시작\n4- 다음",
])
def test_split_sections_always_has_six_string_slots(text):
    sections = split_sections(text)
    data = sections.to_dict()
    assert tuple(data) == SECTION_KEYS
    assert all(isinstance(value, str) for value in data.values())


def test_text_without_markers_falls_back_to_summary():
    text = "전반적으로 잘 번역했습니다.\n다만 어순을 다듬으면 좋겠습니다."
    assert split_sections(text) == SectionSet(summary=text)


def test_dominant_first_section_falls_back_to_summary():
    text = "1. " + "아주 긴 종합 평가 문장입니다. " * 40 + "\n2. 짧음\n3. 짧음\n4. 짧음\n5. 짧음\n6. 짧음"
    sections = split_sections(text)
    assert sections.summary == text
    assert sections.good == sections.example == ""


def test_missing_sections_are_empty_strings():
    text = "1. 종합 평가\n‧ 좋음\n2. 좋은 점\n‧ 어휘 선택\n3. 아쉬운 점\n‧ 어순"
    sections = split_sections(text)
    assert sections.bad == "‧ 어순"
    assert sections.recommend == sections.learn == sections.example == ""


def test_markers_must_start_a_line():
    text = "번역 점수는 1. 좋음 2. 보통 정도입니다."
    assert split_sections(text) == SectionSet(summary=text)


@pytest.mark.parametrize("summary,expected", [
    ("전달력 우수 (8.5/10점)", 85),
    ("총점 92/100", 92),
    ("9점 수준의 번역", 90),
    ("점수 없음", 0),
    ("150/100점", 150),
    ("7/12", 58),
    ("8.5 / 10", 85),
])
def test_extract_score(summary, expected):
    assert extract_score(summary) == expected


def test_ratio_takes_precedence_over_points():
    assert extract_score("9점이지만 최종 8/10") == 80


def test_zero_denominator_falls_through_to_points():
    assert extract_score("5/0, 대략 7점") == 70


def test_score_from_feedback(sample_feedback):
    assert score_from_feedback(sample_feedback) == 85


def test_score_only_reads_summary():
    text = "1. 종합 평가\n‧ 무난함\n2. 좋은 점\n‧ 점수 9/10 아님\n3. 아쉬운 점\n‧ 없음"
    assert score_from_feedback(text) == 0


def test_quote_phrases_deduplicated_in_order(sample_feedback):
    parsed = parse_feedback(sample_feedback)
    assert parsed.phrases == ("경제 회복", "经济复苏", "최우선 과제", "重要任务")


def test_example_section_quotes_are_not_collected():
    sections = SectionSet(summary='‧ "가"', example='‧ "나"')
    assert collect_quote_phrases(sections) == ["가"]


def test_split_bullet_lines():
    text = f"도입 문장\n{BULLET} 첫째\n{BULLET} 둘째"
    assert split_bullet_lines(text) == [
        ("paragraph", "도입 문장"),
        ("bullet", "첫째"),
        ("bullet", "둘째"),
    ]


def test_split_quote_runs_marks_known_phrases_clickable():
    runs = split_quote_runs('"경제 회복"은 "회복"보다 낫다', ["경제 회복"])
    assert runs == [
        {"type": "quote", "text": "경제 회복", "clickable": True},
        {"type": "text", "text": "은 "},
        {"type": "quote", "text": "회복", "clickable": False},
        {"type": "text", "text": "보다 낫다"},
    ]


def test_learn_markers_become_subheadings():
    text = "언어별 특성 고려: 어순 차이\n문장 분할 및 재조합 연습: 긴 문장"
    formatted = format_section_text(text, "learn")
    assert formatted.startswith("**언어별 특성 고려:**")
    assert "**문장 분할 및 재조합 연습:**" in formatted


def test_parse_feedback_is_memoized(sample_feedback):
    assert parse_feedback(sample_feedback) is parse_feedback(sample_feedback)


def test_parse_feedback_handles_none():
    parsed = parse_feedback(None)
    assert parsed.score == 0
    assert parsed.sections == SectionSet()


def test_extract_quoted_phrases():
    assert extract_quoted_phrases('앞 "가" 중간 "나다" 끝') == ["가", "나다"]


def test_bullet_keeps_following_lines_and_blanks_are_dropped():
    text = f"\n\n{BULLET} 가\n\n문단\n\n{BULLET} 나"
    assert split_bullet_lines(text) == [("bullet", "가\n\n문단"), ("bullet", "나")]


@pytest.mark.parametrize("body,key", [
    ("**좋은 점** 항목: ‧ 가", "good"),
    ("좋은 점/분석\n‧ 가", "good"),
    ("추천 표현：\n‧ 가", "recommend"),
    ("  주요 표현/예문\n‧ 가", "example"),
])
def test_strip_section_heading(body, key):
    assert strip_section_heading(body, key) == "‧ 가"


def test_strip_section_heading_only_at_start():
    assert strip_section_heading("‧ 좋은 점: 어휘", "good") == "‧ 좋은 점: 어휘"
