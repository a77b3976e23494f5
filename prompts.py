"""Prompt builders for feedback, problem generation, translation and insights.

The feedback prompt pins the six-section format that feedback_parser and
example_blocks read back; change the two together.
"""
from models import LANGUAGE_PAIRS, DEFAULT_GENERATED_DIFFICULTY


def language_names(language_pair: str):
    return LANGUAGE_PAIRS.get(language_pair, LANGUAGE_PAIRS["한-중"])


def build_feedback_prompt(source_language: str, language_pair: str, original_text: str,
                          user_translation: str, ai_translation: str) -> str:
    return f"""
당신은 숙련된 번역가입니다. 학생의 번역에 대해 구체적인 피드백을 아래 6개 항목으로 나눠서 작성해 주세요.

[CRITICAL 형식 규칙 - 절대 변경 금지]
- 각 항목은 정확히 "1. 종합 평가", "2. 좋은 점", "3. 아쉬운 점", "4. 추천 표현/개선", "5. 학습 제안", "6. 주요 표현/예문" 형식으로 시작
- 번호와 제목 사이에 점(.) 하나만 사용, 다른 기호나 별표(**) 절대 사용 금지
- 각 항목의 내용은 반드시 ‧ 기호로 시작하는 줄로 구성
- 각 ‧ 줄은 독립된 줄바꿈으로 구분
- "1. 종합 평가"는 피드백에 대한 전반적인 내용과 학생 격려, 10점 만점 점수(예: 8.5/10) 포함
- "2. 좋은 점"은 어휘 선택, 문맥 표현, 문법 등 전반적인 자연스러움에 대해 평가
- "3. 아쉬운 점"은 오역, 번역 부정확, 문맥 불일치 등 번역 오류에 대해 평가
- "4. 추천 표현/개선"은 번역 언어 표현 개선 제안 포함
- "5. 학습 제안"은 "3. 아쉬운 점"에 기반하여 학습에 도움이 될 방법 제안
- 인용하는 표현은 반드시 큰따옴표("")로 감쌀 것
- "6. 주요 표현/예문"에서는 반드시 아래 형식 준수:
  * ‧ 중요 표현: 원문 표현 → 번역 표현
  * ‧ 원문 예문 1: 원문 언어 예문
  * ‧ 예문 번역 1: 번역 언어 번역
  * ‧ 원문 예문 2: 원문 언어 예문
  * ‧ 예문 번역 2: 번역 언어 번역
  * (예문은 최소 2개, 최대 3개)

[출력 형식 예시]
1. 종합 평가
‧ 학생 번역은 원문의 의미를 잘 전달함
‧ 전달력이 좋고 자연스러움 유지 (8.5/10)

2. 좋은 점
‧ 어휘를 문맥에 맞게 잘 선택했어요
‧ "경제 통계" → "经济统计"를 올바르게 번역했어요

3. 아쉬운 점
‧ "혁신 기술"이 "기술 변화"로 번역되어 의미가 약화됨

4. 추천 표현/개선
‧ "경제 회복" → "经济复苏"가 더 자연스러움

5. 학습 제안
‧ 접속사 사용과 문장 분리 연습 권장

6. 주요 표현/예문
‧ 중요 표현: 경제 회복 → 经济复苏(jīng jì fù sū)
‧ 원문 예문 1: 정부는 경제 회복을 최우선 과제로 삼고 있다.
‧ 예문 번역 1: 政府将经济复苏作为首要任务。
‧ 원문 예문 2: 경제 회복 속도가 예상보다 빠르다.
‧ 예문 번역 2: 经济复苏的速度比预期要快。

[입력 데이터]
- 원문 언어: {source_language}
- 번역 언어: {language_pair}

원문:
{original_text}

학생 번역문:
{user_translation}

AI 번역문:
{ai_translation}

위 데이터를 참고하여 위 예시와 완전히 동일한 형식으로 피드백을 작성해 주세요."""


def build_problem_prompt(topic: str, difficulty: str, language_pair: str) -> str:
    source_lang, target_lang = language_names(language_pair)
    difficulty = difficulty or DEFAULT_GENERATED_DIFFICULTY
    pinyin_note = ", 병음" if language_pair == "한-중" else ""
    return f"""
당신은 {source_lang}-{target_lang} 번역 교육 전문가입니다. 주어진 주제와 난이도에 맞는 번역 연습 문제를 생성해주세요.

[요구사항]
- 주제: {topic}
- 난이도: {difficulty}
- 분야: {topic}과 관련된 분야
- {source_lang} 원문: 주제와 관련된 자연스러운 문장 (50-100자)
- 주요어휘: 3-5개의 핵심 단어와 {target_lang} 번역{pinyin_note}, 중요도 포함

[난이도별 요구사항]
- 상급: 복잡한 문장 구조, 전문 용어, 추상적 개념 포함
- 중급: 일반적인 문장 구조, 일상적이지만 약간 복잡한 내용
- 하급: 간단한 문장 구조, 기본적인 일상 표현

[출력 형식 - JSON]
{{
  "{source_lang}": "{source_lang} 원문",
  "난이도": "{difficulty}",
  "분야": "분야명",
  "주요어휘": [
    {{
      "korean": "한국어 단어",
      "chinese": "중국어 번역",
      "pinyin": "병음",
      "importance": "중요도 (상/중/하)"
    }}
  ]
}}

위 형식으로 정확한 JSON만 출력해주세요."""


def build_translation_prompt(text: str, language_pair: str) -> str:
    source_lang, target_lang = language_names(language_pair)
    return f"""
다음 {source_lang} 문장을 {target_lang}로 번역해주세요. 번역만 정확하게 제공하고 설명이나 추가 내용은 포함하지 마세요.

{source_lang}: {text}

{target_lang} 번역:"""


def _format_study_time(seconds: int) -> str:
    hours, minutes = seconds // 3600, (seconds % 3600) // 60
    return f"{hours}시간 {minutes}분" if hours else f"{minutes}분"


def build_insight_prompt(stats: dict, insight: str) -> str:
    ranking = "\n".join(
        f"- {item['content_type']}: 평균 {item['average_score']}점 ({item['record_count']}문제 완료)"
        for item in stats.get("content_type_ranking", [])
    )
    return f"""
사용자의 번역 학습 데이터를 분석해서 상세한 학습 인사이트를 생성해주세요:

기본 정보:
- 총 번역 문제 수: {stats['total_records']}개
- 평균 정확도: {stats['average_accuracy']}%
- 연속 학습일: {stats['streak_days']}일
- 총 학습 시간: {_format_study_time(stats['total_study_time'])}

문제 타입별 성과:
{ranking}

현재 인사이트: "{insight}"

위 데이터를 바탕으로 3-4문장의 구체적이고 실용적인 상세 조언을 작성해주세요.
개인별 맞춤형 학습 방향과 구체적인 개선 방법을 포함해주세요.
친근하고 격려하는 톤으로 작성해주세요.
"""
