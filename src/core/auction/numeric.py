"""옵션 수치 파싱: 문자열 수치를 비교 가능한 숫자로 변환

옵션 값은 "150", "12%", "+3", "스매시 대미지(18레벨:180 % 증가)" 처럼
텍스트로 들어온다. 여기의 함수들은 절대 예외를 던지지 않는다.
"""

from __future__ import annotations

import re
from typing import Any, Optional

_NON_NUMERIC_RE = re.compile(r"[^0-9.\-]")
_LEADING_FLOAT_RE = re.compile(r"^[-+]?(?:\d+(?:\.\d*)?|\.\d+)")
_LEADING_INT_RE = re.compile(r"^\s*([-+]?\d+)")
REFORGE_LEVEL_RE = re.compile(r"\((\d+)레벨:")


def _leading_float(text: str) -> Optional[float]:
    match = _LEADING_FLOAT_RE.match(text)
    if not match:
        return None
    return float(match.group(0))


def parse_number(raw: Any) -> float:
    """범위 비교용 수치. 숫자/소수점/마이너스 외 문자 제거 후 파싱, 실패 시 0."""
    if raw is None or isinstance(raw, bool):
        return 0.0
    if isinstance(raw, (int, float)):
        return float(raw)
    value = _leading_float(_NON_NUMERIC_RE.sub("", str(raw)))
    return 0.0 if value is None else value


def parse_int(raw: Any) -> Optional[int]:
    """선행 정수 파싱 ("18레벨" → 18, "+3" → 3). 실패 시 None."""
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        return int(raw)
    match = _LEADING_INT_RE.match(str(raw))
    if not match:
        return None
    return int(match.group(1))


def parse_level(raw: Any) -> Optional[int]:
    """레벨/단계 수치. 값이 없거나 빈 문자열이면 0, 해석 불가 텍스트는 None."""
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return 0
    return parse_int(raw)


def parse_bound(raw: Any) -> Optional[float]:
    """필터 경계값. None/공백/숫자 아님 → None (미설정). "15%" → 15."""
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        return float(raw)
    text = str(raw).strip().replace("%", "")
    if not text:
        return None
    return _leading_float(text)


def parse_int_bound(raw: Any) -> Optional[int]:
    """정수 경계값 (랭크, 줄 수, 레벨). 해석 불가 → None."""
    if isinstance(raw, str) and not raw.strip():
        return None
    return parse_int(raw)


def pierce_level(value: Any, value2: Any) -> float:
    """피어싱 레벨 = 기본 레벨 + value2의 추가 레벨 ("+2" 형식)."""
    base = parse_int(value) or 0
    bonus = 0
    if value2:
        bonus = parse_int(str(value2).replace("+", "")) or 0
    return float(base + bonus)


def reforge_level(value: Any) -> Optional[int]:
    """세공 옵션 값에서 "(<N>레벨:" 레벨 추출. 없으면 None."""
    if not value:
        return None
    match = REFORGE_LEVEL_RE.search(str(value))
    if not match:
        return None
    return int(match.group(1))


def within(value: float, minimum: Optional[float], maximum: Optional[float]) -> bool:
    """양끝 포함 범위 검사. 미설정 경계는 제한 없음."""
    if minimum is not None and value < minimum:
        return False
    if maximum is not None and value > maximum:
        return False
    return True


def within_or_unknown(
    value: Optional[float], minimum: Optional[float], maximum: Optional[float]
) -> bool:
    """수치를 알 수 없으면 경계 검사를 통과시킨다."""
    if value is None:
        return True
    return within(value, minimum, maximum)


def normalize_query(query: Optional[str]) -> str:
    """부분 문자열 검색어 정규화: 앞뒤 공백 제거 + 소문자. 비면 ""."""
    if not query:
        return ""
    return str(query).strip().lower()
