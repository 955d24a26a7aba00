#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
로또 유틸리티 함수들
- 전역 랜덤 생성기
- 게임 종류별 설정 (loto6 / loto7)
- 티켓 텍스트 변환
"""

from __future__ import annotations
import numpy as np

# 전역 랜덤 생성기
_rng = np.random.default_rng()

# 게임 종류 -> (최대 번호, 한 줄당 번호 개수)
GAME_CONFIGS: dict[str, tuple[int, int]] = {
    "loto6": (43, 6),
    "loto7": (37, 7),
}


def game_config(game_type: str) -> tuple[int, int]:
    """게임 종류의 (max, count) 반환"""
    try:
        return GAME_CONFIGS[game_type.lower()]
    except KeyError as exc:
        raise ValueError(f"알 수 없는 게임 종류입니다: '{game_type}'") from exc


def validate_domain(max_number: int, count: int) -> None:
    """번호 범위 불변식 검사: max >= 1, 1 <= count <= max"""
    if max_number < 1:
        raise ValueError(f"최대 번호는 1 이상이어야 합니다: {max_number}")
    if count < 1 or count > max_number:
        raise ValueError(f"번호 개수는 1~{max_number} 범위여야 합니다: {count}")


def ticket_to_text(ticket: list[int]) -> str:
    """
    티켓 한 줄을 표시용 텍스트로 변환

    예: [3, 11, 20] -> "03 , 11 , 20"
    """
    return " , ".join(f"{n:02d}" for n in ticket)


def tickets_to_text(tickets: list[list[int]]) -> str:
    """여러 티켓을 줄 단위 텍스트로 변환"""
    return "\n".join(ticket_to_text(t) for t in tickets)


def get_rng():
    """전역 랜덤 생성기 반환"""
    return _rng
