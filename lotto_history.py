#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
생성된 티켓 CSV 처리 모듈
- 티켓 -> DataFrame (draw, n1..nk)
- CSV 저장
"""

from __future__ import annotations
import pandas as pd


def ticket_columns(picks: int) -> list[str]:
    """CSV 컬럼 이름: draw, n1, n2, ..."""
    return ["draw"] + [f"n{i}" for i in range(1, picks + 1)]


def tickets_to_frame(tickets: list[list[int]], picks: int) -> pd.DataFrame:
    """티켓 리스트를 DataFrame 으로 변환 (draw 는 1부터)"""
    rows = []
    for i, t in enumerate(tickets, start=1):
        if len(t) != picks:
            raise ValueError(f"각 티켓은 정확히 {picks}개 숫자여야 합니다: {t}")
        rows.append([i] + [int(v) for v in t])
    return pd.DataFrame(rows, columns=ticket_columns(picks))


def save_tickets_csv(path: str, tickets: list[list[int]], picks: int) -> pd.DataFrame:
    df = tickets_to_frame(tickets, picks)
    df.to_csv(path, index=False)
    return df
