#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
오라클 모드 컨텍스트 (점술 입력값)
- 사용자 입력: 생년월일, 혈액형, 오라 색
- 파생값: 별자리, 띠, 육요(六曜), 달의 위상, 요일
- 시스템값: 관측자 공명(엔터 입력 타이밍), 엔트로피
"""

from __future__ import annotations
import sys
import time
from dataclasses import dataclass
from datetime import date, datetime, timezone
from enum import Enum
from typing import Callable, Optional

from lotto_utils import validate_domain

MASK64 = (1 << 64) - 1
FINGERPRINT_SALT = 0xCAFEBABE


# ------------------ 사용자 입력 ------------------
class BloodType(str, Enum):
    A = "A"
    B = "B"
    O = "O"
    AB = "AB"


class AuraColor(str, Enum):
    RED = "red"
    BLUE = "blue"
    GREEN = "green"
    GOLD = "gold"
    PURPLE = "purple"
    WHITE = "white"
    BLACK = "black"


# ------------------ 파생값 ------------------
class WesternZodiac(str, Enum):
    ARIES = "Aries"
    TAURUS = "Taurus"
    GEMINI = "Gemini"
    CANCER = "Cancer"
    LEO = "Leo"
    VIRGO = "Virgo"
    LIBRA = "Libra"
    SCORPIO = "Scorpio"
    SAGITTARIUS = "Sagittarius"
    CAPRICORN = "Capricorn"
    AQUARIUS = "Aquarius"
    PISCES = "Pisces"


class ChineseZodiac(str, Enum):
    RAT = "Rat"
    OX = "Ox"
    TIGER = "Tiger"
    RABBIT = "Rabbit"
    DRAGON = "Dragon"
    SNAKE = "Snake"
    HORSE = "Horse"
    GOAT = "Goat"
    MONKEY = "Monkey"
    ROOSTER = "Rooster"
    DOG = "Dog"
    PIG = "Pig"


class MoonPhase(str, Enum):
    NEW = "New"
    WAXING = "Waxing"
    FULL = "Full"
    WANING = "Waning"


class Rokuyo(str, Enum):
    TAIAN = "Taian"
    BUTSUMETSU = "Butsumetsu"
    TOMOBIKI = "Tomobiki"
    SENKATSU = "Senkatsu"
    SENBU = "Senbu"
    SHAKKU = "Shakku"


class Weekday(str, Enum):
    MON = "Mon"
    TUE = "Tue"
    WED = "Wed"
    THU = "Thu"
    FRI = "Fri"
    SAT = "Sat"
    SUN = "Sun"


# 월 -> (경계일, 경계일 이전 별자리, 경계일 이후 별자리)
_ZODIAC_CUSPS: dict[int, tuple[int, WesternZodiac, WesternZodiac]] = {
    1: (20, WesternZodiac.CAPRICORN, WesternZodiac.AQUARIUS),
    2: (19, WesternZodiac.AQUARIUS, WesternZodiac.PISCES),
    3: (21, WesternZodiac.PISCES, WesternZodiac.ARIES),
    4: (20, WesternZodiac.ARIES, WesternZodiac.TAURUS),
    5: (21, WesternZodiac.TAURUS, WesternZodiac.GEMINI),
    6: (22, WesternZodiac.GEMINI, WesternZodiac.CANCER),
    7: (23, WesternZodiac.CANCER, WesternZodiac.LEO),
    8: (23, WesternZodiac.LEO, WesternZodiac.VIRGO),
    9: (23, WesternZodiac.VIRGO, WesternZodiac.LIBRA),
    10: (24, WesternZodiac.LIBRA, WesternZodiac.SCORPIO),
    11: (23, WesternZodiac.SCORPIO, WesternZodiac.SAGITTARIUS),
    12: (22, WesternZodiac.SAGITTARIUS, WesternZodiac.CAPRICORN),
}

_ANIMALS = list(ChineseZodiac)
_ROKUYO = list(Rokuyo)
_WEEKDAYS = list(Weekday)


def derive_western_zodiac(d: date) -> WesternZodiac:
    """생년월일 -> 서양 별자리"""
    cusp, before, after = _ZODIAC_CUSPS[d.month]
    return after if d.day >= cusp else before


def derive_chinese_zodiac(year: int) -> ChineseZodiac:
    """출생 연도 -> 띠 (서기 4년 = 쥐띠)"""
    return _ANIMALS[(year - 4) % 12]


def derive_rokuyo(now: datetime) -> Rokuyo:
    """날짜 -> 육요 (간이 계산: 일자 % 6)"""
    return _ROKUYO[now.day % 6]


def derive_moon_phase(now: datetime) -> MoonPhase:
    """날짜 -> 달의 위상 (간이 계산: 약 30일 주기)"""
    day = now.day % 30
    if day < 7:
        return MoonPhase.NEW
    if day < 15:
        return MoonPhase.WAXING
    if day < 22:
        return MoonPhase.FULL
    return MoonPhase.WANING


def derive_weekday(now: datetime) -> Weekday:
    return _WEEKDAYS[now.weekday()]


# ------------------ 관측자 (엔트로피 제공자) ------------------
Observer = Callable[[], int]


def console_observer(stdin=None, stderr=None) -> int:
    """
    콘솔에서 엔터 입력을 기다리고, 대기 시간(ns)과 현재 시각(ns)을 XOR 해서 반환

    컨텍스트 생성 시 한 번만 호출된다.
    """
    stdin = stdin if stdin is not None else sys.stdin
    stderr = stderr if stderr is not None else sys.stderr

    stderr.write("🌌 Awaiting Observer Intervention...\n")
    stderr.write("   Press [ENTER] when you feel the cosmic alignment: ")
    stderr.flush()

    start = time.perf_counter_ns()
    stdin.readline()
    elapsed = time.perf_counter_ns() - start
    resonance = elapsed ^ time.time_ns()

    stderr.write(f"⚡ Quantum state collapsed at {elapsed}ns. Resonance: {resonance:x}\n")
    return resonance


def clock_observer() -> int:
    """입력 대기 없이 시계만으로 공명값 생성"""
    return time.perf_counter_ns() ^ time.time_ns()


# ------------------ 컨텍스트 ------------------
@dataclass(frozen=True)
class OracleContext:
    """
    한 번의 점술 실행 동안 모든 규칙이 읽는 읽기 전용 값 묶음

    Attributes:
        max: 최대 번호 (번호 범위 1..max)
        count: 티켓당 번호 개수
        now_utc: 현재 시각 (UTC)
        birth_date / blood_type / aura_color: 선택 입력
        entropy: 64비트 프로세스 엔트로피 (혼돈 규칙의 시드)
        observer_resonance: 관측자 공명값
        western_zodiac / chinese_zodiac: 생년월일이 있을 때만 값이 있음
        rokuyo / moon_phase / weekday: 현재 시각에서 파생
    """

    max: int
    count: int
    now_utc: datetime
    entropy: int
    rokuyo: Rokuyo
    moon_phase: MoonPhase
    weekday: Weekday
    birth_date: Optional[date] = None
    blood_type: Optional[BloodType] = None
    aura_color: Optional[AuraColor] = None
    observer_resonance: Optional[int] = None
    western_zodiac: Optional[WesternZodiac] = None
    chinese_zodiac: Optional[ChineseZodiac] = None

    @classmethod
    def from_args(
        cls,
        max: int,
        count: int,
        birth_date: date | None = None,
        blood_type: BloodType | None = None,
        aura_color: AuraColor | None = None,
        *,
        now: datetime | None = None,
        observer: Observer | None = None,
    ) -> "OracleContext":
        """
        입력값으로 컨텍스트를 만들고 파생값을 한 번에 계산

        observer 를 생략하면 콘솔에서 엔터 입력을 기다린다.
        테스트에서는 고정값을 돌려주는 함수를 넘기면 된다.
        """
        validate_domain(max, count)
        now = now if now is not None else datetime.now(timezone.utc)
        observer = observer if observer is not None else console_observer

        resonance = int(observer())
        entropy = (FINGERPRINT_SALT ^ resonance) & MASK64

        return cls(
            max=max,
            count=count,
            now_utc=now,
            entropy=entropy,
            rokuyo=derive_rokuyo(now),
            moon_phase=derive_moon_phase(now),
            weekday=derive_weekday(now),
            birth_date=birth_date,
            blood_type=BloodType(blood_type) if blood_type is not None else None,
            aura_color=AuraColor(aura_color) if aura_color is not None else None,
            observer_resonance=resonance,
            western_zodiac=derive_western_zodiac(birth_date) if birth_date else None,
            chinese_zodiac=derive_chinese_zodiac(birth_date.year) if birth_date else None,
        )
