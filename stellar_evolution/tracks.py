# tracks.py — 按质量计算的参数化演化轨迹与阶段寿命

import math
from collections import namedtuple
from dataclasses import dataclass
from enum import Enum

import numpy as np

from .data import (
    DURATION_EPSILON,
    MAIN_SEQUENCE,
    RED_GIANT,
    TRACK_AGE_RANGE,
    TRACK_POINTS,
    UNIVERSE_AGE,
    WHITE_DWARF,
    WHITE_DWARF_FLOOR,
)


class Phase(Enum):
    MAIN_SEQUENCE = MAIN_SEQUENCE
    RED_GIANT = RED_GIANT
    WHITE_DWARF = WHITE_DWARF


@dataclass(frozen=True)
class EvolutionTrackPoint:
    age: float
    temperature: float
    luminosity: float
    stage: str
    mass: float


PhaseDurations = namedtuple("PhaseDurations", ["main_sequence", "red_giant", "white_dwarf"])
StageDurations = namedtuple("StageDurations", ["mass", "pre_main", "main_sequence", "red_giant", "white_dwarf"])


def _check_mass(mass):
    if isinstance(mass, bool) or not isinstance(mass, (int, float, np.number)):
        raise ValueError(f"mass must be a number, got {mass!r}")
    if not math.isfinite(mass) or mass <= 0:
        raise ValueError(f"mass must be positive and finite, got {mass}")


def phase_durations(mass):
    """主序 / 红巨星 / 白矮星 三段时长（Myr），白矮星段可能为负"""
    _check_mass(mass)
    try:
        main_sequence = 10000 * mass ** -2.5
    except OverflowError:
        main_sequence = math.inf
    red_giant = main_sequence * 0.1
    white_dwarf = UNIVERSE_AGE - main_sequence - red_giant
    if not math.isfinite(white_dwarf):
        raise ValueError(f"mass too small for phase durations: {mass}")
    return PhaseDurations(main_sequence, red_giant, white_dwarf)


def phase_at(age, durations):
    if age <= durations.main_sequence:
        return Phase.MAIN_SEQUENCE
    if age <= durations.main_sequence + durations.red_giant:
        return Phase.RED_GIANT
    return Phase.WHITE_DWARF


# ========== 各阶段公式：返回 (温度, 光度) ==========
def _main_sequence(age, mass, d):
    ratio = age / d.main_sequence
    temperature = (1.1 - 0.15 * ratio) * 5800 * mass ** 0.08
    luminosity = mass ** 3.5 * (0.9 + 0.2 * ratio)
    return temperature, luminosity


def _red_giant(age, mass, d):
    ratio = (age - d.main_sequence) / d.red_giant
    temperature = 5800 * mass ** -0.2 * (0.45 + 0.05 * math.sin(ratio * math.pi))
    luminosity = mass ** 2.2 * (40 + 400 * ratio)
    return temperature, luminosity


def _white_dwarf(age, mass, d):
    # 极低质量时白矮星段时长为负，分母下限 1e-3
    ratio = min((age - d.main_sequence - d.red_giant) / max(d.white_dwarf, DURATION_EPSILON), 1)
    temperature = 15000 * (1 - 0.7 * ratio) * mass ** -0.1
    luminosity = 0.05 * (1 - 0.3 * ratio)
    return temperature, luminosity


PHASE_FORMULAS = {
    Phase.MAIN_SEQUENCE: _main_sequence,
    Phase.RED_GIANT: _red_giant,
    Phase.WHITE_DWARF: _white_dwarf,
}


def track_ages(point_count=TRACK_POINTS):
    if isinstance(point_count, bool) or not isinstance(point_count, (int, np.integer)):
        raise ValueError(f"point_count must be an integer, got {point_count!r}")
    if point_count <= 0:
        raise ValueError(f"point_count must be positive, got {point_count}")
    return np.linspace(*TRACK_AGE_RANGE, point_count)


def compute_track(mass, point_count=TRACK_POINTS):
    """
    计算给定质量的演化轨迹：
    年龄在 [0.01, 13000] Myr 上均匀取 point_count 个点，
    每个点按所处阶段套用对应公式，并标注阶段名称。
    """
    durations = phase_durations(mass)
    track = []
    for age in track_ages(point_count):
        age = float(age)
        phase = phase_at(age, durations)
        temperature, luminosity = PHASE_FORMULAS[phase](age, mass, durations)
        track.append(EvolutionTrackPoint(age, temperature, luminosity, phase.value, mass))
    return track


def point_at_age(track, age):
    """返回年龄最接近 age 的轨迹点（相同距离取靠前的点）"""
    if not track:
        raise ValueError("track is empty")
    return min(track, key=lambda p: abs(p.age - age))


def stage_durations(mass):
    """寿命表用的各阶段时长（Myr），白矮星阶段至少 500 Myr"""
    d = phase_durations(mass)
    return StageDurations(
        mass=mass,
        pre_main=10 + mass ** -1.3 * 5,
        main_sequence=d.main_sequence,
        red_giant=d.red_giant,
        white_dwarf=max(d.white_dwarf, WHITE_DWARF_FLOOR),
    )
