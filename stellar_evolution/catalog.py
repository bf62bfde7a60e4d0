# catalog.py — 合成恒星星表生成与筛选

import logging
import math
from dataclasses import dataclass, field
from typing import FrozenSet, List, Union

import numpy as np

from .data import (
    MAIN_SEQUENCE,
    MAIN_SEQUENCE_AGE_RANGE,
    MAIN_SEQUENCE_LUM_RANGE,
    MAIN_SEQUENCE_MASS_RANGE,
    MAIN_SEQUENCE_METALLICITY,
    MAIN_SEQUENCE_TEMP,
    MAIN_SEQUENCE_TEMP_RANGE,
    METALLICITY_RANGE,
    STAGE_KEYS,
    STAGE_LUM_RANGE,
    STAGE_METALLICITY,
    STAGE_PARAMS,
    STAGE_TEMP_RANGE,
)

logger = logging.getLogger(__name__)

DEFAULT_SEED = 42
DEFAULT_SAMPLE_COUNT = 600


@dataclass(frozen=True)
class StarSample:
    id: Union[int, str]
    stage: str
    temperature: float
    luminosity: float
    mass: float
    age: float
    metallicity: float


def clip(value, low, high):
    """先抽样再截断到 [low, high]"""
    return float(np.clip(value, low, high))


def _main_sequence_star(rng, index):
    temp = clip(rng.normal(*MAIN_SEQUENCE_TEMP), *MAIN_SEQUENCE_TEMP_RANGE)
    mass = clip((temp / MAIN_SEQUENCE_TEMP[0]) ** 1.5, *MAIN_SEQUENCE_MASS_RANGE)
    lum = clip(mass ** 3.5 + rng.normal(0, 0.3), *MAIN_SEQUENCE_LUM_RANGE)
    return StarSample(
        id=index,
        stage=MAIN_SEQUENCE,
        temperature=temp,
        luminosity=lum,
        mass=mass,
        age=float(rng.uniform(*MAIN_SEQUENCE_AGE_RANGE)),
        metallicity=clip(rng.normal(*MAIN_SEQUENCE_METALLICITY), *METALLICITY_RANGE),
    )


def _stage_star(rng, params, index):
    return StarSample(
        id=f"s-{params.stage}-{index}",
        stage=params.stage,
        temperature=clip(rng.normal(params.temp_mean, params.temp_sd), *STAGE_TEMP_RANGE),
        luminosity=clip(rng.lognormal(math.log(params.lum_mean), params.lum_sigma), *STAGE_LUM_RANGE),
        mass=float(rng.uniform(*params.mass_range)),
        age=float(rng.uniform(*params.age_range)),
        metallicity=clip(rng.normal(*STAGE_METALLICITY), *METALLICITY_RANGE),
    )


def generate_catalog(sample_count=DEFAULT_SAMPLE_COUNT, rng=None, seed=DEFAULT_SEED) -> List[StarSample]:
    """
    生成合成星表：
    - 先生成 sample_count 颗主序星
    - 再按 STAGE_PARAMS 的顺序逐个阶段生成固定数量的恒星
    所有抽样共用同一个随机数生成器，同一 seed 结果完全一致。
    """
    if isinstance(sample_count, bool) or not isinstance(sample_count, (int, np.integer)):
        raise ValueError(f"sample_count must be an integer, got {sample_count!r}")
    if sample_count <= 0:
        raise ValueError(f"sample_count must be positive, got {sample_count}")
    if rng is None:
        rng = np.random.default_rng(seed)

    data = [_main_sequence_star(rng, i) for i in range(sample_count)]
    for params in STAGE_PARAMS:
        data.extend(_stage_star(rng, params, i) for i in range(params.count))

    logger.debug("Generated catalog with %d stars (%d main sequence)", len(data), sample_count)
    return data


def stage_counts(samples):
    """按阶段表顺序统计数量（包含数量为 0 的阶段）"""
    counts = {key: 0 for key in STAGE_KEYS}
    for s in samples:
        counts[s.stage] += 1
    return counts


# ========== 筛选 ==========
@dataclass(frozen=True)
class StarFilter:
    stages: FrozenSet[str] = field(default_factory=lambda: frozenset(STAGE_KEYS))
    temp_max: float = math.inf
    lum_max: float = math.inf  # log10(L) 上限
    mass_max: float = math.inf

    def __post_init__(self):
        unknown = set(self.stages) - set(STAGE_KEYS)
        if unknown:
            raise ValueError(f"Unknown stage(s): {sorted(unknown)}")
        object.__setattr__(self, "stages", frozenset(self.stages))

    def matches(self, star):
        return (
            star.stage in self.stages
            and star.temperature <= self.temp_max
            and math.log10(star.luminosity) <= self.lum_max
            and star.mass <= self.mass_max
        )


def filter_catalog(catalog, star_filter=None):
    """返回满足条件的子序列，保持原有顺序"""
    if star_filter is None:
        star_filter = StarFilter()
    return [s for s in catalog if star_filter.matches(s)]
