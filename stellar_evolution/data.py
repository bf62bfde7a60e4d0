# data.py — 恒星演化阶段常量数据

from collections import namedtuple

# ========== 演化阶段 ==========
PRE_MAIN_SEQUENCE = "Pre-Main Sequence"
MAIN_SEQUENCE = "Main Sequence"
SUBGIANT = "Subgiant"
RED_GIANT = "Red Giant"
HORIZONTAL_BRANCH = "Horizontal Branch"
WHITE_DWARF = "White Dwarf"

Stage = namedtuple("Stage", ["key", "description", "color"])

STAGES = [
    Stage(PRE_MAIN_SEQUENCE, "Protostars contracting before stable hydrogen fusion.", "#88CCEE"),
    Stage(MAIN_SEQUENCE, "Stars stably fusing hydrogen in their cores.", "#44AA99"),
    Stage(SUBGIANT, "Hydrogen is exhausted; outer layers expand slightly.", "#117733"),
    Stage(RED_GIANT, "Outer layers balloon as shell burning dominates.", "#DDCC77"),
    Stage(HORIZONTAL_BRANCH, "Helium fusion stabilizes the core again.", "#CC6677"),
    Stage(WHITE_DWARF, "Degenerate remnant cooling over billions of years.", "#AA4499"),
]

STAGE_KEYS = [s.key for s in STAGES]
STAGE_COLORS = {s.key: s.color for s in STAGES}

STAGE_CN = {
    PRE_MAIN_SEQUENCE: "主序前星",
    MAIN_SEQUENCE: "主序星",
    SUBGIANT: "亚巨星",
    RED_GIANT: "红巨星",
    HORIZONTAL_BRANCH: "水平分支星",
    WHITE_DWARF: "白矮星",
}

# ========== 主序星分布 ==========
MAIN_SEQUENCE_TEMP = (5800, 1600)
MAIN_SEQUENCE_TEMP_RANGE = (3000, 15000)
MAIN_SEQUENCE_MASS_RANGE = (0.1, 25)
MAIN_SEQUENCE_LUM_RANGE = (0.01, 10 ** 4.2)
MAIN_SEQUENCE_AGE_RANGE = (100, 9000)
MAIN_SEQUENCE_METALLICITY = (0.0, 0.2)

# ========== 其他阶段分布（按生成顺序） ==========
StageParams = namedtuple(
    "StageParams",
    ["stage", "count", "temp_mean", "temp_sd", "lum_mean", "lum_sigma", "mass_range", "age_range"],
)

STAGE_PARAMS = [
    StageParams(PRE_MAIN_SEQUENCE, 120, 4500, 800, 3.5, 0.6, (0.2, 2.5), (1, 50)),
    StageParams(SUBGIANT, 90, 5200, 700, 20, 0.5, (0.8, 2.5), (900, 5000)),
    StageParams(RED_GIANT, 110, 4000, 500, 200, 0.6, (0.8, 8), (1000, 9000)),
    StageParams(HORIZONTAL_BRANCH, 75, 6000, 900, 60, 0.3, (0.6, 2), (2500, 12000)),
    StageParams(WHITE_DWARF, 80, 13000, 2500, 0.03, 0.4, (0.45, 1.2), (3000, 12000)),
]

STAGE_TEMP_RANGE = (2500, 40000)
STAGE_LUM_RANGE = (1e-4, 10 ** 4.5)
STAGE_METALLICITY = (-0.1, 0.3)

METALLICITY_RANGE = (-1.5, 0.5)

# ========== 演化轨迹 ==========
TRACK_MASSES = [0.5, 1.0, 2.0, 5.0, 15.0]
TRACK_AGE_RANGE = (0.01, 13000)
TRACK_POINTS = 120
UNIVERSE_AGE = 13000
WHITE_DWARF_FLOOR = 500
DURATION_EPSILON = 1e-3

# ========== 术语表 ==========
GLOSSARY = {
    "Spectral Type": "Classification of stars by temperature and spectral lines (OBAFGKM).",
    "Luminosity": "Total energy output per unit time compared to the Sun.",
    "Metallicity": "Fraction of a star's mass made of elements heavier than helium.",
    "Isochrone": "Curve connecting stars of equal age on the HR diagram.",
    "Main Sequence Turnoff": "Temperature where stars leave the main sequence, revealing age.",
    "Hertzsprung–Russell Diagram": "Plot of stellar luminosity versus temperature showcasing evolution.",
    "Helium Flash": "Rapid ignition of helium in the cores of low-mass stars on the red giant branch.",
    "Planetary Nebula": "Glowing shell of ionized gas ejected by asymptotic giant branch stars.",
}
