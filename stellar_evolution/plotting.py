# plotting.py — 赫罗图 / 演化轨迹绘制（输出 base64 PNG）

import base64
import logging
import math
import os
from io import BytesIO

import matplotlib
matplotlib.use("Agg")

import matplotlib.pyplot as plt
import matplotlib.lines as mlines
import matplotlib.ticker as mticker
from matplotlib import font_manager as fm

from .data import MAIN_SEQUENCE, STAGE_CN, STAGE_COLORS, STAGES, STAGE_LUM_RANGE, STAGE_TEMP_RANGE

logger = logging.getLogger(__name__)

BG = "#0f0f1a"
FONT_PATHS = ["static/fonts/NotoSansSC-Regular.ttf", "static/fonts/NotoSansSC-Regular.otf"]

# 温度轴从左到右递减
TEMP_DOMAIN = (STAGE_TEMP_RANGE[1], STAGE_TEMP_RANGE[0])
HR_LUM_DOMAIN = STAGE_LUM_RANGE
TRACK_LUM_DOMAIN = (1e-4, 1e4)
RADIUS_RANGE = (4, 16)


# ========== 字体加载（支持 ttf / otf） ==========
def setup_fonts(paths=FONT_PATHS):
    """注册中文字体，返回使用的字体路径；找不到时返回 None"""
    font_path = next((p for p in paths if os.path.exists(p)), None)
    if font_path is None:
        logger.warning("未找到字体文件，中文可能无法显示")
        return None
    try:
        fm.fontManager.addfont(font_path)
    except (OSError, RuntimeError) as e:
        logger.warning("字体注册失败：%s", e)
        return None
    plt.rcParams["font.family"] = "Noto Sans SC"
    plt.rcParams["axes.unicode_minus"] = False
    logger.info("字体加载成功：%s", font_path)
    return font_path


def stage_label(stage, lang="zh"):
    return STAGE_CN.get(stage, stage) if lang.startswith("zh") else stage


def mass_radius_scale(masses, out_range=RADIUS_RANGE):
    """按质量平方根映射点半径（像素）"""
    masses = list(masses)
    lo, hi = out_range
    if not masses:
        return lambda m: (lo + hi) / 2
    m_min, m_max = min(masses), max(masses)
    if m_max == m_min:
        return lambda m: (lo + hi) / 2
    s_min, s_max = math.sqrt(m_min), math.sqrt(m_max)
    return lambda m: lo + (math.sqrt(m) - s_min) / (s_max - s_min) * (hi - lo)


def _new_axes(figsize, lum_domain, lang):
    fig, ax = plt.subplots(figsize=figsize, facecolor=BG, dpi=110)
    ax.set_facecolor(BG)
    ax.set_yscale("log")
    ax.set_xlim(*TEMP_DOMAIN)
    ax.set_ylim(*lum_domain)
    ax.xaxis.set_major_formatter(mticker.FuncFormatter(lambda v, _: f"{v / 1000:g}K"))
    ax.set_xlabel("表面温度 (K)" if lang.startswith("zh") else "Surface Temperature (K)", color="white")
    ax.set_ylabel("光度（对数）[L☉]" if lang.startswith("zh") else "Luminosity (log scale) [L☉]", color="white")
    ax.grid(True, which="both", ls=":", alpha=0.2)
    ax.tick_params(colors="white")
    return fig, ax


def _to_base64(fig):
    buf = BytesIO()
    fig.tight_layout()
    fig.savefig(buf, format="png", dpi=140, bbox_inches="tight", facecolor=fig.get_facecolor())
    buf.seek(0)
    plt.close(fig)
    return base64.b64encode(buf.getvalue()).decode("utf-8")


def _legend(ax, stages, lang, title):
    handles = [
        mlines.Line2D([], [], marker="o", ls="", color=STAGE_COLORS[s.key], label=stage_label(s.key, lang))
        for s in STAGES if s.key in stages
    ]
    if handles:
        ax.legend(handles=handles, title=title, facecolor="#202020", edgecolor="white",
                  labelcolor="white", fontsize=9, title_fontsize=9)


# ========== 赫罗图 ==========
def plot_hr_catalog(samples, lang="zh"):
    fig, ax = _new_axes((10, 7.4), HR_LUM_DOMAIN, lang)
    radius = mass_radius_scale(s.mass for s in samples)

    if samples:
        ax.scatter(
            [s.temperature for s in samples],
            [s.luminosity for s in samples],
            s=[radius(s.mass) ** 2 for s in samples],
            c=[STAGE_COLORS[s.stage] for s in samples],
            alpha=0.75, edgecolors="white", linewidths=0.6, zorder=5,
        )

    ax.set_title("赫罗图（H–R 图）" if lang.startswith("zh") else "H–R Diagram", fontsize=15, color="white")
    _legend(ax, {s.stage for s in samples}, lang, "演化阶段" if lang.startswith("zh") else "Stage")
    return _to_base64(fig)


# ========== 演化轨迹 ==========
def _draw_track(ax, track):
    ax.plot([p.temperature for p in track], [p.luminosity for p in track],
            color=STAGE_COLORS[MAIN_SEQUENCE], linewidth=2.5, alpha=0.4)
    marks = track[::6]
    ax.scatter([p.temperature for p in marks], [p.luminosity for p in marks],
               s=26, c=[STAGE_COLORS[p.stage] for p in marks],
               edgecolors="white", linewidths=1.2, zorder=5)
    first = track[0]
    ax.annotate(f"{first.mass:.1f} M☉", (first.temperature, first.luminosity),
                textcoords="offset points", xytext=(6, 6), color="white", fontsize=8)


def plot_tracks(tracks, lang="zh"):
    """tracks: {mass: [EvolutionTrackPoint, ...]}"""
    fig, ax = _new_axes((10, 6.6), TRACK_LUM_DOMAIN, lang)
    stages = set()
    for track in tracks.values():
        _draw_track(ax, track)
        stages.update(p.stage for p in track)
    ax.set_title("演化轨迹" if lang.startswith("zh") else "Evolutionary Tracks", fontsize=15, color="white")
    _legend(ax, stages, lang, "演化阶段" if lang.startswith("zh") else "Stage")
    return _to_base64(fig)


def plot_lifetime(track, point, lang="zh"):
    """单条轨迹 + 当前年龄对应的点"""
    fig, ax = _new_axes((7, 5), TRACK_LUM_DOMAIN, lang)
    _draw_track(ax, track)
    ax.scatter([point.temperature], [point.luminosity], s=120, c="red",
               edgecolors="white", linewidths=1.5, zorder=6)
    ax.set_title(f"{point.age:.0f} Myr · {stage_label(point.stage, lang)}", color="white")
    return _to_base64(fig)
