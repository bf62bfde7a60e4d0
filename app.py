# app.py — 恒星演化可视化（赫罗图星表 / 演化轨迹 / 寿命探索）
import math
from datetime import datetime

from flask import Flask, Response, render_template, request, send_file

from stellar_evolution.catalog import StarFilter, filter_catalog, generate_catalog, stage_counts
from stellar_evolution.data import GLOSSARY, STAGE_COLORS, STAGE_KEYS, STAGES, TRACK_MASSES, UNIVERSE_AGE
from stellar_evolution.export import catalog_to_csv, generate_pdf
from stellar_evolution.plotting import plot_hr_catalog, plot_lifetime, plot_tracks, setup_fonts, stage_label
from stellar_evolution.tracks import compute_track, point_at_age, stage_durations

# ========== Flask app ==========
app = Flask(__name__)
app.config.from_mapping(
    SAMPLE_COUNT=600,
    RANDOM_SEED=42,
    TRACK_POINTS=120,
    DEFAULT_LANG="zh",
)
app.config.from_prefixed_env("STELLAR")

# ========== 字体加载 ==========
FONT_PATH = setup_fonts()

# ========== 星表（启动时生成一次） ==========
CATALOG = generate_catalog(app.config["SAMPLE_COUNT"], seed=app.config["RANDOM_SEED"])
app.logger.info("Catalog ready: %d stars (seed=%s)", len(CATALOG), app.config["RANDOM_SEED"])

# ========== 国际化 ==========
I18N = {
    "zh": {
        "title": "恒星演化探索",
        "hr": "赫罗图",
        "tracks": "演化轨迹",
        "lifetime": "寿命探索",
        "glossary": "术语表",
        "stages": "演化阶段",
        "temp_max": "最高温度 (K)",
        "lum_max": "最高光度 log(L/L☉)",
        "mass_max": "最大质量 (M☉)",
        "highlight": "阶段说明",
        "apply": "应用",
        "shown": "显示恒星数",
        "download_csv": "下载 CSV",
        "download_pdf": "下载 PDF 报告",
        "mass": "质量 (M☉)",
        "age": "年龄 (Myr)",
        "stage": "阶段",
        "temperature": "温度 (K)",
        "luminosity": "光度 (L☉)",
        "pre_main": "主序前 (Myr)",
        "main_sequence": "主序 (Myr)",
        "red_giant": "红巨星 (Myr)",
        "white_dwarf": "白矮星 (Myr)",
    },
    "en": {
        "title": "Stellar Evolution Explorer",
        "hr": "H–R Diagram",
        "tracks": "Evolutionary Tracks",
        "lifetime": "Lifetime Explorer",
        "glossary": "Glossary",
        "stages": "Stages",
        "temp_max": "Max temperature (K)",
        "lum_max": "Max luminosity log(L/L☉)",
        "mass_max": "Max mass (M☉)",
        "highlight": "Stage notes",
        "apply": "Apply",
        "shown": "Stars shown",
        "download_csv": "Download CSV",
        "download_pdf": "Download PDF report",
        "mass": "Mass (M☉)",
        "age": "Age (Myr)",
        "stage": "Stage",
        "temperature": "Temperature (K)",
        "luminosity": "Luminosity (L☉)",
        "pre_main": "Pre-Main (Myr)",
        "main_sequence": "Main Sequence (Myr)",
        "red_giant": "Red Giant (Myr)",
        "white_dwarf": "White Dwarf (Myr)",
    }
}

def t(key, lang="zh"):
    return I18N.get(lang, I18N["zh"]).get(key, key)

def current_lang():
    lang = request.args.get("lang", app.config["DEFAULT_LANG"])
    return lang if lang in I18N else "zh"

# ========== 请求参数解析 ==========
def float_arg(name, default):
    raw = request.args.get(name, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"Invalid number for '{name}': {raw!r}") from None
    if math.isnan(value):
        raise ValueError(f"Invalid number for '{name}': {raw!r}")
    return value

def filter_from_args():
    # 表单提交时带 filtered=1，此时未勾选任何阶段即为空选择
    stages = request.args.getlist("stage")
    if not stages and "filtered" not in request.args:
        stages = STAGE_KEYS
    return StarFilter(
        stages=stages,
        temp_max=float_arg("temp_max", math.inf),
        lum_max=float_arg("lum_max", math.inf),
        mass_max=float_arg("mass_max", math.inf),
    )

def track_mass(raw):
    try:
        mass = float(raw)
    except ValueError:
        raise ValueError(f"Invalid mass: {raw!r}") from None
    if mass not in TRACK_MASSES:
        raise ValueError(f"Mass must be one of {TRACK_MASSES}, got {mass}")
    return mass

def masses_from_args():
    """未选择任何质量时显示全部"""
    masses = []
    for raw in request.args.getlist("mass"):
        mass = track_mass(raw)
        if mass not in masses:
            masses.append(mass)
    return masses or list(TRACK_MASSES)

@app.errorhandler(ValueError)
def handle_value_error(e):
    app.logger.warning("Bad request %s: %s", request.full_path, e)
    return Response(str(e), status=400, mimetype="text/plain")

@app.context_processor
def inject_i18n():
    lang = current_lang()
    return {"t": lambda k: t(k, lang), "lang": lang, "stage_label": lambda s: stage_label(s, lang)}

# ========== Flask 路由 ==========
@app.route("/")
def index():
    lang = current_lang()
    star_filter = filter_from_args()
    filtered = filter_catalog(CATALOG, star_filter)

    highlight_key = request.args.get("highlight", STAGE_KEYS[0])
    highlight = next((s for s in STAGES if s.key == highlight_key), STAGES[0])

    return render_template(
        "index.html",
        hr_image=plot_hr_catalog(filtered, lang=lang),
        stages=STAGES,
        active_stages=star_filter.stages,
        temp_max=request.args.get("temp_max", ""),
        lum_max=request.args.get("lum_max", ""),
        mass_max=request.args.get("mass_max", ""),
        highlight=highlight,
        shown=len(filtered),
        counts=stage_counts(filtered),
        query=request.query_string.decode("utf-8"),
    )

@app.route("/tracks")
def tracks():
    lang = current_lang()
    masses = masses_from_args()
    track_data = {m: compute_track(m, app.config["TRACK_POINTS"]) for m in masses}
    return render_template(
        "tracks.html",
        tracks_image=plot_tracks(track_data, lang=lang),
        all_masses=TRACK_MASSES,
        active_masses=masses,
        durations=[stage_durations(m) for m in masses],
    )

@app.route("/lifetime")
def lifetime():
    lang = current_lang()
    mass = track_mass(request.args.get("mass", TRACK_MASSES[1]))
    age = min(max(float_arg("age", UNIVERSE_AGE / 2), 0), UNIVERSE_AGE)
    track = compute_track(mass, app.config["TRACK_POINTS"])
    point = point_at_age(track, age)
    return render_template(
        "lifetime.html",
        lifetime_image=plot_lifetime(track, point, lang=lang),
        all_masses=TRACK_MASSES,
        mass=mass,
        age=age,
        max_age=UNIVERSE_AGE,
        point=point,
        stage_color=STAGE_COLORS[point.stage],
    )

@app.route("/glossary")
def glossary():
    return render_template("glossary.html", glossary=GLOSSARY, stages=STAGES)

@app.route("/export.csv")
def export_csv():
    filtered = filter_catalog(CATALOG, filter_from_args())
    return Response(
        catalog_to_csv(filtered),
        mimetype="text/csv",
        headers={"Content-Disposition": "attachment;filename=stellar_catalog.csv"},
    )

@app.route("/report.pdf")
def report_pdf():
    filtered = filter_catalog(CATALOG, filter_from_args())
    pdf_buf = generate_pdf(filtered, lang=current_lang())
    out_name = f"Stellar_Report_{datetime.now().strftime('%Y%m%d_%H%M%S')}.pdf"
    return send_file(pdf_buf, as_attachment=True, download_name=out_name, mimetype="application/pdf")

# ========== 主函数 ==========
if __name__ == "__main__":
    if not FONT_PATH:
        app.logger.warning("static/fonts/NotoSansSC-Regular.ttf/.otf not found — Chinese labels may fallback.")
    app.run(debug=True, host="0.0.0.0", port=5000)
