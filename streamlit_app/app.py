"""Structured Workout Builder: Streamlit preview dashboard.

Run with:
    streamlit run streamlit_app/app.py

Requires the ``dashboard`` extra (``pip install -e .[dashboard]``).
"""

from __future__ import annotations

import json
import logging

import streamlit as st

from workout_engine import config
from workout_engine.engine import WorkoutEngine
from workout_engine.exceptions import StructureValidationError
from workout_engine.math.training_load import segments_frame
from workout_engine.models.enums import BlockType, IntensityMode, IntensityUnit
from workout_engine.serialization import structure_to_dict, to_json_string
from workout_engine.workout_builder import StructureEditor, validate_structure
from workout_engine.workout_builder.catalog import BLOCK_DEFINITIONS

from helpers import (
    BLOCK_COLORS,
    SPORTS,
    bar_height_percent,
    load_targets,
    step_rows,
    unit_options,
)

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Page config
# ---------------------------------------------------------------------------

st.set_page_config(
    page_title="Structured Workout Builder",
    page_icon="🚴",
    layout="wide",
)


# ---------------------------------------------------------------------------
# Cached engine
# ---------------------------------------------------------------------------


@st.cache_resource
def get_engine() -> WorkoutEngine:
    return WorkoutEngine()


def _editor() -> StructureEditor:
    if "editor" not in st.session_state:
        st.session_state.editor = StructureEditor.for_sport("bike")
    return st.session_state.editor


# ---------------------------------------------------------------------------
# Rendering helpers (must be defined before use in tabs)
# ---------------------------------------------------------------------------


def _render_preview(preview, rows) -> None:
    """Render the segment timeline as proportional coloured bars."""
    total = max(1, preview.total_duration_minutes)
    bars = []
    for segment in preview.segments:
        width = segment.duration_minutes / total * 100
        height = bar_height_percent(segment.intensity_max, preview.scale_max)
        color = BLOCK_COLORS.get(segment.block_type, "#CCCCCC")
        bars.append(
            f'<div style="display:inline-block;vertical-align:bottom;'
            f'width:{width:.3f}%;height:{height * 1.6:.1f}px;background:{color};'
            f'border-right:1px solid #fff;"></div>'
        )
    st.markdown(
        f'<div style="height:170px;white-space:nowrap;">{"".join(bars)}</div>',
        unsafe_allow_html=True,
    )
    st.caption(" | ".join(preview.axis_labels))

    for row in rows:
        badge = f" ({row['pattern']})" if row["pattern"] else ""
        zone = f" · {row['zone']}" if row["zone"] else ""
        st.markdown(
            f'<div style="background:{row["color"]};padding:6px 12px;'
            f'border-radius:4px;margin:2px 0;">'
            f'<strong>{row["block"]}</strong>{badge} | {row["duration"]} | '
            f'{row["target"]}{zone}</div>',
            unsafe_allow_html=True,
        )


def _render_step_controls(editor: StructureEditor) -> None:
    for step_id in editor.order:
        step = editor.get(step_id)
        cols = st.columns([3, 2, 1, 1, 1])
        cols[0].write(f"**{BLOCK_DEFINITIONS[step.block_type].label}** `{step_id}`")
        duration = cols[1].number_input(
            "Minutes", min_value=1, max_value=600,
            value=int(step.duration_minutes), key=f"dur-{step_id}",
        )
        if duration != step.duration_minutes:
            editor.update_step(step_id, duration_minutes=duration)
        if cols[2].button("↑", key=f"up-{step_id}"):
            editor.move_step_by_one(step_id, -1)
            st.rerun()
        if cols[3].button("↓", key=f"down-{step_id}"):
            editor.move_step_by_one(step_id, 1)
            st.rerun()
        if cols[4].button("✕", key=f"rm-{step_id}"):
            editor.remove_step(step_id)
            st.rerun()
        if step.block_type == BlockType.REPEATS:
            count = st.number_input(
                "Repeat count", min_value=2, max_value=20,
                value=int(step.repeat_count), key=f"rep-{step_id}",
            )
            if count != step.repeat_count:
                editor.set_repeat_count(step_id, count)


# ---------------------------------------------------------------------------
# Sidebar
# ---------------------------------------------------------------------------

with st.sidebar:
    st.header("Session")
    sport = st.selectbox("Sport", SPORTS)
    if st.button("Reset to sport template"):
        st.session_state.editor = StructureEditor.for_sport(sport)
        logger.info("Editor reset to %s template", sport)

    editor = _editor()
    units = unit_options()
    unit = st.selectbox("Unit", units, index=units.index(editor.unit.value))
    editor.set_unit(IntensityUnit(unit))
    mode = st.radio(
        "Mode", [m.value for m in IntensityMode],
        index=[m.value for m in IntensityMode].index(editor.mode.value),
    )
    editor.set_mode(IntensityMode(mode))

    st.header("Add block")
    new_type = st.selectbox(
        "Block type", list(BLOCK_DEFINITIONS),
        format_func=lambda b: BLOCK_DEFINITIONS[b].label,
    )
    st.caption(BLOCK_DEFINITIONS[new_type].helper_text)
    if st.button("Add"):
        editor.add_step(new_type)

    targets = load_targets(config.PREVIEW_PROFILE_PATH)
    if targets is None:
        st.info(f"No target profile found at {config.PREVIEW_PROFILE_PATH}")


# ---------------------------------------------------------------------------
# Main area
# ---------------------------------------------------------------------------

engine = get_engine()
structure = editor.build()

tab_builder, tab_segments, tab_json = st.tabs(["Builder", "Segments", "JSON"])

with tab_builder:
    preview = engine.preview(structure, targets)
    c1, c2, c3 = st.columns(3)
    c1.metric("Duration", f"{preview.total_duration_minutes} min")
    c2.metric("Estimated TSS", preview.estimated_tss if structure.steps else "--")
    c3.metric("Unit", preview.unit_label)
    _render_preview(preview, step_rows(structure, preview, targets))
    st.divider()
    _render_step_controls(editor)

with tab_segments:
    st.dataframe(segments_frame(structure), use_container_width=True)

with tab_json:
    payload = structure_to_dict(structure)
    errors = validate_structure(payload)
    if errors:
        for path, message in errors.items():
            st.error(f"{path}: {message}")
    else:
        st.success("Structure is valid.")
    snapshot = engine.snapshot(structure)
    st.json({
        "duration_minutes": snapshot.duration_minutes,
        "estimated_tss": snapshot.estimated_tss,
    })
    st.code(to_json_string(structure, indent=2), language="json")

    uploaded = st.text_area("Load structure JSON")
    if st.button("Load") and uploaded:
        try:
            validate_structure(json.loads(uploaded), raise_on_error=True)
        except json.JSONDecodeError as exc:
            st.error(f"Invalid JSON: {exc}")
        except StructureValidationError as exc:
            st.error(str(exc))
        else:
            loaded = engine.load(json.loads(uploaded))
            st.session_state.editor = StructureEditor.from_structure(loaded)
            st.rerun()
