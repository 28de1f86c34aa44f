import streamlit as st
import matplotlib.pyplot as plt

from preload_model import ACTIVATION_FRACTION, TOTAL_MEMORY_BYTES, MemoryConfig, split_memory
from preload_sweep import AggregationMode, SweepAxes, run_sweep
from preload_plots import draw_preload_series, fig_gaussian_surface, series_to_frame


@st.cache_data
def _reference_series(total_mib: float):
    memory = MemoryConfig.from_mib(total_mib)
    result = run_sweep(SweepAxes.reference(), AggregationMode.PLOT_SERIES, memory)
    return result.series, result.channels


st.set_page_config(page_title="Preload Sweep", layout="wide")

with st.sidebar:
    st.header("Memory")
    total_mib = st.slider("Total on-chip memory (MiB)", min_value=0.5, max_value=8.0,
                          value=TOTAL_MEMORY_BYTES / 2 ** 20, step=0.5)
    act_pool, wt_pool = split_memory(MemoryConfig.from_mib(total_mib))
    st.caption(f"Activations: {act_pool.capacity:,} B ({ACTIVATION_FRACTION:.0%}) · "
               f"Weights: {wt_pool.capacity:,} B · word = {wt_pool.word_size} B")

series, channels = _reference_series(float(total_mib))

tabs = st.tabs(["Preload series", "Table", "Gaussian surface"])

with tabs[0]:
    st.subheader("Weight preloads vs C_in")
    st.caption("17×17 input, 1×1 kernel, stride 1; one line per filter count.")
    fig, ax = plt.subplots(figsize=(10, 5))
    draw_preload_series(ax, series, channels)
    plt.tight_layout()
    st.pyplot(fig)
    plt.close(fig)

with tabs[1]:
    st.dataframe(series_to_frame(series, channels))

with tabs[2]:
    st.caption("Rendering demo; unrelated to the cost model.")
    fig3d = fig_gaussian_surface()
    st.pyplot(fig3d)
    plt.close(fig3d)
