import streamlit as st
import pandas as pd
from core.models import SizingRequest, ConductorMaterial, InstallationMethod, CircuitType
from core.converters import convert_power_to_amps, convert_length_unit, apply_circuit_multiplier, default_power_factor
from core.calculator import SizingEngine, default_store
from core.config import load_settings, DEFAULT_SETTINGS
from core.errors import SizingError, NoFeasibleConfiguration, ConfigurationError
from core.export import alternatives_frame, reference_frame, to_excel, export_filename
from core.logging_setup import init_logging

init_logging()

# --- Page Config ---
st.set_page_config(
    page_title="Cable Sizing (SANS 10142-1)",
    page_icon="⚡",
    layout="wide",
    initial_sidebar_state="expanded"
)

# --- Custom CSS ---
st.markdown("""
<style>
    .reportview-container { background: #f0f2f6; }
    .main-header { font-family: 'Inter', sans-serif; color: #1E3A8A; font-weight: 700; }
    .stDataFrame { border-radius: 10px; overflow: hidden; }
</style>
""", unsafe_allow_html=True)


@st.cache_resource
def get_engine():
    try:
        settings = load_settings()
    except ConfigurationError as e:
        st.error(f"Settings error: {e}. Using defaults.")
        settings = DEFAULT_SETTINGS
    return SizingEngine(default_store(), settings)


engine = get_engine()
settings = engine.settings

if "last_result" not in st.session_state:
    st.session_state.last_result = None
    st.session_state.last_request = None

# --- Sidebar ---
with st.sidebar:
    st.title("Settings")
    st.caption("Policy values (SANS 10142-1)")
    st.write(f"Volt drop limit 400V: **{settings.voltage_drop_limit_400v}%**")
    st.write(f"Volt drop limit 230V: **{settings.voltage_drop_limit_230v}%**")
    st.write(f"Max parallel runs: **{settings.max_parallel_runs}**")
    st.write(f"Max amps per cable: **{settings.max_amps_per_cable:.0f} A**")

    st.markdown("---")
    st.subheader("📚 Reference Tables")
    ref_material = st.selectbox("Material", [m.value for m in engine.store.materials], key="ref_material")
    show_ref = st.toggle("Show table", False)

# --- Main Area ---
st.markdown("<h1 class='main-header'>⚡ Cable Sizing & Parallel Run Optimizer</h1>", unsafe_allow_html=True)
st.markdown("---")

with st.expander("➕ Circuit Data", expanded=True):
    st.markdown("##### ⚡ Load")
    c_p1, c_p2, c_ct, c_v = st.columns([1.5, 0.8, 1.2, 1])
    power = c_p1.number_input("Load", 0.0, value=100.0, step=1.0, format="%.2f")
    unit = c_p2.selectbox("Unit", ["A", "W", "KW", "KVA", "HP"])
    circuit_type = c_ct.selectbox("Circuit Type", [c.value for c in CircuitType], index=1)
    voltage = c_v.radio("Voltage", [400, 230], horizontal=True)

    st.markdown("##### 📏 Installation")
    c_L1, c_L2, c_M, c_I, c_D = st.columns([1.2, 0.6, 1, 1, 1])
    length = c_L1.number_input("Length", 0.0, value=50.0, step=1.0)
    l_unit = c_L2.selectbox("U.Len", ["m", "km", "ft"])
    materials = [m.value for m in ConductorMaterial]
    material = c_M.selectbox("Material", materials, index=materials.index(settings.default_cable_material))
    methods = [m.value for m in InstallationMethod]
    method = c_I.selectbox("Installation", methods, index=methods.index(settings.default_installation_method))
    derating = c_D.number_input("Derating Factor", 0.05, 1.0, 1.0, 0.05)

    apply_multiplier = st.toggle("Apply circuit type multiplier", True)

    if st.button("Calculate", type="primary", use_container_width=True):
        try:
            amps = convert_power_to_amps(power, unit, voltage, default_power_factor(circuit_type))
            if apply_multiplier:
                amps = apply_circuit_multiplier(amps, circuit_type)
            request = SizingRequest(
                load_amps=amps,
                voltage=voltage,
                total_length_meters=convert_length_unit(length, l_unit),
                material=material,
                installation_method=method,
                derating_factor=derating,
            )
            st.session_state.last_request = request
            st.session_state.last_result = engine.calculate(request)
        except NoFeasibleConfiguration as e:
            st.session_state.last_result = None
            st.warning(f"{e.message}. {e.hint or ''}")
        except SizingError as e:
            st.session_state.last_result = None
            st.error(e.message)

result = st.session_state.last_result
request = st.session_state.last_request

if result is not None:
    st.markdown("### ✅ Recommendation")
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Cable", result.description)
    c2.metric("Load per Cable", f"{result.load_per_cable:.1f} A")
    c3.metric("Volt Drop", f"{result.volt_drop_percent:.2f} %", help=f"Limit {result.volt_drop_limit}%")
    c4.metric("Total Cost", f"R {result.total_cost:,.2f}", help=f"Saves R {result.cost_savings:,.2f} vs next option")

    st.markdown("### 💰 Alternatives")
    st.dataframe(alternatives_frame(result), use_container_width=True, hide_index=True)

    st.download_button(
        "📥 Download Results (Excel)",
        data=to_excel(result, request, engine.store),
        file_name=export_filename(),
        mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    )

if show_ref:
    st.markdown("---")
    st.subheader(f"Reference Table - {ref_material}")
    df_ref: pd.DataFrame = reference_frame(engine.store, ref_material)
    st.dataframe(df_ref, use_container_width=True, hide_index=True)
