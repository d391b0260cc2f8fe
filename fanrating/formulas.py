import math
from dataclasses import dataclass

from .anchors import ANCHORS

# =============================
# Fan test constants and unit helpers (raw floats)
# =============================

CFM_TO_M3S: float = float(ANCHORS["CFM_TO_M3S"])            # [m^3/s per CFM]
M3S_TO_CFM: float = 1.0 / CFM_TO_M3S
PA_PER_IN_WG: float = float(ANCHORS["PA_PER_IN_WG"])        # [Pa per in. wg]
KW_PER_HP: float = float(ANCHORS["KW_PER_HP"])              # [kW per hp]
MM_PER_IN: float = float(ANCHORS["MM_PER_IN"])              # [mm per in]
KG_M3_PER_LB_FT3: float = float(ANCHORS["KG_M3_PER_LB_FT3"])
AIR_POWER_CONSTANT: float = float(ANCHORS["AIR_POWER_CONSTANT"])  # [CFM·in.wg per hp]

R_AIR: float = 287.058    # J/(kg*K), dry air
R_VAPOR: float = 461.495  # J/(kg*K), water vapor


# Conversions
def cfm_to_m3s(q_cfm: float) -> float:
    """CFM → m^3/s."""
    return q_cfm * CFM_TO_M3S

def m3s_to_cfm(q_m3s: float) -> float:
    """m^3/s → CFM."""
    return q_m3s * M3S_TO_CFM

def in_wg_to_pa(p_in_wg: float) -> float:
    """in. wg → Pa."""
    return p_in_wg * PA_PER_IN_WG

def pa_to_in_wg(p_pa: float) -> float:
    """Pa → in. wg."""
    return p_pa / PA_PER_IN_WG

def hp_to_kw(p_hp: float) -> float:
    """hp → kW."""
    return p_hp * KW_PER_HP

def kw_to_hp(p_kw: float) -> float:
    """kW → hp."""
    return p_kw / KW_PER_HP

def in_to_mm(x_in: float) -> float:
    """Inches → millimeters."""
    return x_in * MM_PER_IN

def mm_to_in(x_mm: float) -> float:
    """Millimeters → inches."""
    return x_mm / MM_PER_IN

def rpm_to_rad_s(n_rpm: float) -> float:
    """rev/min → rad/s."""
    return n_rpm * 2.0 * math.pi / 60.0

def rad_s_to_rpm(w_rad_s: float) -> float:
    """rad/s → rev/min."""
    return w_rad_s * 60.0 / (2.0 * math.pi)

def lb_ft3_to_kg_m3(rho_lb_ft3: float) -> float:
    """lb/ft^3 → kg/m^3."""
    return rho_lb_ft3 * KG_M3_PER_LB_FT3

def kg_m3_to_lb_ft3(rho_kg_m3: float) -> float:
    """kg/m^3 → lb/ft^3."""
    return rho_kg_m3 / KG_M3_PER_LB_FT3

def F_to_K(t_F: float) -> float:
    return (t_F - 32.0) * 5.0 / 9.0 + 273.15

def C_to_K(t_C: float) -> float:
    return t_C + 273.15

def in_hg_to_pa(p_in_hg: float) -> float:
    """in Hg (32 °F) → Pa."""
    return p_in_hg * 3386.389


# =============================
# Air state (test-chamber conditions)
# =============================

@dataclass(frozen=True)
class AirState:
    """Air conditions for density correction.
    All fields SI:
    - p_tot: barometric pressure (Pa)
    - T: dry-bulb temperature (K)
    - RH: relative humidity (0..1). RH=0 ignores water vapor.
    """

    p_tot: float  # Pa
    T: float  # K
    RH: float = 0.0  # 0..1


# Tetens saturation pressure; adequate for 0..50 °C test chambers.
def _p_sat_water_Pa(T: float) -> float:
    Tc = T - 273.15
    return 610.78 * math.exp((17.27 * Tc) / (Tc + 237.3))


def air_density(state: AirState) -> float:
    """Moist air density [kg/m^3] as the sum of dry-air and vapor partial densities.
    With RH=0 this is p_tot/(R*T).
    """
    if state.T <= 0 or state.p_tot <= 0 or not (0.0 <= state.RH <= 1.0):
        raise ValueError("p_tot > 0, T > 0, 0 <= RH <= 1")
    pv = state.RH * _p_sat_water_Pa(state.T)
    pdry = max(1.0, state.p_tot - pv)
    return pdry / (R_AIR * state.T) + pv / (R_VAPOR * state.T)


# =============================
# Fan laws and performance helpers
# =============================

def affinity_ratio(from_value: float, to_value: float, exponent: float) -> float:
    """
    Fan-law multiplier:
        (to / from) ** k
    Args:
        from_value: context magnitude the value was observed at (>0)
        to_value: context magnitude to rescale to (>0)
        exponent: power-law exponent k
    Returns:
        float: multiplier applied to the observed value
    """
    if from_value <= 0 or to_value <= 0:
        raise ValueError("from_value > 0, to_value > 0")
    if exponent == 0:
        return 1.0
    return (to_value / from_value) ** exponent

def air_horsepower(q_cfm: float, p_in_wg: float) -> float:
    """
    Air horsepower [hp]:
        AHP = Q * P / 6356
    Args:
        q_cfm: airflow [CFM]
        p_in_wg: static pressure [in. wg]
    Returns:
        float: air power [hp]
    """
    return q_cfm * p_in_wg / AIR_POWER_CONSTANT

def static_efficiency(q_cfm: float, p_in_wg: float, bhp: float) -> float:
    """
    Fan static efficiency (dimensionless):
        eta_s = Q * Ps / (6356 * BHP)
    Args:
        q_cfm: airflow [CFM]
        p_in_wg: static pressure [in. wg]
        bhp: brake horsepower [hp] (>0)
    Returns:
        float: static efficiency
    """
    if bhp <= 0:
        raise ValueError("bhp > 0")
    return air_horsepower(q_cfm, p_in_wg) / bhp

def system_resistance(p_in_wg: float, q_cfm: float, exponent: float = 2.0) -> float:
    """
    System resistance coefficient through one point of a system curve:
        k = P / Q^n
    Args:
        p_in_wg: pressure drop [in. wg]
        q_cfm: airflow [CFM] (!=0)
        exponent: system-curve exponent n (2 for turbulent duct flow)
    Returns:
        float: k [in. wg / CFM^n]
    """
    if q_cfm == 0:
        raise ValueError("q_cfm != 0")
    return p_in_wg / abs(q_cfm) ** exponent

def percent_change(after: float, before: float) -> float:
    """Relative change in percent: (after - before) / before * 100."""
    if before == 0:
        raise ValueError("before != 0.")
    return (after - before) / before * 100.0
