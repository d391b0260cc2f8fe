"""
Frozen anchor set for solver, tolerance and air-standard constants with brief origin notes.

These values document the intended default behavior of the rating engine.
Tests may assert no drift relative to these values. Update this file
deliberately when retuning, together with the affected tests.
"""

ANCHORS: dict[str, float | int | str] = {
    # Standard air (fan test standards rate at 0.075 lb/ft^3)
    "RHO_STD_LB_FT3": 0.075,         # lb/ft^3
    "RHO_STD_KG_M3": 1.2014,         # kg/m^3
    "KG_M3_PER_LB_FT3": 16.018463,   # kg/m^3 per lb/ft^3

    # Unit factors
    "CFM_TO_M3S": 0.000471947443,    # m^3/s per CFM
    "PA_PER_IN_WG": 249.08891,       # Pa per in. wg (4 °C water column)
    "KW_PER_HP": 0.745699872,        # kW per mechanical hp
    "MM_PER_IN": 25.4,               # mm per in
    "AIR_POWER_CONSTANT": 6356.0,    # CFM·in.wg per hp

    # Quantity equality
    "QUANTITY_REL_TOL": 1e-9,
    "QUANTITY_ABS_TOL": 1e-12,

    # Operating-point solver
    "SOLVER_TOLERANCE": 1e-10,       # squared relative error
    "SOLVER_MAX_ITERATIONS": 100,
    "ALLOW_EXTRAPOLATION": 0,        # 0 = disallowed, 1 = allowed
    "EXTRAPOLATION_SPAN": 0.25,      # fraction of the measured span beyond an edge
}

# Origins (free-text for docs)
ORIGINS: dict[str, str] = {
    "RHO_STD_LB_FT3": "Standard air: 70 °F, 29.92 in Hg, dry",
    "AIR_POWER_CONSTANT": "AHP = Q[CFM] * P[in.wg] / 6356",
    "SOLVER_TOLERANCE": "((P_fan - P_sys) / P_sys)^2 <= 1e-10, i.e. 1e-5 relative",
    "SOLVER_MAX_ITERATIONS": "Bisection halves the bracket; 100 halvings exhaust float precision",
    "EXTRAPOLATION_SPAN": "Beyond-edge reach limited to a quarter of the measured airflow span",
}
