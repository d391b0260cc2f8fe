"""
Centralized runtime defaults for the rating engine.

Values are sourced from anchors.ANCHORS to stabilize behavior. Update
anchors.py deliberately when retuning and adjust tests accordingly.
"""
import math

from .anchors import ANCHORS

# --- Standard air ---
RHO_STD_LB_FT3: float = float(ANCHORS["RHO_STD_LB_FT3"])  # [lb/ft^3]
RHO_STD_KG_M3: float = float(ANCHORS["RHO_STD_KG_M3"])    # [kg/m^3]

# --- Quantity equality (math.isclose tolerances) ---
QUANTITY_REL_TOL: float = float(ANCHORS["QUANTITY_REL_TOL"])
QUANTITY_ABS_TOL: float = float(ANCHORS["QUANTITY_ABS_TOL"])

# --- Operating-point solver ---
# Convergence: error_from(P_fan, P_sys) <= SOLVER_TOLERANCE
SOLVER_TOLERANCE: float = float(ANCHORS["SOLVER_TOLERANCE"])
SOLVER_MAX_ITERATIONS: int = int(ANCHORS["SOLVER_MAX_ITERATIONS"])

# Extrapolation outside the measured envelope is opt-in.
ALLOW_EXTRAPOLATION: bool = bool(ANCHORS["ALLOW_EXTRAPOLATION"])
EXTRAPOLATION_SPAN: float = float(ANCHORS["EXTRAPOLATION_SPAN"])


def set_solver_defaults(*, tolerance=None, max_iterations=None, allow_extrapolation=None, extrapolation_span=None):
	"""
	Set solver defaults read by SolverOptions at call time.
	Args:
	    tolerance: float > 0 or None
	    max_iterations: int >= 1 or None
	    allow_extrapolation: bool or None
	    extrapolation_span: float >= 0 or None
	"""
	global SOLVER_TOLERANCE, SOLVER_MAX_ITERATIONS, ALLOW_EXTRAPOLATION, EXTRAPOLATION_SPAN
	if tolerance is not None:
		if not math.isfinite(tolerance) or tolerance <= 0:
			raise ValueError("tolerance must be > 0")
		SOLVER_TOLERANCE = float(tolerance)
	if max_iterations is not None:
		if int(max_iterations) < 1:
			raise ValueError("max_iterations must be >= 1")
		SOLVER_MAX_ITERATIONS = int(max_iterations)
	if allow_extrapolation is not None:
		ALLOW_EXTRAPOLATION = bool(allow_extrapolation)
	if extrapolation_span is not None:
		if not math.isfinite(extrapolation_span) or extrapolation_span < 0:
			raise ValueError("extrapolation_span must be >= 0")
		EXTRAPOLATION_SPAN = float(extrapolation_span)


def get_solver_defaults():
	"""
	Returns tuple (SOLVER_TOLERANCE, SOLVER_MAX_ITERATIONS, ALLOW_EXTRAPOLATION, EXTRAPOLATION_SPAN).
	"""
	return (SOLVER_TOLERANCE, SOLVER_MAX_ITERATIONS, ALLOW_EXTRAPOLATION, EXTRAPOLATION_SPAN)


def reset_solver_defaults() -> None:
	"""Restore solver defaults from the anchors. Safe for tests."""
	set_solver_defaults(
		tolerance=float(ANCHORS["SOLVER_TOLERANCE"]),
		max_iterations=int(ANCHORS["SOLVER_MAX_ITERATIONS"]),
		allow_extrapolation=bool(ANCHORS["ALLOW_EXTRAPOLATION"]),
		extrapolation_span=float(ANCHORS["EXTRAPOLATION_SPAN"]),
	)


# --- Helper: allow tests/tools to override the equality tolerance ---
def set_quantity_tolerance(rel_tol: float, abs_tol: float = None) -> None:
	"""Override the tolerances used by quantity equality. Safe for tests.
	Pass a positive relative tolerance, e.g. 1e-6. This only affects comparisons
	evaluated after the call.
	"""
	global QUANTITY_REL_TOL, QUANTITY_ABS_TOL
	if rel_tol <= 0:
		raise ValueError("rel_tol must be > 0")
	QUANTITY_REL_TOL = float(rel_tol)
	if abs_tol is not None:
		if abs_tol < 0:
			raise ValueError("abs_tol must be >= 0")
		QUANTITY_ABS_TOL = float(abs_tol)
