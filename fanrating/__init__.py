"""
fanrating: fan-performance calculation engine.

Unit-typed quantities, fan-law scaling, curve interpolation and
operating-point solving for AMCA-style A1/A2 (2010) test reports.
"""
from .a1_2010 import A1Determination, A1Report, a1_curve, a1_operating_point
from .a2_2010 import A2Determination, A2Report, a2_curve, a2_operating_point
from .errors import (
    CalculationError, ContextMismatch, CurveError, DegenerateReference, InvalidContext,
    InvalidCurve, NotConverged, OutOfRange, ScalingError, UndefinedInterpolation, UnsupportedScaling,
)
from .interpolation import interpolate_between
from .metrics import error_from, mean_error_from
from .operating_point import OperatingPoint, SolverOptions, SystemCurve, Target, solve_operating_point
from .scaling import Conditions, register_context, register_scaling, scale, scale_across
from .units import (
    AirDensity, BrakeHorsepower, FanDiameter, FanSeries, FanSize, FanSpeed, InducedAirflow,
    InletAirflow, OutletAirflow, StaticPressure, SystemResistance,
)

__version__ = "0.1.0"
