"""Adaptive quadrature used to compute the derived integrals of the feedback model.

A thin layer over `scipy.integrate.quad` (QUADPACK). The only tolerance that
counts is the relative one; failure to reach it is fatal.

Example
-------
>>> qag(lambda m: m**-2.3, 8.0, 100.0)
0.0495...
"""

from typing import Callable, Iterable, Optional

from scipy.integrate import quad

from .. import config
from .error_handling import NonconvergentIntegration


def qag(
    f: Callable[[float], float],
    a: float,
    b: float,
    epsrel: Optional[float] = None,
    points: Optional[Iterable[float]] = None,
    limit: Optional[int] = None,
) -> float:
    """Integrate f over [a, b] to the given relative accuracy.

    Parameters
    ----------
    f: Callable
        A scalar function of one real argument.
    a, b: float
        The integration limits.
    epsrel: float, optional
        The relative error target, defaults to config.INTEGRATION_PARAMS["epsrel"].
    points: Iterable[float], optional
        Locations of kinks or jumps of the integrand. Only those strictly
        inside (a, b) are used.
    limit: int, optional
        Maximum number of subintervals, defaults to config.INTEGRATION_PARAMS["limit"].

    Returns
    -------
    float
        The value of the integral.

    Raises
    ------
    NonconvergentIntegration: If QUADPACK cannot meet the requested accuracy.
    """
    if epsrel is None:
        epsrel = config.INTEGRATION_PARAMS["epsrel"]
    if limit is None:
        limit = config.INTEGRATION_PARAMS["limit"]
    if a == b:
        return 0.0

    lower, upper = min(a, b), max(a, b)
    inner = None
    if points is not None:
        inner = sorted(p for p in set(points) if lower < p < upper)
        if len(inner) == 0:
            inner = None

    try:
        result = quad(
            f,
            a,
            b,
            epsabs=0.0,
            epsrel=epsrel,
            limit=limit,
            points=inner,
            full_output=1,
        )
    except ValueError as err:
        raise NonconvergentIntegration(
            f"Invalid integration setup on [{a}, {b}]: {err}"
        ) from err

    # quad appends a message to the output only when QUADPACK reports a problem
    if len(result) > 3:
        raise NonconvergentIntegration(
            f"Integration over [{a}, {b}] did not converge to epsrel = {epsrel}: {result[3]}"
        )

    return float(result[0])
