"""
Explicit Runge-Kutta time marching for semi-discrete systems.

A small stand-in for an external ODE integrator: it repeatedly calls the
right-hand side, asks the CFL controller for a step size once per
accepted step and records the trajectory as an FVSolution.

Available steppers:
- 'ssprk22': Heun's method (2-stage SSP RK2)
- 'ssprk33': Shu-Osher 3-stage SSP RK3
- 'rk4': classical 4-stage RK4 (not SSP, for smooth problems)
"""

import logging
import math

import numpy as np

from .errors import ConfigurationError
from .solution import FVSolution

log = logging.getLogger(__name__)


def ssprk22_step(f, u, t, dt):
    """
    One RK2 (Heun's method) step.

    Stage 1: u* = u^n + dt * L(u^n)
    Stage 2: u^{n+1} = 0.5 * (u^n + u* + dt * L(u*))
    """
    u_star = u + dt * f(u, t)
    return 0.5 * (u + u_star + dt * f(u_star, t + dt))


def ssprk33_step(f, u, t, dt):
    """
    One third order SSP Runge-Kutta step (Shu-Osher).

    u1 = u^n + dt * L(u^n)
    u2 = 3/4 u^n + 1/4 (u1 + dt * L(u1))
    u^{n+1} = 1/3 u^n + 2/3 (u2 + dt * L(u2))
    """
    u1 = u + dt * f(u, t)
    u2 = 0.75 * u + 0.25 * (u1 + dt * f(u1, t + dt))
    return u / 3.0 + 2.0 / 3.0 * (u2 + dt * f(u2, t + 0.5 * dt))


def rk4_step(f, u, t, dt):
    """One classical fourth order Runge-Kutta step."""
    k1 = f(u, t)
    k2 = f(u + 0.5 * dt * k1, t + 0.5 * dt)
    k3 = f(u + 0.5 * dt * k2, t + 0.5 * dt)
    k4 = f(u + dt * k3, t + dt)
    return u + dt / 6.0 * (k1 + 2 * k2 + 2 * k3 + k4)


STEPPERS = {
    'ssprk22': ssprk22_step,
    'ssprk33': ssprk33_step,
    'rk4': rk4_step,
}


def march(semidiscretization, u0, t_end, controller=None, dt=None, method='ssprk33',
          t0=0.0, save_every=1):
    """
    Advance a semi-discrete system from t0 to t_end.

    Parameters
    ----------
    semidiscretization : SemiDiscretization
        Right-hand side f(u, t)
    u0 : ndarray of shape (N, M)
        Initial cell averages
    t_end : float
        Final time
    controller : CFLController, optional
        Called once per accepted step with the current state
    dt : float, optional
        Fixed step size; capped by the controller when both are given
    method : str
        Key of STEPPERS
    t0 : float
        Initial time
    save_every : int
        Record every ``save_every``-th step (the final state is always kept)

    Returns
    -------
    solution : FVSolution
    """
    if controller is None and dt is None:
        raise ConfigurationError("march needs a CFL controller or a fixed dt")
    if t_end <= t0:
        raise ConfigurationError(f"t_end={t_end} must be larger than t0={t0}")
    try:
        step = STEPPERS[method.lower()]
    except KeyError:
        raise ConfigurationError(f"Unknown time integrator: {method}") from None

    u = np.array(u0, dtype=float)
    t = t0
    n_steps = 0
    times = [t]
    states = [u.copy()]

    while t < t_end:
        if controller is None:
            step_dt = dt
        elif dt is None:
            step_dt = controller(u, t)
        else:
            step_dt = controller.propose(dt, u, t)
        if math.isinf(step_dt):
            raise ConfigurationError(
                "Step size unconstrained by the CFL condition; pass a fixed dt or max_dt")

        # Don't overshoot t_end, and don't leave a round-off sized last step
        last = t + step_dt >= t_end - 1e-12 * max(1.0, abs(t_end))
        if last:
            step_dt = t_end - t

        u = step(semidiscretization, u, t, step_dt)
        t = t_end if last else t + step_dt
        n_steps += 1

        if last or n_steps % save_every == 0:
            times.append(t)
            states.append(u.copy())

        if n_steps % 100 == 0:
            log.debug("Step %d: t = %.6f, dt = %.6e", n_steps, t, step_dt)

    log.info("Reached t = %g in %d steps (%s)", t, n_steps, method)
    scheme_name = getattr(semidiscretization.scheme, 'name', None)
    return FVSolution(semidiscretization.mesh, times, states, scheme_name=scheme_name)
