from functools import partial

import jax
import jax.numpy as jnp
from jax import jit

from .config import DEFAULT_KEPLER_MAX_ITER, DEFAULT_KEPLER_TOLERANCE

TWO_PI = 2.0 * jnp.pi


@partial(jit, static_argnames=('max_iter',))
def solve_kepler(M, e, tol: float = DEFAULT_KEPLER_TOLERANCE, max_iter: int = DEFAULT_KEPLER_MAX_ITER):
    """
    Solve Kepler's equation M = E - e*sin(E) for eccentric anomaly E
    using Newton-Raphson iteration with jax.lax.while_loop.

    The loop stops once the Newton step falls below ``tol`` or after
    ``max_iter`` steps, returning the latest estimate. A circular orbit
    (e == 0) returns M unchanged.
    """
    M = jnp.asarray(M, dtype=jnp.float64)
    e = jnp.asarray(e, dtype=jnp.float64)

    # Reduce to [-pi, pi] so the high-eccentricity starting guess is valid
    revolutions = jnp.round(M / TWO_PI)
    M_red = M - TWO_PI * revolutions
    E0 = jnp.where(e < 0.8, M_red, jnp.pi * jnp.sign(M_red))

    def cond_fn(carry):
        i, _, step = carry
        return (i < max_iter) & jnp.any(jnp.abs(step) > tol)

    def body_fn(carry):
        i, E, _ = carry
        f = E - e * jnp.sin(E) - M_red
        fp = 1.0 - e * jnp.cos(E)
        step = f / fp
        return i + 1, E - step, step

    _, E_final, _ = jax.lax.while_loop(cond_fn, body_fn, (0, E0, jnp.full_like(E0, jnp.inf)))
    return jnp.where(e == 0.0, M, E_final + TWO_PI * revolutions)


# Batched over (M, e) pairs; tol and max_iter are shared
_solve_kepler_vec = jax.vmap(solve_kepler, in_axes=(0, 0, None, None))


def solve_kepler_vec(M, e, tol=DEFAULT_KEPLER_TOLERANCE, max_iter=DEFAULT_KEPLER_MAX_ITER):
    """
    solve_kepler over paired arrays of mean anomalies and eccentricities.

    Parameters
    ----------
    M : jnp.ndarray
        Mean anomalies (rad), shape (N,)
    e : jnp.ndarray
        Eccentricities in [0, 1), shape (N,)
    tol : float, optional
        Newton step size below which a solution is accepted
    max_iter : int, optional
        Iteration cap per solution

    Returns
    -------
    E : jnp.ndarray
        Eccentric anomalies (rad), shape (N,)
    """
    return _solve_kepler_vec(jnp.asarray(M, dtype=jnp.float64), jnp.asarray(e, dtype=jnp.float64), tol, max_iter)


@jit
def true_anomaly(E, e):
    """True anomaly from eccentric anomaly via the half-angle form."""
    return 2.0 * jnp.arctan2(
        jnp.sqrt(1.0 + e) * jnp.sin(E / 2.0),
        jnp.sqrt(1.0 - e) * jnp.cos(E / 2.0)
    )


@jit
def orbital_plane_to_scene(nu, r, inclination_deg, node_deg, amplify=1.0):
    """
    Place a point of the orbital plane in the Y-up scene frame.

    Steps, in this order:
        1) planar point (r cos nu, r sin nu, 0)
        2) rotation about X by the amplified inclination
        3) rotation about Z by the longitude of the ascending node
    The ecliptic result (x, y, z) is returned as scene (x, z, y) so that the
    ecliptic is the scene X-Z plane and the ecliptic normal points up.

    Args:
        nu: true anomaly (rad), scalar or array
        r: distance from the focus (scene units)
        inclination_deg: inclination (deg)
        node_deg: longitude of the ascending node (deg)
        amplify: multiplier applied to the inclination only

    Returns:
        Array of shape (..., 3)
    """
    i = jnp.deg2rad(inclination_deg) * amplify
    Omega = jnp.deg2rad(node_deg)

    # Position in orbital plane
    x = r * jnp.cos(nu)
    y = r * jnp.sin(nu)

    # Inclination about X (z starts at 0)
    y1 = y * jnp.cos(i)
    z1 = y * jnp.sin(i)

    # Ascending node about Z
    cos_Omega = jnp.cos(Omega)
    sin_Omega = jnp.sin(Omega)
    x_final = x * cos_Omega - y1 * sin_Omega
    y_final = x * sin_Omega + y1 * cos_Omega
    z_final = z1

    return jnp.stack([x_final, z_final, y_final], axis=-1)


@partial(jit, static_argnames=('max_iter',))
def kepler_scene_point(M, a, e, inclination_deg, node_deg, amplify, tol=DEFAULT_KEPLER_TOLERANCE,
                       max_iter=DEFAULT_KEPLER_MAX_ITER):
    """
    Scene position of a body at mean anomaly M on an ellipse of semi-major axis a.

    The distance is a*(1 - e*cos(E)); for e == 0 the true anomaly is M
    exactly and the distance is a.
    """
    E = solve_kepler(M, e, tol, max_iter)
    nu = jnp.where(e == 0.0, M, true_anomaly(E, e))
    r = a * (1.0 - e * jnp.cos(E))
    return orbital_plane_to_scene(nu, r, inclination_deg, node_deg, amplify)


@jit
def conic_radius(nu, a, e):
    """Distance from the focus at true anomaly nu: a(1 - e^2) / (1 + e cos nu)."""
    return a * (1.0 - e**2) / (1.0 + e * jnp.cos(nu))
