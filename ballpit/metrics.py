import numpy as np


def compute_energy(states):
    """(T, N, 4) → (T,) total kinetic energy, unit mass."""
    vel = states[:, :, 2:]
    return (0.5 * vel ** 2).sum(axis=(1, 2))


def compute_momentum(states):
    """(T, N, 4) → (T,) |total momentum|, unit mass."""
    p = states[:, :, 2:].sum(axis=1)
    return np.linalg.norm(p, axis=1)


def boundary_violation(states, radii, viewport):
    """(T, N, 4) → (T,) largest distance any body sits outside the viewport."""
    width, height = viewport
    d = 2.0 * np.asarray(radii)[None, :]
    x, y = states[:, :, 0], states[:, :, 1]
    out = np.stack([-x, -y, x - (width - d), y - (height - d)], axis=-1)
    return np.clip(out, 0, None).max(axis=(1, 2))


def max_overlap(states, radii):
    """(T, N, 4) → (T,) deepest pairwise penetration, 0 when none overlap."""
    radii = np.asarray(radii)
    n = len(radii)
    if n < 2:
        return np.zeros(states.shape[0])
    centers = states[:, :, :2] + radii[None, :, None]
    diff = centers[:, :, None, :] - centers[:, None, :, :]
    dist = np.linalg.norm(diff, axis=-1)
    depth = (radii[:, None] + radii[None, :])[None] - dist
    iu = np.triu_indices(n, k=1)
    return np.clip(depth[:, iu[0], iu[1]], 0, None).max(axis=1)
