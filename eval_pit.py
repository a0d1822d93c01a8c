"""
Headless evaluation of the ballpit engine.

Metrics:
  1. Kinetic energy (walls and equal-mass exchange both preserve speed sums)
  2. |Total momentum| (changes only at walls)
  3. Boundary containment (must stay exactly 0)
  4. Deepest residual overlap per tick (single-pass resolution)
"""

import numpy as np
import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
import os
import ballpit as P
from ballpit.engine import generate_trajectory, PitConfig
from ballpit.metrics import (compute_energy, compute_momentum,
                             boundary_violation, max_overlap)


def evaluate(n_steps=P.N_STEPS, seed=P.SEED):
    os.makedirs('results/plots', exist_ok=True)

    config = PitConfig(seed=seed)
    print(f"Running {config.body_count} bodies × {n_steps} ticks (seed={seed})")
    traj = generate_trajectory(config, n_steps=n_steps)

    states = traj['states']
    radii = traj['radii']
    energy = compute_energy(states)
    momentum = compute_momentum(states)
    outside = boundary_violation(states, radii, config.viewport)
    overlap = max_overlap(states, radii)

    print(f"Collisions:        {len(traj['collisions'])}")
    print(f"Energy drift:      {abs(energy[-1] - energy[0]):.10f}")
    print(f"Max outside:       {outside.max():.6f}")
    print(f"Max overlap:       {overlap.max():.4f} px")
    print(f"Ticks overlapping: {100 * np.mean(overlap > 0):.1f}%")

    fig, axes = plt.subplots(3, 1, figsize=(12, 10), sharex=True)
    axes[0].plot(energy, color='black')
    axes[0].set_ylabel('Kinetic energy')
    axes[0].set_title('Energy (unit mass)')
    axes[1].plot(momentum, color='tab:blue')
    axes[1].set_ylabel('|p|')
    axes[1].set_title('Total momentum magnitude')
    axes[2].plot(overlap, color='tab:red')
    axes[2].set_ylabel('px')
    axes[2].set_xlabel('Tick')
    axes[2].set_title('Deepest residual overlap')
    plt.tight_layout()
    plt.savefig('results/plots/pit_diagnostics.png', dpi=150)
    plt.close()

    fig, ax = plt.subplots(figsize=(8, 8 * config.height / config.width))
    for i in range(states.shape[1]):
        ax.plot(states[:, i, 0] + radii[i], states[:, i, 1] + radii[i],
                lw=0.5, alpha=0.7)
    ax.set_xlim(0, config.width)
    ax.set_ylim(config.height, 0)
    ax.set_aspect('equal')
    ax.set_title('Body centre paths')
    plt.tight_layout()
    plt.savefig('results/plots/pit_paths.png', dpi=150)
    plt.close()

    print("Plots saved to results/plots/")
    return traj


if __name__ == "__main__":
    evaluate()
