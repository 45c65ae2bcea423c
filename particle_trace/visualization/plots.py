import os

import matplotlib.pyplot as plt
import numpy as np

from particle_trace.config import settings


def plot_reconstruction(trajectory, n=None):
    """
    Plot recorded control points vs the Lagrange curve, one panel per axis.
    """
    out_dir = settings.OUTPUT_DIR
    os.makedirs(out_dir, exist_ok=True)

    n = settings.PLOT_SAMPLES if n is None else n
    ts, positions = trajectory.sample(n)

    fig, axes = plt.subplots(3, 1, figsize=(10, 8), sharex=True)
    for k, (ax, axis, label) in enumerate(zip(axes, trajectory.axes, ("x", "y", "z"))):
        pts = axis.points
        ax.plot(ts, positions[:, k], label="Lagrange fit")
        ax.plot([p.t for p in pts], [p.value for p in pts], "o", markersize=3, label="samples")
        ax.set_ylabel(label)

    axes[0].set_title("Trajectory Reconstruction")
    axes[0].legend(loc="upper right")
    axes[-1].set_xlabel("Time (s)")

    save_path = os.path.join(out_dir, "reconstruction.png")
    fig.tight_layout()
    fig.savefig(save_path)
    plt.close(fig)

    print(f"[OK] Saved: {save_path}")
    return save_path


def plot_kinematics(trajectory, estimator, n=None):
    """
    Plot speed and acceleration magnitude over the recorded span.
    """
    out_dir = settings.OUTPUT_DIR
    os.makedirs(out_dir, exist_ok=True)

    n = settings.PLOT_SAMPLES if n is None else n
    ts = np.linspace(trajectory.t_first, trajectory.t_last, int(n))
    speeds = [estimator.speed(trajectory, t) for t in ts]
    accels = [estimator.acceleration_magnitude(trajectory, t) for t in ts]

    fig, (ax_v, ax_a) = plt.subplots(2, 1, figsize=(10, 6), sharex=True)
    ax_v.plot(ts, speeds)
    ax_v.set_ylabel("Speed")
    ax_v.set_title("Estimated Kinematics")
    ax_a.plot(ts, accels, color="tab:red")
    ax_a.set_ylabel("Acceleration")
    ax_a.set_xlabel("Time (s)")

    save_path = os.path.join(out_dir, "kinematics.png")
    fig.tight_layout()
    fig.savefig(save_path)
    plt.close(fig)

    print(f"[OK] Saved: {save_path}")
    return save_path
