import matplotlib.pyplot as plt

KM = 1e3


def plot_trajectory(trajectory, ax=None, title=None):
    """
    Plot the X-Y projection of a propagated trajectory in km.

    Returns (fig, ax). The central body sits at the origin; the first and last
    accepted points are marked.
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=(10, 10))
    else:
        fig = ax.figure

    x = trajectory.positions[:, 0] / KM
    y = trajectory.positions[:, 1] / KM

    ax.set_aspect('equal')
    ax.grid(True, linestyle='--', alpha=0.5)
    ax.set_xlabel('X (km)', fontsize=12)
    ax.set_ylabel('Y (km)', fontsize=12)
    ax.set_title(title or f'Two-body propagation ({trajectory.ode_solver}, {len(trajectory)} points)',
                 fontsize=14)

    ax.plot(x, y, color='mediumblue', linewidth=1.2, label='Trajectory')
    ax.plot(x[0], y[0], 'o', color='green', markersize=6, label='Start')
    ax.plot(x[-1], y[-1], 's', color='red', markersize=6, label='End')

    # Central body at origin
    ax.plot(0, 0, 'o', color='gray', markersize=10, label='Central body')

    ax.legend()
    fig.tight_layout()
    return fig, ax


def save_trajectory_plot(trajectory, path, dpi=150):
    fig, _ = plot_trajectory(trajectory)
    fig.savefig(path, dpi=dpi)
    plt.close(fig)
    return path
