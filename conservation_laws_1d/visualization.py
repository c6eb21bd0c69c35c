"""
Visualization module for finite volume solutions.

Provides:
- Static plots of cell averages (optionally against an exact solution)
- Convergence plots of error versus mesh size
- Animated GIF of the solution evolution
"""

import os

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.animation import FuncAnimation


class Visualizer:
    """
    Visualization tools for FVSolution objects.

    Parameters
    ----------
    output_dir : str
        Directory for saving output files
    labels : list of str, optional
        Names of the conserved variables used as axis labels
    """

    def __init__(self, output_dir='output/results', labels=None):
        self.output_dir = output_dir
        self.labels = labels
        os.makedirs(output_dir, exist_ok=True)

        self.colors = {
            'numerical': '#2196F3',  # Blue
            'exact': '#F44336',      # Red
        }

    def _labels(self, nvars):
        if self.labels is not None and len(self.labels) == nvars:
            return list(self.labels)
        if nvars == 1:
            return ['u']
        return [f'u{i}' for i in range(nvars)]

    def _save(self, fig, filename):
        filepath = os.path.join(self.output_dir, filename)
        fig.savefig(filepath, dpi=150, bbox_inches='tight')
        plt.close(fig)
        print(f"Saved: {filepath}")
        return filepath

    def plot_solution(self, solution, t=None, exact=None, title=None,
                      filename='solution.png'):
        """
        Plot cell averages with optional exact solution comparison.

        Parameters
        ----------
        solution : FVSolution
            Computed trajectory
        t : float, optional
            Time to plot (default final time)
        exact : callable, optional
            exact(x, t) returning a scalar or an M-vector
        title : str, optional
            Custom title
        filename : str
            Output filename
        """
        if t is None:
            t = solution.t_final
        x = solution.cell_centers
        u = solution.state_at(t)
        nvars = u.shape[1]

        fig, axes = plt.subplots(1, nvars, figsize=(4.5 * nvars + 1, 4), squeeze=False)
        x_fine = np.linspace(*solution.mesh.x_range, 10 * len(x) + 1)
        u_exact = None
        if exact is not None:
            u_exact = np.array([np.atleast_1d(exact(xi, t)) for xi in x_fine])

        for k, (ax, name) in enumerate(zip(axes[0], self._labels(nvars))):
            ax.plot(x, u[:, k], 'o-', color=self.colors['numerical'],
                    markersize=1.5, linewidth=0.8, label='Numerical')
            if u_exact is not None:
                ax.plot(x_fine, u_exact[:, k], '-', color=self.colors['exact'],
                        linewidth=1.5, label='Exact')
            ax.set_xlabel('x')
            ax.set_ylabel(name)
            ax.legend(loc='best')
            ax.set_xlim(*solution.mesh.x_range)

        label = solution.scheme_name or 'finite volume'
        fig.suptitle(title or f'{label} solution at t = {t:.4f}', fontsize=14)
        fig.tight_layout()
        return self._save(fig, filename)

    def plot_convergence(self, ncells, errors, order=None, title=None,
                         filename='convergence.png'):
        """
        Log-log plot of error against cell count.

        Parameters
        ----------
        ncells : sequence of int
        errors : sequence of float
        order : float, optional
            Draw a reference slope of this order
        """
        ncells = np.asarray(ncells, dtype=float)
        errors = np.asarray(errors, dtype=float)

        fig, ax = plt.subplots(figsize=(5, 4))
        ax.loglog(ncells, errors, 'o-', color=self.colors['numerical'], label='L1 error')
        if order is not None:
            ref = errors[0] * (ncells[0] / ncells) ** order
            ax.loglog(ncells, ref, '--', color='k', linewidth=0.8, label=f'order {order}')
        ax.set_xlabel('cells')
        ax.set_ylabel('error')
        ax.legend(loc='best')
        if title:
            ax.set_title(title)
        fig.tight_layout()
        return self._save(fig, filename)

    def create_animation(self, solution, exact=None, filename='animation.gif', fps=10):
        """
        Create animated GIF of solution evolution.

        Parameters
        ----------
        solution : FVSolution
            Trajectory; every recorded sample becomes a frame
        exact : callable, optional
            exact(x, t) drawn alongside the numerical solution
        filename : str
            Output filename
        fps : int
            Frames per second
        """
        x = solution.cell_centers
        nvars = solution.nvars
        fig, axes = plt.subplots(1, nvars, figsize=(4.5 * nvars + 1, 4), squeeze=False)
        axes = axes[0]

        lines_num = []
        lines_exact = []
        for k, (ax, name) in enumerate(zip(axes, self._labels(nvars))):
            line_num, = ax.plot([], [], 'o-', color=self.colors['numerical'],
                                markersize=1.5, linewidth=0.8, label='Numerical')
            lines_num.append(line_num)
            if exact is not None:
                line_exact, = ax.plot([], [], '-', color=self.colors['exact'],
                                      linewidth=1.5, label='Exact')
                lines_exact.append(line_exact)

            lo = np.min(solution.states[..., k])
            hi = np.max(solution.states[..., k])
            pad = 0.1 * (hi - lo) if hi > lo else 0.5
            ax.set_xlabel('x')
            ax.set_ylabel(name)
            ax.set_xlim(*solution.mesh.x_range)
            ax.set_ylim(lo - pad, hi + pad)
            ax.legend(loc='best')

        title = fig.suptitle('', fontsize=14)
        fig.tight_layout()

        def init():
            for line in lines_num + lines_exact:
                line.set_data([], [])
            return lines_num + lines_exact

        def animate(frame):
            t = solution.times[frame]
            u = solution.states[frame]
            for k, line in enumerate(lines_num):
                line.set_data(x, u[:, k])
            if exact is not None:
                u_ex = np.array([np.atleast_1d(exact(xi, t)) for xi in x])
                for k, line in enumerate(lines_exact):
                    line.set_data(x, u_ex[:, k])
            title.set_text(f't = {t:.4f}')
            return lines_num + lines_exact

        anim = FuncAnimation(fig, animate, init_func=init,
                             frames=len(solution), interval=1000 / fps, blit=True)

        filepath = os.path.join(self.output_dir, filename)
        anim.save(filepath, writer='pillow', fps=fps)
        plt.close(fig)
        print(f"Saved: {filepath}")
        return filepath

    def save_data(self, solution, filename='solution_data.npz'):
        """Save the trajectory to a NumPy archive."""
        filepath = os.path.join(self.output_dir, filename)
        np.savez(filepath, x=solution.cell_centers, t=solution.times, u=solution.states)
        print(f"Saved: {filepath}")
        return filepath

    def print_convergence_table(self, ncells, errors):
        """Print L1 errors and observed orders of a mesh refinement study."""
        print("\n" + "=" * 44)
        print("Convergence (L1 error)")
        print("=" * 44)
        print(f"{'Cells':<10} {'L1 Error':<18} {'Order':<10}")
        print("-" * 44)
        for i, (n, err) in enumerate(zip(ncells, errors)):
            if i == 0:
                order = '-'
            else:
                order = f"{np.log(errors[i - 1] / err) / np.log(n / ncells[i - 1]):.3f}"
            print(f"{n:<10d} {err:<18.6e} {order:<10}")
        print("=" * 44)
