"""Tests for plotting and data export."""

import os

import numpy as np
import pytest

from conservation_laws_1d import FVSolution, Uniform1DMesh, Periodic
from conservation_laws_1d.visualization import Visualizer


@pytest.fixture
def solution():
    mesh = Uniform1DMesh(16, (0.0, 1.0), Periodic(), Periodic())
    x = mesh.cell_centers
    times = [0.0, 0.1, 0.2]
    states = [np.sin(2 * np.pi * (x - t))[:, None] for t in times]
    return FVSolution(mesh, times, states, scheme_name='lf')


def test_plot_solution(tmp_path, solution):
    viz = Visualizer(output_dir=str(tmp_path))
    path = viz.plot_solution(solution, exact=lambda x, t: np.sin(2 * np.pi * (x - t)))
    assert os.path.isfile(path)


def test_plot_system(tmp_path):
    mesh = Uniform1DMesh(8)
    sol = FVSolution(mesh, [0.0], np.ones((1, 8, 3)))
    viz = Visualizer(output_dir=str(tmp_path), labels=['rho', 'rho u', 'E'])
    assert os.path.isfile(viz.plot_solution(sol, filename='system.png'))


def test_plot_convergence(tmp_path):
    viz = Visualizer(output_dir=str(tmp_path))
    path = viz.plot_convergence([40, 80, 160], [0.1, 0.05, 0.025], order=1)
    assert os.path.isfile(path)


def test_animation(tmp_path, solution):
    viz = Visualizer(output_dir=str(tmp_path))
    path = viz.create_animation(solution, fps=5)
    assert os.path.isfile(path)


def test_save_data(tmp_path, solution):
    viz = Visualizer(output_dir=str(tmp_path))
    path = viz.save_data(solution)
    data = np.load(path)
    assert data['u'].shape == (3, 16, 1)
    np.testing.assert_allclose(data['t'], [0.0, 0.1, 0.2])


def test_convergence_table(tmp_path, capsys):
    viz = Visualizer(output_dir=str(tmp_path))
    viz.print_convergence_table([40, 80], [0.1, 0.025])
    out = capsys.readouterr().out
    assert "2.000" in out
