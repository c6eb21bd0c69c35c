#!/usr/bin/env python3
"""
1D Conservation Law Solver - Main Program

Discretizes a test problem in space with a finite volume scheme and
advances it with an explicit SSP Runge-Kutta method under CFL control.

Usage:
    python -m conservation_laws_1d.main [options]

Options:
    --problem      'advection', 'burgers' or 'sod' (default: 'advection')
    --scheme       'lf', 'llf' or 'tecno' (default: 'lf')
    --order        TeCNO order 2-5 (default: 2)
    --ncells       Number of cells (default: 100)
    --cfl          CFL number (default: 0.5)
    --t_end        Final time (default: problem specific)
    --threads      Worker threads for the right-hand side (default: 1)
    --convergence  Run a mesh refinement study 40 -> 320 cells
    --output_dir   Output directory (default: 'output/results')
    --no_plots     Skip plot generation
    --verbose      Print detailed progress
"""

import argparse
import logging
import sys
import time

import numpy as np

from .cfl import CFLController
from .errors import ConfigurationError, ConservationLawError
from .integrators import STEPPERS, march
from .mesh import Uniform1DMesh
from .problems import PROBLEMS
from .schemes import SCHEME_NAMES, make_scheme
from .semidiscretization import SemiDiscretization


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description='1D Finite Volume Conservation Law Solver',
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )

    parser.add_argument('--problem', type=str, default='advection',
                        choices=sorted(PROBLEMS),
                        help='Test problem')
    parser.add_argument('--scheme', type=str, default='lf',
                        choices=SCHEME_NAMES,
                        help='Numerical flux scheme')
    parser.add_argument('--order', type=int, default=2, choices=[2, 3, 4, 5],
                        help='TeCNO order')
    parser.add_argument('--ncells', type=int, default=100,
                        help='Number of grid cells')
    parser.add_argument('--cfl', type=float, default=0.5,
                        help='CFL number for stability')
    parser.add_argument('--t_end', type=float, default=None,
                        help='Final simulation time (problem default if omitted)')
    parser.add_argument('--method', type=str, default='ssprk33',
                        choices=sorted(STEPPERS),
                        help='Time integrator')
    parser.add_argument('--threads', type=int, default=1,
                        help='Worker threads for the right-hand side')
    parser.add_argument('--convergence', action='store_true',
                        help='Run a mesh refinement study (40, 80, 160, 320 cells)')
    parser.add_argument('--output_dir', type=str, default='output/results',
                        help='Output directory')
    parser.add_argument('--no_plots', action='store_true',
                        help='Skip plot generation')
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Print detailed progress')

    return parser.parse_args(argv)


def run(problem, scheme_name='lf', order=2, ncells=100, cfl=0.5, t_end=None,
        method='ssprk33', threads=1):
    """
    Discretize and solve one problem.

    Parameters
    ----------
    problem : Problem
        Test problem
    scheme_name : str
        'lf', 'llf' or 'tecno'
    order : int
        TeCNO order
    ncells : int
        Number of cells
    cfl : float
        CFL number
    t_end : float, optional
        Final time (problem default if None)
    method : str
        Time integrator
    threads : int
        Worker threads for the right-hand side

    Returns
    -------
    solution : FVSolution
    """
    left, right = problem.boundaries
    mesh = Uniform1DMesh(ncells, problem.x_range, left, right)
    scheme = make_scheme(scheme_name, order=order, ec_flux=problem.ec_flux)
    semidiscretization = SemiDiscretization(mesh, problem.flux, scheme, threads=threads)
    controller = CFLController(mesh, problem.flux, cfl=cfl)

    u0 = semidiscretization.initial_state(problem.u0)
    return march(semidiscretization, u0, t_end or problem.t_end,
                 controller=controller, method=method)


def convergence_study(problem, scheme_name='lf', order=2, ncells=(40, 80, 160, 320),
                      cfl=0.5, t_end=None, method='ssprk33', threads=1):
    """
    L1 errors against the exact solution on a sequence of meshes.

    Returns
    -------
    ncells : list of int
    errors : list of float
    """
    if problem.exact is None:
        raise ConfigurationError(f"Problem '{problem.name}' has no exact solution")
    errors = []
    for n in ncells:
        solution = run(problem, scheme_name, order, n, cfl, t_end, method, threads)
        errors.append(solution.l1_error(problem.exact))
    return list(ncells), errors


def main(argv=None):
    """Main entry point."""
    args = parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format='%(name)s - %(levelname)s - %(message)s')

    problem = PROBLEMS[args.problem]()
    if args.scheme == 'tecno' and problem.ec_flux is None:
        print(f"ERROR: problem '{args.problem}' has no entropy-conservative flux for TeCNO")
        return 1
    t_end = args.t_end if args.t_end is not None else problem.t_end
    scheme_label = f"{args.scheme.upper()}" + (f"{args.order}" if args.scheme == 'tecno' else '')

    print("=" * 60)
    print("1D Finite Volume Conservation Law Solver")
    print("=" * 60)

    # Print configuration
    print(f"\nConfiguration:")
    print(f"  Problem:       {problem.name}")
    print(f"  Scheme:        {scheme_label}")
    print(f"  Grid cells:    {args.ncells}")
    print(f"  CFL number:    {args.cfl}")
    print(f"  Final time:    {t_end}")
    print(f"  Integrator:    {args.method}")
    print(f"  Threads:       {args.threads}")
    print(f"  Output dir:    {args.output_dir}")

    try:
        if args.convergence:
            print("\n" + "-" * 60)
            print("Running convergence study...")
            ncells, errors = convergence_study(problem, args.scheme, args.order, cfl=args.cfl,
                                               t_end=t_end, method=args.method,
                                               threads=args.threads)
            if args.no_plots:
                for n, err in zip(ncells, errors):
                    print(f"  {n:5d} cells: L1 error = {err:.6e}")
            else:
                from .visualization import Visualizer
                viz = Visualizer(output_dir=args.output_dir)
                viz.print_convergence_table(ncells, errors)
                viz.plot_convergence(ncells, errors,
                                     title=f'{problem.name}: {scheme_label}')
            return 0

        print("\n" + "-" * 60)
        print("Running simulation...")
        start_time = time.time()
        solution = run(problem, args.scheme, args.order, args.ncells, args.cfl, t_end,
                       args.method, args.threads)
        elapsed = time.time() - start_time
        print(f"Simulation completed in {elapsed:.2f} seconds "
              f"({len(solution) - 1} steps)")
    except ConservationLawError as exc:
        print(f"ERROR: {exc}")
        return 1

    u = solution.final_state
    for k in range(u.shape[1]):
        print(f"  Variable {k}: min={np.min(u[:, k]):.4f}, max={np.max(u[:, k]):.4f}")

    if problem.exact is not None:
        errors = solution.errors(problem.exact)
        print(f"  L1 error:   {errors['L1'][0]:.6e}")
        print(f"  Linf error: {errors['Linf'][0]:.6e}")

    if not args.no_plots:
        from .visualization import Visualizer
        print("\n" + "-" * 60)
        print("Generating visualizations...")
        viz = Visualizer(output_dir=args.output_dir, labels=problem.labels)
        viz.plot_solution(solution, exact=problem.exact,
                          title=f'{problem.name}: {scheme_label}, N={args.ncells}, t={t_end}')
        viz.save_data(solution)

    print("\n" + "=" * 60)
    print("Done")
    print("=" * 60)
    return 0


if __name__ == '__main__':
    sys.exit(main())
