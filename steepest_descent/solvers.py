from collections import namedtuple
from math import sqrt

import numpy as np

from steepest_descent.context import ReplicatedVector
from steepest_descent.problem import fill_rows, fill_columns

EPSILON = 10e-5
MAX_ITERATIONS = int(10e6)

# x: full solution, identical on every process
# iterations: number of updates applied to x
# residuals: |y| / |b| at every convergence check
SolveResult = namedtuple("SolveResult", ["x", "iterations", "converged", "residuals"])


def relative_residual(y_sq, b_sq):
    return sqrt(abs(y_sq / b_sq))


def is_solution_found(y_sq, b_sq, eps=EPSILON):
    return relative_residual(y_sq, b_sq) < eps


class Solver:
    """Steepest descent for A x = b with A distributed over the processes of ctx.comm.

    solve() is collective: every process of the communicator calls it with
    its own WorkerContext and every process gets the same SolveResult.
    problem is the (A_part, x0, b) triple of this process; by default it
    comes from generate(ctx).
    """

    variant = None
    generate = None

    def __init__(self, eps=EPSILON, max_iterations=MAX_ITERATIONS):
        if max_iterations < 0:
            raise ValueError(f"max_iterations must be >= 0, got {max_iterations}")
        self.eps = eps
        self.max_iterations = max_iterations

    def solve(self, ctx, problem=None):
        raise NotImplementedError

    def __repr__(self):
        return f"{type(self).__name__}(eps={self.eps}, max_iterations={self.max_iterations})"


class RowSolver(Solver):
    """A split by rows; x and b are replicated on every process."""

    variant = 1
    generate = staticmethod(fill_rows)

    def solve(self, ctx, problem=None):
        A_part, x0, b = problem if problem is not None else self.generate(ctx)
        x = ReplicatedVector(x0)
        block = ctx.block
        b_sq = np.dot(b, b)

        residuals = []
        iterations = 0
        converged = False
        while True:
            # y(k) = A x(k) - b, each process fills only its own rows
            y_part = np.zeros(ctx.n, dtype=np.float64)
            y_part[block] = A_part.dot(x.values) - b[block]
            y = ctx.allreduce(y_part)

            # y and b are full here, no reduction needed for the norms
            y_sq = np.dot(y, y)
            residuals.append(relative_residual(y_sq, b_sq))
            if is_solution_found(y_sq, b_sq, self.eps):
                converged = True
                break
            if iterations == self.max_iterations:
                break

            # t(k) = (y, Ay) / (Ay, Ay)
            Ay = A_part.dot(y)
            t_num, t_den = ctx.allreduce_pair(np.dot(y[block], Ay), np.dot(Ay, Ay))
            if t_den == 0.0:
                break

            # every process holds the same y, so the copies of x stay equal
            x.step(t_num / t_den, y)
            iterations += 1

        return SolveResult(x.copy(), iterations, converged, residuals)


class ColumnSolver(Solver):
    """A split by columns; each process keeps only its block of x and b."""

    variant = 2
    generate = staticmethod(fill_columns)

    def solve(self, ctx, problem=None):
        A_part, x_part, b_part = problem if problem is not None else self.generate(ctx)
        x_part = np.array(x_part, dtype=np.float64)
        block = ctx.block

        residuals = []
        iterations = 0
        converged = False
        while True:
            # y(k) = A x(k) - b, every column block touches all rows
            y_part = A_part.dot(x_part)
            y_part[block] -= b_part
            y_cut = ctx.allreduce(y_part)[block].copy()

            y_sq, b_sq = ctx.allreduce_pair(np.dot(y_cut, y_cut), np.dot(b_part, b_part))
            residuals.append(relative_residual(y_sq, b_sq))
            if is_solution_found(y_sq, b_sq, self.eps):
                converged = True
                break
            if iterations == self.max_iterations:
                break

            Ay_cut = ctx.allreduce(A_part.dot(y_cut))[block].copy()

            # t(k) = (y, Ay) / (Ay, Ay)
            t_num, t_den = ctx.allreduce_pair(np.dot(y_cut, Ay_cut), np.dot(Ay_cut, Ay_cut))
            if t_den == 0.0:
                break

            # disjoint blocks, so the sum is the next x
            x_next = np.zeros(ctx.n, dtype=np.float64)
            x_next[block] = x_part - (t_num / t_den) * y_cut
            x_part = ctx.allreduce(x_next)[block].copy()
            iterations += 1

        return SolveResult(ctx.allgather(x_part), iterations, converged, residuals)


SOLVERS = {
    RowSolver.variant: RowSolver,
    ColumnSolver.variant: ColumnSolver,
}


def make_solver(variant, **options):
    try:
        solver_class = SOLVERS[variant]
    except KeyError:
        raise ValueError(f"unknown variant {variant!r}, expected one of {sorted(SOLVERS)}") from None
    return solver_class(**options)
