import sys
import traceback

from mpi4py import MPI

from steepest_descent.context import WorkerContext
from steepest_descent.solvers import make_solver


def print_answer(x):
    for i, value in enumerate(x):
        print(f"x{i}: {value:.1f}")


def parse_arguments(argv):
    variant = int(argv[1])
    n = int(argv[2])
    if n < 1:
        raise ValueError(f"n must be a positive integer, got {n}")
    return make_solver(variant), n


def main(argv=None, comm=None):
    if argv is None:
        argv = sys.argv
    if comm is None:
        comm = MPI.COMM_WORLD
    rank = comm.Get_rank()

    if len(argv) != 3:
        if rank == 0:
            print("Wrong arguments number")
        return 0

    try:
        solver, n = parse_arguments(argv)
    except ValueError as e:
        if rank == 0:
            print(f"Invalid arguments: {e}", file=sys.stderr)
        return 1

    ctx = WorkerContext.create(n, comm)

    start_time = MPI.Wtime()
    try:
        result = solver.solve(ctx)
    except Exception:
        # a process that leaves the collectives would block the others forever
        print(f"[rank {rank}] solve failed", file=sys.stderr)
        traceback.print_exc()
        comm.Abort(1)
        raise
    end_time = MPI.Wtime()

    if rank == 0:
        print_answer(result.x)
        print(f"Work time: {end_time - start_time:.2f} seconds")
        if not result.converged:
            print(f"Did not converge within {result.iterations} iterations. "
                  f"Final error = {result.residuals[-1]}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
