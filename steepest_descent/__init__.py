from steepest_descent.partition import partition, calculate_idx, auxiliary_arrays_determination
from steepest_descent.context import WorkerContext, ReplicatedVector
from steepest_descent.solvers import (Solver, RowSolver, ColumnSolver, SolveResult,
                                      make_solver, is_solution_found, EPSILON, MAX_ITERATIONS)

__version__ = "0.1.0"
