import numpy as np

# A[i][j] = 2 on the diagonal, 1 elsewhere; b[i] = n + 1, so x = (1, ..., 1)


def fill_rows(ctx):
    """Row block of A (m x n), zero initial guess and the full right-hand side."""
    n, m, idx = ctx.n, ctx.m, ctx.idx
    A_part = np.ones((m, n), dtype=np.float64)
    A_part[np.arange(m), idx + np.arange(m)] = 2.0
    x = np.zeros(n, dtype=np.float64)
    b = np.full(n, n + 1.0, dtype=np.float64)
    return A_part, x, b


def fill_columns(ctx):
    """Column block of A (n x m), local part of the initial guess and of b."""
    n, m, idx = ctx.n, ctx.m, ctx.idx
    A_part = np.ones((n, m), dtype=np.float64)
    A_part[idx + np.arange(m), np.arange(m)] = 2.0
    x_part = np.zeros(m, dtype=np.float64)
    b_part = np.full(m, n + 1.0, dtype=np.float64)
    return A_part, x_part, b_part


def exact_solution(n):
    return np.ones(n, dtype=np.float64)


def row_blocks(ctx, A, b, x0=None):
    """Cut a full system into the row-variant problem of this process."""
    A = np.asarray(A, dtype=np.float64)
    x = np.zeros(ctx.n) if x0 is None else np.array(x0, dtype=np.float64)
    return A[ctx.block, :].copy(), x, np.array(b, dtype=np.float64)


def column_blocks(ctx, A, b, x0=None):
    """Cut a full system into the column-variant problem of this process."""
    A = np.asarray(A, dtype=np.float64)
    x_part = np.zeros(ctx.m) if x0 is None else np.array(x0, dtype=np.float64)[ctx.block]
    return A[:, ctx.block].copy(), x_part, np.array(b, dtype=np.float64)[ctx.block]
