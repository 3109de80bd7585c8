from numpy import empty, int32


def _check(n, numprocs, rank=0):
    if numprocs < 1:
        raise ValueError(f"numprocs must be >= 1, got {numprocs}")
    if not 0 <= rank < numprocs:
        raise ValueError(f"rank {rank} is outside [0, {numprocs})")
    if n < 0:
        raise ValueError(f"n must be >= 0, got {n}")


def calculate_idx(n, numprocs, rank):
    # each earlier process takes its share of what is still left
    _check(n, numprocs, rank)
    idx = 0
    for i in range(rank):
        idx += (n - idx) // (numprocs - i)
    return idx


def partition(n, numprocs, rank):
    """Return (idx, m): the first global index and the length of the block owned by rank."""
    idx = calculate_idx(n, numprocs, rank)
    m = (n - idx) // (numprocs - rank)
    return idx, m


def auxiliary_arrays_determination(n, numprocs):
    _check(n, numprocs)
    rcounts = empty(numprocs, dtype=int32)
    displs = empty(numprocs, dtype=int32)
    for k in range(numprocs):
        displs[k], rcounts[k] = partition(n, numprocs, k)
    return rcounts, displs
