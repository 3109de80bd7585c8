from mpi4py import MPI
import numpy as np

from steepest_descent.partition import partition, auxiliary_arrays_determination


class WorkerContext:
    """Indexing context of one process: problem size n, its block [idx, idx + m) and the communicator."""

    def __init__(self, n, m, idx, rank, size, comm):
        self.n = n
        self.m = m
        self.idx = idx
        self.rank = rank
        self.size = size
        self.comm = comm

    @classmethod
    def create(cls, n, comm=None):
        if comm is None:
            comm = MPI.COMM_WORLD
        rank = comm.Get_rank()
        size = comm.Get_size()
        idx, m = partition(n, size, rank)
        return cls(n, m, idx, rank, size, comm)

    @property
    def block(self):
        return slice(self.idx, self.idx + self.m)

    def allreduce(self, local):
        # collective: every process of comm must call it in the same order
        sendbuf = np.ascontiguousarray(local, dtype=np.float64)
        recvbuf = np.empty_like(sendbuf)
        self.comm.Allreduce([sendbuf, MPI.DOUBLE], [recvbuf, MPI.DOUBLE], op=MPI.SUM)
        return recvbuf

    def allreduce_pair(self, first, second):
        result = self.allreduce(np.array([first, second], dtype=np.float64))
        return result[0], result[1]

    def allgather(self, local):
        """Concatenate the blocks of all processes into a full-length vector, on every process."""
        rcounts, displs = auxiliary_arrays_determination(self.n, self.size)
        sendbuf = np.ascontiguousarray(local, dtype=np.float64)
        recvbuf = np.empty(self.n, dtype=np.float64)
        self.comm.Allgatherv([sendbuf, MPI.DOUBLE], [recvbuf, rcounts, displs, MPI.DOUBLE])
        return recvbuf

    def __repr__(self):
        return (f"WorkerContext(n={self.n}, m={self.m}, idx={self.idx}, "
                f"rank={self.rank}, size={self.size})")


class ReplicatedVector:
    """Full-length vector held identically by every process.

    Copies stay equal because the only way to change one is step(),
    which must be fed with globally reduced values.
    """

    def __init__(self, values):
        self._values = np.array(values, dtype=np.float64)

    @classmethod
    def zeros(cls, n):
        return cls(np.zeros(n, dtype=np.float64))

    @property
    def values(self):
        view = self._values.view()
        view.flags.writeable = False
        return view

    def __len__(self):
        return len(self._values)

    def step(self, t, direction):
        # x(k+1) = x(k) - t * y(k)
        self._values -= t * direction

    def copy(self):
        return self._values.copy()
