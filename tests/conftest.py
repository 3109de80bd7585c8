import threading

import numpy as np
import pytest


class WorkerAborted(Exception):
    pass


class ThreadGroup:
    """State shared by the threads that stand in for the processes of one communicator."""

    def __init__(self, size, timeout=30):
        self.size = size
        self.slots = [None] * size
        self.barrier = threading.Barrier(size, timeout=timeout)

    def allreduce(self, rank, local):
        self.slots[rank] = np.array(local, dtype=np.float64, copy=True)
        self.barrier.wait()
        # same summation order on every rank
        total = self.slots[0].copy()
        for part in self.slots[1:]:
            total += part
        self.barrier.wait()
        return total

    def allgather(self, rank, local):
        self.slots[rank] = np.array(local, dtype=np.float64, copy=True)
        self.barrier.wait()
        total = np.concatenate(self.slots)
        self.barrier.wait()
        return total


class ThreadComm:
    """Subset of the mpi4py communicator used by steepest_descent, backed by threads."""

    def __init__(self, group, rank):
        self.group = group
        self.rank = rank

    def Get_rank(self):
        return self.rank

    def Get_size(self):
        return self.group.size

    def Allreduce(self, sendbuf, recvbuf, op=None):
        send = sendbuf[0] if isinstance(sendbuf, (list, tuple)) else sendbuf
        recv = recvbuf[0] if isinstance(recvbuf, (list, tuple)) else recvbuf
        recv[...] = self.group.allreduce(self.rank, send)

    def Allgatherv(self, sendbuf, recvbuf):
        send = sendbuf[0] if isinstance(sendbuf, (list, tuple)) else sendbuf
        recv, rcounts, displs = recvbuf[0], recvbuf[1], recvbuf[2]
        gathered = self.group.allgather(self.rank, send)
        offset = 0
        for count, displ in zip(rcounts, displs):
            recv[displ:displ + count] = gathered[offset:offset + count]
            offset += count

    def Abort(self, errorcode=0):
        self.group.barrier.abort()
        raise WorkerAborted(errorcode)


def run_workers(size, target):
    """Run target(comm) on size threads and return the per-rank results."""
    group = ThreadGroup(size)
    results = [None] * size
    errors = [None] * size

    def worker(rank):
        try:
            results[rank] = target(ThreadComm(group, rank))
        except Exception as e:
            errors[rank] = e
            group.barrier.abort()

    threads = [threading.Thread(target=worker, args=(rank,)) for rank in range(size)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    for error in errors:
        if error is not None and not isinstance(error, threading.BrokenBarrierError):
            raise error
    for error in errors:
        if error is not None:
            raise error
    return results


@pytest.fixture
def workers():
    return run_workers
