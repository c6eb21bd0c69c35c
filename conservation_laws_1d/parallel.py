"""
Fork-join parallel loop over disjoint index ranges.

Work is split into contiguous chunks, one per thread. Each chunk must only
write to its own output slice and only read shared inputs, so no locking
is needed. NumPy releases the GIL inside its kernels, which is where the
per-node work spends its time.
"""

from concurrent.futures import ThreadPoolExecutor

import numpy as np


def partition(n, nchunks):
    """
    Split range(n) into at most ``nchunks`` contiguous (start, stop) pairs.

    Parameters
    ----------
    n : int
        Number of indices
    nchunks : int
        Requested number of chunks

    Returns
    -------
    chunks : list of tuple
    """
    nchunks = max(1, min(int(nchunks), n))
    bounds = np.linspace(0, n, nchunks + 1).astype(int)
    return [(int(a), int(b)) for a, b in zip(bounds[:-1], bounds[1:]) if b > a]


def parallel_for(func, n, threads=1):
    """
    Call func(start, stop) over a static partition of range(n).

    Parameters
    ----------
    func : callable
        Kernel writing results for indices start..stop-1
    n : int
        Number of indices
    threads : int
        Number of worker threads; 1 runs inline

    Raises
    ------
    Exception
        The first exception raised by any chunk is re-raised.
    """
    if n <= 0:
        return
    if threads is None or threads <= 1:
        func(0, n)
        return
    chunks = partition(n, threads)
    with ThreadPoolExecutor(max_workers=len(chunks)) as pool:
        futures = [pool.submit(func, start, stop) for start, stop in chunks]
        for future in futures:
            future.result()
