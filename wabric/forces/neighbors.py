"""k-d tree neighbour search for the pairwise force terms.

The search runs on the host with scipy; the resulting pair lists are padded
to power-of-two capacities so the jitted force kernels see a small number
of distinct shapes.
"""

import math
from typing import Tuple

import numpy as np
from scipy.spatial import cKDTree


def neighbor_pairs(points: np.ndarray, cutoff: float) -> Tuple[np.ndarray, np.ndarray]:
    """Find all unordered pairs (i, j), i != j, closer than ``cutoff``.

    Args:
        points: Positions, shape (n, 2)
        cutoff: Interaction distance; ``inf`` returns every pair

    Returns:
        (i, j) int32 index arrays of equal length. Non-finite points are
        never paired.
    """
    points = np.asarray(points, dtype=np.float64)
    n = points.shape[0]
    empty = (np.zeros(0, dtype=np.int32), np.zeros(0, dtype=np.int32))
    if n < 2 or cutoff <= 0:
        return empty

    valid = np.all(np.isfinite(points), axis=1)
    ids = np.flatnonzero(valid)
    if ids.size < 2:
        return empty
    pts = points[ids]

    if math.isinf(cutoff):
        i, j = np.triu_indices(ids.size, k=1)
        return ids[i].astype(np.int32), ids[j].astype(np.int32)

    tree = cKDTree(pts)
    pairs = tree.query_pairs(cutoff, output_type="ndarray")
    if pairs.shape[0] == 0:
        return empty
    ii, jj = pairs[:, 0], pairs[:, 1]

    # query_pairs includes pairs exactly at the cutoff
    delta = pts[ii] - pts[jj]
    close = np.einsum("ij,ij->i", delta, delta) < cutoff * cutoff
    return ids[ii[close]].astype(np.int32), ids[jj[close]].astype(np.int32)


def padded_capacity(count: int, minimum: int = 64) -> int:
    """Smallest power of two >= count (and >= minimum)."""
    capacity = minimum
    while capacity < count:
        capacity *= 2
    return capacity


def pad_pairs(i: np.ndarray, j: np.ndarray) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Pad pair arrays to a power-of-two length.

    Returns:
        (i, j, mask) where mask is False on padding entries (which point at
        vertex 0 twice and must contribute nothing).
    """
    count = i.shape[0]
    capacity = padded_capacity(count)
    pi = np.zeros(capacity, dtype=np.int32)
    pj = np.zeros(capacity, dtype=np.int32)
    mask = np.zeros(capacity, dtype=bool)
    pi[:count] = i
    pj[:count] = j
    mask[:count] = True
    return pi, pj, mask
