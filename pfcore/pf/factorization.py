# -*- coding: utf-8 -*-

# Copyright (c) 2016-2025 by University of Kassel and Fraunhofer Institute for Energy Economics
# and Energy System Technology (IEE), Kassel. All rights reserved.

"""
Reusable sparse factorizations of the linear systems of the power flow solvers.

A factorization is keyed on the (pattern, model) signatures of the matrix it was built from:

    - no factorization yet or different pattern: full build (ordering + numeric factorization)
    - same pattern, different model: numeric refactorization with the stored ordering
    - same pattern and model: the stored factorization is reused as is
"""

import logging

import numpy as np
from scipy.linalg import qr, solve_triangular
from scipy.sparse.linalg import splu

from pfcore.auxiliary import SingularSystem

logger = logging.getLogger(__name__)

FACTORIZATION_KINDS = ("lu", "ldlt", "qr")


class VersionedMatrix:
    """
    Sparse matrix together with the pattern and model signatures of the network state it was
    built from.
    """

    def __init__(self, matrix, pattern, model):
        self.matrix = matrix
        self.pattern = pattern
        self.model = model

    @property
    def shape(self):
        return self.matrix.shape

    def __repr__(self):  # pragma: no cover
        return "%s(shape=%s, nnz=%i, pattern=%i, model=%i)" % (
            self.__class__.__name__, self.matrix.shape, self.matrix.nnz, self.pattern,
            self.model)


class FactorizationHandle:
    """
    Opaque numeric factorization of one matrix. Knows the signatures and the structure of the
    matrix it was built from and the fill reducing ordering that was used.
    """

    def __init__(self, kind, solve, shape, nnz, ordering=None, pattern=None, model=None):
        self.kind = kind
        self.shape = shape
        self.nnz = nnz
        self.ordering = ordering
        self.pattern = pattern
        self.model = model
        self._solve = solve

    def solve(self, b):
        return self._solve(b)


class FactorizationCache:
    """
    Owns the factorization of one linear system of a solver and decides whether it has to be
    built, numerically refactorized or can be reused.

    INPUT:
        **kind** (str, "lu") - "lu" (SuperLU), "ldlt" (SuperLU in symmetric mode with diagonal
        pivoting, only for symmetric matrices) or "qr" (pivoted QR)

        **permc_spec** (str, None) - column ordering for the "lu" kind, see
        scipy.sparse.linalg.splu. COLAMD if None.
    """

    def __init__(self, kind="lu", permc_spec=None):
        if kind not in FACTORIZATION_KINDS:
            raise ValueError("Unknown factorization %s, valid kinds are %s"
                             % (kind, FACTORIZATION_KINDS))
        self.kind = kind
        self.permc_spec = permc_spec
        self.handle = None
        self.builds = 0
        self.refactorizations = 0
        self.solves = 0

    def factorize(self, versioned):
        """
        Returns a factorization of versioned.matrix, built, refactorized or reused depending on
        its signatures.
        """
        handle = self.handle
        if handle is None or handle.pattern != versioned.pattern or \
                handle.shape != versioned.shape:
            logger.debug("%s: full factorization (pattern %s)" % (self.kind, versioned.pattern))
            handle = self.build(versioned.matrix, versioned.pattern, versioned.model)
        elif handle.model != versioned.model:
            logger.debug("%s: numeric refactorization (model %s)" % (self.kind, versioned.model))
            handle = self.rebuild_numeric(handle, versioned.matrix, versioned.model)
        self.handle = handle
        return handle

    def build(self, matrix, pattern=None, model=None):
        """
        Computes the ordering and the numeric factorization of matrix.
        """
        A = matrix.tocsc().astype(np.float64)
        if self.kind == "lu":
            lu = _splu(A, permc_spec=self.permc_spec or "COLAMD")
            handle = FactorizationHandle("lu", lu.solve, A.shape, A.nnz,
                                         ordering=np.argsort(lu.perm_c))
        elif self.kind == "ldlt":
            _warn_if_unsymmetric(A)
            lu = _splu(A, permc_spec="MMD_AT_PLUS_A", diag_pivot_thresh=0.,
                       options=dict(SymmetricMode=True))
            handle = FactorizationHandle("ldlt", lu.solve, A.shape, A.nnz,
                                         ordering=np.argsort(lu.perm_c))
        else:
            handle = _qr_handle(A)
        handle.pattern = pattern
        handle.model = model
        self.builds += 1
        self.handle = handle
        return handle

    def rebuild_numeric(self, handle, matrix, model=None):
        """
        Refactorizes matrix numerically, reusing the ordering of handle. matrix must have the
        same shape and number of nonzeros as the matrix handle was built from.
        """
        A = matrix.tocsc().astype(np.float64)
        if A.shape != handle.shape or A.nnz != handle.nnz:
            raise ValueError("Structure of the matrix differs from the factorized one "
                             "(shape %s, nnz %i instead of shape %s, nnz %i)"
                             % (A.shape, A.nnz, handle.shape, handle.nnz))
        order = handle.ordering
        if self.kind == "lu":
            lu = _splu(A[:, order], permc_spec="NATURAL")

            def solve(b):
                x = np.empty_like(b, dtype=np.float64)
                x[order] = lu.solve(b)
                return x
        elif self.kind == "ldlt":
            lu = _splu(A[order, :][:, order], permc_spec="NATURAL", diag_pivot_thresh=0.,
                       options=dict(SymmetricMode=True))

            def solve(b):
                x = np.empty_like(b, dtype=np.float64)
                x[order] = lu.solve(b[order])
                return x
        else:
            # pivoted QR has no numeric only path
            solve = _qr_handle(A)._solve
        new_handle = FactorizationHandle(self.kind, solve, A.shape, A.nnz, ordering=order,
                                         pattern=handle.pattern, model=model)
        self.refactorizations += 1
        self.handle = new_handle
        return new_handle

    def solve(self, b):
        if self.handle is None:
            raise UserWarning("Nothing has been factorized yet")
        self.solves += 1
        return self.handle.solve(np.asarray(b, dtype=np.float64))


def _splu(A, **kwargs):
    try:
        return splu(A, **kwargs)
    except RuntimeError as e:
        raise SingularSystem("Factorization failed, the system matrix is singular: %s" % e) \
            from e


def _warn_if_unsymmetric(A):
    asym = abs(A - A.T)
    if asym.nnz and asym.max() > 1e-10 * max(abs(A).max(), 1.):
        logger.warning("LDLt factorization of an unsymmetric matrix, the solution will be wrong")


def _qr_handle(A):
    """
    Pivoted (rank revealing) QR of A. For rank deficient matrices the basic solution is
    returned.
    """
    n = A.shape[1]
    Q, R, perm = qr(A.toarray(), pivoting=True)
    diag = np.abs(np.diag(R))
    tol = diag[0] * max(A.shape) * np.finfo(float).eps if len(diag) else 0.
    rank = int(np.sum(diag > tol))
    if rank == 0 and n > 0:
        raise SingularSystem("QR factorization of a zero matrix")
    if rank < n:
        logger.warning("QR factorization: matrix is rank deficient (rank %i of %i), the basic "
                       "solution is returned" % (rank, n))

    def solve(b):
        y = np.zeros(n, dtype=np.float64)
        y[:rank] = solve_triangular(R[:rank, :rank], Q[:, :rank].T @ b)
        x = np.empty(n, dtype=np.float64)
        x[perm] = y
        return x

    return FactorizationHandle("qr", solve, A.shape, A.nnz, ordering=perm)
