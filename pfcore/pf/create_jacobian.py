# -*- coding: utf-8 -*-

# Copyright 1996-2015 PSERC. All rights reserved.
# Use of this source code is governed by a BSD-style
# license that can be found in the LICENSE file.

# Copyright (c) 2016-2025 by University of Kassel and Fraunhofer Institute for Energy Economics
# and Energy System Technology (IEE), Kassel. All rights reserved.

import logging

from numpy import float64, int64, int8, r_, arange, empty, zeros, ones
from scipy.sparse import csr_matrix as sparse, diags, vstack, hstack

from pfcore.pf.create_jacobian_numba import create_J_structure, dS_dV_data, fill_J

logger = logging.getLogger(__name__)


class JacobianStructure:
    """
    Sparsity structure of the Jacobian for one bus classification and one Ybus pattern.

    The unknowns are ordered as the angles of all non slack buses followed by the magnitudes of
    the PQ buses, both in ascending bus order. The rows are ordered the same way (active power
    equations of the non slack buses, reactive power equations of the PQ buses).
    The numeric values are refilled in place by update().
    """

    def __init__(self, Ybus, pvpq, pq):
        nb = Ybus.shape[0]
        n_active = len(pvpq)
        dim = n_active + len(pq)
        va_lookup = -ones(nb, dtype=int64)
        va_lookup[pvpq] = arange(n_active)
        vm_lookup = -ones(nb, dtype=int64)
        vm_lookup[pq] = arange(n_active, dim)
        rows = r_[pvpq, pq].astype(int64)

        # space preallocated is bigger than the actual structure -> reduced later on
        max_nnz = 4 * Ybus.nnz
        Jp = zeros(dim + 1, dtype=int64)
        Jj = empty(max_nnz, dtype=int64)
        Jk = empty(max_nnz, dtype=int64)
        Jt = empty(max_nnz, dtype=int8)
        nnz = create_J_structure(Ybus.indptr, Ybus.indices, rows, n_active, va_lookup,
                                 vm_lookup, Jp, Jj, Jk, Jt)

        self.Jk = Jk[:nnz].copy()
        self.Jt = Jt[:nnz].copy()
        self.J = sparse((zeros(nnz, dtype=float64), Jj[:nnz].copy(), Jp), shape=(dim, dim))
        logger.debug("created Jacobian structure of dimension %i with %i nonzeros" % (dim, nnz))

    def update(self, Ybus, V):
        """
        Writes the Jacobian at voltage V into the data of self.J and returns it.
        """
        dVm_x, dVa_x = dS_dV_data(Ybus.data, Ybus.indptr, Ybus.indices, V)
        fill_J(dVm_x, dVa_x, self.Jk, self.Jt, self.J.data)
        return self.J


def create_jacobian_matrix(Ybus, V, pvpq, pq):
    """
    Builds the Jacobian with sparse matrix algebra, without the cached structure. Slower than
    JacobianStructure, gives the same matrix.
    """
    Ibus = Ybus * V
    diagV = diags(V)
    diagI = diags(Ibus)
    diagVnorm = diags(V / abs(V))
    # derivatives of the complex bus injections w.r.t. magnitude and angle
    dS_dVm = (diagV * (Ybus * diagVnorm).conj() + diagI.conj() * diagVnorm).tocsr()
    dS_dVa = (1j * diagV * (diagI - Ybus * diagV).conj()).tocsr()

    J11 = dS_dVa[pvpq, :][:, pvpq].real
    if len(pq) == 0:
        return J11.tocsr()
    J12 = dS_dVm[pvpq, :][:, pq].real
    J21 = dS_dVa[pq, :][:, pvpq].imag
    J22 = dS_dVm[pq, :][:, pq].imag
    J = vstack([
        hstack([J11, J12]),
        hstack([J21, J22])
    ], format="csr")
    return J
