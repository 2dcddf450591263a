# -*- coding: utf-8 -*-

# Copyright 1996-2015 PSERC. All rights reserved.
# Use of this source code is governed by a BSD-style
# license that can be found in the LICENSE file.

# Copyright (c) 2016-2025 by University of Kassel and Fraunhofer Institute for Energy Economics
# and Energy System Technology (IEE), Kassel. All rights reserved.

import numpy as np
from numba import jit

# entry kinds of the Jacobian, which part of dS_dV an entry is taken from
DVA_REAL = 0  # J11 = dS_dVa[pvpq, pvpq].real
DVM_REAL = 1  # J12 = dS_dVm[pvpq, pq].real
DVA_IMAG = 2  # J21 = dS_dVa[pq, pvpq].imag
DVM_IMAG = 3  # J22 = dS_dVm[pq, pq].imag


@jit(nopython=True, cache=True)
def create_J_structure(Yp, Yj, rows, n_active, va_lookup, vm_lookup, Jp, Jj, Jk, Jt):  # pragma: no cover
    """Calculates the sparsity structure of the Jacobian from the structure of Ybus.

        Input: Ybus index pointer and indices (Yp, Yj), the buses of all Jacobian rows (rows,
        the first n_active rows are active power equations, the others reactive power
        equations), the column of the angle and magnitude unknown of every bus (va_lookup,
        vm_lookup, -1 if the bus has no such unknown)

        OUTPUT: index pointer and indices of the Jacobian in CSR form (Jp, Jj), for every
        nonzero the position in the Ybus data (Jk) and the entry kind (Jt), the number of
        nonzeros

        J has the shape
        | J11 | J12 |               | (pvpq, pvpq) | (pvpq, pq) |
        | --------- | = dimensions: | ------------------------- |
        | J21 | J22 |               |  (pq, pvpq)  |  (pq, pq)  |

        The row and column pointer of dVm and dVa are the same as the one from Ybus, so an
        entry of J is always one entry of dS_dVa or dS_dVm. Per row the angle columns are
        added before the magnitude columns, which keeps the column indices sorted.
    """
    nnz = 0
    Jp[0] = 0
    for r in range(len(rows)):
        bus = rows[r]
        reactive = r >= n_active
        for k in range(Yp[bus], Yp[bus + 1]):
            cc = va_lookup[Yj[k]]
            if cc >= 0:
                Jj[nnz] = cc
                Jk[nnz] = k
                Jt[nnz] = DVA_IMAG if reactive else DVA_REAL
                nnz += 1
        for k in range(Yp[bus], Yp[bus + 1]):
            cc = vm_lookup[Yj[k]]
            if cc >= 0:
                Jj[nnz] = cc
                Jk[nnz] = k
                Jt[nnz] = DVM_IMAG if reactive else DVM_REAL
                nnz += 1
        Jp[r + 1] = nnz
    return nnz


@jit(nopython=True, cache=True)
def dS_dV_data(Yx, Yp, Yj, V):  # pragma: no cover
    """Partial derivatives of the bus power injections w.r.t. voltage magnitude and angle.

        Input: Ybus in CSR form (Yx = data, Yp = indptr, Yj = indices) and the bus voltages

        OUTPUT: data of dS_dVm and dS_dVa in the CSR structure of Ybus

        Entry (r, j) is
            dS_dVm = V[r] * conj(Y[r, j] * V[j] / |V[j]|)  (+ conj(I[r]) * V[r] / |V[r]| if r == j)
            dS_dVa = -1j * V[r] * conj(Y[r, j] * V[j])     (+ 1j * V[r] * conj(I[r]) if r == j)
        with the bus currents I = Ybus * V.
    """
    nb = len(Yp) - 1
    Vnorm = V / np.abs(V)
    Ibus = np.zeros(nb, dtype=np.complex128)
    for r in range(nb):
        for k in range(Yp[r], Yp[r + 1]):
            Ibus[r] += Yx[k] * V[Yj[k]]

    dS_dVm = np.empty_like(Yx)
    dS_dVa = np.empty_like(Yx)
    for r in range(nb):
        for k in range(Yp[r], Yp[r + 1]):
            j = Yj[k]
            dS_dVm[k] = V[r] * np.conj(Yx[k] * Vnorm[j])
            dS_dVa[k] = -1j * V[r] * np.conj(Yx[k] * V[j])
            if j == r:
                dS_dVm[k] += np.conj(Ibus[r]) * Vnorm[r]
                dS_dVa[k] += 1j * V[r] * np.conj(Ibus[r])
    return dS_dVm, dS_dVa


@jit(nopython=True, cache=True)
def fill_J(dVm_x, dVa_x, Jk, Jt, Jx):  # pragma: no cover
    """Writes the numeric values of the Jacobian into Jx, in place.

        Input: data of dS_dVm and dS_dVa in the CSR structure of Ybus, entry positions and kinds
        from create_J_structure
    """
    for e in range(len(Jx)):
        k = Jk[e]
        t = Jt[e]
        if t == DVA_REAL:
            Jx[e] = dVa_x[k].real
        elif t == DVM_REAL:
            Jx[e] = dVm_x[k].real
        elif t == DVA_IMAG:
            Jx[e] = dVa_x[k].imag
        else:
            Jx[e] = dVm_x[k].imag
