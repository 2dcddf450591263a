# -*- coding: utf-8 -*-

# Copyright (c) 1996-2015 PSERC. All rights reserved.
# Use of this source code is governed by a BSD-style
# license that can be found in the LICENSE file.

# Copyright (c) 2016-2025 by University of Kassel and Fraunhofer Institute for Energy Economics
# and Energy System Technology (IEE), Kassel. All rights reserved.

"""Solves the power flow using a Gauss-Seidel method.
"""

import numpy as np
from numba import jit

from pfcore.network import get_ybus
from pfcore.pf.mismatch import evaluate_mismatch_gs
from pfcore.pf.solver_base import BaseSolver


@jit(nopython=True, cache=True)
def _row_current(Yx, Yp, Yj, V, k):  # pragma: no cover
    I = 0j
    for jj in range(Yp[k], Yp[k + 1]):
        I += Yx[jj] * V[Yj[jj]]
    return I


@jit(nopython=True, cache=True)
def _diagonal(Yx, Yp, Yj, k):  # pragma: no cover
    for jj in range(Yp[k], Yp[k + 1]):
        if Yj[jj] == k:
            return Yx[jj]
    return 0j


@jit(nopython=True, cache=True)
def gauss_seidel_sweep(Yx, Yp, Yj, V, Sbus, pq, pv, vm_set):  # pragma: no cover
    """
    One in place Gauss-Seidel sweep over the CSR arrays of Ybus. V is updated bus by bus, every
    bus uses the latest values of its neighbours. The magnitudes of the PV buses are rescaled to
    vm_set afterwards.
    """
    ## update voltage
    ## at PQ buses
    for i in range(len(pq)):
        k = pq[i]
        V[k] = V[k] + (np.conj(Sbus[k] / V[k]) - _row_current(Yx, Yp, Yj, V, k)) \
            / _diagonal(Yx, Yp, Yj, k)

    ## at PV buses
    for i in range(len(pv)):
        k = pv[i]
        q = (V[k] * np.conj(_row_current(Yx, Yp, Yj, V, k))).imag
        s = Sbus[k].real + 1j * q
        V[k] = V[k] + (np.conj(s / V[k]) - _row_current(Yx, Yp, Yj, V, k)) \
            / _diagonal(Yx, Yp, Yj, k)
    for i in range(len(pv)):
        k = pv[i]
        V[k] = vm_set[i] * V[k] / np.abs(V[k])


class GaussSeidel(BaseSolver):
    """Solves the power flow using a Gauss-Seidel method.

    The voltages are kept in rectangular form. No linear system is solved, the factorization
    option is ignored.

    @author: Ray Zimmerman (PSERC Cornell)
    @author: Alberto Borghetti (University of Bologna, Italy)
    """
    algorithm = "gs"

    def evaluate_mismatch(self):
        self._sync_with_network()
        Ybus = get_ybus(self.net).matrix
        return evaluate_mismatch_gs(Ybus, self.voltage.V, self._Sbus(), self.pv, self.pq)

    def step(self):
        self._sync_with_network()
        Ybus = get_ybus(self.net).matrix
        Sbus = self._Sbus().astype(np.complex128)
        # the sweep works on the rectangular form
        V = self.voltage.V
        gauss_seidel_sweep(Ybus.data, Ybus.indptr, Ybus.indices, V, Sbus,
                           self.pq.astype(np.int64), self.pv.astype(np.int64),
                           self._voltage_setpoints()[self.pv])
        self.voltage.set_complex(V)
        self.iterations += 1
