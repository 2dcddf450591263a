# -*- coding: utf-8 -*-

# Copyright (c) 2016-2025 by University of Kassel and Fraunhofer Institute for Energy Economics
# and Energy System Technology (IEE), Kassel. All rights reserved.

"""Solves a DC power flow.
"""

import numpy as np
from scipy.sparse import csr_matrix

from pfcore.network import get_bbus, get_dc_injections
from pfcore.pd2ppc import _get_ppci
from pfcore.pf.factorization import FactorizationCache, VersionedMatrix
from pfcore.pf.mismatch import Mismatch, make_mismatch
from pfcore.pf.solver_base import BaseSolver
from pfcore.pypower.idx_bus import GS, VA


def _pin_reference(Bbus, ref):
    """
    Replaces the rows and columns of the reference buses in Bbus by identity rows and columns.
    The structure of the result only depends on the structure of Bbus.
    """
    B = Bbus.tocoo()
    keep = ~np.isin(B.row, ref) & ~np.isin(B.col, ref)
    rows = np.r_[B.row[keep], ref]
    cols = np.r_[B.col[keep], ref]
    data = np.r_[B.data[keep], np.ones(len(ref))]
    pinned = csr_matrix((data, (rows, cols)), shape=Bbus.shape)
    pinned.sum_duplicates()
    pinned.sort_indices()
    return pinned


class DCPowerFlow(BaseSolver):
    """
    Direct solution of the linearized (DC) power flow B * Va = P.

    The reference bus is pinned to an angle of zero by replacing its row and column of B by an
    identity row and column. The pinned matrix carries the signatures of Bbus, so its
    factorization is reused as long as the network is not edited and refactorized numerically
    after parameter changes. Every step is exactly one linear solve. The configured angle of the
    reference bus is added to all angles afterwards.
    """
    algorithm = "dc"

    def _setup(self):
        self.cache = FactorizationCache(self.options.factorization, self.options.permc_spec)
        self.solved = False
        self.voltage.magnitude[:] = 1.

    def _rhs(self):
        ppci = _get_ppci(self.net)
        _, Pbusinj, _ = get_dc_injections(self.net)
        Pbus = self._Sbus().real - Pbusinj - ppci["bus"][:, GS] / ppci["baseMVA"]
        return Pbus

    def evaluate_mismatch(self):
        self._check_compatibility()
        if not self.solved:
            return Mismatch(np.full(len(self.pvpq), np.inf), np.array([]), np.inf, 0.)
        Bbus = get_bbus(self.net).matrix
        theta = self.voltage.angle - self.voltage.angle[self.ref]
        residual = Bbus * theta - self._rhs()
        return make_mismatch(residual[self.pvpq], np.array([]))

    def step(self):
        self._check_compatibility()
        bbus = get_bbus(self.net)
        b = self._rhs()
        b[self.ref] = 0.
        pinned = VersionedMatrix(_pin_reference(bbus.matrix, self.ref), bbus.pattern, bbus.model)
        self.cache.factorize(pinned)
        theta = self.cache.solve(b)
        theta[self.ref] = 0.

        va_ref = np.deg2rad(_get_ppci(self.net)["bus"][self.ref[0], VA])
        if va_ref != 0:
            theta += va_ref
        self.voltage.angle[:] = theta
        self.voltage.magnitude[:] = 1.
        self.solved = True
        self.iterations += 1
