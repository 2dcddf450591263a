# -*- coding: utf-8 -*-

# Copyright 1996-2015 PSERC. All rights reserved.
# Use of this source code is governed by a BSD-style
# license that can be found in the LICENSE file.

# Copyright (c) 2016-2025 by University of Kassel and Fraunhofer Institute for Energy Economics
# and Energy System Technology (IEE), Kassel. All rights reserved.

"""Solves the power flow using a fast decoupled method.
"""

from pfcore.network import get_ybus
from pfcore.pd2ppc import _get_ppci
from pfcore.pf.factorization import FactorizationCache, VersionedMatrix
from pfcore.pf.mismatch import evaluate_mismatch
from pfcore.pf.solver_base import BaseSolver
from pfcore.pypower.makeB import makeB


class FastDecoupled(BaseSolver):
    """Solves the power flow using a fast decoupled method.

    Uses the constant matrices B prime (active power / angles of the non slack buses) and
    B double prime (reactive power / magnitudes of the PQ buses) built by L{makeB}. Both are
    factorized once. A step solves the active half step, recomputes the reactive mismatch with
    the updated angles and solves the reactive half step.

    Before every evaluation and step the model signature of the network is compared with the
    one the matrices were built from. If it advanced, both matrices are rebuilt and
    refactorized (numerically only, as long as the pattern did not change).

    Convergence is judged on the raw power mismatch. The half steps solve for the mismatch
    divided by the voltage magnitudes.

    @author: Ray Zimmerman (PSERC Cornell)
    """
    algorithm = None
    variant = None

    def _setup(self):
        self.cache_p = FactorizationCache(self.options.factorization, self.options.permc_spec)
        self.cache_pp = FactorizationCache(self.options.factorization, self.options.permc_spec)
        self._checkpoint = None
        self._refresh()

    def _refresh(self):
        signature = self.net._signature
        checkpoint = (signature["pattern"], signature["model"])
        if checkpoint == self._checkpoint:
            return
        ppci = _get_ppci(self.net)
        Bp, Bpp = makeB(ppci["baseMVA"], ppci["bus"], ppci["branch"], self.variant)
        # reduce B matrices
        Bp = Bp[self.pvpq, :][:, self.pvpq]
        Bpp = Bpp[self.pq, :][:, self.pq]
        self.Bp = VersionedMatrix(Bp, *checkpoint)
        self.Bpp = VersionedMatrix(Bpp, *checkpoint)
        # factor B matrices
        if len(self.pvpq):
            self.cache_p.factorize(self.Bp)
        if len(self.pq):
            self.cache_pp.factorize(self.Bpp)
        self._checkpoint = checkpoint
        self.logger.debug("%s: B matrices for pattern %i, model %i"
                          % (self.__class__.__name__, checkpoint[0], checkpoint[1]))

    def _mismatch(self, normalize=False):
        return evaluate_mismatch(get_ybus(self.net).matrix, self.voltage.V, self._Sbus(),
                                 self.pvpq, self.pq, normalize=normalize)

    def evaluate_mismatch(self):
        self._sync_with_network()
        self._refresh()
        return self._mismatch()

    def step(self):
        self._sync_with_network()
        self._refresh()

        ## do P iteration, update Va
        if len(self.pvpq):
            P = self._mismatch(normalize=True).active
            dVa = -self.cache_p.solve(P)
            self.voltage.angle[self.pvpq] += dVa

        ## do Q iteration, update Vm
        if len(self.pq):
            Q = self._mismatch(normalize=True).reactive
            dVm = -self.cache_pp.solve(Q)
            self.voltage.magnitude[self.pq] += dVm

        self.iterations += 1


class FastDecoupledBX(FastDecoupled):
    algorithm = "fdbx"
    variant = "bx"


class FastDecoupledXB(FastDecoupled):
    algorithm = "fdxb"
    variant = "xb"
