# -*- coding: utf-8 -*-

# Copyright 1996-2015 PSERC. All rights reserved.
# Use of this source code is governed by a BSD-style
# license that can be found in the LICENSE file.

# Copyright (c) 2016-2025 by University of Kassel and Fraunhofer Institute for Energy Economics
# and Energy System Technology (IEE), Kassel. All rights reserved.

"""Solves the power flow using a full Newton's method.
"""

from pfcore.network import get_ybus
from pfcore.pf.create_jacobian import JacobianStructure
from pfcore.pf.factorization import FactorizationCache, VersionedMatrix
from pfcore.pf.mismatch import evaluate_mismatch, stacked
from pfcore.pf.solver_base import BaseSolver


class NewtonRaphson(BaseSolver):
    """Solves the power flow using a full Newton's method.

    Unknowns are the angles of all non slack buses and the magnitudes of the PQ buses. Every
    step refills the numeric values of the Jacobian in place, factorizes it through the
    factorization cache (the ordering is computed once per Jacobian structure) and subtracts
    the solution of J * dx = F from the unknowns.

    The Jacobian structure is derived once from the Ybus pattern and the bus classification and
    only rebuilt when the Ybus pattern changes.

    @author: Ray Zimmerman (PSERC Cornell)
    @author: Richard Lincoln

    Modified by University of Kassel (Florian Schaefer) to use numba
    """
    algorithm = "nr"

    def _setup(self):
        self.cache = FactorizationCache(self.options.factorization, self.options.permc_spec)
        self._structure = None
        self._structure_pattern = None
        # signatures of the Jacobian, pattern counts structure builds, model counts refills
        self._jacobian_pattern = 0
        self._jacobian_model = 0

    def evaluate_mismatch(self):
        self._sync_with_network()
        ybus = get_ybus(self.net)
        return evaluate_mismatch(ybus.matrix, self.voltage.V, self._Sbus(), self.pvpq, self.pq)

    def jacobian(self):
        """
        Returns the Jacobian at the current voltage as VersionedMatrix.
        """
        ybus = get_ybus(self.net)
        if self._structure is None or self._structure_pattern != ybus.pattern:
            self._structure = JacobianStructure(ybus.matrix, self.pvpq, self.pq)
            self._structure_pattern = ybus.pattern
            self._jacobian_pattern += 1
        J = self._structure.update(ybus.matrix, self.voltage.V)
        self._jacobian_model += 1
        return VersionedMatrix(J, self._jacobian_pattern, self._jacobian_model)

    def step(self):
        # residual at the current voltage
        F = stacked(self.evaluate_mismatch())

        self.cache.factorize(self.jacobian())
        dx = self.cache.solve(F)

        n_active = len(self.pvpq)
        self.voltage.angle[self.pvpq] -= dx[:n_active]
        self.voltage.magnitude[self.pq] -= dx[n_active:]
        self.iterations += 1
