# -*- coding: utf-8 -*-

# Copyright 1996-2015 PSERC. All rights reserved.
# Use of this source code is governed by a BSD-style
# license that can be found in the LICENSE file.

# Copyright (c) 2016-2025 by University of Kassel and Fraunhofer Institute for Energy Economics
# and Energy System Technology (IEE), Kassel. All rights reserved.


"""Solves a DC power flow.
"""

from numpy import copy, real, setdiff1d, arange
from scipy.sparse.linalg import spsolve


def dcpf(B, Pbus, Va0, ref):
    """Solves a DC power flow.

    Solves for the bus voltage angles at all but the reference bus, given the
    full system C{B} matrix and the vector of bus real power injections, the
    initial vector of bus voltage angles (in radians) and the index of the
    reference bus. Returns a vector of bus voltage angles in radians.

    Used to compute the angle seed of the AC power flow. The DC power flow
    itself is solved by L{pfcore.pf.dcpf.DCPowerFlow}, which reuses its
    factorization.

    @author: Carlos E. Murillo-Sanchez (PSERC Cornell & Universidad
    Autonoma de Manizales)
    @author: Ray Zimmerman (PSERC Cornell)
    """
    pvpq = setdiff1d(arange(B.shape[0]), ref)

    ## initialize result vector
    Va = copy(Va0)

    ## update angles for non-reference buses
    B = B.tocsr()
    pvpq_matrix = B[pvpq, :].tocsc()[:, pvpq]
    rhs = Pbus[pvpq] - B[pvpq, :].tocsc()[:, ref] * Va0[ref]
    Va[pvpq] = real(spsolve(pvpq_matrix, rhs))

    return Va
