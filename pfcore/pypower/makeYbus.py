# -*- coding: utf-8 -*-

# Copyright 1996-2015 PSERC. All rights reserved.
# Use of this source code is governed by a BSD-style
# license that can be found in the LICENSE file.

# Copyright (c) 2016-2025 by University of Kassel and Fraunhofer Institute for Energy Economics
# and Energy System Technology (IEE), Kassel. All rights reserved.


"""Builds the bus admittance matrix and branch admittance matrices.
"""

from numpy import ones, arange, conj, exp, pi, hstack, int64, errstate, where, flatnonzero
from scipy.sparse import csr_matrix

from pfcore.pypower.idx_brch import F_BUS, T_BUS, BR_R, BR_X, BR_B, BR_G, BR_STATUS, SHIFT, TAP
from pfcore.pypower.idx_bus import GS, BS


def makeYbus(baseMVA, bus, branch):
    """Builds the bus admittance matrix and branch admittance matrices.

    Returns the full bus admittance matrix (i.e. for all buses) and the
    matrices C{Yf} and C{Yt} which, when multiplied by a complex voltage
    vector, yield the vector currents injected into each line from the
    "from" and "to" buses respectively of each line. Does appropriate
    conversions to p.u. Out of service branches do not create entries and no
    entry is dropped for being zero, so the sparsity pattern only changes with
    the topology.

    @see: L{makeSbus}

    @author: Ray Zimmerman (PSERC Cornell)
    @author: Richard Lincoln
    """
    ## constants
    nb = bus.shape[0]  ## number of buses
    nl = branch.shape[0]  ## number of lines

    ## for each branch, compute the elements of the branch admittance matrix where
    ##
    ##      | If |   | Yff  Yft |   | Vf |
    ##      |    | = |          | * |    |
    ##      | It |   | Ytf  Ytt |   | Vt |
    ##
    ## only in service branches create entries
    on = flatnonzero(branch[:, BR_STATUS])
    Ytt, Yff, Yft, Ytf = branch_vectors(branch[on], len(on))
    ## vector of shunt admittances, Psh - j Qsh = conj(Ysh) = Gs - j Bs at V = 1.0 p.u.
    Ysh = (bus[:, GS] + 1j * bus[:, BS]) / baseMVA

    f = branch[on, F_BUS].astype(int64)  ## list of "from" buses
    t = branch[on, T_BUS].astype(int64)  ## list of "to" buses

    ## build Yf and Yt such that Yf * V is the vector of complex branch currents injected
    ## at each branch's "from" bus, and Yt is the same for the "to" bus end
    i = hstack([on, on])  ## double set of row indices
    Yf = csr_matrix((hstack([Yff, Yft]), (i, hstack([f, t]))), (nl, nb))
    Yt = csr_matrix((hstack([Ytf, Ytt]), (i, hstack([f, t]))), (nl, nb))

    ## build Ybus, the diagonal is always stored. Duplicates are summed without dropping
    ## zeros, so the structure does not depend on the values
    buses = arange(nb)
    Ybus = csr_matrix((hstack([Yff, Yft, Ytf, Ytt, Ysh]),
                       (hstack([f, f, t, t, buses]), hstack([f, t, f, t, buses]))), (nb, nb))

    for Y in (Ybus, Yf, Yt):
        Y.sort_indices()

    return Ybus, Yf, Yt


@errstate(all="raise")
def branch_vectors(branch, nl):
    stat = branch[:, BR_STATUS]  # ones at in-service branches
    Ys = stat / (branch[:, BR_R] + 1j * branch[:, BR_X])  # series admittance
    Bc = stat * (branch[:, BR_G] + 1j * branch[:, BR_B])  # branch charging admittance

    tap = where(branch[:, TAP] != 0, branch[:, TAP], ones(nl))  # default tap ratio = 1
    tap = tap * exp(1j * pi / 180 * branch[:, SHIFT])  # add phase shifters

    Ytt = Ys + Bc / 2
    Yff = (Ys + Bc / 2) / (tap * conj(tap))
    Yft = - Ys / conj(tap)
    Ytf = - Ys / tap
    return Ytt, Yff, Yft, Ytf
