# -*- coding: utf-8 -*-

# Copyright 1996-2015 PSERC. All rights reserved.
# Use of this source code is governed by a BSD-style
# license that can be found in the LICENSE file.

# Copyright (c) 2016-2025 by University of Kassel and Fraunhofer Institute for Energy Economics
# and Energy System Technology (IEE), Kassel. All rights reserved.

"""Builds the B matrices and phase shift injections for DC power flow.
"""

from numpy import bincount, deg2rad, flatnonzero, int64, r_, where, zeros
from scipy.sparse import csr_matrix

from pfcore.pypower.idx_brch import F_BUS, T_BUS, BR_X, TAP, SHIFT, BR_STATUS


def makeBdc(bus, branch):
    """Builds the B matrices and phase shift injections for DC power flow.

    The active bus injections and the active flows at the from ends of the branches follow
    from the bus voltage angles as::
        P  = Bbus * Va + Pbusinj
        Pf = Bf * Va + Pfinj
    All values in p.u. Out of service branches have no entries in Bbus.

    @see: L{dcpf}
    """
    nb = bus.shape[0]
    nl = branch.shape[0]
    # only in service branches create entries
    on = flatnonzero(branch[:, BR_STATUS])
    f = branch[on, F_BUS].astype(int64)
    t = branch[on, T_BUS].astype(int64)

    # series susceptance, scaled by the tap ratio
    tap = where(branch[on, TAP] != 0, branch[on, TAP], 1.)
    b = 1. / (branch[on, BR_X] * tap)

    Bf = csr_matrix((r_[b, -b], (r_[on, on], r_[f, t])), (nl, nb))
    # duplicates are summed without dropping zeros, the structure only depends on the topology
    Bbus = csr_matrix((r_[b, -b, -b, b], (r_[f, f, t, t], r_[f, t, f, t])), (nb, nb))
    Bbus.sort_indices()

    # a phase shift acts as an injection at the from bus extracted at the to bus
    Pfinj = zeros(nl)
    Pfinj[on] = -b * deg2rad(branch[on, SHIFT])
    Pbusinj = bincount(f, weights=Pfinj[on], minlength=nb) - \
        bincount(t, weights=Pfinj[on], minlength=nb)
    return Bbus, Bf, Pbusinj, Pfinj
