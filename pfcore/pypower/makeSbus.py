# -*- coding: utf-8 -*-

# Copyright 1996-2015 PSERC. All rights reserved.
# Use of this source code is governed by a BSD-style
# license that can be found in the LICENSE file.

# Copyright (c) 2016-2025 by University of Kassel and Fraunhofer Institute for Energy Economics
# and Energy System Technology (IEE), Kassel. All rights reserved.

"""Builds the vector of complex bus power injections.
"""

from numpy import bincount, int64

from pfcore.pypower.idx_bus import PD, QD
from pfcore.pypower.idx_gen import GEN_BUS, PG, QG, GEN_STATUS


def makeSbus(baseMVA, bus, gen):
    """Builds the vector of complex bus power injections.

    Returns the specified complex power injection of every bus in p.u., that is the
    generation of the in service generators connected to the bus minus the bus demand.
    Bus shunts are not included, they are part of Ybus.

    @see: L{makeYbus}
    """
    nb = bus.shape[0]
    on = gen[:, GEN_STATUS] > 0
    gbus = gen[on, GEN_BUS].astype(int64)
    Sg = bincount(gbus, weights=gen[on, PG], minlength=nb) + \
        1j * bincount(gbus, weights=gen[on, QG], minlength=nb)
    return (Sg - (bus[:, PD] + 1j * bus[:, QD])) / baseMVA
