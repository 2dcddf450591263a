# -*- coding: utf-8 -*-

# Copyright 1996-2015 PSERC. All rights reserved.
# Use of this source code is governed by a BSD-style
# license that can be found in the LICENSE file.

# Copyright (c) 2016-2025 by University of Kassel and Fraunhofer Institute for Energy Economics
# and Energy System Technology (IEE), Kassel. All rights reserved.

"""Builds the FDPF matrices, B prime and B double prime.
"""

from numpy import ones, zeros, copy

from pfcore.pypower.idx_brch import BR_B, BR_G, BR_R, TAP, SHIFT
from pfcore.pypower.idx_bus import BS, GS
from pfcore.pypower.makeYbus import makeYbus


def makeB(baseMVA, bus, branch, variant):
    """Builds the FDPF matrices, B prime and B double prime.

    Returns the two matrices B prime (active power / angle) and B double prime
    (reactive power / magnitude) used in the fast decoupled power flow. Does
    appropriate conversions to p.u. C{variant} is either "bx" or "xb":

        - "bx": B prime is built from the branch reactances only, B double prime
          from the full branch admittances
        - "xb": B prime is built from the full branch admittances, B double prime
          from the branch reactances only

    @see: L{fdpf}

    @author: Ray Zimmerman (PSERC Cornell)
    """
    if variant not in ("bx", "xb"):
        raise ValueError("unknown fast decoupled variant %s" % variant)

    ## constants
    nb = bus.shape[0]          ## number of buses
    nl = branch.shape[0]       ## number of lines

    ##-----  form Bp (B prime)  -----
    temp_branch = copy(branch)                 ## modify a copy of branch
    temp_bus = copy(bus)                       ## modify a copy of bus
    temp_bus[:, BS] = zeros(nb)                ## zero out shunts at buses
    temp_bus[:, GS] = zeros(nb)
    temp_branch[:, BR_B] = zeros(nl)           ## zero out line charging shunts
    temp_branch[:, BR_G] = zeros(nl)
    temp_branch[:, TAP] = ones(nl)             ## cancel out taps
    if variant == "bx":
        temp_branch[:, BR_R] = zeros(nl)       ## zero out line resistance
    Bp = -1 * makeYbus(baseMVA, temp_bus, temp_branch)[0].imag

    ##-----  form Bpp (B double prime)  -----
    temp_branch = copy(branch)                 ## modify a copy of branch
    temp_branch[:, SHIFT] = zeros(nl)          ## zero out phase shifters
    if variant == "xb":
        temp_branch[:, BR_R] = zeros(nl)       ## zero out line resistance
    Bpp = -1 * makeYbus(baseMVA, bus, temp_branch)[0].imag

    return Bp.tocsr(), Bpp.tocsr()
