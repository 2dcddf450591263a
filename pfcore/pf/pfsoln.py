# -*- coding: utf-8 -*-

# Copyright 1996-2015 PSERC. All rights reserved.
# Use of this source code is governed by a BSD-style
# license that can be found in the LICENSE file.

# Copyright (c) 2016-2025 by University of Kassel and Fraunhofer Institute for Energy Economics
# and Energy System Technology (IEE), Kassel. All rights reserved.


"""Computes bus, generator and branch powers of a power flow solution.
"""

from numpy import conj, zeros, complex128, abs, int64, isinf, sign, bincount, flatnonzero as find, \
    full, nan, finfo
from numba import jit

from pfcore.pypower.idx_brch import F_BUS, T_BUS
from pfcore.pypower.idx_bus import BUS_TYPE, PQ, PD, QD, GS
from pfcore.pypower.idx_gen import GEN_BUS, GEN_STATUS, PG, QG, QMIN, QMAX

EPS = finfo(float).eps


def bus_injections(Ybus, V):
    """
    Complex power injected into the network at every bus in p.u. (generation minus demand,
    bus shunts excluded).
    """
    return V * conj(Ybus * V)


def gen_outputs(baseMVA, bus, gen, Sbus, ref):
    """Active and reactive output of every generator implied by the bus injections Sbus.

    The active output of a generator is its setpoint, except for the first in service generator
    at the reference bus, which takes the remainder of the bus injection. The reactive injection
    of a bus is shared among its generators in proportion to their reactive capability ranges.
    Infinite limits are replaced by a finite proxy M (sum of the absolute reactive injection and
    all finite limits at the bus). Generators with coinciding ranges share it equally.
    Generators at PQ buses keep their specified reactive output.

    Returns pg and qg in MW / MVAr, NaN for generators out of service.

    @author: Ray Zimmerman (PSERC Cornell)
    @author: Richard Lincoln
    """
    nb = bus.shape[0]
    pg = full(gen.shape[0], nan)
    qg = full(gen.shape[0], nan)

    ## generator info
    on = find(gen[:, GEN_STATUS] > 0)  ## which generators are on?
    if not len(on):
        return pg, qg
    gbus = gen[on, GEN_BUS].astype(int64)  ## what buses are they at?

    ## reactive power, total of the bus at every generator
    qg_tot = Sbus[gbus].imag * baseMVA + bus[gbus, QD]
    ngg = bincount(gbus, minlength=nb)[gbus]  ## number of gens at this gen's bus

    q_min = gen[on, QMIN].copy()
    q_max = gen[on, QMAX].copy()
    ## finite proxy M for infinite limits
    M = abs(qg_tot)
    M[~isinf(q_max)] += abs(q_max[~isinf(q_max)])
    M[~isinf(q_min)] += abs(q_min[~isinf(q_min)])
    M = bincount(gbus, M, minlength=nb)[gbus]
    q_min[isinf(q_min)] = sign(q_min[isinf(q_min)]) * M[isinf(q_min)]
    q_max[isinf(q_max)] = sign(q_max[isinf(q_max)]) * M[isinf(q_max)]

    c_min = bincount(gbus, q_min, minlength=nb)[gbus]
    c_max = bincount(gbus, q_max, minlength=nb)[gbus]
    equal = abs(c_max - c_min) <= EPS * abs(c_max)
    q = qg_tot.copy()
    shared = (ngg > 1) & ~equal
    q[shared] = q_min[shared] + (qg_tot[shared] - c_min[shared]) / \
        (c_max[shared] - c_min[shared]) * (q_max[shared] - q_min[shared])
    split = (ngg > 1) & equal
    q[split] = qg_tot[split] / ngg[split]
    ## generators at PQ buses keep their specified output
    fixed = bus[gbus, BUS_TYPE] == PQ
    q[fixed] = gen[on[fixed], QG]
    qg[on] = q

    ## active power, remainder at the reference bus
    pg[on] = gen[on, PG]
    for r in ref:
        at_ref = on[gbus == r]
        if not len(at_ref):
            continue
        first = at_ref[0]
        others = gen[at_ref[1:], PG].sum()
        pg[first] = Sbus[r].real * baseMVA + bus[r, PD] - others

    return pg, qg


def branch_flows(baseMVA, branch, Yf, Yt, V):
    """
    Complex power flows (MVA) and current magnitudes (p.u.) at both ends of every branch.
    """
    f_bus = branch[:, F_BUS].astype(int64)
    t_bus = branch[:, T_BUS].astype(int64)
    # complex power at "from" bus
    Sf = calc_branch_flows(Yf.data, Yf.indptr, Yf.indices, V, baseMVA, Yf.shape[0], f_bus)
    # complex power injected at "to" bus
    St = calc_branch_flows(Yt.data, Yt.indptr, Yt.indices, V, baseMVA, Yt.shape[0], t_bus)
    i_f = abs(Yf * V)
    i_t = abs(Yt * V)
    return Sf, St, i_f, i_t


@jit(nopython=True, cache=True)
def calc_branch_flows(Yy_x, Yy_p, Yy_j, v, baseMVA, dim_x, bus_ind):  # pragma: no cover

    Sx = zeros(dim_x, dtype=complex128)

    # iterate through sparse matrix and get Sx = conj(Y_kj* V[j])
    for r in range(len(Yy_p) - 1):
        for k in range(Yy_p[r], Yy_p[r + 1]):
            Sx[r] += conj(Yy_x[k] * v[Yy_j[k]]) * baseMVA

    # finally get Sx = V[k] * conj(Y_kj* V[j])
    Sx *= v[bus_ind]

    return Sx


def dc_bus_injections(baseMVA, bus, Bbus, Pbusinj, Va):
    """
    Active power injected at every bus in p.u. for the DC angles Va (generation minus demand,
    bus shunts excluded).
    """
    return Bbus * Va + Pbusinj + bus[:, GS] / baseMVA


def dc_branch_flows(baseMVA, Bf, Pfinj, Va):
    """
    Active power flow (MW) at the from end of every branch for the DC angles Va.
    """
    return (Bf * Va + Pfinj) * baseMVA
