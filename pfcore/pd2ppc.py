# -*- coding: utf-8 -*-

# Copyright (c) 2016-2025 by University of Kassel and Fraunhofer Institute for Energy Economics
# and Energy System Technology (IEE), Kassel. All rights reserved.

import logging

import numpy as np

from pfcore.auxiliary import _replace_nans_with_default_limits
from pfcore.pypower.idx_brch import F_BUS, T_BUS, BR_R, BR_X, BR_G, BR_B, TAP, SHIFT, BR_STATUS, \
    branch_cols
from pfcore.pypower.idx_bus import BUS_I, BUS_TYPE, PD, QD, GS, BS, VM, VA, bus_cols, \
    BUS_TYPE_CODES
from pfcore.pypower.idx_gen import GEN_BUS, PG, QG, QMAX, QMIN, VG, GEN_STATUS, gen_cols

logger = logging.getLogger(__name__)


def _pd2ppc(net):
    """
    Converter Flow:
        1. Create a consecutive bus lookup for all in service buses, ordered by ascending bus
           index
        2. Fill the internal bus array from net.bus
        3. Fill the internal branch array from net.branch; branches connected to out of service
           buses are dropped, out of service branches are kept with status 0
        4. Fill the internal gen array from net.gen; gens at out of service buses are dropped

    INPUT:
        **net** - The pfcore format network

    OUTPUT:
        **ppci** - The "internal" pypower format network, a dict with the keys "baseMVA",
        "bus", "branch", "gen" and "internal" (element lookups)
    """
    bus_index = np.sort(net.bus.index.values[net.bus.in_service.values.astype(bool)])
    bus_lookup = create_consecutive_bus_lookup(net, bus_index)
    nb = len(bus_index)

    bus = np.zeros((nb, bus_cols), dtype=np.float64)
    if nb:
        tab = net.bus.loc[bus_index]
        types = tab.type.map(BUS_TYPE_CODES)
        if types.isnull().any():
            raise UserWarning("Unknown bus types %s, valid types are %s"
                              % (set(tab.type[types.isnull()]), list(BUS_TYPE_CODES)))
        bus[:, BUS_I] = np.arange(nb)
        bus[:, BUS_TYPE] = types.values
        bus[:, PD] = tab.p_mw.values
        bus[:, QD] = tab.q_mvar.values
        bus[:, GS] = tab.gs_mw.values
        bus[:, BS] = tab.bs_mvar.values
        bus[:, VM] = tab.vm_pu.values
        bus[:, VA] = tab.va_degree.values

    branch, branch_index = _build_branch_ppc(net, bus_lookup)
    gen, gen_index = _build_gen_ppc(net, bus_lookup)

    ppci = {"baseMVA": float(net.sn_mva),
            "bus": bus,
            "branch": branch,
            "gen": gen,
            "internal": {"bus": bus_index,
                         "bus_lookup": bus_lookup,
                         "branch": branch_index,
                         "gen": gen_index}}
    return ppci


def create_consecutive_bus_lookup(net, bus_index):
    max_bus_idx = net.bus.index.values.max() if len(net.bus) else -1
    bus_lookup = -np.ones(max_bus_idx + 1, dtype=np.int64)
    bus_lookup[bus_index] = np.arange(len(bus_index))
    return bus_lookup


def _build_branch_ppc(net, bus_lookup):
    tab = net.branch
    if not len(tab):
        return np.zeros((0, branch_cols), dtype=np.float64), np.array([], dtype=np.int64)
    f = bus_lookup[tab.from_bus.values.astype(np.int64)]
    t = bus_lookup[tab.to_bus.values.astype(np.int64)]
    # branches with out of service buses are not part of the internal network
    connected = (f >= 0) & (t >= 0)
    tab = tab[connected]
    branch = np.zeros((len(tab), branch_cols), dtype=np.float64)
    branch[:, F_BUS] = f[connected]
    branch[:, T_BUS] = t[connected]
    branch[:, BR_R] = tab.r_pu.values
    branch[:, BR_X] = tab.x_pu.values
    branch[:, BR_G] = tab.g_pu.values
    branch[:, BR_B] = tab.b_pu.values
    tap = tab.tap.values.astype(np.float64)
    branch[:, TAP] = np.where((tap == 0) | np.isnan(tap), 1., tap)
    branch[:, SHIFT] = np.nan_to_num(tab.shift_degree.values.astype(np.float64))
    branch[:, BR_STATUS] = tab.in_service.values.astype(bool)
    return branch, tab.index.values


def _build_gen_ppc(net, bus_lookup):
    tab = net.gen
    if not len(tab):
        return np.zeros((0, gen_cols), dtype=np.float64), np.array([], dtype=np.int64)
    gbus = bus_lookup[tab.bus.values.astype(np.int64)]
    connected = gbus >= 0
    tab = tab[connected]
    gen = np.zeros((len(tab), gen_cols), dtype=np.float64)
    gen[:, GEN_BUS] = gbus[connected]
    gen[:, PG] = tab.p_mw.values
    gen[:, QG] = np.nan_to_num(tab.q_mvar.values.astype(np.float64))
    gen[:, QMIN], gen[:, QMAX] = _replace_nans_with_default_limits(
        tab.min_q_mvar.values.astype(np.float64), tab.max_q_mvar.values.astype(np.float64))
    gen[:, VG] = tab.vm_pu.values
    gen[:, GEN_STATUS] = tab.in_service.values.astype(bool)
    return gen, tab.index.values


def _get_ppci(net):
    """
    Returns the internal arrays of the network. They are rebuilt only when the network was
    edited since the last call.

    The returned arrays are shared between all users of the network and must not be modified.
    """
    revision = net._signature["revision"]
    cache = net["_ppc"]
    if cache.get("revision") != revision:
        cache.clear()
        cache["ppci"] = _pd2ppc(net)
        cache["revision"] = revision
        logger.debug("converted network to internal arrays (revision %d)" % revision)
    return cache["ppci"]
