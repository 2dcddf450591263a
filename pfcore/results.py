# -*- coding: utf-8 -*-

# Copyright (c) 2016-2025 by University of Kassel and Fraunhofer Institute for Energy Economics
# and Energy System Technology (IEE), Kassel. All rights reserved.


import numpy as np
import pandas as pd

from pfcore.network import get_ybus, get_branch_admittances, get_bbus, get_dc_injections
from pfcore.pd2ppc import _get_ppci
from pfcore.pf.pfsoln import bus_injections, gen_outputs, branch_flows, dc_bus_injections, \
    dc_branch_flows
from pfcore.pypower.idx_brch import BR_STATUS
from pfcore.pypower.idx_gen import GEN_BUS

RESULT_ELEMENTS = ("bus", "branch", "gen")


def empty_res_element(net, element):
    res_element = "res_" + element
    res_empty_element = "_empty_res_" + element
    if res_empty_element in net:
        net[res_element] = net[res_empty_element].copy()
    else:
        net[res_element] = pd.DataFrame(columns=pd.Index([], dtype=object),
                                        index=pd.Index([], dtype=np.int64))


def init_element(net, element):
    res_element = "res_" + element
    index = net[element].index
    if len(index):
        columns = net["_empty_res_" + element].columns
        net[res_element] = pd.DataFrame(np.nan, index=index, columns=columns, dtype='float')
    else:
        empty_res_element(net, element)


def init_results(net):
    for element in RESULT_ELEMENTS:
        init_element(net, element)


def _extract_results(net, solver):
    """
    Writes the solution of solver to net.res_bus, net.res_branch and net.res_gen. Elements that
    are not part of the solved network (out of service or connected to out of service buses)
    get NaN results.
    """
    init_results(net)
    ppci = _get_ppci(net)
    if solver.algorithm == "dc":
        p_bus, q_bus, pg, qg, branch_res = _get_dc_results(net, ppci, solver)
    else:
        p_bus, q_bus, pg, qg, branch_res = _get_ac_results(net, ppci, solver)

    bus_index = ppci["internal"]["bus"]
    _get_bus_results(net, bus_index, solver.voltage, p_bus, q_bus)
    _get_gen_results(net, ppci, solver.voltage, pg, qg)
    _get_branch_results(net, ppci, *branch_res)


def _get_ac_results(net, ppci, solver):
    baseMVA = ppci["baseMVA"]
    V = solver.voltage.V
    Sbus = bus_injections(get_ybus(net).matrix, V)
    pg, qg = gen_outputs(baseMVA, ppci["bus"], ppci["gen"], Sbus, solver.ref)

    Yf, Yt = get_branch_admittances(net)
    Sf, St, i_f, i_t = branch_flows(baseMVA, ppci["branch"], Yf, Yt, V)
    # load convention at the buses
    return -Sbus.real * baseMVA, -Sbus.imag * baseMVA, pg, qg, \
        (Sf.real, Sf.imag, St.real, St.imag, i_f, i_t)


def _get_dc_results(net, ppci, solver):
    baseMVA = ppci["baseMVA"]
    Va = solver.voltage.angle
    Bf, Pbusinj, Pfinj = get_dc_injections(net)
    Pbus = dc_bus_injections(baseMVA, ppci["bus"], get_bbus(net).matrix, Pbusinj, Va)
    pg, _ = gen_outputs(baseMVA, ppci["bus"], ppci["gen"], Pbus.astype(np.complex128),
                        solver.ref)
    qg = np.where(np.isnan(pg), np.nan, 0.)

    p_from = dc_branch_flows(baseMVA, Bf, Pfinj, Va)
    zeros = np.zeros(len(p_from))
    i_dc = np.abs(p_from) / baseMVA
    return -Pbus * baseMVA, np.zeros(len(Pbus)), pg, qg, \
        (p_from, zeros, -p_from, zeros, i_dc, i_dc)


def _get_bus_results(net, bus_index, voltage, p_bus, q_bus):
    net.res_bus.loc[bus_index, "vm_pu"] = voltage.magnitude
    net.res_bus.loc[bus_index, "va_degree"] = np.rad2deg(voltage.angle)
    net.res_bus.loc[bus_index, "p_mw"] = p_bus
    net.res_bus.loc[bus_index, "q_mvar"] = q_bus


def _get_gen_results(net, ppci, voltage, pg, qg):
    gen = ppci["gen"]
    gen_index = ppci["internal"]["gen"]
    if not len(gen_index):
        return
    on = ~np.isnan(pg)
    gbus = gen[on, GEN_BUS].astype(np.int64)
    net.res_gen.loc[gen_index[on], "p_mw"] = pg[on]
    net.res_gen.loc[gen_index[on], "q_mvar"] = qg[on]
    net.res_gen.loc[gen_index[on], "vm_pu"] = voltage.magnitude[gbus]
    net.res_gen.loc[gen_index[on], "va_degree"] = np.rad2deg(voltage.angle[gbus])


def _get_branch_results(net, ppci, p_from, q_from, p_to, q_to, i_from, i_to):
    branch = ppci["branch"]
    branch_index = ppci["internal"]["branch"]
    if not len(branch_index):
        return
    on = branch[:, BR_STATUS] > 0
    idx = branch_index[on]
    res = net.res_branch
    res.loc[idx, "p_from_mw"] = p_from[on]
    res.loc[idx, "q_from_mvar"] = q_from[on]
    res.loc[idx, "p_to_mw"] = p_to[on]
    res.loc[idx, "q_to_mvar"] = q_to[on]
    res.loc[idx, "pl_mw"] = p_from[on] + p_to[on]
    res.loc[idx, "ql_mvar"] = q_from[on] + q_to[on]
    res.loc[idx, "i_from_pu"] = i_from[on]
    res.loc[idx, "i_to_pu"] = i_to[on]
