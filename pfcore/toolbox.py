# -*- coding: utf-8 -*-

# Copyright (c) 2016-2025 by University of Kassel and Fraunhofer Institute for Energy Economics
# and Energy System Technology (IEE), Kassel. All rights reserved.

"""
In place edits of a network. Every edit advances the change signatures of the network that
solvers and cached matrices depend on, so editing the tables directly should be avoided.
"""

import logging

from pfcore.auxiliary import ensure_iterability
from pfcore.create import _check_bus_type
from pfcore.network import _bump

logger = logging.getLogger(__name__)

BRANCH_PARAMETERS = ("r_pu", "x_pu", "g_pu", "b_pu", "tap", "shift_degree")


def _check_existing(net, table, index):
    index = ensure_iterability(index)
    missing = set(index) - set(net[table].index)
    if missing:
        raise UserWarning("%s %s do not exist" % (table, missing))
    return list(index)


def set_branch_status(net, branches, in_service):
    """
    Switches branches in or out of service. Changes the structure of the nodal matrices.
    """
    branches = _check_existing(net, "branch", branches)
    net.branch.loc[branches, "in_service"] = bool(in_service)
    _bump(net, "pattern", "model")


def set_branch_parameters(net, branch, **parameters):
    """
    Changes electrical parameters of a branch, e.g. set_branch_parameters(net, 3, x_pu=0.2).
    Valid parameters are r_pu, x_pu, g_pu, b_pu, tap and shift_degree.
    """
    _check_existing(net, "branch", branch)
    unknown = set(parameters) - set(BRANCH_PARAMETERS)
    if unknown:
        raise UserWarning("Unknown branch parameters %s, valid parameters are %s"
                          % (unknown, BRANCH_PARAMETERS))
    if parameters.get("x_pu", 1.) == 0:
        raise UserWarning("Branches with a series reactance of zero are not supported")
    for key, value in parameters.items():
        net.branch.at[branch, key] = value
    _bump(net, "model")


def set_bus_status(net, buses, in_service):
    """
    Switches buses in or out of service. Branches and generators at out of service buses are
    not part of the power flow.
    """
    buses = _check_existing(net, "bus", buses)
    net.bus.loc[buses, "in_service"] = bool(in_service)
    _bump(net, "pattern", "model", "layout")


def set_bus_type(net, bus, type):
    """
    Changes the classification of a bus ("slack", "pv" or "pq").
    """
    _check_existing(net, "bus", bus)
    _check_bus_type(type)
    if type == "slack":
        others = net.bus.index[(net.bus.type == "slack") & (net.bus.index != bus)]
        if len(others):
            raise UserWarning("Only one slack bus is allowed, bus %s is already the slack bus"
                              % list(others))
    net.bus.at[bus, "type"] = type
    _bump(net, "layout")


def set_bus_demand(net, bus, p_mw=None, q_mvar=None):
    """
    Changes the active and/or reactive power demand of a bus.
    """
    _check_existing(net, "bus", bus)
    if p_mw is not None:
        net.bus.at[bus, "p_mw"] = p_mw
    if q_mvar is not None:
        net.bus.at[bus, "q_mvar"] = q_mvar
    _bump(net, "revision")


def set_bus_shunt(net, bus, gs_mw=None, bs_mvar=None):
    """
    Changes the shunt of a bus. Changes the numeric values of the nodal matrices.
    """
    _check_existing(net, "bus", bus)
    if gs_mw is not None:
        net.bus.at[bus, "gs_mw"] = gs_mw
    if bs_mvar is not None:
        net.bus.at[bus, "bs_mvar"] = bs_mvar
    _bump(net, "model")


def set_gen_status(net, gens, in_service):
    """
    Switches generators in or out of service. May change the bus classification.
    """
    gens = _check_existing(net, "gen", gens)
    net.gen.loc[gens, "in_service"] = bool(in_service)
    _bump(net, "layout")


def set_gen_output(net, gen, p_mw=None, q_mvar=None, vm_pu=None):
    """
    Changes the active power, reactive power or voltage setpoint of a generator.
    """
    _check_existing(net, "gen", gen)
    for key, value in (("p_mw", p_mw), ("q_mvar", q_mvar), ("vm_pu", vm_pu)):
        if value is not None:
            net.gen.at[gen, key] = value
    _bump(net, "revision")


def set_gen_limits(net, gen, min_q_mvar=None, max_q_mvar=None):
    """
    Changes the reactive power range of a generator. NaN removes the limit.
    """
    _check_existing(net, "gen", gen)
    for key, value in (("min_q_mvar", min_q_mvar), ("max_q_mvar", max_q_mvar)):
        if value is not None:
            net.gen.at[gen, key] = value
    _bump(net, "revision")
