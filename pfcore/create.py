# -*- coding: utf-8 -*-

# Copyright (c) 2016-2025 by University of Kassel and Fraunhofer Institute for Energy Economics
# and Energy System Technology (IEE), Kassel. All rights reserved.

import logging

import numpy as np
import pandas as pd
from numpy import nan, any as np_any, arange, intersect1d, setdiff1d, unique as uni, dtype

from pfcore.auxiliary import pfcoreNet, get_free_id, _preserve_dtypes
from pfcore.network import _init_signature, _bump
from pfcore.pypower.idx_bus import BUS_TYPE_CODES

logger = logging.getLogger(__name__)


def create_empty_network(name="", sn_mva=100.):
    """
    This function initializes the pfcore datastructure.

    OPTIONAL:
        **name** (string, "") - name for the network

        **sn_mva** (float, 100.) - reference apparent power for per unit system

    OUTPUT:
        **net** (attrdict) - pfcore attrdict with empty tables:

    EXAMPLE:
        net = create_empty_network()

    """
    net = pfcoreNet({
        # structure data
        "bus": [("name", dtype(object)),
                ("type", dtype(object)),
                ("p_mw", "f8"),
                ("q_mvar", "f8"),
                ("gs_mw", "f8"),
                ("bs_mvar", "f8"),
                ("vm_pu", "f8"),
                ("va_degree", "f8"),
                ("in_service", "bool")],
        "branch": [("name", dtype(object)),
                   ("from_bus", "i8"),
                   ("to_bus", "i8"),
                   ("r_pu", "f8"),
                   ("x_pu", "f8"),
                   ("g_pu", "f8"),
                   ("b_pu", "f8"),
                   ("tap", "f8"),
                   ("shift_degree", "f8"),
                   ("in_service", "bool")],
        "gen": [("name", dtype(object)),
                ("bus", "i8"),
                ("p_mw", "f8"),
                ("q_mvar", "f8"),
                ("vm_pu", "f8"),
                ("min_q_mvar", "f8"),
                ("max_q_mvar", "f8"),
                ("in_service", "bool")],
        # result tables
        "_empty_res_bus": [("vm_pu", "f8"),
                           ("va_degree", "f8"),
                           ("p_mw", "f8"),
                           ("q_mvar", "f8")],
        "_empty_res_branch": [("p_from_mw", "f8"),
                              ("q_from_mvar", "f8"),
                              ("p_to_mw", "f8"),
                              ("q_to_mvar", "f8"),
                              ("pl_mw", "f8"),
                              ("ql_mvar", "f8"),
                              ("i_from_pu", "f8"),
                              ("i_to_pu", "f8")],
        "_empty_res_gen": [("p_mw", "f8"),
                           ("q_mvar", "f8"),
                           ("va_degree", "f8"),
                           ("vm_pu", "f8")],
        # internal
        "_signature": _init_signature(),
        "_ppc": {},
        "_nodal": {},
        "_options": None,
        "converged": False,
        "name": name,
        "sn_mva": sn_mva})
    for s in ["res_bus", "res_branch", "res_gen"]:
        net[s] = net["_empty_" + s].copy()
    return net


def create_bus(net, type="pq", p_mw=0., q_mvar=0., gs_mw=0., bs_mvar=0., vm_pu=1., va_degree=0.,
               name=None, index=None, in_service=True, **kwargs):
    """
    Adds one bus in table net["bus"].

    Busses are the nodes of the network that all other elements connect to.

    INPUT:
        **net** (pfcoreNet) - The pfcore network in which the element is created

    OPTIONAL:
        **type** (string, "pq") - classification of the bus: "slack", "pv" or "pq"

        **p_mw** (float, 0) - active power demand at the bus

        **q_mvar** (float, 0) - reactive power demand at the bus

        **gs_mw** (float, 0) - active power consumed by the bus shunt at 1.0 p.u.

        **bs_mvar** (float, 0) - reactive power injected by the bus shunt at 1.0 p.u.

        **vm_pu** (float, 1.0) - start value of the voltage magnitude

        **va_degree** (float, 0.) - start value of the voltage angle. For the slack bus this
        is the reference angle of the network.

        **name** (string, default None) - the name for this bus

        **index** (int, default None) - Force a specified ID if it is available. If None, the \
            index one higher than the highest already existing index is selected.

        **in_service** (boolean) - True for in_service or False for out of service

    OUTPUT:
        **index** (int) - The unique ID of the created element

    EXAMPLE:
        create_bus(net, "slack", name="bus1")
    """
    _check_bus_type(type)
    if type == "slack":
        _check_single_slack(net, 1)
    index = _get_index_with_check(net, "bus", index)

    entries = dict(zip(["name", "type", "p_mw", "q_mvar", "gs_mw", "bs_mvar", "vm_pu",
                        "va_degree", "in_service"],
                       [name, type, p_mw, q_mvar, gs_mw, bs_mvar, vm_pu, va_degree,
                        bool(in_service)]))

    _set_entries(net, "bus", index, True, **entries, **kwargs)
    _bump(net, "pattern", "model", "layout")

    return index


def create_buses(net, nr_buses, type="pq", p_mw=0., q_mvar=0., gs_mw=0., bs_mvar=0., vm_pu=1.,
                 va_degree=0., name=None, index=None, in_service=True, **kwargs):
    """
    Adds several buses in table net["bus"] at once.

    INPUT:
        **net** (pfcoreNet) - The pfcore network in which the element is created

        **nr_buses** (int) - The number of buses that is created

    OPTIONAL:
        see create_bus, every parameter can be given as a single value or as one value per bus

    OUTPUT:
        **index** (int) - The unique indices ID of the created elements
    """
    types = pd.Series(type if isinstance(type, (list, tuple, np.ndarray)) else [type] * nr_buses)
    for t in types.unique():
        _check_bus_type(t)
    _check_single_slack(net, int((types == "slack").sum()))
    index = _get_multiple_index_with_check(net, "bus", index, nr_buses)

    entries = {"type": types.values, "p_mw": p_mw, "q_mvar": q_mvar, "gs_mw": gs_mw,
               "bs_mvar": bs_mvar, "vm_pu": vm_pu, "va_degree": va_degree,
               "in_service": in_service, "name": name}
    _set_multiple_entries(net, "bus", index, **entries, **kwargs)
    _bump(net, "pattern", "model", "layout")
    return index


def create_branch(net, from_bus, to_bus, r_pu, x_pu, b_pu=0., g_pu=0., tap=1., shift_degree=0.,
                  name=None, index=None, in_service=True, **kwargs):
    """
    Creates a branch (line or transformer in pi-model) between two buses. All parameters are
    given in per unit of the system base net.sn_mva.

    INPUT:
        **net** - The net within this branch should be created

        **from_bus** (int) - ID of the bus on one side which the branch will be connected with

        **to_bus** (int) - ID of the bus on the other side which the branch will be connected with

        **r_pu** (float) - series resistance

        **x_pu** (float) - series reactance

    OPTIONAL:
        **b_pu** (float, 0) - total charging susceptance

        **g_pu** (float, 0) - total charging conductance

        **tap** (float, 1.) - off-nominal turns ratio at the from bus, 0 is interpreted as 1

        **shift_degree** (float, 0.) - phase shift angle

        **name** (string, None) - A custom name for this branch

        **index** (int, None) - Force a specified ID if it is available. If None, the index one \
            higher than the highest already existing index is selected.

        **in_service** (boolean, True) - True for in_service or False for out of service

    OUTPUT:
        **index** (int) - The unique ID of the created branch

    EXAMPLE:
        create_branch(net, 0, 1, r_pu=0.01, x_pu=0.1, b_pu=0.02)
    """
    index = _get_index_with_check(net, "branch", index)
    _check_buses_exist(net, [from_bus, to_bus], "Branch %s" % index)
    _check_impedance(r_pu, x_pu)

    entries = dict(zip(["name", "from_bus", "to_bus", "r_pu", "x_pu", "g_pu", "b_pu", "tap",
                        "shift_degree", "in_service"],
                       [name, from_bus, to_bus, r_pu, x_pu, g_pu, b_pu, tap, shift_degree,
                        bool(in_service)]))
    _set_entries(net, "branch", index, True, **entries, **kwargs)
    _bump(net, "pattern", "model")
    return index


def create_branches(net, from_buses, to_buses, r_pu, x_pu, b_pu=0., g_pu=0., tap=1.,
                    shift_degree=0., name=None, index=None, in_service=True, **kwargs):
    """
    Convenience function for creating many branches at once. Parameters 'from_buses' and
    'to_buses' must be arrays of equal length. Other parameters may be either arrays of the same
    length or single values.

    OUTPUT:
        **index** (list of int) - The unique IDs of the created branches
    """
    _check_buses_exist(net, np.r_[from_buses, to_buses], "Branches")
    _check_impedance(r_pu, x_pu)
    index = _get_multiple_index_with_check(net, "branch", index, len(from_buses))

    entries = {"from_bus": from_buses, "to_bus": to_buses, "r_pu": r_pu, "x_pu": x_pu,
               "g_pu": g_pu, "b_pu": b_pu, "tap": tap, "shift_degree": shift_degree,
               "in_service": in_service, "name": name}
    _set_multiple_entries(net, "branch", index, **entries, **kwargs)
    _bump(net, "pattern", "model")
    return index


def create_gen(net, bus, p_mw, vm_pu=1., q_mvar=0., min_q_mvar=nan, max_q_mvar=nan, name=None,
               index=None, in_service=True, **kwargs):
    """
    Adds a generator to the network.

    Generators control the voltage magnitude of their bus if it is a PV or the slack bus. At
    PQ buses they inject q_mvar.

    INPUT:
        **net** - The net within this generator should be created

        **bus** (int) - The bus id to which the generator is connected

        **p_mw** (float) - The active power of the generator (positive for generation!)

    OPTIONAL:
        **vm_pu** (float, 1.) - The voltage set point of the generator.

        **q_mvar** (float, 0.) - reactive power output, only used at PQ buses

        **min_q_mvar** (float, NaN) - Minimum reactive power injection, unbounded if NaN

        **max_q_mvar** (float, NaN) - Maximum reactive power injection, unbounded if NaN

        **name** (string, None) - The name for this generator

        **index** (int, None) - Force a specified ID if it is available. If None, the index one \
            higher than the highest already existing index is selected.

        **in_service** (bool, True) - True for in_service or False for out of service

    OUTPUT:
        **index** (int) - The unique ID of the created generator

    EXAMPLE:
        create_gen(net, 1, p_mw=120, vm_pu=1.02)

    """
    _check_buses_exist(net, bus, "Generator")

    index = _get_index_with_check(net, "gen", index, name="generator")

    columns = ["name", "bus", "p_mw", "q_mvar", "vm_pu", "min_q_mvar", "max_q_mvar",
               "in_service"]
    variables = [name, bus, p_mw, q_mvar, vm_pu, min_q_mvar, max_q_mvar, bool(in_service)]

    _set_entries(net, "gen", index, True, **dict(zip(columns, variables)), **kwargs)
    _bump(net, "layout")

    return index


def create_gens(net, buses, p_mw, vm_pu=1., q_mvar=0., min_q_mvar=nan, max_q_mvar=nan,
                name=None, index=None, in_service=True, **kwargs):
    """
    Adds generators to the specified buses network.

    All parameters may be either arrays of the same length as buses or single values.

    OUTPUT:
        **index** (int) - The unique IDs of the created generators
    """
    _check_buses_exist(net, buses, "Generators")

    index = _get_multiple_index_with_check(net, "gen", index, len(buses))

    entries = {"bus": buses, "p_mw": p_mw, "q_mvar": q_mvar, "vm_pu": vm_pu,
               "min_q_mvar": min_q_mvar, "max_q_mvar": max_q_mvar, "in_service": in_service,
               "name": name}
    _set_multiple_entries(net, "gen", index, **entries, **kwargs)
    _bump(net, "layout")

    return index


def _check_bus_type(type):
    if type not in BUS_TYPE_CODES:
        raise UserWarning("Unknown bus type %s, valid types are %s" % (type, list(BUS_TYPE_CODES)))


def _check_single_slack(net, new_slacks):
    existing = int((net.bus.type == "slack").sum())
    if new_slacks and existing + new_slacks > 1:
        raise UserWarning("Only one slack bus is allowed, the network already has slack bus %s"
                          % list(net.bus.index[net.bus.type == "slack"]))


def _check_impedance(r_pu, x_pu):
    r_pu = np.atleast_1d(np.asarray(r_pu, dtype=np.float64))
    x_pu = np.atleast_1d(np.asarray(x_pu, dtype=np.float64))
    if np_any(x_pu == 0):
        raise UserWarning("Branches with a series reactance of zero are not supported")
    if np_any(np.isnan(r_pu)) or np_any(np.isnan(x_pu)):
        raise UserWarning("The series impedance of a branch must not be NaN")


def _get_index_with_check(net, table, index, name=None):
    if name is None:
        name = table
    if index is None:
        index = get_free_id(net[table])
    if index in net[table].index:
        raise UserWarning("A %s with the id %s already exists" % (name, index))
    return index


def _get_multiple_index_with_check(net, table, index, number, name=None):
    if index is None:
        bid = get_free_id(net[table])
        return arange(bid, bid + number, 1)
    u, c = uni(index, return_counts=True)
    if np_any(c > 1):
        raise UserWarning("Passed indexes %s exist multiple times" % (u[c > 1]))
    intersect = intersect1d(index, net[table].index.values)
    if len(intersect) > 0:
        if name is None:
            name = table.capitalize() + "es"
        raise UserWarning("%s with indexes %s already exist."
                          % (name, intersect))
    return index


def _check_buses_exist(net, buses, element):
    missing = setdiff1d(np.atleast_1d(buses), net.bus.index.values)
    if len(missing):
        raise UserWarning("%s cannot be connected to non existing bus%s %s"
                          % (element, "es" if len(missing) > 1 else "", list(missing)))


def _set_entries(net, table, index, preserve_dtypes=True, **entries):
    dtypes = None
    if preserve_dtypes:
        # only get dtypes of columns that are set and that are already present in the table
        dtypes = net[table][intersect1d(net[table].columns, list(entries.keys()))].dtypes

    for col, val in entries.items():
        net[table].at[index, col] = val

    # and preserve dtypes
    if preserve_dtypes:
        _preserve_dtypes(net[table], dtypes)


def _set_multiple_entries(net, table, index, preserve_dtypes=True, **entries):
    dtypes = None
    if preserve_dtypes:
        # store dtypes
        dtypes = net[table].dtypes

    dd = pd.DataFrame(index=index, columns=net[table].columns)
    dd = dd.assign(**entries)

    # extend the table by the frame we just created
    if len(net[table]):
        net[table] = pd.concat([net[table], dd], sort=False)
    else:
        net[table] = dd

    # and preserve dtypes
    if preserve_dtypes:
        _preserve_dtypes(net[table], dtypes)
