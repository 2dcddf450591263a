# -*- coding: utf-8 -*-

# Copyright (c) 2016-2025 by University of Kassel and Fraunhofer Institute for Energy Economics
# and Energy System Technology (IEE), Kassel. All rights reserved.

from pfcore.create import create_empty_network, create_bus, create_buses, create_branch, \
    create_branches, create_gen


def example_three_bus():
    """
    This function creates a meshed three bus system: slack bus 1, PQ bus 2 with a demand of
    0.217 p.u. and PV bus 3 with a generator and a demand of 0.478 p.u. (base 100 MVA).

    OUTPUT:
         **net** - Returns the required three bus system

    EXAMPLE:
        >>> from pfcore.networks.simple_test_networks import example_three_bus
        >>> net = example_three_bus()
    """
    net = create_empty_network(name="three bus", sn_mva=100.)

    create_bus(net, "slack", name="bus1", index=1)
    create_bus(net, "pq", p_mw=21.7, q_mvar=12.7, name="bus2", index=2)
    create_bus(net, "pv", p_mw=47.8, q_mvar=-3.9, name="bus3", index=3)

    create_branch(net, 1, 2, r_pu=0.02, x_pu=0.06, b_pu=0.06)
    create_branch(net, 1, 3, r_pu=0.08, x_pu=0.24, b_pu=0.05)
    create_branch(net, 2, 3, r_pu=0.06, x_pu=0.18, b_pu=0.04)

    create_gen(net, 1, p_mw=0., vm_pu=1.04, name="slack gen")
    create_gen(net, 3, p_mw=20., vm_pu=1.02, min_q_mvar=-60., max_q_mvar=60., name="gen3")
    return net


def example_multi_gen():
    """
    This function creates a five bus system with a transformer (off-nominal tap, phase shift),
    bus shunts and two generators with different reactive power ranges at PV bus 1.

    OUTPUT:
         **net** - Returns the required five bus system

    EXAMPLE:
        >>> from pfcore.networks.simple_test_networks import example_multi_gen
        >>> net = example_multi_gen()
    """
    net = create_empty_network(name="multi gen", sn_mva=100.)

    create_bus(net, "slack", name="slack")
    create_bus(net, "pv", p_mw=20., q_mvar=5., name="pv")
    create_buses(net, 3, type="pq", p_mw=[45., 40., 60.], q_mvar=[15., 5., 10.],
                 gs_mw=[0., 0., 1.], bs_mvar=[0., 10., 0.], name=["load 1", "load 2", "load 3"])

    create_branches(net, [0, 0, 1, 1, 2], [1, 2, 2, 3, 4], r_pu=[0.02, 0.08, 0.06, 0.06, 0.04],
                    x_pu=[0.06, 0.24, 0.18, 0.18, 0.12], b_pu=[0.06, 0.05, 0.04, 0.04, 0.03])
    create_branch(net, 3, 4, r_pu=0.01, x_pu=0.08, tap=0.98, shift_degree=2., name="trafo")

    create_gen(net, 0, p_mw=0., vm_pu=1.05, name="slack gen")
    create_gen(net, 1, p_mw=30., vm_pu=1.03, min_q_mvar=-10., max_q_mvar=30., name="gen a")
    create_gen(net, 1, p_mw=20., vm_pu=1.03, min_q_mvar=-5., max_q_mvar=15., name="gen b")
    return net
