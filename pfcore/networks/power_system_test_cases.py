# -*- coding: utf-8 -*-

# Copyright (c) 2016-2025 by University of Kassel and Fraunhofer Institute for Energy Economics
# and Energy System Technology (IEE), Kassel. All rights reserved.

from pfcore.create import create_empty_network, create_bus, create_branch, create_gen


def case9():
    """
    WSCC 9 bus system, published in Anderson and Fouad's book 'Power System Control and
    Stability' for the first time in 1980. Buses are numbered as in the book (generator buses
    1, 2, 3 and loads at buses 5, 6 and 8), branch parameters are given in p.u. on 100 MVA.

    OUTPUT:
         **net** - Returns the required network case9

    EXAMPLE:
         import pfcore.networks as pn

         net = pn.case9()
    """
    net = create_empty_network(name="case9", sn_mva=100.)

    create_bus(net, "slack", index=1)
    create_bus(net, "pv", index=2)
    create_bus(net, "pv", index=3)
    create_bus(net, "pq", index=4)
    create_bus(net, "pq", p_mw=125., q_mvar=50., index=5)
    create_bus(net, "pq", p_mw=90., q_mvar=30., index=6)
    create_bus(net, "pq", index=7)
    create_bus(net, "pq", p_mw=100., q_mvar=35., index=8)
    create_bus(net, "pq", index=9)

    # generator step up transformers
    create_branch(net, 1, 4, r_pu=0., x_pu=0.0576)
    create_branch(net, 7, 2, r_pu=0., x_pu=0.0625)
    create_branch(net, 9, 3, r_pu=0., x_pu=0.0586)
    # lines
    create_branch(net, 4, 5, r_pu=0.010, x_pu=0.085, b_pu=0.176)
    create_branch(net, 4, 6, r_pu=0.017, x_pu=0.092, b_pu=0.158)
    create_branch(net, 5, 7, r_pu=0.032, x_pu=0.161, b_pu=0.306)
    create_branch(net, 6, 9, r_pu=0.039, x_pu=0.170, b_pu=0.358)
    create_branch(net, 7, 8, r_pu=0.0085, x_pu=0.072, b_pu=0.149)
    create_branch(net, 8, 9, r_pu=0.0119, x_pu=0.1008, b_pu=0.209)

    create_gen(net, 1, p_mw=0., vm_pu=1.04, min_q_mvar=-300., max_q_mvar=300., name="G1")
    create_gen(net, 2, p_mw=163., vm_pu=1.025, min_q_mvar=-300., max_q_mvar=300., name="G2")
    create_gen(net, 3, p_mw=85., vm_pu=1.025, min_q_mvar=-300., max_q_mvar=300., name="G3")
    return net
