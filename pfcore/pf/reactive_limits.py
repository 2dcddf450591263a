# -*- coding: utf-8 -*-

# Copyright (c) 2016-2025 by University of Kassel and Fraunhofer Institute for Energy Economics
# and Energy System Technology (IEE), Kassel. All rights reserved.

import logging

import numpy as np
import pandas as pd

from pfcore.network import _bump, get_ybus
from pfcore.pd2ppc import _get_ppci
from pfcore.pf.pfsoln import bus_injections, gen_outputs
from pfcore.pypower.bustypes import _promote_slack
from pfcore.pypower.idx_gen import GEN_BUS, GEN_STATUS, QMIN, QMAX

logger = logging.getLogger(__name__)

OK = 0
BELOW_MIN = -1
ABOVE_MAX = 1


def enforce_q_lims(net, solver):
    """
    Checks the reactive power of the generators implied by the solution of solver against
    their limits.

    For every in service generator with a proper reactive range (min_q_mvar < max_q_mvar) at a
    bus that is not a PQ bus, a reactive power outside of the range is signalled. The bus of a
    violating generator is converted to a PQ bus and the outputs of all generators at that bus
    are fixed in net.gen: the violating generators at the violated limit, the others at their
    solved values. If the slack bus is converted, the first PV bus with an in service generator
    becomes the new slack bus (MissingSlack if there is none).

    Solutions that respect all limits produce only OK signals and leave the network untouched.
    The power flow is not solved again, a new solver has to be created for the changed bus
    classification.

    INPUT:
        **net** - The pfcore network

        **solver** - solver holding the solution to check

    OUTPUT:
        **signals** (pandas.Series) - OK (0), BELOW_MIN (-1) or ABOVE_MAX (1) per generator,
        indexed by generator id
    """
    solver._check_compatibility()
    ppci = _get_ppci(net)
    gen = ppci["gen"]
    bus_index = ppci["internal"]["bus"]
    gen_index = ppci["internal"]["gen"]
    signals = pd.Series(OK, index=net.gen.index, dtype=np.int64)

    Sbus = bus_injections(get_ybus(net).matrix, solver.voltage.V)
    pg, qg = gen_outputs(ppci["baseMVA"], ppci["bus"], gen, Sbus, solver.ref)

    # classification before any conversion
    bus_types = net.bus.type.copy()
    limits = {}
    for pos in np.argsort(gen_index, kind="stable"):
        if not gen[pos, GEN_STATUS] > 0:
            continue
        q_min, q_max = gen[pos, QMIN], gen[pos, QMAX]
        if not q_min < q_max:
            continue
        b = bus_index[int(gen[pos, GEN_BUS])]
        if bus_types.at[b] == "pq":
            continue
        if qg[pos] > q_max:
            signals.at[gen_index[pos]] = ABOVE_MAX
            limits[pos] = q_max
        elif qg[pos] < q_min:
            signals.at[gen_index[pos]] = BELOW_MIN
            limits[pos] = q_min
    if not limits:
        return signals

    converted = np.unique([bus_index[int(gen[pos, GEN_BUS])] for pos in limits])
    former_slack = None
    try:
        for b in converted:
            at_bus = np.flatnonzero((bus_index[gen[:, GEN_BUS].astype(np.int64)] == b) &
                                    (gen[:, GEN_STATUS] > 0))
            for pos in at_bus:
                g = gen_index[pos]
                net.gen.at[g, "p_mw"] = pg[pos]
                net.gen.at[g, "q_mvar"] = limits.get(pos, qg[pos])
            if bus_types.at[b] == "slack":
                former_slack = b
            net.bus.at[b, "type"] = "pq"
        logger.info("reactive power limits violated by generators %s, buses %s are converted to "
                    "PQ buses" % (list(gen_index[list(limits)]), list(converted)))
        if former_slack is not None:
            _promote_slack(net, former_slack)
    finally:
        _bump(net, "layout")
    return signals
