# -*- coding: utf-8 -*-

# Copyright 1996-2015 PSERC. All rights reserved.
# Use of this source code is governed by a BSD-style
# license that can be found in the LICENSE file.

# Copyright (c) 2016-2025 by University of Kassel and Fraunhofer Institute for Energy Economics
# and Energy System Technology (IEE), Kassel. All rights reserved.

"""Classifies the buses of a network and builds index lists of each type of bus.
"""

import logging
from collections import namedtuple

import numpy as np
from numpy import flatnonzero as find

from pfcore.auxiliary import MissingSlack
from pfcore.network import _bump
from pfcore.pd2ppc import _get_ppci
from pfcore.pypower.idx_bus import BUS_TYPE, REF, PV, PQ

logger = logging.getLogger(__name__)

BusTypes = namedtuple("BusTypes", ["ref", "pv", "pq"])


def bustypes(bus):
    """Builds index lists of each type of bus (C{REF}, C{PV}, C{PQ}).

    Expects C{bus} to use internal consecutive bus numbering in ascending order of the bus
    indices, so all returned lists are sorted. The type column is expected to be repaired by
    L{classify} already.

    @param bus: bus data
    @return: index lists of each bus type

    @author: Ray Zimmerman (PSERC Cornell)
    @author: Richard Lincoln
    """
    ref = find(bus[:, BUS_TYPE] == REF)  # ref bus index
    pv = find(bus[:, BUS_TYPE] == PV)  # PV bus indices
    pq = find(bus[:, BUS_TYPE] == PQ)  # PQ bus indices

    if len(ref) != 1:
        raise MissingSlack("Exactly one reference bus is required, found %i" % len(ref))

    return BusTypes(ref, pv, pq)


def _buses_with_gen(net):
    gen = net.gen
    return np.unique(gen.bus.values[gen.in_service.values.astype(bool)])


def _find_slack_candidate(net):
    """
    Returns the first in service PV bus (ascending index) with an in service generator, None if
    there is none.
    """
    bus = net.bus
    mask = bus.in_service.values.astype(bool) & (bus.type.values == "pv") & \
        bus.index.isin(_buses_with_gen(net))
    candidates = np.sort(bus.index.values[mask])
    return candidates[0] if len(candidates) else None


def _promote_slack(net, former_slack):
    """
    Moves the slack role from former_slack to the first eligible PV bus. The former slack becomes
    a PQ bus. Raises MissingSlack if no bus qualifies.
    """
    candidate = _find_slack_candidate(net)
    if candidate is None:
        raise MissingSlack("Slack bus %s cannot keep its role and no PV bus with an in service "
                           "generator is available to take it over" % former_slack)
    net.bus.at[former_slack, "type"] = "pq"
    net.bus.at[candidate, "type"] = "slack"
    logger.info("bus %s is the new slack bus, former slack bus %s is converted to a PQ bus"
                % (candidate, former_slack))
    return candidate


def classify(net):
    """
    Repairs the bus classification of a network and returns the internal index lists of the
    slack, PV and PQ buses.

    The rules are applied in this order:
        1. PV buses without an in service generator become PQ buses
        2. if the slack bus has no in service generator, the first PV bus (ascending index)
           with an in service generator becomes the slack bus and the former slack bus a PQ bus
        3. if there is no slack bus or no bus to take over the slack role, MissingSlack is
           raised

    Changes are written to net.bus.type and advance the layout signature of the network. A
    second call without edits in between changes nothing.

    INPUT:
        **net** - The pfcore network

    OUTPUT:
        **bus_types** (BusTypes) - internal positions of the slack (ref), PV and PQ buses
    """
    bus = net.bus
    in_service = bus.in_service.values.astype(bool)
    has_gen = bus.index.isin(_buses_with_gen(net))
    changed = False

    try:
        pv_without_gen = in_service & (bus.type.values == "pv") & ~has_gen
        if np.any(pv_without_gen):
            converted = bus.index[pv_without_gen]
            net.bus.loc[converted, "type"] = "pq"
            logger.info("PV buses %s have no in service generator and are converted to PQ buses"
                        % list(converted))
            changed = True

        slack = bus.index[in_service & (bus.type.values == "slack")]
        if len(slack) == 0:
            raise MissingSlack("No in service slack bus is defined")
        if len(slack) > 1:
            raise UserWarning("Only one slack bus is allowed, found %s" % list(slack))
        slack = slack[0]

        if not has_gen[bus.index.get_loc(slack)]:
            _promote_slack(net, slack)
            changed = True
    finally:
        if changed:
            _bump(net, "layout")

    return bustypes(_get_ppci(net)["bus"])
