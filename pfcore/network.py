# -*- coding: utf-8 -*-

# Copyright (c) 2016-2025 by University of Kassel and Fraunhofer Institute for Energy Economics
# and Energy System Technology (IEE), Kassel. All rights reserved.

"""
Change signatures of a network and the nodal matrices cached on them.

Every edit of a network advances one or more monotonic counters in net._signature:

    - "pattern": the sparsity structure of the nodal matrices may have changed (buses or
      branches added, (de)activated)
    - "model": numeric values of the nodal matrices may have changed (branch parameters, bus
      shunts, and every structural edit)
    - "layout": the bus classification or the set of in service buses may have changed
    - "revision": anything changed

Solvers compare these counters with the ones they were built from to decide whether to reuse,
refactorize or rebuild their matrices.
"""

import logging

from pfcore.pd2ppc import _get_ppci
from pfcore.pf.factorization import VersionedMatrix
from pfcore.pypower.makeBdc import makeBdc
from pfcore.pypower.makeYbus import makeYbus

logger = logging.getLogger(__name__)

SIGNATURES = ("pattern", "model", "layout", "revision")


def _init_signature():
    return dict.fromkeys(SIGNATURES, 0)


def _bump(net, *kinds):
    signature = net["_signature"]
    for kind in kinds:
        if kind not in SIGNATURES:
            raise ValueError("unknown signature %s" % kind)
        signature[kind] += 1
    if "revision" not in kinds:
        signature["revision"] += 1


def get_signature(net):
    """
    Returns a copy of the current change signatures of the network.
    """
    return dict(net["_signature"])


def _is_current(versioned, net):
    signature = net["_signature"]
    return versioned is not None and versioned.pattern == signature["pattern"] and \
        versioned.model == signature["model"]


def get_ybus(net):
    """
    Returns the bus admittance matrix of the in service network as VersionedMatrix. It is only
    rebuilt if the pattern or model signature advanced since the last build.
    """
    cache = net["_nodal"].get("ac")
    if cache is None or not _is_current(cache["Ybus"], net):
        ppci = _get_ppci(net)
        Ybus, Yf, Yt = makeYbus(ppci["baseMVA"], ppci["bus"], ppci["branch"])
        signature = net["_signature"]
        cache = {"Ybus": VersionedMatrix(Ybus, signature["pattern"], signature["model"]),
                 "Yf": Yf, "Yt": Yt}
        net["_nodal"]["ac"] = cache
        logger.debug("built Ybus (pattern %d, model %d)"
                     % (signature["pattern"], signature["model"]))
    return cache["Ybus"]


def get_branch_admittances(net):
    """
    Returns Yf and Yt, the branch admittance matrices belonging to the current Ybus.
    """
    get_ybus(net)
    cache = net["_nodal"]["ac"]
    return cache["Yf"], cache["Yt"]


def get_bbus(net):
    """
    Returns the DC susceptance matrix of the in service network as VersionedMatrix. It is only
    rebuilt if the pattern or model signature advanced since the last build.
    """
    cache = net["_nodal"].get("dc")
    if cache is None or not _is_current(cache["Bbus"], net):
        ppci = _get_ppci(net)
        Bbus, Bf, Pbusinj, Pfinj = makeBdc(ppci["bus"], ppci["branch"])
        signature = net["_signature"]
        cache = {"Bbus": VersionedMatrix(Bbus, signature["pattern"], signature["model"]),
                 "Bf": Bf, "Pbusinj": Pbusinj, "Pfinj": Pfinj}
        net["_nodal"]["dc"] = cache
        logger.debug("built Bbus (pattern %d, model %d)"
                     % (signature["pattern"], signature["model"]))
    return cache["Bbus"]


def get_dc_injections(net):
    """
    Returns Bf, Pbusinj and Pfinj belonging to the current Bbus.
    """
    get_bbus(net)
    cache = net["_nodal"]["dc"]
    return cache["Bf"], cache["Pbusinj"], cache["Pfinj"]
