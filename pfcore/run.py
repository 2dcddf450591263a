# -*- coding: utf-8 -*-

# Copyright (c) 2016-2025 by University of Kassel and Fraunhofer Institute for Energy Economics
# and Energy System Technology (IEE), Kassel. All rights reserved.


import logging

from pfcore.auxiliary import _init_runpp_options, _init_rundcpp_options
from pfcore.powerflow import _powerflow

logger = logging.getLogger(__name__)


def runpp(net, algorithm="nr", factorization="lu", max_iteration="auto", tolerance=1e-8,
          init="auto", enforce_q_lims=False, **kwargs):
    """
    Runs a power flow

    INPUT:
        **net** - The pfcore format network

    OPTIONAL:
        **algorithm** (str, "nr") - algorithm that is used to solve the power flow problem.

            The following algorithms are available:

                - "nr" Newton-Raphson (numba accelerated Jacobian)
                - "fdbx" fast-decoupled (BX variant)
                - "fdxb" fast-decoupled (XB variant)
                - "gs" gauss-seidel
                - "dc" linearized (DC) power flow, same as rundcpp

        **factorization** (str, "lu") - factorization of the linear systems. "lu" for all
        algorithms, "qr" for rank deficient systems, "ldlt" for the symmetric DC system only.
        Ignored by "gs".

        **max_iteration** (int, "auto") - maximum number of iterations carried out in the power
        flow algorithm.

            In "auto" mode, the default value depends on the power flow solver:

                - 10 for "nr"
                - 30 for "fdbx" and "fdxb"
                - 1000 for "gs"
                - 1 for "dc"

        **tolerance** (float, 1e-8) - loadflow termination condition referring to the maximum
        active and reactive power mismatch in p.u.

        **init** (str, "auto") - initialization method of the loadflow

            - "auto" - voltage magnitudes and angles of net.bus, setpoints of the generators
            - "flat" - flat start with voltage of 1.0pu and angle of 0 (slack angle as given)
            - "dc" - voltage angles are initialized from DC power flow
            - "results" - voltage vector of last loadflow from net.res_bus is used ("auto" if
              there are no results)

        **enforce_q_lims** (bool, False) - respect generator reactive power limits

            If True, the reactive power limits in net.gen.max_q_mvar/min_q_mvar are respected in
            the loadflow. Buses of generators exceeding their limits are converted to PQ buses
            (net.bus.type and net.gen.q_mvar are changed) and the power flow is solved again. If
            the slack bus is converted, the angles are given relative to the original slack bus.

        ****kwargs** - additional options:

            **permc_spec** (str, None) - column ordering of the sparse LU factorization

    OUTPUT:
        **result** (PowerFlowResult) - voltage state, number of iterations and convergence flag
    """
    _init_runpp_options(net, algorithm=algorithm, factorization=factorization,
                        max_iteration=max_iteration, tolerance=tolerance, init=init,
                        enforce_q_lims=enforce_q_lims, **kwargs)
    return _powerflow(net)


def rundcpp(net, factorization="lu", **kwargs):
    """
    Runs a DC power flow

    INPUT:
        **net** - The pfcore format network

    OPTIONAL:
        **factorization** (str, "lu") - "lu", "ldlt" or "qr"

        ****kwargs** - additional options, see runpp
    """
    _init_rundcpp_options(net, factorization=factorization, **kwargs)
    return _powerflow(net)
