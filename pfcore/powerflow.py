# -*- coding: utf-8 -*-

# Copyright (c) 2016-2025 by University of Kassel and Fraunhofer Institute for Energy Economics
# and Energy System Technology (IEE), Kassel. All rights reserved.

import logging
from collections import namedtuple

from pfcore.auxiliary import AlgorithmUnknown, ALGORITHMS
from pfcore.pf.angle_reference import align_angles
from pfcore.pf.dcpf import DCPowerFlow
from pfcore.pf.fdpf import FastDecoupledBX, FastDecoupledXB
from pfcore.pf.gausspf import GaussSeidel
from pfcore.pf.newtonpf import NewtonRaphson
from pfcore.pf.reactive_limits import enforce_q_lims, OK
from pfcore.results import _extract_results

logger = logging.getLogger(__name__)

PowerFlowResult = namedtuple("PowerFlowResult", ["voltage", "iterations", "converged",
                                                 "max_active", "max_reactive"])

SOLVERS = {"nr": NewtonRaphson,
           "fdbx": FastDecoupledBX,
           "fdxb": FastDecoupledXB,
           "gs": GaussSeidel,
           "dc": DCPowerFlow}


def create_solver(net, options, init=None):
    """
    Creates the solver of options.algorithm for net. The bus classification of the network is
    repaired on construction.

    INPUT:
        **net** - The pfcore network

        **options** (PowerFlowOptions) - options of the run

    OPTIONAL:
        **init** (str or VoltageState, None) - start values, options.init if None
    """
    try:
        solver_class = SOLVERS[options.algorithm]
    except KeyError:
        raise AlgorithmUnknown("Algorithm %s is unknown. Valid algorithms are %s"
                               % (options.algorithm, ", ".join(ALGORITHMS)))
    return solver_class(net, options, init=init)


def run_solver(solver, max_iteration, tolerance):
    """
    Iterates solver until the largest active and reactive mismatch are below tolerance or
    max_iteration steps are done. Not converging is no error: the last iterate is returned with
    converged=False and a warning is logged. Iterations are counted from the call on, so a
    solver can be run again after the network was edited.
    """
    start = solver.iterations
    while True:
        mis = solver.evaluate_mismatch()
        logger.debug("%s iteration %i: max. mismatch P %.3e, Q %.3e p.u."
                     % (solver.algorithm, solver.iterations, mis.max_active, mis.max_reactive))
        if mis.max_active < tolerance and mis.max_reactive < tolerance:
            converged = True
            break
        if solver.iterations - start >= max_iteration:
            converged = False
            logger.warning("Power flow (%s) did not converge after %i iterations, max. mismatch "
                           "P %.3e, Q %.3e p.u." % (solver.algorithm, solver.iterations,
                                                    mis.max_active, mis.max_reactive))
            break
        solver.step()
    return PowerFlowResult(solver.voltage, solver.iterations - start, converged, mis.max_active,
                           mis.max_reactive)


def _run_pf_algorithm(net, options):
    """
    Solves the power flow of net with options and returns the solver and its result.

    With options.enforce_q_lims, the reactive power limits of the generators are checked after
    every converged run. Buses of violating generators become PQ buses and a new solver, warm
    started from the last solution, is run until no limit is violated. If the slack bus moved,
    the angles are aligned to the slack bus of the first run.
    """
    solver = create_solver(net, options)
    slack = solver.bus_index[solver.ref[0]]
    result = run_solver(solver, options.max_iteration, options.tolerance)

    if options.enforce_q_lims:
        iterations = result.iterations
        while result.converged:
            signals = enforce_q_lims(net, solver)
            if (signals == OK).all():
                break
            solver = create_solver(net, options, init=result.voltage)
            result = run_solver(solver, options.max_iteration, options.tolerance)
            iterations += result.iterations
        if solver.bus_index[solver.ref[0]] != slack:
            align_angles(result.voltage, net, slack)
        result = result._replace(iterations=iterations)
    return solver, result


def _powerflow(net):
    """
    Gets called by runpp or rundcpp with the options stored in net._options.
    """
    options = net["_options"]
    net["converged"] = False
    solver, result = _run_pf_algorithm(net, options)
    _extract_results(net, solver)
    net["converged"] = result.converged
    if not result.converged:
        logger.warning("the results of the last iteration are written to the result tables")
    return result
