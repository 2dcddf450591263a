# -*- coding: utf-8 -*-

# Copyright (c) 2016-2025 by University of Kassel and Fraunhofer Institute for Energy Economics
# and Energy System Technology (IEE), Kassel. All rights reserved.

import numpy as np
import pytest

import pfcore as pfc
from pfcore.auxiliary import PowerFlowOptions, MissingSlack
from pfcore.pf.angle_reference import align_angles
from pfcore.pf.reactive_limits import enforce_q_lims, OK, BELOW_MIN, ABOVE_MAX
from pfcore.powerflow import create_solver, run_solver


def _solved(net):
    solver = create_solver(net, PowerFlowOptions())
    assert run_solver(solver, 10, 1e-8).converged
    return solver


def test_compliant_solution(case9):
    solver = _solved(case9)
    signature = pfc.get_signature(case9)
    types = case9.bus.type.copy()
    gen = case9.gen.copy()

    signals = enforce_q_lims(case9, solver)
    assert (signals == OK).all()
    assert list(signals.index) == list(case9.gen.index)
    assert pfc.get_signature(case9) == signature
    assert case9.bus.type.equals(types)
    assert case9.gen.equals(gen)


def test_below_min(case9):
    # G3 absorbs about 10.9 MVAr
    pfc.set_gen_limits(case9, 2, min_q_mvar=-5.)
    solver = _solved(case9)
    layout = pfc.get_signature(case9)["layout"]

    signals = enforce_q_lims(case9, solver)
    assert signals.at[2] == BELOW_MIN
    assert signals.at[0] == OK
    assert signals.at[1] == OK
    assert case9.bus.type.at[3] == "pq"
    assert case9.gen.q_mvar.at[2] == -5.
    assert case9.gen.p_mw.at[2] == 85.
    assert case9.bus.type.at[1] == "slack"
    assert pfc.get_signature(case9)["layout"] == layout + 1


def test_above_max(case9):
    # G2 injects about 6.7 MVAr
    pfc.set_gen_limits(case9, 1, max_q_mvar=5.)
    signals = enforce_q_lims(case9, _solved(case9))
    assert signals.at[1] == ABOVE_MAX
    assert case9.bus.type.at[2] == "pq"
    assert case9.gen.q_mvar.at[1] == 5.


def test_unbounded_and_inverted_ranges_are_ignored(case9):
    pfc.set_gen_limits(case9, 1, min_q_mvar=np.nan, max_q_mvar=np.nan)
    pfc.set_gen_limits(case9, 2, min_q_mvar=10., max_q_mvar=-10.)
    signals = enforce_q_lims(case9, _solved(case9))
    assert (signals == OK).all()


def test_pq_buses_are_not_checked(case9):
    # a generator at a PQ bus injects its fixed q_mvar
    pfc.create_gen(case9, 5, p_mw=0., q_mvar=20., min_q_mvar=-1., max_q_mvar=1.)
    signals = enforce_q_lims(case9, _solved(case9))
    assert (signals == OK).all()
    assert case9.bus.type.at[5] == "pq"


def test_slack_violation_promotes_pv_bus(case9):
    # the slack generator supplies about 27 MVAr
    pfc.set_gen_limits(case9, 0, max_q_mvar=20.)
    solver = _solved(case9)
    before = solver.voltage.copy()
    signals = enforce_q_lims(case9, solver)
    assert signals.at[0] == ABOVE_MAX
    assert case9.bus.type.at[1] == "pq"
    assert case9.bus.type.at[2] == "slack"
    assert case9.gen.q_mvar.at[0] == 20.
    # the active power of the former slack generator is fixed at its solved value
    assert np.isclose(case9.gen.p_mw.at[0], 71.64, atol=0.01)
    # the solution itself is not changed
    assert np.array_equal(before.V, solver.voltage.V)


def test_slack_violation_without_candidate(three_bus):
    pfc.set_gen_limits(three_bus, 0, min_q_mvar=-200., max_q_mvar=-100.)
    pfc.set_bus_type(three_bus, 3, "pq")
    with pytest.raises(MissingSlack):
        enforce_q_lims(three_bus, _solved(three_bus))


def test_enforce_on_stale_solver(case9):
    solver = _solved(case9)
    pfc.set_bus_type(case9, 2, "pq")
    with pytest.raises(pfc.IncompatibleReuse):
        enforce_q_lims(case9, solver)


def test_align_angles(case9):
    solver = _solved(case9)
    voltage = solver.voltage
    angles = voltage.angle.copy()

    # already aligned to the slack
    align_angles(voltage, case9, 1)
    assert np.array_equal(voltage.angle, angles)

    # bus 2 gets its configured angle of 0, all differences are kept
    align_angles(voltage, case9, 2)
    assert voltage.angle[1] == 0.
    assert np.allclose(np.diff(voltage.angle), np.diff(angles))

    aligned = voltage.angle.copy()
    align_angles(voltage, case9, 2)
    assert np.array_equal(voltage.angle, aligned)

    with pytest.raises(UserWarning):
        align_angles(voltage, case9, 42)


if __name__ == "__main__":
    pytest.main([__file__, "-xs"])
