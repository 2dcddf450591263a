# -*- coding: utf-8 -*-

# Copyright (c) 2016-2025 by University of Kassel and Fraunhofer Institute for Energy Economics
# and Energy System Technology (IEE), Kassel. All rights reserved.

from copy import deepcopy

import numpy as np
import pandas as pd
import pytest

import pfcore as pfc
from pfcore.pf.angle_reference import align_angles


def _branch_sum_at_buses(net, column_from, column_to):
    res = net.res_branch.join(net.branch[["from_bus", "to_bus"]])
    res = res[res[column_from].notnull()]
    flows = res.groupby("from_bus")[column_from].sum().add(
        res.groupby("to_bus")[column_to].sum(), fill_value=0.)
    return flows.reindex(net.bus.index, fill_value=0.)


def test_three_bus(three_bus):
    result = pfc.runpp(three_bus)
    assert result.converged
    assert three_bus.converged
    assert result.iterations <= 10
    assert three_bus.res_bus.notnull().all().all()
    assert three_bus.res_branch.notnull().all().all()
    assert np.isclose(three_bus.res_bus.vm_pu.at[1], 1.04)
    assert np.isclose(three_bus.res_bus.vm_pu.at[3], 1.02)
    assert three_bus.res_bus.va_degree.at[1] == 0.
    # demand in load convention
    assert np.isclose(three_bus.res_bus.p_mw.at[2], 21.7, atol=1e-5)
    assert np.isclose(three_bus.res_bus.q_mvar.at[2], 12.7, atol=1e-5)
    assert np.isclose(three_bus.res_gen.p_mw.at[1], 20., atol=1e-5)


def test_case9_reference(case9):
    pfc.runpp(case9)
    assert case9.converged
    vm = pd.Series([1.04, 1.025, 1.025, 1.0258, 0.9956, 1.0127, 1.0258, 1.0159, 1.0324],
                   index=range(1, 10))
    va = pd.Series([0., 9.280, 4.665, -2.217, -3.989, -3.687, 3.720, 0.728, 1.967],
                   index=range(1, 10))
    assert np.allclose(case9.res_bus.vm_pu.loc[vm.index].values, vm.values, atol=1e-3)
    assert np.allclose(case9.res_bus.va_degree.loc[va.index].values, va.values, atol=2e-2)

    assert np.isclose(case9.res_gen.p_mw.at[0], 71.64, atol=0.05)
    assert np.isclose(case9.res_gen.q_mvar.at[0], 27.05, atol=0.1)
    assert np.isclose(case9.res_gen.p_mw.at[1], 163.)
    assert np.isclose(case9.res_gen.q_mvar.at[1], 6.65, atol=0.1)
    assert np.isclose(case9.res_gen.q_mvar.at[2], -10.86, atol=0.1)
    assert np.allclose(case9.res_gen.vm_pu.values, [1.04, 1.025, 1.025])


@pytest.mark.parametrize("algorithm", ["fdbx", "fdxb"])
def test_fast_decoupled(case9, algorithm):
    pfc.runpp(case9)
    res_nr = case9.res_bus.copy()
    net = deepcopy(case9)
    result = pfc.runpp(net, algorithm=algorithm)
    assert result.converged
    assert np.allclose(net.res_bus.vm_pu.values, res_nr.vm_pu.values, atol=1e-6)
    assert np.allclose(net.res_bus.va_degree.values, res_nr.va_degree.values, atol=1e-4)


def test_gauss_seidel(three_bus):
    pfc.runpp(three_bus)
    res_nr = three_bus.res_bus.copy()
    result = pfc.runpp(three_bus, algorithm="gs", init="flat")
    assert result.converged
    assert np.allclose(three_bus.res_bus.vm_pu.values, res_nr.vm_pu.values, atol=1e-6)
    assert np.allclose(three_bus.res_bus.va_degree.values, res_nr.va_degree.values, atol=1e-4)


@pytest.mark.parametrize("network", ["case9", "multi_gen"])
def test_power_balance(network, request):
    net = request.getfixturevalue(network)
    pfc.runpp(net)
    assert net.converged
    vm2 = net.res_bus.vm_pu ** 2
    shunt_p = (net.bus.gs_mw * vm2).sum()
    shunt_q = (net.bus.bs_mvar * vm2).sum()
    assert np.isclose(net.res_gen.p_mw.sum() - net.bus.p_mw.sum() - shunt_p,
                      net.res_branch.pl_mw.sum(), atol=1e-6)
    assert np.isclose(net.res_gen.q_mvar.sum() - net.bus.q_mvar.sum() + shunt_q,
                      net.res_branch.ql_mvar.sum(), atol=1e-6)
    assert (net.res_branch.pl_mw > -1e-9).all()

    # every bus: flows leaving through the branches equal the net injection
    p_out = _branch_sum_at_buses(net, "p_from_mw", "p_to_mw")
    q_out = _branch_sum_at_buses(net, "q_from_mvar", "q_to_mvar")
    assert np.allclose(p_out.values, (-net.res_bus.p_mw - net.bus.gs_mw * vm2).values, atol=1e-6)
    assert np.allclose(q_out.values, (-net.res_bus.q_mvar + net.bus.bs_mvar * vm2).values,
                       atol=1e-6)


def test_gens_sharing_a_bus(multi_gen):
    pfc.runpp(multi_gen)
    q = multi_gen.res_gen.q_mvar
    # reactive power is split in proportion to the reactive ranges (40 and 20 MVAr)
    q_total = q.at[1] + q.at[2]
    assert np.isclose(q.at[1] - (-10.), (q_total + 15.) * 40. / 60., atol=1e-6)
    assert np.isclose(multi_gen.res_gen.p_mw.at[1], 30.)
    assert np.isclose(multi_gen.res_gen.p_mw.at[2], 20.)
    assert np.isclose(multi_gen.res_gen.vm_pu.at[1], 1.03)


def test_enforce_q_lims_pv_bus(case9):
    pfc.set_gen_limits(case9, 2, min_q_mvar=-5.)
    result = pfc.runpp(case9, enforce_q_lims=True)
    assert result.converged
    assert case9.bus.type.at[3] == "pq"
    assert np.isclose(case9.res_gen.q_mvar.at[2], -5.)
    assert case9.res_bus.vm_pu.at[3] > 1.025
    assert case9.bus.type.at[1] == "slack"

    # without enforcement the limit is violated
    net = pfc.networks.case9()
    pfc.set_gen_limits(net, 2, min_q_mvar=-5.)
    pfc.runpp(net)
    assert net.res_gen.q_mvar.at[2] < -5.
    assert net.bus.type.at[3] == "pv"


def test_enforce_q_lims_moves_slack(case9):
    pfc.set_gen_limits(case9, 0, max_q_mvar=20.)
    result = pfc.runpp(case9, enforce_q_lims=True)
    assert result.converged
    assert case9.converged
    assert case9.bus.type.at[1] == "pq"
    assert case9.bus.type.at[2] == "slack"
    assert np.isclose(case9.res_gen.q_mvar.at[0], 20.)
    assert case9.res_gen.q_mvar.at[1] > 6.65
    assert case9.res_bus.vm_pu.at[1] < 1.04
    # angles are given relative to the original slack bus
    assert case9.res_bus.va_degree.at[1] == 0.

    # same as solving the converted network directly, aligned to bus 1
    direct = deepcopy(case9)
    direct_result = pfc.runpp(direct, init="flat")
    assert direct_result.converged
    align_angles(direct_result.voltage, direct, 1)
    assert np.allclose(direct_result.voltage.magnitude, case9.res_bus.vm_pu.values, atol=1e-7)
    assert np.allclose(np.rad2deg(direct_result.voltage.angle), case9.res_bus.va_degree.values,
                       atol=1e-5)


def test_enforce_q_lims_compliant(case9):
    signature = pfc.get_signature(case9)
    result = pfc.runpp(case9, enforce_q_lims=True)
    assert result.converged
    assert pfc.get_signature(case9) == signature
    assert (case9.bus.type == pfc.networks.case9().bus.type).all()


def test_out_of_service_elements(multi_gen):
    pfc.set_bus_status(multi_gen, 4, False)
    pfc.set_gen_status(multi_gen, 2, False)
    pfc.runpp(multi_gen)
    assert multi_gen.converged
    assert multi_gen.res_bus.loc[4].isnull().all()
    assert multi_gen.res_bus.drop(4).notnull().all().all()
    # branches 2-4 and 3-4 end at the out of service bus
    assert multi_gen.res_branch.loc[[4, 5]].isnull().all().all()
    assert multi_gen.res_branch.loc[[0, 1, 2, 3]].notnull().all().all()
    assert multi_gen.res_gen.loc[2].isnull().all()
    assert np.isclose(multi_gen.res_gen.p_mw.at[1], 30.)


def test_out_of_service_branch(case9):
    pfc.set_branch_status(case9, 8, False)
    pfc.runpp(case9)
    assert case9.converged
    assert case9.res_branch.loc[8].isnull().all()
    assert case9.res_branch.drop(8).notnull().all().all()


@pytest.mark.parametrize("init", ["flat", "dc", "auto"])
def test_init(case9, init):
    reference = deepcopy(case9)
    pfc.runpp(reference)
    result = pfc.runpp(case9, init=init)
    assert result.converged
    assert np.allclose(case9.res_bus.values, reference.res_bus.values, atol=1e-6)


def test_init_results(case9):
    first = pfc.runpp(case9)
    assert first.iterations > 0
    result = pfc.runpp(case9, init="results")
    assert result.converged
    assert result.iterations == 0

    # a changed demand only needs a few iterations from the last results
    pfc.set_bus_demand(case9, 5, p_mw=130.)
    result = pfc.runpp(case9, init="results")
    assert result.converged
    assert 0 < result.iterations <= first.iterations


def test_not_converged(case9):
    result = pfc.runpp(case9, max_iteration=1)
    assert not result.converged
    assert not case9.converged
    # the last iterate is written
    assert case9.res_bus.vm_pu.notnull().all()


def test_dc_agrees_with_ac_in_sign_and_order(three_bus):
    ac = pfc.runpp(three_bus).voltage.angle.copy()
    dc = pfc.rundcpp(deepcopy(three_bus)).voltage.angle.copy()
    assert np.all(ac[1:] < 0)
    assert np.array_equal(np.sign(ac), np.sign(dc))
    assert np.array_equal(np.argsort(ac), np.argsort(dc))


def test_slack_needs_generator():
    net = pfc.create_empty_network()
    pfc.create_bus(net, "slack")
    pfc.create_bus(net, p_mw=10.)
    pfc.create_branch(net, 0, 1, r_pu=0.01, x_pu=0.1)
    with pytest.raises(pfc.MissingSlack):
        pfc.runpp(net)
    pfc.create_gen(net, 0, p_mw=0.)
    pfc.runpp(net)
    assert net.converged
    assert np.isclose(net.res_gen.p_mw.at[0], 10. + net.res_branch.pl_mw.at[0])


if __name__ == "__main__":
    pytest.main([__file__, "-xs"])
