# -*- coding: utf-8 -*-

# Copyright (c) 2016-2025 by University of Kassel and Fraunhofer Institute for Energy Economics
# and Energy System Technology (IEE), Kassel. All rights reserved.

from copy import deepcopy

import numpy as np
import pytest

import pfcore as pfc
import pfcore.networks as pn


def test_rundcpp_case9(case9):
    result = pfc.rundcpp(case9)
    assert result.converged
    assert result.iterations == 1
    assert case9.converged
    assert (case9.res_bus.vm_pu == 1.).all()
    assert (case9.res_bus.q_mvar == 0.).all()
    assert case9.res_bus.va_degree.at[1] == 0.
    # lossless
    assert np.allclose(case9.res_branch.pl_mw.values, 0.)
    assert np.isclose(case9.res_gen.p_mw.at[0], 315. - 163. - 85.)
    assert (case9.res_gen.q_mvar == 0.).all()
    assert np.allclose(case9.res_branch.p_from_mw.values, -case9.res_branch.p_to_mw.values)


def test_rundcpp_is_runpp_dc(case9):
    pfc.rundcpp(case9)
    res = case9.res_bus.copy()
    net = deepcopy(case9)
    pfc.runpp(net, algorithm="dc")
    assert np.allclose(net.res_bus.values, res.values)


def test_rundcpp_kirchhoff(multi_gen):
    pfc.rundcpp(multi_gen)
    res = multi_gen.res_branch.join(multi_gen.branch[["from_bus", "to_bus"]])
    p_out = res.groupby("from_bus").p_from_mw.sum().add(
        res.groupby("to_bus").p_to_mw.sum(), fill_value=0.).reindex(multi_gen.bus.index)
    injection = -multi_gen.res_bus.p_mw - multi_gen.bus.gs_mw
    assert np.allclose(p_out.values, injection.values)
    # the slack covers demand and shunt consumption
    assert np.isclose(multi_gen.res_gen.p_mw.at[0], 20. + 45. + 40. + 60. + 1. - 30. - 20.)


def test_phase_shift(multi_gen):
    pfc.rundcpp(multi_gen)
    p_shifted = multi_gen.res_branch.p_from_mw.at[5]
    pfc.set_branch_parameters(multi_gen, 5, shift_degree=0.)
    pfc.rundcpp(multi_gen)
    assert not np.isclose(multi_gen.res_branch.p_from_mw.at[5], p_shifted)


def test_slack_angle(multi_gen):
    pfc.rundcpp(multi_gen)
    reference = multi_gen.res_bus.va_degree.copy()

    net = pn.example_multi_gen()
    net.bus.at[0, "va_degree"] = 30.
    pfc.rundcpp(net)
    assert net.res_bus.va_degree.at[0] == pytest.approx(30.)
    assert np.allclose(net.res_bus.va_degree.values, reference.values + 30.)
    assert np.allclose(net.res_branch.p_from_mw.values, multi_gen.res_branch.p_from_mw.values)


@pytest.mark.parametrize("factorization", ["ldlt", "qr"])
def test_factorizations(case9, factorization):
    pfc.rundcpp(case9)
    res = case9.res_bus.copy()
    pfc.rundcpp(case9, factorization=factorization)
    assert case9._options.factorization == factorization
    assert np.allclose(case9.res_bus.values, res.values)


def test_out_of_service(multi_gen):
    pfc.set_branch_status(multi_gen, 3, False)
    pfc.rundcpp(multi_gen)
    assert multi_gen.converged
    assert multi_gen.res_branch.loc[3].isnull().all()
    assert multi_gen.res_branch.drop(3).notnull().all().all()


if __name__ == "__main__":
    pytest.main([__file__, "-xs"])
