# -*- coding: utf-8 -*-

# Copyright (c) 2016-2025 by University of Kassel and Fraunhofer Institute for Energy Economics
# and Energy System Technology (IEE), Kassel. All rights reserved.

import numpy as np
import pytest

import pfcore as pfc
import pfcore.networks as pn
from pfcore.network import get_ybus


def _changed(net, edit, *args, **kwargs):
    before = pfc.get_signature(net)
    edit(net, *args, **kwargs)
    after = pfc.get_signature(net)
    return {key for key in before if after[key] != before[key]}


@pytest.mark.parametrize("edit, args, kwargs, expected", [
    (pfc.set_branch_status, (3, False), {}, {"pattern", "model", "revision"}),
    (pfc.set_branch_parameters, (3,), {"r_pu": 0.02, "x_pu": 0.1}, {"model", "revision"}),
    (pfc.set_bus_status, (5, False), {}, {"pattern", "model", "layout", "revision"}),
    (pfc.set_bus_type, (2, "pq"), {}, {"layout", "revision"}),
    (pfc.set_bus_demand, (5,), {"p_mw": 100.}, {"revision"}),
    (pfc.set_bus_shunt, (5,), {"bs_mvar": 20.}, {"model", "revision"}),
    (pfc.set_gen_status, (2, False), {}, {"layout", "revision"}),
    (pfc.set_gen_output, (1,), {"p_mw": 150., "vm_pu": 1.03}, {"revision"}),
    (pfc.set_gen_limits, (1,), {"max_q_mvar": 50.}, {"revision"}),
])
def test_edit_signatures(edit, args, kwargs, expected):
    net = pn.case9()
    assert _changed(net, edit, *args, **kwargs) == expected


def test_edits_are_written():
    net = pn.case9()
    pfc.set_branch_parameters(net, 3, r_pu=0.02, tap=0.97)
    assert net.branch.r_pu.at[3] == 0.02
    assert net.branch.tap.at[3] == 0.97
    pfc.set_bus_demand(net, 5, q_mvar=40.)
    assert net.bus.p_mw.at[5] == 125.
    assert net.bus.q_mvar.at[5] == 40.
    pfc.set_gen_output(net, 2, vm_pu=1.01)
    assert net.gen.vm_pu.at[2] == 1.01
    assert net.gen.p_mw.at[2] == 85.
    pfc.set_gen_limits(net, 0, min_q_mvar=-20.)
    assert net.gen.min_q_mvar.at[0] == -20.
    assert net.gen.max_q_mvar.at[0] == 300.
    pfc.set_branch_status(net, [6, 7], False)
    assert not net.branch.in_service.loc[[6, 7]].any()


def test_invalid_edits():
    net = pn.case9()
    before = pfc.get_signature(net)
    with pytest.raises(UserWarning):
        pfc.set_branch_parameters(net, 3, length_km=2.)
    with pytest.raises(UserWarning, match="reactance"):
        pfc.set_branch_parameters(net, 3, x_pu=0.)
    with pytest.raises(UserWarning):
        pfc.set_branch_status(net, 42, False)
    with pytest.raises(UserWarning):
        pfc.set_bus_demand(net, 42, p_mw=1.)
    with pytest.raises(UserWarning):
        pfc.set_bus_type(net, 2, "swing")
    with pytest.raises(UserWarning, match="slack"):
        pfc.set_bus_type(net, 2, "slack")
    assert pfc.get_signature(net) == before


def test_set_bus_type_moves_slack():
    net = pn.case9()
    pfc.set_bus_type(net, 1, "pv")
    pfc.set_bus_type(net, 2, "slack")
    assert list(net.bus.index[net.bus.type == "slack"]) == [2]


def test_model_edit_keeps_ybus_pattern():
    net = pn.case9()
    ybus = get_ybus(net)
    pfc.set_branch_parameters(net, 4, r_pu=0.02)
    changed = get_ybus(net)
    assert changed is not ybus
    assert changed.pattern == ybus.pattern
    assert changed.model == ybus.model + 1
    assert np.array_equal(changed.matrix.indices, ybus.matrix.indices)
    assert np.array_equal(changed.matrix.indptr, ybus.matrix.indptr)

    # edits that do not touch the nodal matrices reuse them
    pfc.set_bus_demand(net, 5, p_mw=110.)
    assert get_ybus(net) is changed


if __name__ == "__main__":
    pytest.main([__file__, "-xs"])
