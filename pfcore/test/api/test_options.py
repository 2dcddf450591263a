# -*- coding: utf-8 -*-

# Copyright (c) 2016-2025 by University of Kassel and Fraunhofer Institute for Energy Economics
# and Energy System Technology (IEE), Kassel. All rights reserved.

from dataclasses import FrozenInstanceError

import pytest

import pfcore as pfc
from pfcore.auxiliary import PowerFlowOptions, AlgorithmUnknown, DEFAULT_MAX_ITERATION


def test_default_options():
    options = PowerFlowOptions()
    assert options.algorithm == "nr"
    assert options.factorization == "lu"
    assert options.tolerance == 1e-8
    assert options.init == "auto"
    assert not options.enforce_q_lims


def test_options_are_frozen():
    options = PowerFlowOptions()
    with pytest.raises(FrozenInstanceError):
        options.tolerance = 1e-3


@pytest.mark.parametrize("algorithm, factorization", [
    ("nr", "lu"), ("nr", "qr"), ("fdbx", "lu"), ("fdxb", "qr"), ("gs", "lu"), ("dc", "lu"),
    ("dc", "ldlt"), ("dc", "qr")])
def test_valid_factorizations(algorithm, factorization):
    options = PowerFlowOptions(algorithm=algorithm, factorization=factorization)
    assert options.factorization == factorization


@pytest.mark.parametrize("algorithm, factorization", [
    ("nr", "ldlt"), ("fdbx", "ldlt"), ("fdxb", "ldlt"), ("nr", "cholesky")])
def test_invalid_factorizations(algorithm, factorization):
    with pytest.raises(ValueError):
        PowerFlowOptions(algorithm=algorithm, factorization=factorization)


def test_invalid_options():
    with pytest.raises(AlgorithmUnknown):
        PowerFlowOptions(algorithm="bfsw")
    with pytest.raises(ValueError):
        PowerFlowOptions(max_iteration=0)
    with pytest.raises(ValueError):
        PowerFlowOptions(max_iteration=2.5)
    with pytest.raises(ValueError):
        PowerFlowOptions(tolerance=0.)
    with pytest.raises(ValueError):
        PowerFlowOptions(init="random")
    with pytest.raises(ValueError, match="DC"):
        PowerFlowOptions(algorithm="dc", enforce_q_lims=True)


def test_runpp_rejects_unknown_algorithm(three_bus):
    with pytest.raises(AlgorithmUnknown):
        pfc.runpp(three_bus, algorithm="bfsw")
    assert three_bus.res_bus.empty


@pytest.mark.parametrize("algorithm", ["nr", "fdbx", "fdxb", "gs", "dc"])
def test_auto_max_iteration(three_bus, algorithm):
    pfc.runpp(three_bus, algorithm=algorithm)
    assert three_bus._options.max_iteration == DEFAULT_MAX_ITERATION[algorithm]
    assert three_bus._options.algorithm == algorithm


def test_runpp_options_are_stored(three_bus):
    pfc.runpp(three_bus, max_iteration=7, tolerance=1e-6, init="flat")
    options = three_bus._options
    assert options.max_iteration == 7
    assert options.tolerance == 1e-6
    assert options.init == "flat"


def test_init_results_without_results(three_bus):
    # falls back to "auto" if there is nothing to initialize from
    pfc.runpp(three_bus, init="results")
    assert three_bus._options.init == "auto"
    assert three_bus.converged


def test_rundcpp_options(three_bus):
    pfc.rundcpp(three_bus, factorization="ldlt")
    options = three_bus._options
    assert options.algorithm == "dc"
    assert options.factorization == "ldlt"
    assert options.max_iteration == 1
    with pytest.raises(ValueError):
        pfc.runpp(three_bus, algorithm="dc", enforce_q_lims=True)


if __name__ == "__main__":
    pytest.main([__file__, "-xs"])
