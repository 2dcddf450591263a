# -*- coding: utf-8 -*-

# Copyright (c) 2016-2025 by University of Kassel and Fraunhofer Institute for Energy Economics
# and Energy System Technology (IEE), Kassel. All rights reserved.

import pytest

import pfcore.networks as pn


@pytest.fixture
def three_bus():
    return pn.example_three_bus()


@pytest.fixture
def case9():
    return pn.case9()


@pytest.fixture
def multi_gen():
    return pn.example_multi_gen()
