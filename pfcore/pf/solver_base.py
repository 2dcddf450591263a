# -*- coding: utf-8 -*-

# Copyright (c) 2016-2025 by University of Kassel and Fraunhofer Institute for Energy Economics
# and Energy System Technology (IEE), Kassel. All rights reserved.

import logging

import numpy as np
import pandas as pd

from pfcore.auxiliary import PowerFlowOptions, IncompatibleReuse
from pfcore.network import get_bbus, get_dc_injections
from pfcore.pd2ppc import _get_ppci
from pfcore.pypower.bustypes import classify
from pfcore.pypower.dcpf import dcpf
from pfcore.pypower.idx_bus import BUS_TYPE, PQ, VM, VA, GS
from pfcore.pypower.idx_gen import GEN_BUS, GEN_STATUS, VG
from pfcore.pypower.makeSbus import makeSbus

std_logger = logging.getLogger(__name__)


class VoltageState:
    """
    Bus voltages in polar form, magnitude in p.u. and angle in radians, indexed by the internal
    bus position. bus holds the bus indices of the positions.
    """

    def __init__(self, magnitude, angle, bus):
        self.magnitude = np.array(magnitude, dtype=np.float64)
        self.angle = np.array(angle, dtype=np.float64)
        self.bus = np.asarray(bus)

    @property
    def V(self):
        return self.magnitude * np.exp(1j * self.angle)

    def set_complex(self, V):
        self.magnitude = np.abs(V)
        self.angle = np.angle(V)

    def copy(self):
        return VoltageState(self.magnitude, self.angle, self.bus)

    def to_frame(self):
        return pd.DataFrame({"vm_pu": self.magnitude, "va_degree": np.rad2deg(self.angle)},
                            index=pd.Index(self.bus, name="bus"))

    def __repr__(self):  # pragma: no cover
        return "%s with %i buses" % (self.__class__.__name__, len(self.magnitude))


def _gen_voltage_setpoints(bus, gen):
    """
    Voltage setpoint of every bus, taken from its first in service generator. NaN at buses
    without generator.
    """
    on = gen[:, GEN_STATUS] > 0
    gbus = gen[on, GEN_BUS].astype(np.int64)
    vg = np.full(bus.shape[0], np.nan)
    # reversed, so the first generator of a bus is written last
    vg[gbus[::-1]] = gen[on, VG][::-1]
    return vg


class BaseSolver:
    """
    Common contract of the power flow solvers: a solver is bound to one network and one bus
    classification, owns its voltage state and offers evaluate_mismatch() and step().

    The bus classification is repaired once on construction. If it changes afterwards (layout
    signature advanced) the solver refuses to continue with IncompatibleReuse. Numeric and
    structural edits of the network are picked up before every evaluation and step.

    INPUT:
        **net** - The pfcore network

    OPTIONAL:
        **options** (PowerFlowOptions, None) - factorization settings; defaults of the
        algorithm if None

        **init** (str or VoltageState, None) - "auto", "flat", "dc", "results" or a
        VoltageState to start from (warm start). Taken from options if None.
    """
    algorithm = None

    def __init__(self, net, options=None, init=None, logger=std_logger):
        self.net = net
        self.options = options if options is not None else \
            PowerFlowOptions(algorithm=self.algorithm)
        self.logger = logger
        self.bus_types = classify(net)
        self._layout = net._signature["layout"]

        ppci = _get_ppci(net)
        self.bus_index = ppci["internal"]["bus"]
        self.nb = len(self.bus_index)
        self.ref = self.bus_types.ref
        self.pv = self.bus_types.pv
        self.pq = self.bus_types.pq
        # all buses but the slack, ascending
        self.pvpq = np.setdiff1d(np.arange(self.nb), self.ref)

        self.voltage = self._init_voltage(ppci, self.options.init if init is None else init)
        self._setpoint_revision = net._signature["revision"]
        self.iterations = 0
        self._setup()

    def _setup(self):
        pass

    def _check_compatibility(self):
        if self.net._signature["layout"] != self._layout:
            raise IncompatibleReuse(
                "The bus classification of the network changed after this %s solver was "
                "created, create a new solver" % self.__class__.__name__)

    def _sync_with_network(self):
        """
        Checks the bus classification and pins the magnitudes of the generator buses to the
        current voltage setpoints, which may have been edited since the last call.
        """
        self._check_compatibility()
        revision = self.net._signature["revision"]
        if revision != self._setpoint_revision:
            self._pin_setpoints(_get_ppci(self.net), self.voltage.magnitude)
            self._setpoint_revision = revision

    def _pin_setpoints(self, ppci, vm):
        bus = ppci["bus"]
        vg = _gen_voltage_setpoints(bus, ppci["gen"])
        fixed = (bus[:, BUS_TYPE] != PQ) & ~np.isnan(vg)
        vm[fixed] = vg[fixed]

    def _Sbus(self):
        ppci = _get_ppci(self.net)
        return makeSbus(ppci["baseMVA"], ppci["bus"], ppci["gen"])

    def _voltage_setpoints(self):
        ppci = _get_ppci(self.net)
        return _gen_voltage_setpoints(ppci["bus"], ppci["gen"])

    def _init_voltage(self, ppci, init):
        bus = ppci["bus"]
        if isinstance(init, VoltageState):
            if not np.array_equal(init.bus, self.bus_index):
                raise IncompatibleReuse("The voltage state to start from belongs to a different "
                                        "set of buses")
            vm = init.magnitude.copy()
            va = init.angle.copy()
        elif init == "flat":
            vm = np.ones(self.nb)
            va = np.zeros(self.nb)
            va[self.ref] = np.deg2rad(bus[self.ref, VA])
        elif init == "results":
            res = self.net.res_bus.reindex(self.bus_index)
            if res.vm_pu.isnull().any() or res.va_degree.isnull().any():
                self.logger.info("no complete results to initialize from, using init='auto'")
                return self._init_voltage(ppci, "auto")
            vm = res.vm_pu.values.astype(np.float64)
            va = np.deg2rad(res.va_degree.values.astype(np.float64))
        elif init in ("auto", "dc"):
            vm = bus[:, VM].copy()
            va = np.deg2rad(bus[:, VA])
            if init == "dc":
                va = self._dc_angles(ppci, va)
        else:
            raise ValueError("Unknown initialization %s" % init)

        # magnitudes at generator buses are given by the setpoints
        self._pin_setpoints(ppci, vm)
        return VoltageState(vm, va, self.bus_index)

    def _dc_angles(self, ppci, va0):
        Bbus = get_bbus(self.net).matrix
        _, Pbusinj, _ = get_dc_injections(self.net)
        Pbus = self._Sbus().real - Pbusinj - ppci["bus"][:, GS] / ppci["baseMVA"]
        return dcpf(Bbus, Pbus, va0, self.ref)

    def evaluate_mismatch(self):
        # Must be implemented individually!!
        raise NotImplementedError

    def step(self):
        # Must be implemented individually!!
        raise NotImplementedError
