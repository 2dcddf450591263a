# -*- coding: utf-8 -*-

# Copyright (c) 2016-2025 by University of Kassel and Fraunhofer Institute for Energy Economics
# and Energy System Technology (IEE), Kassel. All rights reserved.

from collections import namedtuple

from numpy import conj, r_, sort, max as np_max, abs as np_abs

Mismatch = namedtuple("Mismatch", ["active", "reactive", "max_active", "max_reactive"])


def _inf_norm(x):
    return np_max(np_abs(x)) if len(x) else 0.


def make_mismatch(P, Q):
    return Mismatch(P, Q, _inf_norm(P), _inf_norm(Q))


def evaluate_mismatch(Ybus, V, Sbus, pvpq, pq, normalize=False):
    """
    Evaluates the power mismatch at the voltage V, calculated minus specified injection.

    INPUT:
        **Ybus** (csr_matrix) - bus admittance matrix

        **V** (complex array) - bus voltages

        **Sbus** (complex array) - specified bus injections in p.u.

        **pvpq** (int array) - buses with an active power equation (all but the slack bus)

        **pq** (int array) - buses with a reactive power equation

    OPTIONAL:
        **normalize** (bool, False) - divides the mismatch of each bus by its voltage magnitude,
        as used by the fast decoupled power flow

    OUTPUT:
        **mismatch** (Mismatch) - active and reactive residuals in the order of pvpq and pq and
        their maximum absolute values
    """
    mis = V * conj(Ybus * V) - Sbus
    if normalize:
        mis = mis / np_abs(V)
    return make_mismatch(mis[pvpq].real, mis[pq].imag)


def stacked(mismatch):
    """
    Returns the active and reactive residuals as one vector, the right hand side of the Newton
    step.
    """
    return r_[mismatch.active, mismatch.reactive]


def evaluate_mismatch_gs(Ybus, V, Sbus, pv, pq):
    """
    Complex power mismatch of the Gauss-Seidel method, evaluated from the rectangular voltages.
    Active residuals of the PV and PQ buses (ascending bus order), reactive residuals of the PQ
    buses.
    """
    mis = V * conj(Ybus * V) - Sbus
    pvpq = sort(r_[pv, pq])
    return make_mismatch(mis[pvpq].real, mis[pq].imag)
