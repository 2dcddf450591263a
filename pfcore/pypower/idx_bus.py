# -*- coding: utf-8 -*-

# Copyright 1996-2015 PSERC. All rights reserved.
# Use of this source code is governed by a BSD-style
# license that can be found in the LICENSE file.

# Copyright (c) 2016-2025 by University of Kassel and Fraunhofer Institute for Energy Economics
# and Energy System Technology (IEE), Kassel. All rights reserved.

"""Defines constants for named column indices to bus matrix.

Some examples of usage, after defining the constants using the line above,
are::

    Pd = bus[3, PD]     # get the real power demand at bus 4
    bus[:, GS] = 0      # remove the shunt conductance at all buses

The index, name and meaning of each column of the internal bus matrix is
given below:

    0.  C{BUS_I}       consecutive internal bus position
    1.  C{BUS_TYPE}    bus type (1 = PQ, 2 = PV, 3 = ref, 4 = isolated)
    2.  C{PD}          real power demand (MW)
    3.  C{QD}          reactive power demand (MVAr)
    4.  C{GS}          shunt conductance (MW at V = 1.0 p.u.)
    5.  C{BS}          shunt susceptance (MVAr at V = 1.0 p.u.)
    6.  C{VM}          voltage magnitude seed (p.u.)
    7.  C{VA}          voltage angle seed (degrees)

additional constants, used to assign/compare values in the C{BUS_TYPE} column
    1.  C{PQ}    PQ bus
    2.  C{PV}    PV bus
    3.  C{REF}   reference bus
"""

# define bus types
PQ = 1
PV = 2
REF = 3

# define the indices
BUS_I = 0     # internal bus position
BUS_TYPE = 1  # bus type
PD = 2        # Pd, real power demand (MW)
QD = 3        # Qd, reactive power demand (MVAr)
GS = 4        # Gs, shunt conductance (MW at V = 1.0 p.u.)
BS = 5        # Bs, shunt susceptance (MVAr at V = 1.0 p.u.)
VM = 6        # Vm, voltage magnitude (p.u.)
VA = 7        # Va, voltage angle (degrees)

bus_cols = 8

# mapping of the type names used in the bus table
BUS_TYPE_CODES = {"pq": PQ, "pv": PV, "slack": REF}
