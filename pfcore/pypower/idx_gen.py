# -*- coding: utf-8 -*-

# Copyright 1996-2015 PSERC. All rights reserved.
# Use of this source code is governed by a BSD-style
# license that can be found in the LICENSE file.

# Copyright (c) 2016-2025 by University of Kassel and Fraunhofer Institute for Energy Economics
# and Energy System Technology (IEE), Kassel. All rights reserved.

"""Defines constants for named column indices to gen matrix.

Some examples of usage, after defining the constants using the line above,
are::

    Pg = gen[3, PG]       # get the real power output of generator 4
    gen[:, QMAX] = inf    # remove the upper reactive limit of all gens

The index, name and meaning of each column of the internal gen matrix is
given below:

    0.  C{GEN_BUS}     bus position
    1.  C{PG}          real power output (MW)
    2.  C{QG}          reactive power output (MVAr)
    3.  C{QMAX}        maximum reactive power output (MVAr)
    4.  C{QMIN}        minimum reactive power output (MVAr)
    5.  C{VG}          voltage magnitude setpoint (p.u.)
    6.  C{GEN_STATUS}  1 - in service, 0 - out of service
"""

# define the indices
GEN_BUS     = 0    # bus position
PG          = 1    # Pg, real power output (MW)
QG          = 2    # Qg, reactive power output (MVAr)
QMAX        = 3    # Qmax, maximum reactive power output at Pmin (MVAr)
QMIN        = 4    # Qmin, minimum reactive power output at Pmin (MVAr)
VG          = 5    # Vg, voltage magnitude setpoint (p.u.)
GEN_STATUS  = 6    # status, 1 - in service, 0 - out of service

gen_cols = 7
