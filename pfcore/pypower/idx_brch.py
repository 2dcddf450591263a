# -*- coding: utf-8 -*-

# Copyright 1996-2015 PSERC. All rights reserved.
# Use of this source code is governed by a BSD-style
# license that can be found in the LICENSE file.

# Copyright (c) 2016-2025 by University of Kassel and Fraunhofer Institute for Energy Economics
# and Energy System Technology (IEE), Kassel. All rights reserved.

"""Defines constants for named column indices to branch matrix.

Some examples of usage, after defining the constants using the line above,
are::

    branch[3, BR_STATUS] = 0              # take branch 4 out of service
    branch[:, TAP] = 1                    # cancel all off-nominal ratios

The index, name and meaning of each column of the internal branch matrix is
given below:

    0.  C{F_BUS}       from bus position
    1.  C{T_BUS}       to bus position
    2.  C{BR_R}        resistance (p.u.)
    3.  C{BR_X}        reactance (p.u.)
    4.  C{BR_G}        total line charging conductance (p.u.)
    5.  C{BR_B}        total line charging susceptance (p.u.)
    6.  C{TAP}         transformer off nominal turns ratio
    7.  C{SHIFT}       transformer phase shift angle (degrees)
    8.  C{BR_STATUS}   branch status, 1 - in service, 0 - out of service
"""

# define the indices
F_BUS       = 0    # f, from bus position
T_BUS       = 1    # t, to bus position
BR_R        = 2    # r, resistance (p.u.)
BR_X        = 3    # x, reactance (p.u.)
BR_G        = 4    # g, total line charging conductance (p.u.)
BR_B        = 5    # b, total line charging susceptance (p.u.)
TAP         = 6    # ratio, transformer off nominal turns ratio
SHIFT       = 7    # angle, transformer phase shift angle (degrees)
BR_STATUS   = 8    # branch status, 1 - in service, 0 - out of service

branch_cols = 9
