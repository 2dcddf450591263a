# -*- coding: utf-8 -*-

# Copyright (c) 2016-2025 by University of Kassel and Fraunhofer Institute for Energy Economics
# and Energy System Technology (IEE), Kassel. All rights reserved.

import logging

import numpy as np

logger = logging.getLogger(__name__)


def align_angles(voltage, net, reference_bus):
    """
    Shifts all angles of voltage by the same amount, so that the angle of reference_bus equals
    its configured angle (net.bus.va_degree). A voltage state that is already aligned is not
    changed.

    INPUT:
        **voltage** (VoltageState) - solution to align, modified in place

        **net** - The pfcore network

        **reference_bus** (int) - index of the bus whose angle is given

    OUTPUT:
        **voltage** (VoltageState) - the aligned voltage state
    """
    position = np.flatnonzero(voltage.bus == reference_bus)
    if not len(position):
        raise UserWarning("Bus %s is not part of the solution" % reference_bus)
    target = np.deg2rad(net.bus.va_degree.at[reference_bus])
    shift = target - voltage.angle[position[0]]
    if shift != 0:
        voltage.angle += shift
        logger.debug("shifted all voltage angles by %.6f degree to bus %s"
                     % (np.rad2deg(shift), reference_bus))
    return voltage
