import os
pp_dir = os.path.dirname(os.path.realpath(__file__))

from pfcore._version import __version__
from pfcore.auxiliary import *
from pfcore.create import *
from pfcore.network import get_signature, get_ybus, get_bbus
from pfcore.powerflow import *
from pfcore.run import *
from pfcore.toolbox import *

import pandas as pd
pd.options.mode.chained_assignment = None  # default='warn'

# import pfcore packages
import pfcore.networks
