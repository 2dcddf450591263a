# -*- coding: utf-8 -*-

# Copyright (c) 2016-2025 by University of Kassel and Fraunhofer Institute for Energy Economics
# and Energy System Technology (IEE), Kassel. All rights reserved.


# Additional copyright for modified code by Brendan Curran-Johnson (ADict class):
# Copyright (c) 2013 Brendan Curran-Johnson
#
# Permission is hereby granted, free of charge, to any person obtaining a copy
# of this software and associated documentation files (the "Software"), to deal
# in the Software without restriction, including without limitation the rights
# to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
# copies of the Software, and to permit persons to whom the Software is
# furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in
# all copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
# OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN
# THE SOFTWARE.
# (https://github.com/bcj/AttrDict/blob/master/LICENSE.txt)

import copy
import logging
from collections.abc import MutableMapping
from dataclasses import dataclass
from typing import Optional

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)

ALGORITHMS = ("nr", "fdbx", "fdxb", "gs", "dc")

# factorization kinds every solver accepts for its linear systems
FACTORIZATIONS = {"nr": ("lu", "qr"),
                  "fdbx": ("lu", "qr"),
                  "fdxb": ("lu", "qr"),
                  "gs": ("lu", "ldlt", "qr"),
                  "dc": ("lu", "ldlt", "qr")}

DEFAULT_MAX_ITERATION = {"nr": 10, "fdbx": 30, "fdxb": 30, "gs": 1000, "dc": 1}

INIT_MODES = ("auto", "flat", "dc", "results")


def plural_s(number):
    return "" if number == 1 else "s"


class ADict(dict, MutableMapping):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)

        # to prevent overwrite of internal attributes by new keys
        # see _valid_name()
        self._setattr('_allow_invalid_attributes', False)

    def _build(self, obj, **kwargs):
        """
        We only want dict like elements to be treated as recursive AttrDicts.
        """
        return obj

    # --- taken from AttrDict

    def __getstate__(self):
        return self.copy(), self._allow_invalid_attributes

    def __dir__(self):
        return list(self.keys())

    def __setstate__(self, state):
        mapping, allow_invalid_attributes = state
        self.update(mapping)
        self._setattr('_allow_invalid_attributes', allow_invalid_attributes)

    # --- taken from MutableAttr

    def _setattr(self, key, value):
        """
        Add an attribute to the object, without attempting to add it as
        a key to the mapping (i.e. internals)
        """
        super(MutableMapping, self).__setattr__(key, value)

    def __setattr__(self, key, value):
        """
        Add an attribute.

        key: The name of the attribute
        value: The attributes contents
        """
        if self._valid_name(key):
            self[key] = value
        elif getattr(self, '_allow_invalid_attributes', True):
            super(MutableMapping, self).__setattr__(key, value)
        else:
            raise TypeError(
                "'{cls}' does not allow attribute creation.".format(
                    cls=self.__class__.__name__
                )
            )

    def __delattr__(self, key):
        """
        Delete an attribute.

        key: The name of the attribute
        """
        if self._valid_name(key):
            del self[key]
        elif getattr(self, '_allow_invalid_attributes', True):
            super(MutableMapping, self).__delattr__(key)
        else:
            raise TypeError(
                "'{cls}' does not allow attribute deletion.".format(
                    cls=self.__class__.__name__
                )
            )

    def __getattr__(self, key):
        """
        Access an item as an attribute.
        """
        if key not in self or not self._valid_name(key):
            raise AttributeError(
                "'{cls}' instance has no attribute '{name}'".format(
                    cls=self.__class__.__name__, name=key
                )
            )

        return self._build(self[key])

    def __deepcopy__(self, memo):
        """
        Copies the tables column by column. Cached internal matrices and factorizations are
        not copied, the copy rebuilds them on first use.
        """
        cls = self.__class__
        result = cls.__new__(cls)
        memo[id(self)] = result
        for k, v in self.items():
            if k in ("_ppc", "_nodal"):
                result[k] = {}
            else:
                result[k] = copy.deepcopy(v, memo)
        result._setattr('_allow_invalid_attributes', self._allow_invalid_attributes)
        return result

    @classmethod
    def _valid_name(cls, key):
        """
        Check whether a key is a valid attribute name.

        A key may be used as an attribute if:
         * It is a string
         * The key doesn't overlap with any class attributes (for Attr,
            those would be 'get', 'items', 'keys', 'values', 'mro', and
            'register').
        """
        return isinstance(key, str) and not hasattr(cls, key)


class pfcoreNet(ADict):
    """
    Container of a network: the element tables bus, branch and gen as pandas DataFrames, the
    result tables and the internal bookkeeping (change signatures, cached internal arrays and
    nodal matrices).

    Tables given as lists of (column, dtype) tuples are converted into empty DataFrames.
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        for key in list(self.keys()):
            value = self[key]
            if isinstance(value, list) and len(value) and isinstance(value[0], tuple):
                self[key] = pd.DataFrame(
                    {col: pd.Series(dtype=dtyp) for col, dtyp in value},
                    index=pd.Index([], dtype=np.int64))

    def deepcopy(self):
        return copy.deepcopy(self)

    def __repr__(self):  # pragma: no cover
        par = []
        res = []
        for et in list(self.keys()):
            if not et.startswith("_") and isinstance(self[et], pd.DataFrame) and len(self[et]) > 0:
                n_rows = self[et].shape[0]
                if 'res_' in et:
                    res.append(f"   - {et} ({n_rows} element{plural_s(n_rows)})")
                else:
                    par.append(f"   - {et} ({n_rows} element{plural_s(n_rows)})")
        if not len(par) + len(res):
            return "This pfcore network is empty"
        if len(res):
            res = [" and the following results tables:"] + res
        lines = ["This pfcore network includes the following parameter tables:"] + par + res
        return "\n".join(lines)


def _preserve_dtypes(df, dtypes):
    for item, dtype in list(dtypes.items()):
        if df.dtypes.at[item] != dtype:
            if (dtype == bool or dtype == np.bool_) and np.any(df[item].isnull()):
                raise UserWarning(f"Encountered NaN value(s) in a boolean column {item}! "
                                  f"NaN are casted to True by default, which can lead to errors. "
                                  f"Replace NaN values with True or False first.")
            try:
                df[item] = df[item].astype(dtype)
            except ValueError:
                df[item] = df[item].astype(float)


def get_free_id(df):
    """
    Returns next free ID in a dataframe
    """
    return np.int64(0) if len(df) == 0 else df.index.values.max() + 1


def ensure_iterability(var, len_=None):
    """
    Ensures iterability of a variable (and optional length).
    """
    if hasattr(var, "__iter__") and not isinstance(var, str):
        if isinstance(len_, int) and len(var) != len_:
            raise ValueError("Length of variable differs from %i." % len_)
    else:
        len_ = len_ or 1
        var = [var] * len_
    return var


class pfcoreException(Exception):
    """
    General pfcore custom parent exception.
    """
    pass


class MissingSlack(pfcoreException):
    """
    Exception being raised in case no bus qualifies as slack bus.
    """
    pass


class SingularSystem(pfcoreException):
    """
    Exception being raised in case a linear system cannot be factorized.
    """
    pass


class IncompatibleReuse(pfcoreException):
    """
    Exception being raised in case a solver is stepped after the bus classification of its
    network changed.
    """
    pass


class AlgorithmUnknown(pfcoreException):
    """
    Exception being raised in case an unknown power flow algorithm is requested.
    """
    pass


@dataclass(frozen=True)
class PowerFlowOptions:
    """
    Immutable set of options of one power flow run. Values are validated on construction.
    """
    algorithm: str = "nr"
    factorization: str = "lu"
    max_iteration: int = 10
    tolerance: float = 1e-8
    init: str = "auto"
    enforce_q_lims: bool = False
    permc_spec: Optional[str] = None

    def __post_init__(self):
        if self.algorithm not in ALGORITHMS:
            raise AlgorithmUnknown("Algorithm %s is unknown. Valid algorithms are %s"
                                   % (self.algorithm, ", ".join(ALGORITHMS)))
        if self.factorization not in FACTORIZATIONS[self.algorithm]:
            raise ValueError("Factorization '%s' is not available for algorithm '%s'. Valid "
                             "choices are %s" % (self.factorization, self.algorithm,
                                                 FACTORIZATIONS[self.algorithm]))
        if isinstance(self.max_iteration, bool) or not isinstance(self.max_iteration,
                                                                  (int, np.integer)) \
                or self.max_iteration < 1:
            raise ValueError("max_iteration must be a positive integer, got %s"
                             % self.max_iteration)
        if not self.tolerance > 0:
            raise ValueError("tolerance must be positive, got %s" % self.tolerance)
        if self.init not in INIT_MODES:
            raise ValueError("init must be one of %s, got %s" % (INIT_MODES, self.init))
        if self.algorithm == "dc" and self.enforce_q_lims:
            raise ValueError("Reactive power limits cannot be enforced in a DC power flow")


def _init_runpp_options(net, algorithm, factorization, max_iteration, tolerance, init,
                        enforce_q_lims, **kwargs):
    """
    Inits _options in net for runpp.
    """
    permc_spec = kwargs.get("permc_spec", None)

    if algorithm not in ALGORITHMS:
        raise AlgorithmUnknown("Algorithm %s is unknown. Valid algorithms are %s"
                               % (algorithm, ", ".join(ALGORITHMS)))
    if max_iteration == "auto":
        max_iteration = DEFAULT_MAX_ITERATION[algorithm]

    if init == "results" and len(net.res_bus) == 0:
        init = "auto"
    if algorithm == "dc" and init == "dc":
        init = "auto"

    net._options = PowerFlowOptions(algorithm=algorithm, factorization=factorization,
                                    max_iteration=max_iteration, tolerance=tolerance, init=init,
                                    enforce_q_lims=enforce_q_lims, permc_spec=permc_spec)
    return net._options


def _init_rundcpp_options(net, factorization, **kwargs):
    net._options = PowerFlowOptions(algorithm="dc", factorization=factorization,
                                    max_iteration=1, init="auto",
                                    permc_spec=kwargs.get("permc_spec", None))
    return net._options


def _replace_nans_with_default_limits(q_min, q_max):
    """
    Unbounded reactive limits are stored as NaN in the gen table, they are replaced by -inf/inf.
    """
    q_min = np.where(np.isnan(q_min), -np.inf, q_min)
    q_max = np.where(np.isnan(q_max), np.inf, q_max)
    return q_min, q_max
