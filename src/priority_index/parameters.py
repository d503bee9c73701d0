"""Implements the Parameters class holding the configuration of a priority index run."""

import json
import math
from numbers import Integral
from numbers import Number
from pathlib import Path

from priority_index.errors import ConfigurationError

DEFAULTS = {
    "age_cutoff": 80,
    "min_mobile_age": 18,
    "max_mobile_age": 65,
    "min_center_population": 5000,
    "radius_meters": 20_000.0,
    "count_self_as_neighbor": True,
    "chunk_size": None,
}


class Parameters:
    """A dictionary-like bag of run parameters with `.property` access.

    Examples
    --------
    Start from the defaults and override:
        >>> from priority_index import DEFAULTS, Parameters
        >>> params = Parameters(DEFAULTS) << {"age_cutoff": 70}
        >>> params.age_cutoff
        70

    Adding a key that is already present is an error, overriding a key that is missing is an error:
        >>> params += {"age_cutoff": 60}            # ValueError
        >>> params <<= {"radius": 10_000}           # ValueError

    Add or override without restriction:
        >>> params |= {"radius_meters": 15_000.0, "label": "north"}

    Save and load as JSON:
        >>> params.save("params.json")
        >>> Parameters.load("params.json") == params
        True
    """

    def __init__(self, *bags):
        for bag in bags:
            assert isinstance(bag, (type(self), dict))
            for key, value in _items(bag):
                setattr(self, key, value)

    def to_dict(self):
        return dict(self.__dict__)

    def validate(self):
        """
        Check that the parameters describe a runnable configuration.

        Returns:

            Parameters: self, so calls can be chained (``params.validate().age_cutoff``).

        Raises:

            ConfigurationError: If a required key is missing, an age bound is not a non-negative integer,
                the mobile age band is inverted, or the radius or center population threshold is not positive.
        """

        missing = [key for key in DEFAULTS if key not in self]
        if missing:
            raise ConfigurationError(f"Missing parameter(s): {', '.join(missing)}")

        for key in ("age_cutoff", "min_mobile_age", "max_mobile_age"):
            check_age(key, self[key])

        check_mobile_band(self.min_mobile_age, self.max_mobile_age)

        for key in ("min_center_population", "radius_meters"):
            check_positive(key, self[key])

        chunk_size = self.chunk_size
        if chunk_size is not None and (isinstance(chunk_size, bool) or not isinstance(chunk_size, Integral) or chunk_size <= 0):
            raise ConfigurationError(f"chunk_size must be None or a positive integer ({chunk_size=})")

        return self

    def save(self, filename):
        """
        Save the parameters to a JSON file.

        Parameters:

            filename (str): The path to the file where the parameters will be saved.
        """
        with Path(filename).open("w") as file:
            file.write(str(self))

        return

    @staticmethod
    def load(filename):
        """Load parameters previously written with ``save()``."""
        with Path(filename).open("r") as file:
            data = json.load(file)

        return Parameters(data)

    def __getitem__(self, key):
        return getattr(self, key)

    def __setitem__(self, key, value):
        setattr(self, key, value)

    def __add__(self, other):
        return Parameters(self, other)

    def __iadd__(self, other):
        assert isinstance(other, (type(self), dict))
        for key, value in _items(other):
            if hasattr(self, key):
                raise ValueError(f"Cannot override existing value for '{key}'.")
            setattr(self, key, value)
        return self

    def __lshift__(self, other):
        result = Parameters(self)
        result <<= other

        return result

    def __ilshift__(self, other):
        assert isinstance(other, (type(self), dict))
        for key, value in _items(other):
            if not hasattr(self, key):
                raise ValueError(f"Cannot override missing key '{key}'.")
            setattr(self, key, value)
        return self

    def __or__(self, other):
        result = Parameters(self)
        result |= other

        return result

    def __ior__(self, other):
        assert isinstance(other, (type(self), dict))
        for key, value in _items(other):
            setattr(self, key, value)
        return self

    def __len__(self):
        return len(self.__dict__)

    def __contains__(self, key):
        return key in self.__dict__

    def __eq__(self, other):
        return isinstance(other, (type(self), dict)) and self.to_dict() == dict(_items(other))

    def __str__(self) -> str:
        return json.dumps(self.to_dict(), indent=4)

    def __repr__(self) -> str:
        return f"Parameters({self.to_dict()!s})"


def with_defaults(overrides=None):
    """
    Merge ``overrides`` over ``DEFAULTS``.

    Raises:

        ConfigurationError: If an override names a key that is not a known parameter.
    """

    overrides = overrides or {}
    unknown = [key for key, _ in _items(overrides) if key not in DEFAULTS]
    if unknown:
        raise ConfigurationError(f"Unknown parameter(s): {', '.join(unknown)}")

    return Parameters(DEFAULTS) << overrides


def check_age(name, value):
    if isinstance(value, bool) or not isinstance(value, Integral) or value < 0:
        raise ConfigurationError(f"{name} must be a non-negative integer ({value=})")


def check_mobile_band(min_mobile_age, max_mobile_age):
    check_age("min_mobile_age", min_mobile_age)
    check_age("max_mobile_age", max_mobile_age)
    if min_mobile_age > max_mobile_age:
        raise ConfigurationError(f"min_mobile_age must not exceed max_mobile_age ({min_mobile_age=}, {max_mobile_age=})")


def check_positive(name, value):
    if isinstance(value, bool) or not isinstance(value, Number) or not math.isfinite(value) or value <= 0:
        raise ConfigurationError(f"{name} must be a positive number ({value=})")


def _items(bag):
    return (bag.__dict__ if isinstance(bag, Parameters) else bag).items()
