''' Probability Distribution Manager

Each distribution is a small immutable record with its defining parameters.
sample() draws a single random value using a numpy Generator, and frozen()
returns the equivalent scipy.stats distribution for computing theoretical
mean, pdf, or percentiles.

Use get_distribution(), given a distribution name, or from_config(), given
a configuration dictionary such as {'type': 'uniform', 'min': 0, 'max': 1},
to build a distribution.
'''

import logging
from dataclasses import dataclass, fields
import numpy as np
import scipy.stats as stats


# z-score of the 90th percentile of the standard normal. Lognormal
# distributions are defined by their 10th and 90th percentiles.
Z90 = 1.2816

DISTRIBUTION_TYPES = ('uniform', 'gaussian', 'lognormal', 'poisson')

# Process-wide generator used when no generator is given to sample()
_rng = np.random.default_rng()


def set_seed(seed=None):
    ''' Reseed the shared random generator used by sample() when no
        generator is provided.
    '''
    global _rng
    _rng = np.random.default_rng(seed)


def _uniform01(rng):
    ''' Uniform draw on (0, 1), redrawing any exact zero '''
    u = 0.0
    while u == 0:
        u = rng.random()
    return u


def standard_normal(rng):
    ''' Standard normal deviate using Box-Muller transform '''
    u1 = _uniform01(rng)
    u2 = _uniform01(rng)
    return np.sqrt(-2 * np.log(u1)) * np.cos(2 * np.pi * u2)


@dataclass(frozen=True)
class Uniform:
    ''' Uniform distribution between min and max '''
    min: float = 0
    max: float = 100
    name = 'uniform'

    def sample(self, rng):
        return self.min + rng.random() * (self.max - self.min)

    def frozen(self):
        return stats.uniform(loc=self.min, scale=self.max - self.min)

    def describe(self):
        return f'uniform(min={self.min:g}, max={self.max:g})'


@dataclass(frozen=True)
class Gaussian:
    ''' Normal distribution with mean and standard deviation '''
    mean: float = 50
    stddev: float = 10
    name = 'gaussian'

    def sample(self, rng):
        return self.mean + self.stddev * standard_normal(rng)

    def frozen(self):
        return stats.norm(loc=self.mean, scale=self.stddev)

    def describe(self):
        return f'gaussian(mean={self.mean:g}, stddev={self.stddev:g})'


@dataclass(frozen=True)
class Lognormal:
    ''' Lognormal distribution defined by its 10th (low) and 90th (high)
        percentiles rather than the parameters of the underlying normal.
    '''
    low: float = 10
    high: float = 1000
    name = 'lognormal'

    @property
    def mu(self):
        ''' Mean of the underlying normal distribution '''
        return (np.log(self.low) + np.log(self.high)) / 2

    @property
    def sigma(self):
        ''' Standard deviation of the underlying normal distribution '''
        return (np.log(self.high) - np.log(self.low)) / (2 * Z90)

    def sample(self, rng):
        return np.exp(self.mu + self.sigma * standard_normal(rng))

    def frozen(self):
        return stats.lognorm(s=self.sigma, scale=np.exp(self.mu))

    def describe(self):
        return f'lognormal(P10={self.low:g}, P90={self.high:g})'


@dataclass(frozen=True)
class Poisson:
    ''' Poisson distribution with rate lambda '''
    lam: float = 10
    name = 'poisson'

    def sample(self, rng):
        # Knuth's algorithm
        limit = np.exp(-self.lam)
        k = 0
        p = 1.0
        while True:
            k += 1
            p *= rng.random()
            if not p > limit:
                break
        return k - 1

    def frozen(self):
        return stats.poisson(mu=self.lam)

    def describe(self):
        return f'poisson(lambda={self.lam:g})'


_dists = {
    'uniform': Uniform,
    'gaussian': Gaussian,
    'lognormal': Lognormal,
    'poisson': Poisson,
    }

# Config files use "lambda", which can't be a Python attribute name
_config_keys = {'lambda': 'lam'}
_attr_keys = {v: k for k, v in _config_keys.items()}


def get_argnames(name):
    ''' Get parameter names (as used in config files) for the distribution type '''
    try:
        dist = _dists[name]
    except KeyError:
        raise ValueError(f'Unknown distribution type `{name}`') from None
    return [_attr_keys.get(f.name, f.name) for f in fields(dist)]


def get_distribution(name, **kwds):
    ''' Get an instance of a distribution.

        Args:
            name (str): Type of distribution: uniform, gaussian, lognormal, or poisson
            **kwds: Parameters of the distribution. Parameters not given
                use the default for that distribution type.

        Returns:
            Distribution instance
    '''
    try:
        dist = _dists[name]
    except KeyError:
        raise ValueError(f'Unknown distribution type `{name}`') from None

    kwds = {_config_keys.get(k, k): v for k, v in kwds.items()}
    argnames = [f.name for f in fields(dist)]
    for k in kwds:
        if k not in argnames:
            raise ValueError(f'Invalid parameter `{k}` for {name} distribution')

    try:
        kwds = {k: float(v) for k, v in kwds.items()}
    except (TypeError, ValueError) as exc:
        raise ValueError(f'Non-numeric parameter for {name} distribution: {kwds}') from exc

    d = dist(**kwds)
    if isinstance(d, Lognormal) and (d.low <= 0 or d.high <= 0):
        logging.warning('Lognormal distribution requires positive percentiles, got %s', d.describe())
    return d


def default_distribution():
    ''' Distribution assigned to newly added variables '''
    return Uniform(0, 100)


def from_config(config):
    ''' Load a distribution instance from a config dictionary. '''
    config = dict(config)
    name = config.pop('type', 'uniform')
    return get_distribution(name, **config)


def get_config(dist):
    ''' Get configuration dictionary (type plus parameters) of the distribution '''
    d = {'type': dist.name}
    for f in fields(dist):
        d[_attr_keys.get(f.name, f.name)] = float(getattr(dist, f.name))
    return d


def sample(dist, rng=None):
    ''' Draw one random value from the distribution

        Args:
            dist: Distribution instance (Uniform, Gaussian, Lognormal, Poisson)
            rng (np.random.Generator): Random generator. Uses a shared process-wide
                generator if not provided.
    '''
    if rng is None:
        rng = _rng
    return float(dist.sample(rng))
