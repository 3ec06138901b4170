''' Test distribution sampling '''
import logging
import pytest
import numpy as np

from fermicalc.common import distributions
from fermicalc.common.distributions import Uniform, Gaussian, Lognormal, Poisson, sample


def test_degenerate_uniform():
    rng = np.random.default_rng(1)
    assert all(sample(Uniform(5, 5), rng) == 5 for i in range(100))


def test_uniform():
    rng = np.random.default_rng(8181)
    x = np.array([sample(Uniform(0, 1), rng) for i in range(100000)])
    assert ((x >= 0) & (x < 1)).all()
    assert np.isclose(x.mean(), 0.5, atol=.01)
    assert np.isclose(np.percentile(x, 90), 0.9, atol=.01)


def test_gaussian():
    rng = np.random.default_rng(2323)
    dist = Gaussian(mean=10, stddev=2)
    x = np.array([sample(dist, rng) for i in range(100000)])
    assert np.isclose(x.mean(), 10, atol=.05)
    assert np.isclose(x.std(), 2, atol=.05)
    assert np.isclose(np.percentile(x, 90), dist.frozen().ppf(.9), atol=.05)


def test_lognormal():
    ''' low and high are the 10th and 90th percentiles '''
    rng = np.random.default_rng(4545)
    dist = Lognormal(low=10, high=1000)
    x = np.array([sample(dist, rng) for i in range(100000)])
    assert (x > 0).all()
    assert np.isclose((x < 10).mean(), .10, atol=.01)
    assert np.isclose((x > 1000).mean(), .10, atol=.01)
    assert np.isclose(np.median(x), 100, rtol=.05)   # Geometric mean of low and high

    assert np.isclose(dist.frozen().ppf(.1), 10, rtol=1E-3)
    assert np.isclose(dist.frozen().ppf(.9), 1000, rtol=1E-3)
    assert np.isclose(dist.mu, np.log(100))


def test_poisson():
    rng = np.random.default_rng(6767)
    x = np.array([sample(Poisson(4), rng) for i in range(100000)])
    assert (x == np.round(x)).all()
    assert (x >= 0).all()
    assert np.isclose(x.mean(), 4, atol=.05)
    assert np.isclose(x.var(), 4, atol=.1)
    assert all(sample(Poisson(0), rng) == 0 for i in range(100))


def test_seed():
    ''' Same seed gives same values '''
    dist = Gaussian(0, 1)
    rng1 = np.random.default_rng(99)
    rng2 = np.random.default_rng(99)
    assert [sample(dist, rng1) for i in range(10)] == [sample(dist, rng2) for i in range(10)]

    distributions.set_seed(5)
    a = [sample(dist) for i in range(10)]
    distributions.set_seed(5)
    b = [sample(dist) for i in range(10)]
    assert a == b


def test_get_distribution():
    assert distributions.get_distribution('uniform') == Uniform(0, 100)
    assert distributions.get_distribution('gaussian') == Gaussian(50, 10)
    assert distributions.get_distribution('lognormal') == Lognormal(10, 1000)
    assert distributions.get_distribution('poisson') == Poisson(10)
    assert distributions.get_distribution('uniform', max=5) == Uniform(0, 5)
    assert distributions.get_distribution('poisson', **{'lambda': 3}) == Poisson(3)
    assert distributions.get_distribution('gaussian', mean='3', stddev='.5') == Gaussian(3, .5)
    assert distributions.default_distribution() == Uniform(0, 100)
    assert distributions.get_argnames('poisson') == ['lambda']
    assert distributions.DISTRIBUTION_TYPES == ('uniform', 'gaussian', 'lognormal', 'poisson')

    with pytest.raises(ValueError):
        distributions.get_distribution('triangular')

    with pytest.raises(ValueError):
        distributions.get_distribution('uniform', low=3)

    with pytest.raises(ValueError):
        distributions.get_distribution('uniform', min='abc')


def test_config():
    ''' Config dictionaries use the type/parameter names of the boundary records '''
    for dist in [Uniform(1, 2), Gaussian(3, 4), Lognormal(5, 6), Poisson(7)]:
        config = distributions.get_config(dist)
        assert distributions.from_config(config) == dist

    assert distributions.get_config(Poisson(2)) == {'type': 'poisson', 'lambda': 2.0}
    assert distributions.get_config(Lognormal(1, 9)) == {'type': 'lognormal', 'low': 1.0, 'high': 9.0}
    assert distributions.from_config({'type': 'gaussian', 'mean': 1, 'stddev': 2}) == Gaussian(1, 2)


def test_frozen():
    assert np.isclose(Uniform(2, 4).frozen().mean(), 3)
    assert np.isclose(Gaussian(3, 1).frozen().std(), 1)
    assert np.isclose(Poisson(5).frozen().mean(), 5)
    assert Lognormal(10, 1000).describe() == 'lognormal(P10=10, P90=1000)'
    assert Poisson(3).describe() == 'poisson(lambda=3)'


def test_lognormal_warning(caplog):
    with caplog.at_level(logging.WARNING):
        distributions.get_distribution('lognormal', low=0, high=10)
    assert 'positive' in caplog.text


def test_poisson_nan():
    ''' Undefined rate gives one draw and returns 0, like a negative rate '''
    rng = np.random.default_rng(1)
    assert sample(Poisson(float('nan')), rng) == 0
    assert sample(distributions.get_distribution('poisson', **{'lambda': 'nan'}), rng) == 0
    assert sample(Poisson(-3), rng) == 0
