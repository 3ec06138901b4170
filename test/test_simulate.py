''' Test Monte Carlo simulation of formulas '''
import logging
import pytest
import numpy as np

from fermicalc.common.uparser import parse
from fermicalc.common.distributions import Uniform, Gaussian
from fermicalc.estimate import simulate, NoValidSamples
from fermicalc.estimate.simulate import summarize, histogram, HISTOGRAM_BINS


def test_degenerate():
    ''' Zero-width distribution puts everything in the first bin '''
    result = simulate(parse('x'), {'x': Uniform(5, 5)}, n=1000)
    assert result.count == 1000
    assert result.mean == 5
    assert result.median == result.p5 == result.p10 == result.p90 == result.p95 == 5
    assert len(result.histogram.bins) == HISTOGRAM_BINS
    assert result.histogram.bins[0] == 1000
    assert result.histogram.bins.sum() == 1000
    assert result.histogram.min == result.histogram.max == 5


def test_constant():
    ''' Formula with no variables '''
    result = simulate(parse('2*pi'), {}, n=10)
    assert np.allclose(result.samples, 2*np.pi)
    assert result.histogram.bins[0] == 10


def test_uniform():
    result = simulate(parse('x'), {'x': Uniform(0, 1)}, n=100000, seed=1)
    assert abs(result.mean - 0.5) < 0.02
    assert abs(result.median - 0.5) < 0.02
    assert abs(result.p90 - 0.9) < 0.02
    assert result.p5 <= result.p10 <= result.median <= result.p90 <= result.p95
    assert result.histogram.bins.sum() == result.count


def test_product():
    ''' Product of independent variables '''
    result = simulate(parse('a * b'), {'a': Gaussian(10, 1), 'b': Uniform(2, 4)}, n=20000, seed=2)
    assert np.isclose(result.mean, 30, rtol=.02)
    assert result.p5 > 10
    assert result.p95 < 50


def test_one_draw_per_trial():
    ''' A variable used twice in the formula takes the same value in a trial '''
    result = simulate(parse('x - x'), {'x': Gaussian(0, 1)}, n=500)
    assert (result.samples == 0).all()


def test_discard(caplog):
    ''' Undefined trials are dropped '''
    with caplog.at_level(logging.INFO):
        result = simulate(parse('log(x)'), {'x': Gaussian(0, 1)}, n=2000, seed=3)
    assert 0 < result.count < 2000
    assert result.discarded == 2000 - result.count
    assert result.trials == 2000
    assert np.isfinite(result.samples).all()
    assert result.histogram.bins.sum() == result.count
    assert 'Discarded' in caplog.text

    # 1/x with x possibly 0 - only infinite values are dropped
    result = simulate(parse('1/x'), {'x': Uniform(-1, 1)}, n=200, seed=4)
    assert np.isfinite(result.samples).all()


def test_novalid():
    with pytest.raises(NoValidSamples):
        simulate(parse('log(x)'), {'x': Uniform(-2, -1)}, n=100)

    with pytest.raises(NoValidSamples):   # y is not bound
        simulate(parse('x*y'), {'x': Uniform(0, 1)}, n=10)

    with pytest.raises(NoValidSamples) as exc:
        simulate(parse('x'), {'x': Uniform(0, 1)}, n=0)
    assert exc.value.trials == 0


def test_reproducible():
    ''' Same seed, same samples '''
    expr = parse('a * b')
    bindings = {'a': Gaussian(10, 1), 'b': Uniform(2, 4)}
    result1 = simulate(expr, bindings, n=1000, seed=42)
    result2 = simulate(expr, bindings, n=1000, seed=42)
    result3 = simulate(expr, bindings, n=1000, rng=np.random.default_rng(42))
    assert np.array_equal(result1.samples, result2.samples)
    assert np.array_equal(result1.samples, result3.samples)
    assert result1.mean == result2.mean

    result4 = simulate(expr, bindings, n=1000, seed=43)
    assert not np.array_equal(result1.samples, result4.samples)


def test_nearest_rank():
    ''' Percentiles are samples[floor(n*q)], no interpolation '''
    result = summarize(np.arange(10.))
    assert result.mean == 4.5
    assert result.median == 5
    assert result.p5 == 0
    assert result.p10 == 1
    assert result.p90 == 9
    assert result.p95 == 9
    assert result.percentile(.5) == result.median
    assert result.percentile(0) == 0
    with pytest.raises(ValueError):
        result.percentile(1)


def test_histogram():
    hist = histogram(np.linspace(0, 60, 61))
    assert hist.min == 0
    assert hist.max == 60
    assert hist.bins[0] == 1
    assert hist.bins[59] == 2   # Max value goes in last bin
    assert hist.bins.sum() == 61
    assert len(hist.edges) == 61

    hist = histogram(np.array([1., 1., 2.]), bins=4)
    assert list(hist.bins) == [2, 0, 0, 1]


def test_result():
    result = simulate(parse('x + 1'), {'x': Uniform(0, 1)}, n=100, seed=5)
    with pytest.raises(ValueError):
        result.samples[0] = 1   # Samples are read-only
    assert (np.diff(result.samples) >= 0).all()   # Sorted

    d = result.to_dict()
    assert len(d['samples']) == 100
    assert d['mean'] == result.mean
    assert sum(d['histogram']['bins']) == 100
    assert result.std() > 0
    assert 'Median' in result.report.summary().get_md()


def test_histogram_report():
    ''' Text histogram marks P10 and P90 '''
    result = simulate(parse('x'), {'x': Uniform(0, 1)}, n=1000, seed=6)
    md = result.report.histogram().get_md()
    plot = md.split('```')[1]
    markers = [line for line in plot.splitlines() if line.startswith(' ') and '^' in line]
    assert len(markers) == 1
    assert markers[0].count('^') == 2


def test_long_formula():
    ''' Long left-associative chains do not exhaust the stack '''
    result = simulate(parse('+'.join(['1']*3000)), {}, n=2)
    assert result.mean == 3000
    result = simulate(parse('*'.join(['x']*3000)), {'x': Uniform(1, 1)}, n=2)
    assert result.mean == 1
