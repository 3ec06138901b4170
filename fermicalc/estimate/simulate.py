''' Monte Carlo simulation of a formula with uncertain inputs

    For each trial, every bound variable is sampled from its distribution
    and the formula is evaluated. Trials where the formula is undefined
    (unknown names, or a non-finite result such as log of a negative value)
    are dropped, so the number of valid samples may be less than the number
    of trials.
'''

import logging
import numpy as np

from ..common import uparser
from ..common.distributions import sample
from .results import SimulationResult, Histogram


NUM_SAMPLES = 10000   # Default number of trials
HISTOGRAM_BINS = 60

# Name: quantile for nearest-rank summary statistics
PERCENTILES = {'p5': .05, 'p10': .10, 'median': .5, 'p90': .90, 'p95': .95}


class NoValidSamples(ValueError):
    ''' Every simulation trial was discarded '''
    def __init__(self, trials):
        super().__init__(f'No valid samples produced in {trials} trials')
        self.trials = trials


def histogram(samples, bins=HISTOGRAM_BINS):
    ''' Count sorted samples into linear bins spanning [min, max]. All
        samples fall in bin 0 when the range is zero.
    '''
    low = float(samples[0])
    high = float(samples[-1])
    width = (high - low) / bins
    counts = np.zeros(bins, dtype=int)
    if width > 0 and np.isfinite(width):
        idx = np.minimum(np.floor((samples - low) / width).astype(int), bins-1)
        counts += np.bincount(idx, minlength=bins)
    else:
        counts[0] = len(samples)
    return Histogram(low, high, counts)


def summarize(samples, trials=0):
    ''' Reduce sorted samples to summary statistics

        Args:
            samples (ndarray): Finite values sorted ascending
            trials (int): Number of trials that produced the samples

        Returns:
            SimulationResult
    '''
    n = len(samples)
    if n == 0:
        raise NoValidSamples(trials)

    stats = {name: float(samples[int(np.floor(n * q))]) for name, q in PERCENTILES.items()}
    samples.flags.writeable = False
    return SimulationResult(
        samples=samples,
        mean=float(np.mean(samples)),
        histogram=histogram(samples),
        trials=trials,
        **stats)


def simulate(expr, bindings, n=NUM_SAMPLES, rng=None, seed=None):
    ''' Run the Monte Carlo simulation

        Args:
            expr (Expr): Parsed formula
            bindings (dict): Mapping of variable name to Distribution. Must
                cover every free variable of expr.
            n (int): Number of trials
            rng (np.random.Generator): Random generator to draw from. If not
                provided, a new generator is created from seed.
            seed (int): Seed for the new generator when rng is not provided

        Returns:
            SimulationResult

        Raises:
            NoValidSamples: if no trial produced a finite value
    '''
    if rng is None:
        rng = np.random.default_rng(seed)

    n = max(int(n), 0)
    bindings = list(bindings.items())
    buffer = np.empty(n)
    count = 0
    for _ in range(n):
        values = {name: sample(dist, rng) for name, dist in bindings}
        try:
            value = uparser.evaluate(expr, values)
        except uparser.FormulaError:
            continue
        if np.isfinite(value):
            buffer[count] = value
            count += 1

    if count < n:
        logging.info('Discarded %d of %d Monte Carlo trials with undefined result', n - count, n)

    samples = buffer[:count]
    samples.sort()
    return summarize(samples, trials=n)
