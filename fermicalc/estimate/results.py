''' Results of a Fermi estimate Monte Carlo simulation '''

from dataclasses import dataclass
import numpy as np

from .report import ReportEstimate


@dataclass(frozen=True)
class Histogram:
    ''' Histogram of the simulated values

        Attributes:
            min (float): Lower edge of the first bin
            max (float): Upper edge of the last bin
            bins (ndarray): Count of values falling in each linear bin
    '''
    min: float
    max: float
    bins: np.ndarray

    @property
    def edges(self):
        ''' Bin edges, length len(bins)+1 '''
        return np.linspace(self.min, self.max, len(self.bins)+1)

    def to_dict(self):
        return {'min': self.min, 'max': self.max, 'bins': [int(b) for b in self.bins]}


@dataclass(frozen=True)
class SimulationResult:
    ''' Results of Monte Carlo simulation of a formula

        Attributes:
            samples (ndarray): Valid (finite) simulated values, sorted ascending
            mean (float): Mean of samples
            median (float): Nearest-rank 50th percentile
            p5, p10, p90, p95 (float): Nearest-rank percentiles
            histogram (Histogram): Histogram of samples
            trials (int): Number of trials run, including discarded ones

        Note:
            Percentiles use nearest-rank indexing, samples[floor(len*q)],
            without interpolation. For small sample counts this is a biased
            estimator (e.g. the median of an even-length sample is the upper
            of the two middle values).
    '''
    samples: np.ndarray
    mean: float
    median: float
    p5: float
    p10: float
    p90: float
    p95: float
    histogram: Histogram
    trials: int = 0

    @property
    def report(self):
        ''' Generate formatted reports of the results '''
        return ReportEstimate(self)

    def _repr_markdown_(self):
        return self.report.summary().get_md()

    @property
    def count(self):
        ''' Number of valid samples '''
        return len(self.samples)

    @property
    def discarded(self):
        ''' Number of trials that were undefined or non-finite '''
        return max(0, self.trials - len(self.samples))

    def percentile(self, q):
        ''' Nearest-rank percentile of the samples

            Args:
                q (float): Quantile, 0 <= q < 1
        '''
        if not 0 <= q < 1:
            raise ValueError(f'Quantile must be in [0, 1), got {q}')
        return float(self.samples[int(np.floor(len(self.samples) * q))])

    def std(self):
        ''' Sample standard deviation of the valid samples '''
        if len(self.samples) < 2:
            return 0.0
        return float(np.std(self.samples, ddof=1))

    def to_dict(self):
        ''' Convert results to dictionary of plain Python types '''
        return {
            'samples': self.samples.tolist(),
            'mean': self.mean,
            'median': self.median,
            'p5': self.p5,
            'p10': self.p10,
            'p90': self.p90,
            'p95': self.p95,
            'histogram': self.histogram.to_dict(),
            }
