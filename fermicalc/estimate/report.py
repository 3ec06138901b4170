''' Generate reports from Fermi estimate simulation results '''

from ..common import report


class ReportEstimate:
    ''' Fermi estimate report

        Args:
            results: SimulationResult instance
    '''
    def __init__(self, results):
        self._results = results

    def _repr_markdown_(self):
        return self.summary().get_md()

    def summary(self, **kwargs):
        ''' Generate table of summary statistics '''
        r = self._results
        rpt = report.Report(**kwargs)
        rows = [('Mean', report.Number(r.mean)),
                ('Median', report.Number(r.median)),
                ('P5', report.Number(r.p5)),
                ('P10', report.Number(r.p10)),
                ('P90', report.Number(r.p90)),
                ('P95', report.Number(r.p95))]
        rpt.table(rows, hdr=['Statistic', 'Value'])
        rpt.txt(f'{r.count:,} valid samples')
        if r.discarded:
            rpt.txt(f' ({r.discarded:,} of {r.trials:,} trials discarded as undefined)')
        rpt.txt('\n\n')
        return rpt

    def histogram(self, **kwargs):
        ''' Generate text plot of the histogram, with P10 and P90 marked '''
        r = self._results
        hist = r.histogram
        rpt = report.Report(**kwargs)
        rpt.pre(report.texthist(hist.bins, hist.min, hist.max, marks=(r.p10, r.p90)))
        rpt.txt('^ P10 and P90\n\n')
        return rpt

    def all(self, **kwargs):
        ''' Summary and histogram '''
        rpt = self.summary(**kwargs)
        rpt.append(self.histogram(**kwargs))
        return rpt
