#!/usr/bin/env python
''' Fermicalc - Fermi estimation calculator
    Command line interface.

    Multiple commands are installed:
        fermicalc: Estimate a formula with distributions given on the command line
        fermicalcf: Calculate estimates defined in config (yaml) file
'''
import os
import sys
import argparse

from fermicalc.common.uparser import FormulaError
from fermicalc.estimate import FermiModel, NoValidSamples
from fermicalc.estimate.simulate import NUM_SAMPLES
from fermicalc.project import Project, ProjectEstimate


def _output_format(args):
    ''' Get output format from -f argument or output file extension '''
    fmt = args.f
    if args.o and hasattr(args.o, 'name') and args.o.name not in ('<stdout>', '-'):
        _, ext = os.path.splitext(str(args.o.name))
        fmt = ext[1:] or fmt  # remove '.'
    return fmt


def _write_report(r, args):
    if _output_format(args) == 'html':
        r.save_html(args.o)
    else:
        args.o.write(r.get_md())
    args.o.write('\n')


def main_setup(args=None):
    ''' Run calculations defined in YAML setup file '''
    parser = argparse.ArgumentParser(prog='fermicalcf', description='Run Fermi estimates from setup file.')
    parser.add_argument('filename', help='Setup parameter file.', type=str)
    parser.add_argument('-o', help='Output filename. Extension determines file format.',
                        type=argparse.FileType('w', encoding='UTF-8'), default=sys.stdout)
    parser.add_argument('-f', help="Output format for when output filename not provided ['txt', 'html', 'md']",
                        type=str, choices=['html', 'txt', 'md'])
    parser.add_argument('--verbose', '-v', help='Verbose mode. Include inputs and histograms.',
                        default=0, action='count')
    args = parser.parse_args(args=args)

    try:
        u = Project.from_configfile(args.filename)
        if u is None:
            parser.exit(1, f'error: Cannot read setup file {args.filename}\n')
        u.calculate()
    except (FormulaError, NoValidSamples, ValueError) as exc:
        parser.exit(1, f'error: {exc}\n')

    if args.verbose > 0:
        r = u.report_all()
    else:
        r = u.report_short()
    _write_report(r, args)


def main_estimate(args=None):
    ''' Run Fermi estimate of one formula '''
    parser = argparse.ArgumentParser(prog='fermicalc', description='Estimate distribution of a formula with uncertain inputs.')
    parser.add_argument('formula', help='Formula to estimate (e.g. "f = a * b")', type=str)
    parser.add_argument('--vars', nargs='+',
                        help='Distribution for each variable, parameters separated by semicolons. '
                             'First parameter must be variable name. (e.g. "x; type=uniform; min=0; max=1")',
                        type=str)
    parser.add_argument('-o', help='Output filename. Extension determines file format.',
                        type=argparse.FileType('w', encoding='UTF-8'), default=sys.stdout)
    parser.add_argument('-f', help="Output format for when output filename not provided ['txt', 'html', 'md']",
                        type=str, choices=['html', 'txt', 'md'])
    parser.add_argument('--samples', help='Number of Monte Carlo samples', type=int, default=NUM_SAMPLES)
    parser.add_argument('--seed', help='Random Generator Seed', type=int, default=None)
    parser.add_argument('-s', help='Short output format, prints values only. Prints '
                                   '(mean, median, P5, P10, P90, P95)', action='store_true')
    parser.add_argument('--verbose', '-v', action='count', default=0,
                        help='Verbose mode. Include histogram.')
    args = parser.parse_args(args=args)

    try:
        u = ProjectEstimate(FermiModel(args.formula))
        u.nsamples = args.samples
        u.seed = args.seed
        for var in (args.vars or []):
            name, *params = var.split(';')
            params = dict(p.split('=', 1) for p in params if p.strip())
            params = {k.strip(): v.strip() for k, v in params.items()}
            disttype = params.pop('type', None)
            u.model.assign(name.strip(), disttype, **params)
        result = u.calculate()
    except KeyError as exc:
        parser.exit(1, f'error: {exc.args[0]}\n')
    except (FormulaError, NoValidSamples, ValueError) as exc:
        parser.exit(1, f'error: {exc}\n')

    if args.s:   # Print out short-format results
        vals = [result.mean, result.median, result.p5, result.p10, result.p90, result.p95]
        args.o.write(', '.join(f'{v:.9g}' for v in vals))
        args.o.write('\n')
    else:
        if args.verbose > 0:
            r = result.report.all()
        else:
            r = result.report.summary()
        _write_report(r, args)


if __name__ == '__main__':
    main_estimate()
