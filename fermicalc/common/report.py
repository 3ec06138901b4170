''' Markdown report formatting and rendering '''

from collections import ChainMap
import numpy as np
import markdown


# Defaults if kwargs aren't provided
default_sigfigs = 4
default_numformat = 'auto'
default_thresh = 6
default_E = True


CSS = '''
body {
  font-family: sans-serif;
  font-size: 16px;
  line-height: 1.7;
  padding: 1em;
  margin: auto;
  max-width: 56em;
}

table {
  border-collapse: collapse;
  margin: 1em 0;
}

th, td {
  border: 1px solid #ccc;
  padding: 0.3em 0.8em;
}

pre {
  font-size: 12px;
  line-height: 1.1;
}
'''


class Number:
    ''' A formatted numeric value for use in a report

        Args:
            value (float): The value to report
            n (int): Number of significant figures
            fmt (string): Format for the number - auto, decimal, scientific
            thresh (int): Exponent threshold for converting to scientific notation when in
                "auto" format. Numbers above 10**thresh will be printed in scientific
                notation.
            elower (bool): Dispaly scientific notation with lowercase "e"
            suffix (string): Text to append after the number
    '''
    numfmts = ['auto', 'decimal', 'scientific', 'sci']

    def __init__(self, value, **kwargs):
        self.value = value
        self.kwargs = kwargs

    def __str__(self):
        return self.string()

    def _repr_markdown_(self):
        ''' Markdown representation for Jupyter '''
        return self.string()

    def __len__(self):
        return len(self.string())

    def string(self, **kwargs):
        ''' Get string representation of the number.

            Args:
                See Number arguments. Anything defined in
                Number __init__ kwargs override the string() kwargs
        '''
        kargs = ChainMap(self.kwargs, kwargs)
        figs = kargs.get('n', default_sigfigs)
        fmt = kargs.get('fmt', default_numformat).lower()
        thresh = kargs.get('thresh', default_thresh)
        elower = kargs.get('elower', default_E)
        suffix = kargs.get('suffix', '')
        echr = 'e' if elower else 'E'

        if fmt not in self.numfmts:
            raise ValueError(f'Number Format must be one of {", ".join(self.numfmts)}')

        if figs < 1:
            raise ValueError('Significant Figures must be >= 1')

        value = self.value
        if value is None:
            numstr = 'nan'

        elif not np.isfinite(value):
            numstr = format(value)  # Will format into 'nan' or 'inf'

        elif value == 0:
            numstr = '0'

        else:
            if fmt == 'auto':
                if abs(value) >= 10**thresh or abs(value) < 10**-thresh:
                    fmt = 'sci'
                else:
                    fmt = 'decimal'

            exp = int(np.floor(np.log10(abs(value))))   # Exponent if written in exp. notation.
            roundto = -(exp - (figs-1))

            if fmt == 'decimal':
                numstr = f'{np.round(value, roundto):.{max(0, roundto)}f}'
            else:
                numstr = f'{value:.{figs-1}{echr}}'

        return numstr + suffix


def texthist(bins, low, high, W=60, H=12, char='#', marks=None):
    ''' Draw histogram bin counts as a plain-text bar chart

        Args:
            bins (array): Count in each bin, one column per bin
            low, high (float): Range of the values covered by the bins
            W (int): Character width of plot. Bins are resampled to this width.
            H (int): Character height of plot
            char (string): Character for drawing the bars
            marks (list): Values to point out with ^ in a row under the axis
    '''
    bins = np.asarray(bins, dtype=float)
    if len(bins) != W:
        edges = np.linspace(0, len(bins), W+1).astype(int)
        bins = np.array([bins[a:max(a+1, b)].sum() for a, b in zip(edges[:-1], edges[1:])])

    top = bins.max() if len(bins) else 0
    heights = np.zeros(len(bins), dtype=int) if top == 0 else np.ceil(bins / top * H).astype(int)

    lines = []
    for h in range(H, 0, -1):
        lines.append('|' + ''.join(char if height >= h else ' ' for height in heights))
    lines.append('+' + '-'*len(bins))
    if marks is not None:
        row = [' '] * len(bins)
        span = high - low
        for value in marks:
            col = int((value - low) / span * len(bins)) if span > 0 and np.isfinite(span) else 0
            row[min(max(col, 0), len(bins)-1)] = '^'
        lines.append(' ' + ''.join(row))
    bottom = ' ' + f'{low:.4g}'.ljust(len(bins)//2 - 3)
    bottom += f'{(low+high)/2:.4g}'.ljust(len(bins)//2 - 3)
    bottom += f'{high:.4g}'
    lines.append(bottom)
    return '\n'.join(lines)


class Report:
    ''' A Report consisting of text, tables, and values for formatting
        as Markdown or HTML.

        Args:
            n (int): Significant figures for Number values
            fmt (string): Number format - auto, decimal, scientific
    '''
    def __init__(self, **kwargs):
        self._s = ''
        self._values = []
        self.kwargs = kwargs

    def __str__(self):
        return self.get_md()

    def _repr_markdown_(self):
        ''' Markdown representation for Jupyter '''
        return self.get_md()

    def hdr(self, text, level=1):
        ''' Add a header to the report

            Args:
                text (string): Text of the header
                level (int): Header level. 1 is top level (# HEADER) in markdown.
        '''
        self._s += f'{"#"*level} {text}\n\n'

    def txt(self, text):
        ''' Add text to the report '''
        self._s += text

    def div(self):
        ''' Add a horizontal divider to the report '''
        self._s += '\n---\n\n'

    def newline(self):
        ''' Add a new line to the report '''
        self._s += '\n\n'

    def pre(self, text):
        ''' Add preformatted (fixed-width) text, such as a text plot '''
        self._s += '```\n' + text + '\n```\n\n'

    def num(self, value, end='', **kwargs):
        ''' Add a Number to the report '''
        self._s += self._insert_obj(Number(value, **kwargs), end=end)

    def _insert_obj(self, obj, end=''):
        ''' Insert tag for a deferred-format object, or convert to string '''
        if isinstance(obj, Number):
            s = f'[[VAL{len(self._values)}]]'
            self._values.append(obj)
        else:
            s = str(obj)
        return s + end

    def table(self, rows, hdr):
        ''' Add a table to the report

            Args:
                rows (list): List of lists for each row. Each list item may be a
                    string or Number.
                hdr (list): List of strings for the table header.
        '''
        s = '\n'
        if hdr is None:
            hdr = ['-'] * len(rows[0])  # PyMarkdown must have a header row, with non-empty strings

        widths = np.array([len(str(h))+1 for h in hdr], dtype=int)
        for row in rows:
            widths = np.maximum(widths, np.array([len(str(c)) for c in row]))
        widths = widths + 1
        widths = np.maximum(widths, 9)

        s += ' | '.join(f'{val:{w}}' for w, val in zip(widths, hdr)) + '\n'
        s += '|'.join(f'{w*"-"}' for w in widths) + '\n'
        for row in rows:
            line = [self._insert_obj(col) for col in row]
            s += ' | '.join(f'{val:{w}}' for w, val in zip(widths, line)) + '\n'

        # Add | at beginning and end
        lines = ''
        for line in s.splitlines():
            lines += (('|' + line + '|\n') if len(line) > 0 else '\n')
        self._s += lines + '\n\n'

    def append(self, report, end=''):
        ''' Append another report onto this one

            Args:
                report: Another Report instance
                end (str): String to append after the report
        '''
        appendstring = report._s

        # Go backwards through the tagged objects to renumber them
        for i in range(len(report._values)-1, -1, -1):
            appendstring = appendstring.replace(f'[[VAL{i}]]', f'[[VAL{i+len(self._values)}]]')
        self._values.extend(report._values)
        self._s += appendstring
        self._s += end

    def get_md(self, **kwargs):
        ''' Get the report in markdown format.

            Args:
                **kwargs: See Report class. Arguments specified at Report
                instantiation override arguments given here.
        '''
        kargs = ChainMap(self.kwargs, kwargs)
        s = self._s
        for i in range(len(self._values)-1, -1, -1):
            s = s.replace(f'[[VAL{i}]]', self._values[i].string(**kargs))
        return s.strip()

    def get_html(self, **kwargs):
        ''' Get report in HTML format, including CSS header.

            Args:
                **kwargs: See Report class. Arguments specified at Report
                instantiation override arguments given here.
        '''
        html = markdown.markdown(self.get_md(**kwargs), extensions=['markdown.extensions.tables',
                                                                     'markdown.extensions.fenced_code'])
        html = html.encode('ascii', 'xmlcharrefreplace').decode('utf-8')
        return '<style type="text/css">' + CSS + '</style>\n' + html

    def save_html(self, fname, **kwargs):
        ''' Save report to HTML file.

            Args:
                fname (string or file): File name or file object to save
                **kwargs: See Report class.
        '''
        html = self.get_html(**kwargs)
        try:
            fname.write(html)
        except AttributeError:
            with open(fname, 'w', encoding='utf-8') as f:
                f.write(html)
