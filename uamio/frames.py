"""
Decode the data of a single hour from a UAM file

Each hour starts with a time span record followed by the data, which
is stored differently for gridded files (EMISSIONS, AVERAGE) and for
elevated point source files (PTSOURCE).

The files do not end with a record marker after the last data record
of the last hour.  :func:`is_last` decides where that happens, all
padding that is skipped conditionally goes through it.

"""
import logging
import math
import warnings

import numpy

from .blocks import FileKind
from .records import FormatError
from .utils import flatten


logger = logging.getLogger('uamio.frames')


class Frame(dict):

    """The data of one hour, species name to flat float32 array

    Gridded arrays are ordered by layer, row and column, with the column
    varying fastest.  Point source arrays are ordered by point source.

    .. attribute:: start_date, start_time, end_date, end_time

        the time span of this hour as stored in the file.

    .. attribute:: hour

        hour index in the file, the start time truncated to an integer.

    .. attribute:: cells, flow, plume_height

        point source files only, the grid cell (i, j, k) of each point
        source and its flow and plume height for this hour.

    """

    def __init__(self, start_date, start_time, end_date, end_time,
                 shape=None):
        super().__init__()
        self.start_date = start_date
        self.start_time = start_time
        self.end_date = end_date
        self.end_time = end_time
        if not math.isfinite(start_time):
            raise FormatError('Invalid hour start time: %r' % start_time)
        self.hour = int(start_time)
        self.shape = shape
        self.cells = None
        self.flow = None
        self.plume_height = None

    def layer(self, species, k):
        """Get the (ny, nx) view of layer k for a gridded species"""

        if self.shape is None:
            raise ValueError('Point source data has no layers')
        return self[species].reshape(self.shape)[k]


def is_last(hour, layer=None, species=None, *, hours_per_file, nz,
            n_species):
    """Check if a position is the end of the last hour of the file

    The trailing padding is missing after the last data of the last
    hour.  A layer or species of None is not taken into account.

    :param hour: hour index in the file.
    :param layer: layer index k, or None.
    :param species: species index l, or None.
    :param hours_per_file, nz, n_species: size of the file.
    :return: True if no padding follows this position.

    """
    if hour != hours_per_file - 1:
        return False
    if layer is not None and layer != nz - 1:
        return False
    if species is not None and species != n_species - 1:
        return False
    return True


def read_hour(records, header):
    """Read one hour of data

    :param records: RecordReader positioned at the start of an hour.
    :param header: the Header of the file.
    :return: a new Frame.
    :raises FormatError: for files of an unknown kind.

    """
    if header.is_gridded:
        return read_gridded_hour(records, header)
    elif header.kind is FileKind.PTSOURCE:
        return read_point_source_hour(records, header)
    else:
        raise FormatError('unrecognized file kind: %r' % header.name)


def _read_time_span(records, shape=None):
    start_date = records.read_int('hour start date')
    start_time = records.read_float('hour start time')
    end_date = records.read_int('hour end date')
    end_time = records.read_float('hour end time')
    return Frame(start_date, start_time, end_date, end_time, shape)


def read_gridded_hour(records, header):
    """Read one hour of gridded data

    The species name before each block of data decides which array
    the block is stored in.

    """
    format = records.format
    shape = header.grid_shape
    nz, ny, nx = shape

    frame = _read_time_span(records, shape)
    for name in header.species_names:
        frame[name] = numpy.zeros(header.n_cells, dtype=numpy.float32)
    records.skip_padding(1)

    last = dict(hours_per_file=header.hours_per_file, nz=nz,
                n_species=header.n_species)
    for k in range(nz):
        for l, expected in enumerate(header.species_names):
            records.skip_padding(2)
            name = records.read_packed_string(format.species_size,
                                              'species name')
            if name not in frame:
                raise FormatError('Unknown species %r in layer %d of hour '
                                  '%d' % (name, k, frame.hour))
            if name != expected:
                logger.debug('Found species %r where %r was expected.',
                             name, expected)
            start = flatten((k, 0, 0), shape)
            frame[name][start:start + ny * nx] = records.read_floats(
                ny * nx, 'values of %s' % name)
            if not is_last(frame.hour, k, l, **last):
                records.skip_padding(1)
        if not is_last(frame.hour, k, **last):
            records.skip_padding(1)

    return frame


def read_point_source_hour(records, header):
    """Read one hour of point source data

    The values are assumed to be in the same species order as in
    the header.

    """
    format = records.format
    n_points = header.n_points

    frame = _read_time_span(records)
    for name in header.species_names:
        frame[name] = numpy.zeros(n_points, dtype=numpy.float32)
    records.skip_padding(6)

    cells = numpy.zeros((n_points, 3), dtype=numpy.int32)
    flow = numpy.zeros(n_points, dtype=numpy.float32)
    plume_height = numpy.zeros(n_points, dtype=numpy.float32)
    for ip in range(n_points):
        cells[ip] = records.read_ints(3, 'point source cell')
        flow[ip] = records.read_float('flow')
        plume_height[ip] = records.read_float('plume height')
    frame.cells = cells
    frame.flow = flow
    frame.plume_height = plume_height

    last = dict(hours_per_file=header.hours_per_file, nz=header.nz,
                n_species=header.n_species)
    for l, expected in enumerate(header.species_names):
        records.skip_padding(1)
        name = records.read_packed_string(format.species_size,
                                          'species name')
        if name != expected:
            warnings.warn('Species %r stored as %r in hour %d.' %
                          (name, expected, frame.hour))
        frame[expected][:] = records.read_floats(n_points,
                                                 'values of %s' % expected)
        if not is_last(frame.hour, species=l, **last):
            records.skip_padding(2)
    if not is_last(frame.hour, **last):
        records.skip_padding(2)

    return frame
