"""
Classes corresponding to the UAM file header records

The header of a UAM file consists of four records (file description,
region description, sub-region description and species names) and, for
elevated point source files, the stack parameters.  The classes in this
module hold the decoded values, :func:`read_header` reads them from a
stream.

"""
from collections import namedtuple
import enum
import logging
import struct

import numpy

from .records import FormatError
from .utils import flatten


logger = logging.getLogger('uamio.blocks')

#: Number of hours in a single UAM file.
HOURS_PER_FILE = 24

#: Read-only view of the grid geometry.
GridInfo = namedtuple('GridInfo', ['dx', 'dy', 'nx', 'ny', 'nz',
                                   'utm_x', 'utm_y', 'species_names'])


# All sizes are in bytes

class Format(object):

    """The binary format information of the file.

    :param byteorder: 'big' (default) or 'little'.
    :param hours_per_file: number of hours in each file, this can not
                           be read from the file itself.

    """

    def __init__(self, byteorder='big', hours_per_file=HOURS_PER_FILE):
        if byteorder == 'big':
            self.prefix = '>'
        elif byteorder == 'little':
            self.prefix = '<'
        else:
            raise ValueError("Byte order should be 'big' or 'little', "
                             "not %r" % byteorder)
        self.byteorder = byteorder

        # every field (and padding word) is one 32 bit word
        self.word_size = struct.calcsize('i')

        # packed strings, one character per word
        self.name_size = 10 * self.word_size
        self.note_size = 60 * self.word_size
        self.species_size = 10 * self.word_size

        self.hours_per_file = hours_per_file

        # point sources are identified by the file name
        self.point_source_name = 'PTSOURCE'

        # x, y, height, diameter, temperature and velocity for each stack
        self.fields_per_stack = 6


class FileKind(enum.Enum):

    """The kind of data in the file, decided by the file name"""

    EMISSIONS = 'EMISSIONS'
    AVERAGE = 'AVERAGE'
    PTSOURCE = 'PTSOURCE'
    UNKNOWN = None

    @classmethod
    def from_name(cls, name):
        try:
            return cls(name)
        except ValueError:
            return cls.UNKNOWN


class PointSources(object):

    """The stack parameters of the elevated point sources

    :param stacks: flat sequence with six values per point source, in
                   the order x, y, height, diameter, temperature and
                   velocity.

    """

    def __init__(self, stacks):
        stacks = numpy.asarray(stacks, dtype=numpy.float32).reshape(-1, 6)
        self.x = stacks[:, 0].copy()
        self.y = stacks[:, 1].copy()
        self.height = stacks[:, 2].copy()
        self.diameter = stacks[:, 3].copy()
        self.temperature = stacks[:, 4].copy()
        self.velocity = stacks[:, 5].copy()

    def __len__(self):
        return len(self.x)


class Header(object):

    """The UAM file header

    :param description: (name, note, n_segments, n_species, start_date,
                        start_time, end_date, end_time).
    :param region: the 15 values of the region description record.
    :param subregion: (i1, j1, nx1, ny1).
    :param species_names: list of species names.
    :param point_sources: PointSources instance for point source files.
    :param format: the Format the file was read with.

    """

    def __init__(self, description, region, subregion, species_names,
                 point_sources=None, format=None):
        self.name = description[0]
        self.kind = FileKind.from_name(self.name)
        self.note = description[1]
        self.n_segments = description[2]
        self.n_species = description[3]
        self.start_date = description[4]
        self.start_time = description[5]
        self.end_date = description[6]
        self.end_time = description[7]

        # grid origin
        self.x_origin = region[0]
        self.y_origin = region[1]
        self.utm_zone = region[2]
        # south west corner
        self.utm_x = region[3]
        self.utm_y = region[4]
        # cell size
        self.dx = region[5]
        self.dy = region[6]
        # number of cells
        self.nx = region[7]
        self.ny = region[8]
        self.nz = region[9]
        self.nz_lower = region[10]
        self.nz_upper = region[11]
        self.height_surface = region[12]
        self.height_lower = region[13]
        self.height_upper = region[14]

        self.subregion = tuple(subregion)
        self.species_names = list(species_names)
        self.point_sources = point_sources

        if format is None:
            format = Format()
        self.hours_per_file = format.hours_per_file

    @property
    def n_points(self):
        if self.point_sources is None:
            return 0
        return len(self.point_sources)

    @property
    def is_gridded(self):
        return self.kind in (FileKind.EMISSIONS, FileKind.AVERAGE)

    @property
    def grid_shape(self):
        return (self.nz, self.ny, self.nx)

    @property
    def n_cells(self):
        return self.nz * self.ny * self.nx

    def grid_index(self, k, j, i):
        """Index into a flat gridded array for layer k, row j, column i"""

        return flatten((k, j, i), self.grid_shape)

    def info(self):
        """Get the grid geometry and species names

        :return: GridInfo namedtuple.

        """
        return GridInfo(self.dx, self.dy, self.nx, self.ny, self.nz,
                        self.utm_x, self.utm_y, list(self.species_names))


def read_header(records):
    """Read the header from the start of a UAM file

    :param records: RecordReader positioned at the start of the file.
    :return: Header instance.

    """
    format = records.format

    records.skip_padding(1)
    name = records.read_packed_string(format.name_size, 'file name')
    note = records.read_packed_string(format.note_size, 'note')
    description = (name, note,
                   records.read_int('number of segments'),
                   records.read_int('number of species'),
                   records.read_int('start date'),
                   records.read_float('start time'),
                   records.read_int('end date'),
                   records.read_float('end time'))
    n_species = description[3]
    if n_species < 0:
        raise FormatError('Invalid number of species: %d' % n_species)

    records.skip_padding(2)
    region = (records.read_float('x origin'),
              records.read_float('y origin'),
              records.read_int('UTM zone'),
              records.read_float('UTM x'),
              records.read_float('UTM y'),
              records.read_float('dx'),
              records.read_float('dy'),
              records.read_int('nx'),
              records.read_int('ny'),
              records.read_int('nz'),
              records.read_int('nz lower'),
              records.read_int('nz upper'),
              records.read_float('surface height'),
              records.read_float('lower height'),
              records.read_float('upper height'))
    for field, size in zip(('nx', 'ny', 'nz'), region[7:10]):
        if size < 0:
            raise FormatError('Invalid %s: %d' % (field, size))

    records.skip_padding(2)
    subregion = tuple(int(v) for v in records.read_ints(4, 'sub-region'))
    records.skip_padding(2)

    species_names = [records.read_packed_string(format.species_size,
                                                'species name')
                     for _ in range(n_species)]

    point_sources = None
    if name == format.point_source_name:
        records.skip_padding(3)
        n_points = records.read_int('number of point sources')
        if n_points < 0:
            raise FormatError('Invalid number of point sources: %d' %
                              n_points)
        records.skip_padding(2)
        stacks = records.read_floats(format.fields_per_stack * n_points,
                                     'stack parameters')
        point_sources = PointSources(stacks)

    records.skip_padding(2)

    header = Header(description, region, subregion, species_names,
                    point_sources, format)
    if header.kind is FileKind.UNKNOWN:
        logger.debug('Unknown file name %r, hours can not be read.', name)
    logger.debug('Read %s header: %d species on a %dx%dx%d grid.',
                 name, header.n_species, header.nx, header.ny, header.nz)
    return header
