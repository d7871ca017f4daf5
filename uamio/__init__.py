"""Read binary UAM files from air quality models

uamio reads the sequential binary files used by grid based air quality
dispersion models such as UAM and CAMx to store gridded emissions,
gridded averages and elevated point source emissions.

The following modules are included:

:mod:`~uamio.blocks`
    classes for the header records and the header decoder

:mod:`~uamio.frames`
    decode the data of a single hour

:mod:`~uamio.reader`
    read UAM data files into Python

:mod:`~uamio.records`
    read the primitive fields of the binary format

:mod:`~uamio.storage`
    PyTables table descriptions for storing UAM data

:mod:`~uamio.store_uam_data`
    convert UAM data files to HDF5 files

:mod:`~uamio.tests`
    code tests

:mod:`~uamio.utils`
    commonly used functions such as a progressbar

"""
from . import blocks, frames, reader, records, utils
from .blocks import FileKind, Format, GridInfo, Header, PointSources
from .frames import Frame
from .reader import UamFile, open_uam
from .records import FormatError, ShortReadError
from .tests import run_tests

__all__ = [
    'FileKind',
    'Format',
    'FormatError',
    'Frame',
    'GridInfo',
    'Header',
    'PointSources',
    'ShortReadError',
    'UamFile',
    'blocks',
    'frames',
    'open_uam',
    'reader',
    'records',
    'run_tests',
    'utils',
]
