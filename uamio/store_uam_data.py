""" Store UAM data in HDF5 file

    This module reads a binary UAM file hour by hour and stores the
    data in a HDF5 file, using PyTables.

    For gridded files each species is stored as an array with shape
    (hours, nz, ny, nx) in the ``/species`` group.  For point source
    files each species array has shape (hours, n_points), the stack
    parameters are stored in the ``/point_sources`` table and the
    hourly flow and plume height in the ``/flow`` and ``/plume_height``
    arrays.  The time span of each hour is stored in the ``/hours``
    table, the header values as attributes of the root node.

    For example to convert a UAM file called emissions.bin to a HDF5
    file called emissions.h5 with a progress bar::

        >>> store_uam_data('emissions.bin', 'emissions.h5', progress=True)

"""
import logging
import os
import tempfile

import tables

from .blocks import FileKind
from .reader import UamFile
from .records import FormatError
from .storage import HourBounds, PointSource
from .utils import pbar


logger = logging.getLogger('uamio.store_uam_data')


def store_uam_data(source, destination, overwrite=False, progress=False,
                   byteorder='big'):
    """Convert a UAM file to a HDF5 file

    :param source: path of the UAM source file.
    :param destination: path of the HDF5 destination file.
    :param overwrite: if True, replace an existing destination.
    :param progress: if True, show a progressbar.
    :param byteorder: byte order of the source file.

    """
    if os.path.exists(destination):
        if not overwrite:
            if progress:
                raise RuntimeError("Destination already exists, doing "
                                   "nothing")
            logger.warning('%s already exists, doing nothing', destination)
            return

    # the destination only appears once all hours are stored
    temp_path = create_tempfile_path(os.path.dirname(destination) or None)
    try:
        with UamFile(source, byteorder=byteorder) as uam, \
                tables.open_file(temp_path, 'w') as hdf_data:
            logger.info('Converting UAM data (%s) to HDF5 format', source)
            store_header(uam.header, hdf_data)
            n_hours = store_hours(uam, hdf_data, progress=progress)
        os.replace(temp_path, destination)
    finally:
        if os.path.exists(temp_path):
            os.remove(temp_path)
    logger.info('Stored %d hours in %s', n_hours, destination)


def store_header(header, destination):
    """Store the header values and point sources

    :param header: Header of the source file.
    :param destination: PyTables file instance of the destination file.

    """
    attrs = {'name': header.name,
             'note': header.note,
             'kind': header.kind.name,
             'start_date': header.start_date,
             'start_time': header.start_time,
             'end_date': header.end_date,
             'end_time': header.end_time,
             'utm_zone': header.utm_zone,
             'utm_x': header.utm_x,
             'utm_y': header.utm_y,
             'dx': header.dx,
             'dy': header.dy,
             'nx': header.nx,
             'ny': header.ny,
             'nz': header.nz,
             'species_names': list(header.species_names)}
    for key, value in attrs.items():
        destination.set_node_attr('/', key, value)

    if header.kind is FileKind.PTSOURCE:
        stacks = header.point_sources
        table = destination.create_table('/', 'point_sources', PointSource,
                                         'Stack parameters',
                                         expectedrows=len(stacks))
        row = table.row
        for ip in range(len(stacks)):
            row['x'] = stacks.x[ip]
            row['y'] = stacks.y[ip]
            row['height'] = stacks.height[ip]
            row['diameter'] = stacks.diameter[ip]
            row['temperature'] = stacks.temperature[ip]
            row['velocity'] = stacks.velocity[ip]
            row.append()
        table.flush()


def store_hours(source, destination, progress=False):
    """Store all hours of data from a UAM file

    :param source: UamFile instance of the source file.
    :param destination: PyTables file instance of the destination file.
    :return: the number of hours stored.

    """
    header = source.header
    expectedrows = header.hours_per_file
    if header.kind is FileKind.UNKNOWN:
        raise FormatError('unrecognized file kind: %r' % header.name)
    if header.is_gridded:
        shape = (0,) + header.grid_shape
    else:
        shape = (0, header.n_points)

    group = destination.create_group('/', 'species', 'Species data')
    arrays = {name: destination.create_earray(group, name,
                                              tables.Float32Atom(), shape,
                                              expectedrows=expectedrows)
              for name in header.species_names}
    if header.kind is FileKind.PTSOURCE:
        flow = destination.create_earray('/', 'flow', tables.Float32Atom(),
                                         shape, expectedrows=expectedrows)
        plume_height = destination.create_earray(
            '/', 'plume_height', tables.Float32Atom(), shape,
            expectedrows=expectedrows)
    hours = destination.create_table('/', 'hours', HourBounds,
                                     'Time span of each hour',
                                     expectedrows=expectedrows)

    hour_row = hours.row
    n_hours = 0
    for frame in pbar(source.get_hours(), length=expectedrows,
                      show=progress):
        for name, array in arrays.items():
            array.append(frame[name].reshape((1,) + shape[1:]))
        if header.kind is FileKind.PTSOURCE:
            flow.append(frame.flow.reshape(1, -1))
            plume_height.append(frame.plume_height.reshape(1, -1))
        hour_row['hour'] = frame.hour
        hour_row['start_date'] = frame.start_date
        hour_row['start_time'] = frame.start_time
        hour_row['end_date'] = frame.end_date
        hour_row['end_time'] = frame.end_time
        hour_row.append()
        n_hours += 1
    hours.flush()

    return n_hours


def create_tempfile_path(temp_dir=None):
    """Create a temporary file, close it, and return the path"""

    f, path = tempfile.mkstemp(suffix='.h5', dir=temp_dir)
    os.close(f)
    return path
