""" Read UAM data files.

    This provides functionality to read the binary UAM files used by
    air quality models like UAM and CAMx with `Python
    <www.python.org>`_.  It provides the following main class:

    * :class:`~uamio.reader.UamFile`: The file class reads the header
      and provides the data hour by hour.

    and the following classes for the decoded contents:

    * :class:`~uamio.blocks.Header`
    * :class:`~uamio.blocks.PointSources`
    * :class:`~uamio.frames.Frame`

    Three kinds of files are supported: gridded emissions (EMISSIONS),
    gridded averages (AVERAGE) and elevated point sources (PTSOURCE).
    Files of other kinds can be opened, but no hours can be read.

    Example::

        with UamFile('emissions.bin') as uam:
            for frame in uam.get_hours():
                no2 = frame.layer('NO2', 0)


    Issues
    ======

    * **Endianness**: The files do not tell their byte order. Files
      are big-endian unless ``byteorder='little'`` is passed.
    * **End of file**: There is no end marker; a file ends after the
      data of the hour with index ``hours_per_file - 1``, without the
      usual trailing record marker.
    * **Threads**: A UamFile keeps a single read position, do not share
      it between threads.


    More Info
    =========

    For short information on fortran unformatted binary files, take a look
    at http://paulbourke.net/dataformats/reading/

    The file layout is described in the CAMx user's guide.

"""
import logging

from .blocks import Format, read_header
from .frames import read_hour
from .records import RecordReader


logger = logging.getLogger('uamio.reader')


class UamFile(object):

    """UAM file handler

    This class provides an interface to UAM files.  The header is read
    when the file is opened, after that the hours are read one at a time
    in the order in which they are stored.

    """

    def __init__(self, source, byteorder='big', hours_per_file=24):
        """UamFile constructor

        :param source: the filename of the UAM data file, or an open
                       binary file object.  The UamFile closes it when
                       it is closed itself.
        :param byteorder: 'big' or 'little'.
        :param hours_per_file: number of hours in the file.

        """
        self.format = Format(byteorder, hours_per_file)
        if hasattr(source, 'read'):
            self._filename = getattr(source, 'name', '<stream>')
            self._file = source
        else:
            self._filename = source
            self._file = open(source, 'rb')

        self._records = RecordReader(self._file, self.format)
        try:
            self._header = read_header(self._records)
        except Exception:
            self._file.close()
            raise

        self.current_hour = 0
        self.hours_read = 0
        logger.debug('Opened %s (%s).', self._filename, self._header.name)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

    def close(self):
        """Close the file, it can not be read afterwards"""

        if not self._file.closed:
            self._file.close()
            logger.debug('Closed %s after %d hours.', self._filename,
                         self.hours_read)

    @property
    def closed(self):
        return self._file.closed

    @property
    def header(self):
        """The file Header"""

        return self._header

    @property
    def point_sources(self):
        """The PointSources, None unless this is a point source file"""

        return self._header.point_sources

    def info(self):
        """Get the grid geometry and species names

        :return: GridInfo namedtuple with dx, dy, nx, ny, nz, utm_x,
                 utm_y and species_names.

        """
        return self._header.info()

    def read_next_hour(self, out=None):
        """Read the next hour of data

        If reading fails the position in the file is lost, so the file
        should not be read any further.

        :param out: optional dictionary which is updated with the
                    arrays for each species.
        :return: the Frame for this hour.

        """
        frame = read_hour(self._records, self._header)
        self.current_hour = frame.hour
        self.hours_read += 1
        if out is not None:
            out.update(frame)
        return frame

    def get_hours(self):
        """Generator over the remaining hours in the file

        Use it like this::

            for frame in my_file.get_hours():
                pass

        Stops after the last hour of the file.

        """
        last_hour = self.format.hours_per_file - 1
        while self.hours_read < self.format.hours_per_file:
            frame = self.read_next_hour()
            yield frame
            if frame.hour == last_hour:
                break


def open_uam(source, byteorder='big', hours_per_file=24):
    """Open a UAM file and read its header

    :return: UamFile instance.

    """
    return UamFile(source, byteorder, hours_per_file)
