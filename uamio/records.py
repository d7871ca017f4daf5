""" Read the primitive fields of UAM binary files.

    UAM files are Fortran unformatted sequential files. Every logical
    record is surrounded by record markers, which are read here as
    anonymous padding words. All fields are 4 bytes wide, so every
    read is in multiples of a word.

    Strings are stored as Fortran ``CHARACTER*4`` arrays: one character
    per 4-byte slot, of which only the first byte is significant.
    See :func:`unpack_packed_string`.

    The byte order is taken from the :class:`~uamio.blocks.Format` given
    to the :class:`RecordReader` and can not change while reading.

"""
from struct import unpack

import numpy


class ShortReadError(IOError):

    """The stream ended before a field was completely read"""


class FormatError(ValueError):

    """The data does not follow the structure of a UAM file"""


def unpack_packed_string(buffer):
    """Get the text from a packed character buffer

    Only the first byte of every 4-byte slot is used.  Leading and
    trailing spaces are removed.

    :param buffer: bytes, length should be a multiple of 4.
    :return: the decoded string.

    """
    return buffer[::4].decode('latin-1').strip(' ')


class RecordReader(object):

    """Read fields from a binary stream

    :param fileobj: binary file-like object, positioned at the field
                    to read next.
    :param format: :class:`~uamio.blocks.Format` instance with the byte
                   order and field size.

    """

    def __init__(self, fileobj, format):
        self._file = fileobj
        self.format = format
        self._int_format = format.prefix + 'i'
        self._float_format = format.prefix + 'f'
        self._int_dtype = numpy.dtype(format.prefix + 'i4')
        self._float_dtype = numpy.dtype(format.prefix + 'f4')

    def read(self, n_bytes, field=None):
        """Read exactly n_bytes from the stream

        :raises ShortReadError: if fewer bytes are available.

        """
        data = self._file.read(n_bytes)
        if len(data) != n_bytes:
            raise ShortReadError('Unexpected end of file reading %s: '
                                 'expected %d bytes, got %d' %
                                 (field or 'data', n_bytes, len(data)))
        return data

    def read_int(self, field=None):
        """Read a single 32 bit integer"""

        return unpack(self._int_format,
                      self.read(self.format.word_size, field or 'integer'))[0]

    def read_float(self, field=None):
        """Read a single 32 bit float"""

        return unpack(self._float_format,
                      self.read(self.format.word_size, field or 'float'))[0]

    def read_ints(self, n, field=None):
        """Read n integers as a numpy array in native byte order"""

        data = self.read(n * self.format.word_size, field or 'integers')
        return numpy.frombuffer(data, self._int_dtype).astype(numpy.int32)

    def read_floats(self, n, field=None):
        """Read n floats as a numpy array in native byte order"""

        data = self.read(n * self.format.word_size, field or 'floats')
        return numpy.frombuffer(data, self._float_dtype).astype(numpy.float32)

    def skip_padding(self, n_words, field=None):
        """Read and discard n_words padding words"""

        self.read(n_words * self.format.word_size, field or 'padding')

    def read_packed_string(self, n_bytes, field=None):
        """Read a packed character field of n_bytes

        :raises FormatError: if n_bytes is not a multiple of the word size.

        """
        if n_bytes % self.format.word_size:
            raise FormatError('Length of %s (%d bytes) is not a multiple '
                              'of %d' % (field or 'string', n_bytes,
                                         self.format.word_size))
        return unpack_packed_string(self.read(n_bytes, field or 'string'))
