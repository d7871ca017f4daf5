""" PyTables table descriptions for data storage

    This module contains the table descriptions used to store decoded
    UAM data in a HDF5 file.

"""
import tables


class HourBounds(tables.IsDescription):

    """Store the time span of each hour in a UAM file.

    .. attribute:: hour

        hour index in the file, the start time truncated to an integer.

    .. attribute:: start_date, start_time, end_date, end_time

        time span as stored in the file.

    """
    hour = tables.Int32Col(pos=0)
    start_date = tables.Int32Col(pos=1)
    start_time = tables.Float32Col(pos=2)
    end_date = tables.Int32Col(pos=3)
    end_time = tables.Float32Col(pos=4)


class PointSource(tables.IsDescription):

    """Store the stack parameters of an elevated point source."""

    x = tables.Float32Col(pos=0)
    y = tables.Float32Col(pos=1)
    height = tables.Float32Col(pos=2)
    diameter = tables.Float32Col(pos=3)
    temperature = tables.Float32Col(pos=4)
    velocity = tables.Float32Col(pos=5)
