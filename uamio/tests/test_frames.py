import unittest
import warnings
from io import BytesIO

import numpy
from numpy.testing import assert_array_equal

from uamio import frames
from uamio.blocks import Format, read_header
from uamio.records import FormatError, RecordReader, ShortReadError
from uamio.tests.uam_test_data import (UamWriter, gridded_values,
                                       point_source_values, stack_parameters,
                                       write_gridded_hour, write_header,
                                       write_point_source_hour,
                                       write_time_span)


class IsLastTests(unittest.TestCase):

    def setUp(self):
        self.dims = dict(hours_per_file=24, nz=3, n_species=2)

    def test_last_block(self):
        self.assertTrue(frames.is_last(23, 2, 1, **self.dims))

    def test_earlier_positions(self):
        self.assertFalse(frames.is_last(22, 2, 1, **self.dims))
        self.assertFalse(frames.is_last(23, 1, 1, **self.dims))
        self.assertFalse(frames.is_last(23, 2, 0, **self.dims))
        self.assertFalse(frames.is_last(0, 0, 0, **self.dims))

    def test_ignore_species(self):
        self.assertTrue(frames.is_last(23, 2, **self.dims))
        self.assertFalse(frames.is_last(23, 0, **self.dims))

    def test_ignore_layer(self):
        self.assertTrue(frames.is_last(23, species=1, **self.dims))
        self.assertFalse(frames.is_last(23, species=0, **self.dims))

    def test_hour_only(self):
        self.assertTrue(frames.is_last(23, **self.dims))
        self.assertFalse(frames.is_last(5, **self.dims))

    def test_other_file_length(self):
        dims = dict(self.dims, hours_per_file=12)
        self.assertTrue(frames.is_last(11, **dims))
        self.assertFalse(frames.is_last(23, **dims))

    def test_dimensions_are_required(self):
        self.assertRaises(TypeError, frames.is_last, 23, 2, 1)
        self.assertRaises(TypeError, frames.is_last, 23, 2, 1,
                          hours_per_file=24, nz=3)


class GriddedHourTests(unittest.TestCase):

    species = ['NO', 'NO2', 'CO']
    nx, ny, nz = 3, 2, 2

    def create_file(self, hours, block_order=None):
        writer = UamWriter()
        write_header(writer, 'EMISSIONS', self.species, self.nx, self.ny,
                     self.nz)
        for hour in hours:
            data = gridded_values(hour, self.species, self.nx, self.ny,
                                  self.nz)
            write_gridded_hour(writer, hour, data, self.species,
                               block_order=block_order)
        return writer.getvalue()

    def open(self, data):
        self.stream = BytesIO(data)
        records = RecordReader(self.stream, Format())
        return records, read_header(records)

    def test_read_hour(self):
        records, header = self.open(self.create_file([0, 1]))
        frame = frames.read_hour(records, header)
        self.assertIsInstance(frame, frames.Frame)
        self.assertEqual(sorted(frame), sorted(self.species))
        self.assertEqual(frame.hour, 0)
        self.assertEqual((frame.start_time, frame.end_time), (0., 1.))

        frame = frames.read_hour(records, header)
        self.assertEqual(frame.hour, 1)
        expected = gridded_values(1, self.species, self.nx, self.ny, self.nz)
        for name in self.species:
            self.assertEqual(frame[name].dtype, numpy.float32)
            self.assertEqual(frame[name].shape, (self.nx * self.ny * self.nz,))
            assert_array_equal(frame[name], expected[name].ravel())
            assert_array_equal(frame.layer(name, 1), expected[name][1])
        self.assertIsNone(frame.cells)
        self.assertEqual(self.stream.read(), b'')

    def test_row_major_order(self):
        records, header = self.open(self.create_file([3]))
        frame = frames.read_hour(records, header)
        expected = gridded_values(3, self.species, self.nx, self.ny, self.nz)
        for k in range(self.nz):
            for j in range(self.ny):
                for i in range(self.nx):
                    self.assertEqual(frame['NO2'][header.grid_index(k, j, i)],
                                     expected['NO2'][k, j, i])

    def test_single_cell_placement(self):
        """The 4th value of a 2x2 grid is stored at index 3"""

        writer = UamWriter()
        write_header(writer, 'AVERAGE', ['A'], nx=2, ny=2, nz=1)
        values = numpy.array([[[1., 2.], [3., 4.]]], dtype=numpy.float32)
        write_gridded_hour(writer, 0, {'A': values}, ['A'])
        records, header = self.open(writer.getvalue())
        frame = frames.read_hour(records, header)
        self.assertEqual(len(frame['A']), 4)
        self.assertEqual(frame['A'][header.grid_index(0, 1, 1)], 4.)
        self.assertEqual(frame['A'][3], 4.)

    def test_block_name_selects_species(self):
        records, header = self.open(
            self.create_file([0], block_order=['CO', 'NO', 'NO2']))
        frame = frames.read_hour(records, header)
        expected = gridded_values(0, ['CO', 'NO', 'NO2'], self.nx, self.ny,
                                  self.nz)
        for name in self.species:
            assert_array_equal(frame[name], expected[name].ravel())

    def test_unknown_block_name(self):
        writer = UamWriter()
        write_header(writer, 'EMISSIONS', ['A'], nx=1, ny=1, nz=1)
        write_gridded_hour(writer, 0, {'B': numpy.ones((1, 1, 1))}, ['B'])
        records, header = self.open(writer.getvalue())
        self.assertRaises(FormatError, frames.read_hour, records, header)

    def test_last_hour_without_trailing_padding(self):
        """The last hour ends directly after the last value"""

        records, header = self.open(self.create_file([22, 23]))
        frames.read_hour(records, header)
        frame = frames.read_hour(records, header)
        self.assertEqual(frame.hour, 23)
        expected = gridded_values(23, self.species, self.nx, self.ny, self.nz)
        assert_array_equal(frame['CO'], expected['CO'].ravel())
        self.assertEqual(self.stream.read(), b'')

    def test_truncated_other_hour(self):
        """Other hours need the trailing padding"""

        data = self.create_file([5])
        records, header = self.open(data[:-8])
        self.assertRaises(ShortReadError, frames.read_hour, records, header)

        records, header = self.open(data[:-4])
        self.assertRaises(ShortReadError, frames.read_hour, records, header)

    def test_truncated_other_block(self):
        """Only the very last block of the last hour lacks padding"""

        writer = UamWriter()
        write_header(writer, 'EMISSIONS', self.species, self.nx, self.ny,
                     self.nz)
        write_gridded_hour(writer, 23, gridded_values(
            23, self.species, self.nx, self.ny, self.nz), self.species)
        data = writer.getvalue()
        # cut off the last block: data, name and padding
        block_size = 8 + 40 + 4 * self.nx * self.ny
        records, header = self.open(data[:-block_size])
        self.assertRaises(ShortReadError, frames.read_hour, records, header)

    def test_truncated_earlier_layer(self):
        """Earlier layers of the last hour keep their padding"""

        writer = UamWriter()
        write_header(writer, 'EMISSIONS', self.species, self.nx, self.ny,
                     self.nz)
        header_size = len(writer.getvalue())
        write_gridded_hour(writer, 23, gridded_values(
            23, self.species, self.nx, self.ny, self.nz), self.species)
        data = writer.getvalue()
        # time span and padding, then all blocks of the first layer
        block_size = 8 + 40 + 4 * self.nx * self.ny + 4
        layer_end = header_size + 20 + len(self.species) * block_size

        # directly after the values of the last species in layer 0
        records, header = self.open(data[:layer_end - 4])
        self.assertRaises(ShortReadError, frames.read_hour, records, header)

        # with the species padding, but without the layer padding
        records, header = self.open(data[:layer_end])
        self.assertRaises(ShortReadError, frames.read_hour, records, header)

    def test_invalid_start_time(self):
        for start_time in (float('nan'), float('inf')):
            writer = UamWriter()
            write_header(writer, 'EMISSIONS', ['A'])
            write_time_span(writer, start_time)
            records, header = self.open(writer.getvalue())
            with self.assertRaises(FormatError) as cm:
                frames.read_hour(records, header)
            self.assertIn('start time', str(cm.exception))

    def test_unknown_kind(self):
        writer = UamWriter()
        write_header(writer, 'FOOBAR', ['A'])
        write_gridded_hour(writer, 0, gridded_values(0, ['A']), ['A'])
        records, header = self.open(writer.getvalue())
        position = self.stream.tell()
        with self.assertRaises(FormatError) as cm:
            frames.read_hour(records, header)
        self.assertIn('unrecognized file kind', str(cm.exception))
        self.assertEqual(self.stream.tell(), position)


class PointSourceHourTests(unittest.TestCase):

    species = ['SO2', 'NOX']

    def create_file(self, hours, n_points=3, names=None):
        writer = UamWriter()
        write_header(writer, 'PTSOURCE', self.species,
                     stacks=stack_parameters(n_points))
        for hour in hours:
            cells = [(ip, ip + 1, 2) for ip in range(n_points)]
            flow = [10. * hour + ip for ip in range(n_points)]
            plume_height = [200. + ip for ip in range(n_points)]
            write_point_source_hour(
                writer, hour, point_source_values(hour, n_points, self.species),
                cells, flow, plume_height, self.species, names=names)
        return writer.getvalue()

    def open(self, data):
        self.stream = BytesIO(data)
        records = RecordReader(self.stream, Format())
        return records, read_header(records)

    def test_read_hour(self):
        records, header = self.open(self.create_file([0, 1]))
        frames.read_hour(records, header)
        frame = frames.read_hour(records, header)
        self.assertEqual(frame.hour, 1)
        self.assertEqual(sorted(frame), sorted(self.species))
        expected = point_source_values(1, 3, self.species)
        for name in self.species:
            self.assertEqual(frame[name].dtype, numpy.float32)
            assert_array_equal(frame[name], expected[name])
        self.assertEqual(self.stream.read(), b'')

    def test_hourly_point_data(self):
        records, header = self.open(self.create_file([4]))
        frame = frames.read_hour(records, header)
        assert_array_equal(frame.cells, [[0, 1, 2], [1, 2, 2], [2, 3, 2]])
        assert_array_equal(frame.flow, [40., 41., 42.])
        assert_array_equal(frame.plume_height, [200., 201., 202.])

    def test_no_layers(self):
        records, header = self.open(self.create_file([0]))
        frame = frames.read_hour(records, header)
        self.assertRaises(ValueError, frame.layer, 'SO2', 0)

    def test_last_hour_without_trailing_padding(self):
        records, header = self.open(self.create_file([23]))
        frame = frames.read_hour(records, header)
        assert_array_equal(frame['NOX'],
                           point_source_values(23, 3, self.species)['NOX'])
        self.assertEqual(self.stream.read(), b'')

    def test_truncated_other_hour(self):
        data = self.create_file([10])
        records, header = self.open(data[:-8])
        self.assertRaises(ShortReadError, frames.read_hour, records, header)

    def test_zero_point_sources(self):
        records, header = self.open(self.create_file([0, 23], n_points=0))
        for hour in (0, 23):
            frame = frames.read_hour(records, header)
            self.assertEqual(frame.hour, hour)
            for name in self.species:
                self.assertEqual(len(frame[name]), 0)
            self.assertEqual(len(frame.flow), 0)
        self.assertEqual(self.stream.read(), b'')

    def test_species_name_mismatch(self):
        """Values are stored by position, with a warning"""

        records, header = self.open(
            self.create_file([0], names=['NOX', 'SO2']))
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter('always')
            frame = frames.read_hour(records, header)
        self.assertEqual(len(caught), 2)
        expected = point_source_values(0, 3, self.species)
        assert_array_equal(frame['SO2'], expected['SO2'])


if __name__ == '__main__':
    unittest.main()
