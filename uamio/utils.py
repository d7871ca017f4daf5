"""Utilities

The module contains some commonly used functions.

"""
from progressbar import ProgressBar, ETA, Bar, Percentage


def flatten(indices, dims):
    """Get the index into a flat row-major array

    The last index varies fastest, so for gridded UAM data use
    ``flatten((k, j, i), (nz, ny, nx))``.

    :param indices: sequence of indices, one per dimension.
    :param dims: sequence with the size of each dimension.
    :return: the 1D index.

    """
    if len(indices) != len(dims):
        raise ValueError('Got %d indices for %d dimensions' %
                         (len(indices), len(dims)))

    index = 0
    for idx, dim in zip(indices, dims):
        index = index * dim + idx
    return index


def pbar(iterable, length=None, show=True, **kwargs):
    """Get a new progressbar with our default widgets

    :param iterable: the iterable over which will be looped.
    :param length: in case iterable is a generator, this should be its
                   expected length.
    :param show: boolean, if False simply return the iterable.
    :return: a new iterable which iterates over the same elements as
             the input, but shows a progressbar if possible.

    """
    if not show:
        return iterable

    if length is None:
        try:
            length = len(iterable)
        except TypeError:
            pass

    if length:
        pb = ProgressBar(max_value=length,
                         widgets=[Percentage(), Bar(), ETA()], **kwargs)
        return pb(iterable)
    else:
        return iterable
