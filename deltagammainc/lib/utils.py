import multiprocessing
import os

__author__ = 'Robbert Harms'
__date__ = "2026-10-19"
__license__ = "LGPL v3"
__maintainer__ = "Robbert Harms"
__email__ = "robbert@xkls.nl"


def split_in_batches(nmr_elements, max_batch_size):
    """Split the total number of elements into batches of the specified maximum size.

    Examples::
        split_in_batches(30, 8) -> [(0, 8), (8, 16), (16, 24), (24, 30)]

        for batch_start, batch_end in split_in_batches(2000, 100):
            array[batch_start:batch_end]

    Yields:
        tuple: the start and end point of the next batch
    """
    offset = 0
    elements_left = nmr_elements
    while elements_left > 0:
        batch_size = min(elements_left, max_batch_size)
        yield offset, offset + batch_size

        elements_left -= batch_size
        offset += batch_size


def multiprocess_mapping(func, iterable, processes=None):
    """Multiprocess mapping the given function on the given iterable.

    This only works in Linux and Mac systems since Windows has no forking capability. On Windows we fall back on
    single processing. Also, if we reach memory limits or are not allowed to start processes we fall back on single
    cpu processing.

    Args:
        func (func): the function to apply, this should be picklable
        iterable (iterable): the iterable with the elements we want to apply the function on
        processes (int): the number of worker processes, if None we use the number of cpu's

    Returns:
        list: the results of the function, in the order of the iterable
    """
    if os.name == 'nt':  # In Windows there is no fork.
        return list(map(func, iterable))

    items = list(iterable)
    try:
        p = multiprocessing.Pool(processes=processes)
    except OSError:
        return list(map(func, items))

    try:
        return_data = list(p.imap(func, items))
    finally:
        p.close()
        p.join()
    return return_data
