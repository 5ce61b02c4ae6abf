import numpy as np

EPS = np.finfo(np.float64).eps

class DimensionError(ValueError):
    """
    Raised when a vector argument does not have the length declared by the
    model metadata.

    Parameters
    ----------
    expected : int
        Declared length.
    actual : int
        Length of the offending vector.
    name : str, optional
        Name of the offending argument.
    """
    def __init__(self, expected, actual, name=None):
        self.expected = expected
        self.actual = actual
        self.name = name
        if name is None:
            msg = 'Dimension mismatch: expected %d, got %d' % (expected, actual)
        else:
            msg = 'Dimension mismatch for %s: expected %d, got %d' % (
                name, expected, actual)
        super(DimensionError, self).__init__(msg)

class NotImplementedCapability(NotImplementedError):
    """
    Raised when a model is asked for a primitive it does not provide.

    Parameters
    ----------
    model : object
        Model that received the request.
    method : str
        Name of the unsupported primitive.
    """
    def __init__(self, model, method):
        self.model = model
        self.method = method
        super(NotImplementedCapability, self).__init__(
            '%s does not implement %s()' % (type(model).__name__, method))

def lencheck(n, *vectors, **kwargs):
    """
    Make sure every vector in ``vectors`` has length ``n``.

    Parameters
    ----------
    n : int
        Expected length.
    \\*vectors : array_like
        Vectors to check.
    names : tuple of str, optional
        Argument names used in the error message.
    """
    names = kwargs.get('names', None)
    for i, vec in enumerate(vectors):
        size = len(vec)
        if size != n:
            name = None if names is None else names[i]
            raise DimensionError(n, size, name)

def coo_prod(rows, cols, vals, v, out):
    """
    Compute the product of a matrix given in coordinate format with ``v``.

    Duplicate entries are summed. Indices are 0-based.

    Parameters
    ----------
    rows, cols : numpy.ndarray of int
        Row and column index of each entry.
    vals : numpy.ndarray
        Entry values.
    v : numpy.ndarray
        Multiplying vector.
    out : numpy.ndarray
        Location where the result is stored (overwritten).

    Returns
    -------
    numpy.ndarray
        ``out``
    """
    rows = np.asarray(rows)
    cols = np.asarray(cols)
    v = np.asarray(v)
    out[:] = 0.0
    np.add.at(out, rows, np.asarray(vals) * v[cols])
    return out

def coo_sym_prod(rows, cols, vals, v, out):
    """
    Compute the product of a symmetric matrix, given by one of its triangles in
    coordinate format, with ``v``. Diagonal entries are counted once.

    Parameters
    ----------
    rows, cols : numpy.ndarray of int
        Row and column index of each entry of the stored triangle.
    vals : numpy.ndarray
        Entry values.
    v : numpy.ndarray
        Multiplying vector.
    out : numpy.ndarray
        Location where the result is stored (overwritten).

    Returns
    -------
    numpy.ndarray
        ``out``
    """
    rows = np.asarray(rows)
    cols = np.asarray(cols)
    v = np.asarray(v)
    vals = np.asarray(vals)
    out[:] = 0.0
    np.add.at(out, rows, vals * v[cols])
    off = rows != cols
    np.add.at(out, cols[off], vals[off] * v[rows[off]])
    return out
