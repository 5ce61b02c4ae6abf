import numbers
import sys

def make_optn_key_str(keys):
    return "".join(["['%s']"%k for k in keys])

def get_opt(optns, default, *keys):
    """
    Read a value from a nested options dictionary.

    Every key but the last one must lead to a sub-dictionary; a missing key,
    a missing or empty sub-dictionary or ``optns=None`` yield ``default``.

    Parameters
    ----------
    optns : dict or None
        Nested dictionary.
    default : Unknown
        Value returned when the key hierarchy is not present.
    \\*keys : string
        Path of keys leading to the value.

    Returns
    -------
    Unknown
    """
    val = optns
    for k in keys:
        if not isinstance(val, dict) or k not in val:
            return default
        val = val[k]
    if isinstance(val, dict) and not val:
        return default
    return val

def get_positive_opt(optns, default, *keys, **kwargs):
    """
    Read a strictly positive option.

    Parameters
    ----------
    optns : dict or None
        Nested dictionary.
    default : int or float
        Value returned when the option is not set.
    \\*keys : string
        Path of keys leading to the value.
    integer : bool, optional
        Also require an integer value.

    Raises
    ------
    BadNLPOption
        If the value is not a positive number (or integer).
    """
    val = get_opt(optns, default, *keys)
    kind = numbers.Integral if kwargs.get('integer', False) else numbers.Real
    valid = isinstance(val, kind) and not isinstance(val, bool)
    if not valid or not val > 0:
        raise BadNLPOption(optns, *keys)
    return val

def print_dict(obj, pre='', out_file=sys.stdout):
    """Write a nested dictionary to ``out_file``, one ``key : value`` per line."""
    for k, v in obj.items():
        if isinstance(v, dict):
            out_file.write('%s%s : {\n'%(pre, k))
            print_dict(v, pre='%s  '%pre, out_file=out_file)
            out_file.write('%s}\n'%pre)
        else:
            out_file.write('%s%s : %s\n'%(pre, k, v))

class BadNLPOption(Exception):
    """
    Raised for an invalid configuration option of a quasi-Newton operator,
    a quasi-Newton model or the derivative checker.

    Parameters
    ----------
    optns : dict
        Options dictionary containing the bad configuration.
    \\*keys : string
        Path of keys identifying the bad configuration.

    Attributes
    ----------
    val : Unknown
        Offending value (``None`` when it is missing).
    keys : tuple of str
        Path of keys.
    """
    def __init__(self, optns, *keys):
        self.val = get_opt(optns, None, *keys)
        self.keys = keys
        super(BadNLPOption, self).__init__(
            "Invalid option: optns%s = %s" % (make_optn_key_str(keys), self.val))
