"""
KSUID - K-Sortable Unique Identifier.

Used to tag games, snapshots and errors.
Format: 4 bytes timestamp + 16 bytes random = 27 char base62 string.
"""

import os
import struct
import time

# KSUID epoch: 2014-05-13
KSUID_EPOCH = 1400000000
KSUID_LENGTH = 27
BASE62 = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz"


def generate_ksuid(epoch_s=None):
    """Generate a 27-character sortable unique ID."""
    if epoch_s is None:
        epoch_s = time.time()
    raw = struct.pack(">I", int(epoch_s) - KSUID_EPOCH) + os.urandom(16)
    n = int.from_bytes(raw, byteorder="big")

    chars = []
    while n > 0:
        n, remainder = divmod(n, 62)
        chars.append(BASE62[remainder])

    return "".join(reversed(chars)).rjust(KSUID_LENGTH, "0")


def ksuid_time(ksuid):
    """Unix seconds encoded in a KSUID."""
    n = 0
    for char in ksuid:
        n = n * 62 + BASE62.index(char)
    return (n >> 128) + KSUID_EPOCH
