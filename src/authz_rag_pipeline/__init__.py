"""
Permission-aware retrieval: substring retrieval filtered by SpiceDB
CheckPermission calls, one per candidate, failing fast on check errors.
"""

__version__ = "0.1.0"
