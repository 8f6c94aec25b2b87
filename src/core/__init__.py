"""
Core domain models, fixed-point math, configuration and error taxonomy.

Building blocks of the order signing protocol that are independent of the
chain client (call wrappers, transport, key storage).
"""
