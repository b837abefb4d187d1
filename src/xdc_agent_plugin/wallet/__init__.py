"""XDC wallet layer.

Chain registry, address normalization for the ``xdc``/``0x`` notations, and a
web3.py-backed client that simulates every contract write before submitting it.
"""
