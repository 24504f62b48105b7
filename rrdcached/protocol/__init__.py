"""Wire protocol for the rrdcached line-oriented command interface."""
