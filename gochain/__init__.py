"""Chained processing stages: queueing-network simulations, a prime sieve, Fibonacci chains and coverage gaps."""

__version__ = "0.1.0"