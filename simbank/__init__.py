"""
SimBank

A single-user banking simulation: account registration and login, cash
transactions, simulated asset purchases, loans, currency conversion and
interest, with the whole account registry persisted as one binary snapshot.
"""

__version__ = "2.0.0"
