"""
Atom Feed Filter - Republish the keyword-matching entries of an Atom feed.

Fetches a remote Atom feed, keeps only the entries whose title or summary
contains a keyword, and serves the result as Atom and RSS over HTTP or
prints it once to standard output.
"""

__version__ = "1.0.0"
