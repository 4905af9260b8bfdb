"""
To AI - A tool for dumping a project's text files into one AI-readable document.

This package walks a directory tree, prunes anything matched by the built-in
or user-supplied ignore list, and concatenates the remaining files (a header
line plus a fenced body per file) into a file, standard output, or the
system clipboard.
"""

__version__ = "0.1.0"
__author__ = "To AI Team"
