"""Javadoc writer.

An LLM-powered tool that finds Java classes, interfaces and methods
without Javadoc and adds generated documentation in place, preserving
the rest of each file byte for byte.
"""

__version__ = "0.1.0"
