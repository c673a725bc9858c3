"""
adocbook: AsciiDoc Book Aggregator & PDF Exporter

A utility for collecting the chapters, code listings and images of a book
published as AsciiDoc sources in a remote repository, merging them into a
single document and printing it to a paginated PDF.
"""

__version__ = "1.0"
__author__ = "adocbook Project"
__description__ = "AsciiDoc Book Aggregator & PDF Exporter"
