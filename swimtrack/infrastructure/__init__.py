"""
Infrastructure layer - file formats and I/O.

- parsers: FIT, TCX and CSV readers, format detection, async ingestion

These modules translate between external file formats and our domain models.
"""
