"""
Command-line interface for the orthocds pipeline.
"""
