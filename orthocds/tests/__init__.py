"""
Test suite for the orthocds pipeline
"""
