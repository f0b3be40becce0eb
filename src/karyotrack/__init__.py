"""
lays out genome annotations along the chromosomes of an ideogram
"""
__version__ = '1.0.0'
