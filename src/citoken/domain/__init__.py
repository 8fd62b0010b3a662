"""
Domain layer: token model, configuration models, errors and the pure
consistency rules of the encrypted-file pattern.
"""
