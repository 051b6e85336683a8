"""injectcheck domain layer.

Pure domain logic with no third-party dependencies.
"""
