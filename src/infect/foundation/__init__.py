"""Foundation layer: errors, configuration and logging.

Pure-stdlib (plus PyYAML) utilities with no dependency on the reactor core.
"""
