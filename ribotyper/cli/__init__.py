"""
Command-line interface for ribotyper.
"""
