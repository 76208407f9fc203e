"""Persistence of finished transfer traces."""

from .dumper import DumpFiles, DumpType, HeaderSanitizer, TraceDumper

__all__ = ['DumpFiles', 'DumpType', 'HeaderSanitizer', 'TraceDumper']
