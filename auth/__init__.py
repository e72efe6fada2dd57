"""auth/ -- Authentication and authorization package for NoteKeeper.

Layer rule: auth/ imports stdlib, third-party libraries and core/ only.
It does NOT import from api/ or notes/.
api/ and notes/ import from auth/, not the other way around.
"""
