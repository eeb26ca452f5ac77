"""
Layout definitions sub-package for desa-profile.

Contains YAML files that define the cell-coordinate schema of the
village profile spreadsheet.  The loader module (layout_registry.py in
the parent package) reads these files at runtime.
"""
